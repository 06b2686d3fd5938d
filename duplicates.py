#!/usr/bin/env python3
"""
Fuzzy duplicate detection for Media Organizer
Greedy founder-based clustering of catalogued files by normalized filename
similarity. Group membership depends on catalog order: each item is compared
only with the founding member of each existing group.
"""

import math
import re
import uuid
from typing import Iterable, List

from rapidfuzz.distance import Levenshtein

from model import DuplicateGroup, DuplicateMember, MediaItem
from pattern import clean_filename


DEFAULT_THRESHOLD = 80


def normalize_for_comparison(name: str) -> str:
    return re.sub(r'[^a-z0-9]', '', clean_filename(name).lower())


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_similarity(str1: str, str2: str) -> int:
    """
    Similarity score between two filenames (0-100)

    Exact normalized match scores 100, containment scores the length ratio,
    anything else scores by Levenshtein distance relative to the longer name.
    """
    s1 = normalize_for_comparison(str1)
    s2 = normalize_for_comparison(str2)

    if s1 == s2:
        return 100
    if not s1 or not s2:
        return 0

    min_len = min(len(s1), len(s2))
    max_len = max(len(s1), len(s2))

    if s1 in s2 or s2 in s1:
        return _round_half_up(min_len / max_len * 100)

    distance = Levenshtein.distance(s1, s2)
    return _round_half_up((max_len - distance) / max_len * 100)


def find_duplicates(items: Iterable[MediaItem], threshold: int = DEFAULT_THRESHOLD) -> List[DuplicateGroup]:
    """
    Cluster items into duplicate groups

    Args:
        items: Catalogued items in catalog order
        threshold: Minimum similarity to join a group

    Returns:
        Groups with at least two members; the founder is flagged is_original
    """
    groups: List[List[DuplicateMember]] = []

    for item in items:
        cleaned_name = clean_filename(item.original_filename)

        for members in groups:
            similarity = calculate_similarity(item.original_filename, members[0].original_filename)
            if similarity >= threshold:
                members.append(DuplicateMember(
                    id=item.id,
                    original_filename=item.original_filename,
                    cleaned_name=cleaned_name,
                    similarity=similarity,
                    is_original=False
                ))
                break
        else:
            groups.append([DuplicateMember(
                id=item.id,
                original_filename=item.original_filename,
                cleaned_name=cleaned_name,
                similarity=100,
                is_original=True
            )])

    return [
        DuplicateGroup(group_id=str(uuid.uuid4()), base_name=members[0].cleaned_name, items=members)
        for members in groups
        if len(members) > 1
    ]
