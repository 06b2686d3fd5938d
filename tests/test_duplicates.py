#!/usr/bin/env python3
"""
Fuzzy duplicate detection tests.
"""

import sys
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from duplicates import calculate_similarity, find_duplicates, normalize_for_comparison
from model import MediaItem


def make_items(filenames):
    return [MediaItem(original_filename=name, original_path=f"/src/{name}") for name in filenames]


class TestSimilarity:

    def test_normalization(self):
        assert normalize_for_comparison("Show.S01E01.720p.mkv") == "shows01e01"

    def test_scores(self):
        test_cases = [
            ("Show.S01E01.mkv", "Show S01E01 HDHub4u.mkv", 100),
            ("kitten", "sitting", 57),
            ("Show", "Show Extra", 44),
            ("a", "abcdefgh", 13),
            ("abc", "", 0),
        ]
        for first, second, expected in test_cases:
            assert calculate_similarity(first, second) == expected, (first, second)

    def test_identity_and_symmetry(self):
        samples = ["Inception.2010.mkv", "Mirzapur.S01E01.mkv", "x", "Some Movie (2012)"]
        for sample in samples:
            assert calculate_similarity(sample, sample) == 100
        for first in samples:
            for second in samples:
                assert calculate_similarity(first, second) == calculate_similarity(second, first)


class TestFindDuplicates:

    def test_tagged_copy_grouped(self):
        items = make_items(["Show.S01E01.mkv", "Show S01E01 HDHub4u.mkv"])
        groups = find_duplicates(items, threshold=80)

        assert len(groups) == 1
        group = groups[0]
        assert [m.id for m in group.items] == [items[0].id, items[1].id]
        assert sum(1 for m in group.items if m.is_original) == 1
        assert group.original.id == items[0].id
        assert group.base_name == "Show S01E01"

    def test_singletons_dropped(self):
        items = make_items(["Inception.2010.mkv", "Mirzapur.S01E01.mkv", "Heat.1995.mkv"])
        assert find_duplicates(items, threshold=80) == []

    def test_threshold(self):
        items = make_items(["kitten.mkv", "sitting.mkv"])
        assert find_duplicates(items, threshold=50) != []
        assert find_duplicates(items, threshold=60) == []

    def test_members_compared_with_founder(self):
        items = make_items(["Show.S01E01.mkv", "Dark.S01E01.mkv", "Show S01E01 720p.mkv", "Dark.S01E01.x264.mkv"])
        groups = find_duplicates(items, threshold=80)

        assert len(groups) == 2
        assert [m.original_filename for m in groups[0].items] == ["Show.S01E01.mkv", "Show S01E01 720p.mkv"]
        assert [m.original_filename for m in groups[1].items] == ["Dark.S01E01.mkv", "Dark.S01E01.x264.mkv"]
        assert groups[0].items[1].similarity == 100
