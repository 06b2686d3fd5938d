#!/usr/bin/env python3
"""
Canonical name resolution for Media Organizer
Decides the authoritative series/movie name for a parsed file: external
metadata first, then sibling consensus, then an existing library entry, then
the classifier's own guess.
"""

import logging
import math
import re
from typing import Any, Iterable, List, Optional, Sequence, Union

from model import CanonicalName, MediaType, Movie, ParsedMedia, ResolutionSource, TVSeries
from pattern import capitalize_token, extract_series_tokens, title_case, tokenize_filename


CONSENSUS_MIN_OVERLAP = 0.7
CONSENSUS_MIN_LENGTH = 3

# Marks a consensus that has not been computed yet; None means "computed, no consensus"
CONSENSUS_UNSET = object()


def longest_common_prefix(token_arrays: List[List[str]]) -> List[str]:
    """Case-insensitive longest common token prefix, keeping the first array's casing"""
    if not token_arrays:
        return []
    if len(token_arrays) == 1:
        return list(token_arrays[0])

    first = token_arrays[0]
    result = []
    for i, token in enumerate(first):
        lower = token.lower()
        if all(i < len(tokens) and tokens[i].lower() == lower for tokens in token_arrays[1:]):
            result.append(token)
        else:
            break
    return result


def _starts_with(tokens: List[str], prefix: List[str]) -> bool:
    if len(tokens) < len(prefix):
        return False
    return all(a.lower() == b.lower() for a, b in zip(tokens, prefix))


def find_series_name_by_consensus(filenames: Sequence[str]) -> Optional[str]:
    """Series name shared by sibling files in one directory, or None.

    The prefix must contain a non-numeric token, be shared positionally by at
    least 70% of the siblings and render to 3+ characters. Numeric tokens
    inside the prefix are kept verbatim ("3 Body Problem").
    """
    if len(filenames) < 2:
        return None

    token_arrays = [extract_series_tokens(tokenize_filename(f)) for f in filenames]
    token_arrays = [tokens for tokens in token_arrays if tokens]
    if len(token_arrays) < 2:
        return None

    common_prefix = longest_common_prefix(token_arrays)
    if not common_prefix:
        return None

    if not any(not token.isdigit() for token in common_prefix):
        return None

    # Files with no title tokens at all still count as siblings that disagree
    min_overlap = math.ceil(len(filenames) * CONSENSUS_MIN_OVERLAP)
    match_count = sum(1 for tokens in token_arrays if _starts_with(tokens, common_prefix))
    if match_count < min_overlap:
        return None

    series_name = ' '.join(
        token if token.isdigit() else capitalize_token(token) for token in common_prefix
    )
    if len(series_name) < CONSENSUS_MIN_LENGTH:
        return None

    return series_name


def normalize_series_name(name: str) -> str:
    return re.sub(r'[^a-z0-9]', '', name.lower())


def names_match(candidate: str, existing: str) -> bool:
    """Equality or containment in either direction after normalization"""
    a = normalize_series_name(candidate)
    b = normalize_series_name(existing)
    if not a or not b:
        return False
    return a == b or a in b or b in a


def find_library_match(name: str, entries: Iterable[Union[TVSeries, Movie]]) -> Optional[Union[TVSeries, Movie]]:
    for entry in entries:
        if names_match(name, entry.name):
            return entry
    return None


def series_folder_name(series: TVSeries) -> str:
    """Stored folder name of a series, or the one its name/year would render to"""
    if series.folder_path:
        return series.folder_path
    year_str = f" ({series.year})" if series.year else ""
    return f"{series.name}{year_str}"


class CanonicalNameResolver:
    """Resolves canonical names using metadata, siblings and library state

    Args:
        library: object exposing ``all_tv_series()`` and ``all_movies()``
        metadata: object exposing ``search(query, kind, year)``
        logger: Optional logger instance
    """

    def __init__(self, library, metadata, logger: Optional[logging.Logger] = None):
        self.library = library
        self.metadata = metadata
        self.logger = logger or logging.getLogger(__name__)

    def candidate_name(self, parsed: ParsedMedia, sibling_filenames: Sequence[str] = ()) -> Optional[str]:
        """Sibling consensus name for TV files, None when it does not apply"""
        if parsed.detected_type != MediaType.TVSHOW:
            return None
        return find_series_name_by_consensus(sibling_filenames)

    def resolve(self, parsed: ParsedMedia, sibling_filenames: Sequence[str] = (),
                consensus_name: Any = CONSENSUS_UNSET) -> CanonicalName:
        """
        Resolve the canonical name for one parsed file

        Args:
            parsed: Classifier output for the file
            sibling_filenames: Filenames sharing the file's parent directory
            consensus_name: Precomputed consensus for the directory (None
                            when the directory has none); computed from
                            sibling_filenames when omitted

        Returns:
            CanonicalName (never raises for unresolvable input)
        """
        if consensus_name is CONSENSUS_UNSET:
            consensus_name = self.candidate_name(parsed, sibling_filenames)
        elif parsed.detected_type != MediaType.TVSHOW:
            consensus_name = None

        guess = consensus_name or parsed.detected_name

        if parsed.detected_type != MediaType.UNKNOWN:
            result = self.metadata.search(guess, parsed.detected_type, parsed.year)
            if result:
                self.logger.debug(f"Metadata match for '{guess}': {result.name} ({result.year})")
                folder_name = None
                if parsed.detected_type == MediaType.TVSHOW:
                    # An established series folder is never renamed
                    existing = next(
                        (s for s in self.library.all_tv_series()
                         if normalize_series_name(s.name) == normalize_series_name(result.name)),
                        None
                    )
                    if existing:
                        folder_name = series_folder_name(existing)
                return CanonicalName(
                    name=result.name,
                    year=result.year or parsed.year,
                    source=ResolutionSource.METADATA,
                    folder_name=folder_name,
                    tmdb_id=result.id,
                    poster_path=result.poster_path
                )

        if consensus_name:
            source = ResolutionSource.CONSENSUS
        else:
            source = ResolutionSource.FALLBACK

        if parsed.detected_type == MediaType.TVSHOW:
            series = find_library_match(guess, self.library.all_tv_series())
            if series:
                self.logger.debug(f"Reusing series folder '{series_folder_name(series)}' for '{guess}'")
                return CanonicalName(
                    name=series.name,
                    year=series.year,
                    source=ResolutionSource.LIBRARY,
                    folder_name=series_folder_name(series),
                    tmdb_id=series.tmdb_id,
                    poster_path=series.poster_path
                )
        elif parsed.detected_type == MediaType.MOVIE:
            # A differing year is a sequel or remake, not the same film
            candidates = [
                m for m in self.library.all_movies()
                if parsed.year is None or m.year is None or m.year == parsed.year
            ]
            movie = find_library_match(guess, candidates)
            if movie:
                return CanonicalName(
                    name=movie.name,
                    year=movie.year or parsed.year,
                    source=ResolutionSource.LIBRARY,
                    tmdb_id=movie.tmdb_id,
                    poster_path=movie.poster_path
                )

        return CanonicalName(
            name=title_case(guess),
            year=parsed.year,
            source=source
        )
