#!/usr/bin/env python3
"""
Destination path builder for Media Organizer
Renders a parsed file and its canonical name into a Jellyfin-style path:

    Movies/Title (Year)/Title (Year).ext
    TV Shows/Series (Year)/Season NN/Series - SxxExx.ext
    Movies/Unsorted/cleaned name.ext
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from model import MediaType, ParsedMedia
from pattern import strip_extension, title_case


UNSORTED_FOLDER = "Unsorted"

# Characters that cannot appear in a path segment
INVALID_SEGMENT_CHARS = re.compile(r'[<>:"/\\|?*]')


@dataclass(frozen=True)
class BasePaths:
    movies: str
    tvshows: str


def sanitize_segment(segment: str) -> str:
    segment = INVALID_SEGMENT_CHARS.sub('', segment)
    return re.sub(r'\s+', ' ', segment).strip()


def strip_year_suffix(folder_name: str) -> str:
    """'Show (2019)' -> 'Show'"""
    return re.sub(r'\s*\(\d{4}\)$', '', folder_name)


def generate_filename(series_name: str, season: int, episode: int, extension: str) -> str:
    return f"{series_name} - S{season:02d}E{episode:02d}{extension}"


def build_destination_path(parsed: ParsedMedia, canonical_name: str, canonical_year: Optional[int],
                           base_paths: BasePaths, series_folder: Optional[str] = None) -> str:
    """
    Build the destination path for a file

    Args:
        parsed: Classifier output (type, season, episode, extension)
        canonical_name: Resolved name for the movie/series
        canonical_year: Resolved year, None to omit the year segment
        base_paths: Movies and TV Shows roots
        series_folder: Existing on-disk series folder to reuse verbatim

    Returns:
        Destination path as a string; unresolvable input lands in Unsorted
    """
    extension = parsed.extension
    formatted_name = sanitize_segment(title_case(canonical_name or ""))
    year_str = f" ({canonical_year})" if canonical_year else ""

    if parsed.detected_type == MediaType.MOVIE and formatted_name:
        folder_name = f"{formatted_name}{year_str}"
        return str(Path(base_paths.movies) / folder_name / f"{folder_name}{extension}")

    if (parsed.detected_type == MediaType.TVSHOW and parsed.season is not None
            and parsed.episode is not None and (formatted_name or series_folder)):
        folder_name = series_folder or f"{formatted_name}{year_str}"
        season_folder = f"Season {parsed.season:02d}"
        file_name = generate_filename(strip_year_suffix(folder_name), parsed.season, parsed.episode, extension)
        return str(Path(base_paths.tvshows) / folder_name / season_folder / file_name)

    unsorted_name = sanitize_segment(parsed.cleaned_name) or sanitize_segment(strip_extension(parsed.original_filename))
    return str(Path(base_paths.movies) / UNSORTED_FOLDER / f"{unsorted_name}{extension}")
