#!/usr/bin/env python3
"""
Destination path builder tests.
"""

import os
import sys
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from destination import BasePaths, build_destination_path, generate_filename, sanitize_segment, strip_year_suffix
from model import MediaType, ParsedMedia
from pattern import classify


BASE = BasePaths(movies=os.path.join("lib", "Movies"), tvshows=os.path.join("lib", "TV Shows"))


class TestBuildDestinationPath:

    def test_movie(self):
        parsed = classify("Inception.2010.1080p.BluRay.x264-YTS.mkv")
        path = build_destination_path(parsed, "Inception", 2010, BASE)
        assert path == os.path.join("lib", "Movies", "Inception (2010)", "Inception (2010).mkv")

    def test_movie_without_year(self):
        parsed = ParsedMedia("Heat.mkv", "Heat", MediaType.MOVIE, "Heat", extension=".mkv")
        path = build_destination_path(parsed, "heat", None, BASE)
        assert path == os.path.join("lib", "Movies", "Heat", "Heat.mkv")

    def test_tv_episode(self):
        parsed = classify("Mirzapur.S01E01.720p.HDHub4u.mkv")
        path = build_destination_path(parsed, "Mirzapur", 2018, BASE)
        assert path == os.path.join("lib", "TV Shows", "Mirzapur (2018)", "Season 01", "Mirzapur - S01E01.mkv")

    def test_tv_reuses_series_folder(self):
        parsed = classify("mirzapur.s02e10.mp4")
        path = build_destination_path(parsed, "Mirzapur Returns", None, BASE, series_folder="Mirzapur (2018)")
        assert path == os.path.join("lib", "TV Shows", "Mirzapur (2018)", "Season 02", "Mirzapur - S02E10.mp4")

    def test_unknown_goes_to_unsorted(self):
        parsed = classify("Movie.HDHub4u.mkv")
        path = build_destination_path(parsed, "Movie", None, BASE)
        assert path == os.path.join("lib", "Movies", "Unsorted", "Movie.mkv")

    def test_invalid_characters_removed(self):
        parsed = ParsedMedia("x.mkv", "x", MediaType.MOVIE, "x", extension=".mkv")
        path = build_destination_path(parsed, "Who: Why?", 2001, BASE)
        assert path == os.path.join("lib", "Movies", "Who Why (2001)", "Who Why (2001).mkv")

    def test_deterministic(self):
        parsed = classify("Some.Show.S03E04.mkv")
        paths = {build_destination_path(parsed, "Some Show", 2020, BASE) for _ in range(5)}
        assert len(paths) == 1


class TestHelpers:

    def test_generate_filename(self):
        assert generate_filename("Show", 1, 2, ".mkv") == "Show - S01E02.mkv"
        assert generate_filename("Show", 10, 123, ".mp4") == "Show - S10E123.mp4"

    def test_strip_year_suffix(self):
        test_cases = [
            ("Show (2019)", "Show"),
            ("Show", "Show"),
            ("1917 (2019)", "1917"),
        ]
        for folder_name, expected in test_cases:
            assert strip_year_suffix(folder_name) == expected

    def test_sanitize_segment(self):
        assert sanitize_segment('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"
        assert sanitize_segment("  spaced   out ") == "spaced out"
