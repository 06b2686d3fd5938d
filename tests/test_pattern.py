#!/usr/bin/env python3
"""
Filename classifier tests.

Covers pattern.py:
- detect_tv_pattern: ordered TV rule table
- extract_year: year detection with digit boundaries
- clean_filename: general tag-stripping cleaner
- extract_series_tokens: series title token walk
- classify: full ParsedMedia output
- build_search_query: aggressive cleaner for metadata searches
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from model import MediaType, ParsedMedia
from pattern import (
    build_search_query,
    classify,
    clean_filename,
    detect_tv_pattern,
    extract_series_tokens,
    extract_year,
    get_extension,
    tokenize_filename,
)


class TestTVPatterns:
    """Tests for detect_tv_pattern"""

    def test_supported_patterns(self):
        test_cases = [
            ("Show.S01E05.mkv", (1, 5)),
            ("Show.s2e10.720p.mkv", (2, 10)),
            ("Show.S01E100.mkv", (1, 100)),
            ("Show.1x05.mkv", (1, 5)),
            ("Show Season 2 Episode 3.mkv", (2, 3)),
            ("Show S02 E03.mkv", (2, 3)),
            ("Show EP07.mkv", (1, 7)),
            ("Show E12.mkv", (1, 12)),
        ]
        for filename, expected in test_cases:
            assert detect_tv_pattern(filename) == expected, filename

    def test_first_rule_wins(self):
        # S01E02 is tried before the lone episode fallback
        assert detect_tv_pattern("Show.S03E02.E99.mkv") == (3, 2)

    def test_no_false_positives(self):
        test_cases = [
            "Se7en.1995.mkv",
            "Movie.1920x1080.mkv",
            "Inception.2010.1080p.BluRay.x264-YTS.mkv",
            "Movie.HDHub4u.mkv",
        ]
        for filename in test_cases:
            assert detect_tv_pattern(filename) is None, filename


class TestYearExtraction:

    def test_years(self):
        test_cases = [
            ("Inception.2010.1080p.mkv", 2010),
            ("The Matrix (1999).mkv", 1999),
            ("Old.Movie.1949.mkv", None),
            ("Future.2030.mkv", None),
            ("Movie.1080p.mkv", None),
            ("2001.A.Space.Odyssey.1968.mkv", 2001),
        ]
        for filename, expected in test_cases:
            assert extract_year(filename) == expected, filename

    def test_year_needs_digit_boundaries(self):
        assert extract_year("Clip.120105.mkv") is None


class TestCleanFilename:

    def test_cleaning(self):
        test_cases = [
            ("Movie.HDHub4u.mkv", "Movie"),
            ("[Group] Some.Movie.720p.mkv", "Some Movie"),
            ("Some Movie (2012) (Extended Cut).mkv", "Some Movie (2012)"),
            ("Show_Name_05_x264.mkv", "Show Name"),
            ("Show.S01E01.mkv", "Show S01E01"),
        ]
        for filename, expected in test_cases:
            assert clean_filename(filename) == expected, filename

    def test_idempotent(self):
        samples = [
            "Inception.2010.1080p.BluRay.x264-YTS.mkv",
            "Mirzapur.S01E01.720p.HDHub4u.mkv",
            "[Group] Some.Movie.(2012).(Director's Cut).mkv",
            "Show_Name_05_x264.mkv",
            "A 5 10 Episode 3.mp4",
            "Movie.HDHub4u.mkv",
        ]
        for sample in samples:
            once = clean_filename(sample)
            assert clean_filename(once) == once, sample


class TestSeriesTokens:

    def test_token_walk(self):
        test_cases = [
            ("Mirzapur.S01E01.720p.HDHub4u.mkv", ["Mirzapur"]),
            ("Mirzapur HDHub4u S01E02.mkv", ["Mirzapur"]),
            ("HDHub4u.Mirzapur.S01E03.mkv", ["Mirzapur"]),
            ("The.Office.US.S02E01.mkv", ["The", "Office", "US"]),
            ("3.Body.Problem.S01E01.mkv", ["3", "Body", "Problem"]),
            ("Show.Name.2019.S01E01.mkv", ["Show", "Name"]),
            ("Show.Name.05.720p.mkv", ["Show", "Name"]),
        ]
        for filename, expected in test_cases:
            assert extract_series_tokens(tokenize_filename(filename)) == expected, filename


class TestClassify:

    def test_movie_scenario(self):
        parsed = classify("Inception.2010.1080p.BluRay.x264-YTS.mkv")
        assert parsed.detected_type == MediaType.MOVIE
        assert parsed.detected_name == "Inception"
        assert parsed.year == 2010
        assert parsed.extension == ".mkv"
        assert parsed.season is None and parsed.episode is None
        assert parsed.confidence >= 80

    def test_tv_show(self):
        parsed = classify("Mirzapur.S01E01.720p.HDHub4u.mkv")
        assert parsed.detected_type == MediaType.TVSHOW
        assert parsed.detected_name == "Mirzapur"
        assert (parsed.season, parsed.episode) == (1, 1)
        assert parsed.confidence == 90

    def test_unknown(self):
        parsed = classify("Movie.HDHub4u.mkv")
        assert parsed.detected_type == MediaType.UNKNOWN
        assert parsed.detected_name == "Movie"
        assert parsed.year is None
        assert parsed.confidence == 60

    def test_tv_with_year_is_still_tv(self):
        parsed = classify("Show.Name.2019.S01E02.mkv")
        assert parsed.detected_type == MediaType.TVSHOW
        assert parsed.year == 2019
        assert parsed.detected_name == "Show Name"

    def test_tv_property(self):
        for season in (0, 1, 9, 42):
            for episode in (1, 12, 123):
                parsed = classify(f"Some.Show.S{season:02d}E{episode:03d}.mkv")
                assert parsed.detected_type == MediaType.TVSHOW
                assert (parsed.season, parsed.episode) == (season, episode)

    def test_movie_property(self):
        for year in (1950, 1987, 2000, 2029):
            parsed = classify(f"Some.Film.{year}.720p.mkv")
            assert parsed.detected_type == MediaType.MOVIE
            assert parsed.year == year

    def test_extension_lowercased(self):
        assert get_extension("Show.S01E01.MKV") == ".mkv"
        assert classify("Show.S01E01.MKV").extension == ".mkv"

    def test_confidence_clamped(self):
        assert ParsedMedia("a", "a", MediaType.MOVIE, "a", confidence=150).confidence == 100

    def test_season_and_episode_together(self):
        with pytest.raises(ValueError):
            ParsedMedia("a", "a", MediaType.TVSHOW, "a", season=1)


class TestSearchQuery:

    def test_queries(self):
        test_cases = [
            ("Inception 2010 1080p BluRay", "Inception"),
            ("Mirzapur Hindi 720p", "Mirzapur"),
            ("01 Mirzapur", "Mirzapur"),
            ("One Two Three Four Five Six Seven", "One Two Three Four Five Six"),
            ("Inception.2010.1080p.mkv", "Inception"),
        ]
        for name, expected in test_cases:
            assert build_search_query(name) == expected, name
