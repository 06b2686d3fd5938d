#!/usr/bin/env python3
"""
TMDB client tests with the tmdbv3api objects mocked out.
"""

import sys
from pathlib import Path
from unittest import mock

import pytest

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from cache import MetadataCache, make_cache_key
from config import Config, TMDBConfig
from model import MediaType
from tmdb import DEFAULT_POSTER_BASE_URL, NullMetadataLookup, TMDBClient, create_metadata_lookup_from_config


@pytest.fixture
def client():
    with mock.patch('tmdb.TMDb'), mock.patch('tmdb.TMDBMovie'), mock.patch('tmdb.TV'):
        yield TMDBClient(api_key="test-key", rate_limit=1000)


class TestSearch:

    def test_movie_result(self, client):
        client.movie.search.return_value = [
            {'id': 27205, 'title': 'Inception', 'release_date': '2010-07-15', 'poster_path': '/inception.jpg'}
        ]

        result = client.search("Inception 2010 1080p", MediaType.MOVIE, 2010)

        assert result.id == 27205
        assert result.name == "Inception"
        assert result.year == 2010
        assert result.poster_path == f"{DEFAULT_POSTER_BASE_URL}/inception.jpg"
        client.movie.search.assert_called_once_with("Inception")
        client.tv.search.assert_not_called()

    def test_tv_result_without_poster(self, client):
        client.tv.search.return_value = [
            {'id': 1, 'name': 'Mirzapur', 'first_air_date': '2018-11-16', 'poster_path': None}
        ]

        result = client.search("Mirzapur", MediaType.TVSHOW)

        assert result.name == "Mirzapur"
        assert result.year == 2018
        assert result.poster_path is None

    def test_year_prefers_matching_result(self, client):
        client.movie.search.return_value = [
            {'id': 1, 'title': 'Dune', 'release_date': '1984-12-14'},
            {'id': 2, 'title': 'Dune', 'release_date': '2021-09-15'},
        ]

        assert client.search("Dune", MediaType.MOVIE, 2021).id == 2

    def test_year_falls_back_to_first_result(self, client):
        client.movie.search.return_value = [
            {'id': 1, 'title': 'Dune', 'release_date': '1984-12-14'},
        ]

        assert client.search("Dune", MediaType.MOVIE, 2030).id == 1

    def test_results_and_misses_are_cached(self, client):
        client.movie.search.return_value = []

        assert client.search("Nothing Here", MediaType.MOVIE) is None
        assert client.search("nothing here", MediaType.MOVIE) is None

        assert client.movie.search.call_count == 1
        assert client.cache.lookup(make_cache_key("Nothing Here", MediaType.MOVIE)) == (True, None)

    def test_errors_are_not_cached(self, client):
        client.movie.search.side_effect = [
            ConnectionError("timeout"),
            [{'id': 5, 'title': 'Heat', 'release_date': '1995-12-15'}],
        ]

        assert client.search("Heat", MediaType.MOVIE) is None
        assert client.search("Heat", MediaType.MOVIE).id == 5
        assert client.movie.search.call_count == 2

    def test_short_query_is_skipped(self, client):
        assert client.search("x", MediaType.MOVIE) is None
        client.movie.search.assert_not_called()

    def test_unknown_kind_is_skipped(self, client):
        assert client.search("Heat", MediaType.UNKNOWN) is None
        client.movie.search.assert_not_called()
        client.tv.search.assert_not_called()

    def test_shared_cache(self):
        cache = MetadataCache()
        with mock.patch('tmdb.TMDb'), mock.patch('tmdb.TMDBMovie'), mock.patch('tmdb.TV'):
            first = TMDBClient(api_key="k", rate_limit=1000, cache=cache)
            second = TMDBClient(api_key="k", rate_limit=1000, cache=cache)
        first.movie.search.return_value = [{'id': 9, 'title': 'Alien', 'release_date': '1979-05-25'}]

        first.search("Alien", MediaType.MOVIE)

        assert second.search("Alien", MediaType.MOVIE).id == 9
        # Both clients share the patched Movie instance
        assert first.movie.search.call_count == 1


class TestFactory:

    def test_no_api_key_gives_null_lookup(self):
        lookup = create_metadata_lookup_from_config(Config())
        assert isinstance(lookup, NullMetadataLookup)
        assert lookup.search("Inception", MediaType.MOVIE, 2010) is None

    def test_api_key_gives_client(self):
        config = Config(tmdb=TMDBConfig(api_key="abc", language="de-DE", rate_limit=10))
        with mock.patch('tmdb.TMDb'), mock.patch('tmdb.TMDBMovie'), mock.patch('tmdb.TV'):
            client = create_metadata_lookup_from_config(config)
        assert isinstance(client, TMDBClient)
        assert client.language == "de-DE"
        assert client.rate_limit == 10
