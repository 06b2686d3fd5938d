#!/usr/bin/env python3
"""
TMDB API Client for movie and TV show lookups
Implements the metadata lookup used by the canonical name resolver: one search
per (kind, query, year), first result wins, cached for the process lifetime.
"""

import logging
import threading
import time
from typing import Any, Dict, List, Optional

import requests
from tmdbv3api import TMDb, Movie as TMDBMovie, TV

from cache import MetadataCache, make_cache_key
from model import MediaType, MetadataResult
from pattern import build_search_query


DEFAULT_POSTER_BASE_URL = "https://image.tmdb.org/t/p/w342"
MIN_QUERY_LENGTH = 2

# Result field names differ between movie and TV search results
_FIELDS = {
    MediaType.MOVIE: {'name': 'title', 'date': 'release_date'},
    MediaType.TVSHOW: {'name': 'name', 'date': 'first_air_date'},
}


class NullMetadataLookup:
    """Metadata lookup used when no TMDB API key is configured"""

    def search(self, query: str, kind: MediaType, year: Optional[int] = None) -> Optional[MetadataResult]:
        return None


class TMDBClient:
    """Client for searching movies and TV shows on TMDB"""

    def __init__(
        self,
        api_key: str,
        language: str = "en-US",
        proxy_host: Optional[str] = None,
        proxy_port: Optional[int] = None,
        rate_limit: int = 40,
        poster_base_url: str = DEFAULT_POSTER_BASE_URL,
        cache: Optional[MetadataCache] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize TMDB client

        Args:
            api_key: TMDB API key
            language: Language for search results (default: en-US)
            proxy_host: Proxy host with protocol (e.g., "http://proxy.example.com")
            proxy_port: Proxy port
            rate_limit: Maximum number of requests allowed per second (default: 40)
            poster_base_url: Prefix joined with the poster path of a result
            cache: Shared result cache (a private one is created if omitted)
            logger: Optional logger instance
        """
        self.api_key = api_key
        self.language = language
        self.rate_limit = max(int(rate_limit), 1)
        self.min_request_interval = 1.0 / self.rate_limit
        self.last_request_time = 0.0
        self.poster_base_url = poster_base_url.rstrip('/')
        self.cache = cache if cache is not None else MetadataCache()
        self.logger = logger or logging.getLogger(__name__)
        self._rate_lock = threading.Lock()

        self.tmdb = TMDb()
        self.tmdb.api_key = self.api_key
        self.tmdb.language = self.language

        if proxy_host and proxy_port:
            proxy_url = f"{proxy_host.rstrip('/')}:{proxy_port}"
            session = requests.Session()
            session.proxies.update({
                'http': proxy_url,
                'https': proxy_url,
            })
            # Avoids 403 responses from some reverse proxies
            session.headers.update({'X-Forwarded-Host': 'api.themoviedb.org'})
            self.tmdb.session = session
            self.logger.debug(f"Proxy configured: {proxy_url}")

        self.movie = TMDBMovie()
        self.tv = TV()

    def _wait_for_rate_limit(self):
        """
        Enforce rate limiting by waiting if necessary before making a request.
        Ensures we don't exceed rate_limit requests per second.
        """
        with self._rate_lock:
            time_since_last_request = time.time() - self.last_request_time
            if time_since_last_request < self.min_request_interval:
                wait_time = self.min_request_interval - time_since_last_request
                self.logger.debug(f"Rate limiting: waiting {wait_time:.3f} seconds before next request")
                time.sleep(wait_time)
            self.last_request_time = time.time()

    def _extract_year_from_date(self, date_string: Optional[str]) -> Optional[int]:
        if not date_string:
            return None
        try:
            return int(date_string[:4])
        except (ValueError, IndexError):
            return None

    def _raw_search(self, query: str, kind: MediaType) -> List[Dict[str, Any]]:
        self._wait_for_rate_limit()
        if kind == MediaType.MOVIE:
            results = self.movie.search(query)
        else:
            results = self.tv.search(query)
        return list(results) if results else []

    def _parse_result(self, result: Dict[str, Any], kind: MediaType) -> MetadataResult:
        fields = _FIELDS[kind]
        poster_path = result.get('poster_path')
        return MetadataResult(
            id=result.get('id', 0),
            name=result.get(fields['name']) or '',
            year=self._extract_year_from_date(result.get(fields['date'])),
            poster_path=f"{self.poster_base_url}{poster_path}" if poster_path else None
        )

    def search(self, query: str, kind: MediaType, year: Optional[int] = None) -> Optional[MetadataResult]:
        """
        Search TMDB for a movie or TV show

        Args:
            query: Title guess; reduced to a clean search query first
            kind: MediaType.MOVIE or MediaType.TVSHOW
            year: Optional year used to prefer matching results

        Returns:
            MetadataResult for the best match, or None
        """
        kind = MediaType(kind)
        if kind not in _FIELDS:
            return None

        search_query = build_search_query(query or '')
        if len(search_query) < MIN_QUERY_LENGTH:
            return None

        key = make_cache_key(search_query, kind, year)
        hit, cached = self.cache.lookup(key)
        if hit:
            return cached

        self.logger.debug(f"Searching TMDB ({kind.value}): {search_query}" + (f" (year: {year})" if year else ""))
        try:
            raw_results = self._raw_search(search_query, kind)
        except Exception as e:
            # Not cached, a later call may succeed
            self.logger.warning(f"Error searching TMDB for '{search_query}': {e}")
            return None

        candidates = raw_results
        if year and raw_results:
            date_field = _FIELDS[kind]['date']
            year_matches = [
                r for r in raw_results
                if r.get(date_field) and str(r[date_field]).startswith(str(year))
            ]
            # Fall back to the unfiltered results when nothing matches the year
            candidates = year_matches or raw_results

        result = None
        if candidates:
            try:
                result = self._parse_result(candidates[0], kind)
            except (AttributeError, KeyError, TypeError) as e:
                self.logger.warning(f"Failed to parse TMDB result for '{search_query}': {e}")
                return None
            self.logger.debug(f"TMDB match for '{search_query}': {result.name} ({result.year})")
        else:
            self.logger.debug(f"No TMDB results for: {search_query}")

        self.cache.put(key, result)
        return result


def create_metadata_lookup_from_config(config: Any, cache: Optional[MetadataCache] = None,
                                       logger: Optional[logging.Logger] = None):
    """
    Create the metadata lookup for a Config

    Args:
        config: Config instance (with tmdb and proxy at root level)
        cache: Optional shared cache
        logger: Optional logger instance

    Returns:
        TMDBClient when an API key is configured, NullMetadataLookup otherwise
    """
    tmdb_config = config.tmdb
    if not tmdb_config.api_key:
        return NullMetadataLookup()

    proxy_host = None
    proxy_port = None
    if config.proxy:
        proxy_host = config.proxy.host
        proxy_port = config.proxy.port

    return TMDBClient(
        api_key=tmdb_config.api_key,
        language=tmdb_config.language,
        proxy_host=proxy_host,
        proxy_port=proxy_port,
        rate_limit=tmdb_config.rate_limit,
        poster_base_url=tmdb_config.poster_base_url,
        cache=cache,
        logger=logger
    )
