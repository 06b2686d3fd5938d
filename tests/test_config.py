#!/usr/bin/env python3
"""
Configuration loading tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config, LibraryConfig, ProxyConfig, load_config, save_config
from tmdb import DEFAULT_POSTER_BASE_URL


FULL_CONFIG = """
library:
  source_paths:
    - /media/downloads
    - /media/incoming
  movies_destination: /media/Movies
  tvshows_destination: /media/TV Shows
  fuzzy_match_threshold: 85
tmdb:
  api_key: file-key
  language: en-GB
  rate_limit: 20
proxy:
  host: http://proxy.local
  port: 3128
scan:
  batch_size: 25
organize:
  chunk_size: 5
  chunk_delay: 0
"""


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding='utf-8')
    return str(path)


class TestLoadConfig:

    def test_full_config(self, tmp_path):
        config = load_config(write(tmp_path, FULL_CONFIG))

        assert config.library.source_paths == ["/media/downloads", "/media/incoming"]
        assert config.library.tvshows_destination == "/media/TV Shows"
        assert config.library.fuzzy_match_threshold == 85
        assert config.tmdb.api_key == "file-key"
        assert config.tmdb.language == "en-GB"
        assert config.tmdb.rate_limit == 20
        assert config.proxy == ProxyConfig(host="http://proxy.local", port=3128)
        assert config.scan.batch_size == 25
        assert config.scan.chunk_delay == 0.01
        assert config.organize.chunk_size == 5
        assert config.organize.chunk_delay == 0.0

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv('TMDB_API_KEY', raising=False)
        config = load_config(write(tmp_path, "library:\n  source_paths: /downloads\n"))

        assert config.library.source_paths == ["/downloads"]
        assert config.library.fuzzy_match_threshold == 80
        assert config.tmdb.api_key == ""
        assert config.tmdb.poster_base_url == DEFAULT_POSTER_BASE_URL
        assert config.proxy is None
        assert (config.scan.batch_size, config.scan.chunk_delay) == (50, 0.01)
        assert (config.organize.chunk_size, config.organize.chunk_delay) == (10, 0.2)

    def test_api_key_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv('TMDB_API_KEY', 'env-key')
        config = load_config(write(tmp_path, "library:\n  source_paths: [/downloads]\n"))
        assert config.tmdb.api_key == "env-key"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        with pytest.raises(ValueError):
            load_config(write(tmp_path, ""))

    def test_missing_library_section(self, tmp_path):
        with pytest.raises(ValueError):
            load_config(write(tmp_path, "tmdb:\n  api_key: abc\n"))

    def test_malformed_section(self):
        with pytest.raises(ValueError):
            Config.from_dict({'library': ['not', 'a', 'mapping']})


class TestConfig:

    def test_save_then_load(self, tmp_path, monkeypatch):
        monkeypatch.delenv('TMDB_API_KEY', raising=False)
        original = load_config(write(tmp_path, FULL_CONFIG))
        path = str(tmp_path / "saved.yaml")

        save_config(original, path)

        assert load_config(path) == original

    def test_validation(self):
        with pytest.raises(ValueError):
            Config().validate_for_scan()
        with pytest.raises(ValueError):
            Config(library=LibraryConfig(source_paths=["/downloads"])).validate_for_scan()
        with pytest.raises(ValueError):
            Config().validate_for_organize()

        config = Config(library=LibraryConfig(source_paths=["/downloads"], movies_destination="/Movies"))
        config.validate_for_scan()
        config.validate_for_organize()
        assert config.destination_paths() == ["/Movies"]
