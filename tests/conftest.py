"""Shared fixtures: a throwaway library layout and an organizer wired to it"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config, LibraryConfig, OrganizeConfig, ScanConfig
from organizer import MediaOrganizer
from tmdb import NullMetadataLookup


@pytest.fixture
def library_dirs(tmp_path):
    """source/, Movies/ and TV Shows/ under a temp directory"""
    dirs = {
        'source': tmp_path / 'source',
        'movies': tmp_path / 'Movies',
        'tvshows': tmp_path / 'TV Shows',
    }
    dirs['source'].mkdir()
    return dirs


@pytest.fixture
def config(library_dirs):
    return Config(
        library=LibraryConfig(
            source_paths=[str(library_dirs['source'])],
            movies_destination=str(library_dirs['movies']),
            tvshows_destination=str(library_dirs['tvshows'])
        ),
        scan=ScanConfig(batch_size=2, chunk_delay=0),
        organize=OrganizeConfig(chunk_size=2, chunk_delay=0)
    )


@pytest.fixture
def organizer(config):
    return MediaOrganizer(config, metadata=NullMetadataLookup())


@pytest.fixture
def make_file():
    """Create a file (and its parent folders) with some bytes in it"""
    def _make(path: Path, content: bytes = b'video data') -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _make
