#!/usr/bin/env python3
"""
Configuration loader for Media Organizer
Loads configuration from config.yaml file.
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field, asdict

from tmdb import DEFAULT_POSTER_BASE_URL


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    return default


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    return default


@dataclass
class LibraryConfig:
    """Source roots and destination bases"""
    source_paths: List[str] = field(default_factory=list)
    movies_destination: str = ""
    tvshows_destination: str = ""
    fuzzy_match_threshold: int = 80

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LibraryConfig':
        """Create LibraryConfig from dictionary"""
        source_paths = data.get('source_paths') or []
        if isinstance(source_paths, str):
            source_paths = [source_paths]
        if not isinstance(source_paths, list):
            raise ValueError("library.source_paths must be a list of directories")

        return cls(
            source_paths=[str(p) for p in source_paths if p],
            movies_destination=data.get('movies_destination') or '',
            tvshows_destination=data.get('tvshows_destination') or '',
            fuzzy_match_threshold=_as_int(data.get('fuzzy_match_threshold'), 80)
        )


@dataclass
class ProxyConfig:
    """Proxy configuration"""
    host: str
    port: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional['ProxyConfig']:
        """Create ProxyConfig from dictionary"""
        if not data:
            return None
        host = data.get('host')
        port = data.get('port')
        if not host or not port:
            return None
        return cls(host=host, port=port)


@dataclass
class TMDBConfig:
    """TMDB API configuration; an empty api_key disables metadata lookup"""
    api_key: str = ""
    language: str = "en-US"
    rate_limit: int = 40
    poster_base_url: str = DEFAULT_POSTER_BASE_URL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TMDBConfig':
        """Create TMDBConfig from dictionary"""
        # Get API key from config or environment
        api_key = data.get('api_key') or os.getenv('TMDB_API_KEY', '')

        return cls(
            api_key=api_key,
            language=data.get('language') or "en-US",
            rate_limit=_as_int(data.get('rate_limit'), 40),
            poster_base_url=data.get('poster_base_url') or DEFAULT_POSTER_BASE_URL
        )


@dataclass
class ScanConfig:
    batch_size: int = 50
    chunk_delay: float = 0.01

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScanConfig':
        return cls(
            batch_size=max(_as_int(data.get('batch_size'), 50), 1),
            chunk_delay=_as_float(data.get('chunk_delay'), 0.01)
        )


@dataclass
class OrganizeConfig:
    chunk_size: int = 10
    chunk_delay: float = 0.2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrganizeConfig':
        return cls(
            chunk_size=max(_as_int(data.get('chunk_size'), 10), 1),
            chunk_delay=_as_float(data.get('chunk_delay'), 0.2)
        )


@dataclass
class Config:
    """Complete application configuration"""
    library: LibraryConfig = field(default_factory=LibraryConfig)
    tmdb: TMDBConfig = field(default_factory=TMDBConfig)
    proxy: Optional[ProxyConfig] = None
    scan: ScanConfig = field(default_factory=ScanConfig)
    organize: OrganizeConfig = field(default_factory=OrganizeConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary"""
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping of sections")

        sections = {}
        for name in ('library', 'tmdb', 'scan', 'organize'):
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise ValueError(f"Configuration section '{name}' must be a mapping")
            sections[name] = section

        if not sections['library']:
            raise ValueError(
                "Library configuration section not found in config.yaml.\n"
                "Please add a 'library' section with source_paths and destinations."
            )

        # Load proxy configuration from root level
        proxy_data = data.get('proxy')
        if proxy_data is not None and not isinstance(proxy_data, dict):
            raise ValueError("Configuration section 'proxy' must be a mapping")
        proxy = ProxyConfig.from_dict(proxy_data) if proxy_data else None

        return cls(
            library=LibraryConfig.from_dict(sections['library']),
            tmdb=TMDBConfig.from_dict(sections['tmdb']),
            proxy=proxy,
            scan=ScanConfig.from_dict(sections['scan']),
            organize=OrganizeConfig.from_dict(sections['organize'])
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def destination_paths(self) -> List[str]:
        return [p for p in (self.library.movies_destination, self.library.tvshows_destination) if p]

    def validate_for_scan(self) -> None:
        """Raise ValueError unless a scan can run"""
        if not self.library.source_paths:
            raise ValueError("No source paths configured. Please configure settings first.")
        if not self.destination_paths():
            raise ValueError("No destination paths configured. Please configure settings first.")

    def validate_for_organize(self) -> None:
        """Raise ValueError unless an organize can run"""
        if not self.destination_paths():
            raise ValueError("No destination paths configured. Please configure settings first.")


def find_config_file(config_path: Optional[str] = None) -> Path:
    """Resolve the config file: explicit path, current directory, then script directory"""
    if config_path is not None:
        return Path(config_path)

    config_file = Path.cwd() / 'config.yaml'
    if not config_file.exists():
        config_file = Path(__file__).parent / 'config.yaml'
    return config_file


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load complete configuration from YAML file

    Args:
        config_path: Path to config.yaml file. If None, looks for config.yaml
                     in the current directory or script directory.

    Returns:
        Config object with all loaded sections

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        ValueError: If required configuration is missing
    """
    config_file = find_config_file(config_path)

    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_file}\n"
            f"Please create config.yaml with your library settings."
        )

    with open(config_file, 'r', encoding='utf-8') as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        raise ValueError("Configuration file is empty")

    return Config.from_dict(config_data)


def save_config(config: Config, config_path: str) -> None:
    """Write a Config back to YAML in the same layout load_config reads"""
    data = config.to_dict()
    if data.get('proxy') is None:
        data.pop('proxy', None)

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
