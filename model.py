#!/usr/bin/env python3
"""
Data models for Media Organizer
Defines the records produced by the classifier and persisted by the pipeline:
parsed filenames, catalogued media items, library aggregates and jobs.
"""

import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class MediaType(str, Enum):
    MOVIE = "movie"
    TVSHOW = "tvshow"
    UNKNOWN = "unknown"


class OrganizationStatus(str, Enum):
    PENDING = "pending"
    ORGANIZED = "organized"
    DUPLICATE = "duplicate"
    CONFLICT = "conflict"


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self in (JobStatus.PENDING, JobStatus.RUNNING)

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class JobKind(str, Enum):
    SCAN = "scan"
    ORGANIZE = "organize"


class ResolutionSource(str, Enum):
    """Which rule produced a canonical name"""
    METADATA = "metadata"
    CONSENSUS = "consensus"
    LIBRARY = "library"
    FALLBACK = "fallback"


def new_id() -> str:
    return str(uuid.uuid4())


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


class Record:
    """Mixin giving dataclass records a JSON-friendly dict form"""

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class ParsedMedia(Record):
    """Structured metadata inferred from a single filename"""
    original_filename: str
    cleaned_name: str
    detected_type: MediaType
    detected_name: str
    extension: str = ""
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None
    confidence: int = 0

    def __post_init__(self):
        self.detected_type = MediaType(self.detected_type)
        if (self.season is None) != (self.episode is None):
            raise ValueError("season and episode must both be set or both be None")
        self.confidence = max(0, min(int(self.confidence), 100))


@dataclass
class MediaItem(Record):
    """A catalogued video file"""
    original_filename: str
    original_path: str
    cleaned_name: str = ""
    detected_type: MediaType = MediaType.UNKNOWN
    detected_name: str = ""
    extension: str = ""
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None
    confidence: int = 0
    destination_path: Optional[str] = None
    status: OrganizationStatus = OrganizationStatus.PENDING
    duplicate_of: Optional[str] = None
    tmdb_id: Optional[int] = None
    poster_path: Optional[str] = None
    file_size: Optional[int] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.detected_type = MediaType(self.detected_type)
        self.status = OrganizationStatus(self.status)


@dataclass
class TVSeries(Record):
    """Library aggregate for a series; folder_path is the on-disk folder name"""
    name: str
    cleaned_name: str = ""
    year: Optional[int] = None
    folder_path: Optional[str] = None
    total_seasons: int = 1
    total_episodes: int = 0
    tmdb_id: Optional[int] = None
    poster_path: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class Movie(Record):
    """Library aggregate for a movie"""
    name: str
    cleaned_name: str = ""
    year: Optional[int] = None
    file_path: Optional[str] = None
    tmdb_id: Optional[int] = None
    poster_path: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class ItemError(Record):
    """Per-item failure reported by organize"""
    id: str
    error: str


@dataclass
class ScanJob(Record):
    status: JobStatus = JobStatus.PENDING
    total_files: int = 0
    processed_files: int = 0
    new_items: int = 0
    current_folder: Optional[str] = None
    error: Optional[str] = None
    completed_at: Optional[datetime] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    kind: JobKind = JobKind.SCAN

    def __post_init__(self):
        self.status = JobStatus(self.status)


@dataclass
class OrganizeJob(Record):
    status: JobStatus = JobStatus.PENDING
    total_files: int = 0
    processed_files: int = 0
    success_count: int = 0
    failed_count: int = 0
    current_file: Optional[str] = None
    errors: List[ItemError] = field(default_factory=list)
    error: Optional[str] = None
    completed_at: Optional[datetime] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    kind: JobKind = JobKind.ORGANIZE

    def __post_init__(self):
        self.status = JobStatus(self.status)


@dataclass
class DuplicateMember(Record):
    id: str
    original_filename: str
    cleaned_name: str
    similarity: int
    is_original: bool


@dataclass
class DuplicateGroup(Record):
    group_id: str
    base_name: str
    items: List[DuplicateMember] = field(default_factory=list)

    @property
    def original(self) -> DuplicateMember:
        return next(member for member in self.items if member.is_original)


@dataclass
class MetadataResult(Record):
    """A single external metadata match"""
    id: int
    name: str
    year: Optional[int] = None
    poster_path: Optional[str] = None


@dataclass
class CanonicalName(Record):
    """Authoritative name/year for a file, plus the folder to reuse if any"""
    name: str
    year: Optional[int]
    source: ResolutionSource
    folder_name: Optional[str] = None
    tmdb_id: Optional[int] = None
    poster_path: Optional[str] = None


@dataclass
class MoveResult(Record):
    success: bool
    error: Optional[str] = None


@dataclass
class OrganizeResult(Record):
    """Aggregated outcome of a synchronous organize call"""
    organized: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[ItemError] = field(default_factory=list)
    dry_run: bool = False

    @property
    def success_count(self) -> int:
        return len(self.organized)

    @property
    def failed_count(self) -> int:
        return len(self.errors)


@dataclass
class OrganizationLog(Record):
    """Activity history entry"""
    action: str
    success: bool = True
    message: str = ""
    media_item_id: Optional[str] = None
    from_path: Optional[str] = None
    to_path: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
