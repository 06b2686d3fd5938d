"""Pydantic schemas for API request/response models"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


# Configuration schemas
class LibraryConfigSchema(BaseModel):
    source_paths: List[str] = Field(default_factory=list, description="Folders to scan")
    movies_destination: str = Field(default="", description="Movies library root")
    tvshows_destination: str = Field(default="", description="TV Shows library root")
    fuzzy_match_threshold: int = Field(default=80, ge=0, le=100, description="Duplicate similarity threshold")


class TMDBConfigSchema(BaseModel):
    api_key: str = Field(default="", description="TMDB API key (empty disables lookups)")
    language: str = Field(default="en-US")
    rate_limit: int = Field(default=40, description="Rate limit per second")
    poster_base_url: str = Field(default="https://image.tmdb.org/t/p/w342")


class ProxyConfigSchema(BaseModel):
    host: str = Field(default="http://127.0.0.1", description="Proxy host")
    port: int = Field(default=8080, description="Proxy port")


class ScanConfigSchema(BaseModel):
    batch_size: int = Field(default=50, ge=1)
    chunk_delay: float = Field(default=0.01, ge=0)


class OrganizeConfigSchema(BaseModel):
    chunk_size: int = Field(default=10, ge=1)
    chunk_delay: float = Field(default=0.2, ge=0)


class ConfigSchema(BaseModel):
    library: LibraryConfigSchema
    tmdb: TMDBConfigSchema = Field(default_factory=TMDBConfigSchema)
    proxy: Optional[ProxyConfigSchema] = None
    scan: ScanConfigSchema = Field(default_factory=ScanConfigSchema)
    organize: OrganizeConfigSchema = Field(default_factory=OrganizeConfigSchema)


# Job schemas
class JobStartResponse(BaseModel):
    job_id: str
    status: str
    message: str


class ItemErrorSchema(BaseModel):
    id: str
    error: str


class ScanJobSchema(BaseModel):
    id: str
    status: str
    total_files: int
    processed_files: int
    new_items: int
    current_folder: Optional[str] = None
    error: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None


class OrganizeJobSchema(BaseModel):
    id: str
    status: str
    total_files: int
    processed_files: int
    success_count: int
    failed_count: int
    current_file: Optional[str] = None
    errors: List[ItemErrorSchema] = Field(default_factory=list)
    error: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None


# Organization schemas
class OrganizeJobRequest(BaseModel):
    ids: List[str] = Field(..., description="Media item ids to organize")


class OrganizeRequest(BaseModel):
    ids: List[str] = Field(..., description="Media item ids to organize")
    dry_run: bool = Field(default=False, description="Verify moves without performing them")


class OrganizeResultSchema(BaseModel):
    organized: List[Dict[str, Any]]
    errors: List[ItemErrorSchema]
    dry_run: bool
    success_count: int
    failed_count: int


# Library schemas
class MediaItemSchema(BaseModel):
    id: str
    original_filename: str
    original_path: str
    cleaned_name: str
    detected_type: str
    detected_name: str
    extension: str
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None
    confidence: int
    destination_path: Optional[str] = None
    status: str
    duplicate_of: Optional[str] = None
    tmdb_id: Optional[int] = None
    poster_path: Optional[str] = None
    file_size: Optional[int] = None
    created_at: Optional[str] = None


class TVSeriesSchema(BaseModel):
    id: str
    name: str
    cleaned_name: str
    year: Optional[int] = None
    folder_path: Optional[str] = None
    total_seasons: int
    total_episodes: int
    tmdb_id: Optional[int] = None
    poster_path: Optional[str] = None


class MovieSchema(BaseModel):
    id: str
    name: str
    cleaned_name: str
    year: Optional[int] = None
    file_path: Optional[str] = None
    tmdb_id: Optional[int] = None
    poster_path: Optional[str] = None


class OrganizationLogSchema(BaseModel):
    id: str
    action: str
    success: bool
    message: str
    media_item_id: Optional[str] = None
    from_path: Optional[str] = None
    to_path: Optional[str] = None
    created_at: Optional[str] = None


class StatsSchema(BaseModel):
    total_movies: int
    total_tv_series: int
    total_episodes: int
    pending_items: int
    duplicates: int
    organized_items: int


class RefreshStatusResponse(BaseModel):
    updated: int
    removed: int


class BulkDeleteRequest(BaseModel):
    ids: List[str]


# Duplicate schemas
class DuplicateMemberSchema(BaseModel):
    id: str
    original_filename: str
    cleaned_name: str
    similarity: int
    is_original: bool


class DuplicateGroupSchema(BaseModel):
    group_id: str
    base_name: str
    items: List[DuplicateMemberSchema]


class DuplicateScanResponse(BaseModel):
    groups: int
    message: str
