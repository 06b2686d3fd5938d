#!/usr/bin/env python3
"""
In-memory storage for Media Organizer
Holds media items, library aggregates (series/movies), scan/organize jobs and
the activity log. Every read-modify-write of a record happens under one lock.
"""

import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from model import (
    JobKind, JobStatus, MediaItem, Movie, OrganizationLog, OrganizationStatus,
    OrganizeJob, ScanJob, TVSeries
)
from resolver import normalize_series_name


Job = Union[ScanJob, OrganizeJob]

_JOB_TYPES = {
    JobKind.SCAN: ScanJob,
    JobKind.ORGANIZE: OrganizeJob,
}

# Allowed job status transitions; terminal states have none
_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.RUNNING, JobStatus.FAILED},
    JobStatus.RUNNING: {JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}


class InvalidJobTransition(ValueError):
    """Raised when a job status change is not allowed (e.g. out of a terminal state)"""


class MediaStorage:
    """Thread-safe in-memory store for items, library aggregates, jobs and logs"""

    def __init__(self):
        self._items: Dict[str, MediaItem] = {}
        self._series: Dict[str, TVSeries] = {}
        self._movies: Dict[str, Movie] = {}
        self._jobs: Dict[JobKind, Dict[str, Job]] = {kind: {} for kind in JobKind}
        self._logs: List[OrganizationLog] = []
        self._lock = threading.RLock()

    # Media items

    def create_item(self, item: MediaItem) -> MediaItem:
        with self._lock:
            self._items[item.id] = item
            return item

    def get_item(self, item_id: str) -> Optional[MediaItem]:
        with self._lock:
            return self._items.get(item_id)

    def get_item_by_path(self, path: str) -> Optional[MediaItem]:
        with self._lock:
            return next((i for i in self._items.values() if i.original_path == path), None)

    def get_item_by_filename(self, filename: str) -> Optional[MediaItem]:
        with self._lock:
            return next((i for i in self._items.values() if i.original_filename == filename), None)

    def all_items(self) -> List[MediaItem]:
        """All items in catalog (insertion) order"""
        with self._lock:
            return list(self._items.values())

    def pending_items(self) -> List[MediaItem]:
        with self._lock:
            return [i for i in self._items.values() if i.status == OrganizationStatus.PENDING]

    def update_item(self, item_id: str, **changes: Any) -> Optional[MediaItem]:
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                return None
            updated = replace(item, **changes)
            self._items[item_id] = updated
            return updated

    def delete_item(self, item_id: str) -> bool:
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def bulk_delete_items(self, item_ids: List[str]) -> int:
        with self._lock:
            return sum(1 for item_id in item_ids if self._items.pop(item_id, None) is not None)

    # Library aggregates

    def all_tv_series(self) -> List[TVSeries]:
        with self._lock:
            return list(self._series.values())

    def get_tv_series(self, series_id: str) -> Optional[TVSeries]:
        with self._lock:
            return self._series.get(series_id)

    def get_tv_series_by_name(self, name: str) -> Optional[TVSeries]:
        """Exact match after normalization (lowercase, alphanumerics only)"""
        key = normalize_series_name(name)
        with self._lock:
            return next((s for s in self._series.values() if normalize_series_name(s.name) == key), None)

    def create_tv_series(self, series: TVSeries) -> TVSeries:
        with self._lock:
            self._series[series.id] = series
            return series

    def update_tv_series(self, series_id: str, **changes: Any) -> Optional[TVSeries]:
        with self._lock:
            series = self._series.get(series_id)
            if series is None:
                return None
            updated = replace(series, **changes)
            self._series[series_id] = updated
            return updated

    def delete_tv_series(self, series_id: str) -> bool:
        with self._lock:
            return self._series.pop(series_id, None) is not None

    def all_movies(self) -> List[Movie]:
        with self._lock:
            return list(self._movies.values())

    def get_movie(self, movie_id: str) -> Optional[Movie]:
        with self._lock:
            return self._movies.get(movie_id)

    def get_movie_by_name(self, name: str) -> Optional[Movie]:
        key = normalize_series_name(name)
        with self._lock:
            return next((m for m in self._movies.values() if normalize_series_name(m.name) == key), None)

    def create_movie(self, movie: Movie) -> Movie:
        with self._lock:
            self._movies[movie.id] = movie
            return movie

    def update_movie(self, movie_id: str, **changes: Any) -> Optional[Movie]:
        with self._lock:
            movie = self._movies.get(movie_id)
            if movie is None:
                return None
            updated = replace(movie, **changes)
            self._movies[movie_id] = updated
            return updated

    def delete_movie(self, movie_id: str) -> bool:
        with self._lock:
            return self._movies.pop(movie_id, None) is not None

    # Jobs

    def create_job(self, kind: JobKind, **fields: Any) -> Job:
        kind = JobKind(kind)
        job = _JOB_TYPES[kind](**fields)
        with self._lock:
            self._jobs[kind][job.id] = job
            return job

    def get_job(self, kind: JobKind, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs[JobKind(kind)].get(job_id)

    def get_active_job(self, kind: JobKind) -> Optional[Job]:
        """The pending or running job of this kind, if any"""
        with self._lock:
            return next((j for j in self._jobs[JobKind(kind)].values() if j.status.is_active), None)

    def update_job(self, kind: JobKind, job_id: str, **changes: Any) -> Optional[Job]:
        """
        Update a job record

        Raises:
            InvalidJobTransition: If the status change is not allowed
        """
        with self._lock:
            jobs = self._jobs[JobKind(kind)]
            job = jobs.get(job_id)
            if job is None:
                return None

            if 'status' in changes:
                new_status = JobStatus(changes['status'])
                if new_status != job.status and new_status not in _TRANSITIONS[job.status]:
                    raise InvalidJobTransition(
                        f"Job {job_id} cannot move from {job.status.value} to {new_status.value}"
                    )
                if new_status.is_terminal and 'completed_at' not in changes:
                    changes['completed_at'] = datetime.now()
            elif job.status.is_terminal:
                raise InvalidJobTransition(f"Job {job_id} is already {job.status.value}")

            updated = replace(job, **changes)
            jobs[job_id] = updated
            return updated

    # Activity log

    def create_log(self, log: OrganizationLog) -> OrganizationLog:
        with self._lock:
            self._logs.append(log)
            return log

    def all_logs(self, limit: Optional[int] = None) -> List[OrganizationLog]:
        """Logs newest first"""
        with self._lock:
            logs = list(reversed(self._logs))
        return logs[:limit] if limit is not None else logs
