"""Job registry for background scan/organize tasks"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from model import JobKind, JobStatus
from storage import Job, MediaStorage


class JobRegistry:
    """
    Runs scan/organize jobs on background threads, one active job per kind

    The registry owns job lifecycle transitions (pending -> running ->
    completed/failed); the job target only reports progress.
    """

    def __init__(self, storage: MediaStorage, logger: Optional[logging.Logger] = None):
        self.storage = storage
        self.logger = logger or logging.getLogger(__name__)
        self._threads: Dict[str, threading.Thread] = {}
        self._lock = threading.Lock()

    def start(self, kind: JobKind, target: Callable[..., Any],
              initial: Optional[Dict[str, Any]] = None, *args: Any) -> Tuple[Job, bool]:
        """
        Start a job unless one of the same kind is already active

        Args:
            kind: JobKind.SCAN or JobKind.ORGANIZE
            target: Callable invoked as target(job_id, *args) on a worker thread
            initial: Initial job fields (e.g. total_files)

        Returns:
            (job, started); when a job is already active it is returned with
            started=False and nothing new is created
        """
        kind = JobKind(kind)
        with self._lock:
            active = self.storage.get_active_job(kind)
            if active is not None:
                self.logger.info(f"{kind.value.capitalize()} job {active.id} already in progress")
                return active, False

            job = self.storage.create_job(kind, **(initial or {}))
            thread = threading.Thread(
                target=self._run,
                args=(kind, job.id, target, args),
                name=f"{kind.value}-{job.id[:8]}",
                daemon=True
            )
            self._threads[job.id] = thread

        self.logger.info(f"Started {kind.value} job {job.id}")
        thread.start()
        return job, True

    def _run(self, kind: JobKind, job_id: str, target: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        try:
            self.storage.update_job(kind, job_id, status=JobStatus.RUNNING)
            target(job_id, *args)
            self.storage.update_job(kind, job_id, status=JobStatus.COMPLETED)
            self.logger.info(f"{kind.value.capitalize()} job {job_id} completed")
        except Exception as e:
            self.logger.error(f"{kind.value.capitalize()} job {job_id} failed: {e}")
            job = self.storage.get_job(kind, job_id)
            if job is not None and not job.status.is_terminal:
                self.storage.update_job(kind, job_id, status=JobStatus.FAILED, error=str(e))
        finally:
            with self._lock:
                self._threads.pop(job_id, None)

    def get(self, kind: JobKind, job_id: str) -> Optional[Job]:
        return self.storage.get_job(kind, job_id)

    def active(self, kind: JobKind) -> Optional[Job]:
        return self.storage.get_active_job(kind)

    def wait(self, job_id: str, timeout: Optional[float] = None) -> bool:
        """
        Block until a job's worker thread finishes

        Returns:
            True if the worker finished (or was never started here), False on timeout
        """
        with self._lock:
            thread = self._threads.get(job_id)
        if thread is None:
            return True
        thread.join(timeout)
        finished = not thread.is_alive()
        if finished:
            with self._lock:
                self._threads.pop(job_id, None)
        return finished
