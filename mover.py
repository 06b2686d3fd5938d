#!/usr/bin/env python3
"""
Crash-safe file moves for Media Organizer
Same-filesystem moves are a single rename; cross-device moves copy, verify the
byte size against the source and only then delete the source.
"""

import errno
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from model import MoveResult


class FileMover:
    """Moves media files and cleans up emptied source folders"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def move(self, source_path: str, destination_path: str) -> MoveResult:
        """
        Move a file to its destination, creating parent folders

        Never raises for I/O problems; the error is returned in the result and
        the source is left in place unless the destination was verified.
        """
        source = Path(source_path)
        destination = Path(destination_path)

        try:
            if not source.is_file() or not os.access(source, os.R_OK):
                return MoveResult(success=False, error=f"Source not found: {source_path}")

            destination.parent.mkdir(parents=True, exist_ok=True)

            if destination.exists():
                return MoveResult(success=False, error=f"Destination already exists: {destination_path}")

            try:
                os.rename(source, destination)
            except OSError as e:
                if e.errno != errno.EXDEV:
                    raise
                self.logger.debug(f"Cross-device move, copying: {source_path} -> {destination_path}")
                error = self._copy_verify_delete(source, destination)
                if error:
                    return MoveResult(success=False, error=error)

            if not destination.exists() or not os.access(destination, os.R_OK):
                return MoveResult(success=False, error="Move failed: destination not accessible after move")

            return MoveResult(success=True)
        except OSError as e:
            self.logger.debug(f"Move failed {source_path} -> {destination_path}: {e}")
            return MoveResult(success=False, error=str(e))

    def _copy_verify_delete(self, source: Path, destination: Path) -> Optional[str]:
        source_size = source.stat().st_size
        try:
            shutil.copy2(source, destination)
        except OSError:
            if destination.exists():
                destination.unlink()
            raise

        try:
            dest_size = destination.stat().st_size
        except OSError:
            return "Copy verification failed: destination not accessible"

        if dest_size != source_size:
            try:
                destination.unlink()
            except OSError as e:
                self.logger.warning(f"Could not remove incomplete copy {destination}: {e}")
            return f"Copy verification failed: size mismatch (source: {source_size}, dest: {dest_size})"

        try:
            source.unlink()
        except OSError as e:
            # Keep a single copy on disk so the item can be retried
            try:
                destination.unlink()
            except OSError as cleanup_error:
                self.logger.warning(f"Could not remove copy {destination}: {cleanup_error}")
            return f"Could not remove source after copy: {e}"
        return None

    def verify(self, source_path: str, destination_path: str) -> MoveResult:
        """
        Pre-flight a move without performing it

        Checks the source is readable and that a scratch file can be written
        and deleted in the destination folder (or its nearest existing
        ancestor, so nothing is created on disk).
        """
        source = Path(source_path)
        if not source.is_file() or not os.access(source, os.R_OK):
            return MoveResult(success=False, error=f"Source not found: {source_path}")

        target_dir = Path(destination_path).parent
        while not target_dir.exists() and target_dir != target_dir.parent:
            target_dir = target_dir.parent

        try:
            with tempfile.NamedTemporaryFile(dir=target_dir, prefix='.write_test_'):
                pass
        except OSError as e:
            return MoveResult(success=False, error=f"Destination not writable: {e}")

        return MoveResult(success=True)

    @staticmethod
    def _is_boundary(directory: Path, boundaries: List[Path]) -> bool:
        return directory in boundaries or directory == directory.parent

    def list_empty_ancestors(self, file_path: str, root_boundaries: Iterable[str]) -> List[str]:
        """Ancestor folders of a moved file that would be removed, innermost first"""
        boundaries = [Path(os.path.abspath(root)) for root in root_boundaries]
        ancestors = []
        current = Path(os.path.abspath(os.path.dirname(file_path)))
        pending_child = None

        while not self._is_boundary(current, boundaries):
            try:
                contents = [p for p in current.iterdir() if p != pending_child]
            except OSError:
                break
            if contents:
                break
            ancestors.append(str(current))
            pending_child = current
            current = current.parent

        return ancestors

    def remove_if_empty(self, directory: str) -> bool:
        try:
            os.rmdir(directory)
            return True
        except OSError:
            return False

    def cleanup_empty_folders(self, file_path: str, root_boundaries: Iterable[str]) -> List[str]:
        """
        Remove now-empty ancestors of a moved file, stopping at the first
        non-empty folder or a source root. Best effort: failures stop the walk.

        Returns:
            Folders that were removed
        """
        removed = []
        for directory in self.list_empty_ancestors(file_path, root_boundaries):
            if not self.remove_if_empty(directory):
                break
            removed.append(directory)
        if removed:
            self.logger.debug(f"Removed {len(removed)} empty folder(s) above {file_path}")
        return removed
