#!/usr/bin/env python3
"""
Filesystem enumeration for Media Organizer
Breadth-first walk of the source roots collecting video files.
"""

import logging
import os
from collections import deque
from typing import Dict, Iterable, List, Optional

from tags import VIDEO_EXTENSIONS


logger = logging.getLogger(__name__)


def find_video_files(root: str, extensions: Optional[Iterable[str]] = None) -> List[str]:
    """
    Collect video files under a directory, breadth-first

    Unreadable directories are skipped silently.

    Args:
        root: Directory to walk
        extensions: Allow-list of lowercase extensions (default: VIDEO_EXTENSIONS)

    Returns:
        Absolute-or-as-given file paths in discovery order
    """
    allowed = set(extensions) if extensions is not None else VIDEO_EXTENSIONS
    files = []
    queue = deque([root])

    while queue:
        current_dir = queue.popleft()
        try:
            with os.scandir(current_dir) as entries:
                for entry in sorted(entries, key=lambda e: e.name.lower()):
                    if entry.is_dir(follow_symlinks=False):
                        queue.append(entry.path)
                    elif entry.is_file() and os.path.splitext(entry.name)[1].lower() in allowed:
                        files.append(entry.path)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {current_dir}: {e}")
            continue

    return files


def group_by_directory(file_paths: Iterable[str]) -> Dict[str, List[str]]:
    """Group files by parent directory, preserving discovery order"""
    groups: Dict[str, List[str]] = {}
    for file_path in file_paths:
        groups.setdefault(os.path.dirname(file_path), []).append(file_path)
    return groups


def sibling_filenames(file_path: str, extensions: Optional[Iterable[str]] = None) -> List[str]:
    """Names of the video files sharing a file's directory (including itself)"""
    allowed = set(extensions) if extensions is not None else VIDEO_EXTENSIONS
    directory = os.path.dirname(file_path)
    try:
        names = sorted(
            name for name in os.listdir(directory)
            if os.path.splitext(name)[1].lower() in allowed
        )
    except OSError:
        return [os.path.basename(file_path)]
    if os.path.basename(file_path) not in names:
        names.append(os.path.basename(file_path))
    return names
