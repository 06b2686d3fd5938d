#!/usr/bin/env python3
"""
Media Library Organizer
Scans source folders for loosely named video files, catalogues them with a
Jellyfin-style destination and moves them on request:

    Movies/Title (Year)/Title (Year).ext
    TV Shows/Series (Year)/Season NN/Series - SxxExx.ext

Scans and organizes run as single-flight background jobs that report
progress; organize can also run synchronously, with a dry-run mode.
"""

import argparse
import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from config import Config, load_config
from destination import BasePaths, build_destination_path
from duplicates import find_duplicates
from jobs import JobRegistry
from logger import LOGGER_NAME, Colors, setup_logging
from model import (
    DuplicateGroup, ItemError, JobKind, MediaItem, MediaType, Movie, OrganizationLog,
    OrganizationStatus, OrganizeJob, OrganizeResult, ResolutionSource, ScanJob, TVSeries
)
from mover import FileMover
from pattern import classify, is_video_file
from resolver import (
    CONSENSUS_UNSET, CanonicalNameResolver, find_series_name_by_consensus, normalize_series_name
)
from scanner import find_video_files, group_by_directory, sibling_filenames
from storage import MediaStorage
from tmdb import create_metadata_lookup_from_config


CONSENSUS_BONUS = 15
METADATA_BONUS = 10


class MediaOrganizer:
    """Scan/organize pipeline over a media library"""

    def __init__(self, config: Config, storage: Optional[MediaStorage] = None, metadata=None,
                 mover: Optional[FileMover] = None, registry: Optional[JobRegistry] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            config: Application configuration
            storage: Item/library/job store (in-memory by default)
            metadata: Metadata lookup with search(query, kind, year); built
                      from config.tmdb when omitted
            mover: File mover (default FileMover)
            registry: Background job registry sharing the same storage
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.storage = storage if storage is not None else MediaStorage()
        self.metadata = metadata if metadata is not None else create_metadata_lookup_from_config(config, logger=self.logger)
        self.mover = mover or FileMover(self.logger)
        self.registry = registry or JobRegistry(self.storage, self.logger)
        self.resolver = CanonicalNameResolver(self.storage, self.metadata, self.logger)

    def apply_config(self, config: Config) -> None:
        """Switch to a new configuration; the metadata lookup is rebuilt from it"""
        self.config = config
        self.metadata = create_metadata_lookup_from_config(config, logger=self.logger)
        self.resolver.metadata = self.metadata

    @property
    def base_paths(self) -> BasePaths:
        library = self.config.library
        return BasePaths(
            movies=library.movies_destination or library.tvshows_destination,
            tvshows=library.tvshows_destination or library.movies_destination
        )

    def _log(self, action: str, success: bool, message: str, media_item_id: Optional[str] = None,
             from_path: Optional[str] = None, to_path: Optional[str] = None) -> None:
        self.storage.create_log(OrganizationLog(
            action=action,
            success=success,
            message=message,
            media_item_id=media_item_id,
            from_path=from_path,
            to_path=to_path
        ))

    # Scanning

    def start_scan(self) -> Tuple[ScanJob, bool]:
        """
        Start a background scan of the configured source paths

        Returns:
            (job, started); started is False when a scan was already running

        Raises:
            ValueError: If source or destination paths are not configured
        """
        self.config.validate_for_scan()
        return self.registry.start(JobKind.SCAN, self.run_scan)

    def run_scan(self, job_id: str) -> None:
        """Scan job body: enumerate, then catalogue files chunk by chunk"""
        batch_size = self.config.scan.batch_size
        chunk_delay = self.config.scan.chunk_delay

        all_files: List[str] = []
        for root in self.config.library.source_paths:
            if not os.path.isdir(root):
                self.logger.warning(f"Source path not found, skipping: {root}")
                continue
            self.storage.update_job(JobKind.SCAN, job_id, current_folder=root)
            files = find_video_files(root)
            self.logger.info(f"Found {len(files)} video files in {root}")
            all_files.extend(files)

        total = len(all_files)
        self.storage.update_job(JobKind.SCAN, job_id, total_files=total)

        directories = group_by_directory(all_files)
        consensus: Dict[str, Optional[str]] = {}
        processed = 0
        new_items = 0

        for start in range(0, total, batch_size):
            chunk = all_files[start:start + batch_size]
            for file_path in chunk:
                directory = os.path.dirname(file_path)
                siblings = [os.path.basename(p) for p in directories[directory]]
                if directory not in consensus:
                    consensus[directory] = find_series_name_by_consensus(siblings)

                if self.process_file(file_path, siblings, consensus[directory]) is not None:
                    new_items += 1
                processed += 1

            self.storage.update_job(
                JobKind.SCAN, job_id,
                processed_files=processed,
                new_items=new_items,
                current_folder=os.path.dirname(chunk[-1])
            )
            self.logger.info(f"Scan progress: {processed}/{total} files, {new_items} new")

            if start + batch_size < total and chunk_delay > 0:
                time.sleep(chunk_delay)

        self._log('scan', True, f"Scanned {total} files, {new_items} new items")

    def process_file(self, file_path: str, siblings: Optional[Sequence[str]] = None,
                     consensus_name: Any = CONSENSUS_UNSET) -> Optional[MediaItem]:
        """
        Classify, resolve and catalogue one file

        Args:
            file_path: Path of the video file
            siblings: Filenames in the same directory (read from disk if None)
            consensus_name: Precomputed sibling consensus for the directory;
                            None is trusted as "no consensus"

        Returns:
            The new MediaItem, or None when the path is already catalogued
        """
        if self.storage.get_item_by_path(file_path) is not None:
            self.logger.debug(f"Already catalogued: {file_path}")
            return None

        filename = os.path.basename(file_path)
        parsed = classify(filename)
        if siblings is None:
            siblings = sibling_filenames(file_path)

        if parsed.detected_type == MediaType.TVSHOW:
            if consensus_name is CONSENSUS_UNSET:
                consensus_name = self.resolver.candidate_name(parsed, siblings)
        else:
            consensus_name = None

        canonical = self.resolver.resolve(parsed, siblings, consensus_name)
        destination = build_destination_path(
            parsed, canonical.name, canonical.year, self.base_paths, canonical.folder_name
        )

        confidence = parsed.confidence
        if consensus_name:
            confidence += CONSENSUS_BONUS
        if canonical.source == ResolutionSource.METADATA:
            confidence += METADATA_BONUS

        status = OrganizationStatus.PENDING
        duplicate_of = None
        if os.path.exists(destination):
            if os.path.abspath(destination) == os.path.abspath(file_path):
                status = OrganizationStatus.ORGANIZED
            else:
                status = OrganizationStatus.DUPLICATE
                existing = self.storage.get_item_by_path(destination)
                duplicate_of = existing.id if existing else None

        try:
            file_size = os.path.getsize(file_path)
        except OSError:
            file_size = None

        item = self.storage.create_item(MediaItem(
            original_filename=filename,
            original_path=file_path,
            cleaned_name=parsed.cleaned_name,
            detected_type=parsed.detected_type,
            detected_name=canonical.name,
            extension=parsed.extension,
            year=canonical.year,
            season=parsed.season,
            episode=parsed.episode,
            confidence=min(confidence, 100),
            destination_path=destination,
            status=status,
            duplicate_of=duplicate_of,
            tmdb_id=canonical.tmdb_id,
            poster_path=canonical.poster_path,
            file_size=file_size
        ))
        self.logger.debug(
            f"{filename} -> {parsed.detected_type.value} '{canonical.name}' "
            f"({canonical.source.value}, {item.confidence}%) [{status.value}] {destination}"
        )

        if status == OrganizationStatus.ORGANIZED:
            self._update_library(item)

        return item

    # Organizing

    def start_organize(self, item_ids: Iterable[str]) -> Tuple[OrganizeJob, bool]:
        """
        Start a background organize job for the given media items

        Raises:
            ValueError: If no items are given or destinations are not configured
        """
        ids = list(item_ids)
        if not ids:
            raise ValueError("No media items selected")
        self.config.validate_for_organize()
        return self.registry.start(JobKind.ORGANIZE, self.run_organize, {'total_files': len(ids)}, ids)

    def run_organize(self, job_id: str, item_ids: List[str]) -> None:
        result = self._organize_batch(item_ids, dry_run=False, job_id=job_id)
        self.logger.info(f"Organize job finished: {result.success_count} moved, {result.failed_count} failed")

    def organize(self, item_ids: Iterable[str], dry_run: bool = False) -> OrganizeResult:
        """
        Organize media items in the caller's thread

        Args:
            item_ids: Media item ids
            dry_run: Only verify each move (source readable, destination writable)

        Returns:
            OrganizeResult with {id, from, to} per success and per-item errors
        """
        self.config.validate_for_organize()
        result = self._organize_batch(list(item_ids), dry_run=dry_run)
        mode = "Dry run" if dry_run else "Organize"
        self.logger.info(f"{mode} finished: {result.success_count} succeeded, {result.failed_count} failed")
        return result

    def _organize_batch(self, item_ids: List[str], dry_run: bool, job_id: Optional[str] = None) -> OrganizeResult:
        chunk_size = self.config.organize.chunk_size
        chunk_delay = self.config.organize.chunk_delay
        result = OrganizeResult(dry_run=dry_run)
        processed = 0

        for start in range(0, len(item_ids), chunk_size):
            for item_id in item_ids[start:start + chunk_size]:
                if job_id:
                    item = self.storage.get_item(item_id)
                    self.storage.update_job(
                        JobKind.ORGANIZE, job_id,
                        current_file=item.original_filename if item else item_id
                    )

                outcome, error = self._organize_item(item_id, dry_run)
                if error:
                    self.logger.warning(f"Failed to organize {item_id}: {error}")
                    result.errors.append(ItemError(id=item_id, error=error))
                else:
                    result.organized.append(outcome)
                processed += 1

                if job_id:
                    self.storage.update_job(
                        JobKind.ORGANIZE, job_id,
                        processed_files=processed,
                        success_count=result.success_count,
                        failed_count=result.failed_count,
                        errors=list(result.errors)
                    )

            self.logger.info(f"Organize progress: {processed}/{len(item_ids)} items")
            if start + chunk_size < len(item_ids) and chunk_delay > 0:
                time.sleep(chunk_delay)

        return result

    def _organize_item(self, item_id: str, dry_run: bool = False) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        item = self.storage.get_item(item_id)
        if item is None:
            return None, "Media item not found"
        if not item.original_path or not item.destination_path:
            return None, "Missing source or destination path"

        source = item.original_path
        destination = item.destination_path
        outcome = {'id': item.id, 'from': source, 'to': destination}

        # Already in place
        if item.status == OrganizationStatus.ORGANIZED and os.path.abspath(source) == os.path.abspath(destination):
            return outcome, None

        if dry_run:
            check = self.mover.verify(source, destination)
            return (outcome, None) if check.success else (None, check.error)

        move = self.mover.move(source, destination)
        if not move.success:
            self._log('organize', False, move.error, item.id, source, destination)
            return None, move.error

        updated = self.storage.update_item(
            item.id,
            status=OrganizationStatus.ORGANIZED,
            original_path=destination,
            duplicate_of=None
        )
        self._update_library(updated)
        self._cleanup_source(source)
        self._log('organize', True, f"Moved {item.original_filename}", item.id, source, destination)
        return outcome, None

    def _cleanup_source(self, source_path: str) -> None:
        roots = [os.path.abspath(root) for root in self.config.library.source_paths]
        source = os.path.abspath(source_path)
        # Only clean up inside a configured source root
        if not any(source.startswith(root.rstrip(os.sep) + os.sep) for root in roots):
            return
        removed = self.mover.cleanup_empty_folders(source, roots)
        for directory in removed:
            self.logger.debug(f"Removed empty folder: {directory}")

    def _update_library(self, item: MediaItem) -> None:
        """Create or update the Movie/TVSeries aggregate owning an organized item"""
        name = item.detected_name
        if not name:
            return

        if item.detected_type == MediaType.TVSHOW and item.season is not None:
            # Series folder is the grandparent of the episode file
            folder_name = Path(item.destination_path).parent.parent.name if item.destination_path else None
            series = self.storage.get_tv_series_by_name(name)
            if series is None:
                self.storage.create_tv_series(TVSeries(
                    name=name,
                    cleaned_name=normalize_series_name(name),
                    year=item.year,
                    folder_path=folder_name,
                    total_seasons=max(item.season, 1),
                    total_episodes=1,
                    tmdb_id=item.tmdb_id,
                    poster_path=item.poster_path
                ))
                self.logger.debug(f"Created series '{name}' ({folder_name})")
            else:
                self.storage.update_tv_series(
                    series.id,
                    total_seasons=max(series.total_seasons, item.season),
                    total_episodes=series.total_episodes + 1,
                    folder_path=series.folder_path or folder_name,
                    tmdb_id=series.tmdb_id or item.tmdb_id,
                    poster_path=series.poster_path or item.poster_path
                )

        elif item.detected_type == MediaType.MOVIE:
            movie = self.storage.get_movie_by_name(name)
            if movie is None:
                self.storage.create_movie(Movie(
                    name=name,
                    cleaned_name=normalize_series_name(name),
                    year=item.year,
                    file_path=item.destination_path,
                    tmdb_id=item.tmdb_id,
                    poster_path=item.poster_path
                ))
            else:
                self.storage.update_movie(
                    movie.id,
                    file_path=movie.file_path or item.destination_path,
                    tmdb_id=movie.tmdb_id or item.tmdb_id,
                    poster_path=movie.poster_path or item.poster_path
                )

    # Duplicates and maintenance

    def find_duplicates(self, threshold: Optional[int] = None) -> List[DuplicateGroup]:
        if threshold is None:
            threshold = self.config.library.fuzzy_match_threshold
        return find_duplicates(self.storage.all_items(), threshold)

    def mark_duplicates(self, threshold: Optional[int] = None) -> int:
        """
        Flag every non-original member of each duplicate group

        Returns:
            Number of duplicate groups found
        """
        groups = self.find_duplicates(threshold)
        marked = 0
        for group in groups:
            original_id = group.original.id
            for member in group.items:
                if member.is_original:
                    continue
                self.storage.update_item(member.id, status=OrganizationStatus.DUPLICATE, duplicate_of=original_id)
                marked += 1

        self.logger.info(f"Found {len(groups)} duplicate groups, marked {marked} items")
        self._log('duplicates', True, f"Found {len(groups)} duplicate groups, marked {marked} items")
        return len(groups)

    def refresh_status(self) -> Tuple[int, int]:
        """
        Reconcile pending items with the filesystem

        Items whose source is gone but whose destination exists become
        organized; items with neither are removed from the catalog.

        Returns:
            (updated, removed)
        """
        updated = 0
        removed = 0
        for item in self.storage.pending_items():
            if os.path.exists(item.original_path):
                continue
            if item.destination_path and os.path.exists(item.destination_path):
                refreshed = self.storage.update_item(
                    item.id, status=OrganizationStatus.ORGANIZED, original_path=item.destination_path
                )
                self._update_library(refreshed)
                updated += 1
            else:
                self.storage.delete_item(item.id)
                removed += 1

        if updated or removed:
            self.logger.info(f"Refreshed status: {updated} organized, {removed} orphans removed")
            self._log('refresh', True, f"{updated} items marked organized, {removed} orphans removed")
        return updated, removed

    def ingest_file(self, file_path: str, auto_organize: bool = False) -> Optional[MediaItem]:
        """
        Catalogue a single newly detected file (filesystem watcher hook)

        Args:
            file_path: Path of the new file
            auto_organize: Move the file immediately; it stays pending if the move fails

        Returns:
            The item in its resulting state, or None if skipped
        """
        if not is_video_file(os.path.basename(file_path)) or not os.path.isfile(file_path):
            return None

        item = self.process_file(file_path)
        if item is None:
            return None
        self.logger.info(f"New file detected: {item.original_filename}")

        if auto_organize and item.status == OrganizationStatus.PENDING:
            _, error = self._organize_item(item.id)
            if error:
                self.logger.warning(f"Auto-organize failed for {item.original_filename}: {error}")
            return self.storage.get_item(item.id)
        return item

    def preview(self) -> List[MediaItem]:
        """Pending items with their planned destinations"""
        return self.storage.pending_items()

    def stats(self) -> Dict[str, int]:
        items = self.storage.all_items()
        return {
            'total_movies': len(self.storage.all_movies()),
            'total_tv_series': len(self.storage.all_tv_series()),
            'total_episodes': sum(
                1 for i in items
                if i.detected_type == MediaType.TVSHOW and i.status == OrganizationStatus.ORGANIZED
            ),
            'pending_items': sum(1 for i in items if i.status == OrganizationStatus.PENDING),
            'duplicates': sum(1 for i in items if i.status == OrganizationStatus.DUPLICATE),
            'organized_items': sum(1 for i in items if i.status == OrganizationStatus.ORGANIZED),
        }

    def delete_item(self, item_id: str) -> bool:
        item = self.storage.get_item(item_id)
        if item is None or not self.storage.delete_item(item_id):
            return False
        self._log('delete', True, f"Removed {item.original_filename} from catalog", item_id)
        return True

    def bulk_delete_items(self, item_ids: Iterable[str]) -> int:
        deleted = self.storage.bulk_delete_items(list(item_ids))
        if deleted:
            self._log('delete', True, f"Removed {deleted} items from catalog")
        return deleted

    def delete_tv_series(self, series_id: str) -> bool:
        return self.storage.delete_tv_series(series_id)

    def delete_movie(self, movie_id: str) -> bool:
        return self.storage.delete_movie(movie_id)


def _print_items(items: List[MediaItem]) -> None:
    for item in items:
        print(f"  {item.original_filename}")
        print(f"    {Colors.GREEN}-> {item.destination_path}{Colors.RESET} "
              f"[{item.detected_type.value}, {item.confidence}%]")


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Media Library Organizer - Reorganize movies and TV shows following Jellyfin naming conventions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s scan
  %(prog)s organize --dry-run
  %(prog)s duplicates --threshold 85
        """
    )
    parser.add_argument('command', choices=['scan', 'organize', 'duplicates'],
                        help='scan: catalogue and preview, organize: scan then move, duplicates: list duplicate groups')
    parser.add_argument('--config', '-c', help='Path to config.yaml')
    parser.add_argument('--dry-run', action='store_true', help='Verify moves without performing them')
    parser.add_argument('--threshold', type=int, help='Similarity threshold for duplicate detection')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('--version', action='version', version='%(prog)s 1.0.0')

    args = parser.parse_args()
    logger = setup_logging(args.log_file, args.verbose)

    try:
        organizer = MediaOrganizer(load_config(args.config), logger=logger)

        job, _ = organizer.start_scan()
        organizer.registry.wait(job.id)
        job = organizer.registry.get(JobKind.SCAN, job.id)
        if job.error:
            print(f"\n{Colors.RED}Scan failed: {job.error}{Colors.RESET}")
            return 1
        print(f"\n{Colors.BOLD}Scanned {job.processed_files} files, {job.new_items} new{Colors.RESET}")

        if args.command == 'scan':
            _print_items(organizer.preview())
            return 0

        if args.command == 'duplicates':
            for group in organizer.find_duplicates(args.threshold):
                print(f"\n{Colors.BOLD}{group.base_name}{Colors.RESET}")
                for member in group.items:
                    marker = f"{Colors.GREEN}original{Colors.RESET}" if member.is_original else f"{member.similarity}%"
                    print(f"  {member.original_filename} ({marker})")
            return 0

        pending = organizer.preview()
        result = organizer.organize([item.id for item in pending], dry_run=args.dry_run)
        for error in result.errors:
            print(f"  {Colors.RED}✗ {error.id}: {error.error}{Colors.RESET}")
        print(f"\n{Colors.GREEN}{result.success_count} succeeded{Colors.RESET}, "
              f"{Colors.RED if result.failed_count else Colors.GREEN}{result.failed_count} failed{Colors.RESET}")
        if args.dry_run:
            print(f"{Colors.YELLOW}This was a DRY RUN - no files were actually moved.{Colors.RESET}")
        return 0 if not result.errors else 1

    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}Operation cancelled by user.{Colors.RESET}")
        return 1
    except (FileNotFoundError, ValueError) as e:
        print(f"\n{Colors.RED}Fatal error: {e}{Colors.RESET}")
        return 1


if __name__ == '__main__':
    exit(main())
