#!/usr/bin/env python3
"""
File mover tests: rename, cross-device copy/verify/delete, dry-run
verification and empty-folder cleanup.
"""

import errno
import os
import sys
from pathlib import Path
from unittest import mock

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from mover import FileMover


def cross_device(*args, **kwargs):
    raise OSError(errno.EXDEV, "Invalid cross-device link")


class TestMove:

    def test_same_filesystem_move(self, tmp_path, make_file):
        source = make_file(tmp_path / "in" / "a.mkv", b"hello world")
        destination = tmp_path / "out" / "A (2010)" / "A (2010).mkv"

        result = FileMover().move(str(source), str(destination))

        assert result.success, result.error
        assert not source.exists()
        assert destination.read_bytes() == b"hello world"

    def test_source_not_found(self, tmp_path):
        missing = tmp_path / "missing.mkv"
        result = FileMover().move(str(missing), str(tmp_path / "out.mkv"))
        assert not result.success
        assert result.error == f"Source not found: {missing}"

    def test_destination_already_exists(self, tmp_path, make_file):
        source = make_file(tmp_path / "a.mkv", b"new")
        destination = make_file(tmp_path / "b.mkv", b"old")

        result = FileMover().move(str(source), str(destination))

        assert not result.success
        assert result.error.startswith("Destination already exists")
        assert source.exists()
        assert destination.read_bytes() == b"old"

    def test_cross_device_copies_then_deletes(self, tmp_path, make_file):
        source = make_file(tmp_path / "a.mkv", b"hello world")
        destination = tmp_path / "other" / "a.mkv"

        with mock.patch("mover.os.rename", side_effect=cross_device):
            result = FileMover().move(str(source), str(destination))

        assert result.success, result.error
        assert not source.exists()
        assert destination.stat().st_size == len(b"hello world")

    def test_cross_device_size_mismatch_keeps_source(self, tmp_path, make_file):
        source = make_file(tmp_path / "a.mkv", b"hello world")
        destination = tmp_path / "other" / "a.mkv"

        def short_copy(src, dst):
            Path(dst).write_bytes(b"x")

        with mock.patch("mover.os.rename", side_effect=cross_device), \
                mock.patch("mover.shutil.copy2", side_effect=short_copy):
            result = FileMover().move(str(source), str(destination))

        assert not result.success
        assert result.error == "Copy verification failed: size mismatch (source: 11, dest: 1)"
        assert source.read_bytes() == b"hello world"
        assert not destination.exists()

    def test_cross_device_undeletable_source_keeps_one_copy(self, tmp_path, make_file):
        source = make_file(tmp_path / "a.mkv", b"hello world")
        destination = tmp_path / "other" / "a.mkv"
        real_unlink = Path.unlink

        def unlink(path, *args, **kwargs):
            if path == source:
                raise PermissionError(errno.EACCES, "Permission denied")
            return real_unlink(path, *args, **kwargs)

        mover = FileMover()
        with mock.patch("mover.os.rename", side_effect=cross_device), \
                mock.patch.object(Path, "unlink", unlink):
            result = mover.move(str(source), str(destination))

        assert not result.success
        assert result.error.startswith("Could not remove source after copy")
        assert source.read_bytes() == b"hello world"
        assert not destination.exists()

        # A retry is not blocked by a leftover copy
        retry = mover.move(str(source), str(destination))
        assert retry.success, retry.error
        assert destination.read_bytes() == b"hello world"

    def test_other_rename_errors_reported(self, tmp_path, make_file):
        source = make_file(tmp_path / "a.mkv")

        with mock.patch("mover.os.rename", side_effect=PermissionError(errno.EACCES, "Permission denied")):
            result = FileMover().move(str(source), str(tmp_path / "b.mkv"))

        assert not result.success
        assert "Permission denied" in result.error
        assert source.exists()


class TestVerify:

    def test_verify_creates_nothing(self, tmp_path, make_file):
        source = make_file(tmp_path / "a.mkv")
        destination = tmp_path / "lib" / "Movies" / "A" / "A.mkv"

        result = FileMover().verify(str(source), str(destination))

        assert result.success, result.error
        assert source.exists()
        assert not (tmp_path / "lib").exists()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.mkv"]

    def test_verify_missing_source(self, tmp_path):
        result = FileMover().verify(str(tmp_path / "nope.mkv"), str(tmp_path / "x.mkv"))
        assert not result.success
        assert result.error.startswith("Source not found")


class TestCleanup:

    def test_removes_empty_ancestors_up_to_root(self, tmp_path):
        root = tmp_path / "source"
        leaf = root / "Show" / "Season 1"
        leaf.mkdir(parents=True)
        moved_file = leaf / "ep1.mkv"

        removed = FileMover().cleanup_empty_folders(str(moved_file), [str(root)])

        assert removed == [str(leaf), str(root / "Show")]
        assert root.exists()
        assert not (root / "Show").exists()

    def test_stops_at_non_empty_folder(self, tmp_path, make_file):
        root = tmp_path / "source"
        make_file(root / "Show" / "notes.txt")
        leaf = root / "Show" / "Season 1"
        leaf.mkdir(parents=True)

        removed = FileMover().cleanup_empty_folders(str(leaf / "ep1.mkv"), [str(root)])

        assert removed == [str(leaf)]
        assert (root / "Show").exists()

    def test_list_empty_ancestors_does_not_remove(self, tmp_path):
        root = tmp_path / "source"
        leaf = root / "a" / "b"
        leaf.mkdir(parents=True)

        ancestors = FileMover().list_empty_ancestors(str(leaf / "f.mkv"), [str(root)])

        assert ancestors == [str(leaf), str(root / "a")]
        assert leaf.exists()
        assert os.path.isdir(root / "a")
