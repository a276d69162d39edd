"""
Unit tests for directory scanning.
"""

import os
from dataclasses import replace
from pathlib import Path

import pytest

from orderly.file_access.local_accessor import FileSystemAccessor, scan


class TestFileSystemAccessor:
    """Test FileSystemAccessor functionality."""

    @pytest.fixture
    def tree(self, tmp_path):
        root = tmp_path / "tree"
        (root / "photos").mkdir(parents=True)
        (root / "node_modules" / "pkg").mkdir(parents=True)
        (root / ".git").mkdir()
        (root / ".cache").mkdir()

        (root / "Holiday Photo.JPG").write_bytes(b"12345")
        (root / "notes.txt").write_text("notes")
        (root / "data.bin").write_bytes(b"\x00")
        (root / "photos" / "cat.png").write_bytes(b"png")
        (root / "node_modules" / "pkg" / "index.txt").write_text("skip")
        (root / ".git" / "HEAD.txt").write_text("skip")
        (root / ".cache" / "thumb.png").write_bytes(b"skip")
        (root / ".hidden.txt").write_text("skip")
        return root

    def test_initialization_requires_directory(self, tmp_path, organizer_config):
        with pytest.raises(ValueError, match="does not exist"):
            FileSystemAccessor(str(tmp_path / "missing"), organizer_config)

        a_file = tmp_path / "file.txt"
        a_file.write_text("x")
        with pytest.raises(ValueError, match="not a directory"):
            FileSystemAccessor(str(a_file), organizer_config)

    def test_scan_directory(self, tree, organizer_config):
        files = scan(str(tree), organizer_config)
        names = sorted(f.filename for f in files)

        assert names == ["Holiday Photo.JPG", "cat.png", "data.bin", "notes.txt"]

    def test_discovered_file_fields(self, tree, organizer_config):
        files = {f.filename: f for f in scan(str(tree), organizer_config)}

        photo = files["Holiday Photo.JPG"]
        assert photo.original_path == os.path.join(str(tree), "Holiday Photo.JPG")
        assert photo.extension == ".jpg"
        assert photo.size == 5
        assert photo.category == "images"
        assert photo.target_folder == "images"

        unknown = files["data.bin"]
        assert unknown.category is None
        assert unknown.target_folder is None

    def test_include_hidden(self, tree, organizer_config):
        config = replace(organizer_config, include_hidden=True)
        names = sorted(f.filename for f in scan(str(tree), config))

        assert ".hidden.txt" in names
        assert "thumb.png" in names
        # Still excluded by pattern
        assert "HEAD.txt" not in names
        assert "index.txt" not in names

    def test_file_pattern_exclusion(self, tree, organizer_config):
        config = replace(organizer_config, exclude_patterns=("*.bin", "photos/**"))
        names = sorted(f.filename for f in scan(str(tree), config))

        assert "data.bin" not in names
        assert "cat.png" not in names
        assert "index.txt" in names

    def test_is_excluded_prunes_directory_itself(self, tree, organizer_config):
        accessor = FileSystemAccessor(str(tree), organizer_config)

        assert accessor.is_excluded("node_modules", is_directory=True)
        assert accessor.is_excluded("node_modules/pkg/index.txt")
        assert not accessor.is_excluded("node_modules")
        assert not accessor.is_excluded("notes.txt")

    def test_double_star_prefix_matches_root_level(self, tmp_path, organizer_config):
        root = tmp_path / "project"
        (root / "node_modules" / "pkg").mkdir(parents=True)
        (root / "sub").mkdir()
        (root / "node_modules" / "pkg" / "index.js").write_text("js")
        (root / "debug.log").write_text("log")
        (root / "sub" / "trace.log").write_text("log")
        (root / "keep.txt").write_text("keep")
        config = replace(
            organizer_config, exclude_patterns=("**/node_modules/**", "**/*.log")
        )

        names = sorted(f.filename for f in scan(str(root), config))

        assert names == ["keep.txt"]

    def test_double_star_prefix_prunes_nested_directories(self, tree, organizer_config):
        (tree / "photos" / "node_modules").mkdir()
        (tree / "photos" / "node_modules" / "dep.txt").write_text("dep")
        config = replace(organizer_config, exclude_patterns=("**/node_modules/**",))
        accessor = FileSystemAccessor(str(tree), config)

        assert accessor.is_excluded("node_modules", is_directory=True)
        assert accessor.is_excluded("photos/node_modules", is_directory=True)
        assert "dep.txt" not in [f.filename for f in accessor.scan_directory()]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_skips_non_regular_entries(self, tree, organizer_config):
        os.symlink(tree / "photos", tree / "linked_photos")
        names = [f.filename for f in scan(str(tree), organizer_config)]

        assert names.count("cat.png") == 1

    def test_unreadable_entry_is_fatal(self, tree, organizer_config, mocker):
        mocker.patch(
            "orderly.file_access.local_accessor.stat_file",
            side_effect=PermissionError(13, "Permission denied"),
        )
        with pytest.raises(PermissionError):
            scan(str(tree), organizer_config)

    def test_get_directory_stats(self, tree, organizer_config):
        stats = FileSystemAccessor(str(tree), organizer_config).get_directory_stats()

        assert stats["total_files"] == 4
        assert stats["categorized_files"] == 3
        assert stats["by_extension"][".bin"] == 1

    def test_empty_directory(self, tmp_path, organizer_config):
        empty = tmp_path / "empty"
        empty.mkdir()
        assert scan(str(Path(empty)), organizer_config) == []
