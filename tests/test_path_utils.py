"""
Unit Tests — Path Utils
=======================
Tests for path canonicalisation, DirectoryHandle and the containment checks.
"""
import os

import pytest

from buildkit.filesystem.paths import (
    DirectoryHandle,
    is_in_folder,
    is_subfolder_of,
    normalize_file_name,
)


# ---------------------------------------------------------------------------
# 1. normalize_file_name
# ---------------------------------------------------------------------------
class TestNormalizeFileName:

    def test_case_and_separator_style_are_immaterial(self):
        assert normalize_file_name("A/B/") == normalize_file_name("a\\b")

    def test_trailing_separators_trimmed(self):
        assert normalize_file_name("build/out//") == os.path.join("build", "out")

    def test_lower_cases(self):
        assert normalize_file_name("Src/Main.CS") == os.path.join("src", "main.cs")

    def test_dot_segments_are_not_resolved(self):
        assert normalize_file_name("a/./b") != normalize_file_name("a/b")

    def test_accepts_path_objects(self, tmp_path):
        assert normalize_file_name(tmp_path) == str(tmp_path).lower()


# ---------------------------------------------------------------------------
# 2. DirectoryHandle
# ---------------------------------------------------------------------------
class TestDirectoryHandle:

    def test_of_makes_path_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        handle = DirectoryHandle.of("sub")
        assert handle.full_name == os.path.join(os.getcwd(), "sub")
        assert handle.canonical == normalize_file_name(handle.full_name)

    def test_parent_walks_up(self, tmp_path):
        handle = DirectoryHandle.of(tmp_path / "a" / "b")
        assert handle.parent == DirectoryHandle.of(tmp_path / "a")

    def test_root_has_no_parent(self):
        root = DirectoryHandle.of(os.path.abspath(os.sep))
        assert root.parent is None

    def test_of_returns_existing_handle(self, tmp_path):
        handle = DirectoryHandle.of(tmp_path)
        assert DirectoryHandle.of(handle) is handle

    def test_handle_is_immutable(self, tmp_path):
        handle = DirectoryHandle.of(tmp_path)
        with pytest.raises(AttributeError):
            handle.full_name = "/elsewhere"


# ---------------------------------------------------------------------------
# 3. is_subfolder_of / is_in_folder
# ---------------------------------------------------------------------------
class TestSubfolder:

    def test_reflexive(self, tmp_path):
        assert is_subfolder_of(tmp_path, tmp_path) is True

    def test_child_is_subfolder_of_parent(self, tmp_path):
        child = tmp_path / "child"
        assert is_subfolder_of(child, tmp_path) is True

    def test_parent_is_not_subfolder_of_child(self, tmp_path):
        child = tmp_path / "child"
        assert is_subfolder_of(tmp_path, child) is False

    def test_deep_descendant(self, tmp_path):
        assert is_subfolder_of(tmp_path / "a" / "b" / "c", tmp_path) is True

    def test_sibling_is_not_subfolder(self, tmp_path):
        assert is_subfolder_of(tmp_path / "a", tmp_path / "b") is False

    def test_sibling_with_common_prefix_is_not_subfolder(self, tmp_path):
        assert is_subfolder_of(tmp_path / "build-out", tmp_path / "build") is False

    def test_comparison_ignores_case_and_trailing_separator(self, tmp_path):
        ancestor = str(tmp_path).upper() + "/"
        assert is_subfolder_of(tmp_path / "x", ancestor) is True

    def test_everything_is_below_the_root(self, tmp_path):
        assert is_subfolder_of(tmp_path, os.path.abspath(os.sep)) is True

    def test_is_in_folder(self, tmp_path):
        assert is_in_folder(tmp_path, tmp_path / "src" / "main.py") is True
        assert is_in_folder(tmp_path / "src", tmp_path / "main.py") is False

    def test_is_in_folder_file_directly_inside(self, tmp_path):
        assert is_in_folder(tmp_path, tmp_path / "build.xml") is True
