"""
Unit Tests — File System Helpers
================================
Existence checks, directory creation and pattern lookups.
"""
import os

import pytest

from buildkit.filesystem.files import (
    all_files_exist,
    check_file_exists,
    directory_exists,
    directory_name,
    ensure_directory,
    file_exists,
    files_in_dir,
    files_in_dir_matching,
    find_first_matching_file,
    full_name,
    is_directory,
    is_file,
    subdirectories,
    try_find_first_matching_file,
)


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "a.nuspec").write_text("<package/>")
    (tmp_path / "b.nuspec").write_text("<package/>")
    (tmp_path / "readme.md").write_text("# readme")
    (tmp_path / "src").mkdir()
    (tmp_path / "tests").mkdir()
    return tmp_path


class TestExistence:

    def test_file_exists(self, workspace):
        assert file_exists(workspace / "readme.md") is True
        assert file_exists(workspace / "missing.md") is False
        assert file_exists(workspace / "src") is False

    def test_check_file_exists_raises(self, workspace):
        check_file_exists(workspace / "readme.md")
        with pytest.raises(FileNotFoundError, match="missing.md"):
            check_file_exists(workspace / "missing.md")

    def test_all_files_exist(self, workspace):
        assert all_files_exist([workspace / "a.nuspec", workspace / "b.nuspec"]) is True
        assert all_files_exist([workspace / "a.nuspec", workspace / "c.nuspec"]) is False
        assert all_files_exist([]) is True

    def test_directory_exists(self, workspace):
        assert directory_exists(workspace / "src") is True
        assert directory_exists(workspace / "readme.md") is False

    def test_is_directory_and_is_file(self, workspace):
        assert is_directory(workspace / "src") is True
        assert is_file(workspace / "readme.md") is True

    def test_is_directory_missing_path_raises(self, workspace):
        with pytest.raises(FileNotFoundError):
            is_directory(workspace / "nope")


class TestDirectories:

    def test_ensure_directory_creates_chain(self, tmp_path):
        target = tmp_path / "out" / "bin" / "release"
        ensure_directory(target)
        assert target.is_dir()

    def test_ensure_directory_is_idempotent(self, workspace):
        ensure_directory(workspace / "src")
        assert (workspace / "src").is_dir()

    def test_subdirectories_and_files(self, workspace):
        assert [p.name for p in subdirectories(workspace)] == ["src", "tests"]
        assert [p.name for p in files_in_dir(workspace)] == ["a.nuspec", "b.nuspec", "readme.md"]

    def test_full_and_directory_name(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert full_name("x.xml") == os.path.join(os.getcwd(), "x.xml")
        assert directory_name(os.path.join("a", "b", "c.xml")) == os.path.join("a", "b")


class TestMatching:

    def test_files_in_dir_matching(self, workspace):
        assert [p.name for p in files_in_dir_matching("*.nuspec", workspace)] == ["a.nuspec", "b.nuspec"]

    def test_files_in_missing_dir_is_empty(self, tmp_path):
        assert files_in_dir_matching("*.xml", tmp_path / "missing") == []

    def test_try_find_first_matching_file(self, workspace):
        found = try_find_first_matching_file("*.nuspec", workspace)
        assert found == os.path.join(str(workspace), "a.nuspec")
        assert try_find_first_matching_file("*.csproj", workspace) is None

    def test_find_first_matching_file_raises(self, workspace):
        with pytest.raises(FileNotFoundError, match=r"\*\.csproj"):
            find_first_matching_file("*.csproj", workspace)
