"""
File System Helpers
===================
Thin, deterministic wrappers over os / pathlib used by build scripts.

Lookups that can legitimately come up empty have a ``try_`` variant
returning None; the plain variant raises FileNotFoundError instead.
"""
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from buildkit.filesystem.paths import PathLike

logger = logging.getLogger(__name__)


def full_name(file_name: PathLike) -> str:
    """Convert a file name to its absolute file-system name."""
    return os.path.abspath(os.fspath(file_name))


def directory_name(file_name: PathLike) -> str:
    """Directory part of a file name."""
    return os.path.dirname(os.fspath(file_name))


def file_exists(file_name: PathLike) -> bool:
    return os.path.isfile(file_name)


def check_file_exists(file_name: PathLike) -> None:
    """Raise FileNotFoundError if the file doesn't exist on disk."""
    if not file_exists(file_name):
        raise FileNotFoundError(f"File {os.fspath(file_name)} does not exist.")


def all_files_exist(file_names: Iterable[PathLike]) -> bool:
    return all(file_exists(f) for f in file_names)


def directory_exists(directory: PathLike) -> bool:
    return os.path.isdir(directory)


def ensure_directory(directory: PathLike) -> None:
    """Create the directory chain if it does not exist yet."""
    if not directory_exists(directory):
        logger.debug("Creating directory %s", directory)
        os.makedirs(directory, exist_ok=True)


def is_directory(path: PathLike) -> bool:
    """
    Detect whether the path is a directory.

    Raises FileNotFoundError for a path that does not exist at all, so a
    missing path is never reported as a file.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Path {os.fspath(path)} does not exist.")
    return os.path.isdir(path)


def is_file(path: PathLike) -> bool:
    return not is_directory(path)


def subdirectories(directory: PathLike) -> list[Path]:
    """All immediate subdirectories, sorted by name."""
    return sorted(p for p in Path(directory).iterdir() if p.is_dir())


def files_in_dir(directory: PathLike) -> list[Path]:
    """All files directly inside the directory, sorted by name."""
    return sorted(p for p in Path(directory).iterdir() if p.is_file())


def files_in_dir_matching(pattern: str, directory: PathLike) -> list[Path]:
    """
    Files directly inside the directory matching a glob pattern.

    Returns an empty list when the directory does not exist.
    """
    if not directory_exists(directory):
        return []
    return sorted(p for p in Path(directory).glob(pattern) if p.is_file())


def try_find_first_matching_file(pattern: str, directory: PathLike) -> Optional[str]:
    """Absolute name of the first file matching the pattern, or None."""
    matches = files_in_dir_matching(pattern, directory)
    if not matches:
        return None
    return full_name(matches[0])


def find_first_matching_file(pattern: str, directory: PathLike) -> str:
    """Like try_find_first_matching_file, but raises FileNotFoundError when nothing matches."""
    found = try_find_first_matching_file(pattern, directory)
    if found is None:
        raise FileNotFoundError(
            f"Could not find file matching {pattern} in {os.fspath(directory)}"
        )
    return found
