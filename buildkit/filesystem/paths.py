"""
Path Utils
==========
Path canonicalisation and directory containment helpers.

Responsibilities:
    - Canonicalise path strings for comparison (separators, case, trailing slash)
    - Model a directory and its ancestor chain (DirectoryHandle)
    - Answer "is this directory inside that one" by walking ancestors

Canonicalisation is purely textual: symlinks, case-sensitive file systems
and ``.``/``..`` segments inside the compared strings are not resolved.
Only the conversion to an absolute path (os.path.abspath) touches the
current working directory.
"""
import os
from dataclasses import dataclass
from typing import Optional, Union

from buildkit.core.constants import PATH_SEPARATORS

PathLike = Union[str, "os.PathLike[str]"]


def normalize_file_name(file_name: PathLike) -> str:
    """
    Canonicalise a path string for comparison.

    Both ``\\`` and ``/`` become ``os.sep``, trailing separators are trimmed
    and the result is lower-cased, so ``"A/B/"`` and ``"a\\b"`` compare equal.
    """
    normalized = os.fspath(file_name)
    for separator in PATH_SEPARATORS:
        normalized = normalized.replace(separator, os.sep)
    return normalized.rstrip(os.sep).lower()


@dataclass(frozen=True)
class DirectoryHandle:
    """
    A directory location plus its canonical string form.

    Attributes
    ----------
    full_name : str
        Absolute path of the directory.
    canonical : str
        ``normalize_file_name(full_name)``, used for comparisons.
    """
    full_name: str
    canonical: str

    @classmethod
    def of(cls, path: Union[PathLike, "DirectoryHandle"]) -> "DirectoryHandle":
        if isinstance(path, DirectoryHandle):
            return path
        full_name = os.path.abspath(os.fspath(path))
        return cls(full_name=full_name, canonical=normalize_file_name(full_name))

    @property
    def parent(self) -> Optional["DirectoryHandle"]:
        """The containing directory, or None for a file-system root."""
        parent_name = os.path.dirname(self.full_name)
        if not parent_name or parent_name == self.full_name:
            return None
        return DirectoryHandle.of(parent_name)


def is_subfolder_of(candidate: Union[PathLike, DirectoryHandle],
                    ancestor: Union[PathLike, DirectoryHandle]) -> bool:
    """
    Check whether ``candidate`` is ``ancestor`` or lies somewhere below it.

    Reflexive: a directory is a subfolder of itself.
    """
    candidate_dir = DirectoryHandle.of(candidate)
    ancestor_dir = DirectoryHandle.of(ancestor)

    if candidate_dir.canonical == ancestor_dir.canonical:
        return True
    parent = candidate_dir.parent
    if parent is None:
        return False
    return is_subfolder_of(parent, ancestor_dir)


def is_in_folder(directory: Union[PathLike, DirectoryHandle], file_name: PathLike) -> bool:
    """Check whether ``file_name`` lives in ``directory`` or one of its subfolders."""
    containing_dir = os.path.dirname(os.path.abspath(os.fspath(file_name)))
    return is_subfolder_of(containing_dir, directory)
