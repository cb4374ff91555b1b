"""File enumeration and reads for theme scanning.

The engine only needs two capabilities from its host: list files matching
a glob and read a file as text. ``FileSource`` captures that boundary so an
editor can hand in its own workspace view; ``LocalFileSource`` is the
default implementation over a theme directory on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable
import os

import pathspec

# Directories never worth descending into inside a theme checkout
_DEFAULT_EXCLUDES = frozenset({
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    "dist",
    "build",
})


@runtime_checkable
class FileSource(Protocol):
    """Read-only view of a theme's files."""

    def list_files(self, pattern: str) -> list[str]:
        """Return theme-relative POSIX paths matching a glob (``**`` allowed)."""
        ...

    def read_text(self, path: str) -> str:
        """Return the full text of a theme-relative path."""
        ...


class LocalFileSource:
    """``FileSource`` backed by a directory on the local file system."""

    def __init__(self, root: str | Path, encoding: str = "utf-8") -> None:
        self.root = Path(root).resolve()
        self.encoding = encoding

    def list_files(self, pattern: str) -> list[str]:
        spec = pathspec.PathSpec.from_lines("gitignore", [pattern])
        matches: list[str] = []

        for dirpath, dirnames, filenames in os.walk(self.root):
            # Filter directories in-place to prevent descending
            dirnames[:] = sorted(
                d for d in dirnames
                if not d.startswith(".") and d not in _DEFAULT_EXCLUDES
            )
            current = Path(dirpath)
            for fname in sorted(filenames):
                rel_path = (current / fname).relative_to(self.root).as_posix()
                if spec.match_file(rel_path):
                    matches.append(rel_path)

        return matches

    def read_text(self, path: str) -> str:
        full_path = Path(path)
        if not full_path.is_absolute():
            full_path = self.root / path
        return full_path.read_text(encoding=self.encoding)

    def __repr__(self) -> str:
        return f"LocalFileSource({str(self.root)!r})"
