"""Path-based classification of theme files."""

from __future__ import annotations

from pathlib import PurePosixPath

from .schemas import FileCategory

# Checked in order, first match wins.
_RESERVED_SEGMENTS: tuple[tuple[str, FileCategory], ...] = (
    ("snippets", FileCategory.SNIPPET),
    ("sections", FileCategory.SECTION),
    ("templates", FileCategory.TEMPLATE),
    ("layout", FileCategory.LAYOUT),
    ("assets", FileCategory.ASSET),
    ("blocks", FileCategory.BLOCK),
)


def normalize_path(path: str) -> str:
    """Lowercase a path and use forward slashes as separators."""
    return path.replace("\\", "/").lower()


def _has_segment(normalized: str, segment: str) -> bool:
    return (
        f"/{segment}/" in normalized
        or normalized.startswith(f"{segment}/")
        or normalized.endswith(f"/{segment}")
        or normalized == segment
    )


def classify(path: str) -> FileCategory:
    """Classify a theme file by the reserved directory it lives under.

    Both ``.../snippets/price.liquid`` and a bare ``.../snippets`` classify
    as snippets. Paths under no reserved directory are ``UNKNOWN``.
    """
    normalized = normalize_path(path)
    for segment, category in _RESERVED_SEGMENTS:
        if _has_segment(normalized, segment):
            return category
    return FileCategory.UNKNOWN


def file_stem(path: str) -> str:
    """Return the file name without its final extension.

    ``templates/collection.wholesale.json`` -> ``collection.wholesale``
    """
    return PurePosixPath(path.replace("\\", "/")).stem
