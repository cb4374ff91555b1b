"""Exceptions raised at the edges of themectx.

Scanning itself never raises: per-file failures are collected as
``ScanError`` values on the discovery result. These exceptions cover the
startup paths (configuration and knowledge base loading) where failing
loudly is the only sensible option.
"""

from __future__ import annotations

from pathlib import Path


class ThemeContextError(Exception):
    """Base exception for themectx errors."""


class ConfigError(ThemeContextError):
    """Raised when a configuration file cannot be read or validated."""


class KnowledgeBaseError(ThemeContextError):
    """Raised when the object knowledge base or context map fails to load."""

    def __init__(self, source: str | Path, message: str) -> None:
        self.source = str(source)
        super().__init__(f"Failed to load '{self.source}': {message}")
