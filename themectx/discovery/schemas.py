"""Pydantic schemas for context discovery.

Defines the query-scoped value objects exchanged between the classifier,
the manifest scanner, the usage graph builder and the orchestrator:
- File categories derived from theme directory layout
- Contexts (context key + display name)
- Usage edges between includers and snippets
- Scan diagnostics and the final discovery result
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class FileCategory(StrEnum):
    """Structural role of a file inside a theme."""

    SNIPPET = "snippet"
    SECTION = "section"
    BLOCK = "block"
    TEMPLATE = "template"
    LAYOUT = "layout"
    ASSET = "asset"
    UNKNOWN = "unknown"


class ScanErrorKind(StrEnum):
    """Kind of per-file failure encountered while scanning."""

    FILE_UNREADABLE = "file_unreadable"
    MANIFEST_UNPARSABLE = "manifest_unparsable"
    SCAN_FAILED = "scan_failed"


# =============================================================================
# Contexts
# =============================================================================


class Context(BaseModel):
    """A runtime scope exposing a bundle of objects.

    ``context_key`` looks up the object bundle in the context map;
    ``display_name`` is what users see and may carry a variant qualifier,
    e.g. ``collection.wholesale`` for key ``collection``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    context_key: str = Field(alias="contextKey")
    display_name: str = Field(alias="displayName")

    @classmethod
    def from_name(cls, name: str) -> Context:
        """Build a context from a file stem, keying on the part before the first dot."""
        return cls(context_key=name.split(".", 1)[0], display_name=name)


GLOBAL_CONTEXT = Context(context_key="global", display_name="global")
SETTINGS_CONTEXT = Context(context_key="settings", display_name="settings")


# =============================================================================
# Graph and diagnostics
# =============================================================================


class UsageEdge(BaseModel):
    """A file that includes a snippet by name."""

    model_config = ConfigDict(frozen=True)

    includer: str = Field(description="Stem of the including file")
    includer_category: FileCategory
    included: str = Field(description="Name of the included snippet")


class ScanError(BaseModel):
    """A file excluded from evidence because it could not be scanned."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: ScanErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.path}: {self.message}"


class DiscoveryResult(BaseModel):
    """Verified contexts for one file plus whatever went wrong on the way."""

    file_stem: str
    category: FileCategory
    contexts: list[Context] = Field(default_factory=list)
    errors: list[ScanError] = Field(default_factory=list)
    cancelled: bool = Field(default=False)

    @property
    def context_keys(self) -> set[str]:
        return {context.context_key for context in self.contexts}

    @property
    def display_names(self) -> list[str]:
        return [context.display_name for context in self.contexts]
