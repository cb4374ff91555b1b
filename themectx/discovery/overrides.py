"""Override rules for contexts that leave no manifest or include evidence.

Two shapes exist in storefront themes:
- A *stem* override pins a context to files with a reserved name, e.g. the
  predictive search endpoint which is only ever fetched through the API.
- A *path* override collapses every manifest below a reserved directory
  onto one context key, e.g. all metaobject templates share ``metaobject``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .classifier import normalize_path
from .schemas import Context


def _normalize_stem(stem: str) -> str:
    return stem.strip().lower().replace("-", "_")


class StemOverride(BaseModel):
    """Always add a context when the queried file has one of these stems."""

    model_config = ConfigDict(frozen=True)

    stems: tuple[str, ...] = Field(description="Reserved file stems, hyphen or underscore spelling")
    context_key: str
    display_name: str | None = Field(default=None, description="Defaults to the context key")

    def matches(self, stem: str) -> bool:
        normalized = _normalize_stem(stem)
        return any(_normalize_stem(candidate) == normalized for candidate in self.stems)

    def context(self) -> Context:
        return Context(
            context_key=self.context_key,
            display_name=self.display_name or self.context_key,
        )


class PathOverride(BaseModel):
    """Map every manifest below ``segment`` to a fixed context key."""

    model_config = ConfigDict(frozen=True)

    segment: str = Field(description="Directory segment such as 'templates/metaobject/'")
    context_key: str

    def matches(self, path: str) -> bool:
        normalized = normalize_path(path)
        segment = normalize_path(self.segment).strip("/")
        return normalized.startswith(f"{segment}/") or f"/{segment}/" in normalized

    def context(self) -> Context:
        return Context(context_key=self.context_key, display_name=self.context_key)


DEFAULT_STEM_OVERRIDES: tuple[StemOverride, ...] = (
    StemOverride(
        stems=("predictive-search", "predictive_search"),
        context_key="predictive_search",
    ),
)

DEFAULT_PATH_OVERRIDES: tuple[PathOverride, ...] = (
    PathOverride(segment="templates/metaobject/", context_key="metaobject"),
)


def match_stem_overrides(stem: str, overrides: tuple[StemOverride, ...]) -> list[Context]:
    return [override.context() for override in overrides if override.matches(stem)]


def match_path_override(path: str, overrides: tuple[PathOverride, ...]) -> Context | None:
    for override in overrides:
        if override.matches(path):
            return override.context()
    return None
