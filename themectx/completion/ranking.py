"""Tiered ranking of the objects offered for a file.

Tier 0 holds global objects, which are always available. Tier 1 holds the
objects of every verified context. Tier 2 holds objects of contexts the
file is *not* wired into yet: they are still offered so users can discover
them, but flagged because using them would fail at render time.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field

from themectx.discovery.schemas import Context, FileCategory
from themectx.knowledge.context_map import StaticContextMap

VERIFIED_LABEL = "Available in this context"
POTENTIAL_LABEL = "Not yet wired into this page, will error if used"
GLOBAL_LABEL = "Global object"

# Structural objects a file sees because of what it is, not where it renders
_STRUCTURAL_OBJECTS: dict[FileCategory, tuple[str, ...]] = {
    FileCategory.SECTION: ("section",),
    FileCategory.BLOCK: ("block", "section"),
}


class RankTier(IntEnum):
    GLOBAL = 0
    VERIFIED = 1
    POTENTIAL = 2


class RankedObject(BaseModel):
    """An object name with the tier it was placed in and why."""

    model_config = ConfigDict(frozen=True)

    name: str
    tier: RankTier
    label: str
    contexts: tuple[str, ...] = Field(
        default=(), description="Display names of the contexts providing the object"
    )

    @property
    def sort_key(self) -> tuple[int, str]:
        return (int(self.tier), self.name.lower())

    @property
    def is_warning(self) -> bool:
        return self.tier == RankTier.POTENTIAL


class _TierBuilder:
    def __init__(self) -> None:
        self.placed: dict[str, tuple[RankTier, str, list[str]]] = {}

    def add(self, name: str, tier: RankTier, label: str, context: str | None = None) -> None:
        if name not in self.placed:
            self.placed[name] = (tier, label, [])
        placed_tier, _, contexts = self.placed[name]
        # Lower tiers win; context names are only collected for the winning tier
        if placed_tier == tier and context and context not in contexts:
            contexts.append(context)

    def build(self) -> list[RankedObject]:
        ranked = [
            RankedObject(name=name, tier=tier, label=label, contexts=tuple(contexts))
            for name, (tier, label, contexts) in self.placed.items()
        ]
        return sorted(ranked, key=lambda obj: obj.sort_key)


def rank_objects(
    context_map: StaticContextMap,
    contexts: Iterable[Context],
    category: FileCategory | None = None,
) -> list[RankedObject]:
    """Place every known object into exactly one tier.

    Args:
        context_map: Global objects and per-context object lists
        contexts: Verified contexts for the file, as resolved by discovery
        category: File category, used to add section/block structural objects

    Returns:
        Ranked objects ordered by ``(tier, name)``
    """
    contexts = list(contexts)
    builder = _TierBuilder()

    # Tiers are filled lowest first so the first placement always wins
    for name in context_map.global_objects:
        builder.add(name, RankTier.GLOBAL, GLOBAL_LABEL)

    for name in _STRUCTURAL_OBJECTS.get(category, ()):
        builder.add(name, RankTier.VERIFIED, VERIFIED_LABEL, category.value)

    verified_keys: set[str] = set()
    for context in contexts:
        verified_keys.add(context.context_key)
        for name in context_map.objects_for(context.context_key):
            builder.add(name, RankTier.VERIFIED, VERIFIED_LABEL, context.display_name)

    for key in context_map.context_keys:
        if key in verified_keys:
            continue
        for name in context_map.objects_for(key):
            builder.add(name, RankTier.POTENTIAL, POTENTIAL_LABEL, key)

    return builder.build()
