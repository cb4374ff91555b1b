from .items import CompletionItem, CompletionItemKind, object_items, property_items
from .ranking import (
    GLOBAL_LABEL,
    POTENTIAL_LABEL,
    VERIFIED_LABEL,
    RankedObject,
    RankTier,
    rank_objects,
)
from .service import CompletionService
from .triggers import Trigger, TriggerKind, detect_trigger

__all__ = [
    "CompletionItem",
    "CompletionItemKind",
    "CompletionService",
    "RankedObject",
    "RankTier",
    "Trigger",
    "TriggerKind",
    "GLOBAL_LABEL",
    "POTENTIAL_LABEL",
    "VERIFIED_LABEL",
    "detect_trigger",
    "object_items",
    "property_items",
    "rank_objects",
]
