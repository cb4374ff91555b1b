from .context_map import StaticContextMap, default_context_map, load_context_map
from .objects import (
    ObjectEntry,
    ObjectKnowledgeBase,
    ObjectProperty,
    default_knowledge_base,
    load_knowledge_base,
)

__all__ = [
    "StaticContextMap",
    "default_context_map",
    "load_context_map",
    "ObjectEntry",
    "ObjectKnowledgeBase",
    "ObjectProperty",
    "default_knowledge_base",
    "load_knowledge_base",
]
