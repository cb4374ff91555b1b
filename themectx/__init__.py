"""
Liquid theme context discovery.

Given a file inside a Shopify-style theme, works out which runtime objects
are reachable there and ranks them for editor completion:
- File classification from theme directory layout
- JSON template scanning to find where sections and blocks are wired in
- Render/include graphs to find where snippets end up
- Tiered object ranking with warnings for contexts not wired in yet
"""
from .completion import CompletionItem, CompletionService, RankedObject, RankTier, rank_objects
from .config import ThemeContextConfig, load_config
from .discovery import (
    CancellationToken,
    Context,
    DiscoveryOrchestrator,
    DiscoveryResult,
    FileCategory,
    FileSource,
    LocalFileSource,
    ManifestScanner,
    UsageGraphBuilder,
    classify,
)
from .exceptions import ConfigError, KnowledgeBaseError, ThemeContextError
from .knowledge import StaticContextMap, load_context_map, load_knowledge_base

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "CompletionItem",
    "CompletionService",
    "ConfigError",
    "Context",
    "DiscoveryOrchestrator",
    "DiscoveryResult",
    "FileCategory",
    "FileSource",
    "KnowledgeBaseError",
    "LocalFileSource",
    "ManifestScanner",
    "RankTier",
    "RankedObject",
    "StaticContextMap",
    "ThemeContextConfig",
    "ThemeContextError",
    "UsageGraphBuilder",
    "classify",
    "load_config",
    "load_context_map",
    "load_knowledge_base",
    "rank_objects",
]
