"""Context discovery for Liquid theme files.

Works out which page contexts a theme file is rendered under by combining:
- Path-based file classification
- JSON template (manifest) scanning for sections and blocks
- A reverse render/include graph for snippets
- Configurable override rules for contexts with no static evidence
"""
from .accumulator import ScanAccumulator, dedupe_contexts, fold_outcomes, scan_files
from .cancellation import CancellationToken
from .classifier import classify, file_stem, normalize_path
from .files import FileSource, LocalFileSource
from .manifests import ManifestScanner, strip_json_comments
from .orchestrator import DiscoveryOrchestrator
from .overrides import (
    DEFAULT_PATH_OVERRIDES,
    DEFAULT_STEM_OVERRIDES,
    PathOverride,
    StemOverride,
)
from .schemas import (
    GLOBAL_CONTEXT,
    SETTINGS_CONTEXT,
    Context,
    DiscoveryResult,
    FileCategory,
    ScanError,
    ScanErrorKind,
    UsageEdge,
)
from .usage import UsageGraph, UsageGraphBuilder, strip_liquid_comments

__all__ = [
    # Classification
    "classify",
    "file_stem",
    "normalize_path",
    # Files
    "FileSource",
    "LocalFileSource",
    "CancellationToken",
    # Scanning
    "ManifestScanner",
    "UsageGraph",
    "UsageGraphBuilder",
    "ScanAccumulator",
    "dedupe_contexts",
    "fold_outcomes",
    "scan_files",
    "strip_json_comments",
    "strip_liquid_comments",
    # Orchestration
    "DiscoveryOrchestrator",
    # Overrides
    "StemOverride",
    "PathOverride",
    "DEFAULT_STEM_OVERRIDES",
    "DEFAULT_PATH_OVERRIDES",
    # Schemas
    "Context",
    "DiscoveryResult",
    "FileCategory",
    "ScanError",
    "ScanErrorKind",
    "UsageEdge",
    "GLOBAL_CONTEXT",
    "SETTINGS_CONTEXT",
]
