"""Resolution of the verified contexts for one theme file.

Each file category reaches page contexts differently:

- assets only ever see theme settings
- layouts wrap every page, so only global objects are guaranteed
- templates *are* the page context
- sections and blocks are wired into pages by JSON templates
- snippets inherit the contexts of whatever renders them
"""

from __future__ import annotations

from typing import TYPE_CHECKING
import logging

from .accumulator import ScanAccumulator, dedupe_contexts
from .cancellation import CancellationToken, is_cancelled
from .classifier import classify, file_stem
from .files import FileSource
from .manifests import ManifestScanner
from .overrides import (
    DEFAULT_PATH_OVERRIDES,
    DEFAULT_STEM_OVERRIDES,
    PathOverride,
    StemOverride,
    match_stem_overrides,
)
from .schemas import (
    GLOBAL_CONTEXT,
    SETTINGS_CONTEXT,
    Context,
    DiscoveryResult,
    FileCategory,
)
from .usage import UsageGraphBuilder

if TYPE_CHECKING:
    from themectx.config import ThemeContextConfig

logger = logging.getLogger(__name__)


class DiscoveryOrchestrator:
    """Combines classification, manifest scanning and usage graphs into contexts."""

    def __init__(
        self,
        source: FileSource,
        stem_overrides: tuple[StemOverride, ...] = DEFAULT_STEM_OVERRIDES,
        path_overrides: tuple[PathOverride, ...] = DEFAULT_PATH_OVERRIDES,
        max_workers: int | None = None,
    ) -> None:
        self.source = source
        self.stem_overrides = tuple(stem_overrides)
        self.manifests = ManifestScanner(
            source, path_overrides=tuple(path_overrides), max_workers=max_workers
        )
        self.usage = UsageGraphBuilder(source, max_workers=max_workers)

    @classmethod
    def from_config(
        cls, source: FileSource, config: ThemeContextConfig
    ) -> DiscoveryOrchestrator:
        return cls(
            source,
            stem_overrides=tuple(config.stem_overrides),
            path_overrides=tuple(config.path_overrides),
            max_workers=config.max_workers,
        )

    def resolve_file(
        self, path: str, token: CancellationToken | None = None
    ) -> DiscoveryResult:
        """Classify ``path`` and resolve its contexts."""
        return self.resolve_contexts(file_stem(path), classify(path), token=token)

    def resolve_contexts(
        self,
        stem: str,
        category: FileCategory,
        token: CancellationToken | None = None,
    ) -> DiscoveryResult:
        """Resolve the verified contexts for a file stem of a known category.

        Args:
            stem: File name without extension, e.g. ``collection.wholesale``
            category: Category from ``classify``
            token: Cancels outstanding file reads when set

        Returns:
            DiscoveryResult with contexts deduplicated by display name. A
            cancelled query comes back with ``cancelled=True`` and no contexts.
        """
        accumulator = ScanAccumulator().add_contexts(
            match_stem_overrides(stem, self.stem_overrides)
        )

        if category == FileCategory.ASSET:
            accumulator = accumulator.add_contexts([SETTINGS_CONTEXT])
        elif category == FileCategory.LAYOUT:
            accumulator = accumulator.add_contexts([GLOBAL_CONTEXT])
        elif category == FileCategory.TEMPLATE:
            accumulator = accumulator.add_contexts([GLOBAL_CONTEXT, Context.from_name(stem)])
        elif category == FileCategory.SECTION:
            accumulator = accumulator.merge(self.manifests.scan(stem, token=token))
        elif category == FileCategory.BLOCK:
            accumulator = accumulator.merge(
                self.manifests.scan(stem, include_blocks=True, token=token)
            )
        elif category == FileCategory.SNIPPET:
            accumulator = accumulator.merge(self._resolve_snippet(stem, token))

        if accumulator.cancelled or is_cancelled(token):
            logger.debug("Discovery for %s %r cancelled", category, stem)
            return DiscoveryResult(
                file_stem=stem,
                category=category,
                errors=list(dict.fromkeys(accumulator.errors)),
                cancelled=True,
            )

        contexts = dedupe_contexts(accumulator.contexts)
        logger.debug(
            "Resolved %d contexts for %s %r (%d scan errors)",
            len(contexts),
            category,
            stem,
            len(accumulator.errors),
        )
        return DiscoveryResult(
            file_stem=stem,
            category=category,
            contexts=contexts,
            errors=list(dict.fromkeys(accumulator.errors)),
        )

    def _resolve_snippet(
        self, stem: str, token: CancellationToken | None
    ) -> ScanAccumulator:
        graph, accumulator = self.usage.build_graph(token=token)
        if accumulator.cancelled:
            return accumulator

        # Edges are graph evidence, not output
        accumulator = ScanAccumulator(
            errors=accumulator.errors,
            files_processed=accumulator.files_processed,
            files_skipped=accumulator.files_skipped,
        )
        manifest_scans: dict[tuple[str, bool], ScanAccumulator] = {}

        for edge in graph.transitive_includers(stem):
            if is_cancelled(token):
                return accumulator.merge(ScanAccumulator(cancelled=True))

            category = edge.includer_category
            if category in (FileCategory.TEMPLATE, FileCategory.LAYOUT):
                accumulator = accumulator.add_contexts([Context.from_name(edge.includer)])
                continue
            if category not in (FileCategory.SECTION, FileCategory.SNIPPET, FileCategory.BLOCK):
                continue

            key = (edge.includer.lower(), category == FileCategory.BLOCK)
            if key in manifest_scans:
                # Errors from a repeated scan were already recorded
                accumulator = accumulator.add_contexts(manifest_scans[key].contexts)
                continue
            scan = self.manifests.scan(edge.includer, include_blocks=key[1], token=token)
            manifest_scans[key] = scan
            accumulator = accumulator.merge(scan)

        return accumulator
