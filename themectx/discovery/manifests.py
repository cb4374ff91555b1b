"""JSON template scanning.

JSON templates declare which sections compose a page::

    {
      "sections": {
        "main": {"type": "main-product", "settings": {}},
        "hero": {"type": "hero", "blocks": {"b1": {"type": "price"}}}
      },
      "order": ["main", "hero"]
    }

A section (or theme block) is only reachable from a page whose template
lists its type, so the template's name tells us which page context the
section renders under.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
import json
import logging
import re

from .accumulator import FileScanOutcome, ScanAccumulator, scan_files
from .cancellation import CancellationToken
from .classifier import file_stem
from .files import FileSource
from .overrides import DEFAULT_PATH_OVERRIDES, PathOverride, match_path_override
from .schemas import Context, ScanError, ScanErrorKind

logger = logging.getLogger(__name__)

MANIFEST_GLOB = "templates/**/*.json"

# Strings are matched first so comment markers inside them survive
_JSON_COMMENT_RE = re.compile(r'"(?:\\.|[^"\\])*"|/\*.*?\*/|//[^\n]*', re.DOTALL)


def strip_json_comments(text: str) -> str:
    """Remove ``/* */`` and ``//`` comments that sit outside string literals."""
    return _JSON_COMMENT_RE.sub(
        lambda m: m.group(0) if m.group(0).startswith('"') else "",
        text,
    )


def _iter_block_types(blocks: Any) -> Iterator[str]:
    if not isinstance(blocks, dict):
        return
    for block in blocks.values():
        if not isinstance(block, dict):
            continue
        block_type = block.get("type")
        if isinstance(block_type, str):
            yield block_type
        yield from _iter_block_types(block.get("blocks"))


def iter_fragment_types(document: Any, include_blocks: bool = False) -> Iterator[str]:
    """Yield the ``type`` of every section, and optionally every nested block."""
    if not isinstance(document, dict):
        return
    sections = document.get("sections")
    if not isinstance(sections, dict):
        return
    for section in sections.values():
        if not isinstance(section, dict):
            continue
        section_type = section.get("type")
        if isinstance(section_type, str):
            yield section_type
        if include_blocks:
            yield from _iter_block_types(section.get("blocks"))


def references_fragment(document: Any, fragment_type: str, include_blocks: bool = False) -> bool:
    wanted = fragment_type.lower()
    return any(
        found.lower() == wanted
        for found in iter_fragment_types(document, include_blocks=include_blocks)
    )


class ManifestScanner:
    """Maps a section or block type back to the page contexts that use it."""

    def __init__(
        self,
        source: FileSource,
        path_overrides: tuple[PathOverride, ...] = DEFAULT_PATH_OVERRIDES,
        max_workers: int | None = None,
    ) -> None:
        self.source = source
        self.path_overrides = path_overrides
        self.max_workers = max_workers

    def context_for_manifest(self, path: str) -> Context:
        """Page context a manifest renders under.

        ``templates/collection.wholesale.json`` -> key ``collection``,
        display ``collection.wholesale``; overridden paths use the rule's key.
        """
        override = match_path_override(path, self.path_overrides)
        if override is not None:
            return override
        return Context.from_name(file_stem(path))

    def scan(
        self,
        fragment_type: str,
        *,
        include_blocks: bool = False,
        token: CancellationToken | None = None,
    ) -> ScanAccumulator:
        """Scan every manifest for ``fragment_type``, collecting contexts and errors."""
        paths = self.source.list_files(MANIFEST_GLOB)

        def scan_manifest(index: int, path: str, text: str) -> FileScanOutcome:
            try:
                document = json.loads(strip_json_comments(text))
                referenced = references_fragment(document, fragment_type, include_blocks)
            except (ValueError, RecursionError) as e:
                logger.warning("Skipping unparsable manifest %s: %s", path, e)
                return FileScanOutcome(
                    index=index,
                    path=path,
                    error=ScanError(
                        path=path,
                        kind=ScanErrorKind.MANIFEST_UNPARSABLE,
                        message=str(e),
                    ),
                )
            if not referenced:
                return FileScanOutcome(index=index, path=path)
            return FileScanOutcome(
                index=index,
                path=path,
                contexts=(self.context_for_manifest(path),),
            )

        result = scan_files(
            self.source, paths, scan_manifest, token=token, max_workers=self.max_workers
        )
        logger.debug(
            "Manifest scan for %r: %d contexts from %d files (%d skipped)",
            fragment_type,
            len(result.contexts),
            result.files_processed,
            result.files_skipped,
        )
        return result

    def find_contexts_using(
        self,
        fragment_type: str,
        *,
        include_blocks: bool = False,
        token: CancellationToken | None = None,
    ) -> list[Context]:
        return list(
            self.scan(fragment_type, include_blocks=include_blocks, token=token).contexts
        )
