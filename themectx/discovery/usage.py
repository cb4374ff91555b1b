"""Reverse dependency graph between snippets and the files that include them.

Liquid pulls snippets in with ``{% render 'name' %}`` (or the older
``{% include 'name' %}``). Scanning raw source for those directives, after
removing comments, tells us which sections, templates and layouts a
snippet can end up inside. The graph is rebuilt on every query.
"""

from __future__ import annotations

from collections import deque
import logging
import re

import networkx as nx

from .accumulator import FileScanOutcome, ScanAccumulator, scan_files
from .cancellation import CancellationToken
from .classifier import classify, file_stem
from .files import FileSource
from .schemas import FileCategory, UsageEdge

logger = logging.getLogger(__name__)

INCLUDER_GLOBS = (
    "snippets/**/*.liquid",
    "sections/**/*.liquid",
    "templates/**/*.liquid",
    "layout/**/*.liquid",
    "blocks/**/*.liquid",
)

INCLUDE_DIRECTIVES = ("render", "include")

_BLOCK_COMMENT_RE = re.compile(
    r"\{%-?\s*comment\s*-?%\}.*?\{%-?\s*endcomment\s*-?%\}",
    re.DOTALL | re.IGNORECASE,
)
_INLINE_COMMENT_RE = re.compile(r"\{%-?\s*#.*?-?%\}")
_ANY_INCLUDE_RE = re.compile(
    r"\{%-?\s*(?:" + "|".join(INCLUDE_DIRECTIVES) + r")\s+(['\"])(.+?)\1",
    re.IGNORECASE,
)


def strip_liquid_comments(text: str) -> str:
    """Remove ``{% comment %}`` blocks and ``{% # ... %}`` inline comments."""
    text = _BLOCK_COMMENT_RE.sub("", text)
    return _INLINE_COMMENT_RE.sub("", text)


def directive_pattern(fragment_name: str) -> re.Pattern[str]:
    """Pattern matching a render/include of exactly ``fragment_name``."""
    return re.compile(
        r"\{%-?\s*(?:"
        + "|".join(INCLUDE_DIRECTIVES)
        + r")\s+(['\"])"
        + re.escape(fragment_name)
        + r"\1",
        re.IGNORECASE,
    )


def _node_id(category: FileCategory, name: str) -> str:
    return f"{category}:{name.lower()}"


def list_includer_files(source: FileSource) -> list[str]:
    paths: list[str] = []
    for pattern in INCLUDER_GLOBS:
        paths.extend(source.list_files(pattern))
    return paths


class UsageGraph:
    """Directed graph of ``includer -> snippet`` edges for one query."""

    def __init__(self, graph: nx.DiGraph | None = None) -> None:
        self.graph = graph if graph is not None else nx.DiGraph()

    @classmethod
    def from_edges(cls, edges: list[UsageEdge]) -> UsageGraph:
        graph = nx.DiGraph()
        for edge in edges:
            source = _node_id(edge.includer_category, edge.includer)
            target = _node_id(FileCategory.SNIPPET, edge.included)
            graph.add_node(source, name=edge.includer, category=edge.includer_category)
            if target not in graph:
                graph.add_node(target, name=edge.included, category=FileCategory.SNIPPET)
            graph.add_edge(source, target)
        return cls(graph)

    def _edges_into(self, node: str) -> list[UsageEdge]:
        if node not in self.graph:
            return []
        included = self.graph.nodes[node]["name"]
        return [
            UsageEdge(
                includer=self.graph.nodes[pred]["name"],
                includer_category=self.graph.nodes[pred]["category"],
                included=included,
            )
            for pred in self.graph.predecessors(node)
        ]

    def includers(self, snippet: str) -> list[UsageEdge]:
        """Files that include ``snippet`` directly."""
        return self._edges_into(_node_id(FileCategory.SNIPPET, snippet))

    def transitive_includers(self, snippet: str) -> list[UsageEdge]:
        """Includers of ``snippet`` and, through snippets, of whatever includes them.

        Breadth-first, so direct includers come first. Include cycles between
        snippets are visited once.
        """
        start = _node_id(FileCategory.SNIPPET, snippet)
        visited = {start}
        queue = deque([start])
        edges: list[UsageEdge] = []

        while queue:
            node = queue.popleft()
            for edge in self._edges_into(node):
                edges.append(edge)
                if edge.includer_category != FileCategory.SNIPPET:
                    continue
                parent = _node_id(FileCategory.SNIPPET, edge.includer)
                if parent not in visited:
                    visited.add(parent)
                    queue.append(parent)

        return edges


class UsageGraphBuilder:
    """Builds snippet usage evidence from theme sources."""

    def __init__(self, source: FileSource, max_workers: int | None = None) -> None:
        self.source = source
        self.max_workers = max_workers

    def scan(
        self, fragment_name: str, token: CancellationToken | None = None
    ) -> ScanAccumulator:
        """Find every file that renders or includes ``fragment_name``."""
        pattern = directive_pattern(fragment_name)

        def scan_source(index: int, path: str, text: str) -> FileScanOutcome:
            if not pattern.search(strip_liquid_comments(text)):
                return FileScanOutcome(index=index, path=path)
            edge = UsageEdge(
                includer=file_stem(path),
                includer_category=classify(path),
                included=fragment_name,
            )
            return FileScanOutcome(index=index, path=path, edges=(edge,))

        return scan_files(
            self.source,
            list_includer_files(self.source),
            scan_source,
            token=token,
            max_workers=self.max_workers,
        )

    def find_includers(
        self, fragment_name: str, token: CancellationToken | None = None
    ) -> list[UsageEdge]:
        return list(self.scan(fragment_name, token=token).edges)

    def scan_all(self, token: CancellationToken | None = None) -> ScanAccumulator:
        """Collect every include edge in the theme in a single pass over the files."""

        def scan_source(index: int, path: str, text: str) -> FileScanOutcome:
            includer = file_stem(path)
            category = classify(path)
            seen: set[str] = set()
            edges: list[UsageEdge] = []
            for match in _ANY_INCLUDE_RE.finditer(strip_liquid_comments(text)):
                name = match.group(2)
                if name.lower() in seen:
                    continue
                seen.add(name.lower())
                edges.append(UsageEdge(
                    includer=includer,
                    includer_category=category,
                    included=name,
                ))
            return FileScanOutcome(index=index, path=path, edges=tuple(edges))

        return scan_files(
            self.source,
            list_includer_files(self.source),
            scan_source,
            token=token,
            max_workers=self.max_workers,
        )

    def build_graph(
        self, token: CancellationToken | None = None
    ) -> tuple[UsageGraph, ScanAccumulator]:
        result = self.scan_all(token=token)
        graph = UsageGraph.from_edges(list(result.edges))
        logger.debug(
            "Usage graph: %d nodes, %d edges from %d files",
            graph.graph.number_of_nodes(),
            graph.graph.number_of_edges(),
            result.files_processed,
        )
        return graph, result
