"""Per-query accumulation of scan evidence.

Every file is scanned into its own ``FileScanOutcome``. Outcomes are only
folded into a query's ``ScanAccumulator`` after the file finishes, and the
fold is a pure function of the outcomes, so concurrent reads need no locks
and completion order never changes the result.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
import logging
import os

from .cancellation import CancellationToken, is_cancelled
from .files import FileSource
from .schemas import Context, ScanError, ScanErrorKind, UsageEdge

logger = logging.getLogger(__name__)

# Below this many files a thread pool costs more than it saves
_PARALLEL_THRESHOLD = 8


@dataclass(frozen=True)
class FileScanOutcome:
    """Evidence gathered from a single file."""

    index: int
    path: str
    contexts: tuple[Context, ...] = ()
    edges: tuple[UsageEdge, ...] = ()
    error: ScanError | None = None
    skipped: bool = False


@dataclass(frozen=True)
class ScanAccumulator:
    """Evidence gathered for one query. Never shared between queries."""

    contexts: tuple[Context, ...] = ()
    edges: tuple[UsageEdge, ...] = ()
    errors: tuple[ScanError, ...] = ()
    files_processed: int = 0
    files_skipped: int = 0
    cancelled: bool = False

    def add_outcome(self, outcome: FileScanOutcome) -> ScanAccumulator:
        """Return a new accumulator including one file's outcome."""
        if outcome.skipped:
            return replace(self, files_skipped=self.files_skipped + 1, cancelled=True)
        if outcome.error is not None:
            return replace(
                self,
                errors=self.errors + (outcome.error,),
                files_skipped=self.files_skipped + 1,
            )
        return replace(
            self,
            contexts=self.contexts + outcome.contexts,
            edges=self.edges + outcome.edges,
            files_processed=self.files_processed + 1,
        )

    def add_contexts(self, contexts: Iterable[Context]) -> ScanAccumulator:
        return replace(self, contexts=self.contexts + tuple(contexts))

    def merge(self, other: ScanAccumulator) -> ScanAccumulator:
        """Merge another accumulator into this one, keeping this one's order first."""
        return ScanAccumulator(
            contexts=self.contexts + other.contexts,
            edges=self.edges + other.edges,
            errors=self.errors + other.errors,
            files_processed=self.files_processed + other.files_processed,
            files_skipped=self.files_skipped + other.files_skipped,
            cancelled=self.cancelled or other.cancelled,
        )


def fold_outcomes(outcomes: Iterable[FileScanOutcome]) -> ScanAccumulator:
    """Fold outcomes in file-enumeration order, whatever order they finished in."""
    accumulator = ScanAccumulator()
    for outcome in sorted(outcomes, key=lambda o: o.index):
        accumulator = accumulator.add_outcome(outcome)
    return accumulator


def dedupe_contexts(contexts: Iterable[Context]) -> list[Context]:
    """Drop contexts whose display name was already seen, keeping the first."""
    seen: set[str] = set()
    unique: list[Context] = []
    for context in contexts:
        if context.display_name in seen:
            continue
        seen.add(context.display_name)
        unique.append(context)
    return unique


# =============================================================================
# Fan-out
# =============================================================================

ScanFunc = Callable[[int, str, str], FileScanOutcome]


def _failed(index: int, path: str, kind: ScanErrorKind, error: Exception) -> FileScanOutcome:
    return FileScanOutcome(
        index=index,
        path=path,
        error=ScanError(path=path, kind=kind, message=str(error)),
    )


def _read_and_scan(
    source: FileSource,
    index: int,
    path: str,
    scan: ScanFunc,
    token: CancellationToken | None,
) -> FileScanOutcome:
    """Scan one file. Failures become error outcomes and never propagate."""
    if is_cancelled(token):
        return FileScanOutcome(index=index, path=path, skipped=True)
    try:
        text = source.read_text(path)
    except Exception as e:
        logger.warning("Skipping unreadable file %s: %s", path, e)
        return _failed(index, path, ScanErrorKind.FILE_UNREADABLE, e)

    try:
        return scan(index, path, text)
    except Exception as e:
        logger.warning("Scan of %s failed: %s", path, e)
        return _failed(index, path, ScanErrorKind.SCAN_FAILED, e)


def scan_files(
    source: FileSource,
    paths: Sequence[str],
    scan: ScanFunc,
    token: CancellationToken | None = None,
    max_workers: int | None = None,
) -> ScanAccumulator:
    """Read and scan every path, in parallel when worthwhile.

    Args:
        source: Where file text comes from
        paths: Theme-relative paths in enumeration order
        scan: ``scan(index, path, text)`` producing one file's outcome
        token: Checked before each read; set it to abandon outstanding reads
        max_workers: Thread count (default: min(8, cpu count)); 1 disables threads

    Returns:
        A fresh accumulator holding the outcomes in enumeration order
    """
    use_parallel = len(paths) >= _PARALLEL_THRESHOLD and max_workers != 1

    if not use_parallel:
        outcomes = [
            _read_and_scan(source, index, path, scan, token)
            for index, path in enumerate(paths)
        ]
        return fold_outcomes(outcomes)

    workers = max_workers or min(8, (os.cpu_count() or 4))
    outcomes: list[FileScanOutcome] = []

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_read_and_scan, source, index, path, scan, token)
            for index, path in enumerate(paths)
        ]

        for future in as_completed(futures):
            outcomes.append(future.result())

    return fold_outcomes(outcomes)
