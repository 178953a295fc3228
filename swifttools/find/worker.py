"""Parallel evaluation of walked entries against the search filters."""

from __future__ import annotations

import os
import stat
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional, Union

from swifttools.find.file_walker import WalkResult
from swifttools.find.output import FileInfo, format_permissions, format_time_iso
from swifttools.find.pattern_matcher import PatternMatcher

Duration = Union[float, timedelta]

DEFAULT_BATCH_SIZE = 1000


def _seconds(duration: Duration) -> float:
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


def _verbose() -> bool:
    return "FFIND_VERBOSE" in os.environ


@dataclass(frozen=True)
class ProcessingResult:
    """An entry that passed the filters, with its details."""

    file_info: FileInfo
    matches: bool


@dataclass(frozen=True)
class ProcessingStats:
    total_processed: int
    total_matched: int
    processing_time_ms: int
    throughput_per_second: float


class WorkerPool:
    """Checks entries against a PatternMatcher on a pool of threads."""

    def __init__(self, pattern_matcher: PatternMatcher, thread_count: int) -> None:
        self.pattern_matcher = pattern_matcher
        self.thread_count = thread_count
        self._lock = threading.Lock()
        self._processed = 0
        self._matched = 0

    def process_files(self, walk_results: Iterable[WalkResult]) -> list[ProcessingResult]:
        """Return the matching entries, in the order they were given."""
        items = list(walk_results)
        workers = self.thread_count if self.thread_count > 0 else None
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(self._evaluate, items))
        return [result for result in outcomes if result is not None]

    def _evaluate(self, walk_result: WalkResult) -> Optional[ProcessingResult]:
        try:
            result = self._process_single_file(walk_result)
        except (OSError, ValueError) as exc:
            print(
                f"Warning: Failed to process {walk_result.path}: {exc}",
                file=sys.stderr,
            )
            result = None
        with self._lock:
            self._processed += 1
            if result is not None and result.matches:
                self._matched += 1
        return result

    def _process_single_file(self, walk_result: WalkResult) -> Optional[ProcessingResult]:
        path = walk_result.path
        try:
            metadata = os.stat(path)
        except OSError as exc:
            if _verbose():
                print(
                    f"Warning: Cannot read metadata for {path}: {exc}",
                    file=sys.stderr,
                )
            return None

        if not self.pattern_matcher.matches(path, metadata):
            return None

        mode = metadata.st_mode
        if stat.S_ISDIR(mode):
            file_type = "directory"
        elif stat.S_ISLNK(mode):
            file_type = "symlink"
        else:
            file_type = "file"
        try:
            modified: Optional[str] = format_time_iso(metadata.st_mtime)
        except ValueError:
            modified = None

        info = FileInfo(
            path=os.fspath(path),
            file_type=file_type,
            size=metadata.st_size if stat.S_ISREG(mode) else None,
            modified=modified,
            permissions=format_permissions(metadata),
            depth=walk_result.depth,
        )
        return ProcessingResult(file_info=info, matches=True)

    def stats(self, processing_time: Duration) -> ProcessingStats:
        """Counters so far, with throughput over processing_time (seconds or timedelta)."""
        with self._lock:
            processed, matched = self._processed, self._matched
        elapsed_ms = int(_seconds(processing_time) * 1000)
        throughput = processed / (elapsed_ms / 1000.0) if elapsed_ms > 0 else 0.0
        return ProcessingStats(
            total_processed=processed,
            total_matched=matched,
            processing_time_ms=elapsed_ms,
            throughput_per_second=throughput,
        )


class BatchProcessor:
    """Feeds entries to a WorkerPool in fixed-size batches."""

    def __init__(
        self,
        pattern_matcher: PatternMatcher,
        thread_count: int,
        batch_size: Optional[int] = None,
    ) -> None:
        size = DEFAULT_BATCH_SIZE if batch_size is None else batch_size
        if size < 1:
            raise ValueError("batch size must be at least 1")
        self.batch_size = size
        self.worker_pool = WorkerPool(pattern_matcher, thread_count)

    def process_in_batches(self, walk_results: Iterable[WalkResult]) -> list[ProcessingResult]:
        items = list(walk_results)
        results: list[ProcessingResult] = []
        for start in range(0, len(items), self.batch_size):
            results.extend(
                self.worker_pool.process_files(items[start:start + self.batch_size])
            )
        return results

    def stats(self, processing_time: Duration) -> ProcessingStats:
        return self.worker_pool.stats(processing_time)