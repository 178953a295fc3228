"""The search engine: walk, filter and report matching files."""

from __future__ import annotations

import os
import re
import sys
import time
from enum import IntEnum
from typing import Optional, TextIO

from swifttools.find.cli import Args
from swifttools.find.file_walker import FileWalker, WalkStats
from swifttools.find.output import OutputFormatter, SearchStats
from swifttools.find.pattern_matcher import PatternError, PatternMatcher
from swifttools.find.worker import BatchProcessor, ProcessingResult, ProcessingStats

_BATCH_SIZE = 2000


def _verbose() -> bool:
    return "FFIND_VERBOSE" in os.environ


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty()) if isatty is not None else False
    except ValueError:
        return False


class SearchEngine:
    """Coordinates walking, filtering and output for one set of options."""

    def __init__(
        self,
        args: Args,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ) -> None:
        try:
            args.validate()
        except ValueError as exc:
            raise ValueError(f"Invalid arguments: {exc}") from exc

        self.args = args
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.pattern_matcher = PatternMatcher(args)
        self.file_walker = FileWalker(args)
        self.output_formatter = OutputFormatter(
            not args.no_color and _is_tty(self.out),
            args.long_format,
            args.print0,
            args.json_output,
        )
        self.batch_processor = BatchProcessor(
            self.pattern_matcher, args.thread_count(), _BATCH_SIZE
        )

    def _note(self, message: str) -> None:
        if _verbose():
            print(message, file=self.err)

    def run(self) -> int:
        """Run the search, write the results, and return the number of matches."""
        start = time.monotonic()

        self._note("Starting filesystem walk...")
        walk_results = self.file_walker.walk()
        walk_stats = self.file_walker.stats()
        self._note(f"Walk completed: {len(walk_results)} entries found")

        self._note("Starting file processing...")
        results = self.batch_processor.process_in_batches(walk_results)
        processing_stats = self.batch_processor.stats(time.monotonic() - start)
        self._note(f"Processing completed: {len(results)} matches found")

        if self.args.count_only:
            print(self.output_formatter.format_count(len(results)), file=self.out)
        elif self.args.json_output:
            self._output_json(results, walk_stats, processing_stats)
        else:
            self._output_normal(results)

        if self.args.show_stats:
            self._show_statistics(walk_stats, processing_stats)

        return len(results)

    def _output_json(
        self,
        results: list[ProcessingResult],
        walk_stats: WalkStats,
        processing_stats: ProcessingStats,
    ) -> None:
        infos = [result.file_info for result in results]
        stats = SearchStats(
            total_found=len(infos),
            files_visited=walk_stats.files_visited,
            dirs_visited=walk_stats.dirs_visited,
            processing_time_ms=processing_stats.processing_time_ms,
        )
        print(self.output_formatter.format_json_results(infos, stats), file=self.out)

    def _output_normal(self, results: list[ProcessingResult]) -> None:
        for result in results:
            path = result.file_info.path
            try:
                metadata: Optional[os.stat_result] = os.stat(path)
            except OSError:
                metadata = None
            text = self.output_formatter.format_path(path, metadata, result.file_info.depth)
            if text:
                self.out.write(text)
                if not self.args.print0:
                    self.out.write("\n")

    def _show_statistics(
        self, walk_stats: WalkStats, processing_stats: ProcessingStats
    ) -> None:
        stats = SearchStats(
            total_found=processing_stats.total_matched,
            files_visited=walk_stats.files_visited,
            dirs_visited=walk_stats.dirs_visited,
            processing_time_ms=processing_stats.processing_time_ms,
        )
        text = self.output_formatter.format_stats(stats)
        if self.args.json_output:
            print(text, file=self.out)
            return
        print(text, file=self.err)
        print(
            f"  Processing throughput: {processing_stats.throughput_per_second:.1f} entries/sec",
            file=self.err,
        )
        if processing_stats.processing_time_ms > 0:
            rate = walk_stats.total_entries() * 1000.0 / processing_stats.processing_time_ms
            print(f"  Entry processing rate: {rate:.0f} entries/ms", file=self.err)


class SearchComplexity(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2

    def recommended_thread_count(self, available_cores: int) -> int:
        if self is SearchComplexity.LOW:
            return min(available_cores, 4)
        if self is SearchComplexity.MEDIUM:
            return available_cores
        return available_cores * 2

    def recommended_batch_size(self) -> int:
        return {
            SearchComplexity.LOW: 5000,
            SearchComplexity.MEDIUM: 2000,
            SearchComplexity.HIGH: 1000,
        }[self]


def validate_search_pattern(pattern: str, use_regex: bool) -> None:
    """Raise PatternError if the pattern is unusable."""
    if use_regex:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise PatternError(f"Invalid regex pattern '{pattern}': {exc}") from exc
        return
    if not pattern:
        raise PatternError("Empty search pattern")
    if pattern.count("**") > 1:
        raise PatternError("Multiple '**' patterns can cause performance issues")


def estimate_search_complexity(args: Args) -> SearchComplexity:
    complexity = SearchComplexity.LOW
    if args.has_pattern_filters():
        complexity = max(complexity, SearchComplexity.MEDIUM)
        if args.use_regex:
            complexity = max(complexity, SearchComplexity.HIGH)
    if args.has_size_filters() or args.has_time_filters():
        complexity = max(complexity, SearchComplexity.MEDIUM)
    if args.max_depth is not None and args.max_depth > 10:
        complexity = max(complexity, SearchComplexity.MEDIUM)
    if args.follow_symlinks:
        complexity = max(complexity, SearchComplexity.HIGH)
    return complexity