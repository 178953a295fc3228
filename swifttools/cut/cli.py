"""Command-line options of the field extraction tool."""

from __future__ import annotations

import argparse
import os
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from swifttools.cut.errors import InvalidFieldSelectorError

_USIZE = re.compile(r"\+?[0-9]+")


class OutputFormat(Enum):
    TEXT = "text"
    CSV = "csv"
    JSON = "json"


class ColorOption(Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass
class FieldSelector:
    """Selected fields: 0-based indices, inclusive 0-based ranges and header names."""

    indices: list[int] = field(default_factory=list)
    ranges: list[tuple[int, int]] = field(default_factory=list)
    names: list[str] = field(default_factory=list)


def _parse_usize(text: str) -> Optional[int]:
    if not _USIZE.fullmatch(text):
        return None
    value = int(text)
    return value if value < 2**64 else None


@dataclass
class Args:
    fields: str
    files: list[Path] = field(default_factory=list)
    delimiter: Optional[str] = None
    tab_delimiter: bool = False
    space_delimiter: bool = False
    csv_mode: bool = False
    output_delimiter: Optional[str] = None
    format: OutputFormat = OutputFormat.TEXT
    has_header: bool = False
    skip_header: bool = False
    line_numbers: bool = False
    zero_terminated: bool = False
    skip_lines: int = 0
    max_lines: int = 0
    color: ColorOption = ColorOption.AUTO
    threads: Optional[int] = None
    buffer_size_kb: int = 64
    non_empty_only: bool = False
    verbose: bool = False

    def should_use_colors(self) -> bool:
        if self.color is ColorOption.ALWAYS:
            return True
        if self.color is ColorOption.NEVER:
            return False
        return sys.stdout.isatty()

    def thread_count(self) -> int:
        return self.threads if self.threads is not None else (os.cpu_count() or 1)

    def buffer_size_bytes(self) -> int:
        return self.buffer_size_kb * 1024

    def input_delimiter(self) -> Optional[str]:
        if self.tab_delimiter:
            return "\t"
        if self.space_delimiter:
            return " "
        return self.delimiter

    def effective_output_delimiter(self) -> Optional[str]:
        if self.output_delimiter is not None:
            return self.output_delimiter
        return self.input_delimiter()

    def is_json_output(self) -> bool:
        return self.format is OutputFormat.JSON

    def is_csv_output(self) -> bool:
        return self.format is OutputFormat.CSV

    def parse_field_selector(self) -> FieldSelector:
        """Parse the field list such as "1,3,5-7" or "name,age"."""
        selector = FieldSelector()
        for raw in self.fields.split(","):
            part = raw.strip()
            if not part:
                continue

            dash = part.find("-")
            if 0 < dash < len(part) - 1:
                start = _parse_usize(part[:dash])
                end = _parse_usize(part[dash + 1:])
                if start is not None and end is not None:
                    if start == 0 or end == 0:
                        raise InvalidFieldSelectorError("Field indices must be >= 1")
                    if start > end:
                        raise InvalidFieldSelectorError(
                            f"Invalid range: {start}-{end} (start > end)"
                        )
                    selector.ranges.append((start - 1, end - 1))
                    continue

            index = _parse_usize(part)
            if index is None:
                selector.names.append(part)
            elif index == 0:
                raise InvalidFieldSelectorError("Field indices must be >= 1")
            else:
                selector.indices.append(index - 1)

        if not (selector.indices or selector.ranges or selector.names):
            raise InvalidFieldSelectorError("No valid fields specified")
        return selector

    def should_process_line(self, line_number: int) -> bool:
        if line_number < self.skip_lines:
            return False
        if self.max_lines > 0 and line_number >= self.skip_lines + self.max_lines:
            return False
        return True


def _usize(text: str) -> int:
    value = _parse_usize(text)
    if value is None:
        raise argparse.ArgumentTypeError(f"invalid non-negative integer: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fcut",
        description="Ultra-fast field extraction tool for delimited data and logs",
    )
    parser.add_argument("--version", action="version", version="fcut 0.1.0")
    parser.add_argument("files", nargs="*", type=Path, metavar="FILE",
                        help="Input files (stdin if not specified)")
    parser.add_argument("-f", "--fields", required=True, metavar="LIST",
                        help='Fields to extract (e.g., "1,3,5-7" or "name,age,city")')
    parser.add_argument("-d", "--delimiter", metavar="DELIM",
                        help="Input field delimiter (auto-detect if not specified)")
    parser.add_argument("-t", "--tab", dest="tab_delimiter", action="store_true",
                        help="Use tab as delimiter")
    parser.add_argument("-s", "--space", dest="space_delimiter", action="store_true",
                        help="Use space as delimiter (collapse multiple spaces)")
    parser.add_argument("-c", "--csv", dest="csv_mode", action="store_true",
                        help="Enable CSV mode with quote handling")
    parser.add_argument("-o", "--output-delimiter", metavar="DELIM",
                        help="Output field delimiter (default: same as input)")
    parser.add_argument("--format", choices=[f.value for f in OutputFormat],
                        default=OutputFormat.TEXT.value, help="Output format")
    parser.add_argument("--header", dest="has_header", action="store_true",
                        help="First line contains field headers")
    parser.add_argument("--no-header", dest="skip_header", action="store_true",
                        help="Skip header line (don't output it)")
    parser.add_argument("-n", "--line-numbers", action="store_true",
                        help="Add line numbers to output")
    parser.add_argument("-z", "--zero-terminated", action="store_true",
                        help="Use null character as line separator")
    parser.add_argument("--skip-lines", type=_usize, default=0, metavar="N",
                        help="Skip N lines from start")
    parser.add_argument("--max-lines", type=_usize, default=0, metavar="N",
                        help="Process only N lines (0 = unlimited)")
    parser.add_argument("--color", choices=[c.value for c in ColorOption],
                        default=ColorOption.AUTO.value, help="Control colored output")
    parser.add_argument("-j", "--threads", type=_usize,
                        help="Number of worker threads (default: CPU cores)")
    parser.add_argument("--buffer-size", dest="buffer_size_kb", type=_usize, default=64,
                        help="Buffer size for I/O operations (in KB)")
    parser.add_argument("--non-empty", dest="non_empty_only", action="store_true",
                        help="Only output non-empty lines")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print verbose debugging information")
    return parser


def parse_args(argv=None) -> Args:
    """Parse command-line arguments into Args."""
    ns = build_parser().parse_args(argv)
    return Args(
        fields=ns.fields,
        files=list(ns.files),
        delimiter=ns.delimiter,
        tab_delimiter=ns.tab_delimiter,
        space_delimiter=ns.space_delimiter,
        csv_mode=ns.csv_mode,
        output_delimiter=ns.output_delimiter,
        format=OutputFormat(ns.format),
        has_header=ns.has_header,
        skip_header=ns.skip_header,
        line_numbers=ns.line_numbers,
        zero_terminated=ns.zero_terminated,
        skip_lines=ns.skip_lines,
        max_lines=ns.max_lines,
        color=ColorOption(ns.color),
        threads=ns.threads,
        buffer_size_kb=ns.buffer_size_kb,
        non_empty_only=ns.non_empty_only,
        verbose=ns.verbose,
    )