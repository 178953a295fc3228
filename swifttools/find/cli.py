"""Command-line options of the file finder."""

from __future__ import annotations

import argparse
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

_UNSIGNED = re.compile(r"\+?[0-9]+")
_SIGNS = ("+", "-", "=")
_SIZE_SUFFIXES = ("", "c", "b", "k", "M", "G", "T")
_FILE_TYPES = ("f", "d", "l", "file", "dir", "directory", "symlink")


def _parse_unsigned(text: str, bits: int) -> Optional[int]:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value < 2**bits else None


def is_valid_size_spec(s: str) -> bool:
    """True for specs such as "100", "+100k", "-1M" or "=50G"."""
    if not s:
        return False
    rest = s[1:] if s.startswith(_SIGNS) else s
    if not rest:
        return False
    pos = next((i for i, ch in enumerate(rest) if ch.isalpha()), len(rest))
    number_part, suffix = rest[:pos], rest[pos:]
    if _parse_unsigned(number_part, 64) is None:
        return False
    return suffix in _SIZE_SUFFIXES


def is_valid_time_spec(s: str) -> bool:
    """True for day counts such as "7", "+7", "-1" or "=0"."""
    if not s:
        return False
    rest = s[1:] if s.startswith(_SIGNS) else s
    return _parse_unsigned(rest, 32) is not None


@dataclass
class Args:
    paths: list[Path] = field(default_factory=lambda: [Path(".")])
    name: Optional[str] = None
    iname: Optional[str] = None
    path: Optional[str] = None
    ipath: Optional[str] = None
    use_regex: bool = False
    file_type: Optional[str] = None
    extensions: Optional[str] = None
    exclude_extensions: Optional[str] = None
    size: Optional[str] = None
    empty: bool = False
    mtime: Optional[str] = None
    atime: Optional[str] = None
    ctime: Optional[str] = None
    newer: Optional[Path] = None
    max_depth: Optional[int] = None
    min_depth: Optional[int] = None
    follow_symlinks: bool = False
    search_hidden: bool = False
    respect_ignore: bool = True
    cross_filesystem: bool = False
    threads: Optional[int] = None
    max_open: Optional[int] = None
    print0: bool = False
    json_output: bool = False
    no_color: bool = False
    long_format: bool = False
    count_only: bool = False
    show_stats: bool = False
    print: bool = False
    sort_results: bool = False
    reverse_sort: bool = False

    def thread_count(self) -> int:
        return self.threads if self.threads is not None else (os.cpu_count() or 1)

    def max_open_files(self) -> int:
        return self.max_open if self.max_open is not None else 1024

    def search_paths(self) -> list[Path]:
        return list(self.paths) if self.paths else [Path(".")]

    def has_pattern_filters(self) -> bool:
        return any(p is not None for p in (self.name, self.iname, self.path, self.ipath))

    def has_size_filters(self) -> bool:
        return self.size is not None or self.empty

    def has_time_filters(self) -> bool:
        return any(t is not None for t in (self.mtime, self.atime, self.ctime, self.newer))

    def validate(self) -> None:
        """Raise ValueError if an option is malformed."""
        if self.file_type is not None and self.file_type not in _FILE_TYPES:
            raise ValueError(
                f"Invalid file type: '{self.file_type}'. "
                "Use f/file, d/dir/directory, or l/symlink"
            )

        if self.size is not None and not is_valid_size_spec(self.size):
            raise ValueError(
                f"Invalid size specification: '{self.size}'. "
                "Use format like '+100k', '-1M', '=50G'"
            )

        for label, value in (("mtime", self.mtime), ("atime", self.atime), ("ctime", self.ctime)):
            if value is not None and not is_valid_time_spec(value):
                raise ValueError(
                    f"Invalid {label} specification: '{value}'. "
                    "Use format like '+7', '-1', '=0'"
                )

        if (
            self.min_depth is not None
            and self.max_depth is not None
            and self.min_depth > self.max_depth
        ):
            raise ValueError("min-depth cannot be greater than max-depth")


def _non_negative(text: str) -> int:
    value = _parse_unsigned(text, 64)
    if value is None:
        raise argparse.ArgumentTypeError(f"invalid non-negative integer: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ffind",
        description="Ultra-fast parallel file finder - modern find alternative",
    )
    parser.add_argument("--version", action="version", version="ffind 0.1.0")
    parser.add_argument("paths", nargs="*", type=Path, metavar="PATH",
                        help="Paths to search (default: current directory)")

    parser.add_argument("-n", "--name",
                        help="Base of file name matches shell pattern (case sensitive)")
    parser.add_argument("--iname",
                        help="Base of file name matches shell pattern (case insensitive)")
    parser.add_argument("--path", help="File path matches shell pattern (case sensitive)")
    parser.add_argument("--ipath",
                        help="File path matches shell pattern (case insensitive)")
    parser.add_argument("-E", "--regex", dest="use_regex", action="store_true",
                        help="Use regular expressions instead of shell patterns")

    parser.add_argument("-t", "--type", dest="file_type",
                        help="File type (f=file, d=directory, l=symlink)")
    parser.add_argument("--ext", dest="extensions",
                        help='File extensions to include (e.g., "rs,py,js")')
    parser.add_argument("--not-ext", dest="exclude_extensions",
                        help="File extensions to exclude")

    parser.add_argument("-s", "--size", help='File size (e.g., "+100k", "-1M", "=50G")')
    parser.add_argument("--empty", action="store_true",
                        help="Empty files and directories")

    parser.add_argument("--mtime", help='Modified time in days (e.g., "+7", "-1", "=0")')
    parser.add_argument("--atime", help="Access time in days")
    parser.add_argument("--ctime", help="Status change time in days")
    parser.add_argument("--newer", type=Path, help="Files newer than reference file")

    parser.add_argument("--max-depth", type=_non_negative, help="Maximum search depth")
    parser.add_argument("--min-depth", type=_non_negative, help="Minimum search depth")

    parser.add_argument("-L", "--follow", dest="follow_symlinks", action="store_true",
                        help="Follow symbolic links")
    parser.add_argument("-H", "--hidden", dest="search_hidden", action="store_true",
                        help="Search hidden files and directories")
    parser.add_argument("--no-ignore", dest="respect_ignore", action="store_false",
                        help="Do not respect .gitignore files")
    parser.add_argument("--mount", dest="cross_filesystem", action="store_true",
                        help="Cross filesystem boundaries")

    parser.add_argument("-j", "--threads", type=_non_negative,
                        help="Number of worker threads (default: CPU cores)")
    parser.add_argument("--max-open", type=_non_negative,
                        help="Maximum number of open file descriptors")

    parser.add_argument("-0", "--print0", action="store_true",
                        help="Print results separated by null characters")
    parser.add_argument("--json", dest="json_output", action="store_true",
                        help="Output in JSON format")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-l", "--long", dest="long_format", action="store_true",
                        help="Show file details (size, mtime, permissions)")
    parser.add_argument("-c", "--count", dest="count_only", action="store_true",
                        help="Count matching files only")
    parser.add_argument("--stats", dest="show_stats", action="store_true",
                        help="Show statistics after search")

    parser.add_argument("--print", action="store_true",
                        help="Print matching files (default action)")
    parser.add_argument("--sort", dest="sort_results", action="store_true",
                        help="Sort results by name")
    parser.add_argument("-r", "--reverse", dest="reverse_sort", action="store_true",
                        help="Reverse sort order")
    return parser


def parse_args(argv=None) -> Args:
    """Parse command-line arguments into Args."""
    ns = build_parser().parse_args(argv)
    values = vars(ns)
    values["paths"] = list(values["paths"])
    return Args(**values)