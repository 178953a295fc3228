"""Name, type, size and time filters applied to file system entries."""

from __future__ import annotations

import os
import re
import stat
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from swifttools.find.cli import Args

_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")
_SECONDS_PER_DAY = 24 * 60 * 60
_SIZE_MULTIPLIERS = {
    "": 1,
    "c": 1,
    "b": 512,
    "k": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
}
_GLOB_ESCAPED = set("^$.\\|+(){}")


class PatternError(ValueError):
    """Raised when a filter specification is invalid or cannot be resolved."""


class FileType(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class ComparisonOp(Enum):
    EQUAL = "="
    GREATER = "+"
    LESS = "-"

    def _holds(self, actual: int, target: int) -> bool:
        if self is ComparisonOp.GREATER:
            return actual > target
        if self is ComparisonOp.LESS:
            return actual < target
        return actual == target


def _split_operator(spec: str) -> tuple[ComparisonOp, str]:
    if spec[:1] in ("+", "-", "="):
        return ComparisonOp(spec[0]), spec[1:]
    return ComparisonOp.EQUAL, spec


def _parse_unsigned(text: str, bits: int) -> Optional[int]:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value < 2**bits else None


def _glob_to_regex(pattern: str) -> str:
    parts = ["^"]
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        elif ch in _GLOB_ESCAPED:
            parts.append("\\" + ch)
        else:
            parts.append(ch)
    parts.append(r"\Z")
    return "".join(parts)


class GlobPattern:
    """A shell glob (anchored) or a regular expression (unanchored)."""

    def __init__(self, pattern: str, case_sensitive: bool, use_regex: bool) -> None:
        source = pattern if use_regex else _glob_to_regex(pattern)
        flags = 0 if case_sensitive else re.IGNORECASE
        try:
            self.regex = re.compile(source, flags)
        except re.error as exc:
            raise PatternError(f"Invalid pattern '{pattern}': {exc}") from exc
        self.pattern = pattern
        self.case_sensitive = case_sensitive

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None


@dataclass(frozen=True)
class SizeFilter:
    operator: ComparisonOp
    size_bytes: int

    @classmethod
    def parse(cls, spec: str) -> "SizeFilter":
        if not spec:
            raise PatternError("Empty size specification")
        operator, rest = _split_operator(spec)
        if not rest:
            raise PatternError("Missing size value")

        pos = next((i for i, ch in enumerate(rest) if ch.isalpha()), len(rest))
        number_str, suffix = rest[:pos], rest[pos:]
        number = _parse_unsigned(number_str, 64)
        if number is None:
            raise PatternError(f"Invalid size number: {number_str}")
        if suffix not in _SIZE_MULTIPLIERS:
            raise PatternError(f"Invalid size suffix: {suffix}")

        size_bytes = number * _SIZE_MULTIPLIERS[suffix]
        if size_bytes > _U64_MAX:
            raise PatternError("Size value too large")
        return cls(operator, size_bytes)

    def matches(self, file_size: int) -> bool:
        return self.operator._holds(file_size, self.size_bytes)


@dataclass(frozen=True)
class TimeFilter:
    operator: ComparisonOp
    days: int

    @classmethod
    def parse(cls, spec: str) -> "TimeFilter":
        if not spec:
            raise PatternError("Empty time specification")
        operator, rest = _split_operator(spec)
        days = _parse_unsigned(rest, 32)
        if days is None:
            raise PatternError(f"Invalid time value: {rest}")
        return cls(operator, days)

    def matches(self, file_time: float) -> bool:
        """Compare the age in whole days of a POSIX timestamp with the filter."""
        age = max(time.time() - file_time, 0.0)
        age_days = int(age) // _SECONDS_PER_DAY
        return self.operator._holds(age_days, self.days)


def parse_file_types(spec: str) -> set[FileType]:
    if spec in ("f", "file"):
        return {FileType.FILE}
    if spec in ("d", "dir", "directory"):
        return {FileType.DIRECTORY}
    if spec in ("l", "symlink"):
        return {FileType.SYMLINK}
    raise PatternError(f"Invalid file type: {spec}")


def parse_extensions(spec: str) -> set[str]:
    """Comma separated extensions, trimmed and lower-cased, empty ones dropped."""
    return {ext.strip().lower() for ext in spec.split(",") if ext.strip()}


def get_modification_time(path: Union[str, Path]) -> float:
    try:
        return os.stat(path).st_mtime
    except OSError as exc:
        raise PatternError(f"Failed to get metadata for {path}: {exc}") from exc


def _file_name(path: Path) -> str:
    name = path.name
    return "" if name == ".." else name


def _extension(path: Path) -> str:
    return path.suffix[1:].lower()


def _dir_is_empty(path: Union[str, Path]) -> bool:
    try:
        with os.scandir(path) as listing:
            return next(listing, None) is None
    except OSError:
        return False


class PatternMatcher:
    """Every filter requested in Args; an entry matches when all of them accept it."""

    def __init__(self, args: Args) -> None:
        def glob(pattern, case_sensitive):
            if pattern is None:
                return None
            return GlobPattern(pattern, case_sensitive, args.use_regex)

        self.name_pattern = glob(args.name, True)
        self.iname_pattern = glob(args.iname, False)
        self.path_pattern = glob(args.path, True)
        self.ipath_pattern = glob(args.ipath, False)

        self.file_types = (
            parse_file_types(args.file_type) if args.file_type is not None else None
        )
        self.allowed_extensions = (
            parse_extensions(args.extensions) if args.extensions is not None else None
        )
        self.excluded_extensions = (
            parse_extensions(args.exclude_extensions)
            if args.exclude_extensions is not None
            else None
        )

        self.size_filter = SizeFilter.parse(args.size) if args.size is not None else None
        self.empty_only = args.empty

        self.mtime_filter = TimeFilter.parse(args.mtime) if args.mtime is not None else None
        self.atime_filter = TimeFilter.parse(args.atime) if args.atime is not None else None
        self.ctime_filter = TimeFilter.parse(args.ctime) if args.ctime is not None else None
        self.newer_than = (
            get_modification_time(args.newer) if args.newer is not None else None
        )

    def matches(self, path: Union[str, Path], metadata: os.stat_result) -> bool:
        """Whether the entry at path, with its stat result, passes every filter."""
        as_path = Path(path)
        path_str = os.fspath(path)
        name = _file_name(as_path)

        for pattern in (self.name_pattern, self.iname_pattern):
            if pattern is not None and not pattern.matches(name):
                return False
        for pattern in (self.path_pattern, self.ipath_pattern):
            if pattern is not None and not pattern.matches(path_str):
                return False

        is_file = stat.S_ISREG(metadata.st_mode)
        is_dir = stat.S_ISDIR(metadata.st_mode)

        if self.file_types is not None:
            if is_file:
                kind = FileType.FILE
            elif is_dir:
                kind = FileType.DIRECTORY
            else:
                kind = FileType.SYMLINK
            if kind not in self.file_types:
                return False

        if self.allowed_extensions is not None:
            if _extension(as_path) not in self.allowed_extensions:
                return False
        if self.excluded_extensions is not None:
            if _extension(as_path) in self.excluded_extensions:
                return False

        if self.size_filter is not None and not self.size_filter.matches(metadata.st_size):
            return False

        if self.empty_only:
            if is_file and metadata.st_size > 0:
                return False
            if is_dir and not _dir_is_empty(path):
                return False

        if self.mtime_filter is not None and not self.mtime_filter.matches(metadata.st_mtime):
            return False
        if self.atime_filter is not None and not self.atime_filter.matches(metadata.st_atime):
            return False
        if self.ctime_filter is not None:
            created = getattr(metadata, "st_birthtime", None)
            if created is None:
                created = metadata.st_mtime
            if not self.ctime_filter.matches(created):
                return False

        if self.newer_than is not None and metadata.st_mtime <= self.newer_than:
            return False

        return True