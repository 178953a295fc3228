"""Rendering of search results as plain, long, null-separated or JSON output."""

from __future__ import annotations

import json
import os
import stat
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

_SIZE_UNITS = ("B", "K", "M", "G", "T")
_UNKNOWN_TIME = "????-??-?? ??:??:??"

_EXTENSION_STYLES = {
    **dict.fromkeys(
        ("rs", "py", "js", "ts", "go", "c", "cpp", "h", "hpp", "java", "kt"), "32"
    ),
    **dict.fromkeys(("json", "yaml", "yml", "toml", "xml", "ini", "conf"), "33"),
    **dict.fromkeys(("md", "txt", "rst", "tex"), "37"),
    **dict.fromkeys(("zip", "tar", "gz", "bz2", "xz", "7z", "rar"), "31"),
    **dict.fromkeys(("png", "jpg", "jpeg", "gif", "bmp", "svg", "webp"), "35"),
    **dict.fromkeys(("mp3", "wav", "ogg", "mp4", "avi", "mkv", "webm"), "1;35"),
}


def _paint(text: str, codes: str) -> str:
    return f"\x1b[{codes}m{text}\x1b[0m"


@dataclass
class FileInfo:
    path: str
    file_type: str
    size: Optional[int] = None
    modified: Optional[str] = None
    permissions: Optional[str] = None
    depth: int = 0


@dataclass
class SearchStats:
    total_found: int
    files_visited: int
    dirs_visited: int
    processing_time_ms: int


@dataclass
class SearchResults:
    files: list[FileInfo] = field(default_factory=list)
    stats: Optional[SearchStats] = None


def format_permissions(metadata: os.stat_result) -> str:
    """A ten-character mode string such as "-rw-r--r--"."""
    mode = metadata.st_mode
    is_dir = stat.S_ISDIR(mode)
    if os.name == "nt":
        readonly = not mode & stat.S_IWRITE
        if is_dir:
            return "dr-xr-xr-x" if readonly else "drwxrwxrwx"
        return "-r--r--r--" if readonly else "-rw-rw-rw-"

    if is_dir:
        kind = "d"
    elif stat.S_ISLNK(mode):
        kind = "l"
    else:
        kind = "-"
    bits = (
        (0o400, "r"), (0o200, "w"), (0o100, "x"),
        (0o040, "r"), (0o020, "w"), (0o010, "x"),
        (0o004, "r"), (0o002, "w"), (0o001, "x"),
    )
    return kind + "".join(char if mode & bit else "-" for bit, char in bits)


def format_size(size: int) -> str:
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{value:.0f}{_SIZE_UNITS[0]}"
    return f"{value:.1f}{_SIZE_UNITS[unit]}"


def _utc(timestamp: float) -> datetime:
    if timestamp < 0:
        raise ValueError("Time conversion error: timestamp before the epoch")
    try:
        return datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError("Invalid timestamp") from exc


def format_time(timestamp: float) -> str:
    """UTC "YYYY-MM-DD HH:MM:SS" for a POSIX timestamp, or question marks."""
    try:
        return _utc(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return _UNKNOWN_TIME


def format_time_iso(timestamp: float) -> str:
    """UTC ISO 8601 time for a POSIX timestamp; raises ValueError if unrepresentable."""
    return _utc(timestamp).strftime("%Y-%m-%dT%H:%M:%SZ")


class OutputFormatter:
    """Formats matched paths, counts and statistics."""

    def __init__(
        self, use_colors: bool, long_format: bool, print0: bool, json_output: bool
    ) -> None:
        self.use_colors = use_colors and not json_output
        self.long_format = long_format
        self.print0 = print0
        self.json_output = json_output

    def format_path(
        self,
        path: Union[str, Path],
        metadata: Optional[os.stat_result] = None,
        depth: int = 0,
    ) -> str:
        if self.json_output:
            return ""
        path_str = os.fspath(path)
        if self.print0:
            return f"{path_str}\0"
        if not self.long_format:
            return self._colorize(path_str, metadata) if self.use_colors else path_str

        output = ""
        if metadata is not None:
            if stat.S_ISDIR(metadata.st_mode):
                size = "     <DIR>"
            else:
                size = f"{format_size(metadata.st_size):>10}"
            output = (
                f"{format_permissions(metadata)} {size} "
                f"{format_time(metadata.st_mtime)} "
            )
        shown = self._colorize(path_str, metadata) if self.use_colors else path_str
        return output + shown

    def format_json_results(
        self, file_infos: list[FileInfo], stats: SearchStats
    ) -> str:
        results = SearchResults(files=list(file_infos), stats=stats)
        return json.dumps(asdict(results), indent=2, ensure_ascii=False)

    def format_count(self, count: int) -> str:
        return f'{{"count": {count}}}' if self.json_output else str(count)

    def format_stats(self, stats: SearchStats) -> str:
        if self.json_output:
            return json.dumps(asdict(stats), indent=2)
        return (
            "Search completed:\n"
            f"  Files found: {stats.total_found}\n"
            f"  Files visited: {stats.files_visited}\n"
            f"  Directories visited: {stats.dirs_visited}\n"
            f"  Processing time: {stats.processing_time_ms}ms"
        )

    @staticmethod
    def _colorize(path_str: str, metadata: Optional[os.stat_result]) -> str:
        if metadata is not None:
            mode = metadata.st_mode
            if stat.S_ISDIR(mode):
                return _paint(path_str, "1;34")
            if stat.S_ISLNK(mode):
                return _paint(path_str, "36")
            if os.name != "nt" and mode & 0o111:
                return _paint(path_str, "1;32")
        style = _EXTENSION_STYLES.get(Path(path_str).suffix[1:].lower())
        return _paint(path_str, style) if style else path_str

    def create_file_info(
        self, path: Union[str, Path], metadata: os.stat_result, depth: int
    ) -> FileInfo:
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
        return FileInfo(
            path=os.fspath(path),
            file_type=file_type,
            size=metadata.st_size if stat.S_ISREG(mode) else None,
            modified=modified,
            permissions=format_permissions(metadata),
            depth=depth,
        )