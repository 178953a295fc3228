"""fdu: sum the sizes of the files below one or more directories."""

from __future__ import annotations

import argparse
import math
import os
import stat
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional, Union

_UNITS = ("B", "K", "M", "G", "T", "P")


def _collect(path: Path, entries: list[Path], max_depth: float, depth: int) -> None:
    if depth >= max_depth:
        return
    with os.scandir(path) as listing:
        for entry in listing:
            entry_path = Path(entry.path)
            entries.append(entry_path)
            if entry_path.is_dir():
                _collect(entry_path, entries, max_depth, depth + 1)


def collect_entries(path: Union[str, Path], max_depth: Optional[int] = None) -> list[Path]:
    """List every entry below path, descending at most max_depth levels."""
    entries: list[Path] = []
    limit = math.inf if max_depth is None else max_depth
    _collect(Path(path), entries, limit, 0)
    return entries


def _file_size(path: Path) -> int:
    try:
        info = os.stat(path)
    except OSError:
        return 0
    return info.st_size if stat.S_ISREG(info.st_mode) else 0


def _total_size(entries: Iterable[Path], threads: Optional[int]) -> int:
    with ThreadPoolExecutor(max_workers=threads) as pool:
        return sum(pool.map(_file_size, entries))


def calculate_directory_size(
    path: Union[str, Path], max_depth: Optional[int] = None
) -> int:
    """Total size in bytes of the regular files found below path."""
    return _total_size(collect_entries(path, max_depth), None)


def format_human_size(size: int) -> str:
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{int(value)}B"
    return f"{value:.1f}{_UNITS[unit]}"


def _non_negative(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        value = -1
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid non-negative integer: {text!r}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fdu",
        description="Parallel disk usage analyzer",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this help and exit")
    parser.add_argument("-V", "--version", action="version", version="fdu 0.1.0")
    parser.add_argument("paths", nargs="*", type=Path, default=[Path(".")],
                        help="Directories to analyze")
    parser.add_argument("-h", "--human-readable", action="store_true",
                        help="Show human-readable sizes")
    parser.add_argument("-s", "--summarize", action="store_true",
                        help="Show directory totals only")
    parser.add_argument("-d", "--max-depth", type=_non_negative,
                        help="Maximum depth to descend")
    parser.add_argument("-j", "--threads", type=_non_negative,
                        help="Number of threads (default: CPU cores)")
    return parser


def _style(text: str, codes: str, enabled: bool) -> str:
    return f"\x1b[{codes}m{text}\x1b[0m" if enabled else text


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    colors = sys.stdout.isatty()
    threads = args.threads or None

    print(_style("fdu - Parallel Disk Usage Analyzer", "1;36", colors))
    print(_style("━" * 51, "2", colors))

    for path in args.paths:
        try:
            size = _total_size(collect_entries(path, args.max_depth), threads)
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        size_str = format_human_size(size) if args.human_readable else str(size)
        print(f"{_style(size_str, '1;33', colors)} {_style(str(path), '34', colors)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())