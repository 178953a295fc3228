"""Directory traversal honouring hidden-file, ignore-file, depth and link options."""

from __future__ import annotations

import os
import re
import stat
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Union

from swifttools.find.cli import Args


@dataclass(frozen=True)
class WalkResult:
    """One entry found during a walk."""

    path: Path
    depth: int
    is_dir: bool
    is_symlink: bool


@dataclass(frozen=True)
class WalkStats:
    files_visited: int
    dirs_visited: int

    def total_entries(self) -> int:
        return self.files_visited + self.dirs_visited


@dataclass(frozen=True)
class _IgnoreRule:
    base: Path
    regex: re.Pattern
    negated: bool
    dir_only: bool
    anchored: bool


def _glob_regex(pattern: str) -> str:
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            if pattern.startswith("**/", i):
                out.append("(?:.*/)?")
                i += 3
                continue
            if pattern.startswith("**", i):
                out.append(".*")
                i += 2
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                out.append(re.escape(ch))
            else:
                body = pattern[i + 1:close].replace("\\", "\\\\")
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = close + 1
                continue
        elif ch == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


def _parse_rule(line: str, base: Path) -> Optional[_IgnoreRule]:
    text = line.rstrip(" \t\r\n")
    if not text or text.startswith("#"):
        return None
    negated = text.startswith("!")
    if negated:
        text = text[1:]
    dir_only = text.endswith("/")
    text = text.rstrip("/")
    if not text:
        return None
    anchored = "/" in text
    text = text.lstrip("/")
    try:
        regex = re.compile(_glob_regex(text))
    except re.error:
        return None
    return _IgnoreRule(base, regex, negated, dir_only, anchored)


def _read_rules(file: Path, base: Path) -> list[_IgnoreRule]:
    try:
        text = file.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return []
    return [rule for rule in (_parse_rule(line, base) for line in text.splitlines()) if rule]


def _load_rules(directory: Path, in_git: bool) -> list[_IgnoreRule]:
    rules: list[_IgnoreRule] = []
    if in_git:
        git_dir = directory / ".git"
        if git_dir.is_dir():
            rules.extend(_read_rules(git_dir / "info" / "exclude", directory))
        rules.extend(_read_rules(directory / ".gitignore", directory))
    rules.extend(_read_rules(directory / ".ignore", directory))
    return rules


def _is_ignored(rules: list[_IgnoreRule], abs_path: Path, is_dir: bool) -> bool:
    ignored = False
    for rule in rules:
        if rule.dir_only and not is_dir:
            continue
        try:
            relative = abs_path.relative_to(rule.base)
        except ValueError:
            continue
        text = relative.as_posix() if rule.anchored else abs_path.name
        if rule.regex.fullmatch(text):
            ignored = not rule.negated
    return ignored


def _warn(error: object) -> None:
    print(f"Warning: {error}", file=sys.stderr)


class FileWalker:
    """Walks every search path of Args and collects the entries found."""

    def __init__(self, args: Args) -> None:
        self.args = args
        self._lock = threading.Lock()
        self._files_visited = 0
        self._dirs_visited = 0

    def _count(self, is_dir: bool) -> None:
        with self._lock:
            if is_dir:
                self._dirs_visited += 1
            else:
                self._files_visited += 1

    def walk(self) -> list[WalkResult]:
        paths = [Path(p) for p in self.args.search_paths()]
        with ThreadPoolExecutor(max_workers=max(self.args.thread_count(), 1)) as pool:
            per_path = list(pool.map(self._walk_path, paths))
        results = [result for group in per_path for result in group]
        if self.args.sort_results:
            results.sort(key=lambda r: r.path.parts, reverse=self.args.reverse_sort)
        return results

    def _walk_path(self, root: Path) -> list[WalkResult]:
        if root.is_file():
            self._count(False)
            return [WalkResult(root, 0, False, False)]

        results: list[WalkResult] = []
        try:
            info = os.stat(root)
        except OSError as exc:
            _warn(exc)
            return results

        abs_root = Path(os.path.abspath(root))
        rules: list[_IgnoreRule] = []
        in_git = False
        if self.args.respect_ignore:
            for ancestor in reversed(abs_root.parents):
                in_git = in_git or (ancestor / ".git").exists()
                rules.extend(_load_rules(ancestor, in_git))

        is_symlink = root.is_symlink() and not self.args.follow_symlinks
        self._visit(
            root, abs_root, 0, stat.S_ISDIR(info.st_mode), is_symlink,
            rules, in_git, frozenset({(info.st_dev, info.st_ino)}), info.st_dev, results,
        )
        return results

    def _visit(
        self,
        path: Path,
        abs_path: Path,
        depth: int,
        is_dir: bool,
        is_symlink: bool,
        rules: list[_IgnoreRule],
        in_git: bool,
        ancestors: frozenset,
        root_dev: int,
        results: list[WalkResult],
    ) -> None:
        args = self.args
        if depth >= (args.min_depth or 0):
            self._count(is_dir)
            results.append(WalkResult(path, depth, is_dir, is_symlink))

        if not is_dir:
            return
        if args.max_depth is not None and depth >= args.max_depth:
            return

        if args.respect_ignore:
            in_git = in_git or (abs_path / ".git").exists()
            rules = rules + _load_rules(abs_path, in_git)

        try:
            with os.scandir(path) as listing:
                entries = sorted(listing, key=lambda e: e.name)
        except OSError as exc:
            _warn(exc)
            return

        for entry in entries:
            name = entry.name
            if not args.search_hidden and name.startswith("."):
                continue
            child = path / name
            child_abs = abs_path / name
            try:
                if args.follow_symlinks:
                    info = os.stat(child)
                    child_is_dir = stat.S_ISDIR(info.st_mode)
                    child_is_symlink = False
                else:
                    info = os.lstat(child)
                    child_is_dir = stat.S_ISDIR(info.st_mode)
                    child_is_symlink = stat.S_ISLNK(info.st_mode)
            except OSError as exc:
                _warn(exc)
                continue

            key = (info.st_dev, info.st_ino)
            if child_is_dir and key in ancestors:
                _warn(f"File system loop found: {child} points to an ancestor")
                continue
            if args.respect_ignore and _is_ignored(rules, child_abs, child_is_dir):
                continue
            if child_is_dir and not args.cross_filesystem and info.st_dev != root_dev:
                continue

            self._visit(
                child, child_abs, depth + 1, child_is_dir, child_is_symlink,
                rules, in_git, ancestors | {key} if child_is_dir else ancestors,
                root_dev, results,
            )

    def stats(self) -> WalkStats:
        with self._lock:
            return WalkStats(self._files_visited, self._dirs_visited)


def check_depth_constraints(
    path: Union[str, PurePath],
    root: Union[str, PurePath],
    min_depth: Optional[int] = None,
    max_depth: Optional[int] = None,
) -> bool:
    """Whether path lies within the depth bounds relative to root."""
    try:
        depth = len(PurePath(path).relative_to(PurePath(root)).parts)
    except ValueError:
        depth = 0
    if min_depth is not None and depth < min_depth:
        return False
    if max_depth is not None and depth > max_depth:
        return False
    return True


def should_follow_symlink(path: Union[str, Path], follow_symlinks: bool) -> bool:
    """Whether a link at path may be followed without escaping or looping."""
    if not follow_symlinks:
        return False
    if ".." in os.fspath(path):
        return False
    if os.path.islink(path):
        try:
            target = Path(os.readlink(path))
        except OSError:
            return True
        if ".." in str(target):
            return False
        if target.is_absolute():
            try:
                current = Path.cwd()
            except OSError:
                return True
            if not target.is_relative_to(current):
                return False
    return True