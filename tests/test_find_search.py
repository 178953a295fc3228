import io
import json
from pathlib import Path

import pytest

from swifttools.find.cli import Args
from swifttools.find.pattern_matcher import PatternError
from swifttools.find.search import (
    SearchComplexity,
    SearchEngine,
    estimate_search_complexity,
    validate_search_pattern,
)


@pytest.fixture
def tree(tmp_path):
    root = tmp_path
    (root / "file1.txt").write_text("content of file1")
    (root / "file2.rs").write_text('fn main() { println!("Hello"); }')
    (root / ".hidden_file.txt").write_text("hidden content")
    (root / "subdir1").mkdir()
    (root / "subdir2").mkdir()
    (root / "subdir1" / "nested_file.py").write_text("print('Hello from Python')")
    (root / "subdir1" / "deep_file.txt").write_text("deep content")
    (root / "subdir2" / "empty_file.txt").write_text("")
    (root / "subdir2" / "large_file.txt").write_text("x" * 2048)
    return root


def _run(root, **kwargs):
    out, err = io.StringIO(), io.StringIO()
    args = Args(paths=[root], no_color=True, **kwargs)
    count = SearchEngine(args, out, err).run()
    return count, out.getvalue(), err.getvalue()


def _lines(text):
    return [line for line in text.split("\n") if line]


def test_search_engine_with_simple_pattern(tmp_path):
    test_file = tmp_path / "test.txt"
    test_file.write_text("test content")
    count, out, _ = _run(tmp_path, name="*.txt")
    assert count == 1
    assert _lines(out) == [str(test_file)]


def test_validate_search_pattern():
    validate_search_pattern("*.txt", False)
    validate_search_pattern("test.*", True)
    with pytest.raises(PatternError):
        validate_search_pattern("[invalid", True)
    with pytest.raises(PatternError):
        validate_search_pattern("", False)
    with pytest.raises(PatternError):
        validate_search_pattern("a/**/b/**", False)


def test_search_complexity():
    args = Args()
    assert estimate_search_complexity(args) == SearchComplexity.LOW
    args.name = "*.rs"
    assert estimate_search_complexity(args) == SearchComplexity.MEDIUM
    args.use_regex = True
    assert estimate_search_complexity(args) == SearchComplexity.HIGH
    args.follow_symlinks = True
    assert estimate_search_complexity(args) == SearchComplexity.HIGH


def test_search_complexity_size_and_depth():
    assert estimate_search_complexity(Args(size="+1k")) == SearchComplexity.MEDIUM
    assert estimate_search_complexity(Args(max_depth=11)) == SearchComplexity.MEDIUM
    assert estimate_search_complexity(Args(max_depth=10)) == SearchComplexity.LOW


def test_complexity_recommendations():
    assert SearchComplexity.LOW.recommended_thread_count(8) == 4
    assert SearchComplexity.MEDIUM.recommended_thread_count(8) == 8
    assert SearchComplexity.HIGH.recommended_thread_count(8) == 16
    assert SearchComplexity.LOW.recommended_batch_size() == 5000
    assert SearchComplexity.MEDIUM.recommended_batch_size() == 2000
    assert SearchComplexity.HIGH.recommended_batch_size() == 1000


def test_find_all_files(tree):
    count, out, _ = _run(tree)
    lines = _lines(out)
    assert count == len(lines)
    assert str(tree) in lines
    assert str(tree / "subdir2" / "large_file.txt") in lines
    assert str(tree / ".hidden_file.txt") not in lines


def test_find_by_name_pattern(tree):
    _, out, _ = _run(tree, name="*.txt")
    assert set(_lines(out)) == {
        str(tree / "file1.txt"),
        str(tree / "subdir1" / "deep_file.txt"),
        str(tree / "subdir2" / "empty_file.txt"),
        str(tree / "subdir2" / "large_file.txt"),
    }


def test_find_by_file_type(tree):
    _, out, _ = _run(tree, file_type="f", count_only=True)
    assert out.strip() == "6"


def test_find_by_size(tree):
    _, out, _ = _run(tree, size="+1k", file_type="f")
    assert _lines(out) == [str(tree / "subdir2" / "large_file.txt")]


def test_find_empty_files(tree):
    _, out, _ = _run(tree, empty=True)
    assert _lines(out) == [str(tree / "subdir2" / "empty_file.txt")]


def test_find_with_depth_limit(tree):
    _, out, _ = _run(tree, max_depth=1)
    assert set(_lines(out)) == {
        str(tree),
        str(tree / "file1.txt"),
        str(tree / "file2.rs"),
        str(tree / "subdir1"),
        str(tree / "subdir2"),
    }


def test_find_hidden_files(tree):
    _, out, _ = _run(tree, search_hidden=True, name=".*")
    assert _lines(out) == [str(tree / ".hidden_file.txt")]


def test_find_by_extension(tree):
    _, out, _ = _run(tree, extensions="rs,py")
    assert set(_lines(out)) == {
        str(tree / "file2.rs"),
        str(tree / "subdir1" / "nested_file.py"),
    }


def test_json_output(tree):
    _, out, _ = _run(tree, json_output=True, name="*.rs")
    data = json.loads(out)
    assert [f["path"] for f in data["files"]] == [str(tree / "file2.rs")]
    assert data["files"][0]["file_type"] == "file"
    assert data["stats"]["total_found"] == 1


def test_long_format(tree):
    _, out, _ = _run(tree, long_format=True, name="file1.txt")
    lines = _lines(out)
    assert len(lines) == 1
    assert lines[0].endswith(str(tree / "file1.txt"))
    assert lines[0][0] == "-"


def test_print0(tree):
    _, out, _ = _run(tree, print0=True, name="file2.rs")
    assert out == str(tree / "file2.rs") + "\0"


def test_reverse_sort(tree):
    _, out, _ = _run(tree, file_type="f", sort_results=True, reverse_sort=True)
    lines = _lines(out)
    assert len(lines) == 6
    assert lines == sorted(lines, key=lambda s: Path(s).parts, reverse=True)


def test_show_stats_goes_to_err(tree):
    _, out, err = _run(tree, name="*.rs", show_stats=True)
    assert _lines(out) == [str(tree / "file2.rs")]
    assert "Search completed:" in err
    assert "Files found: 1" in err
    assert "Processing throughput:" in err


def test_verbose_environment(tree, monkeypatch):
    monkeypatch.setenv("FFIND_VERBOSE", "1")
    _, _, err = _run(tree, name="*.rs")
    assert "Starting filesystem walk..." in err
    assert "Processing completed: 1 matches found" in err


def test_invalid_regex_pattern():
    with pytest.raises(PatternError):
        SearchEngine(Args(name="[invalid", use_regex=True))


def test_invalid_size_spec():
    with pytest.raises(ValueError, match="Invalid arguments"):
        SearchEngine(Args(size="invalid_size"))


def test_invalid_file_type():
    with pytest.raises(ValueError, match="Invalid file type"):
        SearchEngine(Args(file_type="invalid"))


def test_invalid_depth_range():
    with pytest.raises(ValueError, match="min-depth"):
        SearchEngine(Args(min_depth=5, max_depth=2))