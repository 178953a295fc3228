from datetime import timedelta

import pytest

from swifttools.find.cli import Args
from swifttools.find.file_walker import WalkResult
from swifttools.find.pattern_matcher import PatternMatcher
from swifttools.find.worker import BatchProcessor, WorkerPool


def _matcher(**kwargs):
    return PatternMatcher(Args(**kwargs))


def _walk(path, depth=1, is_dir=False):
    return WalkResult(path=path, depth=depth, is_dir=is_dir, is_symlink=False)


def test_worker_pool_processing(tmp_path):
    test_file = tmp_path / "test.txt"
    test_file.write_text("test content\n")

    pool = WorkerPool(_matcher(), 2)
    results = pool.process_files([_walk(test_file)])

    assert len(results) == 1
    assert results[0].matches
    info = results[0].file_info
    assert info.path == str(test_file)
    assert info.file_type == "file"
    assert info.size == len("test content\n")
    assert info.depth == 1


def test_batch_processor(tmp_path):
    walk_results = []
    for i in range(10):
        path = tmp_path / f"test{i}.txt"
        path.write_text(f"content {i}\n")
        walk_results.append(_walk(path))

    processor = BatchProcessor(_matcher(), 2, 5)
    results = processor.process_in_batches(walk_results)

    assert len(results) == 10
    assert [r.file_info.path for r in results] == [str(w.path) for w in walk_results]


def test_format_permissions(tmp_path):
    test_file = tmp_path / "test.txt"
    test_file.touch()
    results = WorkerPool(_matcher(), 1).process_files([_walk(test_file)])
    perms = results[0].file_info.permissions
    assert len(perms) == 10
    assert perms.startswith("-")


def test_missing_file_is_skipped_but_counted(tmp_path):
    pool = WorkerPool(_matcher(), 2)
    results = pool.process_files([_walk(tmp_path / "absent.txt")])
    assert results == []
    stats = pool.stats(1.0)
    assert stats.total_processed == 1
    assert stats.total_matched == 0


def test_filters_are_applied(tmp_path):
    keep = tmp_path / "keep.txt"
    drop = tmp_path / "drop.py"
    keep.write_text("a")
    drop.write_text("b")
    pool = WorkerPool(_matcher(name="*.txt"), 2)
    results = pool.process_files([_walk(keep), _walk(drop)])
    assert [r.file_info.path for r in results] == [str(keep)]
    stats = pool.stats(timedelta(seconds=1))
    assert stats.total_processed == 2
    assert stats.total_matched == 1


def test_directory_info(tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    results = WorkerPool(_matcher(), 1).process_files([_walk(sub, depth=2, is_dir=True)])
    info = results[0].file_info
    assert info.file_type == "directory"
    assert info.size is None
    assert info.depth == 2


def test_stats_throughput(tmp_path):
    files = []
    for name in ("a.txt", "b.txt"):
        path = tmp_path / name
        path.write_text("x")
        files.append(_walk(path))
    pool = WorkerPool(_matcher(), 2)
    pool.process_files(files)

    stats = pool.stats(1.0)
    assert stats.processing_time_ms == 1000
    assert stats.throughput_per_second == pytest.approx(2.0)

    zero = pool.stats(0.0)
    assert zero.processing_time_ms == 0
    assert zero.throughput_per_second == 0.0


def test_batch_processor_default_and_invalid_size():
    assert BatchProcessor(_matcher(), 1).batch_size == 1000
    with pytest.raises(ValueError):
        BatchProcessor(_matcher(), 1, 0)