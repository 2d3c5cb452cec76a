"""Tests for worker logging context."""

import logging
from concurrent.futures import ThreadPoolExecutor

from streamfix.logging import WorkerContextFilter, get_worker_context, worker_context


def _record() -> logging.LogRecord:
    return logging.LogRecord("streamfix.test", logging.INFO, __file__, 1, "msg", (), None)


def test_context_set_and_reset():
    assert get_worker_context() == (None, None, None)

    with worker_context("01", "F001", "/m/movie.mkv"):
        assert get_worker_context() == ("01", "F001", "/m/movie.mkv")

    assert get_worker_context() == (None, None, None)


def test_filter_tags_record():
    record = _record()
    with worker_context("02", "F010"):
        assert WorkerContextFilter().filter(record) is True

    assert record.worker_tag == "[W02:F010] "
    assert record.worker_id == "02"
    assert record.file_id == "F010"


def test_filter_worker_only():
    record = _record()
    with worker_context("03"):
        WorkerContextFilter().filter(record)
    assert record.worker_tag == "[W03] "


def test_filter_outside_context():
    record = _record()
    WorkerContextFilter().filter(record)
    assert record.worker_tag == ""
    assert record.worker_id is None


def test_context_is_per_thread():
    def in_worker(worker_id):
        with worker_context(worker_id, "F1"):
            return get_worker_context()[0]

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(in_worker, ["01", "02"]))

    assert results == ["01", "02"]
    assert get_worker_context()[0] is None
