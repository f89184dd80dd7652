import threading

import pytest

from dashmetrics.services.fanout import MetricsComputationError, run_concurrently


def test_results_are_joined_by_name():
    out = run_concurrently({"a": lambda: 1, "b": lambda: [2, 3], "c": lambda: None})
    assert out == {"a": 1, "b": [2, 3], "c": None}


def test_empty_task_set():
    assert run_concurrently({}) == {}


def test_loaders_run_in_parallel():
    barrier = threading.Barrier(3, timeout=5)

    def loader():
        barrier.wait()
        return True

    out = run_concurrently({"a": loader, "b": loader, "c": loader}, max_workers=3)
    assert all(out.values())


def test_first_failure_aborts_whole_batch():
    def boom():
        raise RuntimeError("db down")

    with pytest.raises(MetricsComputationError) as exc_info:
        run_concurrently({"ok": lambda: 1, "messages": boom})
    assert exc_info.value.loader == "messages"
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert "db down" in str(exc_info.value)
