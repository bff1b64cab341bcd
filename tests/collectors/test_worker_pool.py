"""
Tests for WorkerPool

Tests cover:
- Configuration validation
- Every job handled exactly once
- close() as a barrier
- Concurrency bound
- Handler exceptions do not kill workers
- Lifecycle errors
"""

import threading
import time

import pytest

from sentry_exporter.collectors.worker_pool import WorkerPool


class TestWorkerPoolInit:
    """Test WorkerPool initialization"""

    def test_rejects_zero_workers(self):
        """Test max_workers must be >= 1"""
        with pytest.raises(ValueError, match="max_workers must be >= 1"):
            WorkerPool(handler=lambda job: None, max_workers=0)

    def test_no_threads_before_start(self):
        """Test construction does not start threads"""
        before = threading.active_count()
        WorkerPool(handler=lambda job: None, max_workers=5)

        assert threading.active_count() == before


class TestJobHandling:
    """Test job distribution"""

    def test_each_job_handled_exactly_once(self):
        """Test all submitted jobs are handled, none twice"""
        handled = []
        lock = threading.Lock()

        def handler(job):
            with lock:
                handled.append(job)

        with WorkerPool(handler=handler, max_workers=4) as pool:
            for job in range(100):
                pool.submit(job)

        assert sorted(handled) == list(range(100))
        assert pool.handled_count == 100

    def test_close_waits_for_in_flight_jobs(self):
        """Test close() returns only after slow jobs finish"""
        finished = []

        def handler(job):
            time.sleep(0.05)
            finished.append(job)

        pool = WorkerPool(handler=handler, max_workers=2)
        pool.start()
        pool.submit("a")
        pool.submit("b")
        pool.close()

        assert sorted(finished) == ["a", "b"]

    def test_workers_exit_after_close(self):
        """Test no worker thread survives close()"""
        pool = WorkerPool(handler=lambda job: None, max_workers=3, name="exit-check")
        pool.start()
        pool.close()

        assert not [t for t in threading.enumerate() if t.name.startswith("exit-check")]


class TestConcurrencyBound:
    """Test at most max_workers handlers run at once"""

    @pytest.mark.parametrize("max_workers", [1, 3])
    def test_max_in_flight(self, max_workers):
        """Test in-flight handler count never exceeds max_workers"""
        state = {"current": 0, "peak": 0}
        lock = threading.Lock()

        def handler(job):
            with lock:
                state["current"] += 1
                state["peak"] = max(state["peak"], state["current"])
            time.sleep(0.005)
            with lock:
                state["current"] -= 1

        with WorkerPool(handler=handler, max_workers=max_workers) as pool:
            for job in range(30):
                pool.submit(job)

        assert 1 <= state["peak"] <= max_workers


class TestHandlerErrors:
    """Test exception isolation"""

    def test_handler_exception_does_not_stop_pool(self):
        """Test failing jobs are counted and the rest still run"""
        handled = []

        def handler(job):
            if job % 2:
                raise RuntimeError(f"job {job} broke")
            handled.append(job)

        with WorkerPool(handler=handler, max_workers=1) as pool:
            for job in range(6):
                pool.submit(job)

        assert handled == [0, 2, 4]
        assert pool.failed_count == 3
        assert pool.handled_count == 3


class TestLifecycle:
    """Test start/submit/close ordering"""

    def test_submit_before_start_raises(self):
        pool = WorkerPool(handler=lambda job: None, max_workers=1)

        with pytest.raises(RuntimeError, match="not accepting jobs"):
            pool.submit("job")

    def test_submit_after_close_raises(self):
        pool = WorkerPool(handler=lambda job: None, max_workers=1)
        pool.start()
        pool.close()

        with pytest.raises(RuntimeError, match="not accepting jobs"):
            pool.submit("job")

    def test_double_start_raises(self):
        pool = WorkerPool(handler=lambda job: None, max_workers=1)
        pool.start()
        try:
            with pytest.raises(RuntimeError, match="already started"):
                pool.start()
        finally:
            pool.close()

    def test_close_is_idempotent(self):
        pool = WorkerPool(handler=lambda job: None, max_workers=2)
        pool.start()
        pool.close()
        pool.close()
