"""
Worker Pool - bounded fan-out of fetch jobs

A fixed number of worker threads consume FetchJobs from a bounded queue
whose capacity equals the worker count. The producer blocks while the
queue is full, so at most ``max_workers`` jobs are ever being handled at
once, regardless of how many projects the hierarchy holds.

Usage:
    with WorkerPool(handler=fetch_one, max_workers=40) as pool:
        for job in jobs:
            pool.submit(job)
    # every job has been handled and every worker has exited here
"""

import queue
import threading
from collections.abc import Callable

from sentry_exporter.core.logging_config import get_logger
from sentry_exporter.domain.sentry import FetchJob

logger = get_logger(__name__)

_STOP = object()


class WorkerPool:
    """
    Fixed-size thread pool fed through a bounded queue.

    Lifecycle: start() -> submit()* -> close(). close() is the barrier: it
    returns once the queue is drained and every worker thread has exited.
    """

    def __init__(self, handler: Callable[[FetchJob], object], max_workers: int, name: str = "sentry-worker"):
        """
        Initialize the pool (no threads are started yet).

        Args:
            handler: Called once per job from a worker thread
            max_workers: Number of worker threads and queue capacity (>= 1)
            name: Thread name prefix

        Raises:
            ValueError: If max_workers is less than 1
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.handler = handler
        self.max_workers = max_workers
        self.name = name
        self._queue: queue.Queue = queue.Queue(maxsize=max_workers)
        self._threads: list[threading.Thread] = []
        self._started = False
        self._closed = False
        self.handled_count = 0
        self.failed_count = 0
        self._count_lock = threading.Lock()

    def start(self) -> None:
        """
        Start the worker threads.

        Raises:
            RuntimeError: If the pool was already started
        """
        if self._started:
            raise RuntimeError("worker pool already started")
        self._started = True

        for index in range(self.max_workers):
            thread = threading.Thread(target=self._work, name=f"{self.name}-{index}", daemon=True)
            thread.start()
            self._threads.append(thread)

        logger.debug(f"Started {self.max_workers} workers")

    def submit(self, job: FetchJob) -> None:
        """
        Enqueue a job, blocking while the queue is full.

        Raises:
            RuntimeError: If the pool is not running
        """
        if not self._started or self._closed:
            raise RuntimeError("worker pool is not accepting jobs")
        self._queue.put(job)

    def close(self) -> None:
        """
        Stop accepting jobs, wait for queued jobs to finish and join all workers.

        Idempotent.
        """
        if self._closed:
            return
        self._closed = True

        # One stop marker per worker, queued behind every submitted job
        for _ in self._threads:
            self._queue.put(_STOP)
        for thread in self._threads:
            thread.join()

        logger.debug(f"Workers finished: {self.handled_count} jobs handled, {self.failed_count} failed")

    def _work(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if job is _STOP:
                    return
                try:
                    self.handler(job)
                except Exception:
                    logger.exception(f"Unexpected error handling job {job}")
                    with self._count_lock:
                        self.failed_count += 1
                else:
                    with self._count_lock:
                        self.handled_count += 1
            finally:
                self._queue.task_done()

    def __enter__(self) -> "WorkerPool":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
