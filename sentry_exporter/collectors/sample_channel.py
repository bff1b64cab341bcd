"""
Sample Channel

Thread-safe, unbounded stream of MetricSamples shared by all workers of a
scrape. Workers send concurrently; one consumer iterates until the channel
is closed.

Usage:
    channel = SampleChannel()
    channel.send(sample)        # from any thread
    channel.close()             # once, after every sender has finished
    samples = list(channel)     # consumer; stops at close
"""

import queue
import threading
from collections.abc import Iterator

from sentry_exporter.domain.metrics import MetricSample

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    """Raised when sending on a closed channel."""

    pass


class SampleChannel:
    """
    Multi-producer, single-consumer sample stream.

    Closing appends an end marker behind every sample already sent, so a
    consumer never misses a sample that was sent before close().
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False
        self.sent_count = 0

    def send(self, sample: MetricSample) -> None:
        """
        Send one sample.

        Raises:
            ChannelClosedError: If the channel was already closed
        """
        with self._lock:
            if self._closed:
                raise ChannelClosedError(f"cannot send {sample.descriptor.name} on a closed channel")
            self.sent_count += 1
            self._queue.put(sample)

    def close(self) -> None:
        """Signal that no more samples will be sent. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[MetricSample]:
        """Yield samples in send order, blocking until the channel is closed."""
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                # Leave the marker for any later iteration
                self._queue.put(_CLOSED)
                return
            yield item
