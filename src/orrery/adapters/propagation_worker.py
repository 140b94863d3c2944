# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Propagation workers: run batch propagation off the control thread.

ThreadedPropagationWorker uses ThreadPoolExecutor from stdlib. Requests
go through a bounded queue to a dispatcher thread, which splits a
positions request into chunk tasks; each finished task puts its reply on
a results queue that the control thread drains once per tick. Chunks may
finish out of order.

SequentialPropagationWorker computes on submit. Deterministic, for tests
and the CLI.
"""
import logging
import os
import queue
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor

from orrery.domain.batching import (
    chunk_ranges,
    iter_position_updates,
    propagate_chunk,
    sample_trajectory,
)
from orrery.domain.messages import PositionsRequest, TrajectoryRequest

_log = logging.getLogger(__name__)

_STOP = object()


class SequentialPropagationWorker:
    """
    Inline worker: replies are computed during submit() and held until drained.

    Args:
        propagator: Propagator implementation.
    """

    def __init__(self, propagator):
        self._propagator = propagator
        self._replies: deque = deque()
        self._closed = False

    def submit(self, message) -> bool:
        if self._closed:
            raise RuntimeError("Propagation worker is closed")
        if isinstance(message, PositionsRequest):
            self._replies.extend(iter_position_updates(self._propagator, message))
        elif isinstance(message, TrajectoryRequest):
            self._replies.append(sample_trajectory(self._propagator, message))
        else:
            _log.error("Invalid request type: %s", type(message).__name__)
            return False
        return True

    def drain(self) -> list:
        replies = list(self._replies)
        self._replies.clear()
        return replies

    def wait_idle(self, timeout: float | None = None) -> bool:
        return True

    def close(self) -> None:
        self._closed = True
        self._replies.clear()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class ThreadedPropagationWorker:
    """
    Thread-pool worker.

    Args:
        propagator: Thread-safe Propagator implementation.
        max_workers: Thread pool size.
            Default: min(32, os.cpu_count() + 4), as in Python itself.
        queue_size: Maximum pending requests; submit() refuses beyond it.
    """

    def __init__(
        self,
        propagator,
        max_workers: int | None = None,
        queue_size: int = 64,
    ):
        if queue_size <= 0:
            raise ValueError(f"queue_size must be > 0, got {queue_size}")
        self._propagator = propagator
        self._max_workers = max_workers or min(32, (os.cpu_count() or 1) + 4)
        self._requests: queue.Queue = queue.Queue(maxsize=queue_size)
        self._results: queue.SimpleQueue = queue.SimpleQueue()
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="orrery-propagation",
        )
        # At most max_workers tasks in flight; the dispatcher waits for a slot.
        self._slots = threading.BoundedSemaphore(self._max_workers)
        self._pending = 0
        self._idle = threading.Condition()
        self._closed = False
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop, name="orrery-dispatcher", daemon=True,
        )
        self._dispatcher.start()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def submit(self, message) -> bool:
        if self._closed:
            raise RuntimeError("Propagation worker is closed")
        self._begin_task()
        try:
            self._requests.put_nowait(message)
        except queue.Full:
            self._end_task()
            _log.warning(
                "Propagation worker busy, dropping %s", type(message).__name__,
            )
            return False
        return True

    def drain(self) -> list:
        replies = []
        while True:
            try:
                replies.append(self._results.get_nowait())
            except queue.Empty:
                return replies

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until all submitted work has produced its replies."""
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._requests.put(_STOP)
        self._dispatcher.join()
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _begin_task(self) -> None:
        with self._idle:
            self._pending += 1

    def _end_task(self) -> None:
        with self._idle:
            self._pending -= 1
            if self._pending == 0:
                self._idle.notify_all()

    def _dispatch_loop(self) -> None:
        while True:
            message = self._requests.get()
            if message is _STOP:
                return
            try:
                self._dispatch(message)
            except ValueError as e:
                _log.error("Rejected %s: %s", type(message).__name__, e)
            finally:
                self._end_task()

    def _dispatch(self, message) -> None:
        if isinstance(message, PositionsRequest):
            when = message.when
            for start, count in chunk_ranges(len(message.records), message.batch_size):
                self._run(propagate_chunk, self._propagator, message.records, start, count, when)
        elif isinstance(message, TrajectoryRequest):
            self._run(sample_trajectory, self._propagator, message)
        else:
            _log.error("Invalid request type: %s", type(message).__name__)

    def _run(self, fn, *args) -> None:
        self._slots.acquire()
        self._begin_task()
        future = self._executor.submit(fn, *args)
        future.add_done_callback(self._collect)

    def _collect(self, future: Future) -> None:
        self._slots.release()
        try:
            if future.cancelled():
                return
            error = future.exception()
            if error is not None:
                _log.error("Propagation task failed: %s", error)
                return
            self._results.put(future.result())
        finally:
            self._end_task()
