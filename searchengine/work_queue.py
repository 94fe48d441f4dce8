"""
Fixed-size pool of worker threads consuming a shared FIFO task queue.

The queue tracks how much submitted work is still outstanding, including work
submitted by running tasks, so callers can block until everything is done with
await_idle() and keep reusing the same workers afterwards.
"""

import functools
import logging
import threading
from collections import deque
from typing import Any, Callable

from .config import DEFAULT_THREADS

logger = logging.getLogger(__name__)


class WorkQueue:
    """
    Work queue with a fixed number of worker threads.

    submit() increments the pending counter before the task is queued, and a
    worker decrements it after the task finishes (successfully or not), so
    await_idle() returns only once every task, nested ones included, is done.
    """

    DEFAULT = DEFAULT_THREADS

    def __init__(self, threads: int | None = DEFAULT_THREADS) -> None:
        if threads is None or threads < 1:
            logger.warning("Invalid number of worker threads %r, using %d", threads, self.DEFAULT)
            threads = self.DEFAULT

        self._tasks: deque[Callable[[], Any]] = deque()
        self._tasks_ready = threading.Condition()
        self._shutdown = False

        self._pending = 0
        self._idle = threading.Condition()

        self._workers = [_Worker(self, i) for i in range(threads)]
        for worker in self._workers:
            worker.start()

    def submit(self, task: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Queue task(*args, **kwargs) to be run by a worker thread."""
        call = functools.partial(task, *args, **kwargs) if args or kwargs else task
        with self._tasks_ready:
            if self._shutdown:
                raise RuntimeError("Work queue has been shut down")
            self._increment_pending()
            self._tasks.append(call)
            self._tasks_ready.notify()

    def await_idle(self) -> None:
        """
        Block until all pending work is finished. The worker threads keep
        running so the queue can be reused.
        """
        with self._idle:
            while self._pending > 0:
                logger.debug("Waiting for work to finish (pending: %d)", self._pending)
                self._idle.wait()

    def shutdown(self) -> None:
        """
        Ask the workers to stop. Queued tasks that have not started will not be
        run; tasks already running are not interrupted.
        """
        with self._tasks_ready:
            self._shutdown = True
            dropped = len(self._tasks)
            self._tasks.clear()
            self._tasks_ready.notify_all()
            for _ in range(dropped):
                self._decrement_pending()
        if dropped:
            logger.info("Dropped %d queued task(s) on shutdown", dropped)

    def shutdown_and_wait(self) -> None:
        """
        Wait for all work to finish, then stop the workers and wait for the
        threads to exit. The queue cannot be reused afterwards.
        """
        self.await_idle()
        self.shutdown()
        for worker in self._workers:
            worker.join()

    @property
    def size(self) -> int:
        """Number of worker threads."""
        return len(self._workers)

    @property
    def pending(self) -> int:
        with self._idle:
            return self._pending

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def __enter__(self) -> "WorkQueue":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown_and_wait()

    def _increment_pending(self) -> None:
        with self._idle:
            self._pending += 1

    def _decrement_pending(self) -> None:
        with self._idle:
            if self._pending > 0:
                self._pending -= 1
            if self._pending == 0:
                self._idle.notify_all()

    def _next_task(self) -> Callable[[], Any] | None:
        """Wait for a task; None means the queue was shut down."""
        with self._tasks_ready:
            while not self._tasks and not self._shutdown:
                self._tasks_ready.wait()
            if self._shutdown:
                return None
            return self._tasks.popleft()


class _Worker(threading.Thread):
    """Runs tasks from the queue until a shutdown is requested."""

    def __init__(self, queue: WorkQueue, number: int) -> None:
        super().__init__(name=f"Worker-{number}", daemon=True)
        self._queue = queue

    def run(self) -> None:
        while True:
            task = self._queue._next_task()
            if task is None:
                break
            try:
                task()
            except Exception:
                logger.exception("%s encountered an exception while running a task", self.name)
            finally:
                self._queue._decrement_pending()
