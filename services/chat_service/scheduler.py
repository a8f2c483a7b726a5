"""
Single-threaded task queue for the session's deferred work.

Preview encoding and the simulated assistant reply never run inline: they are
queued here and executed when the owner pumps the queue. Each task runs to
completion before the next one starts.
"""

import heapq
import itertools
import time
from typing import Any, Callable, List, Optional, Tuple

from utils.logging_config import get_logger


class ScheduledTask:
    """Handle for a queued callback"""

    def __init__(self, task_id: int, due_at: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.task_id = task_id
        self.due_at = due_at
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.done = False

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def __repr__(self) -> str:
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"<ScheduledTask #{self.task_id} {name} due={self.due_at:.3f} pending={self.pending}>"


class TaskScheduler:
    """
    Deadline-ordered queue of callbacks.

    Args:
        clock: Returns the current time in seconds; ``time.monotonic`` unless a
            test supplies its own
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.logger = get_logger(__name__)
        self.clock = clock
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._counter = itertools.count(1)

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        """Queue ``callback(*args)`` to run once ``delay_ms`` milliseconds have elapsed"""
        task_id = next(self._counter)
        due_at = self.clock() + max(delay_ms, 0) / 1000.0
        task = ScheduledTask(task_id, due_at, callback, args)
        heapq.heappush(self._queue, (due_at, task_id, task))
        self.logger.debug(f"Scheduled {task!r}")
        return task

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        return self.call_later(0, callback, *args)

    def run_due(self) -> int:
        """
        Run every task whose deadline has passed.

        Returns:
            Number of callbacks executed
        """
        executed = 0
        while self._queue:
            due_at, _, task = self._queue[0]
            if task.cancelled:
                heapq.heappop(self._queue)
                continue
            if due_at > self.clock():
                break
            heapq.heappop(self._queue)
            task.done = True
            task.callback(*task.args)
            executed += 1
        return executed

    def next_delay(self) -> Optional[float]:
        """Seconds until the next live task is due, or None when idle"""
        self._discard_cancelled_head()
        if not self._queue:
            return None
        return max(self._queue[0][0] - self.clock(), 0.0)

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, task in self._queue if task.pending)

    def _discard_cancelled_head(self):
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
