from __future__ import annotations

import asyncio
import heapq
import itertools
import time
from typing import Any, Callable, List, Optional, Protocol, Tuple

ResumeFn = Callable[[Any], None]

DEFAULT_RESUME_DELAY = 2.0


class Scheduler(Protocol):
    def __call__(self, resume: ResumeFn, delay: float, session: Any) -> None: ...


class CallOutScheduler:
    """In-process deferred calls: ``resume(session)`` roughly ``delay`` seconds later.

    Nothing runs on its own. The host pumps the queue with :meth:`run_due`
    from its main loop, or :meth:`drain` to run everything regardless of due
    time.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._queue: List[Tuple[float, int, ResumeFn, Any]] = []
        self._counter = itertools.count()

    def __call__(self, resume: ResumeFn, delay: float, session: Any) -> None:
        due = self.clock() + max(0.0, float(delay))
        heapq.heappush(self._queue, (due, next(self._counter), resume, session))

    def next_due(self) -> Optional[float]:
        return self._queue[0][0] if self._queue else None

    def run_due(self, now: Optional[float] = None) -> int:
        now = self.clock() if now is None else now
        ran = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, resume, session = heapq.heappop(self._queue)
            resume(session)
            ran += 1
        return ran

    def drain(self, limit: Optional[int] = None) -> int:
        ran = 0
        while self._queue and (limit is None or ran < limit):
            _, _, resume, session = heapq.heappop(self._queue)
            resume(session)
            ran += 1
        return ran

    def cancel(self, session: Any) -> int:
        before = len(self._queue)
        self._queue = [item for item in self._queue if item[3] is not session]
        heapq.heapify(self._queue)
        return before - len(self._queue)

    def __len__(self) -> int:
        return len(self._queue)


class AsyncioScheduler:
    """Resumes sessions through ``loop.call_later`` on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self.handles: List[asyncio.TimerHandle] = []

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def __call__(self, resume: ResumeFn, delay: float, session: Any) -> None:
        handle: Optional[asyncio.TimerHandle] = None

        def fire() -> None:
            # Drop the handle once it fires
            self.handles.remove(handle)
            resume(session)

        handle = self.loop.call_later(max(0.0, float(delay)), fire)
        self.handles.append(handle)

    def cancel_all(self) -> None:
        for handle in self.handles:
            handle.cancel()
        self.handles = []
