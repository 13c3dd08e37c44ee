"""Leading/trailing throttle for async callbacks.

The first call in a quiet period runs immediately. Calls arriving inside the
window after an invocation are coalesced into a single trailing call at the
end of the window, so N calls within one window produce at most two invocations.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Set

from recipe_search.utils.logger import logger


class Throttle:
    """Rate-limit an async function to one invocation per `window` seconds.

    Must be called from inside a running event loop; invocations are scheduled as tasks.
    """

    def __init__(self, func: Callable[[], Awaitable], window: float) -> None:
        self.func = func
        self.window = window
        self._last_invoked: Optional[float] = None
        self._trailing: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def trailing_scheduled(self) -> bool:
        return self._trailing is not None

    def __call__(self) -> None:
        loop = asyncio.get_running_loop()
        now = loop.time()

        if self._last_invoked is None or now - self._last_invoked >= self.window:
            self._invoke(loop)
            return

        if self._trailing is None:
            delay = self.window - (now - self._last_invoked)
            self._trailing = loop.call_later(delay, self._fire_trailing)

    def _fire_trailing(self) -> None:
        self._trailing = None
        self._invoke(asyncio.get_running_loop())

    def _invoke(self, loop: asyncio.AbstractEventLoop) -> None:
        self._last_invoked = loop.time()
        task = loop.create_task(self.func())
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Throttled call failed: {task.exception()}")

    def cancel(self) -> None:
        """Drop a scheduled trailing call. Invocations already running are left to finish."""
        if self._trailing is not None:
            self._trailing.cancel()
            self._trailing = None

    async def drain(self) -> None:
        """Wait for every invocation started so far."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
