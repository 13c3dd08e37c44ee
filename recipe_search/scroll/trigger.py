"""Infinite scroll: turn sentinel visibility into throttled next-page loads."""

from typing import Any, Optional

from recipe_search.models.models import SearchStatus
from recipe_search.scroll.observer import ViewportObserver, VisibilityEntry
from recipe_search.scroll.throttle import Throttle
from recipe_search.search.engine import SearchEngine
from recipe_search.utils.config import config
from recipe_search.utils.logger import logger


class ScrollTrigger:
    """Watches one sentinel element and asks the engine for the next page.

    A load is requested when the sentinel is at least `threshold` visible, the
    engine has a continuation cursor and no page load is pending. Requests go
    through a leading/trailing Throttle so bursts of visibility events cost at
    most one immediate and one trailing load per window.
    """

    def __init__(
        self,
        engine: SearchEngine,
        observer: ViewportObserver,
        threshold: Optional[float] = None,
        throttle_window: Optional[float] = None,
    ) -> None:
        self.engine = engine
        self.observer = observer
        self.threshold = config.SENTINEL_VISIBILITY_THRESHOLD if threshold is None else threshold
        window = config.scroll_throttle_seconds if throttle_window is None else throttle_window
        self._throttle = Throttle(self._load_next_page, window)
        self._sentinel: Any = None

    @property
    def sentinel(self) -> Any:
        return self._sentinel

    def attach(self, sentinel: Any) -> None:
        """Observe `sentinel`. A no-op when it is already the observed instance."""
        if sentinel is self._sentinel:
            return
        self.detach()
        if sentinel is None:
            return
        self._sentinel = sentinel
        self.observer.observe(sentinel, self._on_visibility, self.threshold)

    def detach(self) -> None:
        if self._sentinel is not None:
            self.observer.unobserve(self._sentinel)
            self._sentinel = None

    async def aclose(self) -> None:
        """Tear down: stop observing, drop any trailing load and wait for running ones."""
        self.detach()
        self._throttle.cancel()
        await self._throttle.drain()

    def _on_visibility(self, entry: VisibilityEntry) -> None:
        if entry.target is not self._sentinel:
            return
        if not entry.is_intersecting or entry.intersection_ratio < self.threshold:
            return
        if not self.engine.has_next_page or self.engine.loading_more:
            return
        self._throttle()

    async def _load_next_page(self) -> SearchStatus:
        status = await self.engine.load_next_page()
        logger.debug(f"Scroll-triggered page load: {status.value}")
        return status
