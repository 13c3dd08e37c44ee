"""Search and pagination state machine.

SearchEngine owns the accumulated SearchResultSet. It issues queries through a
RecipeSearchClient, replaces results on a new query, appends on pagination and
discards responses that no longer match what the user wants.

Races are resolved by comparing held state, not by cancelling requests:
- a search response is applied only if its query is still the desired query
  (QueryCursor.query_text) when it completes;
- a next-page response is applied only if the result set has not been
  replaced since the page was requested (generation counter) and its cursor is
  still current.
"""

import time
from typing import Callable, Optional

from recipe_search.models.models import (
    ScrollState,
    SearchPage,
    SearchResultSet,
    SearchSession,
    SearchStatus,
)
from recipe_search.search.query_cursor import QueryCursor
from recipe_search.utils.config import config
from recipe_search.utils.errors import ErrorKind, ThrottledError, classify_error
from recipe_search.utils.logger import logger
from recipe_search.utils.notifications import GENERIC_ERROR_MESSAGE, Notifier


THROTTLED_MESSAGE = "Usage limits are exceeded, try again later."
NEXT_PAGE_ERROR_MESSAGE = "Error fetching next page"


class SearchEngine:
    """Owns the result set for one search session.

    Args:
        client: Object with async `search(query)` and `fetch_page(cursor)` returning SearchPage.
        cursor: Query state shared with the input field. A new one is created if omitted.
        notifier: Sink for user-facing failure messages.
        clock: Monotonic clock, injectable for throttle cooldown tests.
        throttle_cooldown: Seconds to hold off after a 429 without Retry-After.
    """

    def __init__(
        self,
        client,
        cursor: Optional[QueryCursor] = None,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], float] = time.monotonic,
        throttle_cooldown: Optional[float] = None,
    ) -> None:
        self.client = client
        self.cursor = cursor or QueryCursor()
        self.notifier = notifier or Notifier()
        self.results = SearchResultSet()
        self._clock = clock
        self._throttle_cooldown = (
            config.THROTTLE_COOLDOWN_SECONDS if throttle_cooldown is None else throttle_cooldown
        )
        self._searches_in_flight = 0
        self._loading_more = False
        self._generation = 0
        self._throttled_until: Optional[float] = None

    @property
    def in_flight(self) -> bool:
        return self._searches_in_flight > 0

    @property
    def loading_more(self) -> bool:
        return self._loading_more

    @property
    def has_next_page(self) -> bool:
        return self.results.has_next_page

    @property
    def session(self) -> SearchSession:
        return SearchSession(
            query_text=self.cursor.query_text,
            last_completed_query_text=self.cursor.last_completed_query_text,
            in_flight=self.in_flight,
        )

    @property
    def scroll_state(self) -> ScrollState:
        return ScrollState(pending=self._loading_more)

    @property
    def throttled(self) -> bool:
        return self._throttled_until is not None and self._clock() < self._throttled_until

    async def search(self, query_text: Optional[str] = None) -> SearchStatus:
        """Run a query and apply its first page.

        Args:
            query_text: Text to search. Defaults to the cursor's current input.

        Returns:
            APPLIED when a new query replaced the results, MERGED when the last
            completed query was re-run, STALE when the desired query changed
            before the response arrived, or SKIPPED/THROTTLED/REJECTED/FAILED.
        """
        text = self.cursor.query_text if query_text is None else query_text
        if not text:
            return SearchStatus.SKIPPED

        self.cursor.update(text)

        if self.throttled:
            self.notifier.error(THROTTLED_MESSAGE, ErrorKind.THROTTLED)
            return SearchStatus.THROTTLED

        self._searches_in_flight += 1
        try:
            page = await self.client.search(text)
        except Exception as e:
            if text != self.cursor.query_text:
                return self._discard_failure(e, "search", {"query": text})
            return self._handle_failure(e, "Search", text, default_message=None)
        finally:
            self._searches_in_flight -= 1

        return self._apply_search(text, page)

    def _apply_search(self, text: str, page: SearchPage) -> SearchStatus:
        if text != self.cursor.query_text:
            logger.info("Discarding stale search response", extra={"query": text})
            return SearchStatus.STALE

        self.results.replace(page)
        self._generation += 1

        if text == self.cursor.last_completed_query_text:
            # Same query restarted: fresh page wins over whatever was accumulated
            logger.debug(f"Re-ran last query, {len(page.items)} items", extra={"query": text})
            return SearchStatus.MERGED

        self.cursor.mark_completed(text)
        logger.info(
            f"Search applied: {len(page.items)} of {page.total_count} results", extra={"query": text}
        )
        return SearchStatus.APPLIED

    async def load_next_page(self) -> SearchStatus:
        """Fetch the page behind the continuation cursor and append it.

        Issues no request when there is no cursor or a page load is already pending.
        """
        cursor = self.results.continuation_cursor
        if not cursor or self._loading_more:
            return SearchStatus.SKIPPED
        if self.throttled:
            return SearchStatus.THROTTLED

        generation = self._generation
        self._loading_more = True
        try:
            page = await self.client.fetch_page(cursor)
        except Exception as e:
            if generation != self._generation:
                return self._discard_failure(e, "next page", None)
            return self._handle_failure(e, "Next page", None, default_message=NEXT_PAGE_ERROR_MESSAGE)
        finally:
            self._loading_more = False

        if generation != self._generation or self.results.continuation_cursor != cursor:
            logger.info("Discarding next page for a replaced result set")
            return SearchStatus.STALE

        self.results.append(page)
        logger.debug(f"Appended {len(page.items)} items, {len(self.results.items)} loaded")
        return SearchStatus.APPLIED

    def _handle_failure(
        self, exc: Exception, operation: str, query: Optional[str], default_message: Optional[str]
    ) -> SearchStatus:
        """Convert an exception from the client into a notification and a status."""
        kind = classify_error(exc)
        extra = {"query": query} if query else None

        if kind == ErrorKind.THROTTLED:
            self._start_cooldown(exc)
            logger.warning(f"{operation} throttled", extra=extra)
            self.notifier.error(THROTTLED_MESSAGE, kind)
            return SearchStatus.THROTTLED

        if kind == ErrorKind.SOFT_REJECT:
            logger.warning(f"{operation} rejected: {exc}", extra=extra)
            self.notifier.error(str(exc), kind)
            return SearchStatus.REJECTED

        if kind == ErrorKind.TRANSIENT_NETWORK:
            logger.warning(f"{operation} failed: {exc}", extra=extra)
            self.notifier.error(default_message or str(exc), kind)
            return SearchStatus.FAILED

        logger.error(f"{operation} failed unexpectedly: {exc}", exc_info=True, extra=extra)
        self.notifier.error(default_message or GENERIC_ERROR_MESSAGE, ErrorKind.HARD_FAILURE)
        return SearchStatus.FAILED

    def _discard_failure(self, exc: Exception, operation: str, extra: Optional[dict]) -> SearchStatus:
        """Failure of a superseded request: nothing is surfaced, but a 429 still starts the cooldown."""
        if classify_error(exc) == ErrorKind.THROTTLED:
            self._start_cooldown(exc)
        logger.info(f"Discarding failed stale {operation}: {exc}", extra=extra)
        return SearchStatus.STALE

    def _start_cooldown(self, exc: Exception) -> None:
        retry_after = exc.retry_after if isinstance(exc, ThrottledError) else None
        self._throttled_until = self._clock() + (
            retry_after if retry_after is not None else self._throttle_cooldown
        )

    def reset(self) -> None:
        """Discard the result set and query state (view unmounted). In-flight responses become stale."""
        self.results.clear()
        self.cursor.reset()
        self._generation += 1
