"""RecipeSearchSession: the search page's controller.

Wires QueryCursor, SearchEngine, AutocompleteFeed, FavoritesStore and
ScrollTrigger together and exposes the operations a presentation layer calls:

    session = RecipeSearchSession(client, gateway, observer, initial_query="chicken")
    await session.mount()              # hydrate favorites, run the initial search
    await session.input_changed("chi") # update the cursor, refresh suggestions
    await session.submit()             # search the current input
    session.attach_sentinel(element)   # element rendered at session.sentinel_index
    await session.toggle_favorite(3)   # star/unstar the 4th result
    await session.unmount()
"""

from typing import Any, Optional

from recipe_search.favorites.gateway import PersistenceGateway
from recipe_search.favorites.store import FavoritesStore
from recipe_search.models.models import SearchStatus, ToggleResult
from recipe_search.scroll.observer import ViewportObserver
from recipe_search.scroll.progress import ScrollProgress, compute_scroll_progress, sentinel_index
from recipe_search.scroll.trigger import ScrollTrigger
from recipe_search.search.autocomplete import AutocompleteFeed
from recipe_search.search.engine import SearchEngine
from recipe_search.search.query_cursor import QueryCursor
from recipe_search.utils.logger import logger
from recipe_search.utils.notifications import Notifier


class RecipeSearchSession:
    """One mounted search view with its result set and favorites."""

    def __init__(
        self,
        client,
        gateway: PersistenceGateway,
        observer: ViewportObserver,
        notifier: Optional[Notifier] = None,
        initial_query: str = "",
        throttle_window: Optional[float] = None,
    ) -> None:
        self.notifier = notifier or Notifier()
        self.cursor = QueryCursor(initial_query)
        self.engine = SearchEngine(client, cursor=self.cursor, notifier=self.notifier)
        self.autocomplete = AutocompleteFeed(client, notifier=self.notifier)
        self.favorites = FavoritesStore(gateway, notifier=self.notifier)
        self.scroll = ScrollTrigger(self.engine, observer, throttle_window=throttle_window)
        self._initial_query = initial_query
        self.mounted = False

    @property
    def results(self):
        return self.engine.results

    @property
    def suggestions(self):
        return self.autocomplete.suggestions

    @property
    def can_submit(self) -> bool:
        return self.cursor.input_changed

    @property
    def sentinel_index(self) -> Optional[int]:
        return sentinel_index(len(self.engine.results.items))

    async def mount(self) -> None:
        """Load favorites, then search the initial query if one was given."""
        self.mounted = True
        await self.favorites.hydrate()
        if self._initial_query:
            logger.info("Running initial search", extra={"query": self._initial_query})
            await self.submit(self._initial_query)

    async def input_changed(self, text: str) -> None:
        self.cursor.update(text)
        await self.autocomplete.suggest(text)

    async def submit(self, query_text: Optional[str] = None) -> SearchStatus:
        """Search the given text (or the current input), then drop stale suggestions."""
        try:
            return await self.engine.search(query_text)
        finally:
            self.autocomplete.clear()

    async def load_next_page(self) -> SearchStatus:
        return await self.engine.load_next_page()

    def attach_sentinel(self, element: Any) -> None:
        self.scroll.attach(element)

    async def toggle_favorite(self, index: int) -> ToggleResult:
        """Toggle the favorite state of the result at `index`."""
        recipe = self.engine.results.items[index]
        return await self.favorites.toggle(recipe)

    def is_favorite(self, index: int) -> bool:
        return self.engine.results.items[index].identity in self.favorites

    def scroll_progress(self, scroll_top: float, scroll_height: float, viewport_height: float) -> ScrollProgress:
        return compute_scroll_progress(scroll_top, scroll_height, viewport_height, len(self.engine.results.items))

    async def unmount(self) -> None:
        """Stop observing and discard the result set. Favorite mutations in flight still complete."""
        await self.scroll.aclose()
        self.engine.reset()
        self.autocomplete.clear()
        self.mounted = False
