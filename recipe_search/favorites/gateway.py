"""Contract of the remote favorites store consumed by FavoritesStore.

The store itself lives outside this package (a server action, a REST service,
a database). Implementations only need to provide these three coroutines.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class PersistenceGateway(Protocol):
    async def fetch_favorites(self) -> Optional[Sequence[dict]]:
        """Return every saved favorite as {"name", "url", "link"}."""
        ...

    async def add_favorite(self, record: dict) -> Optional[dict]:
        """Save {"name", "url", "link"}.

        Returns {"success"?, "error"?, "message"?, "preSignedImageUrl"?}.
        """
        ...

    async def remove_favorite(self, link: str) -> None:
        """Delete the favorite keyed by `link`. Raises on failure."""
        ...
