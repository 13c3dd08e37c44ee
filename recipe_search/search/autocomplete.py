"""Suggestion strings for a partially typed query.

Suggestions are advisory: the latest completed call overwrites them
unconditionally, so no stale-response guard is kept here.
"""

from typing import List, Optional

from recipe_search.utils.config import config
from recipe_search.utils.errors import ErrorKind, classify_error
from recipe_search.utils.logger import logger
from recipe_search.utils.notifications import Notifier


class AutocompleteFeed:
    """Holds the current suggestions, independent of the search engine's lifecycle."""

    def __init__(self, client, notifier: Optional[Notifier] = None, min_chars: Optional[int] = None) -> None:
        self.client = client
        self.notifier = notifier or Notifier()
        self.min_chars = config.MIN_SUGGEST_CHARS if min_chars is None else min_chars
        self.suggestions: List[str] = []

    async def suggest(self, partial_query: str) -> List[str]:
        """Refresh suggestions for `partial_query`; clears them below the minimum length."""
        if len(partial_query) < self.min_chars:
            self.suggestions = []
            return self.suggestions

        try:
            suggestions = await self.client.autocomplete(partial_query)
        except Exception as e:
            kind = classify_error(e)
            if kind == ErrorKind.HARD_FAILURE:
                logger.error(f"Autocomplete failed unexpectedly: {e}", exc_info=True, extra={"query": partial_query})
            else:
                logger.warning(f"Autocomplete failed: {e}", extra={"query": partial_query})
            self.notifier.error("Couldn't load suggestions", kind)
            return self.suggestions

        self.suggestions = list(suggestions or [])
        return self.suggestions

    def clear(self) -> None:
        self.suggestions = []
