"""Favorites synchronization with optimistic updates.

FavoritesStore keeps the identity -> FavoriteRecord mapping the UI renders.
Mutations are applied locally first, then sent to the PersistenceGateway:

- add: a provisional record is inserted immediately. A business error, a
  duplicate acknowledgement or an exception removes it again (rollback); a
  confirmed add may replace its image with the server's pre-signed URL.
- remove: the record is dropped immediately and the remote delete is
  best-effort. A failed delete is reported but not undone locally.

Rollback and confirmation only touch an entry if it is still the exact
provisional record this call inserted, so an interleaved toggle or hydrate is
never clobbered.

While a hydrate is waiting on the gateway, every local change is journaled
with a version number. When the fetch returns, identities changed since the
hydrate started keep their local state instead of the (older) server snapshot.
"""

from typing import Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from recipe_search.favorites.gateway import PersistenceGateway
from recipe_search.models.models import (
    AddFavoriteResponse,
    FavoriteAction,
    FavoriteRecord,
    HydrateResult,
    MutationOutcome,
    Recipe,
    ToggleResult,
)
from recipe_search.utils.errors import ErrorKind, classify_error
from recipe_search.utils.logger import logger
from recipe_search.utils.notifications import GENERIC_ERROR_MESSAGE, Notifier


INVALID_FAVORITE_MESSAGE = "Invalid favorite data"
REMOVED_MESSAGE = "Removed!"
REMOVE_FAILED_MESSAGE = "Couldn't remove favorite"


class FavoritesStore:
    """Owns the favorites mapping for one session. The remote store is authoritative."""

    def __init__(self, gateway: PersistenceGateway, notifier: Optional[Notifier] = None) -> None:
        self.gateway = gateway
        self.notifier = notifier or Notifier()
        self.loading = False
        self._favorites: Dict[str, FavoriteRecord] = {}
        self._pending_adds: Dict[str, FavoriteRecord] = {}
        self._pending_removes: Set[str] = set()
        self._version = 0
        self._hydrations = 0
        # identity -> (version, local record or None when absent); only kept while a hydrate runs
        self._journal: Dict[str, Tuple[int, Optional[FavoriteRecord]]] = {}

    @property
    def favorites(self) -> Dict[str, FavoriteRecord]:
        """Copy of the current mapping."""
        return dict(self._favorites)

    @property
    def records(self) -> List[FavoriteRecord]:
        return list(self._favorites.values())

    def is_favorite(self, identity: str) -> bool:
        return identity in self._favorites

    def __contains__(self, identity: str) -> bool:
        return identity in self._favorites

    def __len__(self) -> int:
        return len(self._favorites)

    def _record_change(self, identity: str) -> None:
        self._version += 1
        if self._hydrations:
            self._journal[identity] = (self._version, self._favorites.get(identity))

    def _changes_since(self, version: int) -> Dict[str, Optional[FavoriteRecord]]:
        """Local state of every identity changed after `version`. Ends one hydration."""
        changed = {
            identity: record
            for identity, (changed_at, record) in self._journal.items()
            if changed_at > version
        }
        self._hydrations -= 1
        if not self._hydrations:
            self._journal.clear()
        return changed

    async def hydrate(self) -> HydrateResult:
        """Load favorites from the gateway.

        Malformed entries are skipped with a validation notification; the
        rest still load. Entries with a mutation in flight, or one that
        finished while the fetch was running, keep their local state.
        """
        self.loading = True
        self._hydrations += 1
        started_at = self._version
        try:
            entries = await self.gateway.fetch_favorites()
        except Exception as e:
            kind = classify_error(e)
            if kind == ErrorKind.HARD_FAILURE:
                logger.error(f"Error fetching favorites: {e}", exc_info=True)
            else:
                logger.warning(f"Error fetching favorites: {e}")
            self.notifier.error(str(e) or GENERIC_ERROR_MESSAGE, kind)
            return HydrateResult(failed=True)
        finally:
            self.loading = False
            changed = self._changes_since(started_at)

        if entries is None:
            logger.info("Favorites store returned nothing, keeping current favorites")
            return HydrateResult()

        loaded: Dict[str, FavoriteRecord] = {}
        rejected = 0
        for entry in entries:
            try:
                record = FavoriteRecord.model_validate(entry)
            except ValidationError as e:
                rejected += 1
                logger.warning(f"Skipping invalid favorite: {e.error_count()} validation error(s)")
                self.notifier.error(INVALID_FAVORITE_MESSAGE, ErrorKind.VALIDATION)
                continue
            loaded[record.identity] = record

        count = len(loaded)
        loaded.update(self._pending_adds)
        for identity in self._pending_removes:
            loaded.pop(identity, None)
        for identity, record in changed.items():
            if record is None:
                loaded.pop(identity, None)
            else:
                loaded[identity] = record
        self._favorites = loaded

        logger.info(f"Hydrated {count} favorites ({rejected} rejected, {len(changed)} changed locally)")
        return HydrateResult(loaded=count, rejected=rejected)

    async def toggle(self, recipe: Recipe) -> ToggleResult:
        """Remove the recipe if it is a favorite, add it otherwise."""
        if recipe.identity in self._favorites:
            return await self.remove(recipe.identity)
        return await self.add(recipe)

    async def remove(self, identity: str) -> ToggleResult:
        self._favorites.pop(identity, None)
        self._pending_removes.add(identity)
        self._record_change(identity)
        try:
            await self.gateway.remove_favorite(identity)
        except Exception as e:
            # Remote delete is best-effort: the local removal stands
            logger.warning(f"Remote favorite removal failed: {e}", extra={"identity": identity})
            self.notifier.error(REMOVE_FAILED_MESSAGE, classify_error(e))
            return ToggleResult(
                action=FavoriteAction.REMOVE,
                outcome=MutationOutcome.APPLIED,
                identity=identity,
                message=REMOVE_FAILED_MESSAGE,
            )
        finally:
            self._pending_removes.discard(identity)
            self._record_change(identity)

        self.notifier.success(REMOVED_MESSAGE)
        return ToggleResult(
            action=FavoriteAction.REMOVE,
            outcome=MutationOutcome.APPLIED,
            identity=identity,
            message=REMOVED_MESSAGE,
        )

    async def add(self, recipe: Recipe) -> ToggleResult:
        try:
            provisional = FavoriteRecord.from_recipe(recipe)
        except ValidationError as e:
            logger.warning(f"Cannot favorite recipe: {e.error_count()} validation error(s)", extra={"identity": recipe.identity})
            self.notifier.error(INVALID_FAVORITE_MESSAGE, ErrorKind.VALIDATION)
            return self._rolled_back(recipe.identity, INVALID_FAVORITE_MESSAGE)

        identity = provisional.identity
        self._favorites[identity] = provisional
        self._pending_adds[identity] = provisional
        self._record_change(identity)
        try:
            return await self._confirm_add(provisional)
        finally:
            self._record_change(identity)

    async def _confirm_add(self, provisional: FavoriteRecord) -> ToggleResult:
        """Send a provisional record to the gateway and settle it: confirm or roll back."""
        identity = provisional.identity
        try:
            raw = await self.gateway.add_favorite(provisional.to_payload())
            response = AddFavoriteResponse.model_validate(raw or {})
        except Exception as e:
            self._discard_provisional(provisional)
            kind = classify_error(e)
            if kind == ErrorKind.HARD_FAILURE:
                logger.error(f"Error adding favorite: {e}", exc_info=True, extra={"identity": identity})
                message = GENERIC_ERROR_MESSAGE
            else:
                logger.warning(f"Error adding favorite: {e}", extra={"identity": identity})
                message = str(e) or GENERIC_ERROR_MESSAGE
            self.notifier.error(message, kind)
            return self._rolled_back(identity, message)
        finally:
            if self._pending_adds.get(identity) is provisional:
                del self._pending_adds[identity]

        if response.is_soft_error:
            self._discard_provisional(provisional)
            message = response.rejection_message
            logger.info(f"Favorite not added: {message}", extra={"identity": identity})
            self.notifier.error(message, ErrorKind.SOFT_REJECT)
            return self._rolled_back(identity, message)

        if response.pre_signed_image_url and self._favorites.get(identity) is provisional:
            self._favorites[identity] = provisional.model_copy(
                update={"image_ref": response.pre_signed_image_url}
            )

        logger.info("Favorite added", extra={"identity": identity})
        return ToggleResult(
            action=FavoriteAction.ADD,
            outcome=MutationOutcome.APPLIED,
            identity=identity,
            message=response.message,
        )

    def _discard_provisional(self, provisional: FavoriteRecord) -> None:
        if self._favorites.get(provisional.identity) is provisional:
            del self._favorites[provisional.identity]

    @staticmethod
    def _rolled_back(identity: str, message: str) -> ToggleResult:
        return ToggleResult(
            action=FavoriteAction.ADD,
            outcome=MutationOutcome.ROLLED_BACK,
            identity=identity,
            message=message,
        )

    def clear(self) -> None:
        self._favorites.clear()
