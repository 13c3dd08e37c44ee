"""Data models for the recipe search core.

Defines Pydantic models for the search wire payload, the accumulated result
set, favorite records and the tagged outcomes returned by core operations.
All models use Pydantic v2.
"""

import re
from enum import Enum
from string import capwords
from typing import Annotated, Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from recipe_search.utils.logger import logger


# Edamam share links end their slug with a 32-char hex recipe hash
_HASH_SUFFIX = re.compile(r"-[0-9a-f]{32}$", re.IGNORECASE)


def extract_recipe_name(link: str) -> str:
    """Derive a display name from a recipe share link.

    "http://www.edamam.com/recipe/chicken-vesuvio-b79327d05b8e5b838ad6cfd9576b30b6/chicken"
    becomes "Chicken Vesuvio". Falls back to the link itself when no slug is found.
    """
    segments = [s for s in urlparse(link).path.split("/") if s]
    if not segments:
        return link

    if "recipe" in segments and segments.index("recipe") + 1 < len(segments):
        slug = segments[segments.index("recipe") + 1]
    else:
        slug = segments[-1]

    slug = _HASH_SUFFIX.sub("", slug)
    words = slug.replace("_", " ").replace("-", " ").split()
    return capwords(" ".join(words)) if words else link


class RecipeImage(BaseModel):
    """One rendition of a recipe image (THUMBNAIL, SMALL, REGULAR, LARGE)."""

    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class Recipe(BaseModel):
    """A search hit. Read-only; the share link is its identity.

    The remote API has no numeric id, so `identity` doubles as the favorites key.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")

    identity: Annotated[str, Field(alias="shareAs", min_length=1, description="Canonical share link of the recipe")]
    label: Annotated[Optional[str], Field(None, description="Display name, when the API provides one")]
    image: Annotated[Optional[str], Field(None, description="Default image URL")]
    images: Annotated[Dict[str, RecipeImage], Field(default_factory=dict, description="Image renditions by size")]

    @property
    def name(self) -> str:
        return self.label or extract_recipe_name(self.identity)

    @property
    def image_ref(self) -> str:
        if self.image:
            return self.image
        small = self.images.get("SMALL")
        return small.url if small else ""

    @classmethod
    def from_hit(cls, hit: dict) -> "Recipe":
        """Build from one element of the response's `hits` array ({"recipe": {...}})."""
        return cls.model_validate(hit.get("recipe", hit))


class SearchPage(BaseModel):
    """One page of results as returned by the search or pagination endpoint."""

    items: List[Recipe] = Field(default_factory=list)
    total_count: Annotated[int, Field(0, ge=0)]
    continuation_cursor: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "SearchPage":
        """Parse `{hits, count, _links: {next: {href}}}`.

        The next-page href is kept verbatim; it is an opaque cursor. Hits that
        fail validation are skipped with a warning, the rest of the page is kept.
        """
        items = []
        for hit in payload.get("hits") or []:
            try:
                items.append(Recipe.from_hit(hit))
            except ValidationError as e:
                logger.warning(f"Skipping malformed search hit: {e.error_count()} validation error(s)")
        next_link = (payload.get("_links") or {}).get("next") or {}
        return cls(
            items=items,
            total_count=payload.get("count") or 0,
            continuation_cursor=next_link.get("href") or None,
        )


class SearchResultSet(BaseModel):
    """Accumulated results for the current query session.

    `items` only grows while paginating one query; a new query replaces it.
    """

    items: List[Recipe] = Field(default_factory=list)
    total_count: int = 0
    continuation_cursor: Optional[str] = None

    @property
    def has_next_page(self) -> bool:
        return bool(self.continuation_cursor)

    def replace(self, page: SearchPage) -> None:
        self.items = list(page.items)
        self.total_count = page.total_count
        self.continuation_cursor = page.continuation_cursor

    def append(self, page: SearchPage) -> None:
        self.items = [*self.items, *page.items]
        self.total_count = page.total_count
        self.continuation_cursor = page.continuation_cursor

    def clear(self) -> None:
        self.items = []
        self.total_count = 0
        self.continuation_cursor = None


class FavoriteRecord(BaseModel):
    """A saved recipe, keyed by its share link.

    Wire format (PersistenceGateway) is {"name", "url", "link"}; all three must be non-empty.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, frozen=True, extra="ignore")

    identity: Annotated[str, Field(alias="link", min_length=1, description="Recipe share link")]
    name: Annotated[str, Field(min_length=1, description="Recipe display name")]
    image_ref: Annotated[str, Field(alias="url", min_length=1, description="Recipe image URL")]

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "FavoriteRecord":
        return cls(identity=recipe.identity, name=recipe.name, image_ref=recipe.image_ref)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class AddFavoriteResponse(BaseModel):
    """Result of PersistenceGateway.add_favorite.

    `error` is a business error. `success` without a pre-signed image URL is the
    store acknowledging it saved nothing new (e.g. the recipe was already a favorite).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: Optional[bool] = None
    error: Optional[str] = None
    message: Optional[str] = None
    pre_signed_image_url: Annotated[Optional[str], Field(None, alias="preSignedImageUrl")]

    @property
    def is_soft_error(self) -> bool:
        return bool(self.error) or (bool(self.success) and not self.pre_signed_image_url)

    @property
    def rejection_message(self) -> str:
        return self.error or self.message or "Couldn't add favorite"


class SearchSession(BaseModel):
    """Snapshot of the query state driving the search engine."""

    query_text: str = ""
    last_completed_query_text: str = ""
    in_flight: bool = False


class ScrollState(BaseModel):
    """Snapshot of pagination state; `pending` is true while a next-page fetch runs."""

    pending: bool = False


class SearchStatus(str, Enum):
    """Outcome of SearchEngine.search / load_next_page."""

    APPLIED = "applied"        # result set replaced (new query) or appended (next page)
    MERGED = "merged"          # same query re-run; page replaced the existing results wholesale
    SKIPPED = "skipped"        # no request issued (empty query, no cursor, load already pending)
    STALE = "stale"            # response arrived for a query that is no longer wanted
    THROTTLED = "throttled"
    REJECTED = "rejected"
    FAILED = "failed"


class MutationOutcome(str, Enum):
    APPLIED = "applied"
    ROLLED_BACK = "rolled_back"


class FavoriteAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


class ToggleResult(BaseModel):
    """What FavoritesStore.toggle did, and whether it stuck."""

    action: FavoriteAction
    outcome: MutationOutcome
    identity: str
    message: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.outcome == MutationOutcome.APPLIED


class HydrateResult(BaseModel):
    loaded: int = 0
    rejected: int = 0
    failed: bool = False
