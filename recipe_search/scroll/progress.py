"""Scroll position helpers: reading progress and sentinel placement."""

from typing import Optional

from pydantic import BaseModel

from recipe_search.utils.config import config


class ScrollProgress(BaseModel):
    percent: float
    current_card: int


def compute_scroll_progress(
    scroll_top: float, scroll_height: float, viewport_height: float, item_count: int
) -> ScrollProgress:
    """Map the document scroll position onto the rendered result cards.

    Args:
        scroll_top: Pixels scrolled from the top of the document.
        scroll_height: Total document height in pixels.
        viewport_height: Visible height in pixels.
        item_count: Number of rendered results.

    Returns:
        Percentage scrolled (0-100) and the 1-based card under that position
        (0 when there are no items). A page that cannot scroll counts as fully read.
    """
    scrollable = scroll_height - viewport_height
    if scrollable <= 0:
        percent = 100.0
    else:
        percent = min(max(scroll_top / scrollable * 100, 0.0), 100.0)

    if item_count <= 0:
        return ScrollProgress(percent=percent, current_card=0)

    max_index = item_count - 1
    current_index = min(round(percent / 100 * max_index), max_index)
    return ScrollProgress(percent=percent, current_card=current_index + 1)


def sentinel_index(item_count: int, offset: Optional[int] = None) -> Optional[int]:
    """Index of the item that carries the sentinel: `offset` places from the end.

    Lists shorter than the offset put the sentinel on the first item; an empty list has none.
    """
    if item_count <= 0:
        return None
    offset = config.SENTINEL_OFFSET if offset is None else offset
    return max(item_count - offset, 0)
