"""Visibility observation as an injected capability.

The browser's IntersectionObserver becomes a ViewportObserver that the host
environment provides. Tests pass a fake that fires entries synchronously.
"""

from typing import Any, Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class VisibilityEntry(BaseModel):
    """Visibility change for one observed element."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target: Any
    is_intersecting: bool
    intersection_ratio: float = Field(ge=0.0, le=1.0)


VisibilityCallback = Callable[[VisibilityEntry], None]


@runtime_checkable
class ViewportObserver(Protocol):
    def observe(self, target: Any, callback: VisibilityCallback, threshold: float) -> None:
        """Start reporting visibility changes of `target` crossing `threshold`."""
        ...

    def unobserve(self, target: Any) -> None:
        ...
