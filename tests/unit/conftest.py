"""Shared fixtures for unit tests."""

from unittest.mock import AsyncMock

import pytest

from factories import FakeViewportObserver
from recipe_search.utils.notifications import Notifier


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def client():
    """Search client double with async search/fetch_page/autocomplete."""
    mock = AsyncMock()
    mock.search = AsyncMock()
    mock.fetch_page = AsyncMock()
    mock.autocomplete = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def gateway():
    """PersistenceGateway double."""
    mock = AsyncMock()
    mock.fetch_favorites = AsyncMock(return_value=[])
    mock.add_favorite = AsyncMock(return_value={})
    mock.remove_favorite = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def observer():
    return FakeViewportObserver()
