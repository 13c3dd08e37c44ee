"""Pytest configuration and fixtures for integration tests.

Loads .env and skips the whole suite when Edamam credentials are missing.
These tests hit the live search API.
"""

import os
import pytest
from dotenv import load_dotenv
from pathlib import Path


def pytest_configure(config):
    """Load .env from the project root before test collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests require EDAMAM_APP_ID and EDAMAM_APP_KEY")
    print(f"Environment loaded from: {env_path}")
    print(f"Search API: {os.getenv('SEARCH_API_URL', 'https://api.edamam.com/api/recipes/v2')}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip integration tests when the search API credentials are not configured."""
    missing = [key for key in ("EDAMAM_APP_ID", "EDAMAM_APP_KEY") if not os.getenv(key)]
    if missing:
        pytest.skip(
            f"Integration tests skipped. Missing API keys: {', '.join(missing)}. Please set these in your .env file.",
            allow_module_level=True,
        )
