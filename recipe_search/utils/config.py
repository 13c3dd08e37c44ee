"""Configuration management for the recipe search core.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Search core configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Recipe search endpoint (Edamam recipes v2 or a proxy exposing the same payload)
        self.SEARCH_API_URL: str = os.getenv("SEARCH_API_URL", "https://api.edamam.com/api/recipes/v2")
        # Autocomplete endpoint: returns {"data": [...]} or a bare list of suggestion strings
        self.AUTOCOMPLETE_API_URL: str = os.getenv("AUTOCOMPLETE_API_URL", "https://api.edamam.com/auto-complete")
        # Edamam credentials: optional when SEARCH_API_URL points at a proxy that signs requests itself
        self.EDAMAM_APP_ID: Optional[str] = os.getenv("EDAMAM_APP_ID")
        self.EDAMAM_APP_KEY: Optional[str] = os.getenv("EDAMAM_APP_KEY")
        # Total timeout for a single HTTP request, in seconds. Default: 10
        self.REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
        # Minimum spacing between infinite-scroll page loads, in milliseconds. Default: 444
        self.SCROLL_THROTTLE_MS: int = int(os.getenv("SCROLL_THROTTLE_MS", "444"))
        # Fraction of the sentinel that must be visible before a page load fires (0.0 - 1.0). Default: 0.3
        self.SENTINEL_VISIBILITY_THRESHOLD: float = float(os.getenv("SENTINEL_VISIBILITY_THRESHOLD", "0.3"))
        # Sentinel sits this many items before the end of the rendered list. Default: 8
        self.SENTINEL_OFFSET: int = int(os.getenv("SENTINEL_OFFSET", "8"))
        # Autocomplete only queries once the partial query reaches this length. Default: 3
        self.MIN_SUGGEST_CHARS: int = int(os.getenv("MIN_SUGGEST_CHARS", "3"))
        # Cooldown after a 429 when the server sends no Retry-After header, in seconds. Default: 60
        self.THROTTLE_COOLDOWN_SECONDS: float = float(os.getenv("THROTTLE_COOLDOWN_SECONDS", "60"))

    @property
    def scroll_throttle_seconds(self) -> float:
        return self.SCROLL_THROTTLE_MS / 1000

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If credentials are half-configured or values are out of range.
        """
        if bool(self.EDAMAM_APP_ID) != bool(self.EDAMAM_APP_KEY):
            raise ValueError("EDAMAM_APP_ID and EDAMAM_APP_KEY must be set together")
        if not self.SEARCH_API_URL.startswith(("http://", "https://")):
            raise ValueError(f"SEARCH_API_URL must be an http(s) URL, got: {self.SEARCH_API_URL}")
        if not self.AUTOCOMPLETE_API_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"AUTOCOMPLETE_API_URL must be an http(s) URL, got: {self.AUTOCOMPLETE_API_URL}"
            )
        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.SCROLL_THROTTLE_MS < 0:
            raise ValueError(f"SCROLL_THROTTLE_MS must be >= 0, got: {self.SCROLL_THROTTLE_MS}")
        if not (0.0 <= self.SENTINEL_VISIBILITY_THRESHOLD <= 1.0):
            raise ValueError(
                f"SENTINEL_VISIBILITY_THRESHOLD must be between 0.0 and 1.0, got: {self.SENTINEL_VISIBILITY_THRESHOLD}"
            )
        if self.SENTINEL_OFFSET < 1:
            raise ValueError(f"SENTINEL_OFFSET must be at least 1, got: {self.SENTINEL_OFFSET}")
        if self.MIN_SUGGEST_CHARS < 1:
            raise ValueError(f"MIN_SUGGEST_CHARS must be at least 1, got: {self.MIN_SUGGEST_CHARS}")
        if self.THROTTLE_COOLDOWN_SECONDS < 0:
            raise ValueError(
                f"THROTTLE_COOLDOWN_SECONDS must be >= 0, got: {self.THROTTLE_COOLDOWN_SECONDS}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
