"""Unit tests for configuration management."""

import pytest

from recipe_search.utils.config import Config


CONFIG_KEYS = (
    "SEARCH_API_URL",
    "AUTOCOMPLETE_API_URL",
    "EDAMAM_APP_ID",
    "EDAMAM_APP_KEY",
    "REQUEST_TIMEOUT_SECONDS",
    "SCROLL_THROTTLE_MS",
    "SENTINEL_VISIBILITY_THRESHOLD",
    "SENTINEL_OFFSET",
    "MIN_SUGGEST_CHARS",
    "THROTTLE_COOLDOWN_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, clean_env):
        """Test that Config uses default values when env vars not set."""
        config = Config()

        assert config.SEARCH_API_URL == "https://api.edamam.com/api/recipes/v2"
        assert config.AUTOCOMPLETE_API_URL == "https://api.edamam.com/auto-complete"
        assert config.EDAMAM_APP_ID is None
        assert config.EDAMAM_APP_KEY is None
        assert config.REQUEST_TIMEOUT_SECONDS == 10.0
        assert config.SCROLL_THROTTLE_MS == 444
        assert config.SENTINEL_VISIBILITY_THRESHOLD == 0.3
        assert config.SENTINEL_OFFSET == 8
        assert config.MIN_SUGGEST_CHARS == 3
        assert config.THROTTLE_COOLDOWN_SECONDS == 60.0

    def test_config_loads_from_environment(self, clean_env):
        """Test that Config loads values from environment variables."""
        clean_env.setenv("SEARCH_API_URL", "http://localhost:3000/api/search")
        clean_env.setenv("EDAMAM_APP_ID", "app-id")
        clean_env.setenv("EDAMAM_APP_KEY", "app-key")
        clean_env.setenv("SCROLL_THROTTLE_MS", "250")
        clean_env.setenv("SENTINEL_VISIBILITY_THRESHOLD", "0.5")

        config = Config()

        assert config.SEARCH_API_URL == "http://localhost:3000/api/search"
        assert config.EDAMAM_APP_ID == "app-id"
        assert config.EDAMAM_APP_KEY == "app-key"
        assert config.SCROLL_THROTTLE_MS == 250
        assert config.SENTINEL_VISIBILITY_THRESHOLD == 0.5

    def test_config_converts_numeric_types(self, clean_env):
        """Test that Config properly converts numeric environment variables."""
        clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "2.5")
        clean_env.setenv("SENTINEL_OFFSET", "4")

        config = Config()

        assert isinstance(config.REQUEST_TIMEOUT_SECONDS, float)
        assert isinstance(config.SENTINEL_OFFSET, int)
        assert isinstance(config.SCROLL_THROTTLE_MS, int)

    def test_scroll_throttle_seconds(self, clean_env):
        """Test that the throttle window is exposed in seconds."""
        clean_env.setenv("SCROLL_THROTTLE_MS", "500")

        assert Config().scroll_throttle_seconds == 0.5


class TestConfigValidation:
    """Test Config validation logic."""

    def test_defaults_are_valid(self, clean_env):
        """Test that validate() succeeds with defaults only."""
        Config().validate()  # Should not raise

    def test_validate_requires_both_credentials(self, clean_env):
        """Test that a lone EDAMAM_APP_ID is rejected."""
        clean_env.setenv("EDAMAM_APP_ID", "app-id")

        with pytest.raises(ValueError, match="EDAMAM_APP_ID and EDAMAM_APP_KEY"):
            Config().validate()

    def test_validate_rejects_non_http_search_url(self, clean_env):
        clean_env.setenv("SEARCH_API_URL", "ftp://example.com/search")

        with pytest.raises(ValueError, match="SEARCH_API_URL"):
            Config().validate()

    def test_validate_rejects_threshold_out_of_range(self, clean_env):
        clean_env.setenv("SENTINEL_VISIBILITY_THRESHOLD", "1.5")

        with pytest.raises(ValueError, match="SENTINEL_VISIBILITY_THRESHOLD"):
            Config().validate()

    def test_validate_rejects_non_positive_timeout(self, clean_env):
        clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "0")

        with pytest.raises(ValueError, match="REQUEST_TIMEOUT_SECONDS"):
            Config().validate()

    def test_validate_rejects_negative_throttle(self, clean_env):
        clean_env.setenv("SCROLL_THROTTLE_MS", "-1")

        with pytest.raises(ValueError, match="SCROLL_THROTTLE_MS"):
            Config().validate()

    def test_validate_rejects_zero_sentinel_offset(self, clean_env):
        clean_env.setenv("SENTINEL_OFFSET", "0")

        with pytest.raises(ValueError, match="SENTINEL_OFFSET"):
            Config().validate()

    def test_validate_rejects_zero_min_suggest_chars(self, clean_env):
        clean_env.setenv("MIN_SUGGEST_CHARS", "0")

        with pytest.raises(ValueError, match="MIN_SUGGEST_CHARS"):
            Config().validate()
