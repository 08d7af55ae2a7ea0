"""
Tests for settings validation.
"""

from unittest.mock import patch

import pytest

from voltstore.config import Settings, _clean_credential


class TestSettings:

    def test_defaults_are_valid(self):
        Settings.validate()

    @pytest.mark.parametrize("name", ["RATE_CACHE_HOURS", "RATE_SUPPRESS_HOURS", "GENERATION_TIMEOUT_SECONDS"])
    def test_non_positive_duration_is_rejected(self, name):
        with patch.object(Settings, name, 0):
            with pytest.raises(ValueError, match=name):
                Settings.validate()

    def test_negative_debounce_is_rejected(self):
        with patch.object(Settings, "RATE_REFRESH_DEBOUNCE_SECONDS", -1):
            with pytest.raises(ValueError):
                Settings.validate()

    def test_durations_in_milliseconds(self):
        settings = Settings()

        with patch.object(Settings, "RATE_CACHE_HOURS", 24), patch.object(Settings, "RATE_SUPPRESS_HOURS", 4):
            assert settings.RATE_CACHE_DURATION_MS == 86_400_000
            assert settings.RATE_SUPPRESS_DURATION_MS == 14_400_000

    def test_missing_optional_lists_unset_integrations(self):
        with patch.object(Settings, "GEMINI_API_KEY", ""), patch.object(Settings, "SUPABASE_URL", "x"):
            assert Settings.missing_optional() == ["GEMINI_API_KEY"]

    @pytest.mark.parametrize("raw, expected", [
        ("  key  ", "key"),
        ('"key"', "key"),
        ("'key'\n", "key"),
        ("", ""),
    ])
    def test_clean_credential(self, raw, expected):
        assert _clean_credential(raw) == expected
