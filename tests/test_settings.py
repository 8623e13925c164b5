"""Tests for configuration loading."""

import pytest

from upi_tracker.config import TrackerSettings, get_settings


class TestTrackerSettings:

    def test_defaults(self):
        settings = TrackerSettings()
        assert settings.uri_scheme == "upi"
        assert settings.currency_code == "INR"
        assert settings.default_note == "Expense"
        assert settings.confirm_prompt_delay_ms == 1500
        assert settings.uri_prefix == "upi://"

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("UPI_TRACKER_CURRENCY_CODE", "npr")
        monkeypatch.setenv("UPI_TRACKER_CONFIRM_PROMPT_DELAY_MS", "0")
        settings = TrackerSettings()
        assert settings.currency_code == "NPR"
        assert settings.confirm_prompt_delay_ms == 0

    def test_scheme_normalized(self):
        assert TrackerSettings(uri_scheme="UPI://").uri_scheme == "upi"

    @pytest.mark.parametrize("code", ["RUPEE", "12A", ""])
    def test_invalid_currency(self, code):
        with pytest.raises(ValueError):
            TrackerSettings(currency_code=code)

    def test_delay_bounds(self):
        with pytest.raises(ValueError):
            TrackerSettings(confirm_prompt_delay_ms=-1)

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
