"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from timeline_layout.config import Settings, get_settings, reload_settings
from timeline_layout.utils.time_utils import MS_PER_DAY, MS_PER_HOUR


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop any settings cached by a test."""
    yield
    reload_settings()


class TestSettings:
    """Tests for Settings defaults and overrides."""

    def test_defaults(self):
        settings = Settings()
        assert settings.row_height == 44
        assert settings.row_gap == 8
        assert settings.lane_step == 12
        assert settings.min_scale == pytest.approx(1 / (30 * MS_PER_DAY))
        assert settings.max_scale == pytest.approx(8 / MS_PER_HOUR)
        assert settings.initial_span_days is None
        assert settings.wheel_zoom_no_ctrl is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TIMELINE_ROW_HEIGHT", "30")
        monkeypatch.setenv("TIMELINE_WHEEL_ZOOM_NO_CTRL", "true")
        monkeypatch.setenv("TIMELINE_INITIAL_SPAN_DAYS", "14")
        settings = Settings()
        assert settings.row_height == 30
        assert settings.wheel_zoom_no_ctrl is True
        assert settings.initial_span_days == 14

    def test_rejects_non_positive_step(self, monkeypatch):
        monkeypatch.setenv("TIMELINE_LANE_STEP", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_zoom_options(self, monkeypatch):
        monkeypatch.setenv("TIMELINE_INITIAL_SPAN_DAYS", "7")
        options = Settings().zoom_options(initial_center_time=1000)
        assert options.initial_span_days == 7
        assert options.initial_center_time == 1000
        assert options.max_scale == pytest.approx(8 / MS_PER_HOUR)

    def test_route_options(self, monkeypatch):
        monkeypatch.setenv("TIMELINE_CORNER_RADIUS", "4")
        monkeypatch.setenv("TIMELINE_EDGE_PADDING", "10")
        options = Settings().route_options()
        assert options.radius == 4
        assert options.padding == 10


class TestGlobalSettings:
    """Tests for the cached settings instance."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reload_picks_up_env(self, monkeypatch):
        get_settings()
        monkeypatch.setenv("TIMELINE_ROW_GAP", "2")
        assert get_settings().row_gap != 2
        assert reload_settings().row_gap == 2
        assert get_settings().row_gap == 2
