"""
Tests for settings loading.
"""
import pytest
from pydantic import ValidationError

from herbie_runner.config import Settings, get_settings
from herbie_runner.gameplay.game import Game


class TestSettings:
    """Tests for Settings defaults and overrides."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = Settings()
        assert settings.view_width == 800
        assert settings.view_height == 600
        assert settings.max_delta_time == pytest.approx(0.1)
        assert settings.hud_update_interval_ms == pytest.approx(100.0)
        assert settings.palette == "sunset"

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HERBIE_MAX_STRETCH", "300")
        monkeypatch.setenv("HERBIE_PALETTE", "dawn")
        settings = Settings()
        assert settings.max_stretch == 300.0
        assert settings.palette == "dawn"

    def test_rejects_bad_values(self):
        with pytest.raises(ValidationError):
            Settings(max_delta_time=0)
        with pytest.raises(ValidationError):
            Settings(view_width=-1)

    def test_get_settings_is_cached(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

    def test_game_uses_tuning(self, tmp_path):
        settings = Settings(
            target_spacing=40.0,
            max_delta_time=0.05,
            preferences_path=tmp_path / "prefs.json",
        )
        game = Game(settings=settings)
        game.start_game()
        assert game.caravan.hikers[1].x == pytest.approx(160.0)

        game.update(1.0)
        assert game.caravan.leader.x == pytest.approx(205.0)
