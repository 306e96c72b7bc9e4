"""Tests for game configuration."""

import pytest
from pydantic import ValidationError

from citric_liquid.config import (
    DEFAULT_STARS_NORMA,
    GameConfig,
    get_config_path,
    load_config,
    save_config,
)


class TestGameConfig:
    """Test config defaults and validation."""

    def test_defaults(self):
        """Defaults match the classic rules."""
        config = GameConfig()
        assert config.dice_sides == 6
        assert config.final_norma_level == 6
        assert config.recovery_counter == 6
        assert config.stars_norma == DEFAULT_STARS_NORMA
        assert config.wins_norma[5] == 20

    def test_tables_are_not_shared(self):
        """Each config owns its threshold tables."""
        first = GameConfig()
        first.stars_norma[1] = 99
        assert GameConfig().stars_norma[1] == 10

    def test_rejects_bad_tables(self):
        """Empty or negative tables are invalid."""
        with pytest.raises(ValidationError):
            GameConfig(stars_norma={})
        with pytest.raises(ValidationError):
            GameConfig(wins_norma={0: 3})
        with pytest.raises(ValidationError):
            GameConfig(final_norma_level=1)


class TestConfigFiles:
    """Test loading and saving JSON config."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """No file means default rules."""
        assert load_config(tmp_path / "nope.json") == GameConfig()

    def test_save_and_load(self, tmp_path):
        """Saved settings are read back."""
        path = get_config_path(tmp_path)
        config = GameConfig(seed=7, final_norma_level=3, stars_norma={1: 5, 2: 15})
        assert save_config(config, path)
        loaded = load_config(path)
        assert loaded.seed == 7
        assert loaded.stars_norma == {1: 5, 2: 15}

    def test_partial_file_merges_defaults(self, tmp_path):
        """Missing keys fall back to defaults."""
        path = tmp_path / "partial.json"
        path.write_text('{"dice_sides": 4}', encoding="utf-8")
        config = load_config(path)
        assert config.dice_sides == 4
        assert config.recovery_counter == 6

    def test_unreadable_file_gives_defaults(self, tmp_path, caplog):
        """Corrupt files are logged and ignored."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(path) == GameConfig()
        assert "Ignoring unreadable config" in caplog.text

    def test_save_creates_directory(self, tmp_path):
        """Parent directories are created on save."""
        path = tmp_path / "nested" / "dir" / "citric_liquid.json"
        assert save_config(GameConfig(), path)
        assert path.exists()
