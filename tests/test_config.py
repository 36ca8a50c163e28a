"""
Tests for environment-driven settings.

Run with: python -m pytest tests/test_config.py -v
"""

import os
from pathlib import Path

import pytest

from gamecore.catalog import DEFAULT_CATALOG_PATH
from gamecore.config import Settings
from gamecore.stats import Difficulty


VARIABLES = (
    "CATALOG_PATH", "MAP_WIDTH", "MAP_HEIGHT", "DIFFICULTY",
    "SEED", "LOG_LEVEL", "MAX_TURNS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in VARIABLES:
        monkeypatch.delenv(f"GAMECORE_{name}", raising=False)


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env(dotenv=False)
        assert settings == Settings()
        assert settings.catalog_path == DEFAULT_CATALOG_PATH
        assert settings.map_width == 1000.0
        assert settings.difficulty is Difficulty.EASY
        assert settings.seed is None
        assert settings.log_level == "INFO"
        assert settings.max_turns == 200

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GAMECORE_CATALOG_PATH", "/tmp/catalog.json")
        monkeypatch.setenv("GAMECORE_MAP_WIDTH", "800")
        monkeypatch.setenv("GAMECORE_MAP_HEIGHT", "600.5")
        monkeypatch.setenv("GAMECORE_DIFFICULTY", "Hard")
        monkeypatch.setenv("GAMECORE_SEED", "42")
        monkeypatch.setenv("GAMECORE_LOG_LEVEL", "debug")
        monkeypatch.setenv("GAMECORE_MAX_TURNS", "50")
        settings = Settings.from_env(dotenv=False)
        assert settings.catalog_path == Path("/tmp/catalog.json")
        assert settings.map_width == 800.0
        assert settings.map_height == 600.5
        assert settings.difficulty is Difficulty.HARD
        assert settings.seed == 42
        assert settings.log_level == "DEBUG"
        assert settings.max_turns == 50

    def test_blank_values_use_defaults(self, monkeypatch):
        monkeypatch.setenv("GAMECORE_SEED", "  ")
        assert Settings.from_env(dotenv=False).seed is None

    @pytest.mark.parametrize("name,value", [
        ("MAP_WIDTH", "wide"),
        ("MAP_WIDTH", "-5"),
        ("DIFFICULTY", "nightmare"),
        ("SEED", "1.5"),
        ("LOG_LEVEL", "chatty"),
        ("MAX_TURNS", "0"),
    ])
    def test_invalid_values_name_the_variable(self, monkeypatch, name, value):
        monkeypatch.setenv(f"GAMECORE_{name}", value)
        with pytest.raises(ValueError, match=f"GAMECORE_{name}"):
            Settings.from_env(dotenv=False)

    def test_dotenv_file_is_loaded(self, monkeypatch, tmp_path):
        (tmp_path / ".env").write_text("GAMECORE_MAX_TURNS=12\n")
        monkeypatch.chdir(tmp_path)
        try:
            assert Settings.from_env().max_turns == 12
        finally:
            os.environ.pop("GAMECORE_MAX_TURNS", None)
