"""
Runtime settings for battles and scripts.

Values come from environment variables, with a ``.env`` file in the working
directory loaded first.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .catalog import DEFAULT_CATALOG_PATH
from .stats import Difficulty, parse_difficulty


ENV_PREFIX = "GAMECORE_"
DEFAULT_MAX_TURNS = 200


def _env(name: str) -> Optional[str]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse(name: str, convert, default):
    raw = _env(name)
    if raw is None:
        return default
    try:
        return convert(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from None


def _positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError(raw)
    return value


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise ValueError(raw)
    return value


def _log_level(raw: str) -> str:
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(raw)
    return level


@dataclass(frozen=True)
class Settings:
    """
    Battle settings.

    Attributes:
        catalog_path: Component catalog JSON file.
        map_width: Combat map width.
        map_height: Combat map height.
        difficulty: AI difficulty for engine power.
        seed: Seed for the battle's random source, None for unseeded.
        log_level: Logging level name for scripts.
        max_turns: Turn limit for automated battles.
    """
    catalog_path: Path = DEFAULT_CATALOG_PATH
    map_width: float = 1000.0
    map_height: float = 1000.0
    difficulty: Difficulty = Difficulty.EASY
    seed: Optional[int] = None
    log_level: str = "INFO"
    max_turns: int = DEFAULT_MAX_TURNS

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """
        Read settings from GAMECORE_* environment variables.

        Args:
            dotenv: Load a .env file into the environment first.

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        return cls(
            catalog_path=_parse("CATALOG_PATH", Path, DEFAULT_CATALOG_PATH),
            map_width=_parse("MAP_WIDTH", _positive_float, 1000.0),
            map_height=_parse("MAP_HEIGHT", _positive_float, 1000.0),
            difficulty=_parse("DIFFICULTY", parse_difficulty, Difficulty.EASY),
            seed=_parse("SEED", int, None),
            log_level=_parse("LOG_LEVEL", _log_level, "INFO"),
            max_turns=_parse("MAX_TURNS", _positive_int, DEFAULT_MAX_TURNS),
        )
