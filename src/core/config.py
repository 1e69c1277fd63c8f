"""Runtime settings, read from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from src.core.exceptions import ConfigError

TRUE_VALUES = {"1", "true", "yes", "on"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///street_dice.db"
    sql_echo: bool = False
    win_score: int = 5
    charge_seconds: float = 2.5
    roll_seconds: float = 0.65
    frame_seconds: float = 0.08
    game_marker: str = "[[STREET_DICE]]"
    log_level: str = "INFO"


def _positive_int(env: Mapping[str, str], name: str, default: int, errors: list[str]) -> int:
    raw_value = env.get(name, str(default)).strip()
    try:
        parsed = int(raw_value)
    except ValueError:
        errors.append(f"{name} must be an integer, got {raw_value!r}.")
        return default
    if parsed <= 0:
        errors.append(f"{name} must be a positive integer.")
        return default
    return parsed


def _positive_float(env: Mapping[str, str], name: str, default: float, errors: list[str]) -> float:
    raw_value = env.get(name, str(default)).strip()
    try:
        parsed = float(raw_value)
    except ValueError:
        errors.append(f"{name} must be a number, got {raw_value!r}.")
        return default
    if parsed <= 0:
        errors.append(f"{name} must be positive.")
        return default
    return parsed


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from STREET_DICE_* environment variables.
    ----
    All problems are collected first and reported in a single ConfigError.
    """
    active_env = os.environ if env is None else env
    defaults = Settings()
    errors: list[str] = []

    database_url = active_env.get("STREET_DICE_DATABASE_URL", defaults.database_url).strip()
    if not database_url:
        errors.append("STREET_DICE_DATABASE_URL must not be empty.")

    game_marker = active_env.get("STREET_DICE_GAME_MARKER", defaults.game_marker)
    if not game_marker.strip():
        errors.append("STREET_DICE_GAME_MARKER must not be empty.")

    log_level = active_env.get("STREET_DICE_LOG_LEVEL", defaults.log_level).strip().upper()
    if log_level not in LOG_LEVELS:
        errors.append(f"STREET_DICE_LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}.")

    settings = Settings(
        database_url=database_url,
        sql_echo=active_env.get("STREET_DICE_SQL_ECHO", "").strip().lower() in TRUE_VALUES,
        win_score=_positive_int(active_env, "STREET_DICE_WIN_SCORE", defaults.win_score, errors),
        charge_seconds=_positive_float(
            active_env, "STREET_DICE_CHARGE_SECONDS", defaults.charge_seconds, errors
        ),
        roll_seconds=_positive_float(
            active_env, "STREET_DICE_ROLL_SECONDS", defaults.roll_seconds, errors
        ),
        frame_seconds=_positive_float(
            active_env, "STREET_DICE_FRAME_SECONDS", defaults.frame_seconds, errors
        ),
        game_marker=game_marker,
        log_level=log_level,
    )

    if errors:
        error_lines = "\n- ".join(errors)
        raise ConfigError(f"Invalid Street Dice configuration:\n- {error_lines}")
    return settings
