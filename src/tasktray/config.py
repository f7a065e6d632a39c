# src/tasktray/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a default.
- Malformed values fall back to defaults instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKTRAY"

ID_STRATEGIES = ("timestamp", "counter")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = _env(name, default).strip().lower()
    return raw if raw in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_path: Path

    # ---- Behaviour ----
    default_theme: str
    id_strategy: str
    view_delay_ms: int
    console_color: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasktray").strip() or "tasktray"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasktray"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "store.sqlite3")

        # Validated against the Theme enum by PreferenceStore; kept as a plain
        # string here so config does not import the domain layer.
        default_theme = _env(_k("DEFAULT_THEME"), "light").strip().lower() or "light"
        id_strategy = _env_choice(_k("ID_STRATEGY"), ID_STRATEGIES, "timestamp")
        view_delay_ms = max(0, _env_int(_k("VIEW_DELAY_MS"), 650))
        console_color = _env_bool(_k("CONSOLE_COLOR"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            default_theme=default_theme,
            id_strategy=id_strategy,
            view_delay_ms=view_delay_ms,
            console_color=console_color,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
