# src/tasktray/preferences.py

from __future__ import annotations

import logging
from enum import StrEnum

from .core.ports import KeyValueStore

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, raw: str | None, default: Theme | None = None) -> Theme | None:
        if not raw:
            return default
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return default


class PreferenceStore:
    """Single-key theme preference. Not part of the task lists."""

    def __init__(self, kv: KeyValueStore, *, default_theme: str | Theme = Theme.LIGHT) -> None:
        self._kv = kv
        self._default = Theme.parse(str(default_theme), Theme.LIGHT) or Theme.LIGHT

    @property
    def default_theme(self) -> Theme:
        return self._default

    def get_theme(self) -> Theme:
        raw = self._kv.get(THEME_KEY)
        theme = Theme.parse(raw)
        if theme is None:
            if raw is not None:
                logger.warning("Unknown stored theme %r; using %s.", raw, self._default.value)
            return self._default
        return theme

    def set_theme(self, theme: str | Theme) -> Theme:
        parsed = Theme.parse(str(theme))
        if parsed is None:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._kv.set(THEME_KEY, parsed.value)
        logger.info("Theme set to %s", parsed.value)
        return parsed
