# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasktray.config import Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "TASKTRAY_APP_NAME",
        "TASKTRAY_LOG_LEVEL",
        "TASKTRAY_DATA_DIR",
        "TASKTRAY_STORE_PATH",
        "TASKTRAY_DEFAULT_THEME",
        "TASKTRAY_ID_STRATEGY",
        "TASKTRAY_VIEW_DELAY_MS",
        "TASKTRAY_CONSOLE_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()

    assert s.app_name == "tasktray"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/tasktray")
    assert s.store_path == Path(".local/tasktray") / "store.sqlite3"
    assert s.default_theme == "light"
    assert s.id_strategy == "timestamp"
    assert s.view_delay_ms == 650
    assert s.console_color is True


def test_overrides_and_bad_values(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TASKTRAY_DATA_DIR", str(tmp_path))
    clean_env.setenv("TASKTRAY_LOG_LEVEL", "debug")
    clean_env.setenv("TASKTRAY_ID_STRATEGY", "uuid")
    clean_env.setenv("TASKTRAY_VIEW_DELAY_MS", "soon")
    clean_env.setenv("TASKTRAY_CONSOLE_COLOR", "off")
    clean_env.setenv("TASKTRAY_DEFAULT_THEME", "Dark")

    s = Settings.from_env()

    assert s.store_path == tmp_path / "store.sqlite3"
    assert s.log_level == "DEBUG"
    assert s.id_strategy == "timestamp"
    assert s.view_delay_ms == 650
    assert s.console_color is False
    assert s.default_theme == "dark"


def test_counter_strategy_and_negative_delay(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("TASKTRAY_ID_STRATEGY", "COUNTER")
    clean_env.setenv("TASKTRAY_VIEW_DELAY_MS", "-5")

    s = Settings.from_env()

    assert s.id_strategy == "counter"
    assert s.view_delay_ms == 0
