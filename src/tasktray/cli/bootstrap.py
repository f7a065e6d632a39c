# src/tasktray/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, lifecycle, views and preferences into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..preferences import PreferenceStore
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.lifecycle import TaskLifecycle, make_id_generator
from ..tasks.task_models import TaskList
from ..tasks.task_store import TaskStore
from ..view.events import ViewEvents
from ..view.list_view import ListView
from ..view.view_sync import ViewSync

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    kv = SQLiteKeyValueStore(settings.store_path)
    task_store = TaskStore(kv)
    lifecycle = TaskLifecycle(task_store, id_generator=make_id_generator(settings.id_strategy))
    preferences = PreferenceStore(kv, default_theme=settings.default_theme)

    events = ViewEvents()
    views = {tl: ListView(tl, events, delay_ms=settings.view_delay_ms) for tl in TaskList}
    view_sync = ViewSync(lifecycle, views, events, preferences=preferences)

    state = AppState(
        settings=settings,
        kv=kv,
        task_store=task_store,
        lifecycle=lifecycle,
        preferences=preferences,
        view_sync=view_sync,
    )
    logger.info(
        "State ready store=%s theme=%s ids=%s",
        settings.store_path,
        preferences.get_theme().value,
        settings.id_strategy,
    )
    return state
