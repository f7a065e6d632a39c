# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktray.cli.bootstrap import create_initial_state
from tasktray.core.state import AppState
from tasktray.preferences import PreferenceStore
from tasktray.tasks.lifecycle import TaskLifecycle, TimestampIdGenerator
from tasktray.tasks.task_models import TaskList
from tasktray.tasks.task_store import TaskStore
from tasktray.view.events import ViewEvents
from tasktray.view.list_view import ListView
from tasktray.view.view_sync import ViewSync

from .fakes import EventRecorder, InMemoryKeyValueStore, TickingClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasktray-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        store_path=tmp_path / "data" / "store.sqlite3",
        default_theme="light",
        id_strategy="timestamp",
        view_delay_ms=0,
        console_color=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired exactly as the CLI wires it, on a tmp SQLite store."""
    return create_initial_state(settings=settings)


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def task_store(kv: InMemoryKeyValueStore) -> TaskStore:
    return TaskStore(kv)


@pytest.fixture()
def lifecycle(task_store: TaskStore) -> TaskLifecycle:
    clock = TickingClock(datetime(2026, 10, 19, 12, 34, 56, 100_000))
    return TaskLifecycle(task_store, id_generator=TimestampIdGenerator(clock))


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture()
def view_sync(lifecycle: TaskLifecycle, kv: InMemoryKeyValueStore, recorder: EventRecorder) -> ViewSync:
    events = ViewEvents()
    events.subscribe(recorder)
    views = {tl: ListView(tl, events) for tl in TaskList}
    return ViewSync(lifecycle, views, events, preferences=PreferenceStore(kv))
