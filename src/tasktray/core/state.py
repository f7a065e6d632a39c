# src/tasktray/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..preferences import PreferenceStore
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.lifecycle import TaskLifecycle
from ..tasks.task_store import TaskStore
from ..view.view_sync import ViewSync


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    kv: SQLiteKeyValueStore
    task_store: TaskStore
    lifecycle: TaskLifecycle
    preferences: PreferenceStore
    view_sync: ViewSync
