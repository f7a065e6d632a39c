# src/tasktray/view/list_view.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..tasks.task_models import TaskList
from .events import ViewEvent, ViewEventKind, ViewEvents

logger = logging.getLogger(__name__)


def empty_message(task_list: TaskList) -> str:
    return f"No tasks in {task_list.display_name}."


@dataclass(frozen=True, slots=True)
class VisibleEntry:
    task_id: str
    text: str


class ListView:
    """
    What is on screen for one list: ordered entries plus an optional
    "no tasks" placeholder.

    This is a view model, not a source of truth. ViewSync rewrites it from
    storage; every change is announced on the event bus so a front end can
    draw it.
    """

    def __init__(self, task_list: TaskList, events: ViewEvents, *, delay_ms: int = 0) -> None:
        self.task_list = task_list
        self._events = events
        self._delay_ms = delay_ms
        self._entries: list[VisibleEntry] = []
        self._placeholder: str | None = None

    @property
    def entries(self) -> list[VisibleEntry]:
        return list(self._entries)

    @property
    def placeholder(self) -> str | None:
        return self._placeholder

    def ids(self) -> list[str]:
        return [e.task_id for e in self._entries]

    def _emit(self, kind: ViewEventKind, task_id: str | None = None, text: str | None = None) -> None:
        self._events.emit(
            ViewEvent(
                kind=kind,
                task_list=self.task_list,
                task_id=task_id,
                text=text,
                delay_ms=self._delay_ms,
            )
        )

    def append_entry(self, task_id: str, text: str) -> None:
        if task_id in self.ids():
            # One visible entry per task, always.
            logger.debug("Entry %s already visible in %s", task_id, self.task_list.storage_key)
            return
        self._entries.append(VisibleEntry(task_id=task_id, text=text))
        self._emit(ViewEventKind.ENTRY_ADDED, task_id, text)

    def remove_entry(self, task_id: str) -> None:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.task_id != task_id]
        if len(self._entries) != before:
            self._emit(ViewEventKind.ENTRY_REMOVED, task_id)

    def clear(self) -> None:
        for entry in list(self._entries):
            self.remove_entry(entry.task_id)
        self.hide_placeholder()

    def show_placeholder(self) -> None:
        if self._placeholder is not None:
            return
        self._placeholder = empty_message(self.task_list)
        self._emit(ViewEventKind.PLACEHOLDER_SHOWN, text=self._placeholder)

    def hide_placeholder(self) -> None:
        if self._placeholder is None:
            return
        self._placeholder = None
        self._emit(ViewEventKind.PLACEHOLDER_HIDDEN)
