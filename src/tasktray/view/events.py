# src/tasktray/view/events.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..tasks.task_models import TaskList

logger = logging.getLogger(__name__)


class ViewEventKind(StrEnum):
    ENTRY_ADDED = "entry_added"
    ENTRY_REMOVED = "entry_removed"
    PLACEHOLDER_SHOWN = "placeholder_shown"
    PLACEHOLDER_HIDDEN = "placeholder_hidden"
    PANEL_OPENED = "panel_opened"
    EDITOR_OPENED = "editor_opened"
    THEME_CHANGED = "theme_changed"


@dataclass(frozen=True, slots=True)
class ViewEvent:
    """
    One change to what the user should see.

    delay_ms is a hint for front ends that animate; the change has already
    happened in the view model and in storage when the event fires.
    """

    kind: ViewEventKind
    task_list: TaskList | None = None
    task_id: str | None = None
    text: str | None = None
    delay_ms: int = 0


ViewListener = Callable[[ViewEvent], None]


class ViewEvents:
    """Synchronous observer bus. Listeners run in subscription order."""

    def __init__(self) -> None:
        self._listeners: list[tuple[ViewEventKind | None, ViewListener]] = []

    def subscribe(self, listener: ViewListener, kind: ViewEventKind | None = None) -> Callable[[], None]:
        """Register listener for one kind (or every kind if None). Returns an unsubscribe callable."""
        entry = (kind, listener)
        self._listeners.append(entry)

        def _unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return _unsubscribe

    def emit(self, event: ViewEvent) -> None:
        for kind, listener in list(self._listeners):
            if kind is not None and kind != event.kind:
                continue
            try:
                listener(event)
            except Exception:
                # A broken listener must not undo or block a transition that is already persisted.
                logger.exception("View listener failed on %s", event.kind.value)
