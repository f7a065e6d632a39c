# src/tasktray/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskList(StrEnum):
    """
    The three partitions a task can live in.

    The value doubles as the storage key, so it must stay stable.
    """

    ACTIVE = "todos"
    COMPLETED = "completed"
    TRASH = "trash"

    @property
    def storage_key(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, raw: str | None) -> TaskList | None:
        """Accept storage keys and friendly aliases ("active", "done", "bin")."""
        if not raw:
            return None
        return _ALIASES.get(raw.strip().lower())


_DISPLAY_NAMES = {
    TaskList.ACTIVE: "Todos",
    TaskList.COMPLETED: "Completed",
    TaskList.TRASH: "Trash",
}

_ALIASES = {
    "todos": TaskList.ACTIVE,
    "todo": TaskList.ACTIVE,
    "active": TaskList.ACTIVE,
    "completed": TaskList.COMPLETED,
    "complete": TaskList.COMPLETED,
    "done": TaskList.COMPLETED,
    "trash": TaskList.TRASH,
    "bin": TaskList.TRASH,
}


class Transition(StrEnum):
    """
    Legal moves of a task between lists.

    EDIT has no destination and writes nothing: it only opens an editor.
    DELETE has no destination either: the task is destroyed.
    """

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    TO_TRASH = "to-trash"
    RECOVER = "recover"
    DELETE = "delete"
    EDIT = "edit"

    @property
    def source(self) -> TaskList:
        return _EDGES[self][0]

    @property
    def destination(self) -> TaskList | None:
        return _EDGES[self][1]


_EDGES: dict[Transition, tuple[TaskList, TaskList | None]] = {
    Transition.EDIT: (TaskList.ACTIVE, None),
    Transition.COMPLETE: (TaskList.ACTIVE, TaskList.COMPLETED),
    Transition.INCOMPLETE: (TaskList.COMPLETED, TaskList.ACTIVE),
    Transition.TO_TRASH: (TaskList.COMPLETED, TaskList.TRASH),
    Transition.RECOVER: (TaskList.TRASH, TaskList.COMPLETED),
    Transition.DELETE: (TaskList.TRASH, None),
}


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str

    def to_record(self) -> dict[str, str]:
        return {"text": self.text, "id": self.id}

    @classmethod
    def from_record(cls, raw: Any) -> Task | None:
        """Build a Task from a stored record; None if the record is not usable."""
        if not isinstance(raw, dict):
            return None
        tid = raw.get("id")
        text = raw.get("text")
        if not isinstance(tid, str) or not tid:
            return None
        if not isinstance(text, str) or not text.strip():
            return None
        return cls(id=tid, text=text)
