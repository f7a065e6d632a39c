# src/tasktray/tasks/lifecycle.py

from __future__ import annotations

"""
Task lifecycle.

The only legal moves between lists, and their effect:

    ACTIVE    --complete-->   COMPLETED
    COMPLETED --incomplete--> ACTIVE
    COMPLETED --to-trash-->   TRASH
    TRASH     --recover-->    COMPLETED
    TRASH     --delete-->     (destroyed)
    ACTIVE    --edit-->       (nothing written, opens an editor)

A move removes exactly one task from its source list (the rest keep their
order) and appends it to the end of the destination list. Both lists are
written as one unit: destination first, then source.
"""

import itertools
import logging
import re
from collections.abc import Callable, Container
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from ..core.ports import TaskRepo
from .task_models import Task, TaskList, Transition

logger = logging.getLogger(__name__)

_NEWLINE_RE = re.compile(r"[\r\n]")

# How far the timestamp generator walks forward looking for a free id.
_MAX_ID_PROBES = 1000


class TaskError(Exception):
    """Base class for lifecycle failures."""


class TaskNotFoundError(TaskError):
    def __init__(self, task_id: str, task_list: TaskList) -> None:
        super().__init__(f"Task {task_id!r} not found in {task_list.display_name}")
        self.task_id = task_id
        self.task_list = task_list


class IllegalTransitionError(TaskError):
    pass


class DuplicateTaskError(TaskError):
    def __init__(self, task_id: str, task_list: TaskList) -> None:
        super().__init__(f"Task {task_id!r} is already in {task_list.display_name}")
        self.task_id = task_id
        self.task_list = task_list


# ---- pure helpers ----


def normalize_text(raw: str | None) -> str:
    """Trim, then turn every CR/LF into a space. Empty result means 'invalid'."""
    return _NEWLINE_RE.sub(" ", (raw or "").strip())


def transition_for(name: str) -> Transition:
    try:
        return Transition((name or "").strip().lower())
    except ValueError:
        raise IllegalTransitionError(f"Unknown transition: {name!r}") from None


def transitions_from(task_list: TaskList) -> list[Transition]:
    """Transitions whose precondition ('task is in task_list') can hold."""
    return [t for t in Transition if t.source == task_list]


@dataclass(frozen=True, slots=True)
class MoveResult:
    task: Task
    source: list[Task]
    destination: list[Task]


def plan_move(
    source: list[Task],
    destination: list[Task],
    task_id: str,
    source_list: TaskList,
    destination_list: TaskList,
) -> MoveResult:
    """
    Compute the new contents of both lists for moving task_id.

    Raises TaskNotFoundError if the task is not in source, and DuplicateTaskError
    if the id is already in destination (the store is inconsistent; nothing is
    repaired silently). Inputs are not mutated.
    """
    task = next((t for t in source if t.id == task_id), None)
    if task is None:
        raise TaskNotFoundError(task_id, source_list)
    if any(t.id == task_id for t in destination):
        raise DuplicateTaskError(task_id, destination_list)
    return MoveResult(
        task=task,
        source=[t for t in source if t.id != task_id],
        destination=[*destination, task],
    )


# ---- id generation ----


def timestamp_task_id(now: datetime) -> str:
    """
    Digits of the creation time, unpadded: years since 1900, zero-based month,
    day, hour, minute, second, millisecond.

    2026-10-19 12:34:56.789 -> "126919123456789"
    """
    parts = (
        now.year - 1900,
        now.month - 1,
        now.day,
        now.hour,
        now.minute,
        now.second,
        now.microsecond // 1000,
    )
    return "".join(str(p) for p in parts)


class IdGenerator(Protocol):
    def __call__(self, taken: Container[str]) -> str: ...


class TimestampIdGenerator:
    """
    Timestamp ids, no randomness.

    Two creations in the same millisecond would collide; the generator walks
    the clock forward one millisecond at a time until the id is not taken.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock

    def __call__(self, taken: Container[str]) -> str:
        now = self._clock()
        for step in range(_MAX_ID_PROBES):
            tid = timestamp_task_id(now + timedelta(milliseconds=step))
            if tid not in taken:
                return tid
        raise RuntimeError("Could not find a free task id")


class CounterIdGenerator:
    """Timestamp prefix plus a per-process counter: creation-ordered and unique per run."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._counter = itertools.count(1)

    def __call__(self, taken: Container[str]) -> str:
        prefix = timestamp_task_id(self._clock())
        while True:
            tid = f"{prefix}-{next(self._counter):06d}"
            if tid not in taken:
                return tid


def make_id_generator(strategy: str) -> IdGenerator:
    if strategy == "counter":
        return CounterIdGenerator()
    return TimestampIdGenerator()


# ---- lifecycle ----


class TaskLifecycle:
    """Applies transitions against a TaskRepo. No view concerns live here."""

    def __init__(self, store: TaskRepo, *, id_generator: IdGenerator | None = None) -> None:
        self._store = store
        self._new_id: IdGenerator = id_generator or TimestampIdGenerator()

    @property
    def store(self) -> TaskRepo:
        return self._store

    def create(self, text: str | None) -> Task | None:
        """Append a new task to Active. Returns None (and writes nothing) for empty text."""
        clean = normalize_text(text)
        if not clean:
            logger.debug("Empty task text; nothing created.")
            return None

        task = Task(id=self._new_id(self._store.all_ids()), text=clean)

        active = self._store.load(TaskList.ACTIVE)
        active.append(task)
        self._store.save(TaskList.ACTIVE, active)
        logger.info("Task created id=%s", task.id)
        return task

    def move(self, transition: Transition, task_id: str) -> Task:
        destination = transition.destination
        if destination is None:
            raise IllegalTransitionError(f"{transition.value} does not move a task between lists")

        source = transition.source
        plan = plan_move(self._store.load(source), self._store.load(destination), task_id, source, destination)

        self._store.save_pair(destination, plan.destination, source, plan.source)
        logger.info(
            "Task %s: %s -> %s (%s)",
            task_id,
            source.storage_key,
            destination.storage_key,
            transition.value,
        )
        return plan.task

    def delete(self, task_id: str) -> Task:
        """Remove a task from Trash for good."""
        trash = self._store.load(TaskList.TRASH)
        task = next((t for t in trash if t.id == task_id), None)
        if task is None:
            raise TaskNotFoundError(task_id, TaskList.TRASH)

        self._store.save(TaskList.TRASH, [t for t in trash if t.id != task_id])
        logger.info("Task %s deleted permanently", task_id)
        return task

    def edit(self, task_id: str) -> Task:
        # Placeholder: there is no commit path for edits, only the lookup.
        task = self.find(TaskList.ACTIVE, task_id)
        if task is None:
            raise TaskNotFoundError(task_id, TaskList.ACTIVE)
        return task

    def apply(self, transition: Transition, task_id: str) -> Task:
        if transition is Transition.DELETE:
            return self.delete(task_id)
        if transition is Transition.EDIT:
            return self.edit(task_id)
        return self.move(transition, task_id)

    def find(self, task_list: TaskList, task_id: str) -> Task | None:
        return next((t for t in self._store.load(task_list) if t.id == task_id), None)

    def tasks_in(self, task_list: TaskList) -> list[Task]:
        return self._store.load(task_list)
