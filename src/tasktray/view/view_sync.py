# src/tasktray/view/view_sync.py

from __future__ import annotations

"""
ViewSync: the boundary between a front end and the task lifecycle.

- Gestures come in with their originating list passed explicitly.
- A gesture is only accepted if the menu for that list offers it.
- After every write, the affected ListViews are reconciled against storage.
  Storage is the source of truth; views never feed back into it.
"""

import logging
from collections.abc import Mapping

from ..preferences import PreferenceStore, Theme
from ..tasks.lifecycle import (
    IllegalTransitionError,
    TaskError,
    TaskLifecycle,
    transition_for,
    transitions_from,
)
from ..tasks.task_models import Task, TaskList, Transition
from .events import ViewEvent, ViewEventKind, ViewEvents
from .list_view import ListView

logger = logging.getLogger(__name__)


class ViewSync:
    def __init__(
        self,
        lifecycle: TaskLifecycle,
        views: Mapping[TaskList, ListView],
        events: ViewEvents,
        *,
        preferences: PreferenceStore | None = None,
    ) -> None:
        missing = [tl for tl in TaskList if tl not in views]
        if missing:
            raise ValueError(f"ViewSync needs a ListView for every list (missing: {missing})")

        self._lifecycle = lifecycle
        self._views = dict(views)
        self._events = events
        self._preferences = preferences
        self._open_panel = TaskList.ACTIVE

    @property
    def events(self) -> ViewEvents:
        return self._events

    @property
    def current_panel(self) -> TaskList:
        return self._open_panel

    def view(self, task_list: TaskList) -> ListView:
        return self._views[task_list]

    # ---- menus ----

    @staticmethod
    def options_for(task_list: TaskList) -> list[str]:
        """Menu entries for a task rendered in task_list. Nothing else may be offered."""
        return [t.value for t in transitions_from(task_list)]

    # ---- gestures ----

    def apply(self, option: str, task_list: TaskList, task_id: str) -> Task | None:
        """
        Run a menu option picked on a task shown in task_list.

        Returns the task the option acted on, or None if the option was
        rejected or the task was not where the gesture said it was.
        """
        try:
            transition = transition_for(option)
            if transition.value not in self.options_for(task_list):
                raise IllegalTransitionError(
                    f"{transition.value!r} is not offered for tasks in {task_list.display_name}"
                )
            return self._run(transition, task_id)
        except TaskError as e:
            logger.warning("Gesture rejected option=%s list=%s id=%s: %s", option, task_list.value, task_id, e)
            return None

    def _run(self, transition: Transition, task_id: str) -> Task:
        task = self._lifecycle.apply(transition, task_id)

        if transition is Transition.EDIT:
            self._events.emit(
                ViewEvent(kind=ViewEventKind.EDITOR_OPENED, task_list=TaskList.ACTIVE, task_id=task.id, text=task.text)
            )
            return task

        self.reconcile(transition.source)
        if transition.destination is not None:
            self.reconcile(transition.destination)
        return task

    def create_task(self, text: str | None) -> Task | None:
        task = self._lifecycle.create(text)
        if task is None:
            return None
        self.reconcile(TaskList.ACTIVE)
        return task

    def complete(self, task_id: str) -> bool:
        return self.apply(Transition.COMPLETE, TaskList.ACTIVE, task_id) is not None

    def mark_incomplete(self, task_id: str) -> bool:
        return self.apply(Transition.INCOMPLETE, TaskList.COMPLETED, task_id) is not None

    def move_to_trash(self, task_id: str) -> bool:
        return self.apply(Transition.TO_TRASH, TaskList.COMPLETED, task_id) is not None

    def recover(self, task_id: str) -> bool:
        return self.apply(Transition.RECOVER, TaskList.TRASH, task_id) is not None

    def delete_forever(self, task_id: str) -> bool:
        return self.apply(Transition.DELETE, TaskList.TRASH, task_id) is not None

    def edit(self, task_id: str) -> Task | None:
        return self.apply(Transition.EDIT, TaskList.ACTIVE, task_id)

    # ---- reads ----

    def list_active(self) -> list[Task]:
        return self._lifecycle.tasks_in(TaskList.ACTIVE)

    def list_completed(self) -> list[Task]:
        return self._lifecycle.tasks_in(TaskList.COMPLETED)

    def list_trash(self) -> list[Task]:
        return self._lifecycle.tasks_in(TaskList.TRASH)

    # ---- reconciliation ----

    def reconcile(self, task_list: TaskList) -> None:
        """
        Make the view of task_list match storage exactly.

        Stale entries are removed, missing ones appended in persisted order.
        If the surviving entries are out of order the list is rebuilt.
        Running it twice in a row changes nothing the second time.
        """
        view = self._views[task_list]
        persisted = self._lifecycle.tasks_in(task_list)
        wanted = {t.id: t.text for t in persisted}

        for entry in view.entries:
            if wanted.get(entry.task_id) != entry.text:
                view.remove_entry(entry.task_id)

        kept = view.ids()
        if kept != [t.id for t in persisted[: len(kept)]]:
            logger.debug("View %s out of order; rebuilding", task_list.storage_key)
            self._render(view, persisted)
            return

        for task in persisted[len(kept):]:
            view.append_entry(task.id, task.text)
        self._sync_placeholder(view, persisted)

    def open_panel(self, task_list: TaskList) -> None:
        """
        Switch to the panel for task_list and rebuild it from storage.

        Fires PANEL_OPENED once, after the rebuild.
        """
        self._open_panel = task_list
        self._render(self._views[task_list], self._lifecycle.tasks_in(task_list))
        self._events.emit(ViewEvent(kind=ViewEventKind.PANEL_OPENED, task_list=task_list))
        logger.debug("Panel opened: %s", task_list.storage_key)

    def close_panel(self) -> None:
        """Back to the main (Active) list."""
        self.open_panel(TaskList.ACTIVE)

    def _render(self, view: ListView, tasks: list[Task]) -> None:
        view.clear()
        for task in tasks:
            view.append_entry(task.id, task.text)
        self._sync_placeholder(view, tasks)

    @staticmethod
    def _sync_placeholder(view: ListView, tasks: list[Task]) -> None:
        if tasks:
            view.hide_placeholder()
        else:
            view.show_placeholder()

    # ---- theme ----

    def theme(self) -> Theme:
        if self._preferences is None:
            return Theme.LIGHT
        return self._preferences.get_theme()

    def set_theme(self, theme: str | Theme) -> Theme:
        if self._preferences is None:
            raise RuntimeError("No preference store configured")
        before = self._preferences.get_theme()
        after = self._preferences.set_theme(theme)
        if after != before:
            self._events.emit(ViewEvent(kind=ViewEventKind.THEME_CHANGED, text=after.value))
        return after
