# src/tasktray/tasks/task_store.py

from __future__ import annotations

import json
import logging

from ..core.ports import KeyValueStore
from .task_models import Task, TaskList

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Typed whole-list access to the three persisted task lists.

    Each list lives under its own key as a JSON array of {"text", "id"}
    records. Nothing else in the app reads or writes those keys.

    Failure policy:
    - a missing key is an empty list
    - a payload that is not a valid list of task records is an empty list
      (logged, never raised)
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    @staticmethod
    def _encode(tasks: list[Task]) -> str:
        return json.dumps([t.to_record() for t in tasks], ensure_ascii=False)

    @staticmethod
    def _decode(task_list: TaskList, raw: str) -> list[Task]:
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Corrupt payload under key=%s (not JSON); treating as empty.", task_list.storage_key)
            return []

        if not isinstance(data, list):
            logger.warning("Corrupt payload under key=%s (not a list); treating as empty.", task_list.storage_key)
            return []

        out: list[Task] = []
        for item in data:
            task = Task.from_record(item)
            if task is None:
                logger.warning(
                    "Corrupt task record under key=%s: %r; treating list as empty.",
                    task_list.storage_key,
                    item,
                )
                return []
            out.append(task)
        return out

    # ---- public API ----

    def load(self, task_list: TaskList) -> list[Task]:
        raw = self._kv.get(task_list.storage_key)
        if raw is None:
            return []
        return self._decode(task_list, raw)

    def save(self, task_list: TaskList, tasks: list[Task]) -> None:
        self._kv.set(task_list.storage_key, self._encode(tasks))
        logger.debug("Saved %s tasks=%d", task_list.storage_key, len(tasks))

    def save_pair(
        self,
        first: TaskList,
        first_tasks: list[Task],
        second: TaskList,
        second_tasks: list[Task],
    ) -> None:
        """
        Persist two lists as one unit of work.

        Keys are written in argument order inside a single transaction, so a
        reader never sees one list updated without the other.
        """
        if first == second:
            raise ValueError("save_pair needs two different lists")

        self._kv.set_many(
            [
                (first.storage_key, self._encode(first_tasks)),
                (second.storage_key, self._encode(second_tasks)),
            ]
        )
        logger.debug(
            "Saved pair %s=%d %s=%d",
            first.storage_key,
            len(first_tasks),
            second.storage_key,
            len(second_tasks),
        )

    def snapshot(self) -> dict[TaskList, list[Task]]:
        return {tl: self.load(tl) for tl in TaskList}

    def all_ids(self) -> set[str]:
        return {t.id for tasks in self.snapshot().values() for t in tasks}
