# src/tasktray/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the storage medium and the front end swappable and makes testing easier.
"""

from typing import Any, Iterable, Protocol


class KeyValueStore(Protocol):
    """Synchronous, process-local string-keyed store (localStorage-like)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...

    # All-or-nothing write of several keys, applied in the given order.
    def set_many(self, items: Iterable[tuple[str, str]]) -> None: ...


class TaskRepo(Protocol):
    # TaskList / Task are kept as Any to avoid import coupling.
    def load(self, task_list: Any) -> list[Any]: ...
    def save(self, task_list: Any, tasks: list[Any]) -> None: ...
    def save_pair(
            self,
            first: Any,
            first_tasks: list[Any],
            second: Any,
            second_tasks: list[Any],
    ) -> None: ...
    def all_ids(self) -> set[str]: ...

