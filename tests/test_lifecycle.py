# tests/test_lifecycle.py

from __future__ import annotations

from collections import Counter
from datetime import datetime

import pytest

from tasktray.tasks.lifecycle import (
    CounterIdGenerator,
    DuplicateTaskError,
    IllegalTransitionError,
    TaskLifecycle,
    TaskNotFoundError,
    TimestampIdGenerator,
    normalize_text,
    plan_move,
    timestamp_task_id,
    transition_for,
    transitions_from,
)
from tasktray.tasks.task_models import Task, TaskList, Transition
from tasktray.tasks.task_store import TaskStore

from .fakes import InMemoryKeyValueStore


def _ids(store: TaskStore, tl: TaskList) -> list[str]:
    return [t.id for t in store.load(tl)]


def _all_ids(store: TaskStore) -> Counter[str]:
    return Counter(t.id for tl in TaskList for t in store.load(tl))


# ---- scenarios ----


def test_create_appends_to_active_only(lifecycle: TaskLifecycle, task_store: TaskStore) -> None:
    task = lifecycle.create("Buy milk")

    assert task is not None
    assert task.text == "Buy milk"
    assert task_store.load(TaskList.ACTIVE) == [task]
    assert task_store.load(TaskList.COMPLETED) == []
    assert task_store.load(TaskList.TRASH) == []


@pytest.mark.parametrize("text", ["", "   ", "\n\r\n", None])
def test_create_with_empty_text_writes_nothing(
    lifecycle: TaskLifecycle, kv: InMemoryKeyValueStore, text: str | None
) -> None:
    assert lifecycle.create(text) is None
    assert kv.writes == []
    assert kv.data == {}


def test_complete_moves_active_to_completed(lifecycle: TaskLifecycle, task_store: TaskStore) -> None:
    t1 = lifecycle.create("one")
    assert t1 is not None

    moved = lifecycle.move(Transition.COMPLETE, t1.id)

    assert moved == t1
    assert task_store.load(TaskList.ACTIVE) == []
    assert task_store.load(TaskList.COMPLETED) == [t1]


def test_to_trash_moves_completed_to_trash(task_store: TaskStore, lifecycle: TaskLifecycle) -> None:
    t1 = Task(id="1", text="a")
    task_store.save(TaskList.COMPLETED, [t1])

    lifecycle.move(Transition.TO_TRASH, "1")

    assert task_store.load(TaskList.COMPLETED) == []
    assert task_store.load(TaskList.TRASH) == [t1]


def test_delete_removes_task_everywhere(task_store: TaskStore, lifecycle: TaskLifecycle) -> None:
    t1 = Task(id="1", text="a")
    task_store.save(TaskList.TRASH, [t1])

    assert lifecycle.delete("1") == t1
    assert task_store.load(TaskList.TRASH) == []
    assert task_store.all_ids() == set()


def test_recover_appends_after_existing_completed(task_store: TaskStore, lifecycle: TaskLifecycle) -> None:
    t0, t1, t2 = Task(id="0", text="z"), Task(id="1", text="a"), Task(id="2", text="b")
    task_store.save(TaskList.COMPLETED, [t0])
    task_store.save(TaskList.TRASH, [t1, t2])

    lifecycle.move(Transition.RECOVER, "1")

    assert task_store.load(TaskList.TRASH) == [t2]
    assert task_store.load(TaskList.COMPLETED) == [t0, t1]


def test_incomplete_moves_back_to_active_end(task_store: TaskStore, lifecycle: TaskLifecycle) -> None:
    a, b = Task(id="a", text="a"), Task(id="b", text="b")
    task_store.save(TaskList.ACTIVE, [a])
    task_store.save(TaskList.COMPLETED, [b])

    lifecycle.move(Transition.INCOMPLETE, "b")

    assert _ids(task_store, TaskList.ACTIVE) == ["a", "b"]
    assert _ids(task_store, TaskList.COMPLETED) == []


# ---- persistence contract ----


def test_move_writes_destination_then_source_in_one_write(
    task_store: TaskStore, lifecycle: TaskLifecycle, kv: InMemoryKeyValueStore
) -> None:
    task_store.save(TaskList.ACTIVE, [Task(id="1", text="a")])
    kv.writes.clear()

    lifecycle.move(Transition.COMPLETE, "1")

    assert kv.writes == [["completed", "todos"]]


def test_missing_task_aborts_without_writes(
    task_store: TaskStore, lifecycle: TaskLifecycle, kv: InMemoryKeyValueStore
) -> None:
    task_store.save(TaskList.COMPLETED, [Task(id="1", text="a")])
    kv.writes.clear()

    # Right id, wrong source list.
    with pytest.raises(TaskNotFoundError):
        lifecycle.move(Transition.COMPLETE, "1")
    with pytest.raises(TaskNotFoundError):
        lifecycle.move(Transition.RECOVER, "nope")
    with pytest.raises(TaskNotFoundError):
        lifecycle.delete("1")

    assert kv.writes == []
    assert _ids(task_store, TaskList.COMPLETED) == ["1"]
    assert _ids(task_store, TaskList.TRASH) == []


def test_edit_is_lookup_only(task_store: TaskStore, lifecycle: TaskLifecycle, kv: InMemoryKeyValueStore) -> None:
    task_store.save(TaskList.ACTIVE, [Task(id="1", text="a")])
    kv.writes.clear()

    assert lifecycle.apply(Transition.EDIT, "1") == Task(id="1", text="a")
    assert kv.writes == []
    with pytest.raises(TaskNotFoundError):
        lifecycle.edit("2")


def test_move_rejects_transitions_without_destination(lifecycle: TaskLifecycle) -> None:
    with pytest.raises(IllegalTransitionError):
        lifecycle.move(Transition.DELETE, "1")


def test_operation_sequence_conserves_tasks(lifecycle: TaskLifecycle, task_store: TaskStore) -> None:
    created = [lifecycle.create(f"task {i}") for i in range(5)]
    assert all(t is not None for t in created)
    ids = [t.id for t in created if t is not None]
    assert len(set(ids)) == 5

    steps = [
        (Transition.COMPLETE, ids[1]),
        (Transition.COMPLETE, ids[3]),
        (Transition.TO_TRASH, ids[1]),
        (Transition.INCOMPLETE, ids[3]),
        (Transition.COMPLETE, ids[0]),
        (Transition.TO_TRASH, ids[0]),
        (Transition.RECOVER, ids[1]),
    ]
    for transition, tid in steps:
        before = _all_ids(task_store)
        source_before = _ids(task_store, transition.source)

        lifecycle.apply(transition, tid)

        after = _all_ids(task_store)
        assert after == before
        assert max(after.values()) == 1
        # Remaining source tasks keep their relative order.
        assert _ids(task_store, transition.source) == [x for x in source_before if x != tid]
        assert _ids(task_store, transition.destination)[-1] == tid

    before = _all_ids(task_store)
    lifecycle.delete(ids[0])
    assert before - _all_ids(task_store) == Counter({ids[0]: 1})

    assert _ids(task_store, TaskList.ACTIVE) == [ids[2], ids[4], ids[3]]
    assert _ids(task_store, TaskList.COMPLETED) == [ids[1]]
    assert _ids(task_store, TaskList.TRASH) == []


# ---- helpers ----


def test_plan_move_does_not_mutate_inputs() -> None:
    a, b = Task(id="a", text="a"), Task(id="b", text="b")
    source, dest = [a, b], []

    result = plan_move(source, dest, "a", TaskList.ACTIVE, TaskList.COMPLETED)

    assert result.task == a
    assert result.source == [b]
    assert result.destination == [a]
    assert source == [a, b] and dest == []


def test_move_refuses_id_already_in_destination(
    task_store: TaskStore, lifecycle: TaskLifecycle, kv: InMemoryKeyValueStore
) -> None:
    # Inconsistent store: the same id is in Active and Completed.
    other, dup = Task(id="0", text="z"), Task(id="1", text="a")
    task_store.save(TaskList.ACTIVE, [dup])
    task_store.save(TaskList.COMPLETED, [dup, other])
    kv.writes.clear()

    with pytest.raises(DuplicateTaskError):
        lifecycle.move(Transition.COMPLETE, "1")

    assert kv.writes == []
    assert task_store.load(TaskList.ACTIVE) == [dup]
    assert task_store.load(TaskList.COMPLETED) == [dup, other]


def test_normalize_text() -> None:
    assert normalize_text("  hello  ") == "hello"
    assert normalize_text("two\nlines") == "two lines"
    assert normalize_text("crlf\r\nhere") == "crlf  here"
    assert normalize_text(" \n ") == ""


def test_transition_table() -> None:
    assert transitions_from(TaskList.ACTIVE) == [Transition.COMPLETE, Transition.EDIT]
    assert transitions_from(TaskList.COMPLETED) == [Transition.INCOMPLETE, Transition.TO_TRASH]
    assert transitions_from(TaskList.TRASH) == [Transition.RECOVER, Transition.DELETE]

    # No shortcut edges.
    assert all(t.destination != TaskList.TRASH for t in transitions_from(TaskList.ACTIVE))
    assert all(t.destination != TaskList.ACTIVE for t in transitions_from(TaskList.TRASH))

    assert transition_for(" To-Trash ") is Transition.TO_TRASH
    with pytest.raises(IllegalTransitionError):
        transition_for("archive")


# ---- ids ----


def test_timestamp_id_matches_browser_digits() -> None:
    assert timestamp_task_id(datetime(2026, 10, 19, 12, 34, 56, 789_000)) == "126919123456789"
    assert timestamp_task_id(datetime(2026, 1, 5, 3, 4, 5, 6_000)) == "126053456"


def test_timestamp_generator_skips_taken_ids() -> None:
    fixed = datetime(2026, 10, 19, 12, 34, 56, 100_000)
    gen = TimestampIdGenerator(lambda: fixed)

    first = gen(set())
    second = gen({first})

    assert first == "126919123456100"
    assert second == "126919123456101"


def test_same_millisecond_creations_get_distinct_ids() -> None:
    fixed = datetime(2026, 10, 19, 12, 34, 56, 100_000)
    store = TaskStore(InMemoryKeyValueStore())
    lc = TaskLifecycle(store, id_generator=TimestampIdGenerator(lambda: fixed))

    a = lc.create("a")
    b = lc.create("b")

    assert a is not None and b is not None
    assert a.id != b.id


def test_counter_generator_is_ordered_and_unique() -> None:
    fixed = datetime(2026, 10, 19, 12, 34, 56, 100_000)
    gen = CounterIdGenerator(lambda: fixed)

    ids = [gen(set()) for _ in range(3)]

    assert ids == sorted(ids)
    assert len(set(ids)) == 3
    assert ids[0] == "126919123456100-000001"


def test_create_skips_ids_held_by_any_list() -> None:
    fixed = datetime(2026, 10, 19, 12, 34, 56, 100_000)
    store = TaskStore(InMemoryKeyValueStore())
    store.save(TaskList.TRASH, [Task(id="126919123456100", text="old")])
    lc = TaskLifecycle(store, id_generator=TimestampIdGenerator(lambda: fixed))

    task = lc.create("new")

    assert task is not None
    assert task.id == "126919123456101"
