# tests/test_operations.py

from __future__ import annotations

import pytest

from session_todo.todo import operations
from session_todo.todo.errors import LengthError, NotFoundError, UniquenessError
from session_todo.todo.schemas import SessionData, Task, TodoList
from session_todo.todo.views import all_done, remaining_label


@pytest.fixture()
def session() -> SessionData:
    return SessionData()


def test_next_id_empty_collection_is_one() -> None:
    assert operations.next_id([]) == 1


def test_next_id_is_max_plus_one_regardless_of_order() -> None:
    items = [Task(id=4, name="a"), Task(id=2, name="b")]
    assert operations.next_id(items) == 5


def test_next_id_respects_high_water_mark() -> None:
    assert operations.next_id([Task(id=1, name="a")], high_water=7) == 8
    assert operations.next_id([], high_water=3) == 4


def test_create_list_assigns_sequential_ids(session: SessionData) -> None:
    first = operations.create_list(session, "Groceries")
    second = operations.create_list(session, "Chores")

    assert (first.id, second.id) == (1, 2)
    assert [lst.name for lst in session.lists] == ["Groceries", "Chores"]
    assert first.todos == []


def test_create_list_trims_name(session: SessionData) -> None:
    todo_list = operations.create_list(session, "  Groceries  ")
    assert todo_list.name == "Groceries"


@pytest.mark.parametrize("name", ["", "   ", "x" * 101])
def test_create_list_invalid_length_leaves_state_unchanged(session: SessionData, name: str) -> None:
    operations.create_list(session, "Existing")
    before = session.model_dump()

    with pytest.raises(LengthError):
        operations.create_list(session, name)

    assert session.model_dump() == before


def test_create_duplicate_name_after_trim_fails(session: SessionData) -> None:
    operations.create_list(session, "Groceries")

    with pytest.raises(UniquenessError):
        operations.create_list(session, " Groceries ")

    assert len(session.lists) == 1


def test_deleted_list_ids_are_never_reused(session: SessionData) -> None:
    operations.create_list(session, "one")
    second = operations.create_list(session, "two")

    operations.delete_list(session, second.id)
    third = operations.create_list(session, "three")

    assert third.id == 3


def test_delete_list_does_not_renumber(session: SessionData) -> None:
    for name in ("a", "b", "c"):
        operations.create_list(session, name)

    operations.delete_list(session, 2)

    assert [lst.id for lst in session.lists] == [1, 3]


def test_delete_missing_list_raises_not_found(session: SessionData) -> None:
    operations.create_list(session, "a")

    with pytest.raises(NotFoundError) as exc:
        operations.delete_list(session, 99)

    assert exc.value.message == "The specified list was not found."
    assert len(session.lists) == 1


def test_rename_to_own_name_is_allowed(session: SessionData) -> None:
    todo_list = operations.create_list(session, "Groceries")

    operations.rename_list(session, todo_list.id, "Groceries")

    assert todo_list.name == "Groceries"


def test_rename_to_other_lists_name_fails(session: SessionData) -> None:
    operations.create_list(session, "Groceries")
    chores = operations.create_list(session, "Chores")

    with pytest.raises(UniquenessError):
        operations.rename_list(session, chores.id, "Groceries")

    assert chores.name == "Chores"


def test_rename_trims_and_replaces_in_place(session: SessionData) -> None:
    operations.create_list(session, "a")
    target = operations.create_list(session, "b")

    operations.rename_list(session, target.id, "  renamed ")

    assert [lst.name for lst in session.lists] == ["a", "renamed"]


def test_rename_missing_list_raises_not_found(session: SessionData) -> None:
    with pytest.raises(NotFoundError):
        operations.rename_list(session, 1, "anything")


def test_add_task_stores_raw_name(session: SessionData) -> None:
    todo_list = operations.create_list(session, "Groceries")

    task = operations.add_task(session, todo_list.id, "  Milk ")

    assert task.name == "  Milk "
    assert task.completed is False
    assert task.id == 1


@pytest.mark.parametrize("name", ["", "  ", "x" * 101])
def test_add_task_invalid_name_leaves_list_unchanged(session: SessionData, name: str) -> None:
    todo_list = operations.create_list(session, "Groceries")

    with pytest.raises(LengthError):
        operations.add_task(session, todo_list.id, name)

    assert todo_list.todos == []


def test_task_ids_are_scoped_per_list(session: SessionData) -> None:
    first = operations.create_list(session, "a")
    second = operations.create_list(session, "b")

    operations.add_task(session, first.id, "x")
    operations.add_task(session, first.id, "y")
    task = operations.add_task(session, second.id, "z")

    assert task.id == 1


def test_deleted_task_ids_are_never_reused(session: SessionData) -> None:
    todo_list = operations.create_list(session, "a")
    operations.add_task(session, todo_list.id, "x")
    last = operations.add_task(session, todo_list.id, "y")

    operations.delete_task(session, todo_list.id, last.id)
    task = operations.add_task(session, todo_list.id, "z")

    assert task.id == 3
    assert [t.id for t in todo_list.todos] == [1, 3]


def test_delete_missing_task_raises_not_found(session: SessionData) -> None:
    todo_list = operations.create_list(session, "a")
    operations.add_task(session, todo_list.id, "x")

    with pytest.raises(NotFoundError) as exc:
        operations.delete_task(session, todo_list.id, 42)

    assert exc.value.message == "The specified task was not found."
    assert len(todo_list.todos) == 1


def test_set_completed_toggles_both_ways(session: SessionData) -> None:
    todo_list = operations.create_list(session, "a")
    task = operations.add_task(session, todo_list.id, "x")

    operations.set_completed(session, todo_list.id, task.id, True)
    assert task.completed is True

    operations.set_completed(session, todo_list.id, task.id, False)
    assert task.completed is False


def test_set_completed_on_missing_list_or_task(session: SessionData) -> None:
    todo_list = operations.create_list(session, "a")

    with pytest.raises(NotFoundError):
        operations.set_completed(session, 5, 1, True)
    with pytest.raises(NotFoundError):
        operations.set_completed(session, todo_list.id, 1, True)


def test_complete_all_marks_every_task(session: SessionData) -> None:
    todo_list = operations.create_list(session, "a")
    for name in ("x", "y", "z"):
        operations.add_task(session, todo_list.id, name)

    operations.complete_all(session, todo_list.id)

    assert all(t.completed for t in todo_list.todos)
    assert remaining_label(todo_list) == "0/3"
    assert all_done(todo_list)


def test_groceries_scenario(session: SessionData) -> None:
    groceries = operations.create_list(session, "Groceries")
    milk = operations.add_task(session, groceries.id, "Milk")
    operations.add_task(session, groceries.id, "Eggs")

    operations.set_completed(session, groceries.id, milk.id, True)

    assert remaining_label(groceries) == "1/2"
    assert all_done(groceries) is False


def test_records_validate_on_assignment() -> None:
    todo_list = TodoList(id=1, name="a")
    with pytest.raises(ValueError):
        todo_list.name = ""


def test_get_list_returns_the_matching_list(session: SessionData) -> None:
    operations.create_list(session, "a")
    second = operations.create_list(session, "b")

    assert operations.get_list(session, second.id) is second
