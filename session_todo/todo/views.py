"""
派生视图：完成度判断、剩余计数标签、按完成状态排序
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from session_todo.todo.schemas import SessionData, Task, TodoList

T = TypeVar("T")


def all_done(todo_list: TodoList) -> bool:
    """列表非空且全部任务已完成；空列表不算完成"""
    return bool(todo_list.todos) and all(t.completed for t in todo_list.todos)


def remaining_count(todo_list: TodoList) -> int:
    return sum(1 for t in todo_list.todos if not t.completed)


def remaining_label(todo_list: TodoList) -> str:
    """格式："<未完成数>/<总数>" """
    return f"{remaining_count(todo_list)}/{len(todo_list.todos)}"


def _partition(items: Sequence[T], is_done) -> list[T]:
    """稳定分区：已完成在前，组内保持存储顺序"""
    complete = [item for item in items if is_done(item)]
    incomplete = [item for item in items if not is_done(item)]
    return complete + incomplete


def sort_lists(lists: Sequence[TodoList]) -> list[TodoList]:
    return _partition(lists, all_done)


def sort_todos(todos: Sequence[Task]) -> list[Task]:
    return _partition(todos, lambda t: t.completed)


@dataclass
class ListSummary:
    """列表总览页的一行"""

    id: int
    name: str
    done: bool
    remaining: int
    total: int
    remaining_label: str


def summarize(todo_list: TodoList) -> ListSummary:
    return ListSummary(
        id=todo_list.id,
        name=todo_list.name,
        done=all_done(todo_list),
        remaining=remaining_count(todo_list),
        total=len(todo_list.todos),
        remaining_label=remaining_label(todo_list),
    )


def list_summaries(session: SessionData, *, completed_first: bool = False) -> list[ListSummary]:
    """返回所有列表的摘要，默认按存储顺序；completed_first 时已完成的列表在前"""
    lists = sort_lists(session.lists) if completed_first else session.lists
    return [summarize(lst) for lst in lists]
