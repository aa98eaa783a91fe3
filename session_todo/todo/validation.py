"""
输入校验：返回错误对象或 None，由调用方决定是否中止
"""

from collections.abc import Iterable

from session_todo.todo.errors import LengthError, TodoValidationError, UniquenessError
from session_todo.todo.schemas import TodoList

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 100

LIST_NAME_LENGTH_MESSAGE = "List name must be between 1 and 100 characters."
LIST_NAME_UNIQUE_MESSAGE = "List name must be unique."
TASK_NAME_LENGTH_MESSAGE = "Task name must be between 1 and 100 characters."


def _length_ok(name: str) -> bool:
    return NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH


def validate_list_name(
    name: str, existing_lists: Iterable[TodoList]
) -> TodoValidationError | None:
    """
    校验列表名（调用方传入已 strip 的名称）。

    唯一性为大小写敏感的精确匹配；重命名时由调用方排除列表自身。
    """
    if not _length_ok(name):
        return LengthError(LIST_NAME_LENGTH_MESSAGE)
    if any(lst.name == name for lst in existing_lists):
        return UniquenessError(LIST_NAME_UNIQUE_MESSAGE)
    return None


def validate_task_name(name: str) -> TodoValidationError | None:
    """校验任务名：strip 后长度在 [1, 100]，任务名不要求唯一"""
    if not _length_ok(name.strip()):
        return LengthError(TASK_NAME_LENGTH_MESSAGE)
    return None


def list_exists(list_id: int, lists: Iterable[TodoList]) -> bool:
    return any(lst.id == list_id for lst in lists)
