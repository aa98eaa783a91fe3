"""
列表 / 任务 CRUD 操作

所有操作直接修改传入的 SessionData（按引用传递），由调用方负责保存。
校验失败或目标不存在时抛出异常，且不修改任何状态。
"""

from collections.abc import Iterable

import structlog

from session_todo.todo.errors import NotFoundError
from session_todo.todo.schemas import SessionData, Task, TodoList
from session_todo.todo.validation import list_exists, validate_list_name, validate_task_name

log = structlog.get_logger()

LIST_NOT_FOUND_MESSAGE = "The specified list was not found."
TASK_NOT_FOUND_MESSAGE = "The specified task was not found."


def next_id(items: Iterable[TodoList | Task], high_water: int = 0) -> int:
    """
    计算下一个 id：max(现有最大 id, 历史最大 id) + 1，空集合返回 1。

    每次插入时重新计算；high_water 保证删除最大 id 后也不会复用。
    """
    return max(max((item.id for item in items), default=0), high_water) + 1


# ── 查找 ──

def get_list(session: SessionData, list_id: int) -> TodoList:
    if not list_exists(list_id, session.lists):
        log.warning("列表不存在", list_id=list_id)
        raise NotFoundError(LIST_NOT_FOUND_MESSAGE)
    return session.find_list(list_id)


def get_task(todo_list: TodoList, task_id: int) -> Task:
    task = todo_list.find_task(task_id)
    if task is None:
        log.warning("任务不存在", list_id=todo_list.id, task_id=task_id)
        raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
    return task


# ── 列表操作 ──

def create_list(session: SessionData, name: str) -> TodoList:
    """新建列表，名称先 strip 再校验"""
    list_name = name.strip()
    error = validate_list_name(list_name, session.lists)
    if error:
        log.warning("列表名校验失败", error=error.message)
        raise error

    list_id = next_id(session.lists, session.last_list_id)
    todo_list = TodoList(id=list_id, name=list_name)
    session.lists.append(todo_list)
    session.last_list_id = list_id
    log.info("列表已创建", list_id=list_id)
    return todo_list


def rename_list(session: SessionData, list_id: int, new_name: str) -> TodoList:
    """重命名列表：唯一性只与其他列表比较，改回原名不报错"""
    todo_list = get_list(session, list_id)
    list_name = new_name.strip()
    others = (lst for lst in session.lists if lst.id != list_id)
    error = validate_list_name(list_name, others)
    if error:
        log.warning("列表名校验失败", list_id=list_id, error=error.message)
        raise error

    todo_list.name = list_name
    log.info("列表已重命名", list_id=list_id)
    return todo_list


def delete_list(session: SessionData, list_id: int) -> TodoList:
    todo_list = get_list(session, list_id)
    session.lists.remove(todo_list)
    log.info("列表已删除", list_id=list_id)
    return todo_list


# ── 任务操作 ──

def add_task(session: SessionData, list_id: int, name: str) -> Task:
    """
    向列表追加任务。

    校验使用 strip 后的名称，但保存的是用户原始输入。
    """
    todo_list = get_list(session, list_id)
    error = validate_task_name(name)
    if error:
        log.warning("任务名校验失败", list_id=list_id, error=error.message)
        raise error

    task_id = next_id(todo_list.todos, todo_list.last_todo_id)
    task = Task(id=task_id, name=name)
    todo_list.todos.append(task)
    todo_list.last_todo_id = task_id
    log.info("任务已添加", list_id=list_id, task_id=task_id)
    return task


def delete_task(session: SessionData, list_id: int, task_id: int) -> Task:
    todo_list = get_list(session, list_id)
    task = get_task(todo_list, task_id)
    todo_list.todos.remove(task)
    log.info("任务已删除", list_id=list_id, task_id=task_id)
    return task


def set_completed(session: SessionData, list_id: int, task_id: int, value: bool) -> Task:
    todo_list = get_list(session, list_id)
    task = get_task(todo_list, task_id)
    task.completed = value
    log.info("任务状态已更新", list_id=list_id, task_id=task_id, completed=value)
    return task


def complete_all(session: SessionData, list_id: int) -> TodoList:
    todo_list = get_list(session, list_id)
    for task in todo_list.todos:
        task.completed = True
    log.info("列表任务已全部完成", list_id=list_id, count=len(todo_list.todos))
    return todo_list
