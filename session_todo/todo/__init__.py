"""
Todo 模块：会话级列表 / 任务管理

提供 Redis 持久化的 SessionStore、数据模型、校验与 CRUD 操作，
供 /lists 路由使用。
"""

from session_todo.todo.errors import (
    LengthError,
    NotFoundError,
    SessionStoreError,
    TodoError,
    TodoValidationError,
    UniquenessError,
)
from session_todo.todo.schemas import SessionData, Task, TodoList
from session_todo.todo.store import SessionStore

__all__ = [
    "LengthError",
    "NotFoundError",
    "SessionData",
    "SessionStore",
    "SessionStoreError",
    "Task",
    "TodoError",
    "TodoList",
    "TodoValidationError",
    "UniquenessError",
]
