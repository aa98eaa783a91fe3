"""
Todo 数据模型

会话中只保存一个 SessionData：按存储顺序排列的 TodoList，
每个 TodoList 内按存储顺序排列 Task。
写入 Redis 时 model_dump_json()，读取时 model_validate_json()。
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FlashKind = Literal["error", "success"]


class Task(BaseModel):
    """单个任务"""

    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(ge=1)  # 列表内唯一
    name: str = Field(min_length=1)  # 原样保存用户输入（校验时才 strip）
    completed: bool = False


class TodoList(BaseModel):
    """命名任务列表"""

    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(ge=1)  # 会话内唯一
    name: str = Field(min_length=1, max_length=100)
    todos: list[Task] = Field(default_factory=list)
    last_todo_id: int = 0  # 已分配过的最大任务 id，删除后也不回退

    def find_task(self, task_id: int) -> Task | None:
        return next((t for t in self.todos if t.id == task_id), None)


class SessionData(BaseModel):
    """
    会话存储的全部状态。

    flash 只在下一次渲染时展示一次，渲染后即清空。
    """

    lists: list[TodoList] = Field(default_factory=list)
    last_list_id: int = 0  # 已分配过的最大列表 id
    flash: dict[FlashKind, str] = Field(default_factory=dict)

    def find_list(self, list_id: int) -> TodoList | None:
        return next((lst for lst in self.lists if lst.id == list_id), None)

    def add_flash(self, kind: FlashKind, message: str) -> None:
        self.flash[kind] = message

    def pop_flash(self) -> dict[str, str]:
        """取出并清空待展示的 flash 消息"""
        messages = dict(self.flash)
        self.flash.clear()
        return messages
