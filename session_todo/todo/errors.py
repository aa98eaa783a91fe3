"""
Todo 领域异常

- TodoValidationError（LengthError / UniquenessError）：可恢复，表单带原输入重新渲染
- NotFoundError：列表或任务不存在，中止当前操作，flash 提示后跳回 /lists
- SessionStoreError：会话存储不可用
"""


class TodoError(Exception):
    """Todo 应用级异常基类"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TodoValidationError(TodoError):
    """用户输入校验失败"""


class LengthError(TodoValidationError):
    """名称长度不在 [1, 100] 内"""


class UniquenessError(TodoValidationError):
    """列表名与会话中已有列表重名"""


class NotFoundError(TodoError):
    """按 id 找不到列表或任务"""


class SessionStoreError(TodoError):
    """会话存储读取失败"""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
