"""
链路追踪上下文：通过 contextvars 在协程间自动传播 trace_id
"""

import contextvars

trace_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")


def get_trace_id() -> str:
    return trace_id_var.get()
