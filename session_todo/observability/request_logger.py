"""
请求日志中间件：记录每个 HTTP 请求的开始/结束 + trace_id 注入

/health、/metrics 这类探针请求只打 debug，避免刷屏。
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from session_todo.observability.context import trace_id_var

log = structlog.get_logger()

QUIET_PATHS = ("/health", "/metrics")
MAX_TRACE_ID_LENGTH = 64


def _incoming_trace_id(request: Request) -> str:
    """沿用上游传入的 X-Trace-ID，缺失或过长时重新生成"""
    trace_id = request.headers.get("X-Trace-ID", "")
    if not trace_id or len(trace_id) > MAX_TRACE_ID_LENGTH:
        return str(uuid.uuid4())
    return trace_id


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """HTTP 请求日志 + trace_id 上下文注入"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = _incoming_trace_id(request)
        trace_id_var.set(trace_id)

        # 绑定到 structlog 上下文，后续所有日志自动带 trace_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(trace_id=trace_id)

        path = request.url.path
        quiet = path.startswith(QUIET_PATHS)
        emit = log.debug if quiet else log.info

        start = time.monotonic()
        emit(
            "请求开始",
            method=request.method,
            path=path,
            client_ip=request.client.host if request.client else "unknown",
            xhr=request.headers.get("X-Requested-With") == "XMLHttpRequest",
        )

        response = await call_next(request)

        duration_ms = int((time.monotonic() - start) * 1000)
        if response.status_code >= 500:
            emit = log.error
        elif response.status_code in (404, 422):
            emit = log.warning

        emit(
            "请求结束",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers["X-Trace-ID"] = trace_id
        response.headers["X-Duration-Ms"] = str(duration_ms)

        return response
