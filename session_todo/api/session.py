"""
会话 Cookie 中间件 + FastAPI 依赖注入

浏览器只持有一个不透明的 session_id（UUID4），全部状态保存在 Redis。
Cookie 缺失或格式非法时分配新会话。
"""

import uuid

import redis.asyncio as aioredis
import structlog
from fastapi import Depends, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from session_todo.cache.redis_client import get_redis
from session_todo.config import get_settings
from session_todo.todo.store import SessionStore

log = structlog.get_logger()
settings = get_settings()


def _parse_session_id(raw: str | None) -> str | None:
    if not raw:
        return None
    try:
        return uuid.UUID(raw).hex
    except ValueError:
        return None


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """解析 / 分配 session_id，并在响应中续期 Cookie"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session_id = _parse_session_id(request.cookies.get(settings.SESSION_COOKIE_NAME))
        if session_id is None:
            session_id = uuid.uuid4().hex
            log.info("新会话", session_id=session_id)

        request.state.session_id = session_id
        structlog.contextvars.bind_contextvars(session_id=session_id)

        response = await call_next(request)

        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            session_id,
            max_age=settings.SESSION_TTL,
            httponly=True,
            samesite="lax",
            secure=settings.SESSION_COOKIE_SECURE,
        )
        return response


async def get_session_id(request: Request) -> str:
    """FastAPI 依赖注入：当前请求的 session_id"""
    return request.state.session_id


async def get_session_store(
    request: Request,
    redis: aioredis.Redis = Depends(get_redis),
) -> SessionStore:
    """
    FastAPI 依赖注入：会话存储

    同时挂到 request.state 上，供异常处理器写入 flash。
    """
    store = SessionStore(redis)
    request.state.session_store = store
    return store
