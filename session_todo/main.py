"""
FastAPI 应用主入口
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from prometheus_client import make_asgi_app

from session_todo.api.session import SessionCookieMiddleware
from session_todo.cache.redis_client import redis_client
from session_todo.config import get_settings
from session_todo.observability.context import get_trace_id
from session_todo.observability.logging_config import setup_logging
from session_todo.observability.metrics import ERROR_TOTAL
from session_todo.observability.metrics_middleware import MetricsMiddleware
from session_todo.observability.request_logger import RequestLoggerMiddleware
from session_todo.todo.errors import NotFoundError, SessionStoreError

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """应用生命周期：启动时预检 Redis，关闭时清理连接池"""
    log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)

    # ── Warm-up：Fail Fast，会话存储不可用时拒绝启动 ──
    await redis_client.ping()
    log.info("Redis 连接正常")

    yield

    await redis_client.aclose()
    log.info("应用关闭，资源已释放")


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# ── 中间件（执行顺序：从下往上注册，从上往下执行） ──
app.add_middleware(SessionCookieMiddleware)
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(MetricsMiddleware)

# ── Prometheus 指标端点 ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


# ── 异常处理 ──

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    """列表/任务不存在：写入 error flash，跳回总览；本次请求的修改全部丢弃"""
    store = request.state.session_store
    session_id = request.state.session_id

    data = await store.load(session_id)
    data.add_flash("error", exc.message)
    await store.save(session_id, data)
    return RedirectResponse("/lists", status_code=303)


@app.exception_handler(SessionStoreError)
async def session_store_error_handler(request: Request, exc: SessionStoreError):
    ERROR_TOTAL.labels(error_type="session_store").inc()
    log.error("会话存储不可用", path=request.url.path, error=str(exc.cause))
    return PlainTextResponse(
        f"Session storage is temporarily unavailable. Please try again later. (trace: {get_trace_id()})",
        status_code=503,
    )


# ── 路由注册 ──
from session_todo.api.health import router as health_router
from session_todo.api.lists import router as lists_router

app.include_router(health_router)
app.include_router(lists_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("session_todo.main:app", host="0.0.0.0", port=settings.APP_PORT, reload=True)
