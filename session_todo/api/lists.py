"""
/lists 页面接口：列表 / 任务的增删改查（HTML 表单 + 重定向）

每个请求：load 会话 → 至多一次修改 → save 会话 → 渲染或 303 重定向。
- 校验失败：带错误信息和原输入重新渲染表单（422），不修改状态
- 目标不存在：抛出 NotFoundError，由 main 中的异常处理器 flash + 跳回 /lists
- AJAX 删除（X-Requested-With: XMLHttpRequest）：返回轻量响应而不是重定向
"""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from session_todo.api.session import get_session_id, get_session_store
from session_todo.observability.metrics import TODO_OPERATION_TOTAL
from session_todo.todo import operations
from session_todo.todo.errors import NotFoundError, TodoValidationError
from session_todo.todo.schemas import SessionData, TodoList
from session_todo.todo.store import SessionStore
from session_todo.todo.views import (
    all_done,
    list_summaries,
    remaining_label,
    sort_todos,
)
from session_todo.web.templating import templates

router = APIRouter(tags=["列表"])
log = structlog.get_logger()

COMPLETION_FLAGS = ("true", "false")
UNKNOWN_ACTION_MESSAGE = "The requested action was not found."


# ── 公共辅助 ──

@contextmanager
def _track(operation: str) -> Iterator[None]:
    """按操作结果计数"""
    try:
        yield
    except TodoValidationError:
        TODO_OPERATION_TOTAL.labels(operation=operation, status="invalid").inc()
        raise
    except NotFoundError:
        TODO_OPERATION_TOTAL.labels(operation=operation, status="not_found").inc()
        raise
    TODO_OPERATION_TOTAL.labels(operation=operation, status="success").inc()


def _is_xhr(request: Request) -> bool:
    return request.headers.get("X-Requested-With") == "XMLHttpRequest"


def _redirect(url: str) -> RedirectResponse:
    # POST 后统一 303，浏览器以 GET 跟随
    return RedirectResponse(url, status_code=303)


async def _render(
    request: Request,
    store: SessionStore,
    session_id: str,
    data: SessionData,
    template: str,
    *,
    status_code: int = 200,
    error: str | None = None,
    **context,
) -> Response:
    """渲染页面并消费 flash；本次校验错误直接放进上下文，不进会话"""
    flash = data.pop_flash()
    if error:
        flash["error"] = error
    response = templates.TemplateResponse(
        request,
        template,
        {"flash": flash, **context},
        status_code=status_code,
    )
    await store.save(session_id, data)
    return response


def _list_context(todo_list: TodoList) -> dict:
    return {
        "todo_list": todo_list,
        "todos": sort_todos(todo_list.todos),
        "all_done": all_done(todo_list),
        "remaining_label": remaining_label(todo_list),
    }


# ── 列表 ──

@router.get("/")
async def index():
    return RedirectResponse("/lists")


@router.get("/lists")
async def show_lists(
    request: Request,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    """列表总览：已全部完成的列表排在前面"""
    data = await store.load(session_id)
    summaries = list_summaries(data, completed_first=True)
    return await _render(request, store, session_id, data, "lists.html", lists=summaries)


@router.get("/lists/new")
async def new_list_form(
    request: Request,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    return await _render(request, store, session_id, data, "new_list.html", list_name="")


@router.post("/lists")
async def create_list(
    request: Request,
    list_name: str = Form(""),
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    try:
        with _track("create_list"):
            operations.create_list(data, list_name)
    except TodoValidationError as e:
        return await _render(
            request, store, session_id, data, "new_list.html",
            status_code=422, error=e.message, list_name=list_name,
        )

    data.add_flash("success", "The list has been created.")
    await store.save(session_id, data)
    return _redirect("/lists")


@router.get("/lists/{list_id}")
async def show_list(
    request: Request,
    list_id: int,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    todo_list = operations.get_list(data, list_id)
    return await _render(
        request, store, session_id, data, "list.html",
        todo="", **_list_context(todo_list),
    )


@router.get("/lists/{list_id}/edit")
async def edit_list_form(
    request: Request,
    list_id: int,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    todo_list = operations.get_list(data, list_id)
    return await _render(
        request, store, session_id, data, "edit_list.html",
        todo_list=todo_list, list_name=todo_list.name,
    )


@router.post("/lists/{list_id}")
async def rename_list(
    request: Request,
    list_id: int,
    list_name: str = Form(""),
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    try:
        with _track("rename_list"):
            operations.rename_list(data, list_id, list_name)
    except TodoValidationError as e:
        return await _render(
            request, store, session_id, data, "edit_list.html",
            status_code=422, error=e.message,
            todo_list=data.find_list(list_id), list_name=list_name,
        )

    data.add_flash("success", "The list has been renamed.")
    await store.save(session_id, data)
    return _redirect(f"/lists/{list_id}")


@router.post("/lists/{list_id}/delete")
async def delete_list(
    request: Request,
    list_id: int,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    with _track("delete_list"):
        operations.delete_list(data, list_id)

    data.add_flash("success", "The list has been deleted.")
    await store.save(session_id, data)
    if _is_xhr(request):
        # 前端拿到目标地址后自行跳转
        return PlainTextResponse("/lists")
    return _redirect("/lists")


# ── 任务 ──

@router.post("/lists/{list_id}/todos")
async def add_task(
    request: Request,
    list_id: int,
    todo: str = Form(""),
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    try:
        with _track("add_task"):
            operations.add_task(data, list_id, todo)
    except TodoValidationError as e:
        todo_list = operations.get_list(data, list_id)
        return await _render(
            request, store, session_id, data, "list.html",
            status_code=422, error=e.message,
            todo=todo, **_list_context(todo_list),
        )

    data.add_flash("success", "The task has been added.")
    await store.save(session_id, data)
    return _redirect(f"/lists/{list_id}")


@router.post("/lists/{list_id}/todos/complete_all")
async def complete_all(
    list_id: int,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    with _track("complete_all"):
        operations.complete_all(data, list_id)

    data.add_flash("success", "All tasks have been completed.")
    await store.save(session_id, data)
    return _redirect(f"/lists/{list_id}")


# 必须注册在 /todos/{task_id}/{completed} 之前，否则 "delete" 会先被当作 task_id 匹配
@router.post("/lists/{list_id}/todos/delete/{todo_id}")
async def delete_task(
    request: Request,
    list_id: int,
    todo_id: int,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    data = await store.load(session_id)
    with _track("delete_task"):
        operations.delete_task(data, list_id, todo_id)

    if _is_xhr(request):
        # XHR 不刷新页面，不写 flash
        await store.save(session_id, data)
        return Response(status_code=204)

    data.add_flash("success", "The task has been deleted.")
    await store.save(session_id, data)
    return _redirect(f"/lists/{list_id}")


@router.post("/lists/{list_id}/todos/{task_id}/{completed}")
async def set_task_completed(
    list_id: int,
    task_id: int,
    completed: str,
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    """只接受 true / false，其他取值按目标不存在处理"""
    if completed not in COMPLETION_FLAGS:
        raise NotFoundError(UNKNOWN_ACTION_MESSAGE)

    data = await store.load(session_id)
    with _track("set_completed"):
        operations.set_completed(data, list_id, task_id, completed == "true")

    data.add_flash("success", "The task has been updated.")
    await store.save(session_id, data)
    return _redirect(f"/lists/{list_id}")
