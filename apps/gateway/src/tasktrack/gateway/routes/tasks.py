"""任务路由

POST   /api/tasks                    创建任务（multipart：字段 + files）
GET    /api/tasks                    列表：筛选 / 搜索 / 排序 / 分页
GET    /api/tasks/dashboard/stats    仪表盘计数
GET    /api/tasks/analytics/data     统计快照
GET    /api/tasks/{task_id}          任务详情
PUT    /api/tasks/{task_id}          更新（multipart：字段 + newFiles + existingFiles + removedFiles）
PATCH  /api/tasks/{task_id}/complete 标记完成
PATCH  /api/tasks/{task_id}/restore  恢复软删除
DELETE /api/tasks/{task_id}          软删除
DELETE /api/tasks/{task_id}/permanent 物理删除
POST   /api/tasks/{task_id}/comments 追加评论

assignedTo / existingFiles 同时接受带 [] 后缀的字段名。
"""

import json

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from starlette.responses import JSONResponse
from tasktrack.core.assignee import parse_assignee_field
from tasktrack.core.config import DEFAULT_PAGE_LIMIT
from tasktrack.core.exceptions import ValidationFailure
from tasktrack.core.models import (
    Attachment,
    Task,
    TaskCreate,
    TaskQuery,
    TaskUpdate,
    UploadedFile,
)

from ..deps import get_owner_id, get_task_service
from ..services.task_service import TaskService

router = APIRouter()

_attachments_adapter = TypeAdapter(list[Attachment])


class CommentRequest(BaseModel):
    """评论请求体"""

    email: str = Field(description="作者邮箱")
    text: str = Field(description="评论内容")


def _ok(data, message: str = "OK", status_code: int = 200, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "message": message, "data": data, **extra},
    )


def _dump(task: Task) -> dict:
    return task.model_dump(mode="json", by_alias=True)


async def _read_files(files: list[UploadFile] | None) -> list[UploadedFile]:
    uploaded: list[UploadedFile] = []
    for f in files or []:
        uploaded.append(
            UploadedFile(
                filename=f.filename or "file",
                content=await f.read(),
                mime_type=f.content_type or "application/octet-stream",
            )
        )
    return uploaded


def _merge_form_values(*groups: list[str] | None) -> list[str] | None:
    """合并同一字段的多种写法（如 assignedTo 与 assignedTo[]）；均未提交时返回 None"""
    if all(group is None for group in groups):
        return None
    return [value for group in groups for value in group or []]


def _parse_json_values(values: list[str] | None, field: str) -> list:
    """表单多值字段：每个值可以是 JSON 数组、JSON 对象或普通字符串"""
    items: list = []
    for raw in values or []:
        text = raw.strip()
        if not text:
            continue
        if text[0] in "[{":
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValidationFailure([f"{field} must be valid JSON."]) from e
            items.extend(parsed if isinstance(parsed, list) else [parsed])
        else:
            items.append(text)
    return items


def _parse_removed_files(values: list[str] | None) -> list[str]:
    """removedFiles：每个值是一个文件名；整体为 JSON 字符串数组时展开"""
    names: list[str] = []
    for raw in values or []:
        text = raw.strip()
        if not text:
            continue
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list) and all(isinstance(v, str) for v in parsed):
                names.extend(parsed)
                continue
        names.append(text)
    return names


def _parse_existing_files(values: list[str] | None) -> list[Attachment] | None:
    if values is None:
        return None
    try:
        return _attachments_adapter.validate_python(
            _parse_json_values(values, "existingFiles")
        )
    except PydanticValidationError as e:
        raise ValidationFailure(
            ["existingFiles must be a list of {filename, url} objects."]
        ) from e


@router.post("/api/tasks")
async def create_task(
    title: str = Form(default=""),
    description: str | None = Form(default=None),
    status: str | None = Form(default=None),
    priority: str | None = Form(default=None),
    due_date: str | None = Form(default=None, alias="dueDate"),
    assigned_to: list[str] | None = Form(default=None, alias="assignedTo"),
    assigned_to_list: list[str] | None = Form(default=None, alias="assignedTo[]"),
    files: list[UploadFile] | None = File(default=None),
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    """创建任务 -- 返回 201；status 一律为 pending"""
    fields = TaskCreate(
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=due_date,
        assigned_to=parse_assignee_field(_merge_form_values(assigned_to, assigned_to_list)),
    )
    task = await service.create_task(owner_id, fields, await _read_files(files))
    return _ok(_dump(task), message="Task created", status_code=201)


@router.get("/api/tasks")
async def list_tasks(
    page: int = Query(default=1),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT),
    search: str | None = Query(default=None),
    status: str | None = Query(default=None),
    priority: str | None = Query(default=None),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    """分页查询当前用户未删除的任务"""
    result = await service.list_tasks(
        owner_id,
        TaskQuery(
            page=page,
            limit=limit,
            search=search,
            status=status,
            priority=priority,
            sort_field=sort_by,
            sort_direction=sort_order,
        ),
    )
    return _ok(
        [_dump(t) for t in result.items],
        pagination={
            "totalCount": result.total_count,
            "totalPages": result.total_pages,
            "currentPage": result.current_page,
            "limit": result.limit,
        },
    )


@router.get("/api/tasks/dashboard/stats")
async def dashboard_stats(
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    stats = await service.dashboard_stats(owner_id)
    return _ok(stats.model_dump(mode="json", by_alias=True))


@router.get("/api/tasks/analytics/data")
async def analytics_data(
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    snapshot = await service.analytics(owner_id)
    return _ok(snapshot.model_dump(mode="json", by_alias=True))


@router.get("/api/tasks/{task_id}")
async def get_task(
    task_id: str,
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    task = await service.get_task(owner_id, task_id)
    return _ok(_dump(task))


@router.put("/api/tasks/{task_id}")
async def update_task(
    task_id: str,
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    status: str | None = Form(default=None),
    priority: str | None = Form(default=None),
    due_date: str | None = Form(default=None, alias="dueDate"),
    assigned_to: list[str] | None = Form(default=None, alias="assignedTo"),
    assigned_to_list: list[str] | None = Form(default=None, alias="assignedTo[]"),
    existing_files: list[str] | None = Form(default=None, alias="existingFiles"),
    existing_files_list: list[str] | None = Form(default=None, alias="existingFiles[]"),
    removed_files: list[str] | None = Form(default=None, alias="removedFiles"),
    new_files: list[UploadFile] | None = File(default=None, alias="newFiles"),
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    """部分更新 -- 未提交的字段保持不变"""
    assigned_to = _merge_form_values(assigned_to, assigned_to_list)
    fields = TaskUpdate(
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=due_date,
        assigned_to=(
            parse_assignee_field(assigned_to) if assigned_to is not None else None
        ),
        existing_files=_parse_existing_files(
            _merge_form_values(existing_files, existing_files_list)
        ),
        removed_files=_parse_removed_files(removed_files),
    )
    task = await service.update_task(
        owner_id, task_id, fields, await _read_files(new_files)
    )
    return _ok(_dump(task), message="Task updated")


@router.patch("/api/tasks/{task_id}/complete")
async def mark_complete(
    task_id: str,
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    task = await service.mark_complete(owner_id, task_id)
    return _ok(_dump(task), message="Task marked as complete")


@router.patch("/api/tasks/{task_id}/restore")
async def restore_task(
    task_id: str,
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    task = await service.restore(owner_id, task_id)
    return _ok(_dump(task), message="Task restored")


@router.delete("/api/tasks/{task_id}")
async def delete_task(
    task_id: str,
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    """软删除"""
    task = await service.soft_delete(owner_id, task_id)
    return _ok(_dump(task), message="Task moved to trash")


@router.delete("/api/tasks/{task_id}/permanent")
async def delete_task_permanently(
    task_id: str,
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    await service.delete_permanently(owner_id, task_id)
    return _ok(None, message="Task deleted permanently")


@router.post("/api/tasks/{task_id}/comments")
async def add_comment(
    task_id: str,
    body: CommentRequest,
    owner_id: str = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
):
    task = await service.add_comment(owner_id, task_id, body.email, body.text)
    return _ok(_dump(task), message="Comment added", status_code=201)
