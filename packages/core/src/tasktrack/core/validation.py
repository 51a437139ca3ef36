"""入站数据校验 -- 每种输入一个校验函数，返回字段级错误信息列表

空列表表示通过；调用方在非空时抛出 ValidationFailure。
截止时间是否早于当前时间不在此校验（允许创建过期任务）。
"""

from collections.abc import Sequence
from datetime import datetime

from .config import ALLOWED_UPLOAD_MIME_TYPES, UPLOAD_MAX_BYTES
from .models.base import ensure_utc
from .models.enums import PRIORITY_VALUES, STATUS_VALUES
from .models.inputs import TaskCreate, TaskUpdate, UploadedFile

STATUS_MESSAGE = "Status must be pending, in-progress, or completed."
PRIORITY_MESSAGE = "Priority must be low, medium, or high."
DUE_DATE_MESSAGE = "Due date must be a valid date string."


def parse_due_date(value: str | datetime) -> datetime | None:
    """解析截止时间（ISO 日期或日期时间），无法解析时返回 None"""
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = value.strip()
    if not text:
        return None
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def validate_task_create(fields: TaskCreate) -> list[str]:
    errors: list[str] = []
    if not fields.title.strip():
        errors.append("Title is required.")
    # status 会被强制为 pending，但非法值仍视为格式错误
    if fields.status and fields.status not in STATUS_VALUES:
        errors.append(STATUS_MESSAGE)
    if fields.priority and fields.priority not in PRIORITY_VALUES:
        errors.append(PRIORITY_MESSAGE)
    if fields.due_date is None or (
        isinstance(fields.due_date, str) and not fields.due_date.strip()
    ):
        errors.append("Due date is required.")
    elif parse_due_date(fields.due_date) is None:
        errors.append(DUE_DATE_MESSAGE)
    return errors


def validate_task_update(fields: TaskUpdate) -> list[str]:
    """部分更新：只校验提供了的字段"""
    errors: list[str] = []
    if fields.title is not None and not fields.title.strip():
        errors.append("Title cannot be empty.")
    if fields.status is not None and fields.status not in STATUS_VALUES:
        errors.append(STATUS_MESSAGE)
    if fields.priority is not None and fields.priority not in PRIORITY_VALUES:
        errors.append(PRIORITY_MESSAGE)
    if fields.due_date is not None and parse_due_date(fields.due_date) is None:
        errors.append(DUE_DATE_MESSAGE)
    return errors


def validate_uploads(
    files: Sequence[UploadedFile],
    max_bytes: int = UPLOAD_MAX_BYTES,
) -> list[str]:
    """上传文件校验：MIME 白名单 + 单文件大小上限"""
    errors: list[str] = []
    for file in files:
        if file.mime_type not in ALLOWED_UPLOAD_MIME_TYPES:
            errors.append(f"File type not allowed: {file.filename}")
        if len(file.content) > max_bytes:
            errors.append(f"File too large: {file.filename}")
    return errors


def validate_comment(email: str, text: str) -> list[str]:
    errors: list[str] = []
    if not email.strip():
        errors.append("Email is required.")
    if not text.strip():
        errors.append("Comment text is required.")
    return errors
