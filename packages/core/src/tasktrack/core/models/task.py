"""Task Domain Model

Task 以单条记录（document）形式存储：assigned_to / attachments / comments
为有序列表，缺省为空列表而不是 None。
"""

from datetime import datetime

from pydantic import Field, field_validator

from .base import ApiModel, ensure_utc, utcnow
from .enums import TaskPriority, TaskStatus


class Assignee(ApiModel):
    """被指派人（userId 来自用户表解析）"""

    user_id: str | None = Field(default=None, description="用户 ID")
    email: str = Field(description="用户邮箱（以用户表中存储的为准）")


class Attachment(ApiModel):
    """附件记录，filename 用作对账键（不保证唯一）"""

    filename: str = Field(description="原始文件名")
    url: str = Field(description="附件访问 URL")


class Comment(ApiModel):
    """评论（只追加，不编辑）"""

    user_id: str | None = Field(default=None, description="作者用户 ID")
    email: str = Field(description="作者邮箱")
    text: str = Field(description="评论内容")
    created_at: datetime = Field(default_factory=utcnow, description="创建时间")

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class Task(ApiModel):
    """Task 数据模型

    每个任务只属于一个 owner，所有列表与统计都按 owner 限定范围。
    is_deleted=True 的任务不出现在列表与统计中，但仍可按 ID 直接访问。
    """

    task_id: str = Field(serialization_alias="id", description="唯一标识，ULID 格式")
    owner_id: str = Field(description="所属用户 ID")
    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    due_date: datetime = Field(description="截止时间")
    assigned_to: list[Assignee] = Field(default_factory=list, description="被指派人列表")
    attachments: list[Attachment] = Field(default_factory=list, description="附件列表")
    comments: list[Comment] = Field(default_factory=list, description="评论列表")
    is_deleted: bool = Field(default=False, description="软删除标记")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
