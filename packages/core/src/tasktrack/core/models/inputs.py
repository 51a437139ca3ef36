"""入站数据结构 -- create / update 字段与上传文件

字段保持宽松类型（如 status 为 str），格式校验由 validation 模块完成，
校验失败统一抛出 ValidationFailure。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .task import Attachment


class UploadedFile(BaseModel):
    """待上传文件（原始字节 + MIME 类型）"""

    filename: str = Field(description="客户端原始文件名")
    content: bytes = Field(description="文件内容")
    mime_type: str = Field(default="application/octet-stream", description="MIME 类型")


class TaskCreate(BaseModel):
    """创建任务字段

    status 会被忽略：新任务一律为 pending。
    """

    title: str = Field(default="", description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    status: str | None = Field(default=None, description="客户端请求的状态（忽略）")
    priority: str | None = Field(default=None, description="优先级")
    due_date: str | datetime | None = Field(default=None, description="截止时间")
    assigned_to: list[str] = Field(default_factory=list, description="被指派人邮箱")


class TaskUpdate(BaseModel):
    """更新任务字段 -- None 表示不修改该字段

    existing_files: 客户端声明保留的附件（已排除 removed_files）；
    None 表示未声明，此时以当前附件去掉 removed_files 为准。
    """

    title: str | None = Field(default=None, description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    status: str | None = Field(default=None, description="任务状态")
    priority: str | None = Field(default=None, description="优先级")
    due_date: str | datetime | None = Field(default=None, description="截止时间")
    assigned_to: list[str] | None = Field(default=None, description="被指派人邮箱")
    existing_files: list[Attachment] | None = Field(
        default=None,
        description="声明保留的附件",
    )
    removed_files: list[str] = Field(default_factory=list, description="移除的附件文件名")
