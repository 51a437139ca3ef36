"""Store Protocol 接口定义

定义 TaskStore、UserStore、AttachmentStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from ..models.enums import TaskStatus
from ..models.task import Task
from ..models.user import User
from .attachment_store import StoredFile


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务（含已软删除）"""
        ...

    async def get_owned_task(self, owner_id: str, task_id: str) -> Task | None:
        """根据 owner_id + task_id 查询任务"""
        ...

    async def update_task(self, task: Task) -> Task:
        """写回任务并刷新 updated_at"""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """物理删除任务"""
        ...

    async def find(
        self,
        where: str,
        params: Sequence[Any],
        order_by: str,
        skip: int,
        limit: int,
    ) -> list[Task]:
        """按条件分页查询"""
        ...

    async def count(self, where: str, params: Sequence[Any]) -> int:
        """按条件计数"""
        ...

    async def count_by(self, owner_id: str, column: str) -> dict[str, int]:
        """按列分组计数"""
        ...

    async def list_created_since(self, owner_id: str, since: datetime) -> list[Task]:
        """查询时间窗口内创建的任务"""
        ...

    async def list_with_status(self, owner_id: str, status: TaskStatus) -> list[Task]:
        """查询指定状态的任务"""
        ...


class UserStore(Protocol):
    """User 存储接口（只读解析）"""

    async def find_by_email(self, email: str) -> User | None:
        """按邮箱精确匹配"""
        ...


class AttachmentStore(Protocol):
    """附件对象存储接口（外部协作方）"""

    async def upload(self, content: bytes, mime_type: str, folder: str) -> StoredFile:
        """持久化文件字节，返回访问 URL"""
        ...
