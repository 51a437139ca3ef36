"""TaskStore SQLite 实现

每个任务为一行记录，列表型字段以 JSON 数组存储。
此处仅提供数据库操作，不提交事务（由 transaction 模块统一提交/回滚）。
"""

import json
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import aiosqlite

from ..models.base import format_ts, utcnow
from ..models.enums import TaskStatus
from ..models.task import Assignee, Attachment, Comment, Task

# SELECT 列顺序固定，_row_to_task 按下标读取
_COLUMNS = (
    "task_id, owner_id, title, description, status, priority, due_date, "
    "assigned_to, attachments, comments, is_deleted, created_at, updated_at"
)

# 允许分组计数的列
_GROUPABLE_COLUMNS = frozenset({"status", "priority"})

# 仅统计 owner 名下未删除任务
ACTIVE_SCOPE = "owner_id = ? AND is_deleted = 0"


def _dump_list(items: Sequence[Any]) -> str:
    return json.dumps(
        [item.model_dump(mode="json") for item in items],
        ensure_ascii=False,
    )


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录（created_at / updated_at 以 task 上的值为准）"""
        await self._conn.execute(
            f"""
            INSERT INTO tasks ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.task_id,
                task.owner_id,
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                format_ts(task.due_date),
                _dump_list(task.assigned_to),
                _dump_list(task.attachments),
                _dump_list(task.comments),
                int(task.is_deleted),
                format_ts(task.created_at),
                format_ts(task.updated_at),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务（含已软删除）"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def get_owned_task(self, owner_id: str, task_id: str) -> Task | None:
        """根据 owner_id + task_id 查询任务，其他 owner 的任务视为不存在"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE task_id = ? AND owner_id = ?",
            (task_id, owner_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def update_task(self, task: Task) -> Task:
        """整行写回可变字段，并刷新 updated_at

        Returns:
            写入后的 Task（带新的 updated_at）
        """
        updated = task.model_copy(update={"updated_at": utcnow()})
        await self._conn.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, status = ?, priority = ?,
                due_date = ?, assigned_to = ?, attachments = ?, comments = ?,
                is_deleted = ?, updated_at = ?
            WHERE task_id = ?
            """,
            (
                updated.title,
                updated.description,
                updated.status.value,
                updated.priority.value,
                format_ts(updated.due_date),
                _dump_list(updated.assigned_to),
                _dump_list(updated.attachments),
                _dump_list(updated.comments),
                int(updated.is_deleted),
                format_ts(updated.updated_at),
                updated.task_id,
            ),
        )
        return updated

    async def delete_task(self, task_id: str) -> bool:
        """物理删除任务，返回是否删除了记录"""
        cursor = await self._conn.execute(
            "DELETE FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        return cursor.rowcount > 0

    async def find(
        self,
        where: str,
        params: Sequence[Any],
        order_by: str,
        skip: int,
        limit: int,
    ) -> list[Task]:
        """按条件查询一页任务

        where / order_by 由调用方基于白名单拼装，值一律走参数绑定。
        """
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE {where} "
            f"ORDER BY {order_by} LIMIT ? OFFSET ?",
            (*params, limit, skip),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def count(self, where: str, params: Sequence[Any]) -> int:
        """按条件计数（分页前总数）"""
        cursor = await self._conn.execute(
            f"SELECT COUNT(*) FROM tasks WHERE {where}",
            tuple(params),
        )
        row = await cursor.fetchone()
        return int(row[0]) if row else 0

    async def count_by(self, owner_id: str, column: str) -> dict[str, int]:
        """按 status / priority 分组计数（仅未删除任务）"""
        if column not in _GROUPABLE_COLUMNS:
            raise ValueError(f"Cannot group tasks by {column!r}")
        cursor = await self._conn.execute(
            f"SELECT {column}, COUNT(*) FROM tasks WHERE {ACTIVE_SCOPE} GROUP BY {column}",
            (owner_id,),
        )
        rows = await cursor.fetchall()
        return {row[0]: int(row[1]) for row in rows}

    async def list_created_since(self, owner_id: str, since: datetime) -> list[Task]:
        """查询 since 之后创建的未删除任务，按 created_at 正序"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE {ACTIVE_SCOPE} AND created_at >= ? "
            "ORDER BY created_at ASC",
            (owner_id, format_ts(since)),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def list_with_status(self, owner_id: str, status: TaskStatus) -> list[Task]:
        """查询指定状态的未删除任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE {ACTIVE_SCOPE} AND status = ? "
            "ORDER BY created_at ASC",
            (owner_id, status.value),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            task_id=row[0],
            owner_id=row[1],
            title=row[2],
            description=row[3],
            status=row[4],
            priority=row[5],
            due_date=datetime.fromisoformat(row[6]),
            assigned_to=[Assignee(**a) for a in json.loads(row[7] or "[]")],
            attachments=[Attachment(**a) for a in json.loads(row[8] or "[]")],
            comments=[Comment(**c) for c in json.loads(row[9] or "[]")],
            is_deleted=bool(row[10]),
            created_at=datetime.fromisoformat(row[11]),
            updated_at=datetime.fromisoformat(row[12]),
        )
