"""任务写入事务封装

每次写入在同一连接上提交；失败时回滚并原样抛出，不做重试。
单条记录的读-改-写由 SQLite 单连接串行保证，不做乐观并发校验（字段级后写覆盖）。
"""

import aiosqlite

from ..models.task import Task
from .task_store import SqliteTaskStore


async def insert_task(
    conn: aiosqlite.Connection,
    task_store: SqliteTaskStore,
    task: Task,
) -> Task:
    """写入新任务并提交

    Raises:
        Exception: 提交失败时回滚后抛出
    """
    try:
        await task_store.create_task(task)
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
    return task


async def save_task(
    conn: aiosqlite.Connection,
    task_store: SqliteTaskStore,
    task: Task,
) -> Task:
    """写回已有任务并提交，返回刷新 updated_at 后的 Task"""
    try:
        updated = await task_store.update_task(task)
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
    return updated


async def purge_task(
    conn: aiosqlite.Connection,
    task_store: SqliteTaskStore,
    task_id: str,
) -> bool:
    """物理删除任务并提交（不可恢复）"""
    try:
        deleted = await task_store.delete_task(task_id)
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
    return deleted
