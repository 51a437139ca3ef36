"""TaskTrack Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from .attachment_store import LocalAttachmentStore, StoredFile, compute_hash_and_size
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .transaction import insert_task, purge_task, save_task
from .user_store import SqliteUserStore


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.task_store = SqliteTaskStore(conn)
        self.user_store = SqliteUserStore(conn)


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


def create_attachment_store(uploads_dir: str | Path, base_url: str) -> LocalAttachmentStore:
    """创建本地附件存储，确保目录存在"""
    uploads_path = Path(uploads_dir)
    uploads_path.mkdir(parents=True, exist_ok=True)
    return LocalAttachmentStore(uploads_path, base_url)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "create_attachment_store",
    "SqliteTaskStore",
    "SqliteUserStore",
    "LocalAttachmentStore",
    "StoredFile",
    "compute_hash_and_size",
    "init_db",
    "insert_task",
    "save_task",
    "purge_task",
]
