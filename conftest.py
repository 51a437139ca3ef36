"""全局 pytest 配置 -- 临时 SQLite 数据库 / 附件目录 fixture + 数据构造工具"""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from ulid import ULID


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def tmp_uploads_dir(tmp_path: Path) -> Path:
    """提供临时附件目录"""
    uploads_dir = tmp_path / "uploads"
    uploads_dir.mkdir(parents=True, exist_ok=True)
    return uploads_dir


@pytest_asyncio.fixture
async def db_conn(tmp_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from tasktrack.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path):
    """提供共享连接的 StoreGroup"""
    from tasktrack.core.store import create_store_group

    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.conn.close()


@pytest.fixture
def make_task() -> Callable:
    """构造 Task（默认 owner-1 / pending / 明天截止），关键字参数覆盖任意字段"""
    from tasktrack.core.models import Task

    def _make(**overrides):
        now = datetime.now(UTC)
        data = {
            "task_id": str(ULID()),
            "owner_id": "owner-1",
            "title": "Write report",
            "description": None,
            "due_date": now + timedelta(days=1),
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return Task(**data)

    return _make


@pytest_asyncio.fixture
async def seed_tasks(store_group) -> Callable:
    """批量写入任务并提交，返回写入的 Task 列表"""

    async def _seed(*tasks):
        for task in tasks:
            await store_group.task_store.create_task(task)
        await store_group.conn.commit()
        return list(tasks)

    return _seed


@pytest_asyncio.fixture
async def seed_users(store_group) -> Callable:
    """写入用户：参数为 (user_id, email) 元组"""
    from tasktrack.core.models import User

    async def _seed(*pairs):
        for user_id, email in pairs:
            await store_group.user_store.create_user(
                User(
                    user_id=user_id,
                    name=user_id,
                    email=email,
                    created_at=datetime.now(UTC),
                )
            )
        await store_group.conn.commit()

    return _seed
