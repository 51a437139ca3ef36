"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient + TaskService fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tasktrack.core.store import create_attachment_store, create_store_group

OWNER_HEADERS = {"X-Owner-Id": "owner-1"}

_ENV_KEYS = ["TASKTRACK_DB_PATH", "TASKTRACK_UPLOADS_DIR", "LOGFIRE_SEND_TO_LOGFIRE"]


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return dict(OWNER_HEADERS)


@pytest_asyncio.fixture
async def test_app(tmp_path: Path):
    """创建测试用 FastAPI app（手动初始化 app.state，绕过 lifespan）"""
    os.environ["TASKTRACK_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["TASKTRACK_UPLOADS_DIR"] = str(tmp_path / "uploads")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from tasktrack.gateway.main import create_app

    app = create_app()

    store_group = await create_store_group(str(tmp_path / "test.db"))
    app.state.store_group = store_group
    app.state.attachment_store = create_attachment_store(tmp_path / "uploads", "/uploads")

    yield app

    await store_group.conn.close()
    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def task_service(store_group, tmp_uploads_dir: Path):
    """基于本地附件存储的 TaskService"""
    from tasktrack.gateway.services.task_service import TaskService

    return TaskService(store_group, create_attachment_store(tmp_uploads_dir, "/uploads"))
