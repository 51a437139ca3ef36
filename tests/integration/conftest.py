"""集成测试共享 fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tasktrack.core.store import create_attachment_store, create_store_group


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """集成测试用 FastAPI app"""
    os.environ["TASKTRACK_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["TASKTRACK_UPLOADS_DIR"] = str(tmp_path / "uploads")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from tasktrack.gateway.main import create_app

    app = create_app()

    store_group = await create_store_group(str(tmp_path / "test.db"))
    app.state.store_group = store_group
    app.state.attachment_store = create_attachment_store(tmp_path / "uploads", "/uploads")

    yield app

    await app.state.store_group.conn.close()
    os.environ.pop("TASKTRACK_DB_PATH", None)
    os.environ.pop("TASKTRACK_UPLOADS_DIR", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
        headers={"X-Owner-Id": "owner-1"},
    ) as ac:
        yield ac
