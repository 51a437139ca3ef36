"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 附件存储初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from tasktrack.core.config import get_db_path, get_uploads_base_url, get_uploads_dir
from tasktrack.core.store import create_attachment_store, create_store_group

from .errors import register_exception_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 Store，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group

    app.state.attachment_store = create_attachment_store(
        get_uploads_dir(), get_uploads_base_url()
    )
    log.info(
        "stores_initialized",
        db_path=db_path,
        uploads_dir=str(app.state.attachment_store.uploads_dir),
    )

    yield

    # 关闭：清理数据库连接
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskTrack Gateway",
        version="0.1.0",
        description="任务管理 REST API：任务 CRUD、附件、统计面板",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    # 初始化日志
    setup_logging()
    setup_logfire()

    # 注册路由
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    # 附件静态访问（目录在 lifespan 中创建）
    app.mount(
        get_uploads_base_url(),
        StaticFiles(directory=str(get_uploads_dir()), check_dir=False),
        name="uploads",
    )

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
