"""健康检查路由

GET /health: Liveness，永远返回 200。
GET /ready:  Readiness，任一检查失败返回 503。
"""

import os
import shutil

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse
from tasktrack.core.config import UPLOAD_MAX_BYTES

log = structlog.get_logger()

router = APIRouter()

_REQUIRED_TABLES = ("tasks", "users")

# 剩余空间不足以容纳一个最大附件时视为未就绪
MIN_FREE_DISK_MB = UPLOAD_MAX_BYTES // (1024 * 1024)


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


async def _check_sqlite(request: Request) -> str:
    conn = request.app.state.store_group.conn
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name IN (?, ?)",
        _REQUIRED_TABLES,
    )
    found = {row[0] for row in await cursor.fetchall()}
    missing = [name for name in _REQUIRED_TABLES if name not in found]
    if missing:
        return f"error: missing tables {', '.join(missing)}"
    return "ok"


def _check_uploads_dir(request: Request) -> str:
    uploads_dir = request.app.state.attachment_store.uploads_dir
    if not uploads_dir.is_dir():
        return "error: directory does not exist"
    if not os.access(uploads_dir, os.W_OK):
        return "error: directory is not writable"
    return "ok"


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查

    1. sqlite: 连接可用且 tasks / users 表存在
    2. uploads_dir: 附件目录存在且可写
    3. disk_space_mb: 附件目录所在磁盘剩余空间
    """
    checks: dict = {}

    try:
        checks["sqlite"] = await _check_sqlite(request)
    except Exception as e:
        log.warning("readiness_sqlite_failed", error_type=type(e).__name__)
        checks["sqlite"] = f"error: {type(e).__name__}"

    try:
        checks["uploads_dir"] = _check_uploads_dir(request)
    except OSError as e:
        checks["uploads_dir"] = f"error: {type(e).__name__}"

    disk_ok = True
    try:
        uploads_dir = request.app.state.attachment_store.uploads_dir
        probe = uploads_dir if uploads_dir.exists() else uploads_dir.anchor or "/"
        checks["disk_space_mb"] = shutil.disk_usage(probe).free // (1024 * 1024)
        disk_ok = checks["disk_space_mb"] >= MIN_FREE_DISK_MB
    except OSError:
        checks["disk_space_mb"] = 0
        disk_ok = False

    all_ok = disk_ok and checks["sqlite"] == "ok" and checks["uploads_dir"] == "ok"
    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={"status": "ready" if all_ok else "not_ready", "checks": checks},
    )
