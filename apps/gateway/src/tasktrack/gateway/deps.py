"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store / Service 实例

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
认证不在本服务范围内：上游认证层以 X-Owner-Id 头传入不透明的 owner 标识。
"""

from fastapi import Depends, Header, HTTPException, Request
from tasktrack.core.store import StoreGroup

from .services.task_service import TaskService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_attachment_store(request: Request):
    """从 app.state 获取 AttachmentStore 实例"""
    return request.app.state.attachment_store


def get_task_service(
    store_group: StoreGroup = Depends(get_store_group),
    attachment_store=Depends(get_attachment_store),
) -> TaskService:
    return TaskService(store_group, attachment_store)


def get_owner_id(x_owner_id: str | None = Header(default=None)) -> str:
    """读取已认证的 owner 标识，缺失时返回 401"""
    if not x_owner_id or not x_owner_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_owner_id.strip()
