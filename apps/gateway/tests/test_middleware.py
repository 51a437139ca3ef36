"""可观测性与错误处理测试

测试内容：
1. HTTP 请求含 X-Request-ID 响应头（ULID）
2. trace_id 从路径中的 task_id 提取
3. 日志中的邮箱字段被遮蔽
4. 未知异常返回通用 500 响应，不泄露内部信息
"""

import json

from httpx import AsyncClient
from tasktrack.gateway.errors import handle_unexpected_error
from tasktrack.gateway.middleware.logging_config import mask_email, redact_emails
from tasktrack.gateway.middleware.trace_mw import extract_task_id


class TestObservability:
    """请求级日志"""

    async def test_request_id_in_response_header(self, client: AsyncClient, owner_headers):
        resp = await client.get("/api/tasks", headers=owner_headers)
        assert resp.status_code == 200
        # ULID 格式：26 字符
        assert len(resp.headers["x-request-id"]) == 26

    async def test_request_ids_are_unique(self, client: AsyncClient):
        ids = set()
        for _ in range(3):
            resp = await client.get("/health")
            ids.add(resp.headers["x-request-id"])
        assert len(ids) == 3


class TestExtractTaskId:
    """trace_id 路径解析"""

    def test_task_path(self):
        task_id = "01J0000000000000000000000A"
        assert extract_task_id(f"/api/tasks/{task_id}") == task_id
        assert extract_task_id(f"/api/tasks/{task_id}/complete") == task_id

    def test_non_task_paths(self):
        assert extract_task_id("/api/tasks") is None
        assert extract_task_id("/api/tasks/dashboard/stats") is None
        assert extract_task_id("/health") is None


class TestEmailRedaction:
    """日志邮箱遮蔽"""

    def test_mask_email(self):
        assert mask_email("ann.lee@example.com") == "a***@example.com"
        assert mask_email("not-an-email") == "not-an-email"
        assert mask_email("@example.com") == "@example.com"

    def test_processor_masks_known_keys_only(self):
        event = {
            "event": "assignee_not_found",
            "email": "ann@x.com",
            "emails": ["bob@x.com", None],
            "path": "/api/tasks/ann@x.com",
        }
        result = redact_emails(None, "warning", event)
        assert result["email"] == "a***@x.com"
        assert result["emails"] == ["b***@x.com", None]
        assert result["path"] == "/api/tasks/ann@x.com"


class TestUnexpectedError:
    """未知异常 -> 500"""

    async def test_generic_body(self):
        resp = await handle_unexpected_error(None, RuntimeError("db password is hunter2"))

        assert resp.status_code == 500
        body = json.loads(resp.body)
        assert body["success"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "hunter2" not in resp.body.decode()
