"""Domain Model 单元测试

测试内容：
1. Task 默认值（pending / medium / 空列表）
2. 对外 JSON 使用 camelCase，task_id 输出为 id
3. 时间统一为 UTC
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError
from tasktrack.core.models import (
    Assignee,
    Attachment,
    Comment,
    TaskPriority,
    TaskStatus,
)


class TestTaskModel:
    """Task 模型"""

    def test_defaults(self, make_task):
        task = make_task()
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.assigned_to == []
        assert task.attachments == []
        assert task.comments == []
        assert task.is_deleted is False

    def test_invalid_status_rejected(self, make_task):
        with pytest.raises(ValidationError):
            make_task(status="done")

    def test_invalid_priority_rejected(self, make_task):
        with pytest.raises(ValidationError):
            make_task(priority="urgent")

    def test_json_dump_uses_camel_case_and_id(self, make_task):
        task = make_task(
            assigned_to=[Assignee(user_id="u1", email="a@x.com")],
            attachments=[Attachment(filename="a.pdf", url="/uploads/tasks/a.pdf")],
        )
        data = task.model_dump(mode="json", by_alias=True)

        assert data["id"] == task.task_id
        assert "taskId" not in data
        assert data["ownerId"] == "owner-1"
        assert data["isDeleted"] is False
        assert data["status"] == "pending"
        assert "dueDate" in data
        assert "createdAt" in data and "updatedAt" in data
        assert data["assignedTo"] == [{"userId": "u1", "email": "a@x.com"}]
        assert data["attachments"] == [{"filename": "a.pdf", "url": "/uploads/tasks/a.pdf"}]

    def test_naive_datetime_treated_as_utc(self, make_task):
        naive = datetime(2026, 1, 2, 3, 4, 5)
        task = make_task(due_date=naive, created_at=naive, updated_at=naive)
        assert task.due_date.tzinfo is not None
        assert task.due_date == naive.replace(tzinfo=UTC)

    def test_aware_datetime_converted_to_utc(self, make_task):
        plus8 = timezone(timedelta(hours=8))
        created = datetime(2026, 1, 2, 8, 0, tzinfo=plus8)
        task = make_task(created_at=created, updated_at=created)
        assert task.created_at.utcoffset() == timedelta(0)
        assert task.created_at.hour == 0


class TestNestedModels:
    """Assignee / Attachment / Comment"""

    def test_assignee_user_id_optional(self):
        assignee = Assignee(email="a@x.com")
        assert assignee.user_id is None

    def test_comment_created_at_defaults_to_now(self):
        before = datetime.now(UTC)
        comment = Comment(email="a@x.com", text="hello")
        assert comment.created_at >= before

    def test_nested_models_accept_snake_and_camel_names(self):
        assert Assignee(userId="u1", email="a@x.com").user_id == "u1"
        assert Assignee(user_id="u1", email="a@x.com").user_id == "u1"
