"""AssigneeResolver 单元测试

测试内容：
1. 已注册邮箱解析为 {user_id, email}
2. 未知邮箱丢弃并记录 warning
3. 输出使用用户表中存储的 email
4. 不去重
5. assignedTo 表单字段解析
"""

from structlog.testing import capture_logs
from tasktrack.core.assignee import AssigneeResolver, parse_assignee_field


class TestAssigneeResolver:
    """邮箱解析"""

    async def test_known_and_unknown_emails(self, store_group, seed_users):
        await seed_users(("u1", "known@x.com"))
        resolver = AssigneeResolver(store_group.user_store)

        with capture_logs() as logs:
            resolved = await resolver.resolve(["known@x.com", "nobody@x.com"])

        assert [(a.user_id, a.email) for a in resolved] == [("u1", "known@x.com")]
        warnings = [e for e in logs if e["event"] == "assignee_not_found"]
        assert len(warnings) == 1
        assert warnings[0]["email"] == "nobody@x.com"
        assert warnings[0]["log_level"] == "warning"

    async def test_empty_input(self, store_group):
        resolver = AssigneeResolver(store_group.user_store)
        assert await resolver.resolve([]) == []

    async def test_input_is_stripped_and_blanks_skipped(self, store_group, seed_users):
        await seed_users(("u1", "known@x.com"))
        resolver = AssigneeResolver(store_group.user_store)

        resolved = await resolver.resolve(["  known@x.com ", "", "   "])
        assert [a.email for a in resolved] == ["known@x.com"]

    async def test_duplicates_resolved_twice(self, store_group, seed_users):
        await seed_users(("u1", "known@x.com"))
        resolver = AssigneeResolver(store_group.user_store)

        resolved = await resolver.resolve(["known@x.com", "known@x.com"])
        assert [a.user_id for a in resolved] == ["u1", "u1"]

    async def test_preserves_input_order(self, store_group, seed_users):
        await seed_users(("u1", "a@x.com"), ("u2", "b@x.com"))
        resolver = AssigneeResolver(store_group.user_store)

        resolved = await resolver.resolve(["b@x.com", "a@x.com"])
        assert [a.user_id for a in resolved] == ["u2", "u1"]


class TestParseAssigneeField:
    """assignedTo 表单字段"""

    def test_none(self):
        assert parse_assignee_field(None) == []

    def test_comma_separated_string(self):
        assert parse_assignee_field("a@x.com, b@x.com") == ["a@x.com", "b@x.com"]

    def test_multi_value_list(self):
        assert parse_assignee_field(["a@x.com", "b@x.com,c@x.com"]) == [
            "a@x.com",
            "b@x.com",
            "c@x.com",
        ]

    def test_blank_parts_dropped(self):
        assert parse_assignee_field(" , a@x.com,, ") == ["a@x.com"]
