"""AssigneeResolver -- 邮箱列表解析为已注册用户

解析规则：
1. 逐个邮箱精确匹配用户表，按输入顺序输出 {user_id, email}
2. email 使用用户表中存储的值
3. 未匹配的邮箱丢弃并记录 warning，不影响整体操作
4. 不去重：同一邮箱出现两次则解析两次
"""

from collections.abc import Iterable

import structlog

from .models.task import Assignee
from .store.protocols import UserStore

log = structlog.get_logger()


def parse_assignee_field(value: str | Iterable[str] | None) -> list[str]:
    """将表单中的 assignedTo 统一为邮箱列表

    multipart 表单可能传单个逗号分隔字符串，也可能传多值字段。
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    emails: list[str] = []
    for item in value:
        emails.extend(part.strip() for part in item.split(","))
    return [email for email in emails if email]


class AssigneeResolver:
    """指派人解析器"""

    def __init__(self, user_store: UserStore) -> None:
        self._user_store = user_store

    async def resolve(self, emails: Iterable[str]) -> list[Assignee]:
        """解析邮箱列表

        Args:
            emails: 客户端输入的邮箱（保持顺序）

        Returns:
            已解析的指派人列表，未知邮箱被丢弃
        """
        resolved: list[Assignee] = []
        for raw in emails:
            email = raw.strip()
            if not email:
                continue
            user = await self._user_store.find_by_email(email)
            if user is None:
                log.warning("assignee_not_found", email=email)
                continue
            resolved.append(Assignee(user_id=user.user_id, email=user.email))
        return resolved
