"""UserStore SQLite 实现 -- 供指派人 / 评论作者解析"""

from datetime import datetime

import aiosqlite

from ..models.base import format_ts
from ..models.user import User


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_user(self, user: User) -> None:
        """创建用户记录（注册流程在本系统之外，此处用于初始化数据）"""
        await self._conn.execute(
            "INSERT INTO users (user_id, name, email, created_at) VALUES (?, ?, ?, ?)",
            (user.user_id, user.name, user.email, format_ts(user.created_at)),
        )

    async def get_user(self, user_id: str) -> User | None:
        """根据 user_id 查询用户"""
        cursor = await self._conn.execute(
            "SELECT user_id, name, email, created_at FROM users WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def find_by_email(self, email: str) -> User | None:
        """按邮箱精确匹配查询用户（多条时取最早注册的一条）"""
        cursor = await self._conn.execute(
            "SELECT user_id, name, email, created_at FROM users WHERE email = ? "
            "ORDER BY created_at ASC LIMIT 1",
            (email,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        return User(
            user_id=row[0],
            name=row[1],
            email=row[2],
            created_at=datetime.fromisoformat(row[3]),
        )
