"""SQLite 数据库初始化

PRAGMA 配置 + casefold 函数 + tasks / users 两张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# 搜索使用的 Unicode 大小写折叠（SQLite 内置 lower() 仅处理 ASCII）
CASEFOLD_FUNCTION = "casefold"


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


# tasks 表 DDL（assigned_to / attachments / comments 以 JSON 数组存储）
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    task_id      TEXT PRIMARY KEY,
    owner_id     TEXT NOT NULL,
    title        TEXT NOT NULL,
    description  TEXT,
    status       TEXT NOT NULL DEFAULT 'pending'
                 CHECK (status IN ('pending', 'in-progress', 'completed')),
    priority     TEXT NOT NULL DEFAULT 'medium'
                 CHECK (priority IN ('low', 'medium', 'high')),
    due_date     TEXT NOT NULL,
    assigned_to  TEXT NOT NULL DEFAULT '[]',
    attachments  TEXT NOT NULL DEFAULT '[]',
    comments     TEXT NOT NULL DEFAULT '[]',
    is_deleted   INTEGER NOT NULL DEFAULT 0,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL
);
"""

_TASKS_INDEXES = [
    # 列表与统计均按 owner + 未删除限定范围
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner ON tasks(owner_id, is_deleted);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner_created ON tasks(owner_id, created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner_status ON tasks(owner_id, status);",
]

# users 表 DDL
_USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    user_id     TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    email       TEXT NOT NULL,
    created_at  TEXT NOT NULL
);
"""

_USERS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 注册连接级 SQL 函数
    await conn.create_function(CASEFOLD_FUNCTION, 1, _casefold, deterministic=True)

    # 创建表
    await conn.execute(_TASKS_DDL)
    await conn.execute(_USERS_DDL)

    # 创建索引
    for idx_sql in _TASKS_INDEXES + _USERS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()
