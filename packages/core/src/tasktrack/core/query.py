"""TaskQueryEngine -- 筛选 / 搜索 / 排序 / 分页

将 TaskQuery 翻译为限定在单个 owner 未删除任务上的查询条件，
由 TaskStore.find / count 执行。
"""

import math
from typing import Any

from .config import MAX_PAGE_LIMIT
from .exceptions import ValidationFailure
from .models.enums import FILTER_ALL, PRIORITY_VALUES, STATUS_VALUES, SortDirection
from .models.query import TaskPage, TaskQuery
from .store.protocols import TaskStore
from .store.task_store import ACTIVE_SCOPE

# 对外排序字段 -> 列名（camelCase 与 snake_case 均可）
SORT_COLUMNS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "dueDate": "due_date",
    "title": "title",
    "status": "status",
    "priority": "priority",
    "created_at": "created_at",
    "updated_at": "updated_at",
    "due_date": "due_date",
}


def _is_filter_set(value: str | None) -> bool:
    return bool(value) and value != FILTER_ALL


def build_filter(owner_id: str, query: TaskQuery) -> tuple[str, list[Any]]:
    """构建 WHERE 子句与绑定参数

    Raises:
        ValidationFailure: status / priority 不是合法枚举值
    """
    clauses = [ACTIVE_SCOPE]
    params: list[Any] = [owner_id]
    errors: list[str] = []

    search = (query.search or "").strip()
    if search:
        # instr 避免 LIKE 通配符转义问题；casefold 由 init_db 注册
        clauses.append(
            "(instr(casefold(title), ?) > 0"
            " OR instr(casefold(coalesce(description, '')), ?) > 0)"
        )
        needle = search.casefold()
        params.extend([needle, needle])

    if _is_filter_set(query.status):
        if query.status not in STATUS_VALUES:
            errors.append("Status must be pending, in-progress, or completed.")
        else:
            clauses.append("status = ?")
            params.append(query.status)

    if _is_filter_set(query.priority):
        if query.priority not in PRIORITY_VALUES:
            errors.append("Priority must be low, medium, or high.")
        else:
            clauses.append("priority = ?")
            params.append(query.priority)

    if errors:
        raise ValidationFailure(errors)
    return " AND ".join(clauses), params


def build_sort(query: TaskQuery) -> str:
    """构建 ORDER BY 子句（task_id 为 ULID，作为稳定的次级排序键）"""
    column = SORT_COLUMNS.get(query.sort_field)
    if column is None:
        raise ValidationFailure([f"Cannot sort by {query.sort_field!r}."])
    direction = "ASC" if query.sort_direction.lower() == SortDirection.ASC else "DESC"
    return f"{column} {direction}, task_id {direction}"


def validate_paging(query: TaskQuery) -> None:
    errors: list[str] = []
    if query.page < 1:
        errors.append("Page must be a positive integer.")
    if query.limit < 1 or query.limit > MAX_PAGE_LIMIT:
        errors.append(f"Limit must be between 1 and {MAX_PAGE_LIMIT}.")
    if errors:
        raise ValidationFailure(errors)


class TaskQueryEngine:
    """任务列表查询"""

    def __init__(self, task_store: TaskStore) -> None:
        self._task_store = task_store

    async def list(self, owner_id: str, query: TaskQuery | None = None) -> TaskPage:
        """查询一页任务

        Args:
            owner_id: 所属用户
            query: 查询参数，None 时使用默认值

        Returns:
            TaskPage（total_count 为分页前筛选总数）
        """
        query = query or TaskQuery()
        validate_paging(query)
        where, params = build_filter(owner_id, query)
        order_by = build_sort(query)

        total_count = await self._task_store.count(where, params)
        items = await self._task_store.find(
            where,
            params,
            order_by,
            skip=(query.page - 1) * query.limit,
            limit=query.limit,
        )
        return TaskPage(
            items=items,
            total_count=total_count,
            total_pages=math.ceil(total_count / query.limit),
            current_page=query.page,
            limit=query.limit,
        )
