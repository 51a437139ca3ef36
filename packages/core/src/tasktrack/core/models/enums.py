"""枚举定义

包含 TaskStatus、TaskPriority、SortDirection 枚举，
以及统计面板使用的固定展示标签。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态

    pending -> in-progress -> completed 仅为推荐流程，
    普通更新可直接设置任意状态；只有 mark complete 是受控流转。
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SortDirection(StrEnum):
    """排序方向"""

    ASC = "asc"
    DESC = "desc"


# 合法取值集合（用于校验外部输入）
STATUS_VALUES: frozenset[str] = frozenset(s.value for s in TaskStatus)
PRIORITY_VALUES: frozenset[str] = frozenset(p.value for p in TaskPriority)

# 列表筛选中的"全部"哨兵值
FILTER_ALL = "all"

STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}

PRIORITY_LABELS: dict[TaskPriority, str] = {
    TaskPriority.LOW: "Low",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.HIGH: "High",
}

# 周日开头，与 weekly 统计输出顺序一致
WEEKDAY_LABELS: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
