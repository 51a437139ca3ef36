"""TaskTrack Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .analytics import AnalyticsSnapshot, ChartBucket, DashboardStats, WeeklyBucket
from .base import ApiModel, ensure_utc, format_ts, utcnow
from .enums import (
    FILTER_ALL,
    PRIORITY_LABELS,
    PRIORITY_VALUES,
    STATUS_LABELS,
    STATUS_VALUES,
    WEEKDAY_LABELS,
    SortDirection,
    TaskPriority,
    TaskStatus,
)
from .inputs import TaskCreate, TaskUpdate, UploadedFile
from .query import TaskPage, TaskQuery
from .task import Assignee, Attachment, Comment, Task
from .user import User

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "SortDirection",
    "FILTER_ALL",
    "STATUS_VALUES",
    "PRIORITY_VALUES",
    "STATUS_LABELS",
    "PRIORITY_LABELS",
    "WEEKDAY_LABELS",
    # 基类与时间工具
    "ApiModel",
    "utcnow",
    "ensure_utc",
    "format_ts",
    # Task
    "Task",
    "Assignee",
    "Attachment",
    "Comment",
    # User
    "User",
    # 入站数据
    "TaskCreate",
    "TaskUpdate",
    "UploadedFile",
    # 查询
    "TaskQuery",
    "TaskPage",
    # 统计
    "AnalyticsSnapshot",
    "ChartBucket",
    "WeeklyBucket",
    "DashboardStats",
]
