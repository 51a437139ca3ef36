"""AnalyticsAggregator -- 仪表盘计数与统计快照

统计范围始终为单个 owner 的未删除任务：
- status / priority 分布：全部任务，固定三档标签（0 也输出）
- weekly：近 N 天（默认 7）内创建的任务，按创建时间的星期几（UTC）聚合；
  不同日期的同一星期几合并到同一档
- completion_rate：completed / total 百分比，四舍五入到整数，total=0 时为 0
- avg_completion_time：completed 任务 (updated_at - created_at) 的平均天数，
  一位小数；以最后一次更新近似完成时间
"""

import math
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

import structlog

from .config import ANALYTICS_WINDOW_DAYS
from .models.analytics import AnalyticsSnapshot, ChartBucket, DashboardStats, WeeklyBucket
from .models.base import ensure_utc, utcnow
from .models.enums import (
    PRIORITY_LABELS,
    STATUS_LABELS,
    WEEKDAY_LABELS,
    TaskStatus,
)
from .models.task import Task
from .store.protocols import TaskStore

log = structlog.get_logger()

_SECONDS_PER_DAY = 86400


def round_half_up(value: float, digits: int = 0) -> float:
    """四舍五入（0.5 进位，与前端展示一致）"""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def weekday_label(moment: datetime) -> str:
    """datetime -> Sun..Sat（weekday() 周一为 0，这里周日为 0）"""
    return WEEKDAY_LABELS[(ensure_utc(moment).weekday() + 1) % 7]


def build_weekly_data(tasks: Iterable[Task]) -> list[WeeklyBucket]:
    """按创建时间的星期几聚合，固定输出 Sun..Sat 七项"""
    buckets = {day: WeeklyBucket(day=day) for day in WEEKDAY_LABELS}
    for task in tasks:
        bucket = buckets[weekday_label(task.created_at)]
        bucket.created += 1
        if task.status == TaskStatus.COMPLETED:
            bucket.completed += 1
    return [buckets[day] for day in WEEKDAY_LABELS]


def completion_rate(completed: int, total: int) -> int:
    if total == 0:
        return 0
    return int(round_half_up(100 * completed / total))


def average_completion_days(tasks: Iterable[Task]) -> float:
    """completed 任务平均耗时（天，一位小数），无完成任务时为 0"""
    durations = [
        (task.updated_at - task.created_at).total_seconds() / _SECONDS_PER_DAY
        for task in tasks
    ]
    if not durations:
        return 0
    return round_half_up(sum(durations) / len(durations), 1)


class AnalyticsAggregator:
    """统计聚合器"""

    def __init__(
        self,
        task_store: TaskStore,
        now: Callable[[], datetime] = utcnow,
        window_days: int = ANALYTICS_WINDOW_DAYS,
    ) -> None:
        self._task_store = task_store
        self._now = now
        self._window = timedelta(days=window_days)

    async def dashboard_stats(self, owner_id: str) -> DashboardStats:
        """仪表盘计数：total / pending / in_progress / completed"""
        by_status = await self._task_store.count_by(owner_id, "status")
        return DashboardStats(
            total=sum(by_status.values()),
            pending=by_status.get(TaskStatus.PENDING.value, 0),
            in_progress=by_status.get(TaskStatus.IN_PROGRESS.value, 0),
            completed=by_status.get(TaskStatus.COMPLETED.value, 0),
        )

    async def compute(self, owner_id: str) -> AnalyticsSnapshot:
        """计算统计快照

        Args:
            owner_id: 所属用户

        Returns:
            AnalyticsSnapshot
        """
        by_status = await self._task_store.count_by(owner_id, "status")
        by_priority = await self._task_store.count_by(owner_id, "priority")

        since = self._now() - self._window
        recent = await self._task_store.list_created_since(owner_id, since)
        weekly_data = build_weekly_data(recent)

        completed_tasks = await self._task_store.list_with_status(
            owner_id, TaskStatus.COMPLETED
        )

        total = sum(by_status.values())
        completed = by_status.get(TaskStatus.COMPLETED.value, 0)

        snapshot = AnalyticsSnapshot(
            status_data=[
                ChartBucket(name=label, value=by_status.get(status.value, 0))
                for status, label in STATUS_LABELS.items()
            ],
            priority_data=[
                ChartBucket(name=label, value=by_priority.get(priority.value, 0))
                for priority, label in PRIORITY_LABELS.items()
            ],
            weekly_data=weekly_data,
            completion_rate=completion_rate(completed, total),
            tasks_this_week=sum(bucket.created for bucket in weekly_data),
            avg_completion_time=average_completion_days(completed_tasks),
        )
        log.debug(
            "analytics_computed",
            owner_id=owner_id,
            total=total,
            tasks_this_week=snapshot.tasks_this_week,
        )
        return snapshot

