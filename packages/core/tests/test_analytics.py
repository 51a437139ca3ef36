"""AnalyticsAggregator 单元测试

fixed_now = 2026-10-19 12:00 UTC（周一），统计窗口起点 2026-10-12 12:00 UTC。
"""

from datetime import UTC, datetime, timedelta

from tasktrack.core.analytics import (
    AnalyticsAggregator,
    average_completion_days,
    completion_rate,
    round_half_up,
    weekday_label,
)
from tasktrack.core.models import TaskPriority, TaskStatus


def _at(day: int, hour: int) -> datetime:
    return datetime(2026, 10, day, hour, 0, tzinfo=UTC)


class TestHelpers:
    """纯函数"""

    def test_weekday_label(self):
        assert weekday_label(_at(18, 12)) == "Sun"
        assert weekday_label(_at(19, 12)) == "Mon"
        assert weekday_label(_at(24, 12)) == "Sat"

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.25, 1) == 0.3
        assert round_half_up(1.24, 1) == 1.2

    def test_completion_rate(self):
        assert completion_rate(0, 0) == 0
        assert completion_rate(1, 4) == 25
        assert completion_rate(1, 3) == 33
        assert completion_rate(2, 3) == 67

    def test_average_completion_days_empty(self):
        assert average_completion_days([]) == 0


class TestAnalyticsAggregator:
    """统计快照"""

    async def test_no_tasks(self, store_group, fixed_now):
        aggregator = AnalyticsAggregator(store_group.task_store, now=lambda: fixed_now)

        snapshot = await aggregator.compute("owner-1")

        assert [b.value for b in snapshot.status_data] == [0, 0, 0]
        assert [b.value for b in snapshot.priority_data] == [0, 0, 0]
        assert [b.day for b in snapshot.weekly_data] == [
            "Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat",
        ]
        assert all(b.created == 0 and b.completed == 0 for b in snapshot.weekly_data)
        assert snapshot.completion_rate == 0
        assert snapshot.tasks_this_week == 0
        assert snapshot.avg_completion_time == 0

    async def test_status_priority_and_rate(self, store_group, seed_tasks, make_task, fixed_now):
        await seed_tasks(
            make_task(status=TaskStatus.PENDING, priority=TaskPriority.HIGH),
            make_task(status=TaskStatus.PENDING, priority=TaskPriority.LOW),
            make_task(status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH),
            make_task(status=TaskStatus.COMPLETED, priority=TaskPriority.MEDIUM),
        )
        aggregator = AnalyticsAggregator(store_group.task_store, now=lambda: fixed_now)

        snapshot = await aggregator.compute("owner-1")

        assert [(b.name, b.value) for b in snapshot.status_data] == [
            ("Pending", 2),
            ("In Progress", 1),
            ("Completed", 1),
        ]
        assert [(b.name, b.value) for b in snapshot.priority_data] == [
            ("Low", 1),
            ("Medium", 1),
            ("High", 2),
        ]
        assert snapshot.completion_rate == 25

    async def test_weekly_buckets_merge_same_weekday(
        self, store_group, seed_tasks, make_task, fixed_now
    ):
        await seed_tasks(
            # 上周一 13:00：窗口内
            make_task(created_at=_at(12, 13), updated_at=_at(12, 13)),
            # 本周一 09:00：窗口内，已完成
            make_task(
                status=TaskStatus.COMPLETED,
                created_at=_at(19, 9),
                updated_at=_at(19, 10),
            ),
            # 上周一 11:00：窗口外
            make_task(created_at=_at(12, 11), updated_at=_at(12, 11)),
            # 周四
            make_task(created_at=_at(15, 8), updated_at=_at(15, 8)),
        )
        aggregator = AnalyticsAggregator(store_group.task_store, now=lambda: fixed_now)

        snapshot = await aggregator.compute("owner-1")
        weekly = {b.day: (b.created, b.completed) for b in snapshot.weekly_data}

        assert weekly["Mon"] == (2, 1)
        assert weekly["Thu"] == (1, 0)
        assert weekly["Sun"] == (0, 0)
        assert snapshot.tasks_this_week == 3

    async def test_average_completion_time(self, store_group, seed_tasks, make_task, fixed_now):
        start = fixed_now - timedelta(days=10)
        await seed_tasks(
            make_task(
                status=TaskStatus.COMPLETED,
                created_at=start,
                updated_at=start + timedelta(days=1),
            ),
            make_task(
                status=TaskStatus.COMPLETED,
                created_at=start,
                updated_at=start + timedelta(days=2),
            ),
            make_task(status=TaskStatus.PENDING, created_at=start, updated_at=start),
        )
        aggregator = AnalyticsAggregator(store_group.task_store, now=lambda: fixed_now)

        snapshot = await aggregator.compute("owner-1")

        assert snapshot.avg_completion_time == 1.5
        # 窗口外创建的任务不计入本周
        assert snapshot.tasks_this_week == 0

    async def test_deleted_and_foreign_tasks_excluded(
        self, store_group, seed_tasks, make_task, fixed_now
    ):
        await seed_tasks(
            make_task(status=TaskStatus.COMPLETED),
            make_task(status=TaskStatus.COMPLETED, is_deleted=True),
            make_task(owner_id="owner-2", status=TaskStatus.PENDING),
        )
        aggregator = AnalyticsAggregator(store_group.task_store, now=lambda: fixed_now)

        snapshot = await aggregator.compute("owner-1")
        assert sum(b.value for b in snapshot.status_data) == 1
        assert snapshot.completion_rate == 100

    async def test_dashboard_stats(self, store_group, seed_tasks, make_task):
        await seed_tasks(
            make_task(status=TaskStatus.PENDING),
            make_task(status=TaskStatus.IN_PROGRESS),
            make_task(status=TaskStatus.IN_PROGRESS),
            make_task(status=TaskStatus.COMPLETED),
            make_task(status=TaskStatus.COMPLETED, is_deleted=True),
        )
        aggregator = AnalyticsAggregator(store_group.task_store)

        stats = await aggregator.dashboard_stats("owner-1")
        assert (stats.total, stats.pending, stats.in_progress, stats.completed) == (4, 1, 2, 1)
