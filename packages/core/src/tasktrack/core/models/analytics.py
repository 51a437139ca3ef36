"""统计面板模型 -- DashboardStats / AnalyticsSnapshot"""

from pydantic import Field

from .base import ApiModel


class ChartBucket(ApiModel):
    """分布图单项"""

    name: str = Field(description="展示标签")
    value: int = Field(description="任务数")


class WeeklyBucket(ApiModel):
    """周活跃单项（按星期几聚合）"""

    day: str = Field(description="Sun..Sat")
    created: int = Field(default=0, description="窗口内该星期几创建的任务数")
    completed: int = Field(default=0, description="其中已完成的任务数")


class AnalyticsSnapshot(ApiModel):
    """单个 owner 在某一时刻的统计快照"""

    status_data: list[ChartBucket] = Field(description="状态分布")
    priority_data: list[ChartBucket] = Field(description="优先级分布")
    weekly_data: list[WeeklyBucket] = Field(description="近 7 天按星期几的活跃度")
    completion_rate: int = Field(description="完成率（百分比，整数）")
    tasks_this_week: int = Field(description="近 7 天创建的任务数")
    avg_completion_time: float = Field(description="平均完成耗时（天，一位小数）")


class DashboardStats(ApiModel):
    """仪表盘计数"""

    total: int = Field(default=0)
    pending: int = Field(default=0)
    in_progress: int = Field(default=0)
    completed: int = Field(default=0)
