"""列表查询与分页结果模型"""

from pydantic import Field

from ..config import DEFAULT_PAGE_LIMIT
from .base import ApiModel
from .task import Task


class TaskQuery(ApiModel):
    """任务列表查询参数

    status / priority 为 None 或 "all" 时不筛选。
    sort_direction 为 "asc" 时升序，其余一律降序。
    """

    page: int = Field(default=1, description="页码，从 1 开始")
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, description="每页条数")
    search: str | None = Field(default=None, description="标题/描述模糊搜索")
    status: str | None = Field(default=None, description="状态筛选")
    priority: str | None = Field(default=None, description="优先级筛选")
    sort_field: str = Field(default="createdAt", description="排序字段")
    sort_direction: str = Field(default="desc", description="排序方向")


class TaskPage(ApiModel):
    """分页结果 -- total_count 为分页前的筛选总数"""

    items: list[Task] = Field(default_factory=list, description="当前页任务")
    total_count: int = Field(description="筛选后总数")
    total_pages: int = Field(description="总页数")
    current_page: int = Field(description="当前页码")
    limit: int = Field(description="每页条数")
