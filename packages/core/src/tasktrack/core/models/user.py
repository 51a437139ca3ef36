"""User Domain Model -- 仅供指派人 / 评论作者解析读取"""

from datetime import datetime

from pydantic import Field

from .base import ApiModel


class User(ApiModel):
    """已注册用户"""

    user_id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="显示名称")
    email: str = Field(description="邮箱（精确匹配键）")
    created_at: datetime = Field(description="注册时间")
