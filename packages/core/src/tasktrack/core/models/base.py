"""模型基类与时间工具

对外 JSON 统一使用 camelCase 字段名，Python 侧保持 snake_case。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """camelCase 序列化基类（按字段名或别名均可构造）"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """naive datetime 视为 UTC；aware datetime 转换到 UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_ts(value: datetime) -> str:
    """固定精度的 ISO 格式，保证 SQLite 中按字符串排序与时间顺序一致"""
    return ensure_utc(value).isoformat(timespec="microseconds")
