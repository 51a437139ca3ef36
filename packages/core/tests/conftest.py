"""packages/core 测试配置 -- 核心层 fixture"""

from datetime import UTC, datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    """固定的"当前时间"：2026-10-19 12:00 UTC（周一）"""
    return datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
