"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、附件目录、上传限制、分页与统计窗口等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKTRACK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKTRACK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "tasktrack.db"),
    )


def get_uploads_dir() -> Path:
    """获取附件文件存储目录"""
    return Path(
        os.environ.get(
            "TASKTRACK_UPLOADS_DIR",
            str(_get_base_dir() / "uploads"),
        )
    )


def get_uploads_base_url() -> str:
    """获取附件访问 URL 前缀（由 gateway 以静态目录挂载）"""
    return os.environ.get("TASKTRACK_UPLOADS_BASE_URL", "/uploads").rstrip("/")


# 单个附件最大字节数（10 MiB）
UPLOAD_MAX_BYTES: int = int(
    os.environ.get("TASKTRACK_UPLOAD_MAX_BYTES", str(10 * 1024 * 1024))
)

# 允许上传的 MIME 类型
ALLOWED_UPLOAD_MIME_TYPES: frozenset[str] = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/jpg",
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)

# 任务列表默认分页大小
DEFAULT_PAGE_LIMIT: int = int(os.environ.get("TASKTRACK_DEFAULT_PAGE_LIMIT", "9"))

# 单页最大条数
MAX_PAGE_LIMIT: int = 100

# 周活跃统计窗口（天）
ANALYTICS_WINDOW_DAYS: int = int(
    os.environ.get("TASKTRACK_ANALYTICS_WINDOW_DAYS", "7")
)

# 附件存储目录提示（AttachmentStore folder 参数）
ATTACHMENT_FOLDER: str = "tasks"
