"""AttachmentReconciler -- 计算更新后的附件集合

结果 = 新上传附件 + 客户端声明保留的附件，各自保持原顺序。
保留列表视为已排除 removed_filenames，这里不再二次过滤；
同名文件同时出现在两组时两条都保留。
"""

from collections.abc import Iterable, Sequence

import structlog

from .models.task import Attachment

log = structlog.get_logger()


def reconcile_attachments(
    newly_uploaded: Sequence[Attachment],
    kept: Sequence[Attachment],
    removed_filenames: Iterable[str] = (),
) -> list[Attachment]:
    """合并新上传与保留的附件

    Args:
        newly_uploaded: 已上传到 AttachmentStore 的新附件
        kept: 客户端声明保留的现有附件
        removed_filenames: 客户端声明移除的文件名（仅记录）

    Returns:
        最终附件列表
    """
    removed = list(removed_filenames)
    if removed:
        log.debug(
            "attachments_removed_by_client",
            removed=removed,
            kept_count=len(kept),
        )
    return [*newly_uploaded, *kept]


def drop_removed(
    attachments: Sequence[Attachment],
    removed_filenames: Iterable[str],
) -> list[Attachment]:
    """从现有附件中去掉指定文件名（客户端未声明保留列表时使用）"""
    removed = set(removed_filenames)
    return [a for a in attachments if a.filename not in removed]
