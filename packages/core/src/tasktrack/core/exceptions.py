"""TaskTrack 异常体系

NotFoundError / ValidationFailure 可由调用方修正后重试；
UpstreamStorageFailure 中止整个 create/update，不落盘任何部分结果；
其余异常视为 Unexpected，由 gateway 记录日志并返回通用错误。
"""


class TaskTrackError(Exception):
    """TaskTrack 基础异常"""

    code: str = "TASKTRACK_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(TaskTrackError):
    """任务不存在，或属于其他 owner"""

    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class ValidationFailure(TaskTrackError):
    """输入格式错误（字段级错误信息列表）"""

    code = "VALIDATION_FAILED"

    def __init__(self, errors: list[str]) -> None:
        """
        Args:
            errors: 字段级错误信息，至少一条
        """
        super().__init__("; ".join(errors) or "Invalid input")
        self.errors = list(errors)


class UpstreamStorageFailure(TaskTrackError):
    """附件上传失败

    不重试，立即中止当前 create/update。
    """

    code = "UPSTREAM_STORAGE_FAILURE"

    def __init__(self, filename: str, original_error: Exception) -> None:
        """
        Args:
            filename: 上传失败的原始文件名
            original_error: 原始异常
        """
        super().__init__(f"Failed to upload attachment {filename!r}")
        self.filename = filename
        self.original_error = original_error
