"""TaskService -- 任务生命周期业务逻辑

create / update / soft delete / restore / permanent delete / mark complete，
组合 AssigneeResolver、AttachmentStore（经 reconcile）与 TaskStore。

附件上传：同一请求内多个文件并发上传，全部成功后才写入任务；
任一失败即抛出 UpstreamStorageFailure，不落盘任何部分附件列表，也不重试。
"""

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime

import structlog
from tasktrack.core.analytics import AnalyticsAggregator
from tasktrack.core.assignee import AssigneeResolver
from tasktrack.core.config import ATTACHMENT_FOLDER, UPLOAD_MAX_BYTES
from tasktrack.core.exceptions import NotFoundError, UpstreamStorageFailure, ValidationFailure
from tasktrack.core.models import (
    AnalyticsSnapshot,
    Attachment,
    Comment,
    DashboardStats,
    Task,
    TaskCreate,
    TaskPage,
    TaskPriority,
    TaskQuery,
    TaskStatus,
    TaskUpdate,
    UploadedFile,
    utcnow,
)
from tasktrack.core.query import TaskQueryEngine
from tasktrack.core.reconcile import drop_removed, reconcile_attachments
from tasktrack.core.store import StoreGroup, insert_task, purge_task, save_task
from tasktrack.core.store.protocols import AttachmentStore
from tasktrack.core.validation import (
    parse_due_date,
    validate_comment,
    validate_task_create,
    validate_task_update,
    validate_uploads,
)
from ulid import ULID

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        attachment_store: AttachmentStore,
        now: Callable[[], datetime] = utcnow,
        upload_max_bytes: int = UPLOAD_MAX_BYTES,
    ) -> None:
        self._stores = store_group
        self._attachments = attachment_store
        self._now = now
        self._upload_max_bytes = upload_max_bytes
        self._resolver = AssigneeResolver(store_group.user_store)
        self._query_engine = TaskQueryEngine(store_group.task_store)
        self._analytics = AnalyticsAggregator(store_group.task_store, now=now)

    async def create_task(
        self,
        owner_id: str,
        fields: TaskCreate,
        files: Sequence[UploadedFile] = (),
    ) -> Task:
        """创建任务

        流程：
        1. 校验字段与上传文件
        2. 解析指派人（未知邮箱丢弃）
        3. 并发上传附件
        4. 强制 status=pending 后落盘

        Raises:
            ValidationFailure: 字段或文件不合法
            UpstreamStorageFailure: 任一附件上传失败
        """
        errors = validate_task_create(fields) + validate_uploads(
            files, self._upload_max_bytes
        )
        if errors:
            raise ValidationFailure(errors)

        assignees = await self._resolver.resolve(fields.assigned_to)
        uploaded = await self._upload_files(files)

        if fields.status and fields.status != TaskStatus.PENDING:
            log.info(
                "task_status_forced_pending",
                owner_id=owner_id,
                requested_status=fields.status,
            )

        now = self._now()
        task = Task(
            task_id=str(ULID()),
            owner_id=owner_id,
            title=fields.title.strip(),
            description=fields.description,
            status=TaskStatus.PENDING,
            priority=fields.priority or TaskPriority.MEDIUM,
            due_date=parse_due_date(fields.due_date),
            assigned_to=assignees,
            attachments=reconcile_attachments(uploaded, []),
            created_at=now,
            updated_at=now,
        )
        await insert_task(self._stores.conn, self._stores.task_store, task)

        log.info(
            "task_created",
            task_id=task.task_id,
            owner_id=owner_id,
            assignee_count=len(task.assigned_to),
            attachment_count=len(task.attachments),
        )
        return task

    async def update_task(
        self,
        owner_id: str,
        task_id: str,
        fields: TaskUpdate,
        new_files: Sequence[UploadedFile] = (),
    ) -> Task:
        """部分更新任务 -- 未提供的字段保持不变

        附件：新上传 + 声明保留（existing_files）；未声明保留列表时，
        以当前附件去掉 removed_files 作为保留列表。
        指派人仅在 assigned_to 提供时重新解析。
        """
        task = await self._get_active_task(owner_id, task_id)

        errors = validate_task_update(fields) + validate_uploads(
            new_files, self._upload_max_bytes
        )
        if errors:
            raise ValidationFailure(errors)

        uploaded = await self._upload_files(new_files)

        changes: dict = {}
        if fields.title is not None:
            changes["title"] = fields.title.strip()
        if fields.description is not None:
            changes["description"] = fields.description
        if fields.status is not None:
            changes["status"] = TaskStatus(fields.status)
        if fields.priority is not None:
            changes["priority"] = TaskPriority(fields.priority)
        if fields.due_date is not None:
            changes["due_date"] = parse_due_date(fields.due_date)
        if fields.assigned_to is not None:
            changes["assigned_to"] = await self._resolver.resolve(fields.assigned_to)

        if uploaded or fields.existing_files is not None or fields.removed_files:
            if fields.existing_files is not None:
                kept = fields.existing_files
            else:
                kept = drop_removed(task.attachments, fields.removed_files)
            changes["attachments"] = reconcile_attachments(
                uploaded, kept, fields.removed_files
            )

        updated = await save_task(
            self._stores.conn,
            self._stores.task_store,
            task.model_copy(update=changes),
        )
        log.info(
            "task_updated",
            task_id=task_id,
            owner_id=owner_id,
            fields=sorted(changes),
        )
        return updated

    async def get_task(self, owner_id: str, task_id: str) -> Task:
        """按 ID 直接查询（包含已软删除的任务）"""
        return await self._get_owned_task(owner_id, task_id)

    async def list_tasks(self, owner_id: str, query: TaskQuery | None = None) -> TaskPage:
        """查询任务列表（排除已软删除）"""
        return await self._query_engine.list(owner_id, query)

    async def mark_complete(self, owner_id: str, task_id: str) -> Task:
        """标记完成：任意状态 -> completed；已完成时直接返回，不重复写入"""
        task = await self._get_active_task(owner_id, task_id)
        if task.status == TaskStatus.COMPLETED:
            return task

        updated = await save_task(
            self._stores.conn,
            self._stores.task_store,
            task.model_copy(update={"status": TaskStatus.COMPLETED}),
        )
        log.info(
            "task_completed",
            task_id=task_id,
            from_status=task.status.value,
        )
        return updated

    async def soft_delete(self, owner_id: str, task_id: str) -> Task:
        """软删除：从列表与统计中移除，仍可按 ID 恢复"""
        task = await self._get_owned_task(owner_id, task_id)
        if task.is_deleted:
            return task
        updated = await save_task(
            self._stores.conn,
            self._stores.task_store,
            task.model_copy(update={"is_deleted": True}),
        )
        log.info("task_soft_deleted", task_id=task_id)
        return updated

    async def restore(self, owner_id: str, task_id: str) -> Task:
        """恢复软删除的任务"""
        task = await self._get_owned_task(owner_id, task_id)
        if not task.is_deleted:
            return task
        updated = await save_task(
            self._stores.conn,
            self._stores.task_store,
            task.model_copy(update={"is_deleted": False}),
        )
        log.info("task_restored", task_id=task_id)
        return updated

    async def delete_permanently(self, owner_id: str, task_id: str) -> None:
        """物理删除（不可恢复）"""
        await self._get_owned_task(owner_id, task_id)
        await purge_task(self._stores.conn, self._stores.task_store, task_id)
        log.info("task_deleted_permanently", task_id=task_id)

    async def add_comment(
        self,
        owner_id: str,
        task_id: str,
        email: str,
        text: str,
    ) -> Task:
        """追加评论；作者邮箱能匹配到用户时记录 user_id"""
        task = await self._get_active_task(owner_id, task_id)
        errors = validate_comment(email, text)
        if errors:
            raise ValidationFailure(errors)

        author = await self._stores.user_store.find_by_email(email.strip())
        comment = Comment(
            user_id=author.user_id if author else None,
            email=author.email if author else email.strip(),
            text=text.strip(),
            created_at=self._now(),
        )
        updated = await save_task(
            self._stores.conn,
            self._stores.task_store,
            task.model_copy(update={"comments": [*task.comments, comment]}),
        )
        log.info("task_comment_added", task_id=task_id, comment_count=len(updated.comments))
        return updated

    async def dashboard_stats(self, owner_id: str) -> DashboardStats:
        return await self._analytics.dashboard_stats(owner_id)

    async def analytics(self, owner_id: str) -> AnalyticsSnapshot:
        return await self._analytics.compute(owner_id)

    async def _get_owned_task(self, owner_id: str, task_id: str) -> Task:
        task = await self._stores.task_store.get_owned_task(owner_id, task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    async def _get_active_task(self, owner_id: str, task_id: str) -> Task:
        """已软删除的任务不可编辑，视为不存在"""
        task = await self._get_owned_task(owner_id, task_id)
        if task.is_deleted:
            raise NotFoundError(task_id)
        return task

    async def _upload_files(self, files: Sequence[UploadedFile]) -> list[Attachment]:
        """并发上传，等待全部完成；任一失败取消其余上传并抛出首个错误"""
        if not files:
            return []
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(self._upload_one(f)) for f in files]
        except ExceptionGroup as eg:
            raise eg.exceptions[0]
        return [t.result() for t in tasks]

    async def _upload_one(self, file: UploadedFile) -> Attachment:
        try:
            stored = await self._attachments.upload(
                file.content, file.mime_type, ATTACHMENT_FOLDER
            )
        except Exception as e:
            log.error(
                "attachment_upload_failed",
                filename=file.filename,
                error_type=type(e).__name__,
            )
            raise UpstreamStorageFailure(file.filename, e) from e
        return Attachment(filename=file.filename, url=stored.url)
