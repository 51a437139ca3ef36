"""异常 -> HTTP 响应映射

错误响应格式：
    {"success": false, "message": ..., "error": {"code": ..., "message": ..., "details"?: [...]}}

未知异常记录完整日志，但只向调用方返回通用信息。
"""

import structlog
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse
from tasktrack.core.exceptions import (
    NotFoundError,
    TaskTrackError,
    UpstreamStorageFailure,
    ValidationFailure,
)

log = structlog.get_logger()

_STATUS_CODES: dict[type[TaskTrackError], int] = {
    NotFoundError: 404,
    ValidationFailure: 422,
    UpstreamStorageFailure: 502,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    error: dict = {"code": code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error},
    )


async def handle_tasktrack_error(request: Request, exc: TaskTrackError) -> JSONResponse:
    status_code = _STATUS_CODES.get(type(exc), 400)
    log.info(
        "request_rejected",
        code=exc.code,
        status_code=status_code,
        error_message=exc.message,
    )
    return error_response(
        status_code,
        exc.code,
        exc.message,
        getattr(exc, "errors", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unexpected_error", error_type=type(exc).__name__)
    return error_response(500, "INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskTrackError, handle_tasktrack_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
