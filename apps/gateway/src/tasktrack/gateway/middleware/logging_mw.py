"""LoggingMiddleware -- 请求级上下文绑定 + 访问日志

每个请求：
- 生成 request_id（ULID），与 method / path / owner_id 一起绑定到 structlog contextvars
- 结束时记录 status_code 与耗时，5xx 以 error 级别记录
- 响应头返回 X-Request-ID
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

# 探活请求量大，只在 DEBUG 级别记录
_QUIET_PATHS = frozenset({"/health", "/ready"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )
        owner_id = request.headers.get("x-owner-id")
        if owner_id:
            structlog.contextvars.bind_contextvars(owner_id=owner_id)

        log = structlog.get_logger()
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 1)

        if response.status_code >= 500:
            await log.aerror(
                "request_failed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
        elif path in _QUIET_PATHS:
            await log.adebug("request_completed", status_code=response.status_code)
        else:
            await log.ainfo(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
                content_length=request.headers.get("content-length"),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
