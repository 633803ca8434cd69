"""
API中间件

请求日志（带请求ID与历史游标）和安全响应头。
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.logging import StructuredLogger
from .deps import HEAD_HEADER

structured_logger = StructuredLogger("api")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """记录每个请求的开始、结束与耗时，并回写 X-Request-ID / X-Process-Time"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        context = {"request_id": request_id}
        head = request.headers.get(HEAD_HEADER)
        if head:
            context["checkpoint_id"] = head

        start_time = time.perf_counter()
        structured_logger.log_request(
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
            **context,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            structured_logger.log_error(
                error=e,
                context={
                    "method": request.method,
                    "path": request.url.path,
                    "duration": time.perf_counter() - start_time,
                    **context,
                },
            )
            raise

        duration = time.perf_counter() - start_time
        structured_logger.log_response(status_code=response.status_code, duration=duration, **context)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{duration:.4f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """安全响应头"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response
