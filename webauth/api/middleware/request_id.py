"""
Request correlation and timing.

Every response carries ``X-Request-ID`` (the caller's value when supplied).
The id is published through ``request_id_var`` so that log records emitted
while serving the request are tagged with it.
"""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from webauth.config import get_settings
from webauth.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and warn about requests slower than the threshold."""

    def __init__(self, app: ASGIApp, slow_request_ms: Optional[int] = None):
        super().__init__(app)
        # bcrypt makes logins slow on purpose; the default threshold sits above that
        self.slow_request_ms = (
            get_settings().slow_request_ms if slow_request_ms is None else slow_request_ms
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        if elapsed_ms > self.slow_request_ms:
            logger.warning(
                "Slow request %s %s",
                request.method,
                request.url.path,
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "duration_ms": round(elapsed_ms, 1),
                },
            )
        return response
