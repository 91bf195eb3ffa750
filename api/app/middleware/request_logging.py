# api/app/middleware/request_logging.py
"""
Access log for the profile API.

Every response carries an `X-Request-ID` (taken from the client when it
sends one) so a log line can be matched to a client-side report.
"""
from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        started = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("[%s] %s %s failed", request_id, request.method, request.url.path)
            raise

        elapsed_ms = (time.monotonic() - started) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s %s -> %d (%.0fms)",
            request_id, request.method, request.url.path, response.status_code, elapsed_ms,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
