"""
Request ID middleware for request correlation.

Accepts or generates X-Request-ID, echoes it on the response and puts it in
the logging context for the duration of the request. Slow requests are
logged; generation calls wait on the LLM and get a longer allowance.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from mathsheet.api.middleware.rate_limit import is_generation_request
from mathsheet.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

SLOW_REQUEST_MS = 1000
SLOW_GENERATION_MS = 30000


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation id and time it."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id

            threshold = SLOW_GENERATION_MS if is_generation_request(request) else SLOW_REQUEST_MS
            if duration_ms > threshold:
                logger.warning(
                    "Slow request",
                    extra={
                        "path": request.url.path,
                        "method": request.method,
                        "status": response.status_code,
                        "duration_ms": round(duration_ms, 1),
                    },
                )
            return response
        finally:
            request_id_var.reset(token)
