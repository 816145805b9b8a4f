"""API middleware for request correlation and logging."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from outcome_registry.observability import DiagnosticsRecorder

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
REJECTED_RECORDS_HEADER = "X-Rejected-Records"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request under the id its diagnostics are recorded with.

    The id is taken from an incoming ``X-Request-ID`` header when the caller
    sends one, otherwise generated here. It is stored on ``request.state`` for
    the per-request ``DiagnosticsRecorder`` and echoed on the response.
    Analytics routes report how many source rows they rejected through the
    ``X-Rejected-Records`` header, which is logged with the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or DiagnosticsRecorder.generate_request_id()
        request.state.request_id = request_id

        # Log request
        logger.info(
            f"[{request_id}] Request: {request.method} {request.url.path} "
            f"client={request.client.host if request.client else 'unknown'}"
        )

        # Process request
        response = await call_next(request)

        # Log response
        duration = time.time() - start_time
        rejected = response.headers.get(REJECTED_RECORDS_HEADER)
        logger.info(
            f"[{request_id}] Response: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
            + (f" rejected_records={rejected}" if rejected else "")
        )

        # Add correlation and timing headers
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{duration:.3f}"

        return response
