"""Request logging middleware.

Every request gets a request_id (reused from an inbound X-Request-ID header
when the caller sends one) stored on request.state for ApiResponse, and one
access log line. Requests under /listings/{id} also log the listing id so
bid traffic for one auction can be grepped together.

Log format:
    INFO [POST] /api/v1/listings/123/bids → 201 (4ms) req_a1b2c3d4e5f6 listing=123
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("auction.request")

_LISTING_PATH = re.compile(r"/listings/([^/]+)")
_MAX_INBOUND_ID = 64


def _request_id(request: Request) -> str:
    inbound = request.headers.get("X-Request-ID", "").strip()
    if inbound and len(inbound) <= _MAX_INBOUND_ID:
        return inbound
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id
        match = _LISTING_PATH.search(request.url.path)
        listing = f" listing={match.group(1)}" if match else ""

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        # 5xx here means a fatal engine error or a busy listing
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
            listing,
        )
        return response
