"""Unified API response wrapper.

All API endpoints return this format:
{
    "code": 0,           // 0=success, non-0=AppError code
    "message": "success",
    "data": { ... },     // null on error, {"reason": ...} on bid rejection
    "timestamp": "...",
    "request_id": "..."  // same value as the X-Request-ID response header
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def _request_id(request: Request | None) -> str:
    if request is None:
        return _new_request_id()
    return getattr(request.state, "request_id", None) or _new_request_id()


def success_response(data: Any = None, request: Request | None = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data, request_id=_request_id(request))


def error_response(
    code: int,
    message: str,
    request: Request | None = None,
    reason: str | None = None,
) -> ApiResponse:
    """Error envelope. `reason` is set for bid rejections so clients can branch on it."""
    return ApiResponse(
        code=code,
        message=message,
        data={"reason": reason} if reason is not None else None,
        request_id=_request_id(request),
    )
