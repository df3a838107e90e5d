"""Response envelope shared by every endpoint.

    {"code": 0, "message": "success", "data": {...},
     "timestamp": "2026-10-01T12:00:00+00:00", "request_id": "req_a1b2c3d4e5f6"}

code 0 is success; any other value is an AppError code and data is null.
request_id matches the one RequestLogMiddleware logged for the same call.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)


def respond(request: Request, data: BaseModel | None = None) -> ApiResponse:
    """Wrap a schema in the envelope, reusing the middleware's request id."""
    resp = success_response(data.model_dump() if data is not None else None)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
