"""Response schemas."""

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from scaffold.errno import Errno


class Envelope(BaseModel):
    """Unified JSON wrapper written for every request that produced a payload."""
    code: int = Field(..., description="Business code, 0 on success")
    msg: str = Field(..., description="Human-readable business message")
    data: Optional[Any] = Field(None, description="Handler-specific data")
    request_id: str = Field("", description="Journal id for tracing the request")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": 0,
                "msg": "OK",
                "data": "pong",
                "request_id": "3f2b7c1e9a4d4b8f8e0c6d5a2b1f0e9d",
            }
        }
    )

    @classmethod
    def from_errno(cls, errno: Errno, request_id: Optional[str] = None) -> "Envelope":
        return cls(code=errno.code, msg=errno.msg, data=errno.data, request_id=request_id or "")


class InfoResponse(BaseModel):
    """Data of the /h/info endpoint."""
    header: Dict[str, str] = Field(..., description="Request headers as received")
    ts: datetime = Field(..., description="Server time when the request was handled")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "header": {"host": "localhost:9999", "user-agent": "curl/8.0"},
                "ts": "2024-01-01T10:00:00+00:00",
            }
        }
    )
