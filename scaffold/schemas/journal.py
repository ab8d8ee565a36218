"""Journal schemas."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class JournalRequest(BaseModel):
    """Snapshot of the inbound request."""
    ttl: str = Field("un-limit", description="Retention marker for the log pipeline")
    method: str = Field(..., description="HTTP method")
    decoded_url: str = Field(..., description="Unescaped request URI")
    header: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: str = Field("", description="Raw request body")


class JournalResponse(BaseModel):
    """Snapshot of the outgoing response."""
    header: Dict[str, str] = Field(default_factory=dict, description="Response headers")
    status_code: int = Field(..., description="Transport status code")
    status: str = Field("", description="Transport status text")
    body: Optional[Any] = Field(None, description="Envelope written to the client, if any")


class Journal(BaseModel):
    """One request's full lifecycle, logged once when the request ends."""
    id: str = Field(..., description="Correlation id")
    request: Optional[JournalRequest] = None
    response: Optional[JournalResponse] = None
    success: bool = False
    cost_seconds: float = 0.0
