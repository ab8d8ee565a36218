"""Schemas package."""

from scaffold.schemas.journal import Journal, JournalRequest, JournalResponse
from scaffold.schemas.response import Envelope, InfoResponse

__all__ = [
    "Envelope",
    "InfoResponse",
    "Journal",
    "JournalRequest",
    "JournalResponse",
]
