"""Request journal correlation."""

from typing import Any, Mapping, Optional
from urllib.parse import unquote_plus
from http import HTTPStatus
import uuid

from scaffold.schemas.journal import Journal, JournalRequest, JournalResponse

JOURNAL_HEADER = "Journal-Id"

# Requests to these paths never get a journal.
WITHOUT_JOURNAL_PATHS = frozenset(
    {
        "/metrics",
        "/debug/pprof/",
        "/debug/pprof/cmdline",
        "/debug/pprof/profile",
        "/debug/pprof/symbol",
        "/debug/pprof/trace",
        "/debug/pprof/allocs",
        "/debug/pprof/block",
        "/debug/pprof/goroutine",
        "/debug/pprof/heap",
        "/debug/pprof/mutex",
        "/debug/pprof/threadcreate",
        "/favicon.ico",
    }
)


def is_journaled_path(path: str) -> bool:
    return path not in WITHOUT_JOURNAL_PATHS


def new_journal(journal_id: Optional[str] = None) -> Journal:
    """
    Start a journal, continuing the caller's trace when an id is supplied.

    Args:
        journal_id: Correlation id read from the inbound header, if any

    Returns:
        A journal with no request or response recorded yet
    """
    return Journal(id=journal_id or uuid.uuid4().hex)


def decode_url(path: str, query: str) -> str:
    """Unescape the request URI the way a query string is unescaped."""
    uri = f"{path}?{query}" if query else path
    try:
        return unquote_plus(uri, errors="strict")
    except UnicodeDecodeError:
        return uri


def status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


def finalize_journal(
    journal: Journal,
    *,
    method: str,
    path: str,
    query: str,
    request_headers: Mapping[str, str],
    body: bytes,
    response_headers: Mapping[str, str],
    status_code: int,
    response_body: Any,
    success: bool,
    cost_seconds: float,
) -> Journal:
    """Fill in the request and response snapshots of a finished request."""
    journal.request = JournalRequest(
        method=method,
        decoded_url=decode_url(path, query),
        header=dict(request_headers),
        body=body.decode("utf-8", errors="replace"),
    )
    journal.response = JournalResponse(
        header=dict(response_headers),
        status_code=status_code,
        status=status_text(status_code),
        body=response_body,
    )
    journal.success = success
    journal.cost_seconds = max(cost_seconds, 0.0)
    return journal
