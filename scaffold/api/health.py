"""Health check endpoints."""

from datetime import datetime, timezone

from scaffold.core.context import Context
from scaffold.core.mux import Mux, disable_journal
from scaffold.errno import OK
from scaffold.schemas.response import InfoResponse


def ping(ctx: Context) -> None:
    """Basic uptime check."""
    ctx.set_payload(OK.with_data("pong"))


def info(ctx: Context) -> None:
    """Echo the request headers with the server time."""
    ctx.set_payload(OK.with_data(InfoResponse(header=ctx.header(), ts=datetime.now(timezone.utc))))


def register(mux: Mux) -> None:
    h = mux.group("/h", disable_journal)
    h.get("/ping", ping)
    h.get("/info", info)
