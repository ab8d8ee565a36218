"""Outermost panic guard."""

import logging
import traceback

from fastapi.encoders import jsonable_encoder
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from scaffold.errno import ERR_SERVER
from scaffold.schemas.response import Envelope


def log_panic(logger: logging.Logger, exc: BaseException, stack: str) -> None:
    logger.error("got panic", extra={"panic": repr(exc), "stack": stack})


def server_error_response() -> JSONResponse:
    return JSONResponse(status_code=200, content=jsonable_encoder(Envelope.from_errno(ERR_SERVER)))


class RecoveryMiddleware(BaseHTTPMiddleware):
    """
    Last line of defence around the interceptor.

    The interceptor already recovers handler failures; this catches failures
    in the interceptor itself so no exception reaches the ASGI server.
    """

    def __init__(self, app, logger: logging.Logger):
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            log_panic(self.logger, exc, traceback.format_exc())
            return server_error_response()
