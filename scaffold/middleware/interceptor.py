"""
Request interceptor.

Opens a journal when the request enters, and on the way out recovers
handler failures, turns the handler's payload into the JSON envelope,
reports metrics and logs the finished journal.
"""

from typing import Optional, Tuple
import logging
import time
import traceback

from fastapi.encoders import jsonable_encoder
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from scaffold.core.context import Context
from scaffold.core.journal import JOURNAL_HEADER, finalize_journal, is_journaled_path, new_journal
from scaffold.core.options import Options
from scaffold.errno import ERR_SERVER, Errno
from scaffold.middleware.recovery import log_panic
from scaffold.schemas.response import Envelope

# Statuses produced by the router itself; these are never wrapped.
FRAMEWORK_STATUSES = frozenset({404, 405})


class InterceptorMiddleware(BaseHTTPMiddleware):
    """Journal, recover, unify and measure every request."""

    def __init__(self, app, logger: logging.Logger, options: Options):
        super().__init__(app)
        self.logger = logger
        self.options = options

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        ts = time.perf_counter()

        context = Context(request)
        try:
            context.init(self.logger)

            if is_journaled_path(request.url.path):
                context.set_journal(new_journal(context.get_header(JOURNAL_HEADER)))

            response: Optional[Response] = None
            try:
                response = await call_next(request)
            except Exception as exc:
                self._recover(context, exc)

            return self._unwind(context, response, ts)
        finally:
            context.release()

    def _recover(self, context: Context, exc: Exception) -> None:
        stack = traceback.format_exc()
        log_panic(self.logger, exc, stack)
        context.set_payload(ERR_SERVER)
        context.abort_with_error(ERR_SERVER)

        notify = self.options.panic_notify
        if notify is None:
            return
        try:
            notify(context, exc, stack)
        except Exception as notify_exc:
            log_panic(self.logger, notify_exc, traceback.format_exc())

    def _unwind(self, context: Context, response: Optional[Response], ts: float) -> Response:
        if response is None:
            response = Response(status_code=200)

        if response.status_code in FRAMEWORK_STATUSES and context.payload is None and context.abort_error is None:
            if self.options.journal_not_found:
                self._log_journal(context, response, None, ts)
            return response

        errno = self._business_response(context)

        body = None
        if errno is not None:
            try:
                body, response = self._envelope(context, errno)
            except Exception as exc:
                # Payload data the encoder cannot handle.
                self._recover(context, exc)
                errno = ERR_SERVER
                body, response = self._envelope(context, errno)

        for key, value in context.pending_headers().items():
            response.headers[key] = value
        if context.journal is not None:
            response.headers[JOURNAL_HEADER] = context.journal.id

        self._record_metrics(context, response, errno, ts)
        self._log_journal(context, response, body, ts)
        return response

    def _envelope(self, context: Context, errno: Errno) -> Tuple[dict, JSONResponse]:
        journal = context.journal
        body = jsonable_encoder(Envelope.from_errno(errno, journal.id if journal else ""))
        return body, JSONResponse(status_code=200, content=body)

    def _business_response(self, context: Context) -> Optional[Errno]:
        if not context.is_aborted:
            return context.payload

        reasons = [str(err) for err in context.errors]
        abort_error = context.abort_error
        if abort_error is not None:
            reasons.append(abort_error.msg)
        if reasons:
            self.logger.warning(
                "request aborted: %s", "; ".join(reasons),
                extra={"method": context.method, "path": context.path},
            )

        if abort_error is not None:
            return abort_error
        return context.payload

    def _success(self, context: Context, response: Response) -> bool:
        return not context.is_aborted and response.status_code == 200

    def _record_metrics(
        self,
        context: Context,
        response: Response,
        errno: Optional[Errno],
        ts: float,
    ) -> None:
        record = self.options.record_metrics
        if record is None:
            return

        uri = context.alias or context.uri
        business_code = errno.code if errno is not None else 0
        try:
            record(
                context.method,
                uri,
                self._success(context, response),
                response.status_code,
                business_code,
                time.perf_counter() - ts,
            )
        except Exception:
            self.logger.exception("record metrics failed")

    def _log_journal(self, context: Context, response: Response, body, ts: float) -> None:
        journal = context.journal
        if journal is None:
            return

        request = context.request
        finalize_journal(
            journal,
            method=request.method,
            path=request.url.path,
            query=request.url.query,
            request_headers=request.headers,
            body=context.raw_data(),
            response_headers=response.headers,
            status_code=response.status_code,
            response_body=body,
            success=self._success(context, response),
            cost_seconds=time.perf_counter() - ts,
        )
        self.logger.info("interceptor", extra={"journal": journal.model_dump(mode="json")})
