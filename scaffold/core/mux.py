"""Route registration on top of FastAPI."""

from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, Union
import inspect
import re

from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from scaffold.core.context import Context, get_state
from scaffold.errno import Errno

HandlerFunc = Callable[[Context], Union[None, Awaitable[None]]]

ANY_METHODS = ["GET", "POST", "PUT", "PATCH", "HEAD", "OPTIONS", "DELETE", "CONNECT", "TRACE"]

_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")
_WILDCARD = re.compile(r"\*([A-Za-z_][A-Za-z0-9_]*)$")


def to_route_path(path: str) -> str:
    """Accept ``/user/:name`` and ``/files/*rest`` as well as FastAPI's own syntax."""
    path = _WILDCARD.sub(r"{\1:path}", path)
    return _PARAM.sub(r"{\1}", path)


def disable_journal(ctx: Context) -> None:
    """Marker handler: requests through this route are not journaled."""
    ctx.disable_journal()


def alias_for_record_metrics(path: str) -> HandlerFunc:
    """
    Report the route to the metrics hook under ``path``.

    ``GET /user/{username}`` would otherwise produce one metric series per
    user name.
    """
    def handler(ctx: Context) -> None:
        ctx.set_alias(path)
    return handler


def wrap_auth_handler(
    handler: Callable[[Context], Tuple[Optional[int], Optional[str], Optional[Errno]]],
) -> HandlerFunc:
    """
    Turn an authentication function into a handler.

    Later handlers read the identity from ``ctx.user_id`` and ``ctx.user_name``.
    """
    def auth(ctx: Context) -> None:
        user_id, user_name, err = handler(ctx)
        if err is not None:
            ctx.abort_with_error(err)
            return
        ctx.set_user_id(user_id)
        ctx.set_user_name(user_name)
    return auth


async def _invoke(handler: HandlerFunc, request: Request) -> None:
    ctx = Context(request)
    try:
        if inspect.iscoroutinefunction(handler):
            await handler(ctx)
        else:
            await run_in_threadpool(handler, ctx)
    except Errno as err:
        ctx.abort_with_error(err)
    except HTTPException as exc:
        ctx.add_error(exc)
        ctx.abort()
        raise
    finally:
        ctx.release()


def wrap_handlers(handlers: Sequence[HandlerFunc]) -> Callable[[Request], Awaitable[Response]]:
    """Build one endpoint running ``handlers`` in order until one aborts."""
    chain = list(handlers)

    async def endpoint(request: Request) -> Response:
        state = get_state(request)
        state.raw_body = await request.body()

        for handler in chain:
            if state.aborted:
                break
            await _invoke(handler, request)

        # The interceptor replaces this with the envelope when a payload was set.
        return Response(status_code=200)

    return endpoint


class RouterGroup:
    """A path prefix plus the handlers every route below it runs first."""

    def __init__(self, app: FastAPI, prefix: str = "", handlers: Sequence[HandlerFunc] = ()):
        self._app = app
        self.prefix = prefix
        self.handlers: List[HandlerFunc] = list(handlers)

    def group(self, relative_path: str, *handlers: HandlerFunc) -> "RouterGroup":
        return RouterGroup(self._app, self._join(relative_path), self.handlers + list(handlers))

    def handle(self, methods: List[str], relative_path: str, *handlers: HandlerFunc) -> None:
        if not handlers:
            raise ValueError("at least one handler is required")
        path = to_route_path(self._join(relative_path))
        self._app.add_api_route(
            path,
            wrap_handlers(self.handlers + list(handlers)),
            methods=methods,
            name=f"{'_'.join(methods).lower()}:{path}",
        )

    def any(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(ANY_METHODS, relative_path, *handlers)

    def get(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(["GET"], relative_path, *handlers)

    def post(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(["POST"], relative_path, *handlers)

    def delete(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(["DELETE"], relative_path, *handlers)

    def patch(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(["PATCH"], relative_path, *handlers)

    def put(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(["PUT"], relative_path, *handlers)

    def options(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(["OPTIONS"], relative_path, *handlers)

    def head(self, relative_path: str, *handlers: HandlerFunc) -> None:
        self.handle(["HEAD"], relative_path, *handlers)

    def _join(self, relative_path: str) -> str:
        if not relative_path:
            return self.prefix
        joined = self.prefix.rstrip("/") + "/" + relative_path.lstrip("/")
        if relative_path.endswith("/") and not joined.endswith("/"):
            joined += "/"
        return joined


class Mux:
    """ASGI application exposing grouped route registration."""

    def __init__(self, app: FastAPI):
        self.app = app

    def group(self, relative_path: str, *handlers: HandlerFunc) -> RouterGroup:
        return RouterGroup(self.app, "", ()).group(relative_path, *handlers)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.app(scope, receive, send)
