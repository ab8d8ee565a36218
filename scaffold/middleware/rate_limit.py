"""Rate limiting middleware."""

from typing import Callable
import threading
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from scaffold.core.context import Context, get_state
from scaffold.errno import ERR_MANY_REQUEST

MAX_BURST_SIZE = 100


class TokenBucket:
    """
    Token bucket shared by every request of one server.

    Holds at most ``burst`` tokens and gains ``rate`` tokens per second.
    ``allow`` takes a token if one is available and never waits.
    """

    def __init__(
        self,
        rate: float = 1.0,
        burst: int = MAX_BURST_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        if rate <= 0 or burst <= 0:
            raise ValueError("rate and burst must be positive")
        self.rate = rate
        self.burst = burst
        self._clock = clock
        self._tokens = float(burst)
        self._last = clock()
        self._lock = threading.Lock()

    def allow(self) -> bool:
        with self._lock:
            now = self._clock()
            elapsed = max(0.0, now - self._last)
            self._last = now
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)

            if self._tokens < 1.0:
                return False
            self._tokens -= 1.0
            return True


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests with ERR_MANY_REQUEST once the bucket is empty."""

    def __init__(self, app, limiter: TokenBucket):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.limiter.allow():
            return await call_next(request)

        # Downstream never runs, so the body is read here for the journal.
        get_state(request).raw_body = await request.body()

        # The interceptor above turns the payload into the envelope.
        context = Context(request)
        try:
            context.set_payload(ERR_MANY_REQUEST)
            context.abort()
        finally:
            context.release()
        return Response(status_code=200)
