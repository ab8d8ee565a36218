# middleware package

"""Middleware package."""

from scaffold.middleware.interceptor import InterceptorMiddleware
from scaffold.middleware.rate_limit import RateLimitMiddleware, TokenBucket
from scaffold.middleware.recovery import RecoveryMiddleware

__all__ = [
    "InterceptorMiddleware",
    "RateLimitMiddleware",
    "RecoveryMiddleware",
    "TokenBucket",
]
