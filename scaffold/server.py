"""Server construction."""

from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CollectorRegistry

from scaffold.api import health, pprof
from scaffold.core.mux import Mux
from scaffold.core.options import Option, build_options
from scaffold.exceptions import ConfigError
from scaffold.metrics import metrics_endpoint
from scaffold.middleware.interceptor import InterceptorMiddleware
from scaffold.middleware.rate_limit import RateLimitMiddleware, TokenBucket
from scaffold.middleware.recovery import RecoveryMiddleware

SWAGGER_URL = "/swagger/index.html"
OPENAPI_URL = "/swagger/doc.json"

CORS_METHODS = ["HEAD", "GET", "POST", "PUT", "PATCH", "DELETE"]


def new(
    logger: Optional[logging.Logger],
    *options: Option,
    title: str = "api-scaffold",
    version: str = "1.0.0",
    limiter: Optional[TokenBucket] = None,
    metrics_registry: Optional[CollectorRegistry] = None,
) -> Mux:
    """
    Create the server.

    Args:
        logger: Sink for journals and panics; required
        options: Option functions, applied in order
        title: API title shown in the Swagger UI
        version: API version shown in the Swagger UI
        limiter: Token bucket used when rate limiting is enabled
        metrics_registry: Registry served on /metrics; defaults to the registry of
            the metrics recorder, if it has one, else the global registry

    Returns:
        Mux with the built-in routes registered

    Raises:
        ConfigError: If no logger is given
    """
    if logger is None:
        raise ConfigError("logger required")

    opt = build_options(*options)

    app = FastAPI(
        title=title,
        version=version,
        docs_url=None if opt.disable_swagger else SWAGGER_URL,
        redoc_url=None,
        openapi_url=None if opt.disable_swagger else OPENAPI_URL,
    )
    mux = Mux(app)

    if opt.panic_notify is not None:
        logger.info("* [register panic notify]")

    if not opt.disable_pprof:
        app.include_router(pprof.router)
        logger.info("* [register pprof]")

    if not opt.disable_swagger:
        logger.info("* [register swagger]")

    if not opt.disable_prometheus:
        if metrics_registry is None:
            metrics_registry = getattr(opt.record_metrics, "registry", None)
        app.add_api_route("/metrics", metrics_endpoint(metrics_registry), methods=["GET"], include_in_schema=False)
        logger.info("* [register prometheus]")

    # Starlette runs the last added middleware first, so this list is innermost-first.
    if opt.enable_rate:
        app.add_middleware(RateLimitMiddleware, limiter=limiter or TokenBucket())
        logger.info("* [register rate]")

    app.add_middleware(InterceptorMiddleware, logger=logger, options=opt)
    app.add_middleware(RecoveryMiddleware, logger=logger)

    if opt.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=CORS_METHODS,
            allow_headers=["*"],
            allow_credentials=True,
        )
        logger.info("* [register cors]")

    health.register(mux)

    return mux
