"""Application entrypoint."""

from typing import Optional

from scaffold.config import Settings, settings
from scaffold.core.mux import Mux
from scaffold.core.options import with_record_metrics
from scaffold.logging_config import setup_logging
from scaffold.metrics import PrometheusRecorder
from scaffold.middleware.rate_limit import TokenBucket
from scaffold.server import new


def create_app(config: Optional[Settings] = None) -> Mux:
    """
    Create the server from settings.

    Returns:
        Configured Mux, servable by any ASGI server
    """
    config = config or settings
    logger = setup_logging(config.log_level, config.log_json)

    recorder = PrometheusRecorder()
    mux = new(
        logger,
        *config.options(),
        with_record_metrics(recorder),
        title=config.app_name,
        version=config.app_version,
        limiter=TokenBucket(config.rate_limit_per_second, config.rate_limit_burst),
    )

    logger.info(f"Starting {config.app_name} in {config.app_env} mode on {config.host}:{config.port}")
    return mux


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "scaffold.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
