"""HTTP server scaffold: journaling, recovery, rate limiting and a unified envelope on FastAPI."""

from scaffold.core import (
    Context,
    Mux,
    RouterGroup,
    alias_for_record_metrics,
    disable_journal,
    with_disable_pprof,
    with_disable_prometheus,
    with_disable_swagger,
    with_enable_cors,
    with_enable_rate,
    with_journal_not_found,
    with_panic_notify,
    with_record_metrics,
    wrap_auth_handler,
)
from scaffold.errno import Errno
from scaffold.exceptions import ConfigError
from scaffold.server import new

__all__ = [
    "ConfigError",
    "Context",
    "Errno",
    "Mux",
    "RouterGroup",
    "alias_for_record_metrics",
    "disable_journal",
    "new",
    "with_disable_pprof",
    "with_disable_prometheus",
    "with_disable_swagger",
    "with_enable_cors",
    "with_enable_rate",
    "with_journal_not_found",
    "with_panic_notify",
    "with_record_metrics",
    "wrap_auth_handler",
]
