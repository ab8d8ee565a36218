"""Request context, routing facade and options."""

from scaffold.core.context import Context
from scaffold.core.mux import (
    HandlerFunc,
    Mux,
    RouterGroup,
    alias_for_record_metrics,
    disable_journal,
    wrap_auth_handler,
)
from scaffold.core.options import (
    OnPanicNotify,
    Option,
    Options,
    RecordMetrics,
    with_disable_pprof,
    with_disable_prometheus,
    with_disable_swagger,
    with_enable_cors,
    with_enable_rate,
    with_journal_not_found,
    with_panic_notify,
    with_record_metrics,
)

__all__ = [
    "Context",
    "HandlerFunc",
    "Mux",
    "OnPanicNotify",
    "Option",
    "Options",
    "RecordMetrics",
    "RouterGroup",
    "alias_for_record_metrics",
    "disable_journal",
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
