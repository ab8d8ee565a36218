"""Server options."""

from typing import Any, Callable, Optional
from dataclasses import dataclass, replace

# Called with (context, exception, formatted stack) when a handler fails.
OnPanicNotify = Callable[[Any, BaseException, str], None]

# Called once per request with
# (method, uri, success, http_code, business_code, cost_seconds).
# uri is replaced by the route alias when one was set.
RecordMetrics = Callable[[str, str, bool, int, int, float], None]


@dataclass(frozen=True)
class Options:
    """Server configuration, built once from a list of option functions."""
    disable_pprof: bool = False
    disable_swagger: bool = False
    disable_prometheus: bool = False
    enable_cors: bool = False
    enable_rate: bool = False
    journal_not_found: bool = False
    panic_notify: Optional[OnPanicNotify] = None
    record_metrics: Optional[RecordMetrics] = None


Option = Callable[[Options], Options]


def build_options(*options: Option) -> Options:
    """Apply options in order; a later option overrides an earlier one."""
    opt = Options()
    for f in options:
        opt = f(opt)
    return opt


def with_disable_pprof() -> Option:
    return lambda opt: replace(opt, disable_pprof=True)


def with_disable_swagger() -> Option:
    return lambda opt: replace(opt, disable_swagger=True)


def with_disable_prometheus() -> Option:
    return lambda opt: replace(opt, disable_prometheus=True)


def with_enable_cors() -> Option:
    return lambda opt: replace(opt, enable_cors=True)


def with_enable_rate() -> Option:
    return lambda opt: replace(opt, enable_rate=True)


def with_journal_not_found() -> Option:
    """Record a journal for requests that matched no route."""
    return lambda opt: replace(opt, journal_not_found=True)


def with_panic_notify(notify: Optional[OnPanicNotify]) -> Option:
    return lambda opt: replace(opt, panic_notify=notify)


def with_record_metrics(record: Optional[RecordMetrics]) -> Option:
    return lambda opt: replace(opt, record_metrics=record)
