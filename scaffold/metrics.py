"""Prometheus metrics for the request pipeline."""

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest
from starlette.requests import Request
from starlette.responses import Response

_LABELS = ["method", "uri", "success", "http_code", "business_code"]


class PrometheusRecorder:
    """
    Default metrics hook.

    Counts requests and observes their latency, labelled by method, uri
    (or alias), outcome and codes. Pass the instance to
    ``with_record_metrics``; it is callable with the hook signature.
    """

    def __init__(self, namespace: str = "api", registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.requests = Counter(
            "requests_total",
            "Requests handled, by outcome",
            _LABELS,
            namespace=namespace,
            registry=self.registry,
        )
        self.latency = Histogram(
            "request_duration_seconds",
            "Request latency in seconds",
            _LABELS,
            namespace=namespace,
            registry=self.registry,
        )

    def __call__(
        self,
        method: str,
        uri: str,
        success: bool,
        http_code: int,
        business_code: int,
        cost_seconds: float,
    ) -> None:
        labels = (method, uri, str(success).lower(), str(http_code), str(business_code))
        self.requests.labels(*labels).inc()
        self.latency.labels(*labels).observe(cost_seconds)


def metrics_endpoint(registry: Optional[CollectorRegistry] = None):
    """Build a route serving ``registry`` (the global one by default) in text format."""

    async def metrics(request: Request) -> Response:
        data = generate_latest(registry) if registry is not None else generate_latest()
        return Response(data, media_type=CONTENT_TYPE_LATEST)

    return metrics
