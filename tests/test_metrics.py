from prometheus_client import CollectorRegistry

from scaffold.core.mux import alias_for_record_metrics
from scaffold.core.options import with_record_metrics
from scaffold.errno import OK
from scaffold.metrics import PrometheusRecorder


def test_recorder_counts_requests():
    recorder = PrometheusRecorder(registry=CollectorRegistry())

    recorder("GET", "/h/ping", True, 200, 0, 0.01)
    recorder("GET", "/h/ping", True, 200, 0, 0.02)

    labels = {"method": "GET", "uri": "/h/ping", "success": "true", "http_code": "200", "business_code": "0"}
    assert recorder.registry.get_sample_value("api_requests_total", labels) == 2
    assert recorder.registry.get_sample_value("api_request_duration_seconds_count", labels) == 2


def test_metrics_endpoint_serves_recorder_registry(make_server):
    recorder = PrometheusRecorder()
    mux, client = make_server(with_record_metrics(recorder), metrics_registry=recorder.registry)
    mux.group("/api").get(
        "/orders/{order_id}",
        alias_for_record_metrics("/api/orders/:id"),
        lambda ctx: ctx.set_payload(OK),
    )

    client.get("/api/orders/1")
    client.get("/api/orders/2")

    text = client.get("/metrics").text
    assert 'uri="/api/orders/:id"' in text
    assert "/api/orders/1" not in text
    assert recorder.registry.get_sample_value(
        "api_requests_total",
        {"method": "GET", "uri": "/api/orders/:id", "success": "true", "http_code": "200", "business_code": "0"},
    ) == 2


def test_metrics_endpoint_defaults_to_recorder_registry(make_server):
    recorder = PrometheusRecorder()
    _, client = make_server(with_record_metrics(recorder))

    client.get("/h/ping")

    text = client.get("/metrics").text
    assert "api_requests_total" in text
    assert 'uri="/h/ping"' in text
