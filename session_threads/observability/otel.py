"""OpenTelemetry + Prometheus fallback wiring for session-threads."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI

from session_threads import config

logger = logging.getLogger("session_threads.observability")

# name -> (kind, exported metric name, unit, description, label names)
_METRIC_SPECS: dict[str, tuple[str, str, str, str, tuple[str, ...]]] = {
    "scans": (
        "counter",
        "session_threads_scans_total",
        "1",
        "Count of session log list/load operations",
        ("operation", "result"),
    ),
    "scan_latency": (
        "histogram",
        "session_threads_scan_latency_ms",
        "ms",
        "Latency of session log list/load operations",
        ("operation", "result"),
    ),
    "files_read": (
        "counter",
        "session_threads_files_read_total",
        "1",
        "Session log files streamed by list/load operations",
        ("operation",),
    ),
    "parser_failures": (
        "counter",
        "session_threads_parser_failures_total",
        "1",
        "Count of skipped unparsable log lines",
        ("parser",),
    ),
}

_initialized = False
_tracer: Any | None = None
_providers: list[Any] = []
_fastapi_instrumentor: Any | None = None
_otel_metrics: dict[str, Any] = {}
_prom_metrics: dict[str, Any] = {}


def _normalize_otlp_endpoint(base_endpoint: str, signal_path: str) -> str:
    endpoint = (base_endpoint or "").strip()
    if not endpoint:
        return ""
    if endpoint.endswith(signal_path):
        return endpoint
    if endpoint.endswith("/"):
        endpoint = endpoint[:-1]
    if endpoint.endswith("/v1"):
        return f"{endpoint}{signal_path[3:]}"
    return f"{endpoint}{signal_path}"


def _labels(**values: str) -> dict[str, str]:
    return {key: (value or "").strip() or "unknown" for key, value in values.items()}


def _start_prometheus() -> None:
    try:
        from prometheus_client import Counter, Histogram, start_http_server

        start_http_server(config.PROM_PORT)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Prometheus fallback not started: %s", exc)
        return
    for key, (kind, name, _unit, description, label_names) in _METRIC_SPECS.items():
        factory = Counter if kind == "counter" else Histogram
        _prom_metrics[key] = factory(name, description, list(label_names))
    logger.info("Prometheus fallback metrics server listening on port %s", config.PROM_PORT)


def initialize(app: FastAPI | None = None) -> None:
    global _initialized, _tracer, _fastapi_instrumentor

    if _initialized:
        return
    _initialized = True

    if not config.OTEL_ENABLED:
        logger.info("OpenTelemetry disabled (SESSION_THREADS_OTEL_ENABLED=false)")
        return

    try:
        from opentelemetry import metrics, trace
        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
        from opentelemetry.sdk.metrics import MeterProvider
        from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except ImportError as exc:
        logger.warning("OpenTelemetry dependencies unavailable: %s", exc)
        return

    service_name = config.OTEL_SERVICE_NAME or "session-threads"
    resource = Resource.create({"service.name": service_name, "service.namespace": "session-threads"})

    trace_provider = TracerProvider(resource=resource)
    trace_endpoint = _normalize_otlp_endpoint(config.OTEL_ENDPOINT, "/v1/traces")
    trace_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=trace_endpoint or None)))
    trace.set_tracer_provider(trace_provider)

    metrics_endpoint = _normalize_otlp_endpoint(config.OTEL_ENDPOINT, "/v1/metrics")
    reader = PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=metrics_endpoint or None))
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(meter_provider)
    meter = metrics.get_meter("session_threads")

    for key, (kind, name, unit, description, _label_names) in _METRIC_SPECS.items():
        create = meter.create_counter if kind == "counter" else meter.create_histogram
        _otel_metrics[key] = create(name, unit=unit, description=description)

    _providers[:] = [meter_provider, trace_provider]
    _tracer = trace.get_tracer("session_threads")
    _fastapi_instrumentor = FastAPIInstrumentor()
    if app:
        _fastapi_instrumentor.instrument_app(app)

    if config.PROM_PORT > 0:
        _start_prometheus()

    logger.info("OpenTelemetry initialized (service=%s endpoint=%s)", service_name, config.OTEL_ENDPOINT)


def shutdown(app: FastAPI | None = None) -> None:
    global _tracer
    if app and _fastapi_instrumentor:
        try:
            _fastapi_instrumentor.uninstrument_app(app)
        except Exception as exc:  # noqa: BLE001
            logger.debug("FastAPI uninstrumentation failed: %s", exc)
    for provider in _providers:
        try:
            provider.shutdown()
        except Exception as exc:  # noqa: BLE001
            logger.debug("Telemetry provider shutdown failed: %s", exc)
    _providers.clear()
    _otel_metrics.clear()
    _tracer = None


def _emit(key: str, amount: float, labels: dict[str, str]) -> None:
    kind = _METRIC_SPECS[key][0]
    instrument = _otel_metrics.get(key)
    if instrument is not None:
        if kind == "counter":
            instrument.add(amount, labels)
        else:
            instrument.record(amount, labels)
    prom = _prom_metrics.get(key)
    if prom is not None:
        if kind == "counter":
            prom.labels(**labels).inc(amount)
        else:
            prom.labels(**labels).observe(amount)


@contextmanager
def start_span(name: str, attributes: dict[str, Any] | None = None):
    if _tracer is None:
        yield None
        return
    with _tracer.start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        yield span


def record_scan(operation: str, result: str, duration_ms: float, *, files: int = 0) -> None:
    labels = _labels(operation=operation, result=result)
    _emit("scans", 1, labels)
    _emit("scan_latency", max(0.0, float(duration_ms)), labels)
    if files > 0:
        _emit("files_read", int(files), _labels(operation=operation))


def record_parser_failure(parser: str, *, count: int = 1) -> None:
    if count > 0:
        _emit("parser_failures", int(count), _labels(parser=parser))
