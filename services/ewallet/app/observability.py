from __future__ import annotations

import time
import uuid
from collections.abc import Callable

import structlog
from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from sqlalchemy.ext.asyncio import AsyncEngine


REGISTRY = CollectorRegistry()
ProcessCollector(registry=REGISTRY)
PlatformCollector(registry=REGISTRY)
GCCollector(registry=REGISTRY)

REQUEST_LATENCY = Histogram(
    "ewallet_request_latency_ms",
    "API request latency in milliseconds",
    ["service", "endpoint"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000),
    registry=REGISTRY,
)
# Failed calls still answer 200 with an error envelope, so failures are counted by error code.
API_ERROR_TOTAL = Counter("ewallet_api_error_total", "Error envelopes returned", ["code"], registry=REGISTRY)
AUTH_FAILURE_TOTAL = Counter(
    "ewallet_auth_failure_total", "Rejected authorization headers", ["code"], registry=REGISTRY
)
MINT_TOTAL = Counter("ewallet_mint_total", "Mints processed", ["status"], registry=REGISTRY)
TRANSFER_TOTAL = Counter("ewallet_transfer_total", "Transfers processed", ["status"], registry=REGISTRY)

REQUEST_ID_HEADER = "x-request-id"


def setup_tracing(app: FastAPI, service_name: str) -> None:
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)


def instrument_sqlalchemy(*engines: AsyncEngine) -> None:
    # The instrumentor is a singleton; a second instrument() call is ignored, so pass every engine at once.
    SQLAlchemyInstrumentor().instrument(engines=[engine.sync_engine for engine in engines])


def add_metrics_middleware(app: FastAPI, service_name: str) -> None:
    @app.middleware("http")
    async def _metrics(request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        # The endpoint is the last path segment, e.g. "me.transfer".
        endpoint = request.url.path.rsplit("/", 1)[-1] or "root"
        start = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id, endpoint=endpoint):
            resp = await call_next(request)
        REQUEST_LATENCY.labels(service_name, endpoint).observe((time.perf_counter() - start) * 1000)
        resp.headers[REQUEST_ID_HEADER] = request_id
        return resp

    @app.get("/metrics")
    async def metrics() -> Response:
        return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
