"""
OpenTelemetry wiring

Spans come from FastAPI and SQLAlchemy auto-instrumentation. They are exported over
OTLP when OTEL_EXPORTER_OTLP_ENDPOINT is set and to stdout when OTEL_CONSOLE_EXPORT
is true; with neither, the provider records nothing outward.
"""

import os
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON


def _env_flag(name: str) -> bool:
    return os.getenv(name, 'false').lower() == 'true'


class TracingConfig:
    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
        self.enable_console = enable_console or _env_flag('OTEL_CONSOLE_EXPORT')
        self._provider: TracerProvider | None = None

    def exporters(self) -> list[SpanExporter]:
        selected: list[SpanExporter] = []
        if self.otlp_endpoint:
            selected.append(OTLPSpanExporter(endpoint=self.otlp_endpoint))
        if self.enable_console:
            selected.append(ConsoleSpanExporter())
        return selected

    def setup(self) -> None:
        """Install the process-wide tracer provider; called once from the lifespan."""
        provider = TracerProvider(
            resource=Resource(attributes={SERVICE_NAME: self.service_name}),
            sampler=ALWAYS_ON,
        )
        for exporter in self.exporters():
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        self._provider = provider

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # AsyncEngine only proxies; the listeners attach to its sync engine
        target = getattr(engine, 'sync_engine', engine)
        SQLAlchemyInstrumentor().instrument(engine=target)

    def shutdown(self) -> None:
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None
