"""
OpenTelemetry (opcional):
- Si TELEMETRY_ENABLED=true y OTEL_EXPORTER_OTLP_ENDPOINT está definido,
  se inicializa la traza básica.
- Sin proveedor configurado, los spans del dispatcher son no-op.
- No se envían PII ni tokens de push; usa atributos genéricos.
"""
import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)


def setup_otel() -> bool:
    enabled = os.getenv("TELEMETRY_ENABLED", "false").lower() == "true"
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")
    if not enabled or not endpoint:
        return False

    try:
        resource = Resource.create({"service.name": "report-notifier"})
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(provider)
    except Exception as e:
        # No romper el servicio si falla OTEL
        logger.warning("No se pudo inicializar OpenTelemetry (%s): %s", endpoint, e)
        return False
    return True
