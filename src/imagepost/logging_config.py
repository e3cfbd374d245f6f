# src/imagepost/logging_config.py

import logging
import sys
from typing import Optional

from opentelemetry import trace


class TraceIdFilter(logging.Filter):
    """Logging filter that stamps each record with the active OpenTelemetry
    trace and span ids (`trace_id`, `span_id`).

    Outside of a span both fields are `-`.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        if ctx is not None and ctx.is_valid:
            record.trace_id = format(ctx.trace_id, "032x")
            record.span_id = format(ctx.span_id, "016x")
        else:
            record.trace_id = "-"
            record.span_id = "-"
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that tolerates records which bypassed TraceIdFilter."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "trace_id"):
            record.trace_id = "-"
        if not hasattr(record, "span_id"):
            record.span_id = "-"
        return super().format(record)


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [trace=%(trace_id)s span=%(span_id)s] - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure process-wide logging on stdout.

    Called once at startup. `level` falls back to INFO.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(SafeFormatter(LOG_FORMAT))
    handler.addFilter(TraceIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel((level or "INFO").upper())
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
