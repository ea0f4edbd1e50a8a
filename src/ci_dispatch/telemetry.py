"""OpenTelemetry tracing around dispatch."""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode, TracerProvider

ENABLE_OTEL_VAR = "CI_DISPATCH_ENABLE_OTEL"
TRACER_NAME = "ci_dispatch"


def tracing_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    environ = os.environ if environ is None else environ
    return environ.get(ENABLE_OTEL_VAR, "0") == "1"


@contextmanager
def dispatch_span(
    kind: str,
    *,
    enabled: bool,
    tracer_provider: Optional[TracerProvider] = None,
) -> Iterator[Optional[Span]]:
    """Open a ``ci.dispatch`` span when tracing is enabled, else yield ``None``."""

    if not enabled:
        yield None
        return
    tracer = trace.get_tracer(TRACER_NAME, tracer_provider=tracer_provider)
    with tracer.start_as_current_span(
        "ci.dispatch",
        attributes={"ci.kind": kind, "cicd.pipeline.name": "nightly"},
    ) as span:
        yield span


def record_outcome(span: Optional[Span], returncode: int, command: Optional[str] = None) -> None:
    if span is None:
        return
    if command is not None:
        span.set_attribute("process.command", command)
    span.set_attribute("process.exit_code", returncode)
    if returncode == 0:
        span.set_status(Status(StatusCode.OK))
    else:
        span.set_status(Status(StatusCode.ERROR, description=f"exit status {returncode}"))


__all__ = ["ENABLE_OTEL_VAR", "dispatch_span", "record_outcome", "tracing_enabled"]
