"""OpenTelemetry spans and JSON-lines logs for button actions.

Each press gets one ``asyncbutton.action`` span tagged with the button name
and, once the action settles, its outcome. Transition log lines carry the
button, the new state kind and the transition source so a log file can be
filtered per button.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Generator, Literal

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

TRACER_NAME = "asyncbutton"
ACTION_SPAN = "asyncbutton.action"

Outcome = Literal["success", "error", "discarded", "cancelled"]

logger = logging.getLogger(TRACER_NAME)


class ActionSpan:
    """The span around one wrapped action."""

    def __init__(self, span: trace.Span, button: str) -> None:
        self._span = span
        self.button = button
        self.outcome: Outcome | None = None

    def settle(self, outcome: Outcome, error: BaseException | None = None) -> None:
        self.outcome = outcome
        self._span.set_attribute("button.outcome", outcome)
        if error is not None:
            self._span.record_exception(error)


class Telemetry:
    """Tracer holder shared by a controller and its host."""

    def __init__(self, tracer: trace.Tracer) -> None:
        self._tracer = tracer

    @contextmanager
    def action_span(self, button: str) -> Generator[ActionSpan, None, None]:
        """Open the span for one press of ``button``.

        Exceptions escaping the block are not recorded here; the controller
        records the action's own failure through :meth:`ActionSpan.settle`.
        """
        with self._tracer.start_as_current_span(
            ACTION_SPAN,
            attributes={"button.name": button},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            yield ActionSpan(span, button)

    @contextmanager
    def span(self, name: str, **attributes: str) -> Generator[trace.Span, None, None]:
        """Plain span for host-side operations (e.g. ``tui.override``)."""
        with self._tracer.start_as_current_span(name, attributes=attributes) as span:
            yield span

    def log_transition(self, button: str, previous: str, state: str, source: str) -> None:
        """Log one applied transition with the fields the JSON formatter reads."""
        logger.info(
            "%s %s -> %s (%s)",
            button,
            previous,
            state,
            source,
            extra={"button": button, "state": state, "source": source},
        )

    @classmethod
    def for_testing(cls) -> tuple["Telemetry", InMemorySpanExporter]:
        """Telemetry that keeps finished spans in memory.

        Returns:
            ``(Telemetry, InMemorySpanExporter)``; read the spans back with
            ``exporter.get_finished_spans()``.
        """
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return cls(provider.get_tracer(TRACER_NAME)), exporter

    @classmethod
    def noop(cls) -> "Telemetry":
        """Telemetry whose spans go nowhere."""
        return cls(TracerProvider().get_tracer(TRACER_NAME))


# ---------------------------------------------------------------------------
# File logging
# ---------------------------------------------------------------------------


class _TransitionJsonFormatter(logging.Formatter):
    """One JSON object per line.

    Keys: ``ts``, ``level``, ``logger``, ``button``, ``state``, ``source``,
    ``trace``, ``msg``. ``button``/``state``/``source`` are null on lines
    that are not transitions; ``trace`` is null outside an action span.
    """

    def format(self, record: logging.LogRecord) -> str:
        ctx = trace.get_current_span().get_span_context()
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "button": getattr(record, "button", None),
            "state": getattr(record, "state", None),
            "source": getattr(record, "source", None),
            "trace": format(ctx.trace_id, "032x") if ctx.is_valid else None,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_file_logging(log_dir: str = "logs", level: int = logging.DEBUG) -> str:
    """Send the asyncbutton loggers to a JSON-lines file.

    Creates ``{log_dir}/asyncbutton-YYYYMMDD.log``. The demo owns the
    terminal, so its logs go here instead of stderr.

    Returns:
        The log file path.
    """
    import os
    from datetime import datetime

    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(
        log_dir, f"asyncbutton-{datetime.now().strftime('%Y%m%d')}.log"
    )

    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        return log_path

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(_TransitionJsonFormatter())

    logger.setLevel(level)
    logger.addHandler(handler)
    return log_path
