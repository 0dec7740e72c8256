"""Stage timing for the composite pipeline.

Off unless ``-v``. A :func:`traced` service call opens the root span and
every pipeline stage opens a child with :func:`trace_span`, carrying the
counts it worked on. When a stage rejects the composite, its span records
the error code, so the tree in ``ServiceResult.meta["telemetry"]`` shows
where a build stopped::

    CompositeBuildService.validate  (ok=False, rejected=UNKNOWN_BIND)
        load_plan
        resolve                     (services=2, resolved=2)
        binds                       (rejected=UNKNOWN_BIND)

Finished stages are logged through structlog, so they carry the build
context bound by :func:`~compositectl.config.logging.bind_build_context`.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

import structlog

from compositectl.domain.errors import CompositeError
from compositectl.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("compositectl_telemetry", default=False)
_stage: ContextVar[Span | None] = ContextVar("compositectl_stage", default=None)


@dataclass
class Span:
    """One timed stage and the stages it ran."""

    name: str
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter, repr=False)
    elapsed: float | None = field(default=None, repr=False)

    @property
    def duration_ms(self) -> float:
        return 0.0 if self.elapsed is None else self.elapsed * 1000

    def finish(self) -> None:
        self.elapsed = time.perf_counter() - self.started

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def reject(self, code: str) -> None:
        """Mark this stage as the one that stopped the build."""
        self.annotations["rejected"] = code

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


def _log(span: Span, event: str) -> None:
    structlog.get_logger("compositectl.telemetry").debug(
        event,
        stage=span.name,
        duration_ms=round(span.duration_ms, 2),
        **span.annotations,
    )


@contextmanager
def trace_span(name: str, **annotations: Any) -> Iterator[Span | None]:
    """Time one stage under the running traced call.

    Yields None when telemetry is off or nothing is traced, so callers
    guard their own ``annotate`` calls.
    """
    parent = _stage.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = Span(name, dict(annotations))
    parent.children.append(span)
    token = _stage.set(span)
    try:
        yield span
    except CompositeError as exc:
        span.reject(exc.code)
        raise
    finally:
        span.finish()
        _stage.reset(token)
        _log(span, "stage.complete")


def traced[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Trace a service method and attach its stage tree to ``ServiceResult.meta``."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(func.__qualname__)
        token = _stage.set(root)
        try:
            result = func(*args, **kwargs)
        finally:
            root.finish()
            _stage.reset(token)

        if isinstance(result, ServiceResult):
            root.annotate("ok", result.ok)
            if result.error is not None:
                root.reject(result.error.code)
            if result.warnings:
                root.annotate("warnings", len(result.warnings))
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        _log(root, "operation.complete")
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn stage tracing on for this context (``-v``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
