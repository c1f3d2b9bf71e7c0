"""Tests for telemetry spans and the @traced decorator."""

from __future__ import annotations

from rulectl.services.result import ServiceResult
from rulectl.services.telemetry import (
    Span,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)


class TestSpan:
    def test_duration_before_finish(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_duration_after_finish(self) -> None:
        span = Span(name="s", started=1.0)
        span.finished = 1.5
        assert span.duration_ms == 500.0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.finish()
        data = span.to_dict()
        assert data["name"] == "root"
        assert "children" not in data
        assert "annotations" not in data

    def test_to_dict_nested(self) -> None:
        root = Span(name="root")
        child = Span(name="child")
        child.annotate("documents", 2)
        root.children.append(child)
        data = root.to_dict()
        assert data["children"][0]["annotations"] == {"documents": 2}


class _Service:
    @traced
    def run(self) -> ServiceResult:
        with trace_span("step") as span:
            if span is not None:
                span.annotate("n", 1)
        return ServiceResult(ok=True, op="run")

    @traced
    def current(self) -> Span | None:
        return get_current_span()


class TestTraced:
    def test_disabled_passthrough(self) -> None:
        result = _Service().run()
        assert result.meta is None

    def test_trace_span_disabled_yields_none(self) -> None:
        with trace_span("orphan") as span:
            assert span is None

    def test_enabled_attaches_telemetry(self) -> None:
        enable_telemetry()
        result = _Service().run()
        assert result.meta is not None
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "_Service.run"
        assert telemetry["children"][0]["name"] == "step"
        assert telemetry["children"][0]["annotations"] == {"n": 1}

    def test_current_span_inside_traced(self) -> None:
        enable_telemetry()
        span = _Service().current()
        assert span is not None
        assert span.name == "_Service.current"

    def test_no_current_span_outside(self) -> None:
        enable_telemetry()
        assert get_current_span() is None
