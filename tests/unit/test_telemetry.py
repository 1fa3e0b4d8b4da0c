"""Telemetry scopes: no-op by default, nested scope paths when enabled."""

import asyncio

import pytest

from structgen.telemetry import InMemoryReporter, TelemetryContext

pytestmark = pytest.mark.unit


@pytest.fixture
def enabled(monkeypatch):
    monkeypatch.setattr("structgen.telemetry._TELEMETRY_ENABLED", True)


class BrokenReporter:
    def record_timing(self, scope, duration, **metadata):
        raise RuntimeError("reporter down")

    def record_metric(self, scope, value, **metadata):
        raise RuntimeError("reporter down")


def test_disabled_context_is_a_shared_no_op(monkeypatch):
    monkeypatch.setattr("structgen.telemetry._TELEMETRY_ENABLED", False)
    reporter = InMemoryReporter()
    tele = TelemetryContext(reporter)

    with tele("anything"):
        tele.count("events")

    assert tele is TelemetryContext()
    assert not reporter.timings
    assert not reporter.metrics


def test_no_reporters_means_no_op(enabled):
    assert TelemetryContext() is TelemetryContext()


def test_nested_scopes_and_counters(enabled):
    reporter = InMemoryReporter()
    tele = TelemetryContext(reporter)

    with tele("operation"):
        with tele("stage"):
            tele.count("repaired")
            tele.metric("chars", 120)

    assert set(reporter.timings) == {"operation", "operation.stage"}
    assert reporter.metrics["operation.stage.repaired"] == [1]
    assert reporter.metrics["operation.stage.chars"] == [120]


@pytest.mark.asyncio
async def test_concurrent_tasks_keep_separate_scope_paths(enabled):
    reporter = InMemoryReporter()
    tele = TelemetryContext(reporter)

    async def stage(name):
        with tele(name):
            await asyncio.sleep(0)
            tele.count("done")

    with tele("run"):
        await asyncio.gather(stage("a"), stage("b"))

    assert reporter.metrics["run.a.done"] == [1]
    assert reporter.metrics["run.b.done"] == [1]


def test_broken_reporter_does_not_break_the_caller(enabled, caplog):
    reporter = InMemoryReporter()
    tele = TelemetryContext(BrokenReporter(), reporter)

    with tele("scope"):
        tele.count("events")

    assert reporter.metrics["scope.events"] == [1]
    assert "reporter down" in caplog.text


def test_empty_scope_name_is_rejected(enabled):
    tele = TelemetryContext(InMemoryReporter())
    with pytest.raises(ValueError, match="non-empty"), tele(""):
        pass


def test_summary_lists_scopes(enabled):
    reporter = InMemoryReporter()
    tele = TelemetryContext(reporter)
    with tele("stage"):
        tele.count("failed", 2)

    summary = reporter.summary()

    assert summary.splitlines()[0] == "=== Telemetry ==="
    assert "stage.failed" in summary
