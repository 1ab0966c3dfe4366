"""Tests for insight selection, source dispatch and end-to-end assembly."""

from __future__ import annotations

from insight_context.assembler import build_insight_contexts, select_insights
from insight_context.models import (
    AnalysisResult,
    InsightCard,
    KernelEvent,
    KernelLogEntry,
    KernelResult,
    LogcatAnomaly,
    LogcatResult,
    LogEntry,
)


def _make_insight(**overrides) -> InsightCard:
    fields = {
        "id": "insight-1",
        "severity": "critical",
        "category": "anr",
        "title": "ANR in com.test.app",
        "source": "logcat",
    }
    fields.update(overrides)
    return InsightCard(**fields)


def _make_anomaly() -> LogcatAnomaly:
    return LogcatAnomaly(
        type="anr",
        severity="critical",
        summary="ANR in com.test.app",
        entries=[LogEntry(timestamp="01-15 10:00:00.000", level="E", raw="E ActivityManager: ANR in com.test.app")],
        process_name="com.test.app",
    )


def _make_kernel() -> KernelResult:
    entry = KernelLogEntry(timestamp=100, raw="<3>[100] OOM")
    return KernelResult(
        entries=[entry],
        events=[KernelEvent(type="oom_kill", severity="critical", timestamp=100, summary="OOM kill", entries=[entry])],
    )


def test_select_insights_keeps_critical_and_warning_in_order() -> None:
    insights = [
        _make_insight(id="w-1", severity="warning"),
        _make_insight(id="i-1", severity="info"),
        _make_insight(id="c-1", severity="critical"),
    ]

    assert [insight.id for insight in select_insights(insights)] == ["w-1", "c-1"]


def test_info_insights_never_get_context() -> None:
    result = AnalysisResult(insights=[_make_insight(severity="info")])

    assert build_insight_contexts(result) == []


def test_one_context_per_targeted_insight() -> None:
    insights = [
        _make_insight(id="a", severity="critical"),
        _make_insight(id="b", severity="info"),
        _make_insight(id="c", severity="warning", source="kernel"),
    ]

    contexts = build_insight_contexts(AnalysisResult(insights=insights))

    assert [context.insight_id for context in contexts] == ["a", "c"]


def test_logcat_source_collects_anomaly_logs() -> None:
    result = AnalysisResult(
        insights=[_make_insight()],
        logcat=LogcatResult(anomalies=[_make_anomaly()]),
    )

    contexts = build_insight_contexts(result)

    assert contexts[0].anomaly_logs == ("E ActivityManager: ANR in com.test.app",)


def test_kernel_source_collects_kernel_lines() -> None:
    result = AnalysisResult(
        insights=[_make_insight(source="kernel", category="memory", title="OOM Kill detected")],
        logcat=LogcatResult(anomalies=[_make_anomaly()]),
        kernel=_make_kernel(),
    )

    contexts = build_insight_contexts(result)

    assert contexts[0].anomaly_logs == ("<3>[100] OOM",)


def test_cross_source_combines_logcat_and_kernel() -> None:
    result = AnalysisResult(
        insights=[_make_insight(source="cross", category="memory", title="OOM Kill and ANR in com.test.app")],
        logcat=LogcatResult(anomalies=[_make_anomaly()]),
        kernel=_make_kernel(),
    )

    contexts = build_insight_contexts(result)

    assert contexts[0].anomaly_logs == ("E ActivityManager: ANR in com.test.app", "<3>[100] OOM")


def test_unknown_source_yields_empty_bundle() -> None:
    result = AnalysisResult(
        insights=[_make_insight(source="tombstone")],
        logcat=LogcatResult(anomalies=[_make_anomaly()]),
    )

    context = build_insight_contexts(result)[0]

    assert context.anomaly_logs == ()
    assert context.full_stack_trace is None
    assert context.temporal_context == ()


def test_temporal_context_only_for_critical_insights() -> None:
    entries = [LogEntry(timestamp="01-15 10:00:00.500", level="E", raw="E Test: Error near ANR")]
    insights = [
        _make_insight(id="crit", timestamp="01-15 10:00:01.000"),
        _make_insight(id="warn", severity="warning", timestamp="01-15 10:00:01.000"),
        _make_insight(id="no-ts"),
    ]

    contexts = build_insight_contexts(AnalysisResult(insights=insights, logcat=LogcatResult(entries=entries)))

    assert contexts[0].temporal_context == ("E Test: Error near ANR",)
    assert contexts[1].temporal_context == ()
    assert contexts[2].temporal_context == ()


def test_assembly_is_deterministic() -> None:
    result = AnalysisResult(
        insights=[_make_insight(source="cross", title="OOM Kill and ANR in com.test.app")],
        logcat=LogcatResult(anomalies=[_make_anomaly()]),
        kernel=_make_kernel(),
    )

    assert build_insight_contexts(result) == build_insight_contexts(result)
