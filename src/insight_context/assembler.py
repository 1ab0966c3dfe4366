"""Per-insight context assembly."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Callable

from insight_context.budget import enforce_token_budget
from insight_context.config import TARGET_SEVERITIES
from insight_context.evidence import collect_anr_evidence, collect_kernel_evidence, collect_logcat_evidence
from insight_context.models import AnalysisResult, InsightCard, InsightContext, InsightSource, Severity
from insight_context.temporal import collect_temporal_context

logger = logging.getLogger(__name__)


def select_insights(insights: list[InsightCard]) -> list[InsightCard]:
    """Keep critical and warning insights in their original order."""
    return [insight for insight in insights if insight.severity in TARGET_SEVERITIES]


def _logcat_context(insight: InsightCard, result: AnalysisResult) -> InsightContext:
    return InsightContext(
        insight_id=insight.id,
        anomaly_logs=tuple(collect_logcat_evidence(insight, result.logcat.anomalies)),
    )


def _kernel_context(insight: InsightCard, result: AnalysisResult) -> InsightContext:
    return InsightContext(
        insight_id=insight.id,
        anomaly_logs=tuple(collect_kernel_evidence(insight, result.kernel)),
    )


def _anr_context(insight: InsightCard, result: AnalysisResult) -> InsightContext:
    evidence = collect_anr_evidence(insight, result)
    return InsightContext(
        insight_id=insight.id,
        anomaly_logs=evidence.anomaly_logs,
        full_stack_trace=evidence.full_stack_trace,
        blocking_chain_stacks=evidence.blocking_chain_stacks,
        relevant_threads=evidence.relevant_threads,
    )


def _cross_context(insight: InsightCard, result: AnalysisResult) -> InsightContext:
    logcat_lines = collect_logcat_evidence(insight, result.logcat.anomalies)
    return InsightContext(
        insight_id=insight.id,
        anomaly_logs=tuple(collect_kernel_evidence(insight, result.kernel, prior_logs=logcat_lines)),
    )


_COLLECTORS: dict[str, Callable[[InsightCard, AnalysisResult], InsightContext]] = {
    InsightSource.LOGCAT.value: _logcat_context,
    InsightSource.ANR.value: _anr_context,
    InsightSource.KERNEL.value: _kernel_context,
    InsightSource.CROSS.value: _cross_context,
}


def build_insight_context(insight: InsightCard, result: AnalysisResult) -> InsightContext:
    """Assemble the unbudgeted evidence bundle for a single insight."""
    collector = _COLLECTORS.get(insight.source)
    if collector is None:
        logger.debug("No evidence collector for source %r (insight %s)", insight.source, insight.id)
        context = InsightContext(insight_id=insight.id)
    else:
        context = collector(insight, result)

    if insight.severity == Severity.CRITICAL.value and insight.timestamp:
        temporal = collect_temporal_context(insight, result.logcat.entries)
        context = replace(context, temporal_context=tuple(temporal))

    logger.debug(
        "Insight %s (%s): %d anomaly lines, %d chain blocks, %d relevant threads, %d temporal lines",
        insight.id,
        insight.source,
        len(context.anomaly_logs),
        len(context.blocking_chain_stacks),
        len(context.relevant_threads),
        len(context.temporal_context),
    )
    return context


def assemble_contexts(result: AnalysisResult) -> list[InsightContext]:
    """Build one context per targeted insight without applying the budget."""
    return [build_insight_context(insight, result) for insight in select_insights(result.insights)]


def build_insight_contexts(result: AnalysisResult) -> list[InsightContext]:
    """Build budget-bounded contexts for every critical and warning insight."""
    return enforce_token_budget(assemble_contexts(result))
