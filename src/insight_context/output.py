"""Output shaping for assembled insight contexts."""

from __future__ import annotations

from typing import Any

from insight_context.assembler import assemble_contexts
from insight_context.budget import enforce_token_budget, estimate_chars
from insight_context.config import MAX_TOTAL_CHARS
from insight_context.hal import build_hal_cross_reference
from insight_context.models import AnalysisResult, InsightContext

SCHEMA_VERSION = "0.1.0"


def context_to_dict(context: InsightContext) -> dict[str, Any]:
    """Serialize a context with the key names the prompt builder expects."""
    return {
        "insightId": context.insight_id,
        "anomalyLogs": list(context.anomaly_logs),
        "fullStackTrace": context.full_stack_trace,
        "blockingChainStacks": list(context.blocking_chain_stacks),
        "relevantThreads": list(context.relevant_threads),
        "temporalContext": list(context.temporal_context),
    }


def build_output(result: AnalysisResult, *, include_hal: bool = True) -> dict[str, Any]:
    """Build the JSON payload of budgeted contexts, HAL cross-reference and budget meta."""
    assembled = assemble_contexts(result)
    estimated_before = estimate_chars(assembled)
    contexts = enforce_token_budget(assembled)

    return {
        "schema_version": SCHEMA_VERSION,
        "insight_contexts": [context_to_dict(context) for context in contexts],
        "hal_cross_reference": build_hal_cross_reference(result) if include_hal else [],
        "context_meta": {
            "contexts_included": len(contexts),
            "max_chars": MAX_TOTAL_CHARS,
            "estimated_chars_before": estimated_before,
            "final_chars": estimate_chars(contexts),
            "trimmed": estimated_before > MAX_TOTAL_CHARS,
        },
    }
