"""Global character budget enforcement across assembled insight contexts."""

from __future__ import annotations

from dataclasses import replace
import logging

from insight_context.config import (
    MAX_TOTAL_CHARS,
    TRIM_ANOMALY_LOGS_TO,
    TRIM_BLOCKING_CHAIN_TO,
    TRIM_RELEVANT_THREADS_TO,
    TRIM_TEMPORAL_TO,
)
from insight_context.models import InsightContext

logger = logging.getLogger(__name__)

# Cheapest evidence first; the primary stack trace is never trimmed.
_TRIM_PASSES: tuple[tuple[str, int], ...] = (
    ("temporal_context", TRIM_TEMPORAL_TO),
    ("relevant_threads", TRIM_RELEVANT_THREADS_TO),
    ("anomaly_logs", TRIM_ANOMALY_LOGS_TO),
    ("blocking_chain_stacks", TRIM_BLOCKING_CHAIN_TO),
)


def context_chars(context: InsightContext) -> int:
    """Estimated character size of a single context."""
    return (
        len("".join(context.anomaly_logs))
        + len(context.full_stack_trace or "")
        + len("".join(context.blocking_chain_stacks))
        + len("".join(context.relevant_threads))
        + len("".join(context.temporal_context))
    )


def estimate_chars(contexts: list[InsightContext]) -> int:
    return sum(context_chars(context) for context in contexts)


def trim_pass(
    contexts: list[InsightContext],
    field_name: str,
    cap: int,
    max_chars: float,
) -> tuple[list[InsightContext], int]:
    """Cap one list field context by context until the total fits.

    Returns the new context list and its estimated size.
    """
    trimmed = list(contexts)
    total = estimate_chars(trimmed)

    for idx, context in enumerate(trimmed):
        if total <= max_chars:
            break

        values = getattr(context, field_name)
        if len(values) <= cap:
            continue

        shortened = replace(context, **{field_name: values[:cap]})
        total += context_chars(shortened) - context_chars(context)
        trimmed[idx] = shortened
        logger.debug("Trimmed %s of %s from %d to %d entries", field_name, context.insight_id, len(values), cap)

    return trimmed, total


def enforce_token_budget(
    contexts: list[InsightContext],
    max_chars: float = MAX_TOTAL_CHARS,
) -> list[InsightContext]:
    """Return contexts trimmed in fixed priority order until they fit ``max_chars``."""
    total = estimate_chars(contexts)
    if total <= max_chars:
        return list(contexts)

    logger.debug("Context estimate %d chars exceeds budget %d; trimming", total, max_chars)
    trimmed = list(contexts)
    for field_name, cap in _TRIM_PASSES:
        if total <= max_chars:
            break
        trimmed, total = trim_pass(trimmed, field_name, cap, max_chars)

    if total > max_chars:
        logger.info("Context estimate %d chars still exceeds budget %d after all trimming passes", total, max_chars)
    return trimmed
