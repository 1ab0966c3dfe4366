"""Kernel event matching and surrounding dmesg context."""

from __future__ import annotations

from typing import Iterable

from insight_context.config import (
    KERNEL_WINDOW_S,
    MAX_KERNEL_EVENTS,
    MAX_KERNEL_SURROUNDING,
    TITLE_PREFIX_CHARS,
)
from insight_context.models import InsightCard, KernelEvent, KernelLogEntry, KernelResult


def _event_matches_title(event: KernelEvent, title: str) -> bool:
    return event.type.replace("_", " ") in title or title[:TITLE_PREFIX_CHARS] in event.summary.lower()


def match_kernel_events(insight: InsightCard, events: list[KernelEvent]) -> list[KernelEvent]:
    """Return kernel events related to the insight.

    Falls back to the first few events sharing the insight's severity when no
    event matches the title.
    """
    title = insight.title.lower()
    matching = [event for event in events if _event_matches_title(event, title)]
    if matching:
        return matching
    return [event for event in events if event.severity == insight.severity][:MAX_KERNEL_EVENTS]


def surrounding_entries(
    event: KernelEvent,
    entries: list[KernelLogEntry],
    window_s: float = KERNEL_WINDOW_S,
) -> list[str]:
    """Raw kernel lines within a symmetric window of the event timestamp."""
    start = event.timestamp - window_s
    end = event.timestamp + window_s
    nearby = [entry.raw for entry in entries if start <= entry.timestamp <= end]
    return nearby[:MAX_KERNEL_SURROUNDING]


def dedupe_lines(lines: Iterable[str]) -> list[str]:
    """Drop exact duplicate lines, keeping the first occurrence."""
    return list(dict.fromkeys(lines))


def collect_kernel_evidence(
    insight: InsightCard,
    kernel: KernelResult,
    prior_logs: Iterable[str] = (),
) -> list[str]:
    """Append kernel evidence to ``prior_logs`` and deduplicate the combined lines."""
    lines = list(prior_logs)
    for event in match_kernel_events(insight, kernel.events)[:MAX_KERNEL_EVENTS]:
        lines.extend(entry.raw for entry in event.entries)
        lines.extend(surrounding_entries(event, kernel.entries))
    return dedupe_lines(lines)
