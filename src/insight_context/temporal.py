"""Temporal correlation of logcat entries around an insight timestamp."""

from __future__ import annotations

import re

from insight_context.config import MAX_TEMPORAL_ENTRIES, TEMPORAL_LEVELS, TEMPORAL_WINDOW_S
from insight_context.models import InsightCard, LogEntry

_LOGCAT_TS_RE = re.compile(
    r"(?P<month>\d{2})-(?P<day>\d{2})\s+(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})\.(?P<ms>\d{3})"
)


def parse_pseudo_seconds(timestamp: str) -> float | None:
    """Convert an ``MM-DD HH:mm:ss.SSS`` timestamp to monotonic pseudo-seconds.

    Months count as 30 days and the year is ignored, so values are only
    comparable within the same bugreport. Returns None if no timestamp is found.
    """
    match = _LOGCAT_TS_RE.search(timestamp)
    if not match:
        return None

    return (
        int(match.group("month")) * 30 * 86400
        + int(match.group("day")) * 86400
        + int(match.group("hour")) * 3600
        + int(match.group("minute")) * 60
        + int(match.group("second"))
        + int(match.group("ms")) / 1000
    )


def is_within_seconds(ts1: str, ts2: str, seconds: float) -> bool:
    """Return True when both timestamps parse and lie within ``seconds`` of each other."""
    first = parse_pseudo_seconds(ts1)
    second = parse_pseudo_seconds(ts2)
    if first is None or second is None:
        return False
    return abs(first - second) <= seconds


def collect_temporal_context(insight: InsightCard, entries: list[LogEntry]) -> list[str]:
    """Collect W/E/F logcat lines within the temporal window of the insight."""
    if not insight.timestamp:
        return []

    nearby = [
        entry.raw
        for entry in entries
        if entry.level in TEMPORAL_LEVELS
        and is_within_seconds(entry.timestamp, insight.timestamp, TEMPORAL_WINDOW_S)
    ]
    return nearby[:MAX_TEMPORAL_ENTRIES]
