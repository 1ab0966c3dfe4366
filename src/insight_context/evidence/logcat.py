"""Logcat anomaly matching for insight evidence."""

from __future__ import annotations

from insight_context.config import (
    MAX_ANOMALIES_PER_INSIGHT,
    MAX_ENTRIES_PER_ANOMALY,
    TITLE_PREFIX_CHARS,
)
from insight_context.models import InsightCard, LogcatAnomaly

_CATEGORY_ANOMALY_TYPES: dict[str, tuple[str, ...]] = {
    "anr": ("anr",),
    "crash": ("fatal_exception", "native_crash", "system_server_crash"),
    "memory": ("oom",),
    "performance": ("slow_operation", "binder_timeout", "strict_mode"),
    "stability": ("watchdog", "system_server_crash"),
}


def _anomaly_matches_title(anomaly: LogcatAnomaly, title: str) -> bool:
    if anomaly.type.replace("_", " ") in title:
        return True
    if anomaly.process_name and anomaly.process_name.lower() in title:
        return True
    return title[:TITLE_PREFIX_CHARS] in anomaly.summary.lower()


def find_anomalies_by_category(insight: InsightCard, anomalies: list[LogcatAnomaly]) -> list[LogcatAnomaly]:
    """Fallback selection by the anomaly types typical for the insight category."""
    types = _CATEGORY_ANOMALY_TYPES.get(insight.category, ())
    return [anomaly for anomaly in anomalies if anomaly.type in types]


def match_anomalies(insight: InsightCard, anomalies: list[LogcatAnomaly]) -> list[LogcatAnomaly]:
    """Return anomalies related to the insight, title heuristics first."""
    title = insight.title.lower()
    matching = [anomaly for anomaly in anomalies if _anomaly_matches_title(anomaly, title)]
    if matching:
        return matching
    return find_anomalies_by_category(insight, anomalies)


def collect_logcat_evidence(insight: InsightCard, anomalies: list[LogcatAnomaly]) -> list[str]:
    """Collect raw log lines from the first few anomalies matching the insight."""
    lines: list[str] = []
    for anomaly in match_anomalies(insight, anomalies)[:MAX_ANOMALIES_PER_INSIGHT]:
        lines.extend(entry.raw for entry in anomaly.entries[:MAX_ENTRIES_PER_ANOMALY])
    return lines
