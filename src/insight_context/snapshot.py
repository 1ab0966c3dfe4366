"""Loading of upstream AnalysisResult snapshots into read-only records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from insight_context.models import (
    AnalysisResult,
    ANRTraceAnalysis,
    BinderTarget,
    BinderThreadStats,
    HALFamily,
    HALStatusSummary,
    InsightCard,
    KernelEvent,
    KernelLogEntry,
    KernelResult,
    LockInfo,
    LogcatAnomaly,
    LogcatResult,
    LogEntry,
    StackFrame,
    ThreadBlockAnalysis,
    ThreadInfo,
)
from insight_context.schemas.validate import ContractViolation, validate_snapshot

logger = logging.getLogger(__name__)


def _insight(raw: dict[str, Any]) -> InsightCard:
    return InsightCard(
        id=raw["id"],
        severity=raw["severity"],
        category=raw["category"],
        title=raw["title"],
        source=raw["source"],
        timestamp=raw.get("timestamp"),
        description=raw.get("description", ""),
    )


def _log_entry(raw: dict[str, Any]) -> LogEntry:
    return LogEntry(
        timestamp=raw["timestamp"],
        level=raw["level"],
        raw=raw["raw"],
        tag=raw.get("tag", ""),
        message=raw.get("message", ""),
        pid=raw.get("pid", 0),
        tid=raw.get("tid", 0),
        line_number=raw.get("lineNumber", 0),
    )


def _anomaly(raw: dict[str, Any]) -> LogcatAnomaly:
    return LogcatAnomaly(
        type=raw["type"],
        severity=raw["severity"],
        summary=raw["summary"],
        entries=[_log_entry(entry) for entry in raw["entries"]],
        process_name=raw.get("processName"),
        pid=raw.get("pid"),
        timestamp=raw.get("timestamp", ""),
    )


def _kernel_entry(raw: dict[str, Any]) -> KernelLogEntry:
    return KernelLogEntry(
        timestamp=float(raw["timestamp"]),
        raw=raw["raw"],
        level=raw.get("level", ""),
        facility=raw.get("facility", ""),
        message=raw.get("message", ""),
    )


def _kernel_event(raw: dict[str, Any]) -> KernelEvent:
    return KernelEvent(
        type=raw["type"],
        severity=raw["severity"],
        timestamp=float(raw["timestamp"]),
        summary=raw["summary"],
        entries=[_kernel_entry(entry) for entry in raw["entries"]],
    )


def _lock(raw: dict[str, Any] | None) -> LockInfo | None:
    if raw is None:
        return None
    return LockInfo(address=raw["address"], class_name=raw["className"], held_by_tid=raw.get("heldByTid"))


def _thread(raw: dict[str, Any]) -> ThreadInfo:
    return ThreadInfo(
        name=raw.get("name", ""),
        tid=raw["tid"],
        state=raw.get("state", "Unknown"),
        stack_frames=[
            StackFrame(
                raw=frame["raw"],
                class_name=frame.get("className", ""),
                method_name=frame.get("methodName", ""),
                file_name=frame.get("fileName", ""),
                line_number=frame.get("lineNumber", 0),
                is_native=frame.get("isNative", False),
            )
            for frame in raw.get("stackFrames", [])
        ],
        waiting_on_lock=_lock(raw.get("waitingOnLock")),
        held_locks=[_lock(lock) for lock in raw.get("heldLocks", [])],
        priority=raw.get("priority", 0),
        daemon=raw.get("daemon", False),
    )


def _binder_target(raw: dict[str, Any] | None) -> BinderTarget | None:
    if raw is None:
        return None
    return BinderTarget(
        interface_name=raw["interfaceName"],
        package_name=raw["packageName"],
        method=raw.get("method", ""),
        caller_class=raw.get("callerClass", ""),
        caller_method=raw.get("callerMethod", ""),
        thread_name=raw.get("threadName"),
        thread_state=raw.get("threadState"),
    )


def _block_analysis(raw: dict[str, Any] | None) -> ThreadBlockAnalysis | None:
    if raw is None:
        return None
    return ThreadBlockAnalysis(
        thread=_thread(raw["thread"]),
        block_reason=raw.get("blockReason", "unknown"),
        blocking_chain=[_thread(link) for link in raw.get("blockingChain", [])],
        confidence=raw.get("confidence", "low"),
        binder_target=_binder_target(raw.get("binderTarget")),
        suspected_binder_targets=[_binder_target(target) for target in raw.get("suspectedBinderTargets") or []],
    )


def _anr(raw: dict[str, Any]) -> ANRTraceAnalysis:
    binder = raw.get("binderThreads") or {}
    return ANRTraceAnalysis(
        pid=raw["pid"],
        process_name=raw["processName"],
        threads=[_thread(thread) for thread in raw["threads"]],
        main_thread=_block_analysis(raw.get("mainThread")),
        blocked_thread=_block_analysis(raw.get("blockedThread")),
        subject=raw.get("subject"),
        blocked_thread_name=raw.get("blockedThreadName"),
        deadlock_detected=bool((raw.get("deadlocks") or {}).get("detected", False)),
        binder_threads=BinderThreadStats(
            total=binder.get("total", 0),
            busy=binder.get("busy", 0),
            idle=binder.get("idle", 0),
            exhausted=binder.get("exhausted", False),
        ),
    )


def _hal_status(raw: dict[str, Any] | None) -> HALStatusSummary | None:
    if raw is None:
        return None
    return HALStatusSummary(
        families=[
            HALFamily(
                family_name=family["familyName"],
                highest_version=family["highestVersion"],
                highest_status=family["highestStatus"],
                version_count=family["versionCount"],
                is_oem=family.get("isOem", False),
                short_name=family.get("shortName", ""),
                is_vendor=family.get("isVendor", False),
            )
            for family in raw["families"]
        ]
    )


def parse_snapshot(data: Any, *, validate: bool = True) -> AnalysisResult:
    """Convert the upstream camelCase snapshot into an AnalysisResult.

    Raises:
        ContractViolation: If the snapshot is structurally invalid.
    """
    if validate:
        validate_snapshot(data)
    if not isinstance(data, dict):
        raise ContractViolation("Snapshot must be a mapping")

    try:
        return AnalysisResult(
            insights=[_insight(insight) for insight in data["insights"]],
            logcat=LogcatResult(
                entries=[_log_entry(entry) for entry in data["logcatResult"]["entries"]],
                anomalies=[_anomaly(anomaly) for anomaly in data["logcatResult"]["anomalies"]],
            ),
            kernel=KernelResult(
                entries=[_kernel_entry(entry) for entry in data["kernelResult"]["entries"]],
                events=[_kernel_event(event) for event in data["kernelResult"]["events"]],
            ),
            anr_analyses=[_anr(anr) for anr in data["anrAnalyses"]],
            hal_status=_hal_status(data.get("halStatus")),
        )
    except KeyError as exc:
        raise ContractViolation(f"Snapshot is missing required key: {exc.args[0]}") from exc
    except (TypeError, ValueError, AttributeError) as exc:
        raise ContractViolation(f"Snapshot has an invalid value: {exc}") from exc


def load_snapshot(path: str, *, validate: bool = True) -> AnalysisResult:
    """Load a JSON or YAML snapshot file."""
    snapshot_path = Path(path)
    raw = snapshot_path.read_text(encoding="utf-8")

    try:
        if snapshot_path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ContractViolation(f"Snapshot {snapshot_path} is not valid JSON/YAML: {exc}") from exc

    logger.debug("Loaded snapshot %s", snapshot_path)
    return parse_snapshot(data, validate=validate)
