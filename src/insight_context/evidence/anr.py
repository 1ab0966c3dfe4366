"""ANR blocking-chain reconstruction and thread dumps for insight evidence."""

from __future__ import annotations

from dataclasses import dataclass

from insight_context.config import (
    MAX_RELEVANT_THREADS,
    RELEVANT_THREAD_FRAMES,
    RELEVANT_THREAD_STATES,
)
from insight_context.evidence.logcat import collect_logcat_evidence
from insight_context.models import (
    AnalysisResult,
    ANRTraceAnalysis,
    InsightCard,
    LockInfo,
    StackFrame,
    ThreadInfo,
)

_FRAME_INDENT = "    "


@dataclass(frozen=True)
class AnrEvidence:
    """Evidence gathered from one ANR trace plus corroborating logcat lines."""

    full_stack_trace: str | None = None
    blocking_chain_stacks: tuple[str, ...] = ()
    relevant_threads: tuple[str, ...] = ()
    anomaly_logs: tuple[str, ...] = ()


def find_anr_for_insight(insight: InsightCard, analyses: list[ANRTraceAnalysis]) -> ANRTraceAnalysis | None:
    """Pick the ANR whose process name or pid appears in the insight title.

    Defaults to the first ANR when the title names none of them.
    """
    title = insight.title.lower()
    for anr in analyses:
        if anr.process_name.lower() in title or f"pid {anr.pid}" in title:
            return anr
    return analyses[0] if analyses else None


def _indented_frames(frames: list[StackFrame]) -> str:
    return "\n".join(f"{_FRAME_INDENT}{frame.raw}" for frame in frames)


def _lock_label(lock: LockInfo) -> str:
    return f"{lock.address}({lock.class_name})"


def format_chain_thread(thread: ThreadInfo) -> str:
    """Render one blocking-chain link with its lock state and full stack."""
    lock_info = ""
    waiting = thread.waiting_on_lock
    if waiting is not None:
        lock_info = f"  waiting on lock {waiting.address} ({waiting.class_name})"
        if waiting.held_by_tid is not None:
            lock_info += f" held by tid={waiting.held_by_tid}"

    held_info = ""
    if thread.held_locks:
        held_info = "  holds locks: " + ", ".join(_lock_label(lock) for lock in thread.held_locks)

    header = f'Thread "{thread.name}" tid={thread.tid} ({thread.state}):{lock_info}{held_info}'
    return f"{header}\n{_indented_frames(thread.stack_frames)}"


def format_relevant_thread(thread: ThreadInfo) -> str:
    top_frames = _indented_frames(thread.stack_frames[:RELEVANT_THREAD_FRAMES])
    return f'Thread "{thread.name}" tid={thread.tid} ({thread.state}):\n{top_frames}'


def build_blocking_chain(anr: ANRTraceAnalysis) -> list[str]:
    """Resolve each chain link against the full thread list, skipping unknown tids."""
    primary = anr.primary
    if primary is None:
        return []

    stacks: list[str] = []
    for link in primary.blocking_chain:
        thread = anr.find_thread(link.tid)
        if thread is not None:
            stacks.append(format_chain_thread(thread))
    return stacks


def find_relevant_threads(anr: ANRTraceAnalysis) -> list[ThreadInfo]:
    """Blocked or native threads other than the primary one, in dump order."""
    primary = anr.primary
    primary_tid = primary.thread.tid if primary is not None else None
    relevant = [
        thread
        for thread in anr.threads
        if thread.state in RELEVANT_THREAD_STATES and thread.tid != primary_tid
    ]
    return relevant[:MAX_RELEVANT_THREADS]


def collect_anr_evidence(insight: InsightCard, result: AnalysisResult) -> AnrEvidence:
    """Collect the primary stack, blocking chain, relevant threads and logcat lines."""
    anr = find_anr_for_insight(insight, result.anr_analyses)
    if anr is None:
        return AnrEvidence()

    primary = anr.primary
    full_stack_trace = None
    if primary is not None:
        full_stack_trace = "\n".join(frame.raw for frame in primary.thread.stack_frames)

    return AnrEvidence(
        full_stack_trace=full_stack_trace,
        blocking_chain_stacks=tuple(build_blocking_chain(anr)),
        relevant_threads=tuple(format_relevant_thread(thread) for thread in find_relevant_threads(anr)),
        anomaly_logs=tuple(collect_logcat_evidence(insight, result.logcat.anomalies)),
    )
