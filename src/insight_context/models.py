"""Read-only snapshot records and the assembled insight context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Insight and anomaly severities."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class InsightSource(str, Enum):
    """Known insight source kinds."""

    LOGCAT = "logcat"
    ANR = "anr"
    KERNEL = "kernel"
    CROSS = "cross"


@dataclass(frozen=True)
class InsightCard:
    """One detected issue produced by the upstream analyzer."""

    id: str
    severity: str
    category: str
    title: str
    source: str
    timestamp: str | None = None
    description: str = ""


@dataclass(frozen=True)
class LogEntry:
    """A parsed logcat line."""

    timestamp: str
    level: str
    raw: str
    tag: str = ""
    message: str = ""
    pid: int = 0
    tid: int = 0
    line_number: int = 0


@dataclass(frozen=True)
class LogcatAnomaly:
    type: str
    severity: str
    summary: str
    entries: list[LogEntry] = field(default_factory=list)
    process_name: str | None = None
    pid: int | None = None
    timestamp: str = ""


@dataclass(frozen=True)
class LogcatResult:
    entries: list[LogEntry] = field(default_factory=list)
    anomalies: list[LogcatAnomaly] = field(default_factory=list)


@dataclass(frozen=True)
class KernelLogEntry:
    """A dmesg line; timestamp is seconds since boot."""

    timestamp: float
    raw: str
    level: str = ""
    facility: str = ""
    message: str = ""


@dataclass(frozen=True)
class KernelEvent:
    type: str
    severity: str
    timestamp: float
    summary: str
    entries: list[KernelLogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class KernelResult:
    entries: list[KernelLogEntry] = field(default_factory=list)
    events: list[KernelEvent] = field(default_factory=list)


@dataclass(frozen=True)
class StackFrame:
    raw: str
    class_name: str = ""
    method_name: str = ""
    file_name: str = ""
    line_number: int = 0
    is_native: bool = False


@dataclass(frozen=True)
class LockInfo:
    """A monitor, optionally annotated with the tid holding it."""

    address: str
    class_name: str
    held_by_tid: int | None = None


@dataclass(frozen=True)
class ThreadInfo:
    name: str
    tid: int
    state: str
    stack_frames: list[StackFrame] = field(default_factory=list)
    waiting_on_lock: LockInfo | None = None
    held_locks: list[LockInfo] = field(default_factory=list)
    priority: int = 0
    daemon: bool = False


@dataclass(frozen=True)
class BinderTarget:
    """Remote interface a blocked binder call was waiting on.

    ``thread_name`` and ``thread_state`` are only set for targets suspected on
    threads other than the primary one.
    """

    interface_name: str
    package_name: str
    method: str = ""
    caller_class: str = ""
    caller_method: str = ""
    thread_name: str | None = None
    thread_state: str | None = None


@dataclass(frozen=True)
class ThreadBlockAnalysis:
    thread: ThreadInfo
    block_reason: str = "unknown"
    blocking_chain: list[ThreadInfo] = field(default_factory=list)
    confidence: str = "low"
    binder_target: BinderTarget | None = None
    suspected_binder_targets: list[BinderTarget] = field(default_factory=list)


@dataclass(frozen=True)
class BinderThreadStats:
    total: int = 0
    busy: int = 0
    idle: int = 0
    exhausted: bool = False


@dataclass(frozen=True)
class ANRTraceAnalysis:
    pid: int
    process_name: str
    threads: list[ThreadInfo] = field(default_factory=list)
    main_thread: ThreadBlockAnalysis | None = None
    blocked_thread: ThreadBlockAnalysis | None = None
    subject: str | None = None
    blocked_thread_name: str | None = None
    deadlock_detected: bool = False
    binder_threads: BinderThreadStats = field(default_factory=BinderThreadStats)

    @property
    def primary(self) -> ThreadBlockAnalysis | None:
        """The blocked thread named by the Subject line, else the main thread."""
        if self.blocked_thread is not None:
            return self.blocked_thread
        return self.main_thread

    def find_thread(self, tid: int) -> ThreadInfo | None:
        return next((thread for thread in self.threads if thread.tid == tid), None)


@dataclass(frozen=True)
class HALFamily:
    """A versioned HAL interface grouping, e.g. ``vendor.foo::IFoo``."""

    family_name: str
    highest_version: str
    highest_status: str
    version_count: int
    is_oem: bool = False
    short_name: str = ""
    is_vendor: bool = False


@dataclass(frozen=True)
class HALStatusSummary:
    families: list[HALFamily] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable snapshot of the upstream bugreport analysis."""

    insights: list[InsightCard] = field(default_factory=list)
    logcat: LogcatResult = field(default_factory=LogcatResult)
    kernel: KernelResult = field(default_factory=KernelResult)
    anr_analyses: list[ANRTraceAnalysis] = field(default_factory=list)
    hal_status: HALStatusSummary | None = None


@dataclass(frozen=True)
class InsightContext:
    """Raw evidence gathered for one critical or warning insight."""

    insight_id: str
    anomaly_logs: tuple[str, ...] = ()
    full_stack_trace: str | None = None
    blocking_chain_stacks: tuple[str, ...] = ()
    relevant_threads: tuple[str, ...] = ()
    temporal_context: tuple[str, ...] = ()
