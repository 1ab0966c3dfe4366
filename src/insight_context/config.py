"""Fixed budget and evidence caps for insight context assembly."""

MAX_TOTAL_TOKENS: int = 60_000
CHARS_PER_TOKEN: float = 3.5
MAX_TOTAL_CHARS: float = MAX_TOTAL_TOKENS * CHARS_PER_TOKEN

TARGET_SEVERITIES: frozenset[str] = frozenset({"critical", "warning"})

# Logcat evidence
MAX_ANOMALIES_PER_INSIGHT: int = 3
MAX_ENTRIES_PER_ANOMALY: int = 15
TITLE_PREFIX_CHARS: int = 30

# Kernel evidence
MAX_KERNEL_EVENTS: int = 3
KERNEL_WINDOW_S: float = 5
MAX_KERNEL_SURROUNDING: int = 20

# ANR evidence
RELEVANT_THREAD_STATES: frozenset[str] = frozenset({"Blocked", "Native"})
MAX_RELEVANT_THREADS: int = 10
RELEVANT_THREAD_FRAMES: int = 5

# Temporal correlation
TEMPORAL_LEVELS: frozenset[str] = frozenset({"W", "E", "F"})
TEMPORAL_WINDOW_S: float = 2
MAX_TEMPORAL_ENTRIES: int = 20

# Budget trimming caps, applied in this order
TRIM_TEMPORAL_TO: int = 10
TRIM_RELEVANT_THREADS_TO: int = 5
TRIM_ANOMALY_LOGS_TO: int = 10
TRIM_BLOCKING_CHAIN_TO: int = 3
