"""Per-source evidence collectors."""

from insight_context.evidence.anr import AnrEvidence, collect_anr_evidence
from insight_context.evidence.kernel import collect_kernel_evidence
from insight_context.evidence.logcat import collect_logcat_evidence

__all__ = ["AnrEvidence", "collect_anr_evidence", "collect_kernel_evidence", "collect_logcat_evidence"]
