"""Budget-bounded evidence assembly for Android bugreport insights."""

from insight_context.assembler import build_insight_contexts, select_insights
from insight_context.hal import build_hal_cross_reference
from insight_context.models import AnalysisResult, InsightContext
from insight_context.version import __version__

__all__ = [
    "AnalysisResult",
    "InsightContext",
    "__version__",
    "build_hal_cross_reference",
    "build_insight_contexts",
    "select_insights",
]
