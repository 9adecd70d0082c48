"""五项聊天记录分析。"""

from aisho.analytics.models import (
    AnalyticsResult,
    BehaviorResult,
    CompatibilityResult,
    HabitsResult,
    RecordsResult,
    ZodiacResult,
)

__all__ = [
    "AnalyticsResult",
    "BehaviorResult",
    "CompatibilityResult",
    "HabitsResult",
    "RecordsResult",
    "ZodiacResult",
]
