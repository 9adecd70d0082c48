"""分析结果数据类型。"""

from dataclasses import dataclass, field
from datetime import date


@dataclass
class RecordsResult:
    """聊天记录的基础统计。"""
    total_messages: int
    message_counts: dict[str, int]
    first_date: date
    last_date: date
    active_days: int  # 有消息的天数
    span_days: int  # 首末消息之间的天数（含首尾）
    longest_streak_days: int  # 最长连续聊天天数
    longest_silence_days: int  # 最长未聊天天数


@dataclass
class CompatibilityResult:
    """相性得分。radar_scores 的插入顺序即展示顺序。"""
    radar_scores: dict[str, int]
    overall: int


@dataclass
class ParticipantHabits:
    peak_hour: int
    avg_length: float
    stamp_count: int
    photo_count: int
    favorite_phrases: list[str] = field(default_factory=list)


@dataclass
class HabitsResult:
    by_participant: dict[str, ParticipantHabits]


@dataclass
class ParticipantBehavior:
    avg_reply_minutes: float | None  # 没有回复记录时为 None
    conversation_starts: int
    late_night_ratio: float
    question_ratio: float


@dataclass
class BehaviorResult:
    by_participant: dict[str, ParticipantBehavior]


@dataclass
class ZodiacResult:
    """干支类型诊断。scores 以类型键为键。"""
    animal_type: str
    scores: dict[str, int]


@dataclass
class AnalyticsResult:
    """五项分析结果的汇总，每个事件只生成一次。"""
    self_name: str
    other_name: str
    message_count: int
    records: RecordsResult
    compatibility: CompatibilityResult
    habits: HabitsResult
    behavior: BehaviorResult
    zodiac: ZodiacResult
