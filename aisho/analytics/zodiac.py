"""
干支类型诊断。

把两人的聊天特征归一化为五维向量（活跃度、回复速度、消息长度、深夜比例、平衡度），
与十二干支的原型向量比较，距离越近得分越高。
"""

import math

from aisho.analytics.models import RecordsResult, ZodiacResult
from aisho.analytics.timing import clamp_score, late_night_ratio, median_reply_minutes
from aisho.transcript.models import Transcript

# (活跃度, 回复速度, 消息长度, 深夜比例, 平衡度)
ANIMAL_PROFILES: dict[str, tuple[float, float, float, float, float]] = {
    "ne": (0.8, 0.9, 0.3, 0.4, 0.6),
    "ushi": (0.3, 0.3, 0.7, 0.1, 0.8),
    "tora": (0.7, 0.8, 0.6, 0.3, 0.3),
    "u": (0.5, 0.6, 0.4, 0.2, 0.9),
    "tatsu": (0.9, 0.5, 0.8, 0.5, 0.4),
    "mi": (0.4, 0.4, 0.6, 0.7, 0.5),
    "uma": (0.9, 0.9, 0.5, 0.2, 0.5),
    "hitsuji": (0.4, 0.5, 0.5, 0.2, 1.0),
    "saru": (0.8, 0.8, 0.2, 0.5, 0.7),
    "tori": (0.6, 0.7, 0.7, 0.1, 0.6),
    "inu": (0.6, 0.6, 0.4, 0.3, 0.9),
    "i": (0.7, 0.9, 0.2, 0.6, 0.2),
}

_MAX_DISTANCE = math.sqrt(5)


def _features(transcript: Transcript, records: RecordsResult) -> tuple[float, float, float, float, float]:
    per_day = records.total_messages / max(records.active_days, 1)
    activity = min(1.0, per_day / 100)

    median_gap = median_reply_minutes(transcript)
    speed = 0.5 if median_gap is None else 1 - min(1.0, median_gap / 60)

    lengths = [len(m.text) for m in transcript.messages]
    length = min(1.0, (sum(lengths) / len(lengths)) / 40) if lengths else 0.0

    night = late_night_ratio(transcript)

    share = records.message_counts.get(transcript.self_name, 0) / max(records.total_messages, 1)
    balance = 1 - abs(share - 0.5) * 2

    return activity, speed, length, night, balance


def calc_type_scores(transcript: Transcript, records: RecordsResult) -> ZodiacResult:
    """计算每个干支类型的得分，得分最高者为诊断结果（平分时取先出现者）。"""
    features = _features(transcript, records)
    scores = {
        animal: clamp_score(100 - math.dist(features, profile) / _MAX_DISTANCE * 100)
        for animal, profile in ANIMAL_PROFILES.items()
    }
    animal_type = max(scores, key=scores.__getitem__)
    return ZodiacResult(animal_type=animal_type, scores=scores)
