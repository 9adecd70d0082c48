"""相性得分计算。"""

import math
import re
from collections import Counter
from statistics import median

from aisho.analytics.models import CompatibilityResult, RecordsResult
from aisho.analytics.timing import clamp_score, reply_gaps
from aisho.transcript.models import Transcript

# 雷达图类别，顺序即展示顺序
RADAR_CATEGORIES = ("time", "balance", "tempo", "type", "words")

# 图片、贴图等系统占位文本，不参与用词比较
_PLACEHOLDER_RE = re.compile(r"^\[[^\]]+\]$")

_TOP_BIGRAMS = 50


def _hour_distribution(transcript: Transcript, sender: str) -> list[float]:
    hours = [0] * 24
    for m in transcript.by(sender):
        hours[m.timestamp.hour] += 1
    total = sum(hours) or 1
    return [h / total for h in hours]


def _time_score(transcript: Transcript) -> int:
    a, b = (_hour_distribution(transcript, name) for name in transcript.participants)
    return clamp_score(sum(min(x, y) for x, y in zip(a, b)) * 100)


def _balance_score(records: RecordsResult, self_name: str) -> int:
    share = records.message_counts.get(self_name, 0) / max(records.total_messages, 1)
    return clamp_score(100 - abs(share - 0.5) * 200)


def _tempo_score(transcript: Transcript) -> int:
    gaps = reply_gaps(transcript)
    medians = [median(values) for values in gaps.values() if values]
    if not medians:
        return 50
    speed = 100 - 12 * math.log2(1 + median(medians))
    if len(medians) == 2 and max(medians) > 0:
        similarity = min(medians) / max(medians) * 100
    else:
        similarity = 100
    return clamp_score(speed * 0.7 + similarity * 0.3)


def _type_score(transcript: Transcript) -> int:
    averages = []
    for name in transcript.participants:
        texts = [m.text for m in transcript.by(name) if not _PLACEHOLDER_RE.match(m.text)]
        averages.append(sum(len(t) for t in texts) / len(texts) if texts else 0)
    if max(averages) == 0:
        return 50
    return clamp_score(min(averages) / max(averages) * 100)


def _bigrams(transcript: Transcript, sender: str) -> set[str]:
    counter: Counter[str] = Counter()
    for m in transcript.by(sender):
        if _PLACEHOLDER_RE.match(m.text):
            continue
        compact = "".join(m.text.split())
        counter.update(compact[i:i + 2] for i in range(len(compact) - 1))
    return {gram for gram, _ in counter.most_common(_TOP_BIGRAMS)}


def _words_score(transcript: Transcript) -> int:
    a, b = (_bigrams(transcript, name) for name in transcript.participants)
    if not a or not b:
        return 50
    jaccard = len(a & b) / len(a | b)
    return clamp_score(jaccard * 200)


def calc_all(transcript: Transcript, records: RecordsResult) -> CompatibilityResult:
    """
    计算五个类别的相性得分和综合得分。

    综合得分为雷达图平均分，并按聊天的持续性（活跃天数 / 跨度天数）微调。
    """
    radar = {
        "time": _time_score(transcript),
        "balance": _balance_score(records, transcript.self_name),
        "tempo": _tempo_score(transcript),
        "type": _type_score(transcript),
        "words": _words_score(transcript),
    }
    continuity = records.active_days / max(records.span_days, 1) * 100
    mean = sum(radar.values()) / len(radar)
    overall = clamp_score(mean * 0.9 + continuity * 0.1)
    return CompatibilityResult(radar_scores=radar, overall=overall)
