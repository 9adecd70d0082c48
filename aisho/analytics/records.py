"""聊天记录的基础统计。"""

from aisho.analytics.models import RecordsResult
from aisho.transcript.models import Transcript


def calc_all(transcript: Transcript) -> RecordsResult:
    """计算消息数、活跃天数、最长连续天数和最长沉默天数。"""
    messages = transcript.messages
    if not messages:
        raise ValueError("聊天记录为空")

    counts = {name: len(transcript.by(name)) for name in transcript.participants}
    days = sorted({m.timestamp.date() for m in messages})

    longest_streak = 1
    longest_silence = 0
    streak = 1
    for prev, cur in zip(days, days[1:]):
        delta = (cur - prev).days
        if delta == 1:
            streak += 1
            longest_streak = max(longest_streak, streak)
        else:
            streak = 1
            longest_silence = max(longest_silence, delta - 1)

    return RecordsResult(
        total_messages=len(messages),
        message_counts=counts,
        first_date=days[0],
        last_date=days[-1],
        active_days=len(days),
        span_days=(days[-1] - days[0]).days + 1,
        longest_streak_days=longest_streak,
        longest_silence_days=longest_silence,
    )
