"""回复间隔等时间相关的共用计算。"""

from statistics import median

from aisho.transcript.models import Transcript

# 超过该间隔视为新的对话
CONVERSATION_GAP_MINUTES = 6 * 60

LATE_NIGHT_HOURS = range(0, 5)


def reply_gaps(transcript: Transcript) -> dict[str, list[float]]:
    """
    计算每一方的回复间隔（分钟）。

    发送者切换时，两条消息之间的间隔计入回复者；超过 CONVERSATION_GAP_MINUTES
    的间隔不算作回复。
    """
    gaps: dict[str, list[float]] = {name: [] for name in transcript.participants}
    previous = None
    for message in transcript.messages:
        if previous is not None and message.sender != previous.sender:
            minutes = (message.timestamp - previous.timestamp).total_seconds() / 60
            if 0 <= minutes < CONVERSATION_GAP_MINUTES:
                gaps[message.sender].append(minutes)
        previous = message
    return gaps


def median_reply_minutes(transcript: Transcript) -> float | None:
    all_gaps = [g for values in reply_gaps(transcript).values() for g in values]
    return median(all_gaps) if all_gaps else None


def conversation_starts(transcript: Transcript) -> dict[str, int]:
    """统计每一方主动开启对话的次数。"""
    starts = {name: 0 for name in transcript.participants}
    previous = None
    for message in transcript.messages:
        if previous is None or (
            (message.timestamp - previous.timestamp).total_seconds() / 60 >= CONVERSATION_GAP_MINUTES
        ):
            starts[message.sender] += 1
        previous = message
    return starts


def late_night_ratio(transcript: Transcript, sender: str | None = None) -> float:
    messages = transcript.by(sender) if sender else transcript.messages
    if not messages:
        return 0.0
    late = sum(1 for m in messages if m.timestamp.hour in LATE_NIGHT_HOURS)
    return late / len(messages)


def clamp_score(value: float) -> int:
    """将得分限制在 0-100 之间并取整。"""
    return int(round(max(0.0, min(100.0, value))))
