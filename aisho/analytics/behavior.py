"""聊天行为分析（异步协作者）。"""

from aisho.analytics.models import BehaviorResult, ParticipantBehavior
from aisho.analytics.timing import conversation_starts, late_night_ratio, reply_gaps
from aisho.transcript.models import Transcript


async def calc_all(transcript: Transcript) -> BehaviorResult:
    """计算平均回复时间、主动开启对话次数、深夜消息比例和提问比例。"""
    gaps = reply_gaps(transcript)
    starts = conversation_starts(transcript)

    result: dict[str, ParticipantBehavior] = {}
    for name in transcript.participants:
        messages = transcript.by(name)
        questions = sum(1 for m in messages if "?" in m.text or "？" in m.text)
        result[name] = ParticipantBehavior(
            avg_reply_minutes=round(sum(gaps[name]) / len(gaps[name]), 1) if gaps[name] else None,
            conversation_starts=starts[name],
            late_night_ratio=round(late_night_ratio(transcript, name), 3),
            question_ratio=round(questions / len(messages), 3) if messages else 0.0,
        )
    return BehaviorResult(by_participant=result)
