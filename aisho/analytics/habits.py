"""聊天习惯统计。"""

from collections import Counter

from aisho.analytics.models import HabitsResult, ParticipantHabits
from aisho.transcript.models import Transcript

STAMP_MARKERS = ("[スタンプ]", "[Sticker]")
PHOTO_MARKERS = ("[写真]", "[Photo]")

_MAX_PHRASE_LENGTH = 10


def _habits_for(transcript: Transcript, sender: str) -> ParticipantHabits:
    messages = transcript.by(sender)
    hours = Counter(m.timestamp.hour for m in messages)
    texts = [m.text for m in messages if m.text not in STAMP_MARKERS + PHOTO_MARKERS]
    phrases = Counter(t.strip() for t in texts if 0 < len(t.strip()) <= _MAX_PHRASE_LENGTH)
    return ParticipantHabits(
        peak_hour=hours.most_common(1)[0][0] if hours else 0,
        avg_length=round(sum(len(t) for t in texts) / len(texts), 1) if texts else 0.0,
        stamp_count=sum(1 for m in messages if m.text in STAMP_MARKERS),
        photo_count=sum(1 for m in messages if m.text in PHOTO_MARKERS),
        favorite_phrases=[p for p, _ in phrases.most_common(3)],
    )


def calc_all(transcript: Transcript) -> HabitsResult:
    return HabitsResult(
        by_participant={name: _habits_for(transcript, name) for name in transcript.participants}
    )
