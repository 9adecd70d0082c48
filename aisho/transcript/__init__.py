"""聊天记录解析模块。"""

from aisho.transcript.models import ChatMessage, Transcript
from aisho.transcript.parser import parse_talk_history
from aisho.transcript.participants import extract_participants

__all__ = ["ChatMessage", "Transcript", "parse_talk_history", "extract_participants"]
