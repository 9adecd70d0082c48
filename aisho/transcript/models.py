"""聊天记录数据类型。"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ChatMessage:
    """聊天记录中的一行消息。"""

    timestamp: datetime
    sender: str
    text: str


@dataclass
class Transcript:
    """
    已解析并确定双方身份的聊天记录。

    messages 按时间顺序排列，且每条消息都属于 self_name 或 other_name。
    """

    self_name: str
    other_name: str
    messages: list[ChatMessage] = field(default_factory=list)

    def by(self, sender: str) -> list[ChatMessage]:
        """获取某一方发送的消息。"""
        return [m for m in self.messages if m.sender == sender]

    @property
    def participants(self) -> tuple[str, str]:
        return self.self_name, self.other_name
