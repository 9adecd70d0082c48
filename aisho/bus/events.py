"""webhook 入站事件与出站消息类型。"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class InboundEvent:
    """从 LINE webhook 接收的单个事件。"""

    kind: str  # message、follow、unfollow、postback ...
    message_type: str | None = None  # text、file、image ...（仅 message 事件）
    message_id: str | None = None  # 每次投递唯一，但平台重试时会重复
    user_id: str | None = None  # 发送者标识符
    reply_token: str | None = None  # 一次性、短时效
    file_name: str | None = None
    webhook_event_id: str | None = None
    is_redelivery: bool = False

    @property
    def is_file_message(self) -> bool:
        """只有 message/file 事件会进入分析管道。"""
        return self.kind == "message" and self.message_type == "file"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InboundEvent":
        """
        从 LINE webhook 事件 JSON 构建事件。

        参数:
            data: webhook 请求体 events 列表中的一项。

        返回:
            InboundEvent。缺失的字段保留为 None。
        """
        message = data.get("message") or {}
        source = data.get("source") or {}
        delivery = data.get("deliveryContext") or {}
        return cls(
            kind=str(data.get("type", "")),
            message_type=message.get("type"),
            message_id=message.get("id"),
            user_id=source.get("userId"),
            reply_token=data.get("replyToken"),
            file_name=message.get("fileName"),
            webhook_event_id=data.get("webhookEventId"),
            is_redelivery=bool(delivery.get("isRedelivery", False)),
        )


@dataclass
class OutboundMessage:
    """要通过 reply 或 push 发送给用户的消息。"""

    kind: str  # text 或 flex
    text: str = ""
    alt_text: str = ""
    contents: dict[str, Any] = field(default_factory=dict)  # Flex 容器（bubble/carousel）

    @classmethod
    def text_message(cls, text: str) -> "OutboundMessage":
        return cls(kind="text", text=text)

    @classmethod
    def flex_message(cls, alt_text: str, contents: dict[str, Any]) -> "OutboundMessage":
        return cls(kind="flex", alt_text=alt_text, contents=contents)

    def to_dict(self) -> dict[str, Any]:
        """转换为 LINE Messaging API 的消息对象格式。"""
        if self.kind == "text":
            return {"type": "text", "text": self.text}
        if self.kind == "flex":
            return {"type": "flex", "altText": self.alt_text, "contents": self.contents}
        raise ValueError(f"未知的消息类型：{self.kind}")
