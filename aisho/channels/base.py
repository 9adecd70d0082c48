"""聊天平台客户端的基类接口。"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass

from aisho.bus.events import OutboundMessage

# fetch_content 可以一次性返回全部字节，也可以返回分块流
ContentPayload = bytes | bytearray | AsyncIterable[bytes] | Iterable[bytes]


@dataclass
class UserProfile:
    """平台用户资料（只用到显示名）。"""

    user_id: str
    display_name: str


class PlatformClient(ABC):
    """
    聊天平台客户端的抽象基类。

    管道只通过这四个操作与平台交互。所有操作都可能失败或很慢，
    调用方把它们当作不透明的异步操作处理。
    """

    name: str = "base"

    @abstractmethod
    async def fetch_content(self, message_id: str) -> ContentPayload:
        """
        获取消息附件的原始内容。

        参数:
            message_id: 入站消息的标识符。
        """
        pass

    @abstractmethod
    async def fetch_profile(self, user_id: str) -> UserProfile:
        """获取用户资料。"""
        pass

    @abstractmethod
    async def reply(self, reply_token: str, message: OutboundMessage) -> None:
        """
        使用一次性 reply 令牌回复。

        令牌只在收到事件后的短时间内有效，适合"处理中"之类的即时提示。
        """
        pass

    @abstractmethod
    async def push(self, user_id: str, message: OutboundMessage) -> None:
        """按用户标识符推送消息，可多次使用。"""
        pass

    async def close(self) -> None:
        """释放底层连接。默认无操作。"""
        pass
