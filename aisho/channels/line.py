"""使用 line-bot-sdk 异步 Messaging API 的 LINE 客户端实现。"""

from typing import Any

from loguru import logger
from linebot.v3.messaging import (
    AsyncApiClient,
    AsyncMessagingApi,
    AsyncMessagingApiBlob,
    Configuration,
    FlexMessage,
    PushMessageRequest,
    ReplyMessageRequest,
    TextMessage,
)

from aisho.bus.events import OutboundMessage
from aisho.channels.base import ContentPayload, PlatformClient, UserProfile
from aisho.config.schema import LineConfig

_SDK_MESSAGE_TYPES = {"text": TextMessage, "flex": FlexMessage}


class LineChannel(PlatformClient):
    """
    LINE Messaging API 客户端。

    SDK 客户端在首次调用时创建，确保 aiohttp 会话绑定到正在运行的事件循环。
    """

    name = "line"

    def __init__(self, config: LineConfig):
        self.config: LineConfig = config
        self._api_client: AsyncApiClient | None = None
        self._api: AsyncMessagingApi | None = None
        self._blob_api: AsyncMessagingApiBlob | None = None

    def _ensure_client(self) -> None:
        if self._api_client is not None:
            return
        if not self.config.channel_access_token:
            logger.warning("LINE 访问令牌未配置，API 调用将会失败")
        configuration = Configuration(access_token=self.config.channel_access_token)
        self._api_client = AsyncApiClient(configuration)
        self._api = AsyncMessagingApi(self._api_client)
        self._blob_api = AsyncMessagingApiBlob(self._api_client)
        logger.info("LINE 客户端已初始化")

    async def fetch_content(self, message_id: str) -> ContentPayload:
        self._ensure_client()
        content = await self._blob_api.get_message_content(message_id)
        return bytes(content)

    async def fetch_profile(self, user_id: str) -> UserProfile:
        self._ensure_client()
        profile = await self._api.get_profile(user_id)
        return UserProfile(user_id=user_id, display_name=profile.display_name)

    async def reply(self, reply_token: str, message: OutboundMessage) -> None:
        self._ensure_client()
        await self._api.reply_message(
            ReplyMessageRequest(reply_token=reply_token, messages=[self._to_sdk(message)])
        )
        logger.debug("LINE reply 已发送")

    async def push(self, user_id: str, message: OutboundMessage) -> None:
        self._ensure_client()
        await self._api.push_message(
            PushMessageRequest(to=user_id, messages=[self._to_sdk(message)])
        )
        logger.debug(f"LINE push 已发送到 {user_id}")

    async def close(self) -> None:
        if self._api_client is not None:
            await self._api_client.close()
            self._api_client = None
            self._api = None
            self._blob_api = None
            logger.info("LINE 客户端已关闭")

    @staticmethod
    def _to_sdk(message: OutboundMessage) -> Any:
        """从 OutboundMessage 的 LINE 消息对象格式构建 SDK 消息模型。"""
        payload = message.to_dict()  # 未知类型在这里抛出 ValueError
        return _SDK_MESSAGE_TYPES[payload["type"]].from_dict(payload)
