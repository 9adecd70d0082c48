"""向用户发送消息：reply 用于即时提示，push 用于结果和兜底消息。"""

from loguru import logger

from aisho.bus.events import OutboundMessage
from aisho.channels.base import PlatformClient
from aisho.config.schema import MessagesConfig
from aisho.errors import DeliveryError, FallbackDeliveryError


class DeliveryChannel:
    """
    消息投递。

    最终结果总是使用 push：分析耗时通常超过 reply 令牌的有效期。
    """

    def __init__(self, client: PlatformClient, messages: MessagesConfig | None = None):
        self.client = client
        self.messages = messages or MessagesConfig()

    async def send_processing_notice(self, reply_token: str | None) -> bool:
        """使用 reply 令牌发送"分析中"提示。失败只记录日志。"""
        if not reply_token:
            return False
        try:
            await self.client.reply(reply_token, OutboundMessage.text_message(self.messages.processing))
            return True
        except Exception as e:
            logger.warning(f"发送处理中提示失败：{e}")
            return False

    async def send_apology(self, user_id: str | None, text: str) -> None:
        """
        推送一条兜底消息。

        异常:
            FallbackDeliveryError: 推送失败。调用方只记录日志，不再重试。
        """
        if not user_id:
            raise FallbackDeliveryError("事件没有 userId，无法推送兜底消息")
        try:
            await self.client.push(user_id, OutboundMessage.text_message(text))
        except Exception as e:
            raise FallbackDeliveryError(str(e)) from e
        logger.info(f"已向 {user_id} 发送兜底消息")

    async def deliver_result(self, user_id: str | None, message: OutboundMessage) -> None:
        """
        推送最终结果。

        失败时恰好推送一次"发送失败"提示，然后抛出 DeliveryError；
        提示本身也失败时抛出 FallbackDeliveryError。
        """
        try:
            if not user_id:
                raise ValueError("事件没有 userId")
            await self.client.push(user_id, message)
        except Exception as e:
            logger.error(f"推送结果失败：{e}")
            await self.send_apology(user_id, self.messages.delivery_failed)
            raise DeliveryError(str(e)) from e
        logger.info(f"结果已推送给 {user_id}")
