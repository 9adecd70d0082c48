"""单个文件事件的处理流程。"""

import time

from loguru import logger

from aisho.bus.events import InboundEvent
from aisho.channels.base import PlatformClient
from aisho.compose.composer import ResponseComposer
from aisho.config.schema import MessagesConfig
from aisho.errors import DeliveryError, FallbackDeliveryError, FetchError, ParseError
from aisho.pipeline.delivery import DeliveryChannel
from aisho.pipeline.facade import TranscriptPipeline
from aisho.pipeline.fetcher import ContentFetcher
from aisho.utils.helpers import format_duration


class EventPipeline:
    """
    处理一个文件事件：处理中提示 → 获取附件 → 获取资料 → 分析 → 组装 → 推送。

    用户最终一定会收到结果或一条说明失败阶段的消息。handle() 从不抛出异常，
    同一请求中其他事件的处理不受影响。
    """

    def __init__(
        self,
        client: PlatformClient,
        fetcher: ContentFetcher,
        facade: TranscriptPipeline,
        composer: ResponseComposer,
        delivery: DeliveryChannel,
        messages: MessagesConfig | None = None,
        send_processing_notice: bool = True,
    ):
        self.client = client
        self.fetcher = fetcher
        self.facade = facade
        self.composer = composer
        self.delivery = delivery
        self.messages = messages or MessagesConfig()
        self.send_processing_notice = send_processing_notice

    async def handle(self, event: InboundEvent) -> None:
        logger.info(f"处理文件事件：{event.message_id}（{event.file_name or '无文件名'}）")
        try:
            await self._run(event)
        except DeliveryError as e:
            logger.error(f"事件 {event.message_id} 的结果未能送达：{e}")
        except Exception:
            logger.exception(f"处理事件 {event.message_id} 时出错")
            await self._apologize(event, self.messages.generic_error)

    async def _run(self, event: InboundEvent) -> None:
        started = time.monotonic()
        if self.send_processing_notice:
            await self.delivery.send_processing_notice(event.reply_token)

        try:
            raw_text = await self.fetcher.fetch_text(event.message_id or "")
        except FetchError as e:
            logger.error(f"读取文件失败：{e}")
            await self._apologize(event, self.messages.file_read_error)
            return

        profile = await self.client.fetch_profile(event.user_id or "")
        logger.debug(f"用户显示名：{profile.display_name}")

        try:
            result = await self.facade.process(raw_text, profile.display_name)
        except ParseError as e:
            logger.error(f"解析聊天记录失败：{e}")
            await self._apologize(event, self.messages.parse_error)
            return

        composed = self.composer.compose(result)
        await self.delivery.deliver_result(event.user_id, composed.to_outbound())
        logger.info(f"事件 {event.message_id} 处理完成，耗时 {format_duration(time.monotonic() - started)}")

    async def _apologize(self, event: InboundEvent, text: str) -> None:
        try:
            await self.delivery.send_apology(event.user_id, text)
        except FallbackDeliveryError as e:
            logger.error(f"兜底消息发送失败，不再重试：{e}")
