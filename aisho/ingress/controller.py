"""
webhook 入口控制器。

只接受 POST；配置了签名校验时先校验签名；确认响应在派发事件任务后立即返回，
不等待分析完成。reply 令牌有效期很短，确认过慢时平台会重发同一事件。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from loguru import logger

from aisho.bus.events import InboundEvent
from aisho.config.schema import LineConfig
from aisho.errors import IngressError, MalformedPayload, MethodNotAllowed, Unauthorized
from aisho.ingress.signature import verify_signature
from aisho.pipeline.dedup import DedupStore
from aisho.pipeline.dispatcher import TaskDispatcher
from aisho.pipeline.handler import EventPipeline
from aisho.utils.helpers import truncate_string

SIGNATURE_HEADER = "x-line-signature"


@dataclass
class IngressResponse:
    status: int
    body: dict[str, Any] = field(default_factory=dict)


class IngressController:
    """把一次 webhook 请求转换为若干后台事件任务。"""

    def __init__(
        self,
        pipeline: EventPipeline,
        dedup: DedupStore,
        dispatcher: TaskDispatcher,
        line_config: LineConfig | None = None,
        dispatch_mode: Literal["concurrent", "sequential"] = "concurrent",
    ):
        self.pipeline = pipeline
        self.dedup = dedup
        self.dispatcher = dispatcher
        self.line_config = line_config or LineConfig()
        self.dispatch_mode = dispatch_mode

    async def handle(self, method: str, headers: Mapping[str, str], body: bytes) -> IngressResponse:
        """
        处理一次 webhook 请求。

        参数:
            method: HTTP 方法。
            headers: 请求头（名称不区分大小写）。
            body: 原始请求体，签名基于它计算。

        返回:
            IngressResponse。成功时为 200 和空对象。
        """
        try:
            events = self._accept(method, headers, body)
        except IngressError as e:
            logger.warning(f"拒绝 webhook 请求（{e.status}）：{e.message}")
            return IngressResponse(status=e.status, body={"error": e.message})

        accepted = []
        for event in events:
            if not event.is_file_message:
                logger.debug(f"忽略事件：{event.kind}/{event.message_type}")
                continue
            if not event.message_id:
                logger.warning("文件事件缺少 message.id，已忽略")
                continue
            if not await self.dedup.should_process(event.message_id):
                logger.info(
                    f"跳过重复事件：{event.message_id}"
                    f"（webhookEventId={event.webhook_event_id}，isRedelivery={event.is_redelivery}）"
                )
                continue
            accepted.append(event)

        self._dispatch(accepted)
        return IngressResponse(status=200, body={})

    def _accept(self, method: str, headers: Mapping[str, str], body: bytes) -> list[InboundEvent]:
        if method.upper() != "POST":
            raise MethodNotAllowed(f"不支持的方法：{method}")

        if self.line_config.signature_required:
            # 未配置密钥时 verify_signature 返回 False，请求被拒绝
            lowered = {k.lower(): v for k, v in headers.items()}
            if not verify_signature(body, lowered.get(SIGNATURE_HEADER), self.line_config.channel_secret):
                raise Unauthorized("签名校验失败")

        try:
            payload = json.loads(body or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedPayload(f"请求体不是合法 JSON：{e}") from e

        raw_events = payload.get("events") if isinstance(payload, dict) else None
        if not isinstance(raw_events, list):
            raise MalformedPayload("请求体缺少 events 列表")

        logger.debug(f"收到 webhook：{truncate_string(body.decode('utf-8', errors='replace'), 500)}")
        return [InboundEvent.from_dict(e) for e in raw_events if isinstance(e, dict)]

    def _dispatch(self, events: list[InboundEvent]) -> None:
        if not events:
            return
        if self.dispatch_mode == "sequential":
            self.dispatcher.spawn(self._handle_in_order(events), label=f"{len(events)} 个事件（顺序）")
            return
        for event in events:
            self.dispatcher.spawn(self.pipeline.handle(event), label=f"事件 {event.message_id}")

    async def _handle_in_order(self, events: list[InboundEvent]) -> None:
        for event in events:
            await self.pipeline.handle(event)
