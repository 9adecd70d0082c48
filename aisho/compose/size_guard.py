"""Flex 消息大小检查。"""

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from aisho.bus.events import OutboundMessage
from aisho.utils.helpers import serialized_size

# LINE 对过大的 Flex 消息会直接拒绝或截断
DEFAULT_SIZE_CEILING = 25000


@dataclass
class ComposedMessage:
    """分页的 Flex 消息，每一页（bubble）可独立渲染。"""

    alt_text: str
    pages: list[dict[str, Any]] = field(default_factory=list)
    size_report: "SizeReport | None" = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ComposedMessage":
        """从构建器返回的 Flex 消息对象创建。"""
        contents = payload.get("contents") or {}
        if contents.get("type") == "carousel" and isinstance(contents.get("contents"), list):
            pages = list(contents["contents"])
        elif contents.get("type") == "bubble":
            pages = [contents]
        else:
            raise ValueError(f"不支持的 Flex 容器：{contents.get('type')!r}")
        return cls(alt_text=str(payload.get("altText", "")), pages=pages)

    @property
    def container(self) -> dict[str, Any]:
        return {"type": "carousel", "contents": self.pages}

    def to_payload(self) -> dict[str, Any]:
        """LINE 消息对象格式。"""
        return {"type": "flex", "altText": self.alt_text, "contents": self.container}

    def to_outbound(self) -> OutboundMessage:
        return OutboundMessage.flex_message(self.alt_text, self.container)

    def page_payload(self, index: int) -> dict[str, Any]:
        """把单页包装成独立的 Flex 消息，用于单页大小统计。"""
        return {"type": "flex", "altText": f"ページ{index + 1}", "contents": self.pages[index]}


@dataclass
class SizeReport:
    page_sizes: list[int]
    total_bytes: int
    ceiling: int

    @property
    def oversize(self) -> bool:
        return self.total_bytes > self.ceiling


class SizeGuard:
    """
    序列化每一页和整条消息并记录字节数。

    整条消息超过上限时只发出警告，投递照常进行。
    """

    def __init__(self, ceiling: int = DEFAULT_SIZE_CEILING):
        self.ceiling = ceiling

    def inspect(self, message: ComposedMessage) -> SizeReport:
        page_sizes = []
        for index in range(len(message.pages)):
            size = serialized_size(message.page_payload(index))
            page_sizes.append(size)
            logger.debug(f"第 {index + 1} 页大小：{size} bytes")

        total = serialized_size(message.to_payload())
        logger.info(f"Flex 消息总大小：{total} bytes（{len(page_sizes)} 页）")

        report = SizeReport(page_sizes=page_sizes, total_bytes=total, ceiling=self.ceiling)
        if report.oversize:
            logger.warning(f"Flex 消息超过 {self.ceiling} bytes 上限：{total} bytes")
        message.size_report = report
        return report
