"""附件内容获取。"""

import asyncio
from collections.abc import AsyncIterable

from loguru import logger

from aisho.channels.base import ContentPayload, PlatformClient
from aisho.errors import FetchError, FetchTimeout
from aisho.utils.helpers import truncate_string


async def _read_all(payload: ContentPayload) -> bytes:
    """把平台返回的内容读入内存缓冲区。"""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    buffer = bytearray()
    if isinstance(payload, AsyncIterable):
        async for chunk in payload:
            buffer.extend(chunk)
    else:
        for chunk in payload:
            buffer.extend(chunk)
    return bytes(buffer)


class ContentFetcher:
    """
    获取消息附件并解码为文本。

    平台调用和读取字节流一起与超时竞争，先完成者胜出。
    失败时抛出 FetchTimeout 或 FetchError，不自动重试。
    """

    def __init__(self, client: PlatformClient, timeout_s: float = 5.0, race_timeout: bool = True):
        self.client = client
        self.timeout_s = timeout_s
        self.race_timeout = race_timeout

    async def _retrieve(self, message_id: str) -> bytes:
        payload = await self.client.fetch_content(message_id)
        return await _read_all(payload)

    async def fetch_text(self, message_id: str) -> str:
        """
        获取附件的完整文本。

        参数:
            message_id: 入站消息的标识符。

        返回:
            UTF-8 解码后的文本（非法字节序列被替换）。
        """
        try:
            if self.race_timeout:
                data = await asyncio.wait_for(self._retrieve(message_id), timeout=self.timeout_s)
            else:
                data = await self._retrieve(message_id)
        except asyncio.TimeoutError as e:
            logger.error(f"获取附件超时（{self.timeout_s}s）：{message_id}")
            raise FetchTimeout(f"获取附件超时：{message_id}") from e
        except Exception as e:
            logger.error(f"获取附件失败：{message_id}：{e}")
            raise FetchError(str(e)) from e

        text = data.decode("utf-8", errors="replace")
        logger.info(f"附件已读取：{message_id}，{len(text)} 字符")
        logger.debug(f"附件开头：{truncate_string(text, 200)!r}")
        return text
