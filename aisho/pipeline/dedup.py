"""重复事件过滤。"""

from collections import OrderedDict
from typing import Protocol


class DedupStore(Protocol):
    """去重存储接口。可以替换为持久化实现（例如共享缓存服务）。"""

    async def should_process(self, message_id: str) -> bool: ...


class DedupCache:
    """
    进程内的有界去重缓存。

    平台在确认较慢时会重发同一事件，重复运行整个分析和投递会给用户发送重复消息。
    超过容量后按插入顺序淘汰最早的标识符。进程重启或淘汰后的重复无法识别。
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise ValueError("capacity 必须为正数")
        self.capacity = capacity
        self._seen: OrderedDict[str, None] = OrderedDict()  # 有序去重缓存

    async def should_process(self, message_id: str) -> bool:
        # 检查与插入之间没有 await，对其他协程是原子的
        if message_id in self._seen:
            return False
        self._seen[message_id] = None

        while len(self._seen) > self.capacity:
            self._seen.popitem(last=False)
        return True

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._seen
