"""事件处理管道。"""

from aisho.pipeline.dedup import DedupCache, DedupStore
from aisho.pipeline.delivery import DeliveryChannel
from aisho.pipeline.dispatcher import TaskDispatcher
from aisho.pipeline.facade import AnalyticsSuite, TranscriptPipeline
from aisho.pipeline.fetcher import ContentFetcher
from aisho.pipeline.handler import EventPipeline

__all__ = [
    "AnalyticsSuite",
    "ContentFetcher",
    "DedupCache",
    "DedupStore",
    "DeliveryChannel",
    "EventPipeline",
    "TaskDispatcher",
    "TranscriptPipeline",
]
