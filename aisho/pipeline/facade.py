"""聊天记录分析管道：解析 → 确定双方 → 五项分析。"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from loguru import logger

from aisho.analytics import behavior, compatibility, habits, records, zodiac
from aisho.analytics.models import (
    AnalyticsResult,
    BehaviorResult,
    CompatibilityResult,
    HabitsResult,
    RecordsResult,
    ZodiacResult,
)
from aisho.errors import AnalyticsError, ParseError
from aisho.transcript.models import ChatMessage, Transcript
from aisho.transcript.parser import parse_talk_history
from aisho.transcript.participants import extract_participants

Parser = Callable[[str], list[ChatMessage]]
Resolver = Callable[[list[ChatMessage], str | None], tuple[str, str]]


@dataclass
class AnalyticsSuite:
    """五个分析协作者。测试时可以逐个替换。"""

    records: Callable[[Transcript], RecordsResult]
    compatibility: Callable[[Transcript, RecordsResult], CompatibilityResult]
    habits: Callable[[Transcript], HabitsResult]
    behavior: Callable[[Transcript], Awaitable[BehaviorResult]]
    zodiac: Callable[[Transcript, RecordsResult], ZodiacResult]

    @classmethod
    def default(cls) -> "AnalyticsSuite":
        return cls(
            records=records.calc_all,
            compatibility=compatibility.calc_all,
            habits=habits.calc_all,
            behavior=behavior.calc_all,
            zodiac=zodiac.calc_type_scores,
        )


class TranscriptPipeline:
    """
    把原始文本变成 AnalyticsResult。

    解析失败抛出 ParseError；确定双方失败不做包装，直接向上传播；
    任一分析协作者失败统一包装为 AnalyticsError。不会返回部分结果。
    """

    def __init__(
        self,
        parser: Parser = parse_talk_history,
        resolver: Resolver = extract_participants,
        suite: AnalyticsSuite | None = None,
    ):
        self.parser = parser
        self.resolver = resolver
        self.suite = suite or AnalyticsSuite.default()

    def parse(self, raw_text: str) -> list[ChatMessage]:
        try:
            return self.parser(raw_text)
        except ParseError:
            raise
        except Exception as e:
            raise ParseError(str(e)) from e

    async def process(self, raw_text: str, user_display_name: str | None) -> AnalyticsResult:
        """
        运行完整的分析管道。

        参数:
            raw_text: 导出的聊天记录全文。
            user_display_name: 平台显示名，用于确定哪一方是用户本人。

        返回:
            五项分析的汇总结果。
        """
        messages = self.parse(raw_text)
        logger.info(f"解析完成：{len(messages)} 条消息")

        self_name, other_name = self.resolver(messages, user_display_name)
        logger.info(f"参与者：本人={self_name}，对方={other_name}")

        pair = (self_name, other_name)
        transcript = Transcript(
            self_name=self_name,
            other_name=other_name,
            messages=[m for m in messages if m.sender in pair],
        )
        return await self._analyze(transcript)

    async def _analyze(self, transcript: Transcript) -> AnalyticsResult:
        suite = self.suite
        behavior_task: asyncio.Task[BehaviorResult] | None = None
        try:
            rec = suite.records(transcript)
            # 异步的行为分析与同步分析并行
            behavior_task = asyncio.create_task(suite.behavior(transcript))
            compat = suite.compatibility(transcript, rec)
            hab = suite.habits(transcript)
            zod = suite.zodiac(transcript, rec)
            beh = await behavior_task
        except Exception as e:
            if behavior_task is not None and not behavior_task.done():
                behavior_task.cancel()
            raise AnalyticsError(f"{type(e).__name__}: {e}") from e

        if not compat.radar_scores:
            raise AnalyticsError("雷达图得分为空")

        logger.debug(f"干支得分：{zod.scores}")
        logger.info(f"分析完成：综合 {compat.overall} 分，类型 {zod.animal_type}")
        return AnalyticsResult(
            self_name=transcript.self_name,
            other_name=transcript.other_name,
            message_count=len(transcript.messages),
            records=rec,
            compatibility=compat,
            habits=hab,
            behavior=beh,
            zodiac=zod,
        )
