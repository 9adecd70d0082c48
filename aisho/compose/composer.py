"""把分析结果组装成带大小检查的 Flex 消息。"""

from typing import Any, Callable

from loguru import logger

from aisho.analytics.models import AnalyticsResult
from aisho.compose.carousel import CarouselComments, build_compatibility_carousel
from aisho.compose.comments import (
    CommentBank,
    CommentCategory,
    lowest_category,
    substitute_partner,
)
from aisho.compose.size_guard import ComposedMessage, SizeGuard

CarouselBuilder = Callable[..., dict[str, Any]]

_CATEGORY_BY_KEY = {c.value: c for c in CommentCategory}


class ResponseComposer:
    """
    结果消息组装器。

    解析评论（综合评论按综合得分段、改善建议按最低类别、各类别评论按各自得分段），
    调用轮播构建器，然后检查序列化大小。
    """

    def __init__(
        self,
        bank: CommentBank,
        *,
        promotional_image_url: str,
        promotional_link_url: str,
        size_guard: SizeGuard | None = None,
        builder: CarouselBuilder = build_compatibility_carousel,
    ):
        self.bank = bank
        self.promotional_image_url = promotional_image_url
        self.promotional_link_url = promotional_link_url
        self.size_guard = size_guard or SizeGuard()
        self.builder = builder

    def resolve_comments(self, result: AnalyticsResult) -> CarouselComments:
        radar = result.compatibility.radar_scores
        other = result.other_name
        lowest = lowest_category(radar)
        logger.debug(f"最低类别：{lowest}")

        categories = {}
        for key, score in radar.items():
            category = _CATEGORY_BY_KEY.get(key)
            template = self.bank.get(category, score) if category else ""
            categories[key] = substitute_partner(template, other)

        return CarouselComments(
            overall=substitute_partner(
                self.bank.get(CommentCategory.OVERALL, result.compatibility.overall), other
            ),
            seven_p=substitute_partner(self.bank.get(CommentCategory.SEVEN_P, lowest), other),
            categories=categories,
        )

    def compose(self, result: AnalyticsResult) -> ComposedMessage:
        """
        组装结果消息。

        参数:
            result: 汇总的分析结果。

        返回:
            附带 size_report 的 ComposedMessage。超过大小上限只记录警告。
        """
        zodiac = result.zodiac
        payload = self.builder(
            self_name=result.self_name,
            other_name=result.other_name,
            radar_scores=result.compatibility.radar_scores,
            overall=result.compatibility.overall,
            habits=result.habits,
            behavior=result.behavior,
            records=result.records,
            comments=self.resolve_comments(result),
            animal_type=zodiac.animal_type,
            animal_profile=self.bank.animal_type(zodiac.animal_type),
            zodiac_scores=zodiac.scores,
            promotional_image_url=self.promotional_image_url,
            promotional_link_url=self.promotional_link_url,
        )
        message = ComposedMessage.from_payload(payload)
        self.size_guard.inspect(message)
        return message
