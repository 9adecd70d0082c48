"""结果消息组装模块。"""

from aisho.compose.comments import (
    PARTNER_PLACEHOLDER,
    AnimalTypeProfile,
    CommentBank,
    CommentCategory,
    ScoreBand,
    lowest_category,
    score_band,
    substitute_partner,
)
from aisho.compose.composer import ResponseComposer
from aisho.compose.size_guard import ComposedMessage, SizeGuard, SizeReport

__all__ = [
    "PARTNER_PLACEHOLDER",
    "AnimalTypeProfile",
    "CommentBank",
    "CommentCategory",
    "ComposedMessage",
    "ResponseComposer",
    "ScoreBand",
    "SizeGuard",
    "SizeReport",
    "lowest_category",
    "score_band",
    "substitute_partner",
]
