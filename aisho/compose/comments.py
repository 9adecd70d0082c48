"""
评论库：按类别和得分段查找评论模板。

评论库在进程启动时加载一次，之后只读。查不到时返回空字符串，不会抛出异常。
"""

import json
from dataclasses import dataclass
from enum import Enum
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from loguru import logger

# 模板中代表"对方"的占位符
PARTNER_PLACEHOLDER = "（相手）"


class CommentCategory(str, Enum):
    """评论类别。"""

    OVERALL = "overall"
    SEVEN_P = "7p"  # 按最低类别给出的改善建议
    TIME = "time"
    BALANCE = "balance"
    TEMPO = "tempo"
    TYPE = "type"
    WORDS = "words"


class ScoreBand(str, Enum):
    """得分段。"""

    B95 = "95"
    B90 = "90"
    B85 = "85"
    B80 = "80"
    B70 = "70"
    B60 = "60"
    B50 = "50"
    B49 = "49"


# 降序，第一个满足 score >= 下限的段胜出
_BAND_THRESHOLDS: tuple[tuple[float, ScoreBand], ...] = (
    (95, ScoreBand.B95),
    (90, ScoreBand.B90),
    (85, ScoreBand.B85),
    (80, ScoreBand.B80),
    (70, ScoreBand.B70),
    (60, ScoreBand.B60),
    (50, ScoreBand.B50),
)


def score_band(score: float) -> ScoreBand:
    """将数值得分映射到得分段。"""
    for lower, band in _BAND_THRESHOLDS:
        if score >= lower:
            return band
    return ScoreBand.B49


def substitute_partner(template: str, other_name: str) -> str:
    """把模板中的所有占位符替换为对方的名字。"""
    return template.replace(PARTNER_PLACEHOLDER, other_name)


def lowest_category(radar_scores: Mapping[str, float]) -> str:
    """
    找出得分最低的类别。

    平分时取插入顺序中先出现的类别。
    """
    if not radar_scores:
        raise ValueError("雷达图得分为空")
    return min(radar_scores.items(), key=lambda item: item[1])[0]


@dataclass(frozen=True)
class AnimalTypeProfile:
    """干支类型的展示信息。"""

    name: str = ""
    title: str = ""
    description: str = ""
    image_url: str = ""

    @classmethod
    def empty(cls) -> "AnimalTypeProfile":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.title or self.description)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnimalTypeProfile":
        return cls(
            name=str(data.get("name", "")),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            image_url=str(data.get("imageUrl", "")),
        )


class CommentBank:
    """
    两级查找表：类别 → 得分段或键 → 模板。

    另有 animal_types 子表，将干支类型键映射到展示信息。
    """

    def __init__(
        self,
        tables: Mapping[CommentCategory, Mapping[str, str]],
        animal_types: Mapping[str, AnimalTypeProfile] | None = None,
    ):
        self._tables = MappingProxyType(
            {category: MappingProxyType(dict(table)) for category, table in tables.items()}
        )
        self._animal_types = MappingProxyType(dict(animal_types or {}))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommentBank":
        """从评论 JSON 结构构建评论库，未知的顶层键会被忽略。"""
        tables: dict[CommentCategory, dict[str, str]] = {}
        animal_types: dict[str, AnimalTypeProfile] = {}
        for key, value in data.items():
            if key == "animalTypes":
                animal_types = {
                    k: AnimalTypeProfile.from_dict(v) for k, v in value.items() if isinstance(v, dict)
                }
                continue
            try:
                category = CommentCategory(key)
            except ValueError:
                logger.debug(f"忽略未知的评论类别：{key}")
                continue
            tables[category] = {str(k): str(v) for k, v in value.items()}
        return cls(tables, animal_types)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "CommentBank":
        """
        从 JSON 文件加载评论库。

        参数:
            path: 评论 JSON 路径。为 None 时加载内置的 aisho/data/comments.json。
        """
        if path is None:
            raw = resources.files("aisho.data").joinpath("comments.json").read_text(encoding="utf-8")
        else:
            raw = Path(path).expanduser().read_text(encoding="utf-8")
        bank = cls.from_dict(json.loads(raw))
        logger.info(f"评论库已加载：{len(bank._tables)} 个类别，{len(bank._animal_types)} 个干支类型")
        return bank

    def get(self, category: CommentCategory, score_or_key: float | str) -> str:
        """
        查找评论。

        参数:
            category: 评论类别。
            score_or_key: 数值得分（先映射为得分段）或直接使用的键。

        返回:
            模板字符串；查不到时返回空字符串。
        """
        if isinstance(score_or_key, str):
            key = score_or_key
        else:
            key = score_band(score_or_key).value
        table = self._tables.get(category)
        if table is None:
            return ""
        return table.get(key, "")

    def animal_type(self, key: str) -> AnimalTypeProfile:
        return self._animal_types.get(key, AnimalTypeProfile.empty())
