"""相性诊断结果的 Flex 轮播构建器。"""

from dataclasses import dataclass, field
from typing import Any

from aisho.analytics.models import BehaviorResult, HabitsResult, RecordsResult
from aisho.compose.comments import AnimalTypeProfile

ALT_TEXT = "トーク相性診断の結果"

CATEGORY_LABELS = {
    "time": "時間帯",
    "balance": "バランス",
    "tempo": "テンポ",
    "type": "タイプ",
    "words": "ことば",
}

ACCENT_COLOR = "#FF6B81"
SUB_COLOR = "#888888"


@dataclass
class CarouselComments:
    """已完成占位符替换的评论。"""
    overall: str = ""
    seven_p: str = ""
    categories: dict[str, str] = field(default_factory=dict)


def _text(text: str, **props: Any) -> dict[str, Any]:
    return {"type": "text", "text": text, "wrap": True, **props}


def _box(contents: list[dict[str, Any]], layout: str = "vertical", **props: Any) -> dict[str, Any]:
    return {"type": "box", "layout": layout, "contents": contents, **props}


def _bar(score: int) -> dict[str, Any]:
    filled = _box(
        [{"type": "filler"}],
        width=f"{max(1, min(100, score))}%",
        height="6px",
        backgroundColor=ACCENT_COLOR,
    )
    return _box([filled], height="6px", backgroundColor="#EEEEEE", margin="sm")


def _bubble(title: str, body: list[dict[str, Any]], **props: Any) -> dict[str, Any]:
    # LINE 不接受空文本组件
    contents = [c for c in body if not (c.get("type") == "text" and not c.get("text"))]
    return {
        "type": "bubble",
        "header": _box([_text(title, weight="bold", size="lg", color=ACCENT_COLOR)]),
        "body": _box(contents, spacing="md"),
        **props,
    }


def _row(label: str, value: str) -> dict[str, Any]:
    return _box(
        [
            _text(label, size="sm", color=SUB_COLOR, flex=3),
            _text(value, size="sm", align="end", flex=4),
        ],
        layout="horizontal",
    )


def _minutes(value: float | None) -> str:
    return "-" if value is None else f"{value:.0f}分"


def _overall_bubble(self_name: str, other_name: str, overall: int, comments: CarouselComments) -> dict[str, Any]:
    return _bubble(
        "ふたりの相性",
        [
            _text(f"{self_name} × {other_name}", size="sm", color=SUB_COLOR),
            _text(f"{overall}点", size="3xl", weight="bold", align="center"),
            _bar(overall),
            _text(comments.overall, size="sm"),
        ],
    )


def _radar_bubble(radar_scores: dict[str, int], comments: CarouselComments) -> dict[str, Any]:
    body: list[dict[str, Any]] = []
    for category, score in radar_scores.items():
        body.append(_row(CATEGORY_LABELS.get(category, category), f"{score}点"))
        body.append(_bar(score))
        body.append(_text(comments.categories.get(category, ""), size="xs", color=SUB_COLOR))
    body.append({"type": "separator", "margin": "lg"})
    body.append(_text(comments.seven_p, size="sm"))
    return _bubble("5つの相性ポイント", body)


def _records_bubble(
    self_name: str, other_name: str, records: RecordsResult, habits: HabitsResult
) -> dict[str, Any]:
    body = [
        _row("トーク期間", f"{records.first_date:%Y/%m/%d}〜{records.last_date:%Y/%m/%d}"),
        _row("メッセージ数", f"{records.total_messages}件"),
        _row("トークした日数", f"{records.active_days}日"),
        _row("最長連続日数", f"{records.longest_streak_days}日"),
        _row("最長おやすみ期間", f"{records.longest_silence_days}日"),
    ]
    for name in (self_name, other_name):
        h = habits.by_participant.get(name)
        if h is None:
            continue
        body.append({"type": "separator", "margin": "md"})
        body.append(_text(name, weight="bold", size="sm"))
        body.append(_row("よくトークする時間", f"{h.peak_hour}時台"))
        body.append(_row("平均文字数", f"{h.avg_length:.1f}文字"))
        body.append(_row("スタンプ / 写真", f"{h.stamp_count} / {h.photo_count}"))
        if h.favorite_phrases:
            body.append(_text("口ぐせ: " + "、".join(h.favorite_phrases), size="xs", color=SUB_COLOR))
    return _bubble("トーク記録", body)


def _behavior_bubble(self_name: str, other_name: str, behavior: BehaviorResult) -> dict[str, Any]:
    body: list[dict[str, Any]] = []
    for name in (self_name, other_name):
        b = behavior.by_participant.get(name)
        if b is None:
            continue
        body.append(_text(name, weight="bold", size="sm"))
        body.append(_row("平均返信時間", _minutes(b.avg_reply_minutes)))
        body.append(_row("話しかけた回数", f"{b.conversation_starts}回"))
        body.append(_row("深夜トーク率", f"{b.late_night_ratio * 100:.0f}%"))
        body.append(_row("質問率", f"{b.question_ratio * 100:.0f}%"))
    return _bubble("ふたりの行動パターン", body)


def _animal_bubble(
    animal_type: str, profile: AnimalTypeProfile, zodiac_scores: dict[str, int]
) -> dict[str, Any]:
    name = profile.name or animal_type
    body = [
        _text(f"{name}タイプ", size="xl", weight="bold", align="center"),
        _text(profile.title, size="sm", align="center", color=ACCENT_COLOR),
        _text(profile.description, size="sm"),
        _text(f"一致度 {zodiac_scores.get(animal_type, 0)}%", size="xs", color=SUB_COLOR, align="end"),
    ]
    props: dict[str, Any] = {}
    if profile.image_url.startswith("https://"):
        props["hero"] = {
            "type": "image",
            "url": profile.image_url,
            "size": "full",
            "aspectMode": "cover",
            "aspectRatio": "1:1",
        }
    return _bubble("干支タイプ診断", body, **props)


def _promotion_bubble(image_url: str, link_url: str) -> dict[str, Any]:
    props: dict[str, Any] = {
        "footer": _box(
            [{
                "type": "button",
                "style": "primary",
                "color": ACCENT_COLOR,
                "action": {"type": "uri", "label": "くわしく見る", "uri": link_url},
            }]
        )
    }
    # LINE 只接受 https 的绝对 URL
    if image_url.startswith("https://"):
        props["hero"] = {
            "type": "image",
            "url": image_url,
            "size": "full",
            "aspectMode": "cover",
            "aspectRatio": "20:13",
            "action": {"type": "uri", "uri": link_url},
        }
    return _bubble("もっと仲良くなるために", [_text("診断のヒントをnoteで公開中！", size="sm")], **props)


def build_compatibility_carousel(
    *,
    self_name: str,
    other_name: str,
    radar_scores: dict[str, int],
    overall: int,
    habits: HabitsResult,
    behavior: BehaviorResult,
    records: RecordsResult,
    comments: CarouselComments,
    animal_type: str,
    animal_profile: AnimalTypeProfile,
    zodiac_scores: dict[str, int],
    promotional_image_url: str,
    promotional_link_url: str,
) -> dict[str, Any]:
    """
    构建完整的 Flex 消息（carousel）。

    返回:
        LINE 消息对象：{"type": "flex", "altText": ..., "contents": {"type": "carousel", ...}}
    """
    bubbles = [
        _overall_bubble(self_name, other_name, overall, comments),
        _radar_bubble(radar_scores, comments),
        _records_bubble(self_name, other_name, records, habits),
        _behavior_bubble(self_name, other_name, behavior),
        _animal_bubble(animal_type, animal_profile, zodiac_scores),
        _promotion_bubble(promotional_image_url, promotional_link_url),
    ]
    return {
        "type": "flex",
        "altText": ALT_TEXT,
        "contents": {"type": "carousel", "contents": bubbles},
    }
