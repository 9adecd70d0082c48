import pytest

from aisho.compose.comments import PARTNER_PLACEHOLDER, CommentBank
from aisho.compose.composer import ResponseComposer
from aisho.compose.size_guard import SizeGuard
from aisho.pipeline.facade import TranscriptPipeline
from aisho.utils.helpers import serialize_compact

from conftest import SAMPLE_TALK


@pytest.fixture
async def result():
    return await TranscriptPipeline().process(SAMPLE_TALK, "たろう")


async def test_compose_substitutes_partner_name(composer, result):
    message = composer.compose(result)
    serialized = serialize_compact(message.to_payload())
    assert PARTNER_PLACEHOLDER not in serialized
    assert "はなこ" in serialized
    assert message.size_report is not None
    assert len(message.size_report.page_sizes) == len(message.pages) == 6


async def test_builder_receives_resolved_comments(result):
    bank = CommentBank.from_dict(
        {
            "overall": {band: f"overall-{band}-（相手）" for band in ("95", "90", "85", "80", "70", "60", "50", "49")},
            "7p": {k: f"tip-{k}-（相手）" for k in ("time", "balance", "tempo", "type", "words")},
        }
    )
    captured = {}

    def builder(**kwargs):
        captured.update(kwargs)
        return {"type": "flex", "altText": "alt", "contents": {"type": "carousel", "contents": []}}

    composer = ResponseComposer(
        bank,
        promotional_image_url="https://example.com/p.png",
        promotional_link_url="https://example.com/note",
        size_guard=SizeGuard(),
        builder=builder,
    )
    composer.compose(result)

    radar = result.compatibility.radar_scores
    lowest = min(radar, key=radar.get)
    comments = captured["comments"]
    assert comments.seven_p == f"tip-{lowest}-はなこ"
    assert comments.overall.startswith("overall-") and comments.overall.endswith("-はなこ")
    assert comments.categories == {k: "" for k in radar}
    assert captured["animal_profile"].is_empty
    assert captured["promotional_image_url"] == "https://example.com/p.png"


async def test_non_https_promotional_image_is_omitted(bank, result):
    composer = ResponseComposer(
        bank,
        promotional_image_url="/images/promotion.png",
        promotional_link_url="https://example.com/note",
    )
    promotion = composer.compose(result).pages[-1]
    assert "hero" not in promotion
    assert promotion["footer"]["contents"][0]["action"]["uri"] == "https://example.com/note"


async def test_no_empty_text_components(composer, result):
    def walk(node):
        if isinstance(node, dict):
            if node.get("type") == "text":
                assert node["text"]
            for value in node.values():
                walk(value)
        elif isinstance(node, list):
            for item in node:
                walk(item)

    walk(composer.compose(result).to_payload())
