from aisho.compose.size_guard import ComposedMessage, SizeGuard
from aisho.utils.helpers import serialized_size


def _message_of_size(total: int) -> ComposedMessage:
    message = ComposedMessage(alt_text="", pages=[])
    base = serialized_size(message.to_payload())
    message.alt_text = "x" * (total - base)
    assert serialized_size(message.to_payload()) == total
    return message


def test_exactly_at_ceiling_is_not_flagged():
    report = SizeGuard(25000).inspect(_message_of_size(25000))
    assert report.total_bytes == 25000
    assert not report.oversize


def test_one_byte_over_ceiling_is_flagged():
    message = _message_of_size(25001)
    report = SizeGuard(25000).inspect(message)
    assert report.oversize
    assert message.size_report is report


def test_page_sizes_are_reported_per_page():
    pages = [{"type": "bubble", "body": {"type": "box", "layout": "vertical", "contents": []}}] * 3
    message = ComposedMessage(alt_text="結果", pages=pages)
    report = SizeGuard().inspect(message)
    assert len(report.page_sizes) == 3
    assert report.page_sizes[0] == serialized_size(message.page_payload(0))
    assert message.page_payload(1)["altText"] == "ページ2"


def test_non_ascii_counts_utf8_bytes():
    assert serialized_size({"t": "あ"}) == len('{"t":"あ"}'.encode("utf-8"))


def test_from_payload_accepts_single_bubble():
    bubble = {"type": "bubble", "body": {"type": "box", "layout": "vertical", "contents": []}}
    message = ComposedMessage.from_payload({"type": "flex", "altText": "a", "contents": bubble})
    assert message.pages == [bubble]
    assert message.to_outbound().contents["type"] == "carousel"
