import pytest

from linebot.v3.messaging import FlexMessage, TextMessage

from aisho.bus.events import OutboundMessage
from aisho.channels.line import LineChannel
from aisho.config.schema import LineConfig


def test_text_message_conversion():
    message = LineChannel._to_sdk(OutboundMessage.text_message("こんにちは"))
    assert isinstance(message, TextMessage)
    assert message.text == "こんにちは"


def test_flex_message_conversion():
    bubble = {
        "type": "bubble",
        "body": {"type": "box", "layout": "vertical", "contents": [{"type": "text", "text": "結果"}]},
    }
    outbound = OutboundMessage.flex_message("結果", {"type": "carousel", "contents": [bubble]})
    message = LineChannel._to_sdk(outbound)
    assert isinstance(message, FlexMessage)
    assert message.alt_text == "結果"


async def test_client_is_created_lazily():
    channel = LineChannel(LineConfig(channel_access_token="token"))
    assert channel._api_client is None
    await channel.close()


def test_flex_contents_survive_conversion():
    bubble = {
        "type": "bubble",
        "body": {"type": "box", "layout": "vertical", "contents": [{"type": "text", "text": "結果"}]},
    }
    outbound = OutboundMessage.flex_message("結果", {"type": "carousel", "contents": [bubble, bubble]})
    message = LineChannel._to_sdk(outbound)
    assert message.to_dict()["contents"]["type"] == "carousel"
    assert len(message.contents.contents) == 2


def test_unknown_message_kind_is_rejected():
    with pytest.raises(ValueError):
        LineChannel._to_sdk(OutboundMessage(kind="sticker"))
