from aisho.bus.events import InboundEvent
from aisho.config.schema import MessagesConfig
from aisho.pipeline.delivery import DeliveryChannel
from aisho.pipeline.facade import AnalyticsSuite, TranscriptPipeline

from conftest import FakePlatformClient, build_pipeline, make_event

MESSAGES = MessagesConfig()


def _counting_suite(calls: list[str]) -> AnalyticsSuite:
    suite = AnalyticsSuite.default()

    def wrap(name, fn):
        def inner(*args):
            calls.append(name)
            return fn(*args)
        return inner

    async def behavior(transcript):
        calls.append("behavior")
        return await AnalyticsSuite.default().behavior(transcript)

    suite.records = wrap("records", suite.records)
    suite.compatibility = wrap("compatibility", suite.compatibility)
    suite.habits = wrap("habits", suite.habits)
    suite.zodiac = wrap("zodiac", suite.zodiac)
    suite.behavior = behavior
    return suite


async def test_successful_event_pushes_result_once(composer):
    client = FakePlatformClient()
    calls: list[str] = []
    pipeline = build_pipeline(client, composer, facade=TranscriptPipeline(suite=_counting_suite(calls)))

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert sorted(calls) == ["behavior", "compatibility", "habits", "records", "zodiac"]
    assert len(client.pushes) == 1
    assert len(client.pushed_flex) == 1
    assert client.pushed_texts == []
    assert [token for token, _ in client.replies] == ["reply-m-1"]
    assert client.replies[0][1].text == MESSAGES.processing

    result = client.pushed_flex[0]
    assert result.contents["type"] == "carousel"
    assert len(result.contents["contents"]) == 6


async def test_fetch_failure_sends_file_read_apology_only(composer):
    client = FakePlatformClient(fetch_error=ConnectionError("boom"))
    calls: list[str] = []
    pipeline = build_pipeline(client, composer, facade=TranscriptPipeline(suite=_counting_suite(calls)))

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert calls == []
    assert client.pushed_texts == [MESSAGES.file_read_error]
    assert client.pushed_flex == []


async def test_fetch_timeout_sends_file_read_apology(composer):
    client = FakePlatformClient(hang=True)
    pipeline = build_pipeline(client, composer, timeout_s=0.05)

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert client.pushed_texts == [MESSAGES.file_read_error]


async def test_parse_failure_sends_parse_apology(composer):
    client = FakePlatformClient("ただのメモ".encode("utf-8"))
    pipeline = build_pipeline(client, composer)

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert client.pushed_texts == [MESSAGES.parse_error]


async def test_analytics_failure_sends_one_generic_apology(composer):
    client = FakePlatformClient()
    suite = AnalyticsSuite.default()

    def broken(transcript, rec):
        raise ValueError("bad")

    suite.zodiac = broken
    pipeline = build_pipeline(client, composer, facade=TranscriptPipeline(suite=suite))

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert client.pushed_texts == [MESSAGES.generic_error]
    assert client.pushed_flex == []


async def test_single_participant_is_generic_failure(composer):
    talk = "2024/01/01(月)\n10:00\tたろう\tひとりごと\n10:05\tたろう\tまだひとり\n"
    client = FakePlatformClient(talk.encode("utf-8"))
    pipeline = build_pipeline(client, composer)

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert client.pushed_texts == [MESSAGES.generic_error]


async def test_result_push_failure_sends_one_fallback(composer):
    client = FakePlatformClient(fail_pushes=1)
    pipeline = build_pipeline(client, composer)

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert client.pushed_texts == [MESSAGES.delivery_failed]
    assert client.pushed_flex == []


async def test_fallback_failure_is_swallowed(composer):
    client = FakePlatformClient(fail_pushes=2)
    pipeline = build_pipeline(client, composer)

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert client.pushes == []


async def test_processing_notice_can_be_disabled(composer):
    client = FakePlatformClient()
    pipeline = build_pipeline(client, composer, send_processing_notice=False)

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert client.replies == []
    assert len(client.pushed_flex) == 1


async def test_processing_notice_failure_does_not_stop_pipeline(composer):
    class ReplyFails(FakePlatformClient):
        async def reply(self, reply_token, message):
            raise RuntimeError("token expired")

    client = ReplyFails()
    pipeline = build_pipeline(client, composer)

    await pipeline.handle(InboundEvent.from_dict(make_event("m-1")))

    assert len(client.pushed_flex) == 1


async def test_delivery_without_reply_token():
    client = FakePlatformClient()
    assert await DeliveryChannel(client).send_processing_notice(None) is False
    assert client.replies == []
