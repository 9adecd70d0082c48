import time

import pytest

from aisho.errors import FetchError, FetchTimeout
from aisho.pipeline.fetcher import ContentFetcher

from conftest import FakePlatformClient


async def test_fetch_text_decodes_utf8():
    client = FakePlatformClient("こんにちは".encode("utf-8"))
    text = await ContentFetcher(client).fetch_text("m-1")
    assert text == "こんにちは"
    assert client.fetch_calls == ["m-1"]


async def test_invalid_utf8_is_replaced():
    client = FakePlatformClient(b"ok\xff")
    text = await ContentFetcher(client).fetch_text("m-1")
    assert text.startswith("ok")
    assert "\ufffd" in text


class ChunkedClient(FakePlatformClient):
    async def fetch_content(self, message_id: str):
        async def chunks():
            for part in ("トーク", "履歴"):
                yield part.encode("utf-8")

        return chunks()


async def test_streamed_chunks_are_read_to_completion():
    text = await ContentFetcher(ChunkedClient()).fetch_text("m-1")
    assert text == "トーク履歴"


async def test_sync_iterable_of_chunks():
    class ListClient(FakePlatformClient):
        async def fetch_content(self, message_id: str):
            return [b"ab", b"cd"]

    assert await ContentFetcher(ListClient()).fetch_text("m-1") == "abcd"


async def test_retrieval_failure_raises_fetch_error():
    client = FakePlatformClient(fetch_error=ConnectionError("boom"))
    with pytest.raises(FetchError) as exc_info:
        await ContentFetcher(client).fetch_text("m-1")
    assert not isinstance(exc_info.value, FetchTimeout)


async def test_hanging_retrieval_times_out_at_the_boundary():
    client = FakePlatformClient(hang=True)
    fetcher = ContentFetcher(client, timeout_s=0.2)

    started = time.monotonic()
    with pytest.raises(FetchTimeout):
        await fetcher.fetch_text("m-1")
    elapsed = time.monotonic() - started

    assert 0.19 <= elapsed < 1.0


async def test_timeout_is_a_fetch_error():
    assert issubclass(FetchTimeout, FetchError)
