import asyncio

import pytest

from aisho.bus.events import OutboundMessage
from aisho.channels.base import PlatformClient, UserProfile
from aisho.compose.comments import CommentBank
from aisho.compose.composer import ResponseComposer
from aisho.config.schema import MessagesConfig
from aisho.pipeline.delivery import DeliveryChannel
from aisho.pipeline.facade import TranscriptPipeline
from aisho.pipeline.fetcher import ContentFetcher
from aisho.pipeline.handler import EventPipeline

SAMPLE_TALK = (
    "[LINE] はなことのトーク履歴\n"
    "保存日時：2024/01/05 22:00\n"
    "\n"
    "2024/01/01(月)\n"
    "09:00\tたろう\tあけましておめでとう！\n"
    "09:05\tはなこ\tおめでとう！今年もよろしくね\n"
    "09:06\tたろう\t今日ひま？\n"
    "09:20\tはなこ\t[スタンプ]\n"
    "午後9:10\tたろう\t\"初詣どうだった？\n"
    "\n"
    "人多かった？\"\n"
    "午後9:30\tはなこ\tすごく混んでたよ\n"
    "\n"
    "2024/01/02(火)\n"
    "午前1:15\tはなこ\tまだ起きてる？\n"
    "午前1:20\tたろう\t起きてるよ\n"
    "12:00\tたろう\t[写真]\n"
    "12:30\tはなこ\tかわいい！\n"
    "\n"
    "2024/01/04(木)\n"
    "18:00\tはなこ\t明日ごはん行こう\n"
    "18:02\tたろう\t行こう行こう！\n"
    "18:03\tたろう\tどこがいい？\n"
    "18:10\tはなこ\tラーメンがいいな\n"
)


def make_event(message_id: str = "m-1", user_id: str = "U1", message_type: str = "file") -> dict:
    """LINE webhook 请求体中的一个事件。"""
    return {
        "type": "message",
        "replyToken": f"reply-{message_id}",
        "webhookEventId": f"evt-{message_id}",
        "deliveryContext": {"isRedelivery": False},
        "source": {"type": "user", "userId": user_id},
        "message": {"type": message_type, "id": message_id, "fileName": "talk.txt", "fileSize": 512},
    }


class FakePlatformClient(PlatformClient):
    """记录所有 reply/push 调用的平台客户端。"""

    name = "fake"

    def __init__(
        self,
        content: bytes | None = None,
        *,
        display_name: str = "たろう",
        fetch_error: Exception | None = None,
        hang: bool = False,
        push_error: Exception | None = None,
        fail_pushes: int = 0,
    ):
        self.content = SAMPLE_TALK.encode("utf-8") if content is None else content
        self.display_name = display_name
        self.fetch_error = fetch_error
        self.hang = hang
        self.push_error = push_error
        self.fail_pushes = fail_pushes  # 前 N 次 push 失败
        self.fetch_calls: list[str] = []
        self.replies: list[tuple[str, OutboundMessage]] = []
        self.pushes: list[tuple[str, OutboundMessage]] = []
        self.closed = False

    async def fetch_content(self, message_id: str):
        self.fetch_calls.append(message_id)
        if self.hang:
            await asyncio.Event().wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.content

    async def fetch_profile(self, user_id: str) -> UserProfile:
        return UserProfile(user_id=user_id, display_name=self.display_name)

    async def reply(self, reply_token: str, message: OutboundMessage) -> None:
        self.replies.append((reply_token, message))

    async def push(self, user_id: str, message: OutboundMessage) -> None:
        if self.fail_pushes > 0:
            self.fail_pushes -= 1
            raise self.push_error or RuntimeError("push failed")
        self.pushes.append((user_id, message))

    async def close(self) -> None:
        self.closed = True

    @property
    def pushed_texts(self) -> list[str]:
        return [m.text for _, m in self.pushes if m.kind == "text"]

    @property
    def pushed_flex(self) -> list[OutboundMessage]:
        return [m for _, m in self.pushes if m.kind == "flex"]


@pytest.fixture
def messages() -> MessagesConfig:
    return MessagesConfig()


@pytest.fixture
def bank() -> CommentBank:
    return CommentBank.load()


@pytest.fixture
def composer(bank: CommentBank) -> ResponseComposer:
    return ResponseComposer(
        bank,
        promotional_image_url="https://example.com/images/promotion.png",
        promotional_link_url="https://note.com/enkyorikun/n/n38aad7b8a548",
    )


@pytest.fixture
def client() -> FakePlatformClient:
    return FakePlatformClient()


def build_pipeline(
    client: FakePlatformClient,
    composer: ResponseComposer,
    facade: TranscriptPipeline | None = None,
    timeout_s: float = 5.0,
    send_processing_notice: bool = True,
) -> EventPipeline:
    messages = MessagesConfig()
    return EventPipeline(
        client=client,
        fetcher=ContentFetcher(client, timeout_s=timeout_s),
        facade=facade or TranscriptPipeline(),
        composer=composer,
        delivery=DeliveryChannel(client, messages),
        messages=messages,
        send_processing_notice=send_processing_notice,
    )
