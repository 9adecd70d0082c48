"""LINE 导出的トーク履歴文本解析器。"""

import re
from datetime import date, datetime

from aisho.errors import ParseError
from aisho.transcript.models import ChatMessage

# 日期行：2024/01/01(月) 或 2024.01.01 月曜日
_DATE_RE = re.compile(r"^(\d{4})[/.](\d{1,2})[/.](\d{1,2})(?:\s*\(.+?\)|\s+\S+曜日)?\s*$")

# 消息行：12:00<TAB>名字<TAB>正文，时间可能带 午前/午後 前缀
_MESSAGE_RE = re.compile(r"^(午前|午後)?(\d{1,2}):(\d{2})\t([^\t]+)\t(.*)$")

# 系统消息行（撤回、加入等）：只有时间和一段文本
_SYSTEM_RE = re.compile(r"^(午前|午後)?\d{1,2}:\d{2}\t")


def _to_24h(meridiem: str | None, hour: int) -> int:
    if meridiem == "午後":
        return hour % 12 + 12
    if meridiem == "午前":
        return hour % 12
    return hour


def _unquote(text: str) -> str:
    """多行消息在导出时被双引号包裹。"""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1].replace('""', '"')
    return text


def _is_open_quote(lines: list[str]) -> bool:
    joined = "\n".join(lines)
    return joined.startswith('"') and not (len(joined) >= 2 and joined.endswith('"'))


def parse_talk_history(raw_text: str) -> list[ChatMessage]:
    """
    解析聊天记录文本。

    参数:
        raw_text: 附件解码后的完整文本。

    返回:
        按出现顺序排列的消息列表。

    异常:
        ParseError: 文本中没有任何可识别的消息。
    """
    text = raw_text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")

    messages: list[ChatMessage] = []
    current_date: date | None = None
    # 正在累积的消息：(时间戳, 发送者, 正文行)
    pending: tuple[datetime, str, list[str]] | None = None

    def flush() -> None:
        nonlocal pending
        if pending is not None:
            ts, sender, lines = pending
            messages.append(ChatMessage(timestamp=ts, sender=sender, text=_unquote("\n".join(lines))))
            pending = None

    for line in text.split("\n"):
        date_match = _DATE_RE.match(line)
        if date_match:
            flush()
            year, month, day = (int(g) for g in date_match.groups())
            try:
                current_date = date(year, month, day)
            except ValueError as e:
                raise ParseError(f"无效的日期行：{line!r}") from e
            continue

        message_match = _MESSAGE_RE.match(line)
        if message_match and current_date is not None:
            flush()
            meridiem, hour, minute, sender, body = message_match.groups()
            try:
                ts = datetime(
                    current_date.year, current_date.month, current_date.day,
                    _to_24h(meridiem, int(hour)), int(minute),
                )
            except ValueError as e:
                raise ParseError(f"无效的时间：{line!r}") from e
            pending = (ts, sender.strip(), [body])
            continue

        if _SYSTEM_RE.match(line) and current_date is not None:
            flush()
            continue

        if pending is not None:
            if line == "" and not _is_open_quote(pending[2]):
                flush()
            else:
                # 多行消息的续行
                pending[2].append(line)

    flush()

    if not messages:
        raise ParseError("未找到任何消息，文件可能不是 LINE 的トーク履歴")
    return messages
