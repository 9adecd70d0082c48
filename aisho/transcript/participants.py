"""确定聊天记录中哪一方是用户本人。"""

from collections import Counter

from aisho.transcript.models import ChatMessage


def _normalize(name: str) -> str:
    return "".join(name.split()).casefold()


def extract_participants(messages: list[ChatMessage], display_name: str | None) -> tuple[str, str]:
    """
    以平台显示名为提示，确定 (self, other)。

    顺序：完全匹配 → 忽略空白和大小写匹配 → 发言最多的一方视为本人。
    other 是除本人以外发言最多的一方。

    异常:
        ValueError: 发送者少于两人。
    """
    counts = Counter(m.sender for m in messages)
    ranked = [name for name, _ in counts.most_common()]
    if len(ranked) < 2:
        raise ValueError(f"聊天记录需要两名参与者，实际为 {len(ranked)} 名")

    self_name = None
    if display_name:
        if display_name in counts:
            self_name = display_name
        else:
            wanted = _normalize(display_name)
            self_name = next((n for n in ranked if _normalize(n) == wanted), None)
    if self_name is None:
        self_name = ranked[0]

    other_name = next(n for n in ranked if n != self_name)
    return self_name, other_name
