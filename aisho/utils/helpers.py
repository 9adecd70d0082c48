"""aisho 的实用工具函数。"""

import json
from pathlib import Path
from typing import Any


def ensure_dir(path: Path) -> Path:
    """确保目录存在，必要时创建它。"""
    path.mkdir(parents=True, exist_ok=True)
    return path


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    """将字符串截断到最大长度，如果被截断则添加后缀。"""
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix


def serialize_compact(obj: Any) -> str:
    """紧凑 JSON 序列化（无空白，保留非 ASCII 字符），与平台实际收到的请求体一致。"""
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def serialized_size(obj: Any) -> int:
    """
    计算对象序列化后的 UTF-8 字节数。

    参数:
        obj: 可 JSON 序列化的对象。

    返回:
        字节数。
    """
    return len(serialize_compact(obj).encode("utf-8"))


def format_duration(seconds: float) -> str:
    """将秒数格式化为人类可读的持续时间。"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}毫秒"
    elif seconds < 60:
        return f"{seconds:.1f}秒"
    else:
        return f"{seconds/60:.1f}分钟"
