"""配置加载工具。"""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from aisho.config.schema import Config
from aisho.utils.helpers import ensure_dir


# 文件中留空的凭据不覆盖环境变量（onboard 会写出空字符串）
_CREDENTIAL_KEYS = ("channel_access_token", "channel_secret")


def _drop_empty_credentials(data: dict[str, Any]) -> dict[str, Any]:
    line = data.get("line")
    if isinstance(line, dict):
        data["line"] = {k: v for k, v in line.items() if not (k in _CREDENTIAL_KEYS and v == "")}
    return data


def get_config_path() -> Path:
    """获取默认配置文件路径。"""
    return Path.home() / ".aisho" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    从文件加载配置，环境变量（AISHO_*）同样生效。

    参数:
        config_path: 可选的配置文件路径。未提供时使用默认路径。

    返回:
        加载的配置对象。文件中的非空值优先于环境变量。
    """
    path = config_path or get_config_path()

    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"无法从 {path} 加载配置：{e}，使用默认配置")
            data = {}

    if not isinstance(data, dict):
        logger.warning(f"配置文件 {path} 顶层不是对象，使用默认配置")
        data = {}
    return Config(**_drop_empty_credentials(data))


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """
    将配置保存到文件。

    参数:
        config: 要保存的配置。
        config_path: 可选的保存路径。未提供时使用默认路径。

    返回:
        实际写入的路径。
    """
    path = config_path or get_config_path()
    ensure_dir(path.parent)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
    return path
