"""aisho 的配置模块。"""

from aisho.config.loader import get_config_path, load_config, save_config
from aisho.config.schema import Config

__all__ = ["Config", "load_config", "save_config", "get_config_path"]
