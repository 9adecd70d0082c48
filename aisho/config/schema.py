"""使用 Pydantic 的配置模式定义。"""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LineConfig(BaseModel):
    """LINE Messaging API 频道配置。"""
    channel_access_token: str = ""  # 从 LINE Developers 控制台获取的长期访问令牌
    channel_secret: str = ""  # 用于 webhook 签名校验
    verify_signature: bool = True  # 为 false 时跳过 x-line-signature 校验（仅限本地调试）

    @property
    def signature_required(self) -> bool:
        """除非显式关闭，否则总是校验签名；未配置密钥时所有请求都会被拒绝。"""
        return self.verify_signature


class PipelineConfig(BaseModel):
    """事件管道配置。"""
    dispatch_mode: Literal["concurrent", "sequential"] = "concurrent"  # 同一请求中多个事件的调度方式
    send_processing_notice: bool = True  # 分析前先用 reply 令牌发送"分析中"提示
    race_fetch_timeout: bool = True  # 附件获取是否与超时竞争
    fetch_timeout_s: float = 5.0
    dedup_capacity: int = 1000  # 去重缓存容量（FIFO 淘汰）
    size_ceiling_bytes: int = 25000  # Flex 消息总大小告警阈值


class MessagesConfig(BaseModel):
    """发送给用户的固定文本。"""
    processing: str = "📝 トーク履歴を分析中です...\nしばらくお待ちください（1-2分程度）"
    file_read_error: str = "⚠️ ファイルの読み込み中にエラーが発生しました"
    parse_error: str = "⚠️ トーク履歴の解析に失敗しました"
    generic_error: str = "⚠️ 分析中にエラーが発生しました。もう一度お試しください。"
    delivery_failed: str = "⚠️ 結果の送信に失敗しました"


class ComposerConfig(BaseModel):
    """结果消息组装配置。"""
    base_url: str = ""  # 静态资源的外部访问地址，例如 https://example.com
    promotional_image_path: str = "/images/promotion.png"
    promotional_link_url: str = "https://note.com/enkyorikun/n/n38aad7b8a548"
    comments_path: str | None = None  # 自定义评论库 JSON；为空时使用内置数据


class ServerConfig(BaseModel):
    """HTTP 服务配置。"""
    host: str = "0.0.0.0"
    port: int = 3000
    webhook_path: str = "/webhook"
    production: bool = False
    shutdown_grace_s: float = 10.0  # 关闭时等待进行中管道的时间


class Config(BaseSettings):
    """aisho 的根配置。"""
    line: LineConfig = Field(default_factory=LineConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    composer: ComposerConfig = Field(default_factory=ComposerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    model_config = SettingsConfigDict(
        env_prefix="AISHO_",
        env_nested_delimiter="__",
    )

    @property
    def promotional_image_url(self) -> str:
        """获取宣传图片的绝对 URL。"""
        base = self.composer.base_url.rstrip("/")
        return f"{base}{self.composer.promotional_image_path}"
