"""
aisho 的 FastAPI 应用。

应用工厂在创建时就组装好全部组件并放入 app.state，测试可以注入假的平台客户端。
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from aisho import __version__
from aisho.channels.base import PlatformClient
from aisho.compose.comments import CommentBank
from aisho.compose.composer import ResponseComposer
from aisho.compose.size_guard import SizeGuard
from aisho.config.schema import Config
from aisho.ingress.controller import IngressController
from aisho.pipeline.dedup import DedupCache
from aisho.pipeline.delivery import DeliveryChannel
from aisho.pipeline.dispatcher import TaskDispatcher
from aisho.pipeline.facade import TranscriptPipeline
from aisho.pipeline.fetcher import ContentFetcher
from aisho.pipeline.handler import EventPipeline

WEBHOOK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def build_composer(config: Config) -> ResponseComposer:
    """根据配置创建结果消息组装器（评论库只加载一次）。"""
    return ResponseComposer(
        CommentBank.load(config.composer.comments_path),
        promotional_image_url=config.promotional_image_url,
        promotional_link_url=config.composer.promotional_link_url,
        size_guard=SizeGuard(config.pipeline.size_ceiling_bytes),
    )


def build_controller(config: Config, client: PlatformClient) -> IngressController:
    """组装入口控制器及其依赖。"""
    pipeline_cfg = config.pipeline
    pipeline = EventPipeline(
        client=client,
        fetcher=ContentFetcher(
            client,
            timeout_s=pipeline_cfg.fetch_timeout_s,
            race_timeout=pipeline_cfg.race_fetch_timeout,
        ),
        facade=TranscriptPipeline(),
        composer=build_composer(config),
        delivery=DeliveryChannel(client, config.messages),
        messages=config.messages,
        send_processing_notice=pipeline_cfg.send_processing_notice,
    )
    return IngressController(
        pipeline=pipeline,
        dedup=DedupCache(pipeline_cfg.dedup_capacity),
        dispatcher=TaskDispatcher(),
        line_config=config.line,
        dispatch_mode=pipeline_cfg.dispatch_mode,
    )


def create_app(config: Config | None = None, client: PlatformClient | None = None) -> FastAPI:
    """
    创建 FastAPI 应用。

    参数:
        config: 配置；为 None 时从配置文件和环境变量加载。
        client: 平台客户端；为 None 时使用 LineChannel。
    """
    if config is None:
        from aisho.config.loader import load_config
        config = load_config()
    if client is None:
        from aisho.channels.line import LineChannel
        client = LineChannel(config.line)

    controller = build_controller(config, client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"aisho v{__version__} 启动（{'production' if config.server.production else 'development'}）")
        logger.info(f"LINE 访问令牌：{'已设置' if config.line.channel_access_token else '未设置'}")
        logger.info(f"LINE 频道密钥：{'已设置' if config.line.channel_secret else '未设置'}")
        if not config.line.signature_required:
            logger.warning("webhook 签名校验已关闭")
        elif not config.line.channel_secret:
            logger.error("未配置 LINE 频道密钥，所有 webhook 请求都会被拒绝（401）")
        yield
        running = controller.dispatcher.get_running_count()
        if running:
            logger.info(f"等待 {running} 个进行中的任务...")
            await controller.dispatcher.join(timeout=config.server.shutdown_grace_s)
        await client.close()
        logger.info("aisho 已停止")

    app = FastAPI(title="aisho", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.client = client
    app.state.controller = controller

    @app.api_route(config.server.webhook_path, methods=WEBHOOK_METHODS)
    async def webhook(request: Request):
        body = await request.body()
        response = await controller.handle(request.method, dict(request.headers), body)
        return JSONResponse(status_code=response.status, content=response.body)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "version": __version__,
            "running_tasks": controller.dispatcher.get_running_count(),
        }

    return app
