"""aisho 的 CLI 命令。"""

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from aisho import __logo__, __version__

app = typer.Typer(
    name="aisho",
    help=f"{__logo__} aisho - LINE 聊天记录相性诊断",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} aisho v{__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """aisho - LINE 聊天记录相性诊断。"""
    pass


# ============================================================================
# 入门 / 设置
# ============================================================================


@app.command()
def onboard():
    """初始化 aisho 配置。"""
    from aisho.config.loader import get_config_path, save_config
    from aisho.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]配置已存在于 {config_path}[/yellow]")
        if not typer.confirm("覆盖？"):
            raise typer.Exit()

    save_config(Config())
    console.print(f"[green]✓[/green] 已在 {config_path} 创建配置")

    console.print(f"\n{__logo__} aisho 已准备就绪！")
    console.print("\n下一步：")
    console.print("  1. 将 LINE 频道访问令牌和频道密钥添加到 [cyan]~/.aisho/config.json[/cyan]")
    console.print("     在 https://developers.line.biz/console/ 获取")
    console.print("  2. 设置 [cyan]composer.base_url[/cyan] 为宣传图片所在的外部地址")
    console.print("  3. 启动服务：[cyan]aisho serve[/cyan]")


# ============================================================================
# 服务
# ============================================================================


@app.command()
def serve(
    port: int | None = typer.Option(None, "--port", "-p", help="服务端口（默认读取配置）"),
    host: str | None = typer.Option(None, "--host", help="监听地址（默认读取配置）"),
    verbose: bool = typer.Option(False, "--verbose", help="详细输出"),
):
    """启动 webhook 服务。"""
    import uvicorn

    from aisho.config.loader import load_config
    from aisho.server.app import create_app

    _setup_logging(verbose)
    config = load_config()
    host = host or config.server.host
    port = port or config.server.port

    console.print(f"{__logo__} 正在 {host}:{port} 上启动 aisho（webhook：{config.server.webhook_path}）...")
    uvicorn.run(create_app(config), host=host, port=port, log_level="debug" if verbose else "info")


# ============================================================================
# 离线分析
# ============================================================================


@app.command()
def analyze(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="导出的 LINE 聊天记录（.txt）"),
    name: str | None = typer.Option(None, "--name", "-n", help="你在聊天记录中的名字"),
    verbose: bool = typer.Option(False, "--verbose", help="详细输出"),
):
    """在本地分析一份聊天记录，不连接 LINE。"""
    from aisho.config.loader import load_config
    from aisho.errors import AnalyticsError, ParseError
    from aisho.pipeline.facade import TranscriptPipeline
    from aisho.server.app import build_composer

    _setup_logging(verbose)
    config = load_config()
    raw_text = file.read_bytes().decode("utf-8", errors="replace")

    try:
        result = asyncio.run(TranscriptPipeline().process(raw_text, name))
    except (ParseError, AnalyticsError, ValueError) as e:
        console.print(f"[red]分析失败：{e}[/red]")
        raise typer.Exit(1)

    composer = build_composer(config)
    composed = composer.compose(result)

    console.print(f"{__logo__} {result.self_name} × {result.other_name}（{result.message_count} 条消息）\n")

    table = Table(title="相性得分")
    table.add_column("类别", style="cyan")
    table.add_column("得分", justify="right", style="green")
    for category, score in result.compatibility.radar_scores.items():
        table.add_row(category, str(score))
    table.add_row("[bold]综合[/bold]", f"[bold]{result.compatibility.overall}[/bold]")
    console.print(table)

    profile = composer.bank.animal_type(result.zodiac.animal_type)
    console.print(f"干支类型：{profile.name or result.zodiac.animal_type} {profile.title}")

    report = composed.size_report
    if report is not None:
        sizes = "、".join(str(s) for s in report.page_sizes)
        status = "[red]超过上限[/red]" if report.oversize else "[green]正常[/green]"
        console.print(f"消息大小：{report.total_bytes} bytes（每页：{sizes}）{status}")


@app.command()
def status():
    """显示 aisho 状态。"""
    from aisho.config.loader import get_config_path, load_config

    config_path = get_config_path()
    config = load_config()

    console.print(f"{__logo__} aisho 状态\n")
    console.print(f"配置：{config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")

    table = Table(title="配置")
    table.add_column("项目", style="cyan")
    table.add_column("值", style="yellow")
    table.add_row("LINE 访问令牌", "[green]✓[/green]" if config.line.channel_access_token else "[dim]未设置[/dim]")
    table.add_row("LINE 频道密钥", "[green]✓[/green]" if config.line.channel_secret else "[dim]未设置[/dim]")
    table.add_row("签名校验", "开启" if config.line.signature_required else "关闭")
    table.add_row("调度方式", config.pipeline.dispatch_mode)
    table.add_row("获取超时", f"{config.pipeline.fetch_timeout_s}s")
    table.add_row("宣传图片", config.promotional_image_url)
    table.add_row("监听地址", f"{config.server.host}:{config.server.port}{config.server.webhook_path}")
    console.print(table)


if __name__ == "__main__":
    app()
