"""
照片日期修正工具
用 JPEG 文件中嵌入的日期修正文件的修改时间，或者给文件名加上日期前缀
"""
import os
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

import pyperclip
import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from redatet.config import RedateConfig, load_config
from redatet.core.calendar_adjust import AdjustmentSpec
from redatet.core.dst import DstMode
from redatet.core.errors import ConfigError
from redatet.core.events import EventKind, FileEvent
from redatet.core.models import SelectionPolicy
from redatet.core.report import EXIT_FAILURE, ShowMode, exit_status, format_summary, should_show
from redatet.core.runner import RedateRunner

console = Console()
app = typer.Typer(help="照片日期修正工具")


class Action(str, Enum):
    NONE = "none"      # 只查找日期，不修改
    REDATE = "redate"  # 修改文件修改时间
    RENAME = "rename"  # 给文件名加日期前缀
    BOTH = "both"


_ACTION_FLAGS = {
    Action.NONE: (False, False),
    Action.REDATE: (True, False),
    Action.RENAME: (False, True),
    Action.BOTH: (True, True),
}

_EVENT_STYLES = {
    EventKind.NOTICE: "bold",
    EventKind.COMMENT: "dim",
    EventKind.DEBUG: "dim cyan",
    EventKind.SUCCESS: "green",
    EventKind.FAILURE: "red",
}


def setup_logger(app_name="app", project_root=None, console_output=True):
    """配置 Loguru 日志系统

    Args:
        app_name: 应用名称，用于日志目录
        project_root: 项目根目录，默认为当前文件所在目录
        console_output: 是否输出到控制台，默认为True

    Returns:
        tuple: (logger, config_info)
            - logger: 配置好的 logger 实例
            - config_info: 包含日志配置信息的字典
    """
    if project_root is None:
        project_root = Path(__file__).parent.resolve()

    logger.remove()

    # 报告已经由 rich 输出，控制台日志只在 --verbose 时打开
    if console_output:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <blue>{elapsed}</blue> | <level>{level.icon} {level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
        )

    current_time = datetime.now()
    date_str = current_time.strftime("%Y-%m-%d")
    hour_str = current_time.strftime("%H")
    minute_str = current_time.strftime("%M%S")

    log_dir = os.path.join(project_root, "logs", app_name, date_str, hour_str)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f"{minute_str}.log")

    logger.add(
        log_file,
        level="DEBUG",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        encoding="utf-8",
        format="{time:YYYY-MM-DD HH:mm:ss} | {elapsed} | {level.icon} {level: <8} | {name}:{function}:{line} - {message}",
        enqueue=True,
    )

    config_info = {
        'log_file': log_file,
    }

    logger.info(f"日志系统已初始化，应用名称: {app_name}")
    return logger, config_info


def get_paths_from_clipboard() -> List[Path]:
    """从剪贴板获取路径列表"""
    paths = []
    clipboard_content = pyperclip.paste()
    if clipboard_content:
        for line in clipboard_content.splitlines():
            if line := line.strip().strip('"').strip("'"):
                path = Path(line)
                if path.exists():
                    paths.append(path)
                else:
                    console.print(f"[yellow]警告：路径不存在[/yellow] - {escape(line)}")
    logger.info(f"从剪贴板读取到 {len(paths)} 个有效路径")
    return paths


def read_paths_from_input() -> List[Path]:
    """从标准输入逐行读取路径，空行结束"""
    paths = []
    console.print("请输入要处理的文件或文件夹路径，每行一个，输入空行结束:")
    while True:
        try:
            line = input().strip()
        except EOFError:
            break
        if not line:
            break
        path = Path(line.strip('"').strip("'"))
        if path.exists():
            paths.append(path)
        else:
            console.print(f"[yellow]警告：路径不存在[/yellow] - {escape(line)}")
    return paths


def build_config(
    config_file: Optional[Path],
    policy: Optional[SelectionPolicy],
    action: Optional[Action],
    adjustment: dict,
    rename_format: Optional[str],
    dst: Optional[DstMode],
    tolerance: Optional[int],
    dry_run: bool,
    recursive: bool,
    hidden: bool,
) -> RedateConfig:
    """配置文件提供默认值，命令行选项覆盖它"""
    config = load_config(config_file) if config_file else RedateConfig().validate()

    apply_timestamp = apply_rename = None
    if action is not None:
        apply_timestamp, apply_rename = _ACTION_FLAGS[action]
    if rename_format and action is None:
        apply_rename = True

    given = {unit: value for unit, value in adjustment.items() if value is not None}
    new_adjustment = None
    if given:
        values = {unit: getattr(config.adjustment, unit) for unit in adjustment}
        values.update(given)
        new_adjustment = AdjustmentSpec(**values)

    return config.merged(
        selection_policy=policy,
        apply_timestamp=apply_timestamp,
        apply_rename=apply_rename,
        adjustment=new_adjustment,
        rename_format=rename_format,
        dst_mode=dst,
        tolerance_ms=tolerance,
        dry_run=dry_run or None,
        recursive=recursive or None,
        include_hidden=hidden or None,
    )


@app.command()
def redate(
    paths: List[Path] = typer.Argument(None, help="要处理的文件或文件夹路径列表"),
    clipboard: bool = typer.Option(False, "--clipboard", "-c", help="从剪贴板读取路径"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="TOML 配置文件"),
    policy: Optional[SelectionPolicy] = typer.Option(None, "--policy", "-t", help="使用最早(oldest)还是最新(newest)的日期"),
    action: Optional[Action] = typer.Option(None, "--action", "-a", help="修改时间、重命名、两者或都不做"),
    years: Optional[int] = typer.Option(None, "--years", help="加到日期上的年数"),
    months: Optional[int] = typer.Option(None, "--months", help="加到日期上的月数"),
    days: Optional[int] = typer.Option(None, "--days", help="加到日期上的天数"),
    hours: Optional[int] = typer.Option(None, "--hours", help="加到日期上的小时数"),
    minutes: Optional[int] = typer.Option(None, "--minutes", help="加到日期上的分钟数"),
    seconds: Optional[int] = typer.Option(None, "--seconds", help="加到日期上的秒数"),
    rename_format: Optional[str] = typer.Option(None, "--format", "-p", help="文件名前缀的 strftime 格式"),
    dst: Optional[DstMode] = typer.Option(None, "--dst", help="夏令时补偿: auto、always 或 never"),
    tolerance: Optional[int] = typer.Option(None, "--tolerance", help="小于这个毫秒数的差距视为正确"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="预览模式，只显示将要执行的操作"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="递归处理子文件夹"),
    hidden: bool = typer.Option(False, "--hidden", help="处理隐藏的文件和文件夹"),
    show: ShowMode = typer.Option(ShowMode.ALL, "--show", "-m", help="显示哪些文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="显示详细信息"),
):
    """修正照片文件的日期和名称"""
    setup_logger(app_name="redatet", console_output=verbose)

    adjustment = {
        "years": years, "months": months, "days": days,
        "hours": hours, "minutes": minutes, "seconds": seconds,
    }
    try:
        config = build_config(config_file, policy, action, adjustment, rename_format,
                              dst, tolerance, dry_run, recursive, hidden)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {escape(str(e))}")
        raise typer.Exit(code=EXIT_FAILURE)

    path_list = []
    if clipboard:
        path_list.extend(get_paths_from_clipboard())
    if paths:
        path_list.extend(paths)
    if not path_list:
        path_list = read_paths_from_input()
    if not path_list:
        console.print("[red]错误: 未提供任何有效的路径[/red]")
        raise typer.Exit(code=EXIT_FAILURE)

    def on_event(event: FileEvent) -> None:
        if should_show(event, show, verbose):
            console.print(escape(event.message), style=_EVENT_STYLES[event.kind])

    runner = RedateRunner(config, on_event=on_event)
    runner.start(path_list)
    try:
        with console.status("处理中...") as status:
            while not runner.join(timeout=0.2):
                counts = runner.totals.snapshot()
                status.update(f"已找到 {counts['files']:,} 个文件，已修改 {counts['change']:,} 个")
    except KeyboardInterrupt:
        runner.cancel()
        console.print("[yellow]正在取消...[/yellow]")
        runner.join()

    totals = runner.totals
    counts = totals.snapshot()
    console.print(Panel.fit(
        f"[green]已修改: {counts['change']:,}[/green]\n"
        f"[cyan]已正确: {counts['correct']:,}[/cyan]\n"
        f"[red]错误: {counts['error']:,}[/red]\n"
        f"[yellow]无日期: {counts['no_data']:,}[/yellow]",
        title="📊 处理结果",
        border_style="green"
    ))
    console.print(format_summary(totals))
    raise typer.Exit(code=exit_status(totals))


if __name__ == "__main__":
    app()
