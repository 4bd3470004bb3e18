"""
处理过程中的事件

每个事件对应报告中的一行，同时写入 loguru 日志。
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .models import Outcome


class EventKind(str, Enum):
    NOTICE = "notice"    # 总是显示：搜索文件夹、读取失败、取消等
    COMMENT = "comment"  # 一般信息：已正确、未找到日期、忽略隐藏文件
    DEBUG = "debug"      # 详细信息，只在 --verbose 时显示
    SUCCESS = "success"  # 修改成功或模拟修改
    FAILURE = "failure"  # 修改失败或只读


@dataclass(frozen=True)
class FileEvent:
    kind: EventKind
    path: Path
    message: str  # 完整的一行报告
    outcome: Optional[Outcome] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name

    def __str__(self) -> str:
        return self.message


EventCallback = Callable[[FileEvent], None]

_LOG_LEVELS = {
    EventKind.NOTICE: "INFO",
    EventKind.COMMENT: "INFO",
    EventKind.DEBUG: "DEBUG",
    EventKind.SUCCESS: "SUCCESS",
    EventKind.FAILURE: "ERROR",
}


def emit(on_event: Optional[EventCallback], event: FileEvent) -> FileEvent:
    """记录日志并把事件交给回调"""
    logger.log(_LOG_LEVELS[event.kind], event.message)
    if on_event is not None:
        on_event(event)
    return event
