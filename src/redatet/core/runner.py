"""
一次完整的处理过程

文件严格按顺序处理，保证计数和日志顺序确定。可以在当前线程运行，
也可以放到一个后台工作线程里运行，控制线程通过 CancelToken 请求取消，
取消在文件之间生效，不会打断正在扫描的文件。
"""
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Union

from loguru import logger

from ..config import RedateConfig
from .events import EventCallback, EventKind, FileEvent, emit
from .models import Totals
from .planner import ChangePlanner
from .report import format_summary
from .walker import FileWalker


class CancelToken:
    """线程间共享的取消标志"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class RedateRunner:
    """运行处理过程，最多同时有一个后台工作线程"""

    def __init__(self, config: RedateConfig, on_event: Optional[EventCallback] = None):
        self.config = config
        self.on_event = on_event
        self.cancel_token = CancelToken()
        self.totals = Totals()
        self.error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(self, paths: Iterable[Union[str, Path]]) -> Totals:
        """在当前线程处理所有路径，返回本次的计数"""
        self.cancel_token.reset()
        self.totals = Totals()
        return self._run(list(paths), self.totals)

    def start(self, paths: Iterable[Union[str, Path]]) -> None:
        """在后台工作线程中处理"""
        if self.is_running:
            raise RuntimeError("已有处理任务在运行")
        self.cancel_token.reset()
        self.totals = Totals()
        self.error = None
        self._thread = threading.Thread(
            target=self._worker,
            args=(list(paths), self.totals),
            name="redatet-worker",
            daemon=True,
        )
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """等待工作线程结束，返回是否已经结束

        工作线程中出现的意外异常在这里重新抛出。
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        if self._thread.is_alive():
            return False
        if self.error is not None:
            error, self.error = self.error, None
            raise error
        return True

    def cancel(self) -> None:
        self.cancel_token.cancel()

    def _worker(self, paths: List[Path], totals: Totals) -> None:
        try:
            self._run(paths, totals)
        except Exception as e:
            logger.exception(f"处理过程意外中止: {e}")
            self.error = e

    def _run(self, paths: List[Path], totals: Totals) -> Totals:
        logger.info(f"开始处理 {len(paths)} 个路径")
        walker = FileWalker(
            totals,
            recursive=self.config.recursive,
            include_hidden=self.config.include_hidden,
            on_event=self.on_event,
            cancel=self.cancel_token,
        )
        planner = ChangePlanner(self.config, totals, on_event=self.on_event)

        for record in walker.walk(paths):
            planner.process_record(record)

        if self.cancel_token.cancelled:
            emit(self.on_event, FileEvent(EventKind.NOTICE, Path("."), "用户已取消处理"))
        logger.info(format_summary(totals))
        return totals
