"""
把用户给出的文件和文件夹展开成按顺序处理的文件列表
"""
import stat
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from loguru import logger

from .events import EventCallback, EventKind, FileEvent, emit
from .models import FileRecord, Outcome, Totals


def is_hidden(path: Path) -> bool:
    """点开头的名称，或 Windows 上带隐藏属性的文件"""
    if path.name.startswith("."):
        return True
    try:
        attributes = getattr(path.stat(), "st_file_attributes", 0)
    except OSError:
        return False
    return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))


def sort_entries(entries: Iterable[Path]) -> List[Path]:
    """文件在前、子文件夹在后，先按小写名称再按原名称排序"""
    def sort_key(entry: Path):
        return (1 if entry.is_dir() else 0, entry.name.lower(), entry.name)
    return sorted(entries, key=sort_key)


def list_folder(folder: Path) -> List[Path]:
    try:
        return sort_entries(folder.iterdir())
    except OSError as e:
        logger.warning(f"无法访问目录 {folder}: {e}")
        return []


class FileWalker:
    """
    逐个产出 FileRecord，同时统计文件数和文件夹数

    给出的路径无论是否隐藏都会处理，只有文件夹里的内容才看
    include_hidden 和 recursive。
    """

    def __init__(
        self,
        totals: Totals,
        recursive: bool = False,
        include_hidden: bool = False,
        on_event: Optional[EventCallback] = None,
        cancel=None,
    ):
        self.totals = totals
        self.recursive = recursive
        self.include_hidden = include_hidden
        self.on_event = on_event
        self.cancel = cancel

    def _cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.cancelled

    def walk(self, paths: Iterable[Union[str, Path]]) -> Iterator[FileRecord]:
        for path in paths:
            if self._cancelled():
                return
            yield from self._visit(Path(path))

    def _visit(self, path: Path) -> Iterator[FileRecord]:
        canon = path.resolve()

        if canon.is_dir():
            self.totals.increment("folders")
            emit(self.on_event, FileEvent(EventKind.NOTICE, canon, f"搜索文件夹 {canon}"))
            for entry in list_folder(canon):
                if self._cancelled():
                    return
                if not self.include_hidden and is_hidden(entry):
                    self._comment(entry, "忽略隐藏文件或子文件夹")
                elif entry.is_dir():
                    if self.recursive:
                        yield from self._visit(entry)
                    else:
                        self._comment(entry, "忽略子文件夹")
                elif entry.is_file():
                    yield from self._visit(entry)
            return

        if not canon.is_file():
            emit(self.on_event, FileEvent(
                EventKind.NOTICE, canon, f"{canon.name} - 不是文件或文件夹", outcome=Outcome.FAILED))
            self.totals.increment("error")
            return

        # 取消之后的文件不计数
        if self._cancelled():
            return
        self.totals.increment("files")
        try:
            record = FileRecord.from_path(canon)
        except OSError as e:
            emit(self.on_event, FileEvent(
                EventKind.NOTICE, canon, f"{canon.name} - {e}", outcome=Outcome.FAILED))
            self.totals.increment("error")
            return
        yield record

    def _comment(self, path: Path, text: str) -> None:
        emit(self.on_event, FileEvent(EventKind.COMMENT, path, f"{path.name} - {text}"))
