"""redatet 数据模型"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Dict


class SelectionPolicy(str, Enum):
    """一个文件里找到多个日期时取哪一个"""
    OLDEST = "oldest"  # 最早的日期，一般是原始拍摄时间
    NEWEST = "newest"  # 最新的日期，一般是编辑（旋转等）时间


class Outcome(str, Enum):
    """修改时间或重命名这一子操作的结果"""
    CORRECT = "correct"      # 已经正确，不需要修改
    SIMULATED = "simulated"  # 预览模式，只报告不修改
    CHANGED = "changed"      # 修改成功
    BLOCKED = "blocked"      # 只读文件，没有尝试修改
    FAILED = "failed"        # 系统拒绝了修改
    SKIPPED = "skipped"      # 用户没有要求这个操作

    @property
    def is_error(self) -> bool:
        return self in (Outcome.BLOCKED, Outcome.FAILED)


@dataclass(frozen=True)
class FileRecord:
    """待处理的单个文件，由 FileWalker 生成"""
    path: Path
    name: str
    mtime_ms: int  # 当前修改时间，毫秒
    writable: bool = True
    is_dir: bool = False

    @classmethod
    def from_path(cls, path: Path) -> "FileRecord":
        path = Path(path)
        stat = path.stat()
        return cls(
            path=path,
            name=path.name,
            mtime_ms=stat.st_mtime_ns // 1_000_000,
            writable=os.access(path, os.W_OK),
            is_dir=path.is_dir(),
        )


@dataclass
class ChangePlan:
    """根据文件中找到的日期计算出的修改计划"""
    candidate: str         # 选中的日期字符串
    adjusted: datetime     # 调整后的本地时间
    target_ms: int         # 要写入的修改时间（已做夏令时补偿）
    prefix: str            # 文件名前缀，重命名关闭时为空
    target_name: str
    timestamp: Outcome = Outcome.SKIPPED
    name: Outcome = Outcome.SKIPPED

    @property
    def changed(self) -> bool:
        return Outcome.CHANGED in (self.timestamp, self.name)

    @property
    def has_error(self) -> bool:
        return self.timestamp.is_error or self.name.is_error

    @property
    def correct(self) -> bool:
        """至少一项正确，且没有修改也没有错误"""
        return (Outcome.CORRECT in (self.timestamp, self.name)
                and not self.changed and not self.has_error)


TOTAL_FIELDS = ("files", "folders", "correct", "change", "error", "no_data")


@dataclass
class Totals:
    """一次处理的计数器

    只属于一次运行。工作线程写入，控制线程可以随时读取快照。
    """
    files: int = 0
    folders: int = 0
    correct: int = 0
    change: int = 0
    error: int = 0
    no_data: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def increment(self, name: str, amount: int = 1) -> None:
        if name not in TOTAL_FIELDS:
            raise ValueError(f"未知的计数器: {name}")
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {name: getattr(self, name) for name in TOTAL_FIELDS}

    def reset(self) -> None:
        with self._lock:
            for name in TOTAL_FIELDS:
                setattr(self, name, 0)
