"""
夏令时补偿

Windows 设置文件修改时间时，按"现在"的夏令时规则换算，而不是目标时间
当时的规则。在冬天设置一个夏天的时间，结果会差一个小时。写入前先补上
两个时刻的时区差：

    corrected = target + offset(target) - offset(now)

显示已有的文件时间时反过来做一次，这样同一个存储值无论现在是不是
夏令时，显示出来都一样。
"""
import os
import time
from enum import Enum
from typing import Callable, Optional, Union

from loguru import logger

MILLIS_PER_MINUTE = 60_000

OffsetFunction = Callable[[int], int]


class DstMode(str, Enum):
    AUTO = "auto"      # 只在 Windows 上补偿
    ALWAYS = "always"
    NEVER = "never"


def utc_offset_minutes(ms: int) -> int:
    """本地时区在某个时刻相对 UTC 的分钟数（含夏令时）"""
    return time.localtime(ms // 1000).tm_gmtoff // 60


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def compensate_for_storage(
    target_ms: int,
    now_ms: Optional[int] = None,
    offset: OffsetFunction = utc_offset_minutes,
) -> int:
    """计算要交给文件系统的时间"""
    if now_ms is None:
        now_ms = now_millis()
    return target_ms + (offset(target_ms) - offset(now_ms)) * MILLIS_PER_MINUTE


def compensate_for_display(
    stored_ms: int,
    now_ms: Optional[int] = None,
    offset: OffsetFunction = utc_offset_minutes,
) -> int:
    """把文件系统中的时间还原为用于显示的时间"""
    if now_ms is None:
        now_ms = now_millis()
    return stored_ms - (offset(stored_ms) - offset(now_ms)) * MILLIS_PER_MINUTE


def is_affected_platform() -> bool:
    return os.name == "nt"


class DstCompensator:
    """根据配置决定是否补偿，并提供写入和显示两个方向"""

    def __init__(
        self,
        mode: Union[DstMode, str] = DstMode.AUTO,
        offset: OffsetFunction = utc_offset_minutes,
        clock: Callable[[], int] = now_millis,
    ):
        self.mode = DstMode(mode)
        self.offset = offset
        self.clock = clock
        if self.mode is DstMode.AUTO:
            self.enabled = is_affected_platform()
        else:
            self.enabled = self.mode is DstMode.ALWAYS
        logger.debug(f"夏令时补偿: {self.mode.value} ({'启用' if self.enabled else '关闭'})")

    def for_storage(self, target_ms: int) -> int:
        if not self.enabled:
            return target_ms
        return compensate_for_storage(target_ms, self.clock(), self.offset)

    def for_display(self, stored_ms: int) -> int:
        if not self.enabled:
            return stored_ms
        return compensate_for_display(stored_ms, self.clock(), self.offset)
