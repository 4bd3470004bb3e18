"""
报告：汇总行、按显示模式过滤事件、退出状态
"""
from enum import Enum
from typing import Dict, Union

from .events import EventKind, FileEvent
from .models import Totals

EXIT_FAILURE = -1  # 有错误
EXIT_UNKNOWN = 0   # 没有修改任何文件
EXIT_SUCCESS_LIMIT = 2 ** 31 - 1


class ShowMode(str, Enum):
    ALL = "all"                        # 所有文件和一般信息
    CHANGES = "changes"                # 只显示修改成功的
    CHANGES_ERRORS = "changes-errors"  # 修改成功的和出错的
    ERRORS = "errors"                  # 只显示出错的


def should_show(event: FileEvent, mode: ShowMode = ShowMode.ALL, verbose: bool = False) -> bool:
    if verbose:
        return True
    mode = ShowMode(mode)
    if event.kind is EventKind.DEBUG:
        return False
    if event.kind is EventKind.COMMENT:
        return mode is ShowMode.ALL
    if event.kind is EventKind.FAILURE:
        return mode is not ShowMode.CHANGES
    if event.kind is EventKind.SUCCESS:
        return mode is not ShowMode.ERRORS
    return True


def _counts(totals: Union[Totals, Dict[str, int]]) -> Dict[str, int]:
    return totals.snapshot() if isinstance(totals, Totals) else totals


def format_summary(totals: Union[Totals, Dict[str, int]]) -> str:
    c = _counts(totals)
    return (
        f"在 {c['folders']:,} 个文件夹中找到 {c['files']:,} 个文件: "
        f"正确 {c['correct']:,}，已修改 {c['change']:,}，"
        f"错误 {c['error']:,}，无日期 {c['no_data']:,}"
    )


def exit_status(totals: Union[Totals, Dict[str, int]]) -> int:
    """有错误返回 -1，否则返回修改的文件数，什么都没做返回 0"""
    c = _counts(totals)
    if c["error"] > 0:
        return EXIT_FAILURE
    if c["change"] > 0:
        return min(c["change"], EXIT_SUCCESS_LIMIT)
    return EXIT_UNKNOWN
