"""
从扫描到的日期中选出最合适的一个
"""
from typing import Iterable, Optional, Union

from loguru import logger

from .models import SelectionPolicy

# 合理的照片日期范围，按字符串比较。上下限都是日期字符串的前缀，
# 所以与上限同一天的日期（带时间后比上限长）会被排除。
DATE_LOWER = "1980-01-02"
DATE_UPPER = "2099-12-30"


def in_validity_window(candidate: str) -> bool:
    """日期字符串是否在合理范围内

    ISO 格式的字符串排序与时间顺序一致，直接比较字符串即可。
    """
    return DATE_LOWER <= candidate <= DATE_UPPER


def select_best(
    candidates: Iterable[str],
    policy: Union[SelectionPolicy, str] = SelectionPolicy.OLDEST,
) -> Optional[str]:
    """按策略选出最早或最新的日期

    参数:
        candidates: 扫描器输出的日期字符串
        policy: OLDEST 取最早的，NEWEST 取最新的

    返回:
        选中的日期字符串，没有合适的日期时返回 None
    """
    policy = SelectionPolicy(policy)
    best = None
    for candidate in candidates:
        if not in_validity_window(candidate):
            logger.debug(f"日期 {candidate} 不在 {DATE_LOWER} 到 {DATE_UPPER} 范围内")
            continue
        if best is None:
            best = candidate
        elif policy is SelectionPolicy.OLDEST and candidate < best:
            best = candidate
        elif policy is SelectionPolicy.NEWEST and candidate > best:
            best = candidate
    return best
