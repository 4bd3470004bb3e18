"""
日期时间的解析、格式化和调整

调整不能直接在毫秒数上加减：月份长度不同，夏令时切换的那天也不是 24 小时。
年、月、日按日历字段调整（保持当天的钟点，月底自动收缩），
时、分、秒按真实经过的时间调整。
"""
import time
from dataclasses import dataclass, fields
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from .errors import ConfigError, UnparsableCandidateError

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 每个调整量允许的范围（正负）
ADJUSTMENT_LIMITS = {
    "years": 99,
    "months": 999,
    "days": 9999,
    "hours": 99999,
    "minutes": 999999,
    "seconds": 9999999,
}

_CALENDAR_UNITS = ("years", "months", "days")
_ELAPSED_UNITS = (("hours", 3600), ("minutes", 60), ("seconds", 1))


@dataclass(frozen=True)
class AdjustmentSpec:
    """加到找到的日期上的偏移量，按年、月、日、时、分、秒的顺序应用"""
    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def is_zero(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def validate(self) -> "AdjustmentSpec":
        for f in fields(self):
            value = getattr(self, f.name)
            limit = ADJUSTMENT_LIMITS[f.name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{f.name} 的调整量必须是整数: {value!r}")
            if not -limit <= value <= limit:
                raise ConfigError(f"{f.name} 的调整量必须在 {-limit} 到 {limit} 之间: {value}")
        return self


def parse_candidate(text: str) -> datetime:
    """把扫描到的日期字符串解析为本地时间（不带时区）"""
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError as e:
        raise UnparsableCandidateError(text, str(e)) from e


def format_datetime(dt: datetime) -> str:
    return dt.strftime(DATE_FORMAT)


def to_millis(dt: datetime) -> int:
    """本地时间转为纪元毫秒数"""
    return int(time.mktime(dt.timetuple())) * 1000 + dt.microsecond // 1000


def from_millis(ms: int) -> datetime:
    """纪元毫秒数转为本地时间"""
    seconds, millis = divmod(ms, 1000)
    return datetime.fromtimestamp(seconds) + timedelta(milliseconds=millis)


def format_millis(ms: int) -> str:
    return format_datetime(from_millis(ms))


def adjust_datetime(dt: datetime, spec: AdjustmentSpec) -> datetime:
    """按固定顺序逐项调整，每一步都在上一步的结果上进行

    例如 1 月 31 日加 1 个月得到 2 月的最后一天；
    跨过夏令时切换加 N 天，钟点不变。
    """
    result = dt
    for unit in _CALENDAR_UNITS:
        amount = getattr(spec, unit)
        if amount:
            result = result + relativedelta(**{unit: amount})
    for unit, unit_seconds in _ELAPSED_UNITS:
        amount = getattr(spec, unit)
        if amount:
            result = from_millis(to_millis(result) + amount * unit_seconds * 1000)
    return result
