"""redatet 测试公共夹具"""

import os
import time
from datetime import datetime

import pytest

from redatet.config import RedateConfig
from redatet.core.calendar_adjust import to_millis
from redatet.core.dst import DstMode

JPEG_HEADER = b"\xff\xd8\xff\xe1\x00\x2aExif\x00\x00MM\x00\x2a\x00\x00\x00\x08"


def exif_bytes(*stamps: str, filler: bytes = b"\x01\x02\x03\x04") -> bytes:
    """构造一段类似 JPEG 的数据，每个 Exif 日期后面跟空字节"""
    data = JPEG_HEADER
    for stamp in stamps:
        data += filler + stamp.encode("ascii") + b"\x00"
    return data + filler * 8


def set_mtime(path, dt_or_ms) -> int:
    """设置文件修改时间，返回毫秒数"""
    ms = to_millis(dt_or_ms) if isinstance(dt_or_ms, datetime) else dt_or_ms
    os.utime(path, ns=(ms * 1_000_000, ms * 1_000_000))
    return ms


@pytest.fixture
def make_photo(tmp_path):
    """在临时目录中创建带嵌入日期的文件"""
    def _make(name: str, *stamps: str, mtime=datetime(2020, 6, 15, 12, 0, 0), folder=None):
        target_dir = folder or tmp_path
        path = target_dir / name
        path.write_bytes(exif_bytes(*stamps))
        set_mtime(path, mtime)
        return path
    return _make


@pytest.fixture
def config():
    """测试用配置：关闭夏令时补偿，结果与平台无关"""
    return RedateConfig(dst_mode=DstMode.NEVER)


@pytest.fixture
def local_tz():
    """临时切换本地时区"""
    if not hasattr(time, "tzset"):
        pytest.skip("当前平台不支持 time.tzset")

    original = os.environ.get("TZ")

    def _set(name: str):
        os.environ["TZ"] = name
        time.tzset()

    yield _set

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()
