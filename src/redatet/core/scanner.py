"""
从二进制文件中找出嵌入的日期和时间

JPEG 文件的 Exif 数据里日期的格式是 "YYYY:MM:DD HH:MM:SS"，以空字节结尾。
这里不解析 Exif 结构（字节序、偏移表、标签目录），只用一个有限状态机
逐字节扫描文件开头的一段数据。

状态编号就是已经匹配的字符数（0 到 19）。第 4、7、10、13、16 位是分隔符，
其余是数字。匹配时直接把分隔符换成 ISO 格式，输出 "YYYY-MM-DD HH:MM:SS"。

两个恢复规则让扫描器不用回溯：
  - 年份之后又来了数字：丢掉最早的一位，保留最近四位。
  - 其他分隔符位置来了数字：最近两位数字当作新年份的前两位，
    这个数字当作第三位，直接跳到状态 3。
"""
import io
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Union

from loguru import logger

# 最初的相机文件日期通常在前 1 KB，编辑过的文件在前 8 KB
READ_LIMIT = 0x10000
CHUNK_SIZE = 0x2000

CANDIDATE_LENGTH = 19
ISO_TEMPLATE = b"0000-00-00 00:00:00"

# 文件中分隔符的位置和期望的字节
STREAM_SEPARATORS = {
    4: ord(":"),
    7: ord(":"),
    10: ord(" "),
    13: ord(":"),
    16: ord(":"),
}

YEAR_END = 4
NULL_BYTE = 0x00


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


class MatchBuffer:
    """一次匹配的字符缓冲区

    只有数字位置会被写入，分隔符位置始终是 ISO 模板中的字符。
    """

    __slots__ = ("chars",)

    def __init__(self):
        self.chars = bytearray(ISO_TEMPLATE)

    def put_digit(self, position: int, byte: int) -> None:
        if position in STREAM_SEPARATORS:
            raise ValueError(f"位置 {position} 是分隔符")
        self.chars[position] = byte

    def shift_year(self, byte: int) -> None:
        """年份多出一位数字：丢掉最早的一位，其余左移"""
        self.chars[0:3] = self.chars[1:4]
        self.chars[3] = byte

    def restart_year(self, state: int, byte: int) -> None:
        """分隔符位置来了数字：用最近两位数字开始一个新年份"""
        self.chars[0] = self.chars[state - 2]
        self.chars[1] = self.chars[state - 1]
        self.chars[2] = byte

    def text(self) -> str:
        return self.chars.decode("ascii")


class CandidateScanner:
    """逐字节喂入数据，每找到一个完整的日期就返回它"""

    def __init__(self):
        self.state = 0
        self.buffer = MatchBuffer()

    def reset(self) -> None:
        self.state = 0
        self.buffer = MatchBuffer()

    def feed(self, byte: int) -> Optional[str]:
        state = self.state
        digit = _is_digit(byte)

        if state == CANDIDATE_LENGTH:
            if byte == NULL_BYTE:
                found = self.buffer.text()
                self.reset()
                return found
            if digit:
                self._restart_year(byte)
            else:
                self.state = 0
        elif state == YEAR_END:
            if byte == STREAM_SEPARATORS[state]:
                self.state += 1
            elif digit:
                self.buffer.shift_year(byte)
            else:
                self.state = 0
        elif state in STREAM_SEPARATORS:
            if byte == STREAM_SEPARATORS[state]:
                self.state += 1
            elif digit:
                self._restart_year(byte)
            else:
                self.state = 0
        elif digit:
            self.buffer.put_digit(state, byte)
            self.state += 1
        else:
            self.state = 0
        return None

    def _restart_year(self, byte: int) -> None:
        self.buffer.restart_year(self.state, byte)
        self.state = 3


def scan_candidates(stream: BinaryIO, limit: int = READ_LIMIT) -> Iterator[str]:
    """扫描字节流，逐个产出找到的日期字符串

    参数:
        stream: 以二进制方式打开的流
        limit: 最多读取的字节数，读到上限时未完成的匹配直接丢弃

    返回:
        "YYYY-MM-DD HH:MM:SS" 格式字符串的迭代器，尚未做范围检查
    """
    scanner = CandidateScanner()
    remaining = limit
    while remaining > 0:
        chunk = stream.read(min(CHUNK_SIZE, remaining))
        if not chunk:
            break
        remaining -= len(chunk)
        for byte in chunk:
            found = scanner.feed(byte)
            if found is not None:
                yield found


def scan_bytes(data: bytes, limit: int = READ_LIMIT) -> List[str]:
    """扫描内存中的数据"""
    return list(scan_candidates(io.BytesIO(data), limit))


def scan_file(file_path: Union[str, Path], limit: int = READ_LIMIT) -> List[str]:
    """扫描文件开头最多 limit 个字节

    读取出错时抛出 OSError，由调用者按该文件出错处理。
    """
    with open(file_path, "rb") as f:
        candidates = list(scan_candidates(f, limit))
    logger.debug(f"扫描 {file_path}: 找到 {len(candidates)} 个日期")
    return candidates
