"""
修改文件时间戳和文件名的底层操作
"""
import errno
import os
from pathlib import Path

from loguru import logger


def set_modified_time(file_path: Path, target_ms: int) -> None:
    """
    设置文件的修改时间，保留访问时间

    参数:
        file_path: 文件路径
        target_ms: 目标修改时间，纪元毫秒数
    """
    stat = os.stat(file_path)
    target_ns = target_ms * 1_000_000
    os.utime(file_path, ns=(stat.st_atime_ns, target_ns))
    logger.debug(f"已设置 {file_path} 的修改时间为 {target_ms} ms")


def rename_in_place(file_path: Path, new_name: str) -> Path:
    """
    在同一文件夹内重命名文件，不覆盖已存在的文件

    返回:
        重命名后的路径
    """
    file_path = Path(file_path)
    target = file_path.with_name(new_name)
    if target.exists():
        raise FileExistsError(errno.EEXIST, "目标文件已存在", str(target))
    os.rename(file_path, target)
    logger.debug(f"已重命名 {file_path} -> {target}")
    return target
