"""
redatet 配置

可以直接构造 RedateConfig，也可以从 TOML 文件读取，例如:

    selection_policy = "newest"
    apply_rename = true
    rename_format = "%Y-%m-%d %H-%M-%S "

    [adjustment]
    hours = -1
"""
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

import tomli
from loguru import logger

from .core.calendar_adjust import AdjustmentSpec
from .core.dst import DstMode
from .core.errors import ConfigError
from .core.models import SelectionPolicy
from .core.scanner import READ_LIMIT

# 重命名前缀的默认格式，只有"年月日 时分秒"的顺序能让文件按名称排序后按时间排列
DEFAULT_RENAME_FORMAT = "%Y-%m-%d %H-%M-%S "

# FAT16/FAT32 只能精确到 2 秒，差距小于这个值不修改
DEFAULT_TOLERANCE_MS = 2000

# 文件名中不允许出现的字符
FORBIDDEN_NAME_CHARS = '"*/:<>?\\|'


@dataclass
class RedateConfig:
    selection_policy: SelectionPolicy = SelectionPolicy.OLDEST
    adjustment: AdjustmentSpec = field(default_factory=AdjustmentSpec)
    apply_timestamp: bool = True
    apply_rename: bool = False
    rename_format: str = DEFAULT_RENAME_FORMAT
    dry_run: bool = False
    tolerance_ms: int = DEFAULT_TOLERANCE_MS
    read_limit: int = READ_LIMIT
    recursive: bool = False
    include_hidden: bool = False
    dst_mode: DstMode = DstMode.AUTO

    def __post_init__(self):
        self.selection_policy = SelectionPolicy(self.selection_policy)
        self.dst_mode = DstMode(self.dst_mode)
        if isinstance(self.adjustment, dict):
            self.adjustment = AdjustmentSpec(**self.adjustment)

    @property
    def rename_enabled(self) -> bool:
        """空的重命名格式等于关闭重命名"""
        return self.apply_rename and bool(self.rename_format)

    def validate(self) -> "RedateConfig":
        self.adjustment.validate()
        validate_rename_format(self.rename_format)
        if self.tolerance_ms < 0:
            raise ConfigError(f"容差不能为负数: {self.tolerance_ms}")
        if self.read_limit <= 0:
            raise ConfigError(f"读取上限必须大于 0: {self.read_limit}")
        return self

    def merged(self, **overrides: Any) -> "RedateConfig":
        """返回应用了覆盖项的新配置，值为 None 的项忽略"""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **changes).validate()


def validate_rename_format(rename_format: str) -> None:
    """用当前时间试着格式化一次，检查结果能否用作文件名"""
    if not rename_format:
        return
    try:
        sample = datetime.now().strftime(rename_format)
    except ValueError as e:
        raise ConfigError(f"重命名格式无效: {rename_format!r}: {e}") from e
    bad = sorted(set(sample) & set(FORBIDDEN_NAME_CHARS))
    if bad:
        raise ConfigError(
            f"重命名格式生成的文件名包含不允许的字符 {''.join(bad)}: {rename_format!r}"
        )


def config_from_dict(data: Dict[str, Any]) -> RedateConfig:
    data = dict(data)
    known = {f.name for f in fields(RedateConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"未知的配置项: {', '.join(unknown)}")

    adjustment = data.pop("adjustment", {})
    if not isinstance(adjustment, dict):
        raise ConfigError("adjustment 必须是一个表")
    try:
        return RedateConfig(adjustment=AdjustmentSpec(**adjustment), **data).validate()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"配置无效: {e}") from e


def load_config(config_path: Union[str, Path]) -> RedateConfig:
    """从 TOML 文件读取配置"""
    config_path = Path(config_path)
    try:
        with open(config_path, "rb") as f:
            data = tomli.load(f)
    except OSError as e:
        raise ConfigError(f"无法读取配置文件 {config_path}: {e}") from e
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"配置文件格式错误 {config_path}: {e}") from e

    config = config_from_dict(data)
    logger.info(f"已加载配置文件: {config_path}")
    return config
