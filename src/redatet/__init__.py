"""
照片日期修正工具包
从 JPEG 等文件中找到嵌入的拍摄日期，修正文件的修改时间或给文件名加上日期前缀
"""
from .config import RedateConfig, load_config
from .core.calendar_adjust import AdjustmentSpec, adjust_datetime
from .core.dst import DstCompensator, DstMode
from .core.models import ChangePlan, FileRecord, Outcome, SelectionPolicy, Totals
from .core.planner import ChangePlanner
from .core.runner import CancelToken, RedateRunner
from .core.scanner import scan_bytes, scan_candidates, scan_file
from .core.selector import select_best

__all__ = [
    # 配置
    'RedateConfig',
    'load_config',
    'AdjustmentSpec',
    'DstMode',
    'SelectionPolicy',
    # 核心功能
    'scan_candidates',
    'scan_bytes',
    'scan_file',
    'select_best',
    'adjust_datetime',
    'DstCompensator',
    'ChangePlanner',
    'RedateRunner',
    'CancelToken',
    # 数据模型
    'ChangePlan',
    'FileRecord',
    'Outcome',
    'Totals',
]
