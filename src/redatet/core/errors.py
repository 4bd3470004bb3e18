"""redatet 异常定义"""


class RedateError(Exception):
    """redatet 异常基类"""


class ConfigError(RedateError):
    """配置无效，例如调整量超出范围或重命名格式不合法"""


class UnparsableCandidateError(RedateError):
    """扫描得到的日期字符串无法解析为时间

    扫描器只输出数字位置全是数字的字符串，但 13 月、2 月 30 日这类
    值仍然无法解析，遇到时按该文件出错处理。
    """

    def __init__(self, candidate: str, reason: str = ""):
        self.candidate = candidate
        message = f"无法解析日期和时间 {candidate}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
