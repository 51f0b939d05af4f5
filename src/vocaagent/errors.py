"""错误类型."""


class VocaError(Exception):
    """VocaAgent 基础错误."""


class NetworkError(VocaError):
    """网络请求失败."""


class ParseError(VocaError):
    """内容解析失败（Feed、JSON 等）."""


class StorageError(VocaError):
    """数据库操作失败."""


class ExtractionError(VocaError):
    """词汇提取服务失败."""


class ConfigError(VocaError):
    """缺少必要配置（路径、凭证等）."""
