"""统一异常体系

所有业务异常继承 ExtendError。
Web 层据此映射 HTTP 状态码，CLI 层据此输出友好提示。
"""

from __future__ import annotations


class ExtendError(Exception):
    """扩展管理基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(ExtendError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(ExtendError, ValueError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ManifestError(ExtendError):
    """扩展清单（composer.json）不可读或格式无效"""

    code = "MANIFEST_ERROR"


class PackageManagerUnavailableError(ExtendError):
    """包管理器离线（目录不可写或扩展服务器不可达），无法执行操作"""

    code = "PACKAGE_MANAGER_UNAVAILABLE"
