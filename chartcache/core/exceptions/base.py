"""chartcache核心异常类."""

from typing import Any

from chartcache.core.exceptions.codes import ErrorCode


class ChartCacheError(Exception):
    """chartcache基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable payload for logs and CLI output."""

        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }


class InstrumentNotFoundError(ChartCacheError):
    """品种无法解析异常."""

    def __init__(self, uid: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["uid"] = uid
        super().__init__(
            f"Instrument '{uid}' could not be resolved",
            ErrorCode.INSTRUMENT_NOT_FOUND.value,
            super_details,
        )
        self.uid = uid


class NoChartDataError(ChartCacheError):
    """没有可用图表数据异常."""

    def __init__(
        self,
        message: str = "No chart data available",
        key_details: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if key_details:
            super_details["key"] = key_details
        super().__init__(message, ErrorCode.NO_CHART_DATA.value, super_details)


class ProviderError(ChartCacheError):
    """数据提供商相关异常."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = ErrorCode.PROVIDER_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.setdefault("provider", provider_name)
        super().__init__(message, error_code, super_details)
        self.provider_name = provider_name


class NetworkError(ProviderError):
    """网络异常."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, ErrorCode.NETWORK_ERROR.value, super_details)
        self.status_code = status_code


class StorageError(ChartCacheError):
    """存储相关异常."""

    def __init__(
        self,
        message: str,
        storage_type: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if storage_type:
            super_details["storage_type"] = storage_type
        super().__init__(message, ErrorCode.STORAGE_ERROR.value, super_details)


class ConfigurationError(ChartCacheError):
    """配置异常."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR.value, details)
