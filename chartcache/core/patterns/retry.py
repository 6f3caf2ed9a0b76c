"""重试机制实现，包括指数退避重试."""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from chartcache.core.exceptions import InstrumentNotFoundError, NoChartDataError, ProviderError
from chartcache.core.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class RetryState(Enum):
    """重试状态."""

    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RetryConfig:
    """重试配置."""

    max_attempts: int = 3  # 最大尝试次数
    base_delay: float = 1.0  # 基础延迟时间(秒)
    max_delay: float = 60.0  # 最大延迟时间(秒)
    exponential_base: float = 2.0
    jitter: bool = True
    retry_on_exceptions: list[type] = field(default_factory=lambda: [ProviderError])
    skip_on_exceptions: list[type] = field(default_factory=lambda: [NoChartDataError, InstrumentNotFoundError])


class ExponentialBackoffRetry:
    """指数退避重试实现，每次调用使用独立实例."""

    def __init__(self, config: RetryConfig | None = None):
        self.config = config or RetryConfig()
        self.attempt_count = 0
        self.total_delay = 0.0
        self.state = RetryState.READY
        self.last_exception: Exception | None = None

    async def execute(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """执行函数，应用重试逻辑.

        Args:
            func: 要执行的函数
            *args: 函数参数
            **kwargs: 函数关键字参数

        Returns:
            函数返回结果

        Raises:
            Exception: 当所有重试都失败时抛出最后的异常
        """
        self.state = RetryState.RUNNING
        self.attempt_count = 0
        self.total_delay = 0.0

        while True:
            try:
                self.attempt_count += 1
                result = await func(*args, **kwargs)
                self.state = RetryState.COMPLETED
                return result
            except Exception as e:
                self.last_exception = e
                if not self._should_retry(e):
                    self.state = RetryState.FAILED
                    raise

                delay = self._calculate_delay(self.attempt_count - 1)
                logger.debug(
                    "retrying after failure",
                    attempt=self.attempt_count,
                    delay=delay,
                    error=str(e),
                )
                await asyncio.sleep(delay)
                self.total_delay += delay

    def _should_retry(self, error: Exception) -> bool:
        if any(isinstance(error, exc_type) for exc_type in self.config.skip_on_exceptions):
            return False
        if not any(isinstance(error, exc_type) for exc_type in self.config.retry_on_exceptions):
            return False
        return self.attempt_count < self.config.max_attempts

    def _calculate_delay(self, attempt_number: int) -> float:
        """计算延迟时间.

        Args:
            attempt_number: 重试次数(从0开始)

        Returns:
            延迟时间(秒)
        """
        if attempt_number < 0:
            return 0.0

        delay = self.config.base_delay * (self.config.exponential_base**attempt_number)

        if self.config.jitter:
            jitter_range = min(delay * 0.1, 1.0)  # 最多10%的抖动
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0.0, min(delay, self.config.max_delay))

    def get_stats(self) -> dict[str, Any]:
        """获取重试统计信息."""
        return {
            "attempts": self.attempt_count,
            "max_attempts": self.config.max_attempts,
            "total_delay": self.total_delay,
            "state": self.state.value,
            "last_exception": str(self.last_exception) if self.last_exception else None,
        }


__all__ = ["ExponentialBackoffRetry", "RetryConfig", "RetryState"]
