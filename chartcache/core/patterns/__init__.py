"""Resilience patterns."""

from chartcache.core.patterns.retry import ExponentialBackoffRetry, RetryConfig, RetryState

__all__ = ["ExponentialBackoffRetry", "RetryConfig", "RetryState"]
