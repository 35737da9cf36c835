"""
Client SDK - 重试模块

协作式重试：单次尝试返回带标签的结果，由重试引擎决定是否再次执行。
"""

from .engine import (
    retry,
    Success,
    Retryable,
    Terminal,
    AttemptOutcome,
    DEFAULT_RETRIES,
    DEFAULT_INTERVAL
)

__all__ = [
    "retry",
    "Success",
    "Retryable",
    "Terminal",
    "AttemptOutcome",
    "DEFAULT_RETRIES",
    "DEFAULT_INTERVAL"
]
