"""
Client SDK - 重试引擎
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 5
DEFAULT_INTERVAL = 50  # 毫秒


@dataclass(frozen=True)
class Success:
    """本次尝试成功"""
    value: Any


@dataclass(frozen=True)
class Retryable:
    """本次尝试失败，可以再试"""
    error: Exception


@dataclass(frozen=True)
class Terminal:
    """本次尝试失败，不再重试"""
    error: Exception


AttemptOutcome = Union[Success, Retryable, Terminal]


async def retry(
    operation: Callable[[], Awaitable[AttemptOutcome]],
    retries: int = DEFAULT_RETRIES,
    interval: int = DEFAULT_INTERVAL
) -> Any:
    """反复执行 operation 直到成功或重试次数耗尽

    operation 每次返回一个尝试结果，由它自己决定失败是否可重试。
    最多执行 retries + 1 次，两次尝试之间等待 interval 毫秒。

    Args:
        operation: 单次尝试，返回 Success / Retryable / Terminal
        retries: 允许的额外尝试次数
        interval: 重试间隔（毫秒）

    Returns:
        Success 携带的值

    Raises:
        Terminal 的错误，或重试耗尽时最后一个 Retryable 的错误
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")

    remaining = retries
    attempt = 0

    while True:
        attempt += 1
        outcome = await operation()

        if isinstance(outcome, Success):
            return outcome.value

        if isinstance(outcome, Terminal):
            raise outcome.error

        if not isinstance(outcome, Retryable):
            raise TypeError(f"Unexpected attempt outcome: {outcome!r}")

        if remaining <= 0:
            logger.warning(f"Giving up after {attempt} attempts: {outcome.error}")
            raise outcome.error

        remaining -= 1
        logger.warning(
            f"Attempt {attempt} failed, retrying in {interval}ms "
            f"({remaining} retries left): {outcome.error}"
        )
        await asyncio.sleep(interval / 1000)
