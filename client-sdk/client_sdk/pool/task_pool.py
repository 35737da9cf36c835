"""
Client SDK - 并发任务池
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Set

from ..config import PoolConfig

logger = logging.getLogger(__name__)


async def pool(tasks: Iterable[Awaitable[Any]], concurrency: int) -> List[Any]:
    """以有限并发执行一组异步任务

    任务按需从 tasks 中取出，同时最多运行 concurrency 个。结果按完成顺序收集。
    任一任务失败后不再取新任务，已在运行的任务会继续执行到结束，
    全部结束后抛出第一个失败的错误。

    Args:
        tasks: 惰性的任务序列（协程、Future 等可等待对象）
        concurrency: 并发上限

    Returns:
        按完成顺序排列的结果列表
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    source = iter(tasks)
    results: List[Any] = []
    errors: List[Exception] = []
    in_flight: Set[asyncio.Future] = set()
    exhausted = False

    async def settle(task: Awaitable[Any]):
        try:
            value = await task
        except Exception as e:
            if errors:
                logger.debug(f"Ignoring task error after first failure: {e}")
            else:
                errors.append(e)
        else:
            results.append(value)

    while True:
        while not exhausted and not errors and len(in_flight) < concurrency:
            try:
                task = next(source)
            except StopIteration:
                exhausted = True
                break
            except Exception as e:
                # 任务源本身出错，等同于任务失败
                errors.append(e)
                break

            in_flight.add(asyncio.ensure_future(settle(task)))

        if not in_flight:
            break

        _, in_flight = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)

    if errors:
        raise errors[0]

    return results


class TaskPool:
    """任务池

    负责：
    - 按配置的并发上限运行任务
    - 统计运行情况
    """

    def __init__(self, config: Optional[PoolConfig] = None):
        self.config = config or PoolConfig()

        self._runs = 0
        self._failed_runs = 0
        self._completed_tasks = 0

    async def run(
        self,
        tasks: Iterable[Awaitable[Any]],
        concurrency: Optional[int] = None
    ) -> List[Any]:
        """运行一组任务

        Args:
            tasks: 惰性任务序列
            concurrency: 并发上限（可选，默认使用配置）

        Returns:
            按完成顺序排列的结果列表
        """
        limit = concurrency if concurrency is not None else self.config.concurrency
        self._runs += 1

        try:
            results = await pool(tasks, limit)
        except Exception as e:
            self._failed_runs += 1
            logger.error(f"Task pool run failed: {e}")
            raise

        self._completed_tasks += len(results)
        logger.debug(f"Task pool run finished with {len(results)} results (concurrency={limit})")
        return results

    def get_pool_stats(self) -> Dict[str, Any]:
        """获取任务池统计信息

        Returns:
            统计信息字典
        """
        return {
            "concurrency": self.config.concurrency,
            "runs": self._runs,
            "failed_runs": self._failed_runs,
            "completed_tasks": self._completed_tasks
        }
