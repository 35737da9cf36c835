"""
Client SDK - 任务池模块

负责以有限并发执行异步任务。
"""

from .task_pool import (
    pool,
    TaskPool
)

__all__ = [
    "pool",
    "TaskPool"
]
