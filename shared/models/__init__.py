"""
共享数据模型包
"""

from .common import generate_id

from .request import (
    ProxyAgent,
    RequestOptions,
)

__all__ = [
    # Common
    "generate_id",

    # Request
    "ProxyAgent",
    "RequestOptions",
]
