"""
Client SDK - 主入口包

Client SDK 提供带重试和并发控制的 HTTP 客户端，包括：
- 重试引擎
- 并发任务池
- HTTP 请求编排

主要组件：
- ClientSDK: 主客户端类
- AsyncHTTPClient: HTTP 客户端
- TaskPool: 并发任务池
- retry: 重试引擎
"""

from .client import ClientSDK
from .config import (
    SDKConfig,
    HTTPClientConfig,
    PoolConfig,
    ProxyConfig
)
from .retry import retry, Success, Retryable, Terminal
from .pool import pool, TaskPool
from .http import (
    AsyncHTTPClient,
    HTTPResponse,
    HTTPRequestError,
    TransportError,
    RETRY_ERROR_CODES,
    ProxyResolver,
    hostname_matches,
    AiohttpTransport,
    RawResponse,
    Transport
)

__version__ = "0.1.0"

__all__ = [
    # 主客户端
    "ClientSDK",

    # 配置
    "SDKConfig",
    "HTTPClientConfig",
    "PoolConfig",
    "ProxyConfig",

    # 重试
    "retry",
    "Success",
    "Retryable",
    "Terminal",

    # 任务池
    "pool",
    "TaskPool",

    # HTTP 客户端
    "AsyncHTTPClient",
    "HTTPResponse",
    "HTTPRequestError",
    "TransportError",
    "RETRY_ERROR_CODES",
    "ProxyResolver",
    "hostname_matches",

    # 传输层
    "AiohttpTransport",
    "RawResponse",
    "Transport",
]
