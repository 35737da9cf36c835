"""
Client SDK - HTTP 模块

负责外部 API 调用、错误分类和重试。
"""

from .async_client import (
    AsyncHTTPClient,
    HTTPResponse,
    RETRY_ERROR_CODES,
    should_retry
)
from .errors import HTTPRequestError, TransportError
from .proxy import ProxyResolver, hostname_matches
from .transport import AiohttpTransport, RawResponse, Transport

__all__ = [
    "AsyncHTTPClient",
    "HTTPResponse",
    "HTTPRequestError",
    "TransportError",
    "RETRY_ERROR_CODES",
    "should_retry",
    "ProxyResolver",
    "hostname_matches",
    "AiohttpTransport",
    "RawResponse",
    "Transport"
]
