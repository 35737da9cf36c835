"""
Client SDK - HTTP 错误类型
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .async_client import HTTPResponse


class HTTPRequestError(Exception):
    """HTTP 请求错误

    收到响应时携带 response；传输层失败时携带 code（如 ECONNREFUSED）。
    retryable 由客户端的错误分类设置。
    """

    def __init__(
        self,
        message: str,
        response: Optional["HTTPResponse"] = None,
        code: Optional[str] = None
    ):
        super().__init__(message)
        self.response = response
        self.code = code
        self.retryable = False


class TransportError(HTTPRequestError):
    """传输层错误（未收到任何响应）"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message, code=code)
