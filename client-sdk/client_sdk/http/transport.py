"""
Client SDK - HTTP 传输层
"""

import asyncio
import errno
import logging
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import aiohttp
from aiohttp import ClientSession, ClientTimeout, TCPConnector
from aiohttp.http_exceptions import ContentLengthError

from ..config import HTTPClientConfig
from .errors import TransportError
from shared.models import ProxyAgent

logger = logging.getLogger(__name__)

# getaddrinfo 错误码名称
GAI_ERROR_CODES = {
    socket.EAI_AGAIN: "EAI_AGAIN",
    socket.EAI_NONAME: "ENOTFOUND",
}


@dataclass
class RawResponse:
    """传输层返回的原始响应"""
    status: int
    reason: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def _payload_truncated(error: aiohttp.ClientPayloadError) -> bool:
    """响应体是否因连接中断而不完整"""
    if "not completed" in str(error):
        return True

    cause = error.__cause__
    while cause is not None:
        if isinstance(cause, (ContentLengthError, aiohttp.ServerDisconnectedError, ConnectionResetError)):
            return True
        cause = cause.__cause__
    return False


def transport_error_code(error: BaseException) -> Optional[str]:
    """将 aiohttp / OS 异常映射为 errno 风格的错误码"""
    if isinstance(error, aiohttp.ServerDisconnectedError):
        return "ECONNRESET"

    if isinstance(error, aiohttp.ClientPayloadError) and _payload_truncated(error):
        return "ECONNRESET"

    os_error = getattr(error, "os_error", None)
    if isinstance(os_error, socket.gaierror) or isinstance(error, socket.gaierror):
        return GAI_ERROR_CODES.get(getattr(os_error or error, "errno", None))

    error_number = getattr(error, "errno", None)
    if error_number is None and isinstance(os_error, OSError):
        error_number = os_error.errno

    if error_number is None:
        return None
    return errno.errorcode.get(error_number)


class Transport(ABC):
    """传输层基类

    send() 只有一个完成信号：返回一个响应，或抛出一个 TransportError。
    """

    async def connect(self):
        """建立连接（子类可覆盖）"""
        pass

    async def disconnect(self):
        """断开连接（子类可覆盖）"""
        pass

    @abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Union[str, bytes]] = None,
        agent: Optional[ProxyAgent] = None,
        **options: Any
    ) -> RawResponse:
        """发送请求并读取完整响应体

        Args:
            method: HTTP 方法
            url: 请求 URL
            headers: 请求头
            body: 请求体
            agent: 传输代理（可选）
            **options: 透传选项

        Returns:
            原始响应

        Raises:
            TransportError: 未收到响应
        """
        pass


class AiohttpTransport(Transport):
    """基于 aiohttp 的传输层

    负责：
    - 连接池管理
    - 代理转发
    - 传输错误归一化
    """

    def __init__(self, config: HTTPClientConfig):
        self.config = config
        self._session: Optional[ClientSession] = None

    async def connect(self):
        """建立连接池"""
        if self._session is None:
            connector = TCPConnector(
                limit=self.config.max_connections,
                keepalive_timeout=self.config.keepalive_timeout
            )
            timeout = ClientTimeout(total=self.config.timeout)

            self._session = ClientSession(
                connector=connector,
                timeout=timeout
            )
            logger.info("HTTP transport connected")

    async def disconnect(self):
        """关闭连接池"""
        if self._session:
            await self._session.close()
            self._session = None
            logger.info("HTTP transport disconnected")

    @property
    def session(self) -> ClientSession:
        if self._session is None:
            raise RuntimeError("HTTP transport not connected. Call connect() first.")
        return self._session

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Union[str, bytes]] = None,
        agent: Optional[ProxyAgent] = None,
        **options: Any
    ) -> RawResponse:
        if isinstance(body, str):
            body = body.encode("utf-8")

        if agent is not None:
            options.setdefault("proxy", agent.url)
            if agent.username is not None:
                options.setdefault(
                    "proxy_auth",
                    aiohttp.BasicAuth(agent.username, agent.password or "")
                )

        session = self.session

        try:
            async with session.request(
                method=method,
                url=url,
                headers=headers,
                data=body,
                **options
            ) as response:
                payload = await response.read()
                return RawResponse(
                    status=response.status,
                    reason=response.reason,
                    headers=dict(response.headers),
                    body=payload
                )

        except asyncio.TimeoutError as e:
            raise TransportError(f"Request to {url} timed out", code="ETIMEDOUT") from e

        except (aiohttp.ClientError, OSError) as e:
            code = transport_error_code(e)
            raise TransportError(str(e) or e.__class__.__name__, code=code) from e
