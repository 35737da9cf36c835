"""
Client SDK - 异步 HTTP 客户端
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

from pydantic import BaseModel

from ..config import HTTPClientConfig
from ..retry import AttemptOutcome, Retryable, Success, Terminal, retry
from .errors import HTTPRequestError, TransportError
from .proxy import ProxyResolver
from .transport import AiohttpTransport, RawResponse, Transport
from shared.models import ProxyAgent, RequestOptions, generate_id

logger = logging.getLogger(__name__)

# 可重试的传输层错误码
RETRY_ERROR_CODES = frozenset({
    "ECONNREFUSED",
    "ECONNRESET",
    "EPIPE",
    "EHOSTUNREACH",
    "EAI_AGAIN",
})

JSON_CONTENT_TYPE = "application/json"

ResponseCallback = Callable[[Any, "HTTPResponse"], Any]
ProxyAgentFor = Callable[[str], Optional[ProxyAgent]]


def serialize_body(
    headers: Dict[str, str],
    body: Any
) -> Tuple[Dict[str, str], Optional[Union[str, bytes]]]:
    """将非文本请求体序列化为 JSON，并补充 Content-Type"""
    headers = dict(headers)

    if body is None or isinstance(body, (str, bytes)):
        return headers, body

    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json")

    if not any(name.lower() == "content-type" for name in headers):
        headers["Content-Type"] = JSON_CONTENT_TYPE

    return headers, json.dumps(body, separators=(",", ":"))


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")


def decode_body(raw: bytes, buffer: bool = False) -> Any:
    """解码响应体：请求 buffer 时返回原始字节，否则优先解析 JSON"""
    if buffer:
        return raw

    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def should_retry(error: HTTPRequestError, retry_not_found: bool = False) -> bool:
    """判断错误是否可重试

    有响应时：5xx 总是重试，404 仅在 retry_not_found 时重试。
    无响应时：仅重试 RETRY_ERROR_CODES 中的传输错误。
    """
    if error.response is not None:
        status = error.response.status
        return (retry_not_found and status == 404) or 500 <= status < 600

    return error.code in RETRY_ERROR_CODES


class AsyncHTTPClient:
    """异步 HTTP 客户端

    负责：
    - 请求体序列化与响应体解码
    - 代理解析
    - 错误分类与重试
    - 响应回调
    """

    def __init__(
        self,
        config: Optional[HTTPClientConfig] = None,
        transport: Optional[Transport] = None,
        proxy_agent_for: Optional[ProxyAgentFor] = None
    ):
        self.config = config or HTTPClientConfig()
        self.transport = transport or AiohttpTransport(self.config)
        self.proxy_agent_for = proxy_agent_for or ProxyResolver(self.config.proxy).agent_for

    async def connect(self):
        """建立连接"""
        await self.transport.connect()

    async def disconnect(self):
        """断开连接"""
        await self.transport.disconnect()

    async def request(
        self,
        url: str,
        options: Optional[Union[RequestOptions, Dict[str, Any], ResponseCallback]] = None,
        callback: Optional[ResponseCallback] = None,
        **overrides: Any
    ) -> Any:
        """发送 HTTP 请求

        2xx 响应返回回调的返回值；回调未提供或返回 None 时返回解码后的响应体。
        其他情况在重试耗尽后抛出 HTTPRequestError。

        Args:
            url: 请求 URL
            options: 请求选项（RequestOptions 或 dict），也可直接传回调
            callback: 响应回调 callback(body, response)，可以是协程函数
            **overrides: 覆盖 options 中的字段

        Returns:
            回调返回值或解码后的响应体
        """
        if callable(options) and callback is None:
            options, callback = None, options

        opts = self._build_options(options, overrides)

        scheme = urlsplit(url).scheme
        if scheme not in ("http", "https"):
            raise ValueError(f"Unsupported URL: {url}")

        headers, body = serialize_body(opts.headers, opts.body)
        agent = opts.agent
        if agent is None and not opts.no_proxy:
            agent = self.proxy_agent_for(url)

        retries = self.config.retries if opts.retries is None else opts.retries
        interval = self.config.interval if opts.interval is None else opts.interval
        request_id = generate_id("req")

        async def attempt() -> AttemptOutcome:
            return await self._attempt(request_id, url, opts, headers, body, agent, callback)

        return await retry(attempt, retries=retries, interval=interval)

    async def get(self, url: str, callback: Optional[ResponseCallback] = None, **kwargs) -> Any:
        """GET 请求"""
        return await self.request(url, callback=callback, method="GET", **kwargs)

    async def post(self, url: str, body: Any = None, callback: Optional[ResponseCallback] = None, **kwargs) -> Any:
        """POST 请求"""
        return await self.request(url, callback=callback, method="POST", body=body, **kwargs)

    async def put(self, url: str, body: Any = None, callback: Optional[ResponseCallback] = None, **kwargs) -> Any:
        """PUT 请求"""
        return await self.request(url, callback=callback, method="PUT", body=body, **kwargs)

    async def delete(self, url: str, callback: Optional[ResponseCallback] = None, **kwargs) -> Any:
        """DELETE 请求"""
        return await self.request(url, callback=callback, method="DELETE", **kwargs)

    def _build_options(
        self,
        options: Optional[Union[RequestOptions, Dict[str, Any]]],
        overrides: Dict[str, Any]
    ) -> RequestOptions:
        if isinstance(options, RequestOptions):
            if not overrides:
                return options
            return RequestOptions(**{**options.model_dump(), **overrides})

        return RequestOptions(**{**(options or {}), **overrides})

    async def _attempt(
        self,
        request_id: str,
        url: str,
        options: RequestOptions,
        headers: Dict[str, str],
        body: Optional[Union[str, bytes]],
        agent: Optional[ProxyAgent],
        callback: Optional[ResponseCallback]
    ) -> AttemptOutcome:
        """执行一次请求并给出尝试结果"""
        logger.debug(f"[{request_id}] {options.method} {url}")

        try:
            raw = await self.transport.send(
                options.method,
                url,
                headers=headers,
                body=body,
                agent=agent,
                **options.passthrough
            )
        except TransportError as e:
            logger.debug(f"[{request_id}] transport error: {e} (code={e.code})")
            return self._classify(e, options)

        response = HTTPResponse.from_raw(raw, buffer=options.buffer)
        logger.debug(f"[{request_id}] {response.status} {response.reason or ''}")

        if not response.ok:
            return self._classify(
                HTTPRequestError(response.error_message(), response=response),
                options
            )

        try:
            result = None
            if callback is not None:
                result = callback(response.body, response)
                if asyncio.iscoroutine(result):
                    result = await result
        except Exception as e:
            error = HTTPRequestError(str(e) or e.__class__.__name__, response=response)
            error.__cause__ = e
            return self._classify(error, options)

        return Success(response.body if result is None else result)

    def _classify(self, error: HTTPRequestError, options: RequestOptions) -> AttemptOutcome:
        error.retryable = should_retry(error, options.retry_not_found)
        return Retryable(error) if error.retryable else Terminal(error)


class HTTPResponse:
    """HTTP 响应封装"""

    def __init__(
        self,
        status: int,
        headers: Dict[str, str],
        body: Any,
        raw: bytes = b"",
        reason: Optional[str] = None
    ):
        self.status = status
        self.headers = headers
        self.body = body
        self.raw = raw
        self.reason = reason

    @classmethod
    def from_raw(cls, raw: RawResponse, buffer: bool = False) -> "HTTPResponse":
        return cls(
            status=raw.status,
            headers=raw.headers,
            body=decode_body(raw.body, buffer=buffer),
            raw=raw.body,
            reason=raw.reason
        )

    @property
    def text(self) -> str:
        """文本响应"""
        return self.raw.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        """请求是否成功"""
        return 200 <= self.status < 300

    def error_message(self) -> str:
        """错误描述：优先使用响应体中 errors[].detail"""
        if isinstance(self.body, dict) and isinstance(self.body.get("errors"), list):
            for entry in self.body["errors"]:
                if isinstance(entry, dict) and entry.get("detail"):
                    return str(entry["detail"])

        return f"{self.status} {self.reason or self.text}"
