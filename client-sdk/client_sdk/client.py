"""
Client SDK - 客户端入口
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .config import SDKConfig
from .http.async_client import AsyncHTTPClient, ProxyAgentFor, ResponseCallback
from .http.transport import Transport
from .pool.task_pool import TaskPool
from shared.models import RequestOptions

logger = logging.getLogger(__name__)

RequestSpec = Union[str, Tuple[str, Union[RequestOptions, Dict[str, Any]]]]


class ClientSDK:
    """Client SDK 主入口

    组合 HTTP 客户端与任务池：
    - 相对路径基于 api_url 解析
    - 单个请求自动重试
    - 批量请求以有限并发执行

    Usage:
        sdk = ClientSDK(config)
        await sdk.connect()

        # 单个请求
        item = await sdk.request("/items/1")

        # 批量上传
        results = await sdk.request_many(
            ("/resources", {"method": "POST", "body": r}) for r in resources
        )
    """

    def __init__(
        self,
        config: Optional[SDKConfig] = None,
        transport: Optional[Transport] = None,
        proxy_agent_for: Optional[ProxyAgentFor] = None
    ):
        self.config = config or SDKConfig.from_env()

        # 核心组件
        self.http = AsyncHTTPClient(
            self.config.http,
            transport=transport,
            proxy_agent_for=proxy_agent_for
        )
        self.task_pool = TaskPool(self.config.pool)

        self._connected = False

    async def connect(self):
        """连接到后端服务"""
        if self._connected:
            return

        await self.http.connect()
        self._connected = True
        logger.info("Client SDK connected")

    async def disconnect(self):
        """断开连接"""
        if not self._connected:
            return

        await self.http.disconnect()
        self._connected = False
        logger.info("Client SDK disconnected")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    def resolve_url(self, path: str) -> str:
        """将路径解析为完整 URL（已是绝对 URL 时原样返回）"""
        if "://" in path:
            return path

        if not self.config.api_url:
            raise ValueError(f"Cannot resolve relative path without api_url: {path}")

        return f"{self.config.api_url.rstrip('/')}/{path.lstrip('/')}"

    async def request(
        self,
        path: str,
        options: Optional[Union[RequestOptions, Dict[str, Any]]] = None,
        callback: Optional[ResponseCallback] = None,
        **overrides: Any
    ) -> Any:
        """发送单个请求

        Args:
            path: 相对路径或绝对 URL
            options: 请求选项
            callback: 响应回调
            **overrides: 覆盖 options 中的字段

        Returns:
            回调返回值或解码后的响应体
        """
        if isinstance(options, RequestOptions):
            options = {**options.model_dump(), **overrides}
        else:
            options = {**(options or {}), **overrides}

        headers = dict(options.get("headers") or {})
        if not any(name.lower() == "user-agent" for name in headers):
            headers["User-Agent"] = self.config.user_agent
        options["headers"] = headers

        return await self.http.request(self.resolve_url(path), options, callback)

    async def request_many(
        self,
        requests: Iterable[RequestSpec],
        concurrency: Optional[int] = None
    ) -> List[Any]:
        """以有限并发发送多个请求

        Args:
            requests: 路径，或 (路径, 选项) 元组
            concurrency: 并发上限（可选，默认使用配置）

        Returns:
            按完成顺序排列的结果列表
        """
        def tasks():
            for spec in requests:
                if isinstance(spec, str):
                    yield self.request(spec)
                else:
                    path, options = spec
                    yield self.request(path, options)

        return await self.task_pool.run(tasks(), concurrency=concurrency)
