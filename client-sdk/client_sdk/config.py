"""
Client SDK - 配置管理
"""

import os
from pydantic import BaseModel, Field
from typing import Optional


class ProxyConfig(BaseModel):
    """代理配置"""
    http_proxy: Optional[str] = Field(None, description="HTTP 代理地址")
    https_proxy: Optional[str] = Field(None, description="HTTPS 代理地址（为空时使用 HTTP 代理）")
    no_proxy: Optional[str] = Field(None, description="不走代理的主机列表（逗号或空格分隔）")

    @classmethod
    def from_env(cls) -> "ProxyConfig":
        """从环境变量加载代理配置"""
        def _env(name: str) -> Optional[str]:
            return os.getenv(name) or os.getenv(name.lower())

        return cls(
            http_proxy=_env("HTTP_PROXY"),
            https_proxy=_env("HTTPS_PROXY"),
            no_proxy=_env("NO_PROXY"),
        )


class HTTPClientConfig(BaseModel):
    """HTTP 客户端配置"""
    timeout: int = Field(30, description="请求超时（秒）")
    retries: int = Field(5, ge=0, description="默认重试次数")
    interval: int = Field(50, ge=0, description="默认重试间隔（毫秒）")

    # 连接池
    max_connections: int = Field(100, description="最大连接数")
    keepalive_timeout: int = Field(30, description="Keep-alive 超时")

    proxy: ProxyConfig = Field(default_factory=ProxyConfig)


class PoolConfig(BaseModel):
    """任务池配置"""
    concurrency: int = Field(5, ge=1, description="最大并发任务数")


class SDKConfig(BaseModel):
    """Client SDK 总配置"""
    service_name: str = Field("client-sdk", description="服务名称")
    api_url: Optional[str] = Field(None, description="API 基础地址")

    http: HTTPClientConfig = Field(default_factory=HTTPClientConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)

    @property
    def user_agent(self) -> str:
        return self.service_name

    @classmethod
    def from_env(cls) -> "SDKConfig":
        """从环境变量加载配置"""
        return cls(
            service_name=os.getenv("SDK_SERVICE_NAME", "client-sdk"),
            api_url=os.getenv("SDK_API_URL"),
            http=HTTPClientConfig(
                timeout=int(os.getenv("SDK_HTTP_TIMEOUT", "30")),
                retries=int(os.getenv("SDK_HTTP_RETRIES", "5")),
                interval=int(os.getenv("SDK_HTTP_RETRY_INTERVAL", "50")),
                proxy=ProxyConfig.from_env(),
            ),
            pool=PoolConfig(
                concurrency=int(os.getenv("SDK_POOL_CONCURRENCY", "5")),
            ),
        )
