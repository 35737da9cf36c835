"""
共享数据模型 - 请求描述
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlsplit, urlunsplit


class ProxyAgent(BaseModel):
    """传输代理

    可在多个请求之间复用的代理通道描述。凭据从 URL 中拆出单独保存，
    url 本身不含用户名和密码。
    """
    url: str = Field(..., description="代理地址（不含凭据）")
    username: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_url(cls, proxy_url: str) -> "ProxyAgent":
        """从代理 URL 构建（支持 user:pass@host 形式）"""
        parts = urlsplit(proxy_url)
        if not parts.scheme or not parts.hostname:
            raise ValueError(f"Invalid proxy URL: {proxy_url}")

        host = f"[{parts.hostname}]" if ":" in parts.hostname else parts.hostname
        netloc = f"{host}:{parts.port}" if parts.port else host

        return cls(
            url=urlunsplit((parts.scheme, netloc, parts.path, "", "")),
            username=unquote(parts.username) if parts.username else None,
            password=unquote(parts.password) if parts.password else None,
        )


class RequestOptions(BaseModel):
    """请求选项

    未声明的字段会原样透传给底层传输（如 timeout、ssl、allow_redirects）。
    """
    method: str = Field("GET", description="HTTP 方法")
    headers: Dict[str, str] = Field(default_factory=dict, description="请求头")
    body: Any = Field(None, description="请求体（文本或可序列化为 JSON 的数据）")

    retries: Optional[int] = Field(None, ge=0, description="重试次数，为空时使用客户端配置")
    interval: Optional[int] = Field(None, ge=0, description="重试间隔（毫秒），为空时使用客户端配置")
    retry_not_found: bool = Field(False, alias="retryNotFound", description="404 时是否重试")

    no_proxy: bool = Field(False, alias="noProxy", description="禁用代理解析")
    agent: Optional[ProxyAgent] = Field(None, description="显式指定的传输代理")
    buffer: bool = Field(False, description="保留原始字节响应体")

    class Config:
        extra = "allow"
        populate_by_name = True

    @property
    def passthrough(self) -> Dict[str, Any]:
        """透传给传输层的额外选项"""
        return dict(self.model_extra or {})
