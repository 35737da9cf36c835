"""
Client SDK - 代理解析
"""

import fnmatch
import logging
import re
from typing import Dict, Iterable, Optional, Union
from urllib.parse import urlsplit

from ..config import ProxyConfig
from shared.models import ProxyAgent

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}

_PATTERN_RE = re.compile(r"^(?P<hostname>.+?)(?::(?P<port>\d+))?$")


def hostname_matches(patterns: Union[str, Iterable[str]], url: str) -> bool:
    """判断 URL 的主机名是否匹配任一模式

    模式可以是逗号或空白分隔的字符串，也可以是列表。
    支持 "*"、"*.example.com"、".example.com"（含域名本身）和 "host:port"。
    """
    parts = urlsplit(url)
    hostname = (parts.hostname or "").lower()
    port = parts.port or DEFAULT_PORTS.get(parts.scheme)

    if isinstance(patterns, str):
        patterns = re.split(r"[\s,]+", patterns)

    for pattern in patterns:
        if pattern == "*":
            return True
        if not pattern:
            continue

        match = _PATTERN_RE.match(pattern.strip().lower())
        if match is None:
            continue

        host, pattern_port = match.group("hostname"), match.group("port")
        if pattern_port and int(pattern_port) != port:
            continue

        if host.startswith("."):
            if hostname == host[1:] or hostname.endswith(host):
                return True
        elif fnmatch.fnmatchcase(hostname, host):
            return True

    return False


class ProxyResolver:
    """代理解析器

    根据目标 URL 选择代理，并为每个代理地址复用同一个 ProxyAgent。
    """

    def __init__(self, config: Optional[ProxyConfig] = None):
        self.config = config or ProxyConfig()
        self._agents: Dict[str, ProxyAgent] = {}

    def proxy_url_for(self, url: str) -> Optional[str]:
        """获取目标 URL 应使用的代理地址"""
        scheme = urlsplit(url).scheme

        if scheme == "https":
            proxy_url = self.config.https_proxy or self.config.http_proxy
        else:
            proxy_url = self.config.http_proxy

        if not proxy_url:
            return None

        if self.config.no_proxy and hostname_matches(self.config.no_proxy, url):
            return None

        return proxy_url

    def agent_for(self, url: str) -> Optional[ProxyAgent]:
        """获取目标 URL 的传输代理，不需要代理时返回 None"""
        proxy_url = self.proxy_url_for(url)
        if proxy_url is None:
            return None

        agent = self._agents.get(proxy_url)
        if agent is None:
            agent = ProxyAgent.from_url(proxy_url)
            self._agents[proxy_url] = agent
            logger.info(f"Created proxy agent for {agent.url}")

        return agent
