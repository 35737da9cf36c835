"""
测试公共夹具
"""

import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.join(ROOT, "client-sdk"))

from client_sdk import RawResponse, Transport  # noqa: E402


class FakeTransport(Transport):
    """按顺序返回预设响应的传输层

    responses 中的元素可以是 RawResponse，也可以是要抛出的异常。
    最后一个元素会在用尽后重复使用。
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.connected = False

    async def connect(self):
        self.connected = True

    async def disconnect(self):
        self.connected = False

    async def send(self, method, url, headers=None, body=None, agent=None, **options):
        self.calls.append({
            "method": method,
            "url": url,
            "headers": headers,
            "body": body,
            "agent": agent,
            "options": options
        })

        index = min(len(self.calls), len(self.responses)) - 1
        outcome = self.responses[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def json_response(status, payload, reason=None):
    """构造 JSON 原始响应"""
    import json
    return RawResponse(
        status=status,
        reason=reason,
        headers={"Content-Type": "application/json"},
        body=json.dumps(payload).encode("utf-8")
    )


@pytest.fixture
def transport():
    return FakeTransport()
