"""
重试引擎单元测试

运行方式: pytest tests/test_retry.py -v
"""

import asyncio
import time

import pytest

from client_sdk import retry, Success, Retryable, Terminal


class CountingOperation:
    """记录调用次数，按顺序返回预设结果"""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.call_times = []

    async def __call__(self):
        self.calls += 1
        self.call_times.append(time.monotonic())
        return self.outcomes[min(self.calls, len(self.outcomes)) - 1]


class TestRetry:
    """重试引擎测试"""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        """测试首次成功直接返回"""
        operation = CountingOperation([Success("ok")])

        assert await retry(operation) == "ok"
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_zero_retries_attempts_once(self):
        """测试 retries=0 只执行一次"""
        error = RuntimeError("boom")
        operation = CountingOperation([Retryable(error)])

        with pytest.raises(RuntimeError) as exc_info:
            await retry(operation, retries=0, interval=0)

        assert exc_info.value is error
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_exhaustion_attempts_retries_plus_one(self):
        """测试重试耗尽时共执行 retries + 1 次"""
        operation = CountingOperation([Retryable(RuntimeError("again"))])

        with pytest.raises(RuntimeError):
            await retry(operation, retries=3, interval=0)

        assert operation.calls == 4

    @pytest.mark.asyncio
    async def test_raises_last_retryable_error(self):
        """测试耗尽后抛出最后一次的错误"""
        errors = [RuntimeError(f"failure {i}") for i in range(3)]
        operation = CountingOperation([Retryable(e) for e in errors])

        with pytest.raises(RuntimeError) as exc_info:
            await retry(operation, retries=2, interval=0)

        assert exc_info.value is errors[-1]

    @pytest.mark.asyncio
    async def test_terminal_stops_immediately(self):
        """测试 Terminal 结果不再重试"""
        error = ValueError("fatal")
        operation = CountingOperation([Retryable(RuntimeError("again")), Terminal(error)])

        with pytest.raises(ValueError) as exc_info:
            await retry(operation, retries=5, interval=0)

        assert exc_info.value is error
        assert operation.calls == 2

    @pytest.mark.asyncio
    async def test_succeeds_after_retries(self):
        """测试重试后成功"""
        operation = CountingOperation([
            Retryable(RuntimeError("1")),
            Retryable(RuntimeError("2")),
            Success(42),
        ])

        assert await retry(operation, retries=5, interval=0) == 42
        assert operation.calls == 3

    @pytest.mark.asyncio
    async def test_waits_interval_between_attempts(self):
        """测试两次尝试之间等待 interval 毫秒"""
        operation = CountingOperation([Retryable(RuntimeError("again")), Success("done")])

        await retry(operation, retries=1, interval=50)

        gap = operation.call_times[1] - operation.call_times[0]
        assert gap >= 0.045

    @pytest.mark.asyncio
    async def test_operation_exception_propagates(self):
        """测试 operation 自身抛出的异常直接向上传播"""
        async def operation():
            raise KeyError("unexpected")

        with pytest.raises(KeyError):
            await retry(operation, retries=3, interval=0)

    @pytest.mark.asyncio
    async def test_negative_retries_rejected(self):
        """测试负数重试次数"""
        with pytest.raises(ValueError):
            await retry(CountingOperation([Success(1)]), retries=-1)

    @pytest.mark.asyncio
    async def test_unknown_outcome_rejected(self):
        """测试非法的尝试结果"""
        with pytest.raises(TypeError):
            await retry(CountingOperation(["not an outcome"]))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
