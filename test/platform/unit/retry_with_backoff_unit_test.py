import anyio
import pytest

from src.platform.exception.exceptions import TransientError
from src.platform.resilience.retry_with_backoff import retry_with_backoff


class _Flaky:
    def __init__(self, *, failures: int, error: type[Exception] = ConnectionError) -> None:
        self.failures = failures
        self.error = error
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error('boom')
        return 'ok'


@pytest.mark.unit
class TestRetryWithBackoff:
    async def test_succeeds_after_retryable_failures(self):
        operation = _Flaky(failures=2)

        result = await retry_with_backoff(
            operation, label='TEST', retry_on=(ConnectionError,), max_attempts=3, base_delay=0
        )

        assert result == 'ok'
        assert operation.calls == 3

    async def test_gives_up_with_transient_error(self):
        operation = _Flaky(failures=5)

        with pytest.raises(TransientError) as exc_info:
            await retry_with_backoff(
                operation, label='TEST', retry_on=(ConnectionError,), max_attempts=3, base_delay=0
            )

        assert operation.calls == 3
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_other_errors_propagate_immediately(self):
        operation = _Flaky(failures=1, error=ValueError)

        with pytest.raises(ValueError):
            await retry_with_backoff(
                operation, label='TEST', retry_on=(ConnectionError,), max_attempts=3, base_delay=0
            )
        assert operation.calls == 1

    async def test_slow_attempt_counts_as_failure(self):
        calls = 0

        async def slow_then_fast() -> str:
            nonlocal calls
            calls += 1
            if calls == 1:
                await anyio.sleep(1)
            return 'ok'

        result = await retry_with_backoff(
            slow_then_fast,
            label='TEST',
            retry_on=(ConnectionError,),
            max_attempts=2,
            base_delay=0,
            timeout=0.05,
        )

        assert result == 'ok'
        assert calls == 2
