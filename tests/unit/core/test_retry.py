import pytest

from kvault.retry import RetryPolicy, retry


class FlakyOperation:
    def __init__(self, failures, exc_type=RuntimeError):
        self.failures = failures
        self.exc_type = exc_type
        self.attempts = []

    async def __call__(self, attempt):
        self.attempts.append(attempt)
        if len(self.attempts) <= self.failures:
            raise self.exc_type(f"boom {attempt}")
        return "ok"


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_success_on_first_attempt_reports_no_retries():
    op = FlakyOperation(failures=0)
    result = await retry(op, RetryPolicy(max_retries=3, interval=0))

    assert result.value == "ok"
    assert result.retries == 0
    assert op.attempts == [0]


@pytest.mark.asyncio
async def test_two_failures_then_success_with_fixed_delay():
    op = FlakyOperation(failures=2)
    sleep = SleepRecorder()

    result = await retry(op, RetryPolicy(max_retries=2, interval=0.25), sleep=sleep)

    assert result.value == "ok"
    assert result.retries == 2
    assert op.attempts == [0, 1, 2]
    assert sleep.delays == [0.25, 0.25]


@pytest.mark.asyncio
async def test_exhaustion_reraises_last_exception():
    op = FlakyOperation(failures=10)
    sleep = SleepRecorder()

    with pytest.raises(RuntimeError, match="boom 1"):
        await retry(op, RetryPolicy(max_retries=1, interval=0), sleep=sleep)

    assert op.attempts == [0, 1]
    assert len(sleep.delays) == 1


@pytest.mark.asyncio
async def test_no_retries_means_single_attempt():
    op = FlakyOperation(failures=1)
    with pytest.raises(RuntimeError):
        await retry(op, RetryPolicy(max_retries=0, interval=0))
    assert op.attempts == [0]


@pytest.mark.asyncio
async def test_non_retryable_exception_propagates_immediately():
    op = FlakyOperation(failures=5, exc_type=KeyError)
    with pytest.raises(KeyError):
        await retry(op, RetryPolicy(max_retries=3, interval=0), retry_on=(RuntimeError,))
    assert op.attempts == [0]


def test_policy_validation():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)
    with pytest.raises(ValueError):
        RetryPolicy(interval=-0.5)


def test_policy_from_milliseconds():
    policy = RetryPolicy.from_milliseconds(5, 1500)
    assert policy == RetryPolicy(max_retries=5, interval=1.5)
