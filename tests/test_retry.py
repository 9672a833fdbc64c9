import asyncio

import pytest

from adnamer.utils.errors import Unauthenticated
from adnamer.utils.retry import (
    APIRateLimitError,
    NetworkError,
    TemporaryServiceError,
    retry_with_backoff,
    translate_drive_error,
)


class FakeResponse:
    def __init__(self, status):
        self.status = status


class FakeHttpError(Exception):
    def __init__(self, status, message="boom"):
        super().__init__(message)
        self.resp = FakeResponse(status)


def test_translate_drive_error():
    assert isinstance(translate_drive_error(FakeHttpError(401)), Unauthenticated)
    assert isinstance(translate_drive_error(FakeHttpError(429)), APIRateLimitError)
    assert isinstance(translate_drive_error(FakeHttpError(403, "User rate limit exceeded")), APIRateLimitError)
    assert isinstance(translate_drive_error(FakeHttpError(403, "Storage quota exceeded")), TemporaryServiceError)
    assert isinstance(translate_drive_error(FakeHttpError(503)), TemporaryServiceError)
    assert isinstance(translate_drive_error(ConnectionError("reset")), NetworkError)

    not_found = FakeHttpError(404, "File not found")
    assert translate_drive_error(not_found) is not_found


def test_retry_succeeds_after_transient_failures():
    calls = []

    @retry_with_backoff(max_retries=3, base_delay=0, exceptions=(NetworkError,))
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise NetworkError("temporary")
        return "ok"

    assert flaky() == "ok"
    assert len(calls) == 3


def test_retry_gives_up_and_ignores_other_errors():
    calls = []

    @retry_with_backoff(max_retries=2, base_delay=0, exceptions=(NetworkError,))
    def always_down():
        calls.append(1)
        raise NetworkError("down")

    with pytest.raises(NetworkError):
        always_down()
    assert len(calls) == 3

    @retry_with_backoff(max_retries=2, base_delay=0, exceptions=(NetworkError,))
    def broken():
        calls.append(1)
        raise KeyError("bug")

    with pytest.raises(KeyError):
        broken()
    assert len(calls) == 4


def test_retry_supports_coroutines():
    calls = []

    @retry_with_backoff(max_retries=2, base_delay=0, exceptions=(NetworkError,))
    async def flaky():
        calls.append(1)
        if len(calls) < 2:
            raise NetworkError("temporary")
        return "ok"

    assert asyncio.run(flaky()) == "ok"
    assert len(calls) == 2
