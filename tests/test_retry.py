"""Tests for retry utilities."""

from __future__ import annotations

import warnings
from unittest import mock

import httpx
import pytest
from botocore.exceptions import EndpointConnectionError

from razlib.utils.retry import NETWORK_EXCEPTIONS, STORAGE_EXCEPTIONS, retry_with_backoff


class TestRetryWithBackoff:
    """Tests for the tenacity-based retry_with_backoff decorator."""

    def test_attempt_count(self) -> None:
        """max_retries counts retries after the first attempt."""
        calls = {"n": 0}

        @retry_with_backoff(max_retries=2, base_delay=0, max_delay=0, jitter=0)
        def flake() -> None:
            calls["n"] += 1
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            flake()

        assert calls["n"] == 3

    def test_success_on_first_try(self) -> None:
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0)
        def success_func() -> str:
            nonlocal call_count
            call_count += 1
            return "success"

        assert success_func() == "success"
        assert call_count == 1

    def test_success_after_retry(self) -> None:
        call_count = 0

        @retry_with_backoff(
            max_retries=3, base_delay=0, jitter=0, retry_exceptions=(ConnectionError,)
        )
        def fail_then_succeed() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ConnectionError("Network error")
            return "success"

        assert fail_then_succeed() == "success"
        assert call_count == 3

    def test_only_retries_specified_exceptions(self) -> None:
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0, retry_exceptions=(ConnectionError,))
        def raise_value_error() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("Not retryable")

        with pytest.raises(ValueError, match="Not retryable"):
            raise_value_error()

        assert call_count == 1

    def test_zero_retries(self) -> None:
        call_count = 0

        @retry_with_backoff(max_retries=0, retry_exceptions=(ConnectionError,))
        def always_fail() -> None:
            nonlocal call_count
            call_count += 1
            raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            always_fail()
        assert call_count == 1

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValueError, match="max_retries"):
            retry_with_backoff(max_retries=-1)

    def test_preserves_function_metadata(self) -> None:
        @retry_with_backoff(max_retries=1)
        def my_function() -> str:
            """My docstring."""
            return "result"

        assert my_function.__name__ == "my_function"
        assert my_function.__doc__ == "My docstring."

    def test_logs_before_sleep(self, caplog: pytest.LogCaptureFixture) -> None:
        attempts = {"n": 0}

        @retry_with_backoff(max_retries=1, base_delay=0, jitter=0)
        def flake() -> str:
            attempts["n"] += 1
            if attempts["n"] == 1:
                raise ConnectionError("reset")
            return "ok"

        assert flake() == "ok"
        assert "Retrying" in caplog.text

    def test_no_deprecation_warnings(self) -> None:
        attempts = {"n": 0}

        with warnings.catch_warnings():
            warnings.simplefilter("error")

            @retry_with_backoff(max_retries=1, base_delay=0, max_delay=0, jitter=0)
            def flake() -> str:
                attempts["n"] += 1
                if attempts["n"] == 1:
                    raise ConnectionError("reset")
                return "ok"

            assert flake() == "ok"

    def test_wait_stays_within_bounds(self) -> None:
        @retry_with_backoff(max_retries=5, base_delay=1.0, max_delay=4.0, jitter=0.5)
        def noop() -> None:
            return None

        wait = noop.retry.wait  # type: ignore[attr-defined]
        for attempt in range(1, 6):
            state = mock.Mock(attempt_number=attempt)
            assert 0 <= wait(state) <= 4.5


class TestExceptionGroups:
    """Tests for NETWORK_EXCEPTIONS and STORAGE_EXCEPTIONS."""

    def test_network_exceptions(self) -> None:
        assert ConnectionError in NETWORK_EXCEPTIONS
        assert httpx.ConnectError in NETWORK_EXCEPTIONS
        assert issubclass(httpx.ReadTimeout, NETWORK_EXCEPTIONS)
        assert not issubclass(httpx.HTTPStatusError, NETWORK_EXCEPTIONS)

    def test_storage_exceptions(self) -> None:
        assert EndpointConnectionError in STORAGE_EXCEPTIONS
        assert TimeoutError in STORAGE_EXCEPTIONS

    def test_retry_on_storage_exceptions(self) -> None:
        call_count = 0

        @retry_with_backoff(
            max_retries=2, base_delay=0, jitter=0, retry_exceptions=STORAGE_EXCEPTIONS
        )
        def put() -> str:
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise EndpointConnectionError(endpoint_url="https://r2")
            if call_count == 2:
                raise TimeoutError("slow")
            return "stored"

        assert put() == "stored"
        assert call_count == 3
