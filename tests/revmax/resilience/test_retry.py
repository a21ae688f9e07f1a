"""
Tests for retry policy.

Review checklist:
    [x] Deterministic exponential backoff (no jitter)
    [x] Respects retry-after on 429 only
    [x] Stops after max_retries
"""

import logging

import pytest

from revmax.resilience import RetryConfig, log_retry_attempt, log_retry_failure
from sdk_fakes import http_failure, network_failure


class TestRetryConfig:
    """Tests for RetryConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = RetryConfig()
        assert config.max_retries == 0
        assert config.max_attempts == 1
        assert config.retry_delay_ms == 300.0
        assert config.exponential_base == 2.0
        assert config.respect_retry_after is True

    def test_type_conversion_from_strings(self):
        """Test that config handles string inputs (e.g., from YAML)."""
        config = RetryConfig(max_retries="3", retry_delay_ms="150", exponential_base="3")
        assert config.max_retries == 3
        assert config.max_attempts == 4
        assert config.retry_delay_ms == 150.0
        assert config.exponential_base == 3.0

    def test_negative_values_clamped(self):
        config = RetryConfig(max_retries=-2, retry_delay_ms=-10)
        assert config.max_retries == 0
        assert config.retry_delay_ms == 0.0

    def test_exponential_backoff_calculation(self):
        """Test delay doubles per retry ordinal."""
        config = RetryConfig(max_retries=3, retry_delay_ms=300)
        assert config.get_delay_ms(0) == 300.0
        assert config.get_delay_ms(1) == 600.0
        assert config.get_delay_ms(2) == 1200.0

    def test_get_delay_in_seconds(self):
        config = RetryConfig(retry_delay_ms=300)
        assert config.get_delay(0) == pytest.approx(0.3)
        assert config.get_delay(1) == pytest.approx(0.6)

    def test_delay_is_deterministic(self):
        """Test repeated calls give the same delay."""
        config = RetryConfig(retry_delay_ms=250)
        assert {config.get_delay_ms(2) for _ in range(20)} == {1000.0}

    def test_retry_after_used_for_429(self):
        """Test 429 with retry-after uses the server delay."""
        config = RetryConfig(max_retries=2)
        failure = http_failure(429, headers={"retry-after": "5"})
        assert config.get_delay_ms(0, failure) == 5000.0
        assert config.get_delay(1, failure) == 5.0

    def test_retry_after_ignored_for_503(self):
        """Test retry-after on non-429 responses is ignored."""
        config = RetryConfig(max_retries=2)
        failure = http_failure(503, headers={"Retry-After": "5"})
        assert config.get_delay_ms(0, failure) == 300.0

    def test_zero_retry_after_falls_back_to_backoff(self):
        config = RetryConfig(max_retries=2)
        failure = http_failure(429, headers={"Retry-After": "0"})
        assert config.get_delay_ms(1, failure) == 600.0

    def test_retry_after_disabled(self):
        config = RetryConfig(max_retries=2, respect_retry_after=False)
        failure = http_failure(429, headers={"Retry-After": "5"})
        assert config.get_delay_ms(0, failure) == 300.0


class TestShouldRetry:
    """Tests for retry decisions."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503])
    def test_retryable_status(self, status):
        config = RetryConfig(max_retries=2)
        assert config.should_retry(http_failure(status), 0) is True

    @pytest.mark.parametrize("status", [400, 401, 404, 422])
    def test_permanent_status(self, status):
        config = RetryConfig(max_retries=2)
        assert config.should_retry(http_failure(status), 0) is False

    def test_network_failure_retried(self):
        config = RetryConfig(max_retries=1)
        assert config.should_retry(network_failure(), 0) is True

    def test_budget_exhausted(self):
        """Test no retry once the ordinal reaches max_retries."""
        config = RetryConfig(max_retries=2)
        failure = http_failure(500)
        assert config.should_retry(failure, 1) is True
        assert config.should_retry(failure, 2) is False

    def test_zero_retries_never_retries(self):
        assert RetryConfig().should_retry(http_failure(503), 0) is False


class TestRetryLogging:
    """Tests for retry log helpers."""

    def test_log_retry_attempt_server_delay(self, caplog):
        config = RetryConfig(max_retries=2)
        failure = http_failure(429, headers={"Retry-After": "5"})

        with caplog.at_level(logging.WARNING, logger="revmax.resilience.retry"):
            log_retry_attempt("GET /verify", 0, config, 5.0, failure, "req-1")

        record = caplog.records[-1]
        assert "server-provided delay" in record.getMessage()
        assert record.delay_source == "server"
        assert record.request_id == "req-1"
        assert record.attempt == 1

    def test_log_retry_attempt_backoff(self, caplog):
        config = RetryConfig(max_retries=2)

        with caplog.at_level(logging.WARNING, logger="revmax.resilience.retry"):
            log_retry_attempt("GET /verify", 1, config, 0.6, http_failure(500), "req-2")

        assert caplog.records[-1].delay_source == "exponential_backoff"

    def test_log_retry_failure_permanent(self, caplog):
        config = RetryConfig(max_retries=2)

        with caplog.at_level(logging.WARNING, logger="revmax.resilience.retry"):
            log_retry_failure("GET /x", 0, config, http_failure(404), "req-3")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "Permanent error" in record.getMessage()

    def test_log_retry_failure_exhausted(self, caplog):
        config = RetryConfig(max_retries=2)

        with caplog.at_level(logging.WARNING, logger="revmax.resilience.retry"):
            log_retry_failure("GET /x", 2, config, http_failure(503), "req-4")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert "Max retries exhausted" in record.getMessage()

    def test_log_helpers_use_given_logger(self, caplog):
        """Test retry logs go to the owning client's logger when one is passed."""
        config = RetryConfig(max_retries=1)
        client_logger = logging.getLogger("revmax.clients.test-retry")

        with caplog.at_level(logging.WARNING, logger="revmax.clients.test-retry"):
            log_retry_attempt(
                "GET /x", 0, config, 0.3, http_failure(500), "req-5", log=client_logger
            )
            log_retry_failure("GET /x", 1, config, http_failure(500), "req-5", log=client_logger)

        assert [r.name for r in caplog.records] == ["revmax.clients.test-retry"] * 2


class TestFractionalRetryAfter:
    """Tests for non-integer retry-after values."""

    def test_fractional_retry_after_honored(self):
        config = RetryConfig(max_retries=1)
        failure = http_failure(429, headers={"Retry-After": "5.0"})
        assert config.get_delay(0, failure) == 5.0
