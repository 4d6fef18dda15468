"""
Tests for retry_with_exponential_backoff.
"""

from __future__ import annotations

from unittest.mock import MagicMock, Mock, patch

import pytest
from googleapiclient.errors import HttpError

from gsheet_automator.utils import is_retryable, retry_with_exponential_backoff


def _http_error(status):
    return HttpError(Mock(status=status), b"error")


class TestIsRetryable:
    """Test which HTTP statuses are retried."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 599])
    def test_retryable(self, status):
        assert is_retryable(_http_error(status)) is True

    @pytest.mark.parametrize("status", [400, 403, 404])
    def test_not_retryable(self, status):
        assert is_retryable(_http_error(status)) is False


class TestRetryWithExponentialBackoff:
    """Test retry behavior."""

    @patch("gsheet_automator.utils.time.sleep")
    def test_retries_on_429_then_succeeds(self, mock_sleep):
        """Test that a 429 is retried and the eventual result returned."""
        func = MagicMock(side_effect=[_http_error(429), _http_error(503), "ok"])

        assert retry_with_exponential_backoff(func) == "ok"
        assert func.call_count == 3
        assert mock_sleep.call_count == 2

    @patch("gsheet_automator.utils.time.sleep")
    def test_delay_grows_with_jitter(self, mock_sleep):
        """Test that waits double, within ±20% jitter."""
        func = MagicMock(side_effect=[_http_error(500), _http_error(500), "ok"])

        retry_with_exponential_backoff(func, initial_delay=1, backoff_factor=2)

        first, second = (c[0][0] for c in mock_sleep.call_args_list)
        assert 0.8 <= first <= 1.2
        assert 1.6 <= second <= 2.4

    @patch("gsheet_automator.utils.time.sleep")
    def test_delay_capped(self, mock_sleep):
        """Test that max_delay caps the wait before jitter."""
        func = MagicMock(side_effect=[_http_error(500), "ok"])

        retry_with_exponential_backoff(func, initial_delay=100, max_delay=10)

        assert mock_sleep.call_args[0][0] <= 12

    @patch("gsheet_automator.utils.time.sleep")
    def test_non_retryable_raises_immediately(self, mock_sleep):
        """Test that a 404 is not retried."""
        func = MagicMock(side_effect=_http_error(404))

        with pytest.raises(HttpError):
            retry_with_exponential_backoff(func)

        assert func.call_count == 1
        mock_sleep.assert_not_called()

    @patch("gsheet_automator.utils.time.sleep")
    def test_gives_up_after_max_retries(self, mock_sleep):
        """Test that the last error propagates once retries are exhausted."""
        func = MagicMock(side_effect=_http_error(429))

        with pytest.raises(HttpError):
            retry_with_exponential_backoff(func, max_retries=3)

        assert func.call_count == 4
        assert mock_sleep.call_count == 3

    def test_other_exceptions_propagate(self):
        """Test that non-HTTP errors are not retried."""
        func = MagicMock(side_effect=KeyError("x"))

        with pytest.raises(KeyError):
            retry_with_exponential_backoff(func)

        assert func.call_count == 1
