# tests/test_correlation_id.py
"""
Tests for correlation ID propagation.

This module tests:
- Header precedence on portfolio and quote endpoints
- The ID echoed on error and cron responses
- Log records stamped by CorrelationIdFilter and JsonFormatter
- The ID reaching Yahoo lookup threads
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from simple_finance.config import settings
from simple_finance.middleware.correlation import CORRELATION_ID_HEADER
from simple_finance.services.market_data.yahoo import YahooFinanceProvider
from simple_finance.utils.context import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from simple_finance.utils.logging import NO_CORRELATION_ID, CorrelationIdFilter, JsonFormatter


def make_record(message: str = "valued 3 holdings") -> logging.LogRecord:
    return logging.LogRecord(
        name="simple_finance.test", level=logging.INFO, pathname=__file__,
        lineno=1, msg=message, args=(), exc_info=None,
    )


# =============================================================================
# MIDDLEWARE
# =============================================================================

class TestCorrelationIdMiddleware:
    """Tests for the ID bound to each request."""

    def test_generates_uuid_for_summary(self, client):
        response = client.get("/portfolio/summary")

        assert response.status_code == 200
        correlation_id = response.headers[CORRELATION_ID_HEADER]
        assert len(correlation_id) == 36
        assert correlation_id.count("-") == 4

    def test_uses_provided_id(self, client):
        response = client.get(
            "/portfolio/history", headers={CORRELATION_ID_HEADER: "cron-2024-06-01"}
        )

        assert response.headers[CORRELATION_ID_HEADER] == "cron-2024-06-01"

    def test_request_id_fallback(self, client):
        response = client.get("/exchange-rates/current", headers={"X-Request-ID": "req-456"})

        assert response.headers[CORRELATION_ID_HEADER] == "req-456"

    def test_prefers_correlation_id_over_request_id(self, client):
        response = client.get(
            "/exchange-rates/current",
            headers={CORRELATION_ID_HEADER: "corr-123", "X-Request-ID": "req-456"},
        )

        assert response.headers[CORRELATION_ID_HEADER] == "corr-123"

    def test_echoed_on_error_response(self, client):
        response = client.get("/quotes/NOPE", headers={CORRELATION_ID_HEADER: "trace-404"})

        assert response.status_code == 404
        assert response.headers[CORRELATION_ID_HEADER] == "trace-404"

    def test_echoed_on_rejected_cron_call(self, client, monkeypatch):
        monkeypatch.setattr(settings, "cron_token", "s3cret")

        response = client.post(
            "/cron/snapshot",
            headers={"Authorization": "Bearer wrong", CORRELATION_ID_HEADER: "cron-run-7"},
        )

        assert response.status_code == 401
        assert response.headers[CORRELATION_ID_HEADER] == "cron-run-7"


# =============================================================================
# LOGGING
# =============================================================================

class TestLogRecords:
    """Tests for the ID attached to log output."""

    @pytest.fixture(autouse=True)
    def reset_context(self):
        yield
        clear_correlation_id()

    def test_filter_stamps_current_id(self):
        set_correlation_id("abc-123")
        record = make_record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "abc-123"

    def test_filter_placeholder_outside_request(self):
        clear_correlation_id()
        record = make_record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == NO_CORRELATION_ID

    def test_json_formatter_includes_id(self):
        set_correlation_id("abc-123")
        record = make_record("Snapshot recorded")
        CorrelationIdFilter().filter(record)

        entry = json.loads(JsonFormatter().format(record))

        assert entry["correlation_id"] == "abc-123"
        assert entry["message"] == "Snapshot recorded"
        assert entry["level"] == "INFO"
        assert "extra" not in entry


# =============================================================================
# PROVIDER THREADS
# =============================================================================

class TestYahooLookupThread:
    """The Yahoo lookup runs in its own thread but keeps the caller's ID."""

    @patch('simple_finance.services.market_data.yahoo.yf')
    def test_lookup_sees_caller_id(self, mock_yf):
        seen = []

        def ticker(symbol):
            seen.append(get_correlation_id())
            mock_ticker = MagicMock()
            mock_ticker.info = {"regularMarketPrice": 10}
            return mock_ticker

        mock_yf.Ticker.side_effect = ticker
        provider = YahooFinanceProvider(timeout=5)

        set_correlation_id("valuation-42")
        try:
            result = provider.fetch_quote("AAPL")
        finally:
            clear_correlation_id()

        assert result.ok
        assert seen == ["valuation-42"]
