"""Tests for the forwarded record filter."""

import pytest

from mcp_forwarded.analyzer import ForwardedAnalyzer
from mcp_forwarded.models import ConfigError
from mcp_forwarded.record_filter import ForwardedRecordFilter
from mcp_forwarded.settings import Settings


@pytest.fixture
def record_filter(analyzer):
    """Record filter reading the ``message`` field."""
    return ForwardedRecordFilter(analyzer, source="message")


class TestForwardedRecordFilter:
    """Test cases for ForwardedRecordFilter."""

    def test_writes_client_and_proxies(self, record_filter):
        record = {"message": "84.30.67.207, 10.1.2.162"}

        assert record_filter.apply(record) is True

        assert record["forwarded_client_ip"] == "84.30.67.207"
        assert record["forwarded_proxy_list"] == ["10.1.2.162"]
        assert record["message"] == "84.30.67.207, 10.1.2.162"

    def test_single_client_gets_empty_proxy_list(self, record_filter):
        record = {"message": "185.22.141.112"}

        record_filter.apply(record)

        assert record["forwarded_client_ip"] == "185.22.141.112"
        assert record["forwarded_proxy_list"] == []

    def test_no_client_only_writes_proxies(self, record_filter):
        """Test the client field is not written when no public address exists."""
        record = {"message": "10.1.2.162, 10.1.3.255"}

        assert record_filter.apply(record) is True

        assert "forwarded_client_ip" not in record
        assert record["forwarded_proxy_list"] == ["10.1.2.162", "10.1.3.255"]

    @pytest.mark.parametrize("record", [{}, {"message": ""}, {"message": None}, {"message": []}])
    def test_missing_or_empty_source_untouched(self, record_filter, record):
        """Test records without a forwarded value are left alone."""
        original = dict(record)

        assert record_filter.apply(record) is False
        assert record == original

    def test_existing_values_overwritten(self, record_filter):
        record = {
            "message": "123.45.67.89,61.160.232.222",
            "forwarded_client_ip": "stale",
            "forwarded_proxy_list": ["stale"],
        }

        record_filter.apply(record)

        assert record["forwarded_client_ip"] == "123.45.67.89"
        assert record["forwarded_proxy_list"] == ["61.160.232.222"]

    def test_list_source(self, record_filter):
        record = {"message": ["51.174.213.194:8080", "10.1.2.100", "10.1.2.83:80"]}

        record_filter.apply(record)

        assert record["forwarded_client_ip"] == "51.174.213.194"
        assert record["forwarded_proxy_list"] == ["10.1.2.100", "10.1.2.83"]

    def test_custom_target_fields(self, analyzer):
        record_filter = ForwardedRecordFilter(
            analyzer,
            source="xff",
            target_client_ip="client_ip",
            target_proxy_list="proxies",
        )
        record = {"xff": "10.144.80.56, 82.132.186.219"}

        record_filter.apply(record)

        assert record["client_ip"] == "82.132.186.219"
        assert record["proxies"] == ["10.144.80.56"]

    def test_unsupported_source_type_raises(self, record_filter):
        with pytest.raises(ValueError):
            record_filter.apply({"message": 42})

    def test_proxy_list_is_a_copy(self, record_filter):
        record = {"message": "8.8.8.8, 10.0.0.1"}
        other = {"message": "8.8.8.8, 10.0.0.1"}

        record_filter.apply(record)
        record_filter.apply(other)
        record["forwarded_proxy_list"].append("changed")

        assert other["forwarded_proxy_list"] == ["10.0.0.1"]


class TestFromSettings:
    """Test cases for building the filter from settings."""

    def test_uses_configured_fields(self):
        settings = Settings(
            source_field="x_forwarded_for",
            target_client_ip="client",
            target_proxy_list="hops",
            private_ipv4_prefixes=["84.30.0.0/16"],
        )

        record_filter = ForwardedRecordFilter.from_settings(settings)
        record = {"x_forwarded_for": "84.30.67.207, 10.1.2.162"}
        record_filter.apply(record)

        assert record == {
            "x_forwarded_for": "84.30.67.207, 10.1.2.162",
            "client": "10.1.2.162",
            "hops": ["84.30.67.207"],
        }

    def test_reuses_given_analyzer(self, settings, analyzer):
        record_filter = ForwardedRecordFilter.from_settings(settings, analyzer)

        assert record_filter.analyzer is analyzer
        assert record_filter.source == "message"
        assert record_filter.target_client_ip == "forwarded_client_ip"
        assert record_filter.target_proxy_list == "forwarded_proxy_list"

    def test_invalid_prefixes_fail_fast(self):
        settings = Settings(private_ipv4_prefixes=["10.0.0.0/8", "10/8"])

        with pytest.raises(ConfigError):
            ForwardedRecordFilter.from_settings(settings)

    def test_analyzer_type(self, settings):
        record_filter = ForwardedRecordFilter.from_settings(settings)

        assert isinstance(record_filter.analyzer, ForwardedAnalyzer)
