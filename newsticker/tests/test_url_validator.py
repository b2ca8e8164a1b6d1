"""
Tests for URL validation of feeds, logos and content.
"""

import pytest
from fastapi import HTTPException

from newsticker.url_validator import (
    InvalidURLError,
    is_ip_blocked,
    validate_url,
    validate_url_or_raise_http,
)


class TestValidateUrl:
    """Tests for basic URL checks."""

    def test_accepts_http_and_https(self):
        assert validate_url("https://example.com/feed.xml") == "https://example.com/feed.xml"
        assert validate_url("http://example.com/feed.xml") == "http://example.com/feed.xml"

    def test_strips_whitespace(self):
        assert validate_url("  https://example.com/rss \n") == "https://example.com/rss"

    @pytest.mark.parametrize("url", ["file:///etc/passwd", "ftp://example.com/f", "javascript:alert(1)"])
    def test_rejects_other_schemes(self, url):
        with pytest.raises(InvalidURLError, match="scheme"):
            validate_url(url)

    def test_rejects_missing_hostname(self):
        with pytest.raises(InvalidURLError, match="hostname"):
            validate_url("http:///path")

    def test_rejects_empty(self):
        with pytest.raises(InvalidURLError, match="required"):
            validate_url("   ")

    def test_rejects_relative(self):
        with pytest.raises(InvalidURLError):
            validate_url("not-a-url")

    def test_private_hosts_allowed_by_default(self):
        """Logo and content URLs are never fetched by the server."""
        assert validate_url("http://localhost:8080/logo.png") == "http://localhost:8080/logo.png"


class TestBlockPrivate:
    """Tests for internal-network blocking of feed URLs."""

    @pytest.mark.parametrize("url", [
        "http://localhost/admin",
        "http://metadata.google.internal/",
        "http://printer.local/",
        "http://api.internal/",
        "http://app.localhost/",
    ])
    def test_blocks_internal_hostnames(self, url):
        with pytest.raises(InvalidURLError, match="not allowed"):
            validate_url(url, block_private=True)

    @pytest.mark.parametrize("url", [
        "http://127.0.0.1/",
        "http://10.1.2.3/",
        "http://172.16.0.1/",
        "http://192.168.1.1/",
        "http://169.254.169.254/latest/meta-data/",
        "http://[::1]/",
    ])
    def test_blocks_private_ips(self, url):
        with pytest.raises(InvalidURLError, match="IP address"):
            validate_url(url, block_private=True)

    def test_allows_public_hosts(self):
        assert validate_url("http://8.8.8.8/feed", block_private=True) == "http://8.8.8.8/feed"
        assert validate_url("https://news.example.com/rss", block_private=True)

    def test_is_ip_blocked(self):
        assert is_ip_blocked("127.0.0.100") is True
        assert is_ip_blocked("fe80::1") is True
        assert is_ip_blocked("1.1.1.1") is False
        assert is_ip_blocked("example.com") is False


class TestValidateUrlOrRaiseHttp:
    """Tests for the HTTP wrapper."""

    def test_raises_400_with_label(self):
        with pytest.raises(HTTPException) as exc_info:
            validate_url_or_raise_http("nope", label="logo URL")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail.startswith("Invalid logo URL:")

    def test_returns_url(self):
        assert validate_url_or_raise_http("https://example.com") == "https://example.com"
