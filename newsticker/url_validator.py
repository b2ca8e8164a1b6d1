"""
URL Validator - Check feed, logo and content URLs before they are stored.

Feed URLs are fetched by the server on a schedule, so they are also checked
against internal network targets (SSRF):
- loopback and private IP ranges
- cloud metadata endpoints (169.254.169.254, metadata.google.internal)
- .local / .internal / .localhost names

No DNS resolution is done here; the check only looks at the URL itself.
"""

import ipaddress
from urllib.parse import urlparse

from fastapi import HTTPException


class InvalidURLError(ValueError):
    """Raised when a URL fails validation."""

    pass


BLOCKED_IP_RANGES = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "ip6-localhost",
    "ip6-loopback",
    "metadata",
    "metadata.google.internal",
}

BLOCKED_SUFFIXES = (".local", ".internal", ".localhost")

ALLOWED_SCHEMES = {"http", "https"}


def is_ip_blocked(ip_str: str) -> bool:
    """Check if an IP address is in a blocked range."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    return any(ip in network for network in BLOCKED_IP_RANGES)


def validate_url(url: str, block_private: bool = False) -> str:
    """
    Validate a URL.

    Args:
        url: The URL to validate
        block_private: Also reject hosts on loopback, private or metadata networks

    Returns:
        The URL, stripped of surrounding whitespace

    Raises:
        InvalidURLError: If the URL fails validation
    """
    url = (url or "").strip()
    if not url:
        raise InvalidURLError("URL is required")

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL format: {e}")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURLError(f"URL scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not hostname:
        raise InvalidURLError("URL must include a hostname")

    if not block_private:
        return url

    hostname = hostname.lower()
    if hostname in BLOCKED_HOSTNAMES or hostname.endswith(BLOCKED_SUFFIXES):
        raise InvalidURLError(f"Access to '{hostname}' is not allowed")
    if is_ip_blocked(hostname):
        raise InvalidURLError(f"Access to IP address '{hostname}' is not allowed")

    return url


def validate_url_or_raise_http(
    url: str,
    block_private: bool = False,
    label: str = "URL",
) -> str:
    """
    Validate a URL, raising HTTPException on failure.

    Convenience wrapper for use in services called from route handlers.

    Raises:
        HTTPException: 400 Bad Request if the URL fails validation
    """
    try:
        return validate_url(url, block_private=block_private)
    except InvalidURLError as e:
        raise HTTPException(status_code=400, detail=f"Invalid {label}: {e}")
