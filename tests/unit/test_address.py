"""Unit tests for endpoint normalization and bind address parsing."""

import pytest

from limeade.core.address import (
    DEFAULT_PORT,
    Endpoint,
    normalize_url,
    parse_bind_address,
)
from limeade.core.errors import AddressError


class TestNormalizeUrl:
    """Tests for scheme defaulting."""

    def test_adds_http_scheme(self):
        assert normalize_url("localhost:2490") == "http://localhost:2490"

    def test_keeps_http_scheme(self):
        assert normalize_url("http://example.com:2490") == "http://example.com:2490"

    def test_keeps_https_scheme(self):
        assert normalize_url("https://example.com") == "https://example.com"


class TestEndpointParse:
    """Tests for Endpoint.parse."""

    def test_host_and_port_without_scheme(self):
        """'localhost:2490' is reachable over plain HTTP."""
        endpoint = Endpoint.parse("localhost:2490")

        assert endpoint.scheme == "http"
        assert endpoint.host == "localhost"
        assert endpoint.port == 2490
        assert endpoint.base_url == "http://localhost:2490"
        assert endpoint.clipboard_url == "http://localhost:2490/clipboard"

    def test_https_scheme_preserved(self):
        endpoint = Endpoint.parse("https://clip.example.com:8443")
        assert endpoint.scheme == "https"
        assert endpoint.base_url == "https://clip.example.com:8443"

    def test_port_optional(self):
        endpoint = Endpoint.parse("http://clip.example.com")
        assert endpoint.port is None
        assert endpoint.clipboard_url == "http://clip.example.com/clipboard"

    def test_path_in_address_is_replaced(self):
        """The clipboard path is absolute, like joining '/clipboard'."""
        endpoint = Endpoint.parse("http://host:2490/some/prefix")
        assert endpoint.clipboard_url == "http://host:2490/clipboard"

    def test_ipv4_host(self):
        assert Endpoint.parse("192.168.1.20:2490").host == "192.168.1.20"

    def test_ipv6_host(self):
        endpoint = Endpoint.parse("[::1]:2490")
        assert endpoint.host == "::1"
        assert endpoint.base_url == "http://[::1]:2490"

    def test_host_is_lowercased(self):
        assert Endpoint.parse("LocalHost:1").host == "localhost"

    @pytest.mark.parametrize(
        "address",
        [
            "",
            "   ",
            "bad host:2490",
            "exa$mple.com:2490",
            "localhost:notaport",
            "localhost:99999",
            "localhost:-1",
            "ftp://localhost:2490",
            "http://user:pw@localhost:2490",
            "http://:2490",
            "[::1:2490",
            "[not-ipv6]:2490",
            "localhost:²",
            "localhost:٣٤",
        ],
    )
    def test_malformed_addresses_rejected(self, address):
        """Malformed addresses fail with AddressError."""
        with pytest.raises(AddressError):
            Endpoint.parse(address)

    def test_endpoint_is_immutable(self):
        endpoint = Endpoint.parse("localhost:2490")
        with pytest.raises(AttributeError):
            endpoint.port = 1  # type: ignore[misc]


class TestParseBindAddress:
    """Tests for server bind address parsing."""

    def test_all_interfaces(self):
        assert parse_bind_address("0.0.0.0:2490") == (None, 2490)

    def test_empty_host_means_all_interfaces(self):
        """Legacy --port produces ':PORT'."""
        assert parse_bind_address(":9000") == (None, 9000)

    def test_specific_host(self):
        assert parse_bind_address("localhost:2490") == ("localhost", 2490)

    def test_missing_port_uses_default(self):
        assert parse_bind_address("127.0.0.1") == ("127.0.0.1", DEFAULT_PORT)

    def test_ipv6_host(self):
        assert parse_bind_address("[::1]:2490") == ("::1", 2490)

    def test_ipv6_any(self):
        assert parse_bind_address("[::]:2490") == (None, 2490)

    @pytest.mark.parametrize(
        "addr", ["", "host:port", "host:70000", "bad host:1", ":²", ":٣٤"]
    )
    def test_invalid_bind_address(self, addr):
        with pytest.raises(AddressError):
            parse_bind_address(addr)
