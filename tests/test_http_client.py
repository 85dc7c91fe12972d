"""
HTTP Client Unit Tests

Tests for the shared connection pool.
"""

from unittest.mock import patch

import pytest


class TestHttpClient:
    """Tests for the HTTP client module."""

    def test_get_http_client_returns_singleton(self):
        """Verify that get_http_client returns the same instance."""
        with patch("certify.core.http_client._http_client", None):
            from certify.core.http_client import get_http_client

            client1 = get_http_client()
            client2 = get_http_client()

            assert client1 is client2

    def test_http_client_has_connection_limits(self):
        """Verify connection pool limits are configured."""
        with patch("certify.core.http_client._http_client", None):
            from certify.core.http_client import get_http_client

            client = get_http_client()

            assert client._limits.max_connections == 20
            assert client._limits.max_keepalive_connections == 5

    def test_http_client_timeout_allows_slow_uploads(self):
        with patch("certify.core.http_client._http_client", None):
            from certify.core.http_client import get_http_client

            client = get_http_client()

            assert client.timeout.read == 60.0

    @pytest.mark.asyncio
    async def test_close_resets_client(self):
        """Verify closing drops the shared instance so the next call builds a new one."""
        with patch("certify.core.http_client._http_client", None):
            from certify.core import http_client

            first = http_client.get_http_client()
            await http_client.close_http_client()

            assert http_client._http_client is None
            assert first.is_closed

            second = http_client.get_http_client()
            assert second is not first
            await http_client.close_http_client()
