"""Unit tests for HttpTransport."""

import httpx
import pytest

from telemetry_client.config import Settings
from telemetry_client.services.transport import CONTENT_TYPE, HttpTransport

ENDPOINT = "https://collector.test/telemetry/v1/collect"


def make_transport(handler, timeout=15.0):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpTransport(endpoint_url=ENDPOINT, timeout=timeout, client=client)


class TestHttpTransport:
    """Test suite for HttpTransport."""

    def test_posts_json_body(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["url"] = str(request.url)
            captured["content_type"] = request.headers["content-type"]
            captured["body"] = request.content
            return httpx.Response(200, json={"status": "ok"})

        transport = make_transport(handler)
        result = transport.send(b'{"site_url": "https://example.org"}')

        assert result.success is True
        assert result.status_code == 200
        assert result.error is None
        assert result.duration_ms is not None
        assert captured["method"] == "POST"
        assert captured["url"] == ENDPOINT
        assert captured["content_type"] == CONTENT_TYPE
        assert captured["body"] == b'{"site_url": "https://example.org"}'

    def test_non_2xx_is_failure(self):
        transport = make_transport(lambda request: httpx.Response(500))

        result = transport.send(b"{}")

        assert result.success is False
        assert result.status_code == 500
        assert result.error == "HTTP 500"

    def test_timeout_is_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        transport = make_transport(handler, timeout=2.0)
        result = transport.send(b"{}")

        assert result.success is False
        assert result.status_code is None
        assert "Timed out after 2.0s" in result.error

    def test_network_error_is_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_transport(handler)
        result = transport.send(b"{}")

        assert result.success is False
        assert result.error.startswith("ConnectError")

    def test_sends_once_per_call(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        transport = make_transport(handler)
        transport.send(b"{}")

        assert len(calls) == 1

    def test_defaults_from_settings(self):
        settings = Settings(_env_file=None, endpoint_url=ENDPOINT, request_timeout_seconds=5)

        transport = HttpTransport(settings=settings)

        assert transport.endpoint_url == ENDPOINT
        assert transport.timeout == 5
        transport.close()

    def test_close_leaves_injected_client_open(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
        transport = HttpTransport(endpoint_url=ENDPOINT, client=client)

        transport.close()

        assert client.is_closed is False
        client.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
