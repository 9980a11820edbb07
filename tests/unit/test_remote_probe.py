"""
Tests for the remote image probe.
"""

from __future__ import annotations

import io

import httpx
from PIL import Image

from src.adapters.probe.remote import HttpRemoteProbe
from src.components.media import ProbeResult


def png_bytes(width: int, height: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


def make_probe(handler) -> HttpRemoteProbe:
    return HttpRemoteProbe(client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestHttpRemoteProbe:
    def test_reads_size_and_dimensions(self) -> None:
        body = png_bytes(320, 200)

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "HEAD":
                return httpx.Response(200, headers={"content-length": str(len(body))})
            return httpx.Response(200, content=body)

        result = make_probe(handler).probe("https://img.example.com/a.png")

        assert result == ProbeResult(size_bytes=len(body), width=320, height=200)

    def test_missing_content_length_is_unknown(self) -> None:
        body = png_bytes(10, 20)

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "HEAD":
                return httpx.Response(200)
            return httpx.Response(200, content=body)

        result = make_probe(handler).probe("https://img.example.com/a.png")

        assert result.size_bytes is None
        assert (result.width, result.height) == (10, 20)

    def test_not_an_image(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"content-length": "5"}, content=b"hello")

        result = make_probe(handler).probe("https://img.example.com/a.png")

        assert result.width is None
        assert result.height is None

    def test_http_errors_degrade_to_unknown(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        assert make_probe(handler).probe("https://img.example.com/gone.png") == ProbeResult()

    def test_connection_errors_degrade_to_unknown(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert make_probe(handler).probe("https://img.example.com/a.png") == ProbeResult()


class TestProbeLifecycle:
    def test_close_releases_own_client(self) -> None:
        probe = HttpRemoteProbe()
        assert not probe.closed

        probe.close()

        assert probe.closed

    def test_close_leaves_injected_client_open(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        probe = HttpRemoteProbe(client=client)

        probe.close()

        assert not client.is_closed
        client.close()
