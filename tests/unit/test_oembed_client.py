"""
Tests for the oEmbed HTTP client, using httpx.MockTransport.
"""

from __future__ import annotations

import httpx
import pytest

from src.adapters.oembed.client import OEmbedClient
from src.rules.models import Rules

VIDEO_URL = "https://www.youtube.com/watch?v=abc"


def make_client(rules: Rules, handler) -> OEmbedClient:
    return OEmbedClient.from_rules(
        rules.embeds, client=httpx.Client(transport=httpx.MockTransport(handler))
    )


class TestProviderMatching:
    def test_allowlisted_provider(self, rules: Rules) -> None:
        client = OEmbedClient.from_rules(rules.embeds)
        assert client.provider_for(VIDEO_URL).name == "youtube"
        assert client.provider_for("https://vimeo.com/123").name == "vimeo"

    def test_unknown_host_resolves_to_none_without_request(self, rules: Rules) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"type": "video"})

        client = make_client(rules, handler)

        assert client.resolve("https://evil.example.com/video") is None
        assert requests == []


class TestResolve:
    def test_queries_endpoint_with_url_and_format(self, rules: Rules) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"type": "video", "width": 480, "height": 270, "title": "Talk"},
            )

        result = make_client(rules, handler).resolve(VIDEO_URL)

        assert result is not None
        assert result.type == "video"
        assert result.title == "Talk"
        request = seen[0]
        assert request.url.host == "www.youtube.com"
        assert request.url.params["url"] == VIDEO_URL
        assert request.url.params["format"] == "json"

    def test_http_error_resolves_to_none(self, rules: Rules) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(404)

        assert make_client(rules, handler).resolve(VIDEO_URL) is None
        assert len(calls) == 1

    def test_invalid_json_resolves_to_none(self, rules: Rules) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>not json</html>")

        assert make_client(rules, handler).resolve(VIDEO_URL) is None

    def test_payload_without_type_resolves_to_none(self, rules: Rules) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"title": "no type"})

        assert make_client(rules, handler).resolve(VIDEO_URL) is None

    def test_transport_errors_are_retried(self, rules: Rules) -> None:
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("boom", request=request)
            return httpx.Response(200, json={"type": "photo", "url": "https://x.test/p.jpg"})

        result = make_client(rules, handler).resolve(VIDEO_URL)

        assert len(attempts) == 2
        assert result is not None
        assert result.url == "https://x.test/p.jpg"

    @pytest.mark.parametrize("max_retries,expected_attempts", [(0, 1), (2, 3)])
    def test_gives_up_after_max_retries(
        self, rules: Rules, max_retries: int, expected_attempts: int
    ) -> None:
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ReadTimeout("slow", request=request)

        client = make_client(rules, handler)
        client.max_retries = max_retries

        assert client.resolve(VIDEO_URL) is None
        assert len(attempts) == expected_attempts

    def test_redirect_loop_resolves_to_none(self, rules: Rules) -> None:
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(302, headers={"Location": str(request.url)})

        http = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)
        client = OEmbedClient.from_rules(rules.embeds, client=http)

        assert client.resolve(VIDEO_URL) is None
        # Not retried: a single chain of followed redirects
        assert 0 < len(attempts) <= http.max_redirects + 1

    def test_undecodable_body_resolves_to_none(self, rules: Rules) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, content=b"definitely not gzip", headers={"Content-Encoding": "gzip"}
            )

        assert make_client(rules, handler).resolve(VIDEO_URL) is None
