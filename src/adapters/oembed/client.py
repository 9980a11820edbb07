"""
oEmbed HTTP client - resolves remote URLs through allowlisted providers.

Key behaviors:
- Only URLs matching a provider's pattern are looked up; others resolve to None
- Each provider endpoint is queried with format=json and the URL
- Transport failures are retried up to max_retries times; HTTP errors,
  redirect loops and undecodable payloads are not retried
- Any failure resolves to None; the embeds component turns that into an error
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

from src.components.embeds import EmbedResult
from src.rules.models import EmbedsRules

logger = logging.getLogger(__name__)

USER_AGENT = "cms-htmleditor/0.1"


@dataclass(frozen=True)
class OEmbedProvider:
    name: str
    pattern: re.Pattern[str]
    endpoint: str

    def matches(self, url: str) -> bool:
        return bool(self.pattern.match(url))


class OEmbedClient:
    """EmbedLookupPort over oEmbed provider endpoints."""

    def __init__(
        self,
        providers: list[OEmbedProvider],
        *,
        timeout: float = 5.0,
        max_retries: int = 1,
        client: httpx.Client | None = None,
    ) -> None:
        self.providers = providers
        self.timeout = timeout
        self.max_retries = max_retries
        self._client = client

    @classmethod
    def from_rules(cls, rules: EmbedsRules, client: httpx.Client | None = None) -> OEmbedClient:
        providers = [
            OEmbedProvider(name=p.provider, pattern=re.compile(p.match, re.IGNORECASE), endpoint=p.endpoint)
            for p in rules.allowlist
        ]
        return cls(
            providers,
            timeout=rules.timeout_seconds,
            max_retries=rules.max_retries,
            client=client,
        )

    def provider_for(self, url: str) -> OEmbedProvider | None:
        for provider in self.providers:
            if provider.matches(url):
                return provider
        return None

    def resolve(self, url: str) -> EmbedResult | None:
        provider = self.provider_for(url)
        if provider is None:
            logger.info("No oEmbed provider for %s", url)
            return None

        data = self._fetch(provider, url)
        if data is None or not data.get("type"):
            return None
        return EmbedResult.from_oembed(data)

    def _fetch(self, provider: OEmbedProvider, url: str) -> dict[str, Any] | None:
        params = {"url": url, "format": "json"}
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}

        for attempt in range(self.max_retries + 1):
            try:
                if self._client is not None:
                    response = self._client.get(
                        provider.endpoint, params=params, headers=headers, timeout=self.timeout
                    )
                else:
                    response = httpx.get(
                        provider.endpoint,
                        params=params,
                        headers=headers,
                        timeout=self.timeout,
                        follow_redirects=True,
                    )
                response.raise_for_status()
                payload = response.json()
            except httpx.TransportError as e:
                logger.warning(
                    "oEmbed request to %s failed (attempt %d): %s", provider.name, attempt + 1, e
                )
                continue
            except httpx.RequestError as e:
                # Redirect loops, undecodable bodies and the like
                logger.warning("oEmbed request to %s failed for %s: %s", provider.name, url, e)
                return None
            except httpx.HTTPStatusError as e:
                logger.info("oEmbed %s answered %s for %s", provider.name, e.response.status_code, url)
                return None
            except ValueError:
                logger.warning("oEmbed %s returned invalid JSON for %s", provider.name, url)
                return None

            return payload if isinstance(payload, dict) else None

        return None
