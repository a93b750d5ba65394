from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from ..config import EnrichmentSettings
from ..models import ProviderConfig, ProviderError, SongMetadata

logger = logging.getLogger(__name__)


class ProviderClient:
    """Issues one completions request to a provider and returns the first completion text."""

    def __init__(self, settings: Optional[EnrichmentSettings] = None) -> None:
        settings = settings or EnrichmentSettings()
        self.timeout = settings.request_timeout_seconds
        self.useragent = settings.user_agent

    def fetch(self, provider: ProviderConfig, metadata: SongMetadata) -> str:
        url = self.build_url(provider, metadata)
        payload = self._request(provider, url)
        return self.extract_text(provider, payload)

    @staticmethod
    def build_url(provider: ProviderConfig, metadata: SongMetadata) -> str:
        encoded = urllib.parse.quote(json.dumps(metadata.to_payload()), safe="")
        return provider.endpoint_template.replace("{metadata}", encoded)

    def headers(self, provider: ProviderConfig) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {provider.credential}",
            "Content-Type": "application/json",
            "User-Agent": self.useragent,
        }

    def _request(self, provider: ProviderConfig, url: str) -> Any:
        req = urllib.request.Request(url, headers=self.headers(provider))
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    raise ProviderError(f"{provider.name} returned HTTP {status}")
                body = resp.read()
        except urllib.error.HTTPError as exc:
            logger.debug("%s HTTP error %s", provider.name, exc.code)
            raise ProviderError(f"{provider.name} returned HTTP {exc.code}") from exc
        except urllib.error.URLError as exc:
            raise ProviderError(f"{provider.name} request failed: {exc.reason}") from exc
        except (TimeoutError, OSError) as exc:
            raise ProviderError(f"{provider.name} request failed: {exc}") from exc
        try:
            return json.loads(body)
        except ValueError as exc:
            raise ProviderError(f"{provider.name} returned invalid JSON") from exc

    @staticmethod
    def extract_text(provider: ProviderConfig, payload: Any) -> str:
        if not isinstance(payload, dict):
            raise ProviderError(f"{provider.name} response is not an object")
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ProviderError(f"{provider.name} response has no completions")
        first = choices[0]
        text = first.get("text") if isinstance(first, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise ProviderError(f"{provider.name} completion has no text")
        return text.strip("\r\n")
