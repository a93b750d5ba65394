from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple, Union

from ..config import ProviderSettings, Settings
from ..models import ProviderConfig

COMPLETIONS_QUERY = "prompt=Generate+song+info+based+on+metadata&metadata={metadata}"


@dataclass(frozen=True, slots=True)
class ProviderDescriptor:
    name: str
    credential_field: str
    endpoint_template: str


# Declaration order is the order of the merged output.
PROVIDERS: Tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        "openai",
        "openai_api_key",
        f"https://api.openai.com/v1/engines/davinci/completions?{COMPLETIONS_QUERY}",
    ),
    ProviderDescriptor(
        "gemini_pro",
        "gemini_pro_api_key",
        f"https://generativelanguage.googleapis.com/v1/completions?{COMPLETIONS_QUERY}",
    ),
    ProviderDescriptor(
        "deezer",
        "deezer_api_key",
        f"https://api.deezer.com/v1/completions?{COMPLETIONS_QUERY}",
    ),
    ProviderDescriptor(
        "shazam",
        "shazam_api_key",
        f"https://api.shazam.com/v1/completions?{COMPLETIONS_QUERY}",
    ),
    ProviderDescriptor(
        "genius",
        "genius_api_key",
        f"https://api.genius.com/v1/completions?{COMPLETIONS_QUERY}",
    ),
    ProviderDescriptor(
        "theaudiodb",
        "theaudiodb_api_key",
        f"https://www.theaudiodb.com/api/v1/completions?{COMPLETIONS_QUERY}",
    ),
)


class ProviderRegistry:
    """Immutable snapshot of every known provider, configured or not."""

    def __init__(self, providers: Tuple[ProviderConfig, ...]) -> None:
        self._providers = tuple(providers)

    @classmethod
    def from_settings(cls, settings: Union[Settings, ProviderSettings]) -> "ProviderRegistry":
        provider_settings = settings.providers if isinstance(settings, Settings) else settings
        providers = []
        for descriptor in PROVIDERS:
            credential = getattr(provider_settings, descriptor.credential_field, "") or ""
            template = provider_settings.endpoints.get(descriptor.name, descriptor.endpoint_template)
            providers.append(
                ProviderConfig(
                    name=descriptor.name,
                    credential=credential,
                    endpoint_template=template,
                )
            )
        return cls(tuple(providers))

    @property
    def providers(self) -> Tuple[ProviderConfig, ...]:
        return self._providers

    def configured(self) -> Tuple[ProviderConfig, ...]:
        return tuple(provider for provider in self._providers if provider.is_configured)

    def unconfigured(self) -> Tuple[ProviderConfig, ...]:
        return tuple(provider for provider in self._providers if not provider.is_configured)

    def __iter__(self) -> Iterator[ProviderConfig]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)


def configured(
    source: Union[Settings, ProviderSettings, ProviderRegistry],
) -> Tuple[ProviderConfig, ...]:
    registry = source if isinstance(source, ProviderRegistry) else ProviderRegistry.from_settings(source)
    return registry.configured()
