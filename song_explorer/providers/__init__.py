from __future__ import annotations

from .client import ProviderClient
from .registry import PROVIDERS, ProviderDescriptor, ProviderRegistry, configured

__all__ = [
    "PROVIDERS",
    "ProviderClient",
    "ProviderDescriptor",
    "ProviderRegistry",
    "configured",
]
