from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import Settings
from ..providers.registry import PROVIDERS, ProviderRegistry
from .output import disabled, enabled, error, ok as ok_line


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[str]


def run(settings: Settings, *, config_path: Optional[Path] = None) -> DoctorReport:
    checks: list[str] = []
    ok = True

    if config_path is None:
        checks.append(ok_line("Config", "defaults (no config.yaml found)"))
    else:
        checks.append(ok_line("Config", str(config_path)))

    known = {descriptor.name for descriptor in PROVIDERS}
    unknown = sorted(set(settings.providers.endpoints) - known)
    if unknown:
        ok = False
        checks.append(error("Endpoint overrides", f"unknown provider(s): {', '.join(unknown)}"))

    registry = ProviderRegistry.from_settings(settings)
    missing = {provider.name for provider in registry.unconfigured()}
    for provider in registry:
        detail = "custom endpoint" if provider.name in settings.providers.endpoints else None
        if provider.name in missing:
            checks.append(disabled(f"Provider {provider.name}", f"set providers.{provider.name}_api_key"))
        else:
            checks.append(enabled(f"Provider {provider.name}", detail))

    configured = len(registry.configured())
    summary = f"{configured} of {len(registry)} configured"
    checks.append(ok_line("Providers", summary))
    checks.append(ok_line("Request timeout", f"{settings.enrichment.request_timeout_seconds:g}s"))
    return DoctorReport(ok=ok, checks=checks)
