from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import ConfigError


class ProviderSettings(BaseModel):
    openai_api_key: str = ""
    gemini_pro_api_key: str = ""
    deezer_api_key: str = ""
    shazam_api_key: str = ""
    genius_api_key: str = ""
    theaudiodb_api_key: str = ""
    endpoints: Dict[str, str] = Field(default_factory=dict)

    @field_validator(
        "openai_api_key",
        "gemini_pro_api_key",
        "deezer_api_key",
        "shazam_api_key",
        "genius_api_key",
        "theaudiodb_api_key",
        mode="before",
    )
    @classmethod
    def _strip_key(cls, value: Optional[str]) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("endpoints")
    @classmethod
    def _check_endpoints(cls, values: Dict[str, str]) -> Dict[str, str]:
        for name, template in values.items():
            if "{metadata}" not in template:
                raise ValueError(f"endpoint for {name} must contain a {{metadata}} placeholder")
        return values


class EnrichmentSettings(BaseModel):
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = "song-explorer/0.1"


class Settings(BaseModel):
    default_artist: str = "Unknown Artist"
    providers: ProviderSettings = ProviderSettings()
    enrichment: EnrichmentSettings = EnrichmentSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Could not read {path}: {exc}") from exc
        try:
            return cls.model_validate(raw or {})
        except ValidationError as exc:
            raise ConfigError(f"Invalid config {path}: {exc}") from exc


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None
