from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional, Union

UNCONFIGURED = "unconfigured"


@dataclass(frozen=True, slots=True)
class AudioFile:
    data: bytes
    filename: str

    @classmethod
    def from_path(cls, path: Path) -> "AudioFile":
        return cls(data=path.read_bytes(), filename=path.name)


@dataclass(frozen=True, slots=True)
class SongMetadata:
    """Tag and stream information decoded from an audio buffer.

    Every field is optional. ``None`` means the source file did not carry the
    value; blank strings are normalized to ``None`` on construction so that
    "no data" is never confused with an empty tag.
    """

    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    album_artist: Optional[str] = None
    composer: Optional[str] = None
    genre: Optional[str] = None
    date: Optional[str] = None
    track_number: Optional[int] = None
    disc_number: Optional[int] = None
    duration_seconds: Optional[int] = None
    bitrate: Optional[int] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, str):
                cleaned = value.strip()
                object.__setattr__(self, item.name, cleaned or None)

    def to_payload(self) -> Dict[str, Union[str, int]]:
        payload: Dict[str, Union[str, int]] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is not None:
                payload[item.name] = value
        return payload

    def describe(self) -> str:
        artist = self.artist or self.album_artist or "unknown artist"
        title = self.title or "unknown title"
        line = f"{artist} - {title}"
        if self.album:
            line += f" ({self.album})"
        if self.duration_seconds is not None:
            minutes, seconds = divmod(self.duration_seconds, 60)
            line += f" [{minutes}:{seconds:02d}]"
        return line


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    name: str
    credential: str
    endpoint_template: str

    @property
    def is_configured(self) -> bool:
        return bool(self.credential and self.credential.strip())


@dataclass(frozen=True, slots=True)
class Success:
    provider: str
    text: str


@dataclass(frozen=True, slots=True)
class Failure:
    provider: str
    reason: str


@dataclass(frozen=True, slots=True)
class Skipped:
    provider: str
    reason: str = UNCONFIGURED


ProviderOutcome = Union[Success, Failure, Skipped]


class SongExplorerError(Exception):
    """Base class for errors raised by the enrichment pipeline."""


class DecodeError(SongExplorerError):
    """Raised when an audio buffer is not a well-formed instance of its declared format."""


class ProviderError(SongExplorerError):
    """Raised by a provider call; the aggregation engine turns it into a Failure outcome."""


class ConfigError(SongExplorerError):
    """Raised when the settings file cannot be read or validated."""
