from __future__ import annotations

import io
import logging
from typing import Callable, Dict, List, Mapping, Optional

from mutagen.flac import FLAC
from mutagen.id3 import ID3
from mutagen.mp3 import MP3
from mutagen.wave import WAVE

from .file_gate import suffix_of
from .models import AudioFile, DecodeError, SongMetadata

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], SongMetadata]

ID3_FRAMES = {
    "title": "TIT2",
    "artist": "TPE1",
    "album": "TALB",
    "album_artist": "TPE2",
    "composer": "TCOM",
    "genre": "TCON",
}

VORBIS_KEYS = {
    "title": ["TITLE"],
    "artist": ["ARTIST"],
    "album": ["ALBUM"],
    "album_artist": ["ALBUMARTIST", "ALBUM ARTIST"],
    "composer": ["COMPOSER"],
    "genre": ["GENRE"],
}


class MetadataExtractor:
    """Decodes in-memory audio buffers into SongMetadata, one decoder per format."""

    def __init__(self, decoders: Optional[Mapping[str, Decoder]] = None) -> None:
        self._decoders: Dict[str, Decoder] = {
            "mp3": decode_mp3,
            "wav": decode_wav,
            "flac": decode_flac,
        }
        if decoders:
            for suffix, decoder in decoders.items():
                self.register(suffix, decoder)

    def register(self, suffix: str, decoder: Decoder) -> None:
        self._decoders[suffix.lower().lstrip(".")] = decoder

    def extract(self, audio: AudioFile) -> SongMetadata:
        suffix = suffix_of(audio.filename)
        decoder = self._decoders.get(suffix) if suffix else None
        if decoder is None:
            raise DecodeError(f"No decoder registered for {audio.filename}")
        try:
            metadata = decoder(audio.data)
        except DecodeError:
            raise
        except Exception as exc:
            logger.debug("Decoding %s failed: %s", audio.filename, exc)
            raise DecodeError(f"{audio.filename} is not a valid {suffix} file: {exc}") from exc
        logger.debug("Extracted metadata for %s: %s", audio.filename, metadata.describe())
        return metadata


def decode_mp3(data: bytes) -> SongMetadata:
    audio = MP3(io.BytesIO(data))
    return _from_id3(audio.tags, audio.info)


def decode_wav(data: bytes) -> SongMetadata:
    audio = WAVE(io.BytesIO(data))
    return _from_id3(audio.tags, audio.info)


def decode_flac(data: bytes) -> SongMetadata:
    audio = FLAC(io.BytesIO(data))
    tags = audio.tags
    values: Dict[str, Optional[str]] = {}
    for attr, keys in VORBIS_KEYS.items():
        values[attr] = _first_vorbis(tags, keys) if tags is not None else None
    date = _first_vorbis(tags, ["DATE", "YEAR"]) if tags is not None else None
    track = _first_vorbis(tags, ["TRACKNUMBER"]) if tags is not None else None
    disc = _first_vorbis(tags, ["DISCNUMBER"]) if tags is not None else None
    return SongMetadata(
        date=date,
        track_number=_parse_int(track),
        disc_number=_parse_int(disc),
        **values,
        **_stream_fields(audio.info),
    )


def _from_id3(tags: Optional[ID3], info) -> SongMetadata:
    values: Dict[str, Optional[str]] = {}
    for attr, frame_id in ID3_FRAMES.items():
        values[attr] = _id3_text(tags, frame_id)
    date = _id3_text(tags, "TDRC") or _id3_text(tags, "TYER")
    return SongMetadata(
        date=date,
        track_number=_parse_int(_id3_text(tags, "TRCK")),
        disc_number=_parse_int(_id3_text(tags, "TPOS")),
        **values,
        **_stream_fields(info),
    )


def _id3_text(tags: Optional[ID3], frame_id: str) -> Optional[str]:
    if tags is None:
        return None
    frame = tags.getall(frame_id)
    if not frame or not getattr(frame[0], "text", None):
        return None
    return str(frame[0].text[0])


def _first_vorbis(tags, keys: List[str]) -> Optional[str]:
    for key in keys:
        values = tags.get(key)
        if values:
            return values[0] if isinstance(values, list) else values
    return None


def _stream_fields(info) -> Dict[str, Optional[int]]:
    if info is None:
        return {}
    length = getattr(info, "length", None)
    return {
        "duration_seconds": int(round(length)) if length else None,
        "bitrate": getattr(info, "bitrate", None) or None,
        "sample_rate": getattr(info, "sample_rate", None) or None,
        "channels": getattr(info, "channels", None) or None,
    }


def _parse_int(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    cleaned = str(value).strip()
    if "/" in cleaned:
        cleaned = cleaned.split("/", 1)[0].strip()
    if cleaned.isdigit():
        return int(cleaned)
    return None
