from __future__ import annotations

from typing import Optional

ALLOWED_EXTENSIONS = frozenset({"mp3", "wav", "flac"})


def suffix_of(filename: str) -> Optional[str]:
    """Return the lowercase text after the final dot, or None when there is no dot."""
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[1].lower()


def is_eligible(filename: str) -> bool:
    return suffix_of(filename) in ALLOWED_EXTENSIONS
