from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from ..app import SongExplorer
from ..file_gate import is_eligible
from ..host import NoteEditor
from ..models import AudioFile, Failure, Skipped, Success
from .output import failure, skipped, success

logger = logging.getLogger(__name__)


def run(
    explorer: SongExplorer,
    path: Path,
    *,
    note: Optional[Path] = None,
    line: Optional[int] = None,
    verbose: bool = False,
) -> int:
    if not is_eligible(path.name):
        print(f"{path.name} is not an mp3, wav or flac file")
        return 2
    audio = AudioFile.from_path(path)
    result = asyncio.run(explorer.run(audio))
    if result is None:
        return 2
    if verbose:
        print(result.metadata.describe())
        for outcome in result.outcomes:
            match outcome:
                case Success(provider=name):
                    print(success(name))
                case Failure(provider=name, reason=reason):
                    print(failure(name, reason))
                case Skipped(provider=name, reason=reason):
                    print(skipped(name, reason))
    if not result.text:
        print("No song information found.")
        return 0
    if note is None:
        print(result.text)
    else:
        NoteEditor(note, line=line).replace_selection(result.text)
        logger.info("Inserted song information into %s", note)
    return 0
