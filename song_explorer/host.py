from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Editor(Protocol):
    def replace_selection(self, text: str) -> None: ...


class NoteEditor:
    """Editor backed by a markdown note on disk.

    Text is inserted before ``line`` (1-based) or appended when no line is
    given. The note is created if it does not exist yet.
    """

    def __init__(self, path: Path, line: Optional[int] = None) -> None:
        self.path = path
        self.line = line

    def replace_selection(self, text: str) -> None:
        existing = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        lines = existing.splitlines(keepends=True)
        block = text if text.endswith("\n") else f"{text}\n"
        if self.line is None or self.line > len(lines):
            if lines and not lines[-1].endswith("\n"):
                lines[-1] += "\n"
            lines.append(block)
        else:
            index = max(self.line - 1, 0)
            lines.insert(index, block)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("".join(lines), encoding="utf-8")
        logger.debug("Inserted %d characters into %s", len(text), self.path)
