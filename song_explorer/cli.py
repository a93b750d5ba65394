from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .app import SongExplorer
from .commands import doctor as cmd_doctor
from .commands import enrich as cmd_enrich
from .config import Settings, find_config
from .host import NoteEditor
from .models import ConfigError, DecodeError

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Insert song information for audio files into notes")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    enrich_parser = subparsers.add_parser("enrich", help="Look up song information for an audio file")
    enrich_parser.add_argument("file", type=Path, help="mp3, wav or flac file")
    enrich_parser.add_argument("--note", type=Path, default=None, help="Markdown note to insert into")
    enrich_parser.add_argument("--line", type=int, default=None, help="1-based line to insert before")
    enrich_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show extracted metadata and the outcome of every provider",
    )
    artist_parser = subparsers.add_parser("insert-artist", help="Insert the default artist line into a note")
    artist_parser.add_argument("--note", type=Path, required=True, help="Markdown note to insert into")
    artist_parser.add_argument("--line", type=int, default=None, help="1-based line to insert before")
    subparsers.add_parser("doctor", help="Show configuration and provider status")
    return parser


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)

    return warn_buffer


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    warn_buffer = configure_logging(args.log_level)
    config_path = find_config(args.config)
    try:
        settings = Settings.load(config_path) if config_path else Settings()
    except ConfigError as exc:
        raise SystemExit(str(exc))

    status = 0
    try:
        match args.command:
            case "enrich":
                explorer = SongExplorer.create(settings)
                try:
                    status = cmd_enrich.run(
                        explorer,
                        args.file,
                        note=args.note,
                        line=args.line,
                        verbose=args.verbose,
                    )
                except DecodeError as exc:
                    logging.getLogger(__name__).error("%s", exc)
                    status = 1
                except OSError as exc:
                    logging.getLogger(__name__).error("Could not read %s: %s", args.file, exc)
                    status = 1
            case "insert-artist":
                explorer = SongExplorer.create(settings)
                explorer.insert_default_artist(NoteEditor(args.note, line=args.line))
            case "doctor":
                report = cmd_doctor.run(settings, config_path=config_path)
                for line in report.checks:
                    print(line)
                status = 0 if report.ok else 1
            case _:
                parser.error("Unknown command")
    finally:
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")
    return status


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
