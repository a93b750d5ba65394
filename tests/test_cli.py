import contextlib
import io
import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from audio_fixtures import id3v24, wav_bytes

from song_explorer.cli import main
from song_explorer.providers.client import ProviderClient


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self._handlers = list(root.handlers)
        self._level = root.level
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.config = self.tmp / "config.yaml"
        self.config.write_text(
            "default_artist: Unknown Artist\nproviders:\n  openai_api_key: oa\n",
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)
        self._tmp.cleanup()

    def _main(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = main(["--config", str(self.config), *argv])
        return status, out.getvalue()

    def test_enrich_prints_song_information(self) -> None:
        track = self.tmp / "track.wav"
        track.write_bytes(wav_bytes(id3v24({"TPE1": "Unknown Artist"})))
        with patch.object(ProviderClient, "fetch", lambda _self, p, m: f"A song by {m.artist}"):
            status, output = self._main("enrich", str(track))
        self.assertEqual(status, 0)
        self.assertEqual(output.strip(), "A song by Unknown Artist")

    def test_enrich_inserts_into_note(self) -> None:
        track = self.tmp / "track.wav"
        track.write_bytes(wav_bytes())
        note = self.tmp / "note.md"
        note.write_text("# Listening\n", encoding="utf-8")
        with patch.object(ProviderClient, "fetch", lambda _self, p, m: "Some info"):
            status, _output = self._main("enrich", str(track), "--note", str(note))
        self.assertEqual(status, 0)
        self.assertEqual(note.read_text(encoding="utf-8"), "# Listening\nSome info\n")

    def test_enrich_rejects_ineligible_file(self) -> None:
        other = self.tmp / "cover.jpg"
        other.write_bytes(b"\xff\xd8")
        status, output = self._main("enrich", str(other))
        self.assertEqual(status, 2)
        self.assertIn("not an mp3, wav or flac file", output)

    def test_enrich_reports_decode_error(self) -> None:
        broken = self.tmp / "broken.flac"
        broken.write_bytes(b"garbage")
        status, _output = self._main("enrich", str(broken))
        self.assertEqual(status, 1)

    def test_insert_artist(self) -> None:
        note = self.tmp / "note.md"
        status, _output = self._main("insert-artist", "--note", str(note))
        self.assertEqual(status, 0)
        self.assertEqual(note.read_text(encoding="utf-8"), "Artist: Unknown Artist\n")

    def test_doctor(self) -> None:
        status, output = self._main("doctor")
        self.assertEqual(status, 0)
        self.assertIn("Provider openai: ENABLED", output)


if __name__ == "__main__":
    unittest.main()
