import unittest

from audio_fixtures import flac_bytes, id3v24, mp3_bytes, wav_bytes

from song_explorer.extraction import MetadataExtractor
from song_explorer.models import AudioFile, DecodeError, SongMetadata


class TestMetadataExtractor(unittest.TestCase):
    def setUp(self) -> None:
        self.extractor = MetadataExtractor()

    def test_wav_with_id3_chunk(self) -> None:
        tag = id3v24(
            {
                "TIT2": "Blue in Green",
                "TPE1": "Miles Davis",
                "TALB": "Kind of Blue",
                "TRCK": "3/5",
                "TDRC": "1959",
            }
        )
        meta = self.extractor.extract(AudioFile(wav_bytes(tag), "03 Blue in Green.wav"))
        self.assertEqual(meta.title, "Blue in Green")
        self.assertEqual(meta.artist, "Miles Davis")
        self.assertEqual(meta.album, "Kind of Blue")
        self.assertEqual(meta.track_number, 3)
        self.assertEqual(meta.date, "1959")
        self.assertIsNone(meta.genre)
        self.assertEqual(meta.duration_seconds, 1)
        self.assertEqual(meta.sample_rate, 8000)
        self.assertEqual(meta.channels, 1)

    def test_mp3_with_id3_tag(self) -> None:
        tag = id3v24({"TPE1": "Unknown Artist", "TIT2": "Intro", "TCON": "Jazz", "TPOS": "2"})
        meta = self.extractor.extract(AudioFile(mp3_bytes(tag), "01 Intro.Mp3"))
        self.assertEqual(meta.artist, "Unknown Artist")
        self.assertEqual(meta.title, "Intro")
        self.assertEqual(meta.genre, "Jazz")
        self.assertEqual(meta.disc_number, 2)
        self.assertIsNone(meta.album)
        self.assertEqual(meta.duration_seconds, 1)
        self.assertEqual(meta.bitrate, 128000)
        self.assertEqual(meta.sample_rate, 44100)

    def test_mp3_without_tag_still_reports_stream_info(self) -> None:
        meta = self.extractor.extract(AudioFile(mp3_bytes(), "untagged.mp3"))
        self.assertIsNone(meta.artist)
        self.assertEqual(meta.sample_rate, 44100)
        self.assertEqual(meta.bitrate, 128000)

    def test_wav_without_tags_reports_unknown_fields(self) -> None:
        meta = self.extractor.extract(AudioFile(wav_bytes(), "silence.WAV"))
        self.assertIsNone(meta.artist)
        self.assertIsNone(meta.title)
        self.assertEqual(meta.duration_seconds, 1)

    def test_flac_vorbis_comments(self) -> None:
        data = flac_bytes(
            {
                "TITLE": "Clair de lune",
                "ARTIST": "Claude Debussy",
                "ALBUMARTIST": "Various",
                "GENRE": "Classical",
                "TRACKNUMBER": "9",
                "DISCNUMBER": "1/2",
                "ALBUM": "  ",
            }
        )
        meta = self.extractor.extract(AudioFile(data, "clair.flac"))
        self.assertEqual(meta.title, "Clair de lune")
        self.assertEqual(meta.artist, "Claude Debussy")
        self.assertEqual(meta.album_artist, "Various")
        self.assertEqual(meta.genre, "Classical")
        self.assertEqual(meta.track_number, 9)
        self.assertEqual(meta.disc_number, 1)
        self.assertIsNone(meta.album)
        self.assertEqual(meta.duration_seconds, 2)
        self.assertEqual(meta.sample_rate, 44100)
        self.assertEqual(meta.channels, 2)

    def test_corrupt_buffers_raise_decode_error(self) -> None:
        cases = [
            AudioFile(b"definitely not an mpeg stream" * 20, "broken.mp3"),
            AudioFile(b"RIFF\x04\x00\x00\x00AVI ", "broken.wav"),
            AudioFile(b"OggS" + b"\x00" * 64, "broken.flac"),
            AudioFile(b"", "empty.mp3"),
        ]
        for audio in cases:
            with self.subTest(filename=audio.filename):
                with self.assertRaises(DecodeError):
                    self.extractor.extract(audio)

    def test_missing_decoder_raises_decode_error(self) -> None:
        with self.assertRaises(DecodeError):
            self.extractor.extract(AudioFile(b"data", "song.ogg"))
        with self.assertRaises(DecodeError):
            self.extractor.extract(AudioFile(b"data", "song"))

    def test_decoder_can_be_substituted(self) -> None:
        seen = []

        def fake_mp3(data: bytes) -> SongMetadata:
            seen.append(data)
            return SongMetadata(artist="Stub Artist")

        extractor = MetadataExtractor(decoders={".MP3": fake_mp3})
        meta = extractor.extract(AudioFile(b"abc", "x.mp3"))
        self.assertEqual(meta.artist, "Stub Artist")
        self.assertEqual(seen, [b"abc"])

    def test_decoder_exceptions_are_wrapped(self) -> None:
        def exploding(_data: bytes) -> SongMetadata:
            raise ValueError("bad frame header")

        extractor = MetadataExtractor()
        extractor.register("wav", exploding)
        with self.assertRaises(DecodeError) as ctx:
            extractor.extract(AudioFile(b"", "x.wav"))
        self.assertIn("bad frame header", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, ValueError)


if __name__ == "__main__":
    unittest.main()
