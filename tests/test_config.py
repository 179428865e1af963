import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pydantic import ValidationError

from podcast_tags.config import CodecSettings, Settings, find_config, load_settings


class TestSettings(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults(self) -> None:
        settings = Settings()
        self.assertEqual(settings.codec.max_tag_size, 64 * 1024 * 1024)
        self.assertEqual(settings.codec.chunk_size, 64 * 1024)
        self.assertEqual(settings.codec.default_version, 4)
        self.assertEqual(settings.show.genre, "Podcast")
        self.assertIsNone(settings.show.artist)

    def test_load_yaml(self) -> None:
        path = self.tmp / "config.yaml"
        path.write_text(
            "codec:\n  chunk_size: 1024\n  default_version: 3\nshow:\n  artist: Network\n",
            encoding="utf-8",
        )
        settings = Settings.load(path)
        self.assertEqual(settings.codec.chunk_size, 1024)
        self.assertEqual(settings.codec.default_version, 3)
        self.assertEqual(settings.codec.max_tag_size, 64 * 1024 * 1024)
        self.assertEqual(settings.show.artist, "Network")
        self.assertEqual(settings.show.genre, "Podcast")

    def test_empty_yaml_gives_defaults(self) -> None:
        path = self.tmp / "config.yaml"
        path.write_text("", encoding="utf-8")
        self.assertEqual(Settings.load(path), Settings())

    def test_max_tag_size_can_be_disabled(self) -> None:
        path = self.tmp / "config.yaml"
        path.write_text("codec:\n  max_tag_size: null\n", encoding="utf-8")
        self.assertIsNone(Settings.load(path).codec.max_tag_size)

    def test_invalid_values_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            CodecSettings(default_version=5)
        with self.assertRaises(ValidationError):
            CodecSettings(chunk_size=0)
        with self.assertRaises(ValidationError):
            CodecSettings(max_tag_size=4)

    def test_find_config_prefers_explicit_path(self) -> None:
        explicit = self.tmp / "elsewhere.yaml"
        self.assertEqual(find_config(explicit), explicit)

    def test_find_config_looks_in_cwd(self) -> None:
        with mock.patch("podcast_tags.config.Path.cwd", return_value=self.tmp):
            self.assertIsNone(find_config(None))
            (self.tmp / "config.yml").write_text("show:\n  genre: Talk\n", encoding="utf-8")
            self.assertEqual(find_config(None), self.tmp / "config.yml")
            self.assertEqual(load_settings().show.genre, "Talk")

    def test_load_settings_without_file(self) -> None:
        with mock.patch("podcast_tags.config.Path.cwd", return_value=self.tmp):
            self.assertEqual(load_settings(), Settings())


if __name__ == "__main__":
    unittest.main()
