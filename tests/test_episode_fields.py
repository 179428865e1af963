import unittest
from datetime import date

from podcast_tags.episode import (
    EpisodeMetadata,
    FrameField,
    apply_episode_metadata,
    format_date,
)
from podcast_tags.frames import Frame, FrameStore


class TestFrameField(unittest.TestCase):
    def test_ids_follow_tag_version(self) -> None:
        self.assertEqual(FrameField.TITLE.frame_id(2), "TT2")
        self.assertEqual(FrameField.TITLE.frame_id(3), "TIT2")
        self.assertEqual(FrameField.DATE.frame_id(3), "TYER")
        self.assertEqual(FrameField.DATE.frame_id(4), "TDRC")
        self.assertEqual(FrameField.DESCRIPTION.frame_id(2), "COM")

    def test_from_id(self) -> None:
        self.assertIs(FrameField.from_id("TAL"), FrameField.ALBUM)
        self.assertIs(FrameField.from_id("TDRC"), FrameField.DATE)
        self.assertIsNone(FrameField.from_id("TXXX"))

    def test_only_description_repeats(self) -> None:
        repeatable = [field for field in FrameField if field.repeatable]
        self.assertEqual(repeatable, [FrameField.DESCRIPTION])


class TestFormatDate(unittest.TestCase):
    def test_v24_keeps_full_date(self) -> None:
        self.assertEqual(format_date(date(2021, 3, 9), 4), "2021-03-09")
        self.assertEqual(format_date(" 2021-03 ", 4), "2021-03")

    def test_older_versions_keep_the_year(self) -> None:
        self.assertEqual(format_date(date(2021, 3, 9), 3), "2021")
        self.assertEqual(format_date("2019-12-31", 2), "2019")

    def test_unusable_year_is_dropped(self) -> None:
        self.assertIsNone(format_date("spring", 3))
        self.assertIsNone(format_date("", 4))


class TestApplyEpisodeMetadata(unittest.TestCase):
    def test_fields_land_on_v24_ids(self) -> None:
        store = FrameStore(4)
        episode = EpisodeMetadata(
            title="Pilot",
            show_title="The Show",
            artist="Host",
            number=1,
            description="First episode",
            air_date=date(2020, 1, 2),
        )
        applied = apply_episode_metadata(store, episode)

        self.assertEqual(store.get_values("TIT2"), ["Pilot"])
        self.assertEqual(store.get_values("TALB"), ["The Show"])
        self.assertEqual(store.get_values("TPE1"), ["Host"])
        self.assertEqual(store.get_values("TPE2"), ["Host"])
        self.assertEqual(store.get_values("TRCK"), ["1"])
        self.assertEqual(store.get_values("TCON"), ["Podcast"])
        self.assertEqual(store.get_values("TDRC"), ["2020-01-02"])
        self.assertEqual(store.get_values("COMM"), ["First episode"])
        self.assertNotIn(FrameField.ARTWORK, applied)
        self.assertEqual(len(applied), 8)

    def test_v22_store_uses_three_character_ids(self) -> None:
        store = FrameStore(2)
        apply_episode_metadata(store, EpisodeMetadata(title="Pilot", air_date="2020-01-02"))
        self.assertEqual(store.get_values("TT2"), ["Pilot"])
        self.assertEqual(store.get_values("TYE"), ["2020"])
        self.assertEqual(store.get_values("TCO"), ["Podcast"])
        self.assertEqual(store.get_values("TIT2"), [])

    def test_existing_title_is_replaced_and_others_kept(self) -> None:
        store = FrameStore(3, [Frame("TIT2", "old"), Frame("TXXX", "keep"), Frame("TIT2", "older")])
        apply_episode_metadata(store, EpisodeMetadata(title="new"), genre=None)
        self.assertEqual(store.frames, (Frame("TXXX", "keep"), Frame("TIT2", "new")))

    def test_description_is_appended(self) -> None:
        store = FrameStore(4, [Frame("COMM", "from the feed")])
        apply_episode_metadata(store, EpisodeMetadata(description="ours"), genre=None)
        self.assertEqual(store.get_values("COMM"), ["from the feed", "ours"])

    def test_missing_values_leave_frames_alone(self) -> None:
        store = FrameStore(4, [Frame("TALB", "Feed Album"), Frame("TCON", "Talk")])
        applied = apply_episode_metadata(store, EpisodeMetadata(title="", number=None), genre=None)
        self.assertEqual(applied, [])
        self.assertEqual(store.frames, (Frame("TALB", "Feed Album"), Frame("TCON", "Talk")))

    def test_episode_zero_is_written(self) -> None:
        store = FrameStore(4)
        apply_episode_metadata(store, EpisodeMetadata(number=0), genre=None)
        self.assertEqual(store.get_values("TRCK"), ["0"])

    def test_artwork_is_logged_not_embedded(self) -> None:
        store = FrameStore(4)
        with self.assertLogs("podcast_tags.episode", level="DEBUG") as captured:
            apply_episode_metadata(
                store, EpisodeMetadata(artwork_url="https://example.com/cover.jpg"), genre=None
            )
        self.assertEqual(len(store), 0)
        self.assertTrue(any("cover.jpg" in line for line in captured.output))


if __name__ == "__main__":
    unittest.main()
