from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Union

from .frames import FrameStore

logger = logging.getLogger(__name__)

DEFAULT_GENRE = "Podcast"


class FrameField(Enum):
    """Fields the archiver writes, with their frame ids for ID3v2.2, 2.3 and 2.4."""

    TITLE = ("TT2", "TIT2", "TIT2")
    ALBUM = ("TAL", "TALB", "TALB")
    ARTIST = ("TP1", "TPE1", "TPE1")
    ALBUM_ARTIST = ("TP2", "TPE2", "TPE2")
    TRACK = ("TRK", "TRCK", "TRCK")
    GENRE = ("TCO", "TCON", "TCON")
    DATE = ("TYE", "TYER", "TDRC")
    DESCRIPTION = ("COM", "COMM", "COMM")
    ARTWORK = ("PIC", "APIC", "APIC")

    def frame_id(self, version: int) -> str:
        v22, v23, v24 = self.value
        if version == 2:
            return v22
        if version == 3:
            return v23
        return v24

    @property
    def repeatable(self) -> bool:
        return self is FrameField.DESCRIPTION

    @classmethod
    def from_id(cls, frame_id: str) -> Optional["FrameField"]:
        """Return the field stored under ``frame_id``, or None for frames passed through untouched."""
        for field in cls:
            if frame_id in field.value:
                return field
        return None


@dataclass(slots=True)
class EpisodeMetadata:
    title: Optional[str] = None
    show_title: Optional[str] = None
    artist: Optional[str] = None
    number: Optional[int] = None
    description: Optional[str] = None
    air_date: Union[date, str, None] = None
    artwork_url: Optional[str] = None


def format_date(value: Union[date, str], version: int) -> Optional[str]:
    """Render an air date for the tag version: full date for TDRC, year only for TYER/TYE."""
    if isinstance(value, date):
        text = value.strftime("%Y-%m-%d")
    else:
        text = value.strip()
    if version == 4:
        return text or None
    year = text[:4]
    return year if len(year) == 4 and year.isdigit() else None


def apply_episode_metadata(
    store: FrameStore, episode: EpisodeMetadata, *, genre: Optional[str] = DEFAULT_GENRE
) -> List[FrameField]:
    """Write the episode's fields into ``store`` and return the fields that were set.

    Frames the episode has no value for are left as they are, as are all
    frames this function does not know about.
    """
    version = store.version
    values = {
        FrameField.TITLE: episode.title,
        FrameField.ALBUM: episode.show_title,
        FrameField.ARTIST: episode.artist,
        FrameField.ALBUM_ARTIST: episode.artist,
        FrameField.TRACK: None if episode.number is None else str(episode.number),
        FrameField.GENRE: genre,
        FrameField.DATE: None if episode.air_date is None else format_date(episode.air_date, version),
        FrameField.DESCRIPTION: episode.description,
    }
    applied: List[FrameField] = []
    for field, value in values.items():
        if not value:
            continue
        if store.set_value(field.frame_id(version), value, allow_multiple=field.repeatable):
            applied.append(field)
    if episode.artwork_url:
        # APIC carries image bytes, which this text-only codec cannot write.
        logger.debug("Not embedding artwork %s", episode.artwork_url)
    return applied
