from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import List, Optional

from .text_codec import decode_text
from .versioned import (
    FRAME_SKIP_FLAGS,
    SUPPORTED_VERSIONS,
    id_width,
    is_known_id,
    is_valid_id,
    length_width,
    read_id,
    read_len,
)

logger = logging.getLogger(__name__)

# Picture payloads are not worth printing.
BINARY_FRAME_IDS = {"PIC", "APIC"}


@dataclass(slots=True)
class Frame:
    id: str
    value: str


def describe_value(frame: Frame) -> str:
    if frame.id in BINARY_FRAME_IDS:
        return f"<{len(frame.value)} chars of picture data>"
    # Undecodable bytes are kept as surrogates; show them as U+FFFD.
    return frame.value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def parse_frames(body: bytes, version: int, log: logging.Logger = logger) -> List[Frame]:
    """Parse the frames of a fully buffered tag body (header and extended header removed).

    Parsing stops at the first frame that cannot be read (bad id, bad length,
    truncated value, or padding) and returns the frames collected so far.
    Compressed and encrypted frames are dropped.
    """
    view = memoryview(body)
    frames: List[Frame] = []
    id_size = id_width(version)
    len_size = length_width(version)
    pos = 0
    while pos < len(view):
        if view[pos] == 0:
            log.debug("Reached padding after %d frames", len(frames))
            break
        frame_id = read_id(view[pos:], version)
        if frame_id is None:
            log.debug("Stopping frame parse early: invalid frame id at offset %d", pos)
            break
        pos += id_size

        size = read_len(view[pos:], version)
        if size is None or size <= 0:
            log.debug("Stopping frame parse early: invalid length for %s - %s", frame_id, size)
            break
        pos += len_size

        # ID3v2.2 frame headers carry no flags.
        if version != 2:
            flags = bytes(view[pos : pos + 2])
            if len(flags) != 2:
                log.debug("Stopping frame parse early: missing flags for %s", frame_id)
                break
            pos += 2
            if flags[1] & FRAME_SKIP_FLAGS:
                log.debug("Skipping compressed or encrypted frame %s", frame_id)
                pos += size
                continue

        payload = bytes(view[pos : pos + size])
        if len(payload) != size:
            log.debug(
                "Stopping frame parse early: %s declares %d bytes but %d remain",
                frame_id,
                size,
                len(payload),
            )
            break
        pos += size

        frame = Frame(frame_id, decode_text(payload))
        log.debug("Found %s - %s", frame.id, describe_value(frame))
        frames.append(frame)
    return frames


class FrameStore:
    """Ordered id/value pairs of a single tag.

    Ids are not unique: repeatable frames such as comments may appear more
    than once, and insertion order is what the assembler writes back out.
    """

    def __init__(
        self,
        version: int,
        frames: Optional[Iterable[Frame]] = None,
        *,
        log: Optional[logging.Logger] = None,
    ) -> None:
        if version not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported ID3v2 version: {version}")
        self.version = version
        self.log = log or logger
        self._frames: List[Frame] = list(frames or [])

    @classmethod
    def parse(
        cls, body: bytes, version: int, *, log: Optional[logging.Logger] = None
    ) -> "FrameStore":
        store = cls(version, log=log)
        store._frames = parse_frames(body, version, store.log)
        return store

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(tuple(self._frames))

    def __repr__(self) -> str:
        return f"FrameStore(version={self.version}, frames={len(self._frames)})"

    @property
    def frames(self) -> tuple[Frame, ...]:
        return tuple(self._frames)

    def get_values(self, frame_id: str) -> List[str]:
        """Return every value stored under ``frame_id`` (case-sensitive), in tag order."""
        return [frame.value for frame in self._frames if frame.id == frame_id]

    def first_value(self, frame_id: str) -> Optional[str]:
        values = self.get_values(frame_id)
        return values[0] if values else None

    def set_value(self, frame_id: str, value: str, allow_multiple: bool = False) -> bool:
        """Store ``value`` under ``frame_id``.

        Without ``allow_multiple`` every existing frame with the same id is
        dropped first, so single-valued fields such as the title stay unique.
        Returns False (and changes nothing) when the id does not fit the tag's
        version.
        """
        frame_id = frame_id.upper()
        if not is_valid_id(frame_id, self.version):
            self.log.warning("Invalid frame ID for ID3v2.%d: %r", self.version, frame_id)
            return False
        if not is_known_id(frame_id, self.version):
            self.log.debug("Passing through unknown frame ID %s", frame_id)
        if not allow_multiple:
            self.remove(frame_id)
        frame = Frame(frame_id, value)
        self._frames.append(frame)
        self.log.debug("Set frame %s to %s", frame_id, describe_value(frame))
        return True

    def remove(self, frame_id: str) -> int:
        before = len(self._frames)
        self._frames = [frame for frame in self._frames if frame.id != frame_id]
        return before - len(self._frames)
