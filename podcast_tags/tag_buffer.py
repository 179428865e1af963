from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .frames import FrameStore
from .models import RedundantWriteError, TagTooLargeError
from .versioned import (
    DEFAULT_VERSION,
    EXTENDED_HEADER_FLAG,
    HEADER_SIZE,
    MAGIC,
    SUPPORTED_VERSIONS,
    read_len,
    read_tag_size,
)

logger = logging.getLogger(__name__)


class BufferState(Enum):
    EMPTY = "empty"
    BUFFERING = "buffering"
    COMPLETE = "complete"
    NO_TAG = "no_tag"


class FeedStatus(Enum):
    NEED_MORE = "need_more"
    COMPLETE = "complete"
    NO_TAG = "no_tag"


@dataclass(frozen=True, slots=True)
class FeedResult:
    consumed: int
    status: FeedStatus


class TagBuffer:
    """Collects the head of an audio stream until the ID3v2 tag at its start is complete.

    Feed chunks in order. Each call reports how many bytes of the chunk
    belonged to the tag; once the status is COMPLETE the rest of that chunk
    (and everything after it) is audio. With NO_TAG nothing of the current
    chunk was taken, and the few bytes accepted by earlier calls are
    available from :attr:`held` so they can be replayed as audio.

    The frame store is parsed exactly once, when the tag completes. For
    streams without a tag an empty store at ``default_version`` is provided
    instead, so callers can still build a fresh tag.
    """

    def __init__(
        self,
        *,
        max_tag_size: Optional[int] = None,
        default_version: int = DEFAULT_VERSION,
        log: Optional[logging.Logger] = None,
    ) -> None:
        if default_version not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported ID3v2 version: {default_version}")
        self.max_tag_size = max_tag_size
        self.default_version = default_version
        self.log = log or logger
        self.store: Optional[FrameStore] = None
        self._buffer = bytearray()
        self._state = BufferState.EMPTY
        self._total: Optional[int] = None
        self._version: Optional[int] = None
        self._flags = 0

    @property
    def state(self) -> BufferState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._state in (BufferState.COMPLETE, BufferState.NO_TAG)

    @property
    def version(self) -> Optional[int]:
        """Major version of the buffered tag, or None while unknown or when there is no tag."""
        return self._version

    @property
    def total(self) -> Optional[int]:
        """Size of the whole tag including its 10-byte header, once the header is known."""
        return self._total

    @property
    def held(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def feed(self, chunk: bytes) -> FeedResult:
        if self.resolved:
            raise RedundantWriteError(f"TagBuffer already resolved ({self._state.value})")
        self._state = BufferState.BUFFERING
        view = memoryview(chunk)
        previous = len(self._buffer)

        if self._total is None:
            # Take no more than the outer header until its length is known.
            self._buffer += view[: HEADER_SIZE - previous]
            if len(self._buffer) < len(MAGIC):
                return FeedResult(len(chunk), FeedStatus.NEED_MORE)
            if self._buffer[: len(MAGIC)] != MAGIC:
                del self._buffer[previous:]
                self._state = BufferState.NO_TAG
                self.store = FrameStore(self.default_version, log=self.log)
                self.log.debug("No ID3v2 tag at start of stream")
                return FeedResult(0, FeedStatus.NO_TAG)
            if len(self._buffer) < HEADER_SIZE:
                return FeedResult(len(chunk), FeedStatus.NEED_MORE)
            self._total = self._read_header()

        taken = len(self._buffer) - previous
        self._buffer += view[taken : taken + self._total - len(self._buffer)]
        if len(self._buffer) < self._total:
            return FeedResult(len(chunk), FeedStatus.NEED_MORE)

        self._complete()
        return FeedResult(len(self._buffer) - previous, FeedStatus.COMPLETE)

    def _read_header(self) -> int:
        self._version = self._buffer[3]
        self._flags = self._buffer[5]
        total = read_tag_size(self._buffer) + HEADER_SIZE
        if self.max_tag_size is not None and total > self.max_tag_size:
            raise TagTooLargeError(
                f"Declared tag size {total} exceeds limit of {self.max_tag_size} bytes"
            )
        self.log.debug("Found ID3v2.%d tag of %d bytes", self._version, total)
        return total

    def _complete(self) -> None:
        self._state = BufferState.COMPLETE
        version = self._version
        if version not in SUPPORTED_VERSIONS:
            self.log.warning("Unsupported ID3v2.%s tag; its frames will be dropped", version)
            self.store = FrameStore(self.default_version, log=self.log)
            return

        offset = HEADER_SIZE
        if version != 2 and self._flags & EXTENDED_HEADER_FLAG:
            size = read_len(self._buffer[offset:], version, header=True) or 0
            # The v2.4 size counts its own 4 bytes; the v2.3 size does not.
            offset += size if version == 4 else size + 4
            self.log.debug("Skipping %d-byte extended header", offset - HEADER_SIZE)
        self.store = FrameStore.parse(bytes(self._buffer[offset:]), version, log=self.log)
