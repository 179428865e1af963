from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Iterator
from functools import partial
from pathlib import Path
from typing import BinaryIO, Optional

from .assembler import TagAssembler
from .config import Settings
from .episode import EpisodeMetadata, FrameField, apply_episode_metadata
from .frames import FrameStore
from .models import IncompleteTagError
from .tag_buffer import BufferState, FeedStatus, TagBuffer

logger = logging.getLogger(__name__)


def iter_chunks(fh: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    return iter(partial(fh.read, chunk_size), b"")


class TaggedStreamWriter:
    """Writes an episode download to ``sink`` with its ID3v2 tag rewritten on the way through.

    Only the tag at the head of the stream is held in memory. Once it is
    complete (or once it is clear there is none) the rebuilt tag is written,
    followed by the audio exactly as received. The sink is never closed here.
    """

    def __init__(
        self,
        sink: BinaryIO,
        episode: EpisodeMetadata,
        *,
        settings: Optional[Settings] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.sink = sink
        self.settings = settings or Settings()
        self.episode = episode
        self.log = log or logger
        self.assembler = TagAssembler()
        self.buffer = TagBuffer(
            max_tag_size=self.settings.codec.max_tag_size,
            default_version=self.settings.codec.default_version,
            log=self.log,
        )
        self.written = 0

    def __enter__(self) -> "TaggedStreamWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()

    def write(self, chunk: bytes) -> int:
        if self.buffer.resolved:
            self._emit(chunk)
            return len(chunk)

        result = self.buffer.feed(chunk)
        if result.status is FeedStatus.NEED_MORE:
            return len(chunk)
        self._emit(self._build_tag())
        if result.status is FeedStatus.NO_TAG:
            self._emit(self.buffer.held)
            self._emit(chunk)
        else:
            self._emit(memoryview(chunk)[result.consumed :])
        return len(chunk)

    def close(self) -> None:
        if not self.buffer.resolved:
            raise IncompleteTagError(
                f"Stream ended after {len(self.buffer)} bytes, before its ID3v2 tag was complete"
            )

    def _build_tag(self) -> bytes:
        store = self.buffer.store
        if store is None:
            raise IncompleteTagError("ID3v2 tag has not been read yet")
        episode = self.episode
        if episode.artist is None and self.settings.show.artist:
            episode = dataclasses.replace(episode, artist=self.settings.show.artist)
        apply_episode_metadata(store, episode, genre=self.settings.show.genre)
        tag = self.assembler.build(store)
        self.log.info(
            "Tagged %s as ID3v2.%d (%d frames, %d bytes)",
            episode.title or "episode",
            store.version,
            len(store),
            len(tag),
        )
        return tag

    def _emit(self, data: bytes) -> None:
        if not data:
            return
        self.sink.write(data)
        self.written += len(data)


def retag_stream(
    chunks: Iterable[bytes],
    sink: BinaryIO,
    episode: EpisodeMetadata,
    *,
    settings: Optional[Settings] = None,
    log: Optional[logging.Logger] = None,
) -> int:
    """Copy ``chunks`` to ``sink`` with the episode fields injected; return the bytes written."""
    writer = TaggedStreamWriter(sink, episode, settings=settings, log=log)
    for chunk in chunks:
        writer.write(chunk)
    writer.close()
    return writer.written


def retag_file(
    src: Path,
    dst: Path,
    episode: EpisodeMetadata,
    *,
    settings: Optional[Settings] = None,
) -> int:
    settings = settings or Settings()
    part = dst.with_name(dst.name + ".part")
    try:
        with src.open("rb") as reader, part.open("wb") as writer:
            written = retag_stream(
                iter_chunks(reader, settings.codec.chunk_size),
                writer,
                episode,
                settings=settings,
            )
    except Exception:
        part.unlink(missing_ok=True)
        raise
    part.replace(dst)
    logger.debug("Wrote %s (%d bytes)", dst, written)
    return written


def read_tag(path: Path, *, settings: Optional[Settings] = None) -> Optional[FrameStore]:
    """Return the frames of the tag at the head of ``path``, or None if it has no complete tag.

    Reading stops as soon as the tag is complete; the audio is never read.
    """
    settings = settings or Settings()
    buffer = TagBuffer(max_tag_size=settings.codec.max_tag_size)
    with path.open("rb") as fh:
        for chunk in iter_chunks(fh, settings.codec.chunk_size):
            if buffer.feed(chunk).status is not FeedStatus.NEED_MORE:
                break
    if buffer.state is not BufferState.COMPLETE:
        if not buffer.resolved:
            logger.debug("%s ended inside its ID3v2 tag", path)
        return None
    return buffer.store


def read_title(path: Path, *, settings: Optional[Settings] = None) -> Optional[str]:
    store = read_tag(path, settings=settings)
    if store is None:
        return None
    return store.first_value(FrameField.TITLE.frame_id(store.version))
