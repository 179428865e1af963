from __future__ import annotations

import logging
from typing import Optional

from .frames import FrameStore
from .models import EmptyTagError
from .text_codec import encode_text
from .versioned import MAGIC, SUPPORTED_VERSIONS, convert_id, is_valid_id, write_len

logger = logging.getLogger(__name__)

FRAME_FLAGS = b"\x00\x00"


class TagAssembler:
    """Writes a FrameStore back out as an ID3v2 tag.

    Every frame is emitted as UTF-8 text (marker 0x03, NUL terminated), the
    way the values are held in memory. The minor version and the header
    flags are always zero.
    """

    def build(self, store: FrameStore, version: Optional[int] = None) -> bytes:
        target = version or store.version
        if target not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported ID3v2 version: {target}")
        logger.debug("Building metadata to ID3v2.%d", target)
        frames = self.build_frames(store, target)
        if not frames:
            raise EmptyTagError("No metadata frames available")
        header = MAGIC + bytes([target, 0x00, 0x00]) + write_len(len(frames), target, header=True)
        return header + frames

    def build_frames(self, store: FrameStore, version: int) -> bytes:
        out = bytearray()
        for frame in store:
            frame_id = convert_id(frame.id, store.version, version)
            if frame_id is None or not is_valid_id(frame_id, version):
                logger.debug("Dropping %s: no ID3v2.%d equivalent", frame.id, version)
                continue
            payload = encode_text(frame.value)
            out += frame_id.encode("ascii")
            out += write_len(len(payload), version)
            # ID3v2.2 frame headers carry no flags.
            if version != 2:
                out += FRAME_FLAGS
            out += payload
        return bytes(out)
