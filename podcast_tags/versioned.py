from __future__ import annotations

import string
from typing import Optional

from mutagen.id3 import Frames, Frames_2_2
# Private module; BitPaddedInt is not re-exported. Pinned to mutagen>=1.46,<2.
from mutagen.id3._util import BitPaddedInt

from .models import TagTooLargeError

MAGIC = b"ID3"
HEADER_SIZE = 10
SUPPORTED_VERSIONS = (2, 3, 4)
DEFAULT_VERSION = 4

# Outer header flag byte.
EXTENDED_HEADER_FLAG = 0x40
# Low frame flag byte: compression and encryption.
FRAME_SKIP_FLAGS = 0x04 | 0x08

ID_CHARS = frozenset(string.ascii_uppercase + string.digits)

# v2.2 frame classes in mutagen subclass their v2.3/2.4 counterparts.
_V22_UPGRADES = {
    name: cls.__bases__[0].__name__
    for name, cls in Frames_2_2.items()
    if cls.__bases__[0].__name__ in Frames
}
_V22_DOWNGRADES = {new: old for old, new in _V22_UPGRADES.items()}


def id_width(version: int) -> int:
    return 3 if version == 2 else 4


def length_width(version: int, header: bool = False) -> int:
    if version == 2 and not header:
        return 3
    return 4


def length_bits(version: int, header: bool = False) -> int:
    """Significant bits per length byte: 7 for synch-safe fields, 8 for plain ones.

    Header lengths are synch-safe in every version; frame lengths only in v2.4.
    """
    if header or version == 4:
        return 7
    return 8


def is_valid_id(frame_id: str, version: int) -> bool:
    return len(frame_id) == id_width(version) and all(ch in ID_CHARS for ch in frame_id)


def is_known_id(frame_id: str, version: int) -> bool:
    if version == 2:
        return frame_id in Frames_2_2
    return frame_id in Frames


def read_id(data: bytes, version: int) -> Optional[str]:
    """Return the frame id at the start of ``data``, or None when it is short or malformed."""
    width = id_width(version)
    raw = bytes(data[:width])
    if len(raw) != width:
        return None
    frame_id = raw.decode("latin-1")
    if not is_valid_id(frame_id, version):
        return None
    return frame_id


def read_len(data: bytes, version: int, header: bool = False) -> Optional[int]:
    """Return the big-endian length at the start of ``data``, or None when it is short."""
    width = length_width(version, header)
    raw = bytes(data[:width])
    if len(raw) != width:
        return None
    return int(BitPaddedInt(raw, bits=length_bits(version, header)))


def write_len(value: int, version: int, header: bool = False) -> bytes:
    width = length_width(version, header)
    bits = length_bits(version, header)
    if value < 0:
        raise ValueError(f"negative length {value}")
    try:
        return BitPaddedInt.to_str(value, bits=bits, width=width)
    except ValueError as exc:
        raise TagTooLargeError(
            f"length {value} does not fit in {width} bytes of {bits} bits"
        ) from exc


def convert_id(frame_id: str, from_version: int, to_version: int) -> Optional[str]:
    """Translate a frame id between v2.2 and v2.3/2.4 naming.

    Returns None when the target version has no equivalent frame.
    """
    if (from_version == 2) == (to_version == 2):
        return frame_id
    if from_version == 2:
        return _V22_UPGRADES.get(frame_id)
    return _V22_DOWNGRADES.get(frame_id)


def read_tag_size(header: bytes) -> int:
    """Return the synch-safe body size from a complete 10-byte outer header."""
    return int(BitPaddedInt(bytes(header[6:HEADER_SIZE]), bits=7))
