from __future__ import annotations

import codecs

from mutagen.id3 import Encoding

TERMINATOR = "\x00"


def decode_text(payload: bytes) -> str:
    """Decode a text frame payload, dropping its encoding marker and one trailing NUL.

    Values written with the UTF-8 marker (or with no recognised marker) are
    decoded with ``surrogateescape`` so that bytes which are not valid UTF-8
    survive a rebuild unchanged.
    """
    if not payload:
        return ""
    marker, data = payload[0], bytes(payload[1:])
    if marker == Encoding.LATIN1:
        text = data.decode("latin-1")
    elif marker == Encoding.UTF16:
        text = _decode_utf16_bom(data)
    elif marker == Encoding.UTF16BE:
        text = _decode_utf16(data, "utf-16-be")
    elif marker == Encoding.UTF8:
        text = data.decode("utf-8", errors="surrogateescape")
    else:
        text = bytes(payload).decode("utf-8", errors="surrogateescape")
    if text.endswith(TERMINATOR):
        text = text[:-1]
    return text


def encode_text(value: str) -> bytes:
    """Encode ``value`` as a UTF-8 frame payload: marker, text, NUL."""
    return bytes([Encoding.UTF8]) + encode_value(value) + TERMINATOR.encode("ascii")


def encode_value(value: str) -> bytes:
    return value.encode("utf-8", errors="surrogateescape")


def _decode_utf16_bom(data: bytes) -> str:
    if data.startswith(codecs.BOM_UTF16_BE):
        return _decode_utf16(data[2:], "utf-16-be")
    if data.startswith(codecs.BOM_UTF16_LE):
        return _decode_utf16(data[2:], "utf-16-le")
    # No BOM despite the marker; little-endian is what most taggers write.
    return _decode_utf16(data, "utf-16-le")


def _decode_utf16(data: bytes, codec: str) -> str:
    if len(data) % 2:
        data = data[:-1]
    return data.decode(codec, errors="replace")
