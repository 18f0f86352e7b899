# ppm.py
# Reader for binary portable pixmaps ("P6"). Layout of a file:
#
#   P6
#   # any number of comment lines
#   <width> <height>
#   <max channel value>
#   <width * height RGB triples, one byte per sample, rows top to bottom>

import sys
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional

import numpy as np

from pixmap import PixelMap

MAGIC = b"P6"
COMMENT_PREFIX = b"#"
BYTES_PER_PIXEL = 3
MAX_HEADER_LINE = 256  # bytes per readline() while parsing the header
PAYLOAD_CHUNK = 1 << 20


class DecodeError(Enum):
    OPEN_FAILURE = "open failure"
    HEADER_FORMAT_ERROR = "header format error"
    TRUNCATED_PAYLOAD = "truncated payload"


@dataclass(slots=True)
class DecodeResult:
    pixmap: PixelMap                  # always usable, possibly empty or partial
    error: Optional[DecodeError] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class _HeaderFormatError(Exception):
    pass


def _read_line(stream: BinaryIO) -> bytes:
    return _strip_terminator(stream.readline(MAX_HEADER_LINE))


def _strip_terminator(line: bytes) -> bytes:
    if line.endswith(b"\n"):
        line = line[:-1]
    if line.endswith(b"\r"):
        line = line[:-1]
    return line


def _parse_unsigned(token: bytes, field: str) -> int:
    # isdigit() rejects signs, so "-3" never slips through as a valid size
    if not token.isdigit():
        raise _HeaderFormatError(f"Expected an unsigned integer for {field}, got {token!r}")
    return int(token)


def _read_header(stream: BinaryIO, pixmap: PixelMap) -> None:
    """
    Parses the header into pixmap. Fields are stored as soon as they parse, so
    on failure everything read before the bad field stays set.
    """
    magic = _read_line(stream)
    if magic != MAGIC:
        raise _HeaderFormatError(f"Unrecognized file format, expected {MAGIC!r} but got {magic!r}")

    raw = stream.readline(MAX_HEADER_LINE)
    while raw.startswith(COMMENT_PREFIX):
        # Comments longer than MAX_HEADER_LINE come back in pieces
        while raw and not raw.endswith(b"\n"):
            raw = stream.readline(MAX_HEADER_LINE)
        raw = stream.readline(MAX_HEADER_LINE)
    line = _strip_terminator(raw)

    dimensions = line.split()
    if len(dimensions) < 2:
        raise _HeaderFormatError(f"Expected '<width> <height>', got {line!r}")
    width = _parse_unsigned(dimensions[0], "width")
    if width == 0:
        raise _HeaderFormatError("Image width must be positive")
    pixmap.width = width
    height = _parse_unsigned(dimensions[1], "height")
    if height == 0:
        raise _HeaderFormatError("Image height must be positive")
    if width * height * BYTES_PER_PIXEL > sys.maxsize:
        raise _HeaderFormatError(f"Image dimensions {width}x{height} are too large")
    pixmap.height = height

    max_val = _read_line(stream).split()
    if not max_val:
        raise _HeaderFormatError("Missing max channel value")
    pixmap.max_channel_value = _parse_unsigned(max_val[0], "max channel value")


def _read_payload(stream: BinaryIO, expected: int) -> bytes:
    # Raw streams may hand back short reads before EOF, so keep asking
    chunks = []
    remaining = expected
    while remaining > 0:
        chunk = stream.read(min(remaining, PAYLOAD_CHUNK))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def decode_stream(stream: BinaryIO) -> DecodeResult:
    """
    Decodes a P6 image from an open binary stream. The stream is left open.

    Never raises for malformed input. Check result.ok / result.error; the
    pixmap on a failed result is default, or partially filled in up to the
    point where decoding stopped.
    """
    pixmap = PixelMap()
    try:
        _read_header(stream, pixmap)
    except _HeaderFormatError as e:
        return DecodeResult(pixmap, DecodeError.HEADER_FORMAT_ERROR, f"Header file format error. {e}")

    expected = pixmap.size * BYTES_PER_PIXEL
    payload = _read_payload(stream, expected)

    # Missing trailing samples stay zero
    samples = np.frombuffer(payload, dtype=np.uint8)
    for offset, name in enumerate(("red", "green", "blue")):
        channel = np.zeros(pixmap.size, dtype=np.uint8)
        received = samples[offset::BYTES_PER_PIXEL]
        channel[:len(received)] = received
        setattr(pixmap, name, channel)

    if len(payload) < expected:
        return DecodeResult(pixmap, DecodeError.TRUNCATED_PAYLOAD,
                            f"Pixel data is truncated, expected {expected} bytes but got {len(payload)}")
    return DecodeResult(pixmap)


def read_ppm(filepath: str) -> DecodeResult:
    try:
        f = open(filepath, "rb")
    except OSError as e:
        return DecodeResult(PixelMap(), DecodeError.OPEN_FAILURE, f"Unable to open {filepath}: {e.strerror}")
    with f:
        return decode_stream(f)
