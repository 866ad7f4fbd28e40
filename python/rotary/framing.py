"""
Rotary Framing - Transformation modes and the optional tagged header.

A raw stream does not say which mode produced it, so both sides must agree
on the mode out of band. A tagged frame removes that ambiguity by
prefixing the raw stream with a version byte and a mode byte.

Tagged frame format: version(1) || mode(1) || raw stream
"""

from enum import Enum
from typing import Tuple, Union

from rotary.errors import FrameFormatError

FORMAT_VERSION = 1
HEADER_SIZE = 2


class Mode(Enum):
    """Per-byte transformation strategy."""

    SHALLOW = 1  # one active rotor per byte
    DEEP = 2  # cascade through all five rotors

    @classmethod
    def parse(cls, value: Union["Mode", str]) -> "Mode":
        """
        Accept a Mode or its case-insensitive name.

        Raises:
            ValueError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"Unknown mode: {value}") from None


def pack_header(mode: Mode) -> bytes:
    return bytes([FORMAT_VERSION, mode.value])


def unpack_header(frame: bytes) -> Tuple[Mode, bytes]:
    """
    Split a tagged frame into its mode and raw stream.

    Args:
        frame: Tagged frame from pack_header() + raw stream

    Returns:
        (mode, raw stream)

    Raises:
        FrameFormatError: If the header is short or unknown
    """
    if len(frame) < HEADER_SIZE:
        raise FrameFormatError("Frame too short for header")

    version, mode_byte = frame[0], frame[1]
    if version != FORMAT_VERSION:
        raise FrameFormatError(f"Unknown frame version: {version}")
    try:
        mode = Mode(mode_byte)
    except ValueError:
        raise FrameFormatError(f"Unknown frame mode: {mode_byte}") from None

    return mode, frame[HEADER_SIZE:]
