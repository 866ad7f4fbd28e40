"""
Rotary Errors - Exception hierarchy for the rotor engine.

Memory exhaustion is left to Python's built-in MemoryError and is never
caught by the engine. Decoding with the wrong secret is not an error: it
produces deterministic garbage, since the stream carries no checksum.
"""


class RotaryError(Exception):
    """Base class for all engine errors."""


class SerializationFormatError(RotaryError, ValueError):
    """A persisted secret record could not be parsed or validated."""


class StreamTruncatedError(RotaryError, ValueError):
    """Encoded stream is too short to contain its noise prefix and selector byte."""


class StreamTruncatedOnNoise(StreamTruncatedError):
    """Encoded stream ended right after a noise byte, with no data byte to pair it with."""

    def __init__(self, position: int):
        super().__init__(f"Stream ended on noise byte at position {position}")
        self.position = position


class FrameFormatError(RotaryError, ValueError):
    """Tagged frame header is missing or names an unknown version or mode."""


class EngineReleasedError(RotaryError):
    """Engine was used after release()."""
