"""
Rotary Engine - Encode and decode with one secret.

The engine owns one Encoder and one Decoder, each built from its own copy
of the secret, so encoding never disturbs decoding state and vice versa.

Not a vetted cryptographic primitive: there is no integrity check, and
decoding with the wrong secret silently returns garbage.

Usage:
    >>> from rotary import Engine, Secret, Mode
    >>> secret = Secret.create("notes", prefix_length=8)
    >>> engine = Engine(secret, mode=Mode.DEEP)
    >>> encoded = engine.encode(b"hello world!")
    >>> assert engine.decode(encoded) == b"hello world!"
"""

import logging
from typing import Optional, Union

from rotary.decoder import Decoder
from rotary.encoder import Encoder
from rotary.errors import EngineReleasedError
from rotary.framing import Mode, pack_header, unpack_header
from rotary.secret import Secret

logger = logging.getLogger(__name__)


class Engine:
    """
    Rotor cipher engine.

    With tagged=True every encoded frame starts with a version byte and a
    mode byte, and decode() follows the mode named in the frame. With
    tagged=False the raw stream is used and both sides must agree on the
    mode.

    Example:
        >>> engine = Engine(Secret.create(), tagged=True)
        >>> frame = engine.encode(b"data")
        >>> assert engine.decode(frame) == b"data"
    """

    def __init__(self, secret: Secret, mode: Union[Mode, str] = Mode.DEEP, tagged: bool = False):
        """
        Initialize engine.

        Args:
            secret: Key material (copied separately for encoder and decoder)
            mode: Transformation strategy
            tagged: Prefix frames with a version/mode header
        """
        self.mode = Mode.parse(mode)
        self.tagged = tagged
        self.name = secret.name
        self._encoder: Optional[Encoder] = Encoder(secret, self.mode)
        # One decoder per mode, so tagged frames of either mode decode
        self._decoders = {m: Decoder(secret, m) for m in Mode}
        self._decoder: Optional[Decoder] = self._decoders[self.mode]
        logger.debug(
            "Engine ready for secret %r (mode=%s, tagged=%s)", self.name, self.mode.name, tagged
        )

    @classmethod
    def construct(cls, secret: Secret, mode: Union[Mode, str] = Mode.DEEP, tagged: bool = False) -> "Engine":
        """Alias of Engine(...)."""
        return cls(secret, mode, tagged)

    @property
    def released(self) -> bool:
        return self._encoder is None

    def encode(self, data: bytes) -> bytes:
        """
        Encode data.

        Args:
            data: Raw bytes

        Returns:
            Encoded stream, tagged if the engine is tagged

        Raises:
            EngineReleasedError: If release() was called
        """
        if self._encoder is None:
            raise EngineReleasedError("Engine has been released")

        encoded = self._encoder.encode(data)
        if self.tagged:
            return pack_header(self.mode) + encoded
        return encoded

    def decode(self, encoded: bytes) -> bytes:
        """
        Decode data.

        Args:
            encoded: Output of encode()

        Returns:
            Raw bytes

        Raises:
            EngineReleasedError: If release() was called
            FrameFormatError: If a tagged frame has a bad header
            StreamTruncatedError: If the stream is cut short
        """
        if self._decoder is None:
            raise EngineReleasedError("Engine has been released")

        if not self.tagged:
            return self._decoder.decode(encoded)

        mode, stream = unpack_header(encoded)
        return self._decoders[mode].decode(stream)

    def release(self) -> None:
        """Drop the encoder and decoders. Idempotent."""
        if self._encoder is not None:
            logger.debug("Releasing engine for secret %r", self.name)
        self._encoder = None
        self._decoder = None
        self._decoders = {}

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, *exc) -> None:
        self.release()


def quick_encode(secret: Secret, data: bytes, mode: Union[Mode, str] = Mode.DEEP) -> bytes:
    """
    One-shot encode with a throwaway engine (raw stream, no header).

    Args:
        secret: Key material
        data: Raw bytes
        mode: Transformation strategy

    Returns:
        Encoded stream
    """
    with Engine(secret, mode) as engine:
        return engine.encode(data)


def quick_decode(secret: Secret, encoded: bytes, mode: Union[Mode, str] = Mode.DEEP) -> bytes:
    """
    One-shot decode of a raw stream from quick_encode().

    Args:
        secret: Key material
        encoded: Encoded stream
        mode: Transformation strategy used to encode

    Returns:
        Raw bytes
    """
    with Engine(secret, mode) as engine:
        return engine.decode(encoded)
