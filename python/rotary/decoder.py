"""
Rotary Decoder - Inverts the Encoder's stream.

The stream has no mode tag, so the decoder must be built with the same
mode as the encoder. A wrong secret or wrong mode is not detected and
yields deterministic garbage.
"""

import logging
from typing import Union

from rotary.errors import StreamTruncatedError, StreamTruncatedOnNoise
from rotary.framing import Mode
from rotary.secret import Secret

logger = logging.getLogger(__name__)


class Decoder:
    """
    Decodes rotor-encoded streams with a private copy of a secret.

    Not safe for concurrent use.
    """

    def __init__(self, secret: Secret, mode: Union[Mode, str] = Mode.DEEP):
        """
        Initialize decoder.

        Args:
            secret: Key material (copied, never shared)
            mode: Transformation strategy used by the encoder (Mode or its name)

        Raises:
            ValueError: If mode is unknown
        """
        self._secret = secret.copy()
        self.mode = Mode.parse(mode)

    @property
    def prefix_length(self) -> int:
        return self._secret.prefix_length

    def decode(self, encoded: bytes) -> bytes:
        """
        Decode a stream in the configured mode.

        Args:
            encoded: Stream from Encoder.encode()

        Returns:
            Raw bytes

        Raises:
            StreamTruncatedError: If the stream has no selector byte
            StreamTruncatedOnNoise: If the stream ends on a noise byte
        """
        if self.mode is Mode.DEEP:
            return self.decode_deep(encoded)
        return self.decode_shallow(encoded)

    def decode_shallow(self, encoded: bytes) -> bytes:
        """Decode a stream written by Encoder.encode_shallow()."""
        secret = self._secret
        output = bytearray()
        position = self._start(encoded)

        while position < len(encoded):
            rotor = secret.current_rotor()
            if rotor.is_noisey():
                position += 1
                if position == len(encoded):
                    raise StreamTruncatedOnNoise(position - 1)
            output.append(rotor.decode(encoded[position]))
            rotor.rotate()
            secret.rotate()
            position += 1

        logger.debug("Shallow-decoded %d bytes into %d", len(encoded), len(output))
        return bytes(output)

    def decode_deep(self, encoded: bytes) -> bytes:
        """Decode a stream written by Encoder.encode_deep()."""
        secret = self._secret
        output = bytearray()
        position = self._start(encoded)

        while position < len(encoded):
            # Last rotor of the encoding chain comes first
            rotors = secret.current_rotors_reverse()
            leading = rotors[-1]
            if leading.is_noisey():
                position += 1
                if position == len(encoded):
                    raise StreamTruncatedOnNoise(position - 1)
            value = encoded[position]
            for rotor in rotors:
                value = rotor.decode(value)
            output.append(value)
            leading.rotate()
            secret.rotate()
            position += 1

        logger.debug("Deep-decoded %d bytes into %d", len(encoded), len(output))
        return bytes(output)

    def _start(self, encoded: bytes) -> int:
        """Reset state, apply the selector byte, return the first payload position."""
        secret = self._secret
        secret.reset()

        prefix_length = secret.prefix_length
        if len(encoded) <= prefix_length:
            raise StreamTruncatedError(
                f"Stream of {len(encoded)} bytes has no selector after "
                f"{prefix_length}-byte noise prefix"
            )
        secret.set_rotor_index(encoded[prefix_length])
        return prefix_length + 1
