"""
Rotary Encoder - Turns raw bytes into a rotor-encoded stream.

Stream layout (both modes):
    noise(prefix_length) || selector(1) || ([noise(1)] || encoded(1)) per input byte

The selector is a raw 0-255 draw; the starting rotor is selector % 5. A
noise byte precedes an encoded byte whenever the active rotor is noisey.
"""

import logging
from typing import Union

from rotary.framing import Mode
from rotary.secret import Secret

logger = logging.getLogger(__name__)


class Encoder:
    """
    Encodes byte strings with a private copy of a secret.

    Rotation state lives in the private copy and is reset at the start of
    every encode() call. Not safe for concurrent use.
    """

    def __init__(self, secret: Secret, mode: Union[Mode, str] = Mode.DEEP):
        """
        Initialize encoder.

        Args:
            secret: Key material (copied, never shared)
            mode: Transformation strategy (Mode or its name)

        Raises:
            ValueError: If mode is unknown
        """
        self._secret = secret.copy()
        self.mode = Mode.parse(mode)

    @property
    def prefix_length(self) -> int:
        return self._secret.prefix_length

    def encode(self, data: bytes) -> bytes:
        """
        Encode data in the configured mode.

        Args:
            data: Raw bytes

        Returns:
            Encoded stream
        """
        if self.mode is Mode.DEEP:
            return self.encode_deep(data)
        return self.encode_shallow(data)

    def encode_shallow(self, data: bytes) -> bytes:
        """Encode each byte through the single active rotor."""
        output = self._start()
        secret = self._secret

        for byte in data:
            rotor = secret.current_rotor()
            if rotor.is_noisey():
                output.append(rotor.noise())
            output.append(rotor.encode(byte))
            rotor.rotate()
            secret.rotate()

        logger.debug("Shallow-encoded %d bytes into %d", len(data), len(output))
        return bytes(output)

    def encode_deep(self, data: bytes) -> bytes:
        """Encode each byte through all five rotors, active rotor first."""
        output = self._start()
        secret = self._secret

        for byte in data:
            rotors = secret.current_rotors()
            if rotors[0].is_noisey():
                output.append(rotors[0].noise())
            value = byte
            for rotor in rotors:
                value = rotor.encode(value)
            output.append(value)
            # Only the leading rotor turns
            rotors[0].rotate()
            secret.rotate()

        logger.debug("Deep-encoded %d bytes into %d", len(data), len(output))
        return bytes(output)

    def _start(self) -> bytearray:
        """Reset state and write the noise prefix and selector byte."""
        secret = self._secret
        secret.reset()

        rotor = secret.current_rotor()
        output = bytearray(rotor.noise() for _ in range(secret.prefix_length))

        secret.reset()
        selector = secret.random_rotor_index()
        secret.set_rotor_index(selector)
        output.append(selector)
        return output
