"""
Rotary Rotor - Keyed rotating byte substitution table.

A rotor holds a random permutation of the 256 byte values and its inverse.
Rotation is simulated with an offset that is added to every encoding and
advanced by a fixed distance on each rotate().

Example:
    >>> from rotary.rotor import Rotor
    >>> rotor = Rotor.create()
    >>> encoded = rotor.encode(ord("a"))
    >>> assert rotor.decode(encoded) == ord("a")
"""

import random
import secrets
from typing import List, Optional, Sequence

# Number of byte values a rotor maps
TABLE_SIZE = 256

# Full passes of random pairwise swaps over the identity table
SHUFFLE_PASSES = 5


def _shuffled_table(rng: random.Random) -> List[int]:
    """Build a permutation of 0..255 by repeated random transpositions."""
    table = list(range(TABLE_SIZE))
    for _ in range(SHUFFLE_PASSES):
        for i in range(TABLE_SIZE):
            j = rng.randrange(TABLE_SIZE)
            table[i], table[j] = table[j], table[i]
    return table


def _inverse_table(encodes: Sequence[int]) -> List[int]:
    """Invert a permutation table."""
    decodes = [0] * TABLE_SIZE
    for raw, encoded in enumerate(encodes):
        decodes[encoded] = raw
    return decodes


class Rotor:
    """
    One rotating substitution disc.

    Attributes:
        encodes: encodes[b] is the rotor's encoding of byte b
        decodes: decodes[c] is the byte whose encoding is c
        rotation_offset: Added to every encoding, advanced by rotate()
        rotation_distance: Fixed step applied to the offset on rotate()
        noisey: Whether a noise byte precedes each byte this rotor encodes
    """

    def __init__(
        self,
        encodes: Sequence[int],
        rotation_distance: int,
        noisey: bool,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize a rotor from an existing table.

        Prefer Rotor.create() for fresh key material and Rotor.from_table()
        for restored material.

        Args:
            encodes: Permutation of 0..255
            rotation_distance: Rotation step (0-255)
            noisey: Noise flag
            rng: Randomness source for noise bytes
        """
        self.encodes = list(encodes)
        self.decodes = _inverse_table(self.encodes)
        self.rotation_offset = 0
        self.rotation_distance = rotation_distance
        self.noisey = noisey
        self._rng = rng or secrets.SystemRandom()

    @classmethod
    def create(cls, rng: Optional[random.Random] = None) -> "Rotor":
        """
        Create a rotor with fresh random key material.

        Args:
            rng: Randomness source (default: system CSPRNG)

        Returns:
            Rotor with random table, distance and noise flag, offset 0
        """
        rng = rng or secrets.SystemRandom()
        noisey = bool(rng.getrandbits(1))
        rotation_distance = rng.randrange(TABLE_SIZE)
        return cls(_shuffled_table(rng), rotation_distance, noisey, rng)

    @classmethod
    def from_table(
        cls,
        encodes: Sequence[int],
        rotation_distance: int,
        noisey: bool,
        rng: Optional[random.Random] = None,
    ) -> "Rotor":
        """
        Restore a rotor from persisted key material.

        Args:
            encodes: Permutation of 0..255
            rotation_distance: Rotation step (0-255)
            noisey: Noise flag
            rng: Randomness source for noise bytes

        Returns:
            Rotor with offset 0

        Raises:
            ValueError: If encodes is not a permutation or distance is out of range
        """
        if len(encodes) != TABLE_SIZE or sorted(encodes) != list(range(TABLE_SIZE)):
            raise ValueError("Rotor table must be a permutation of 0..255")
        if not 0 <= rotation_distance < TABLE_SIZE:
            raise ValueError(f"Rotation distance must be 0-255, got {rotation_distance}")
        return cls(encodes, rotation_distance, bool(noisey), rng)

    def encode(self, byte: int) -> int:
        """Encode one byte at the current offset."""
        return (self.encodes[byte] + self.rotation_offset) % TABLE_SIZE

    def decode(self, encoded: int) -> int:
        """Decode one byte at the current offset."""
        return self.decodes[(encoded - self.rotation_offset) % TABLE_SIZE]

    def rotate(self) -> None:
        """Advance the offset by the rotation distance."""
        self.rotation_offset = (self.rotation_offset + self.rotation_distance) % TABLE_SIZE

    def reset(self) -> None:
        """Return the offset to 0."""
        self.rotation_offset = 0

    def noise(self) -> int:
        """Random filler byte, unrelated to the tables."""
        return self._rng.randrange(TABLE_SIZE)

    def is_noisey(self) -> bool:
        return self.noisey

    def copy(self) -> "Rotor":
        """
        Deep copy of this rotor.

        The copy keeps the source's current offset so a rotor can be
        duplicated mid-stream. Secret.copy() resets offsets itself.

        Returns:
            Independent Rotor with identical tables, distance, flag and offset
        """
        rotor = Rotor(self.encodes, self.rotation_distance, self.noisey, self._rng)
        rotor.rotation_offset = self.rotation_offset
        return rotor

    def same_material(self, other: "Rotor") -> bool:
        """Compare key material, ignoring the rotation offset."""
        return (
            self.encodes == other.encodes
            and self.rotation_distance == other.rotation_distance
            and self.noisey == other.noisey
        )

    def __repr__(self) -> str:
        return (
            f"Rotor(rotation_distance={self.rotation_distance}, "
            f"noisey={self.noisey}, rotation_offset={self.rotation_offset})"
        )
