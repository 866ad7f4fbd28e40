"""
Rotary Secret - The shared key material.

A secret is an ordered set of five rotors, the length of the noise prefix
written before every stream, and a pointer to the active rotor. Both the
encoding and the decoding party must hold the same secret.

Example:
    >>> from rotary.secret import Secret
    >>> secret = Secret.create("backup-2026", prefix_length=16)
    >>> secret.save("backup.secret.json")
    >>> restored = Secret.load("backup.secret.json")
    >>> assert restored.same_material(secret)
"""

import logging
import random
import secrets
from typing import List, Optional, Union

from pydantic import ValidationError

from rotary.errors import SerializationFormatError
from rotary.records import RotorRecord, SecretRecord
from rotary.rotor import TABLE_SIZE, Rotor

logger = logging.getLogger(__name__)

ROTOR_COUNT = 5


class Secret:
    """
    Five rotors plus noise-prefix configuration.

    The rotor pointer and each rotor's offset are transient state. They are
    reset before every encode/decode run and never persisted.
    """

    def __init__(
        self,
        name: str,
        prefix_length: int,
        rotors: List[Rotor],
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize from existing rotors.

        Args:
            name: Label for this secret
            prefix_length: Noise bytes written before each stream
            rotors: Exactly five rotors
            rng: Randomness source for selector draws

        Raises:
            ValueError: If prefix_length is negative or rotor count is not 5
        """
        if prefix_length < 0:
            raise ValueError(f"Prefix length must be non-negative, got {prefix_length}")
        if len(rotors) != ROTOR_COUNT:
            raise ValueError(f"Secret needs exactly {ROTOR_COUNT} rotors, got {len(rotors)}")

        self.name = name
        self.prefix_length = prefix_length
        self.rotors = tuple(rotors)
        self.rotor_index = 0
        self._rng = rng or secrets.SystemRandom()

    @classmethod
    def create(
        cls,
        name: str = "",
        prefix_length: int = 0,
        rng: Optional[random.Random] = None,
    ) -> "Secret":
        """
        Create a secret with five fresh rotors.

        Args:
            name: Label for this secret
            prefix_length: Noise bytes written before each stream
            rng: Randomness source (default: system CSPRNG)

        Returns:
            New Secret with rotor_index 0
        """
        rng = rng or secrets.SystemRandom()
        rotors = [Rotor.create(rng) for _ in range(ROTOR_COUNT)]
        logger.debug("Created secret %r with prefix length %d", name, prefix_length)
        return cls(name, prefix_length, rotors, rng)

    def reset(self) -> None:
        """Point at the first rotor and zero every rotor offset."""
        self.rotor_index = 0
        for rotor in self.rotors:
            rotor.reset()

    def rotate(self) -> None:
        """Advance to the next rotor, wrapping after the last."""
        self.rotor_index = (self.rotor_index + 1) % ROTOR_COUNT

    def set_rotor_index(self, index: int) -> None:
        self.rotor_index = index % ROTOR_COUNT

    def random_rotor_index(self) -> int:
        """
        Draw a selector byte.

        Returns:
            Uniform value 0-255, reduced by set_rotor_index()
        """
        return self._rng.randrange(TABLE_SIZE)

    def current_rotor(self) -> Rotor:
        return self.rotors[self.rotor_index]

    def current_rotors(self) -> List[Rotor]:
        """All rotors, starting at the active one and wrapping around."""
        return [self.rotors[(self.rotor_index + i) % ROTOR_COUNT] for i in range(ROTOR_COUNT)]

    def current_rotors_reverse(self) -> List[Rotor]:
        """current_rotors() in reverse order, for undoing a cascade."""
        return self.current_rotors()[::-1]

    def copy(self) -> "Secret":
        """
        Deep copy with fresh transient state.

        Rotors are copied individually and their offsets zeroed, and the
        rotor pointer starts at 0, so every consumer of a copy begins from
        the same state.

        Returns:
            Independent Secret with identical key material
        """
        rotors = []
        for rotor in self.rotors:
            rotor_copy = rotor.copy()
            rotor_copy.reset()
            rotors.append(rotor_copy)
        return Secret(self.name, self.prefix_length, rotors, self._rng)

    def same_material(self, other: "Secret") -> bool:
        """Compare key material, ignoring rotor pointer and offsets."""
        return (
            self.name == other.name
            and self.prefix_length == other.prefix_length
            and all(a.same_material(b) for a, b in zip(self.rotors, other.rotors))
        )

    def to_record(self) -> SecretRecord:
        """Build the persisted record for this secret."""
        return SecretRecord(
            name=self.name,
            prefix_length=self.prefix_length,
            rotors=[
                RotorRecord(
                    encodes=rotor.encodes,
                    rotation_distance=rotor.rotation_distance,
                    noisey=rotor.noisey,
                )
                for rotor in self.rotors
            ],
        )

    @classmethod
    def from_record(
        cls, record: SecretRecord, rng: Optional[random.Random] = None
    ) -> "Secret":
        """Rebuild a secret from a validated record."""
        rng = rng or secrets.SystemRandom()
        rotors = [
            Rotor.from_table(r.encodes, r.rotation_distance, r.noisey, rng)
            for r in record.rotors
        ]
        return cls(record.name, record.prefix_length, rotors, rng)

    def marshal(self) -> str:
        """
        Serialize key material to JSON.

        Returns:
            JSON text; rotor pointer and offsets are not included
        """
        return self.to_record().model_dump_json()

    @classmethod
    def unmarshal(
        cls,
        marshalled: Union[str, bytes],
        rng: Optional[random.Random] = None,
    ) -> "Secret":
        """
        Restore a secret from marshal() output.

        Args:
            marshalled: JSON text
            rng: Randomness source for the restored secret

        Returns:
            Secret with rotor_index 0 and all offsets 0

        Raises:
            SerializationFormatError: If the record is malformed
        """
        try:
            record = SecretRecord.model_validate_json(marshalled)
        except ValidationError as e:
            raise SerializationFormatError(
                f"Invalid secret record: {e.error_count()} error(s)"
            ) from e

        secret = cls.from_record(record, rng)
        logger.debug("Restored secret %r with prefix length %d", secret.name, secret.prefix_length)
        return secret

    def save(self, path: str) -> None:
        """
        Write the marshalled secret to a file.

        Args:
            path: Destination path
        """
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_record().model_dump_json(indent=2))
        logger.debug("Saved secret %r to %s", self.name, path)

    @classmethod
    def load(cls, path: str, rng: Optional[random.Random] = None) -> "Secret":
        """
        Read a secret written by save().

        Args:
            path: Source path
            rng: Randomness source for the restored secret

        Returns:
            Restored Secret

        Raises:
            SerializationFormatError: If the file content is malformed
            OSError: If the file cannot be read
        """
        with open(path, "rb") as f:
            return cls.unmarshal(f.read(), rng)

    def __repr__(self) -> str:
        return (
            f"Secret(name={self.name!r}, prefix_length={self.prefix_length}, "
            f"rotor_index={self.rotor_index})"
        )
