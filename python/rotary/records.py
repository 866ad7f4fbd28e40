"""
Rotary Records - Persisted form of a secret.

Only the key material is stored: the encode table, rotation distance and
noise flag of each rotor, plus the prefix length and name. Inverse tables
are derived on load and rotation state always restarts at zero.

Record layout (JSON):
    {
      "name": "...",
      "prefix_length": 16,
      "rotors": [
        {"encodes": [...256 ints...], "rotation_distance": 7, "noisey": true},
        ... exactly 5 entries ...
      ]
    }
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

# Rotor count is fixed by the record format
RECORD_ROTORS = 5


class RotorRecord(BaseModel):
    """Persisted rotor key material"""

    encodes: List[int] = Field(..., min_length=256, max_length=256)
    rotation_distance: int = Field(..., ge=0, le=255)
    noisey: bool

    @field_validator("encodes")
    @classmethod
    def _check_permutation(cls, value: List[int]) -> List[int]:
        if sorted(value) != list(range(256)):
            raise ValueError("encodes must be a permutation of 0..255")
        return value


class SecretRecord(BaseModel):
    """Persisted secret key material"""

    name: str
    prefix_length: int = Field(..., ge=0)
    rotors: List[RotorRecord] = Field(..., min_length=RECORD_ROTORS, max_length=RECORD_ROTORS)
