"""
Rotary - Rotor byte substitution engine

Transforms byte strings with five keyed, rotating substitution tables in
the manner of historical rotor cipher machines. Both parties hold the same
secret; there is no key exchange.

Usage:
    from rotary import Engine, Secret, Mode

    secret = Secret.create("notes", prefix_length=16)
    engine = Engine(secret, mode=Mode.DEEP)
    encoded = engine.encode(b"hello world!")
    decoded = engine.decode(encoded)

    # Persist and restore the secret
    text = secret.marshal()
    restored = Secret.unmarshal(text)

Security:
    Obfuscation only. No security proof, no integrity or authenticity
    check. Decoding with the wrong secret returns garbage, not an error.
"""

__version__ = "0.1.0"
__license__ = "CC0-1.0"

from rotary.rotor import Rotor
from rotary.secret import Secret, ROTOR_COUNT
from rotary.framing import Mode
from rotary.encoder import Encoder
from rotary.decoder import Decoder
from rotary.engine import Engine, quick_encode, quick_decode
from rotary.errors import (
    RotaryError,
    SerializationFormatError,
    StreamTruncatedError,
    StreamTruncatedOnNoise,
    FrameFormatError,
    EngineReleasedError,
)

__all__ = [
    # Parts
    "Rotor",
    "Secret",
    "ROTOR_COUNT",
    # Engine
    "Mode",
    "Encoder",
    "Decoder",
    "Engine",
    "quick_encode",
    "quick_decode",
    # Errors
    "RotaryError",
    "SerializationFormatError",
    "StreamTruncatedError",
    "StreamTruncatedOnNoise",
    "FrameFormatError",
    "EngineReleasedError",
]
