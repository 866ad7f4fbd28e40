"""Tests for Rotary engine and framing."""

import os
import random

import pytest
from rotary import (
    Engine,
    EngineReleasedError,
    FrameFormatError,
    Mode,
    Secret,
    quick_decode,
    quick_encode,
)
from rotary.framing import FORMAT_VERSION, HEADER_SIZE, pack_header, unpack_header


class TestEngine:
    """Test Engine class."""

    @pytest.mark.parametrize("mode", [Mode.SHALLOW, Mode.DEEP])
    def test_encode_decode(self, seeded_secret, mode):
        """Basic encode/decode cycle."""
        engine = Engine(seeded_secret, mode)
        encoded = engine.encode(b"hello world!")
        assert engine.decode(encoded) == b"hello world!"

    def test_construct(self, seeded_secret):
        """construct() builds an engine."""
        engine = Engine.construct(seeded_secret, Mode.SHALLOW)
        assert engine.mode is Mode.SHALLOW
        assert engine.decode(engine.encode(b"x")) == b"x"

    def test_default_mode_is_deep(self, seeded_secret):
        """Cascade mode is the default."""
        assert Engine(seeded_secret).mode is Mode.DEEP

    def test_empty(self, prefixed_secret):
        """Empty plaintext works."""
        engine = Engine(prefixed_secret)
        assert engine.decode(engine.encode(b"")) == b""

    def test_large(self):
        """Large input works."""
        engine = Engine(Secret.create("big", 32))
        data = os.urandom(256 * 1024)
        assert engine.decode(engine.encode(data)) == data

    def test_encoding_obfuscates(self, seeded_secret):
        """Encoded payload differs from the input."""
        engine = Engine(seeded_secret)
        encoded = engine.encode(b"hello world!")
        assert b"hello world!" not in encoded

    def test_interleaved_calls(self, seeded_secret):
        """Encoding and decoding state do not interfere."""
        engine = Engine(seeded_secret)
        first = engine.encode(b"first message")
        second = engine.encode(b"second message")
        assert engine.decode(second) == b"second message"
        assert engine.decode(first) == b"first message"

    def test_engines_from_same_secret(self, seeded_secret):
        """Two engines built from one secret interoperate."""
        sender = Engine(seeded_secret)
        receiver = Engine(seeded_secret)
        assert receiver.decode(sender.encode(b"across")) == b"across"

    def test_source_secret_untouched(self, seeded_secret):
        """Engine never mutates the caller's secret."""
        engine = Engine(seeded_secret)
        engine.decode(engine.encode(b"some bytes"))
        assert seeded_secret.rotor_index == 0
        assert all(r.rotation_offset == 0 for r in seeded_secret.rotors)

    def test_wrong_secret_garbage(self, seeded_secret):
        """Different secret does not recover the plaintext."""
        stranger = Secret.create("stranger", 0, rng=random.Random(77))
        for mine, theirs in zip(seeded_secret.rotors, stranger.rotors):
            theirs.noisey = mine.noisey
        encoded = Engine(seeded_secret).encode(b"hello world!")
        decoded = Engine(stranger).decode(encoded)
        assert len(decoded) == 12
        assert decoded != b"hello world!"


class TestEngineRelease:
    """Test release()."""

    def test_encode_after_release(self, seeded_secret):
        """encode() after release() raises."""
        engine = Engine(seeded_secret)
        engine.release()
        assert engine.released
        with pytest.raises(EngineReleasedError):
            engine.encode(b"data")

    def test_decode_after_release(self, seeded_secret):
        """decode() after release() raises."""
        engine = Engine(seeded_secret)
        encoded = engine.encode(b"data")
        engine.release()
        with pytest.raises(EngineReleasedError):
            engine.decode(encoded)

    def test_release_idempotent(self, seeded_secret):
        """Releasing twice is harmless."""
        engine = Engine(seeded_secret)
        engine.release()
        engine.release()
        assert engine.released

    def test_context_manager(self, seeded_secret):
        """Leaving a with block releases the engine."""
        with Engine(seeded_secret) as engine:
            encoded = engine.encode(b"scoped")
            assert engine.decode(encoded) == b"scoped"
        assert engine.released


class TestTaggedFrames:
    """Test version/mode header."""

    @pytest.mark.parametrize("mode", [Mode.SHALLOW, Mode.DEEP])
    def test_round_trip(self, seeded_secret, mode):
        """Tagged frames round-trip."""
        engine = Engine(seeded_secret, mode, tagged=True)
        frame = engine.encode(b"tagged")
        assert frame[:HEADER_SIZE] == bytes([FORMAT_VERSION, mode.value])
        assert engine.decode(frame) == b"tagged"

    def test_header_selects_mode(self, seeded_secret):
        """Decoder follows the frame's mode, not its own."""
        sender = Engine(seeded_secret, Mode.SHALLOW, tagged=True)
        receiver = Engine(seeded_secret, Mode.DEEP, tagged=True)
        assert receiver.decode(sender.encode(b"shallow frame")) == b"shallow frame"

    def test_untagged_has_no_header(self, seeded_secret):
        """Raw streams are prefix + selector + payload."""
        engine = Engine(seeded_secret)
        # Five bytes visit each rotor once
        noisey = sum(r.noisey for r in seeded_secret.rotors)
        encoded = engine.encode(b"abcde")
        assert len(encoded) == 1 + 5 + noisey

    def test_unknown_version(self, seeded_secret):
        """Unknown version byte is rejected."""
        engine = Engine(seeded_secret, tagged=True)
        frame = engine.encode(b"data")
        with pytest.raises(FrameFormatError, match="version"):
            engine.decode(bytes([99]) + frame[1:])

    def test_unknown_mode(self, seeded_secret):
        """Unknown mode byte is rejected."""
        engine = Engine(seeded_secret, tagged=True)
        frame = engine.encode(b"data")
        with pytest.raises(FrameFormatError, match="mode"):
            engine.decode(frame[:1] + bytes([7]) + frame[2:])

    def test_short_frame(self, seeded_secret):
        """Frame shorter than the header is rejected."""
        engine = Engine(seeded_secret, tagged=True)
        with pytest.raises(FrameFormatError):
            engine.decode(b"\x01")

    def test_unpack_header(self):
        """unpack_header splits mode and stream."""
        mode, stream = unpack_header(pack_header(Mode.DEEP) + b"rest")
        assert mode is Mode.DEEP
        assert stream == b"rest"


class TestMode:
    """Test Mode parsing."""

    def test_parse_names(self):
        """Names parse case-insensitively."""
        assert Mode.parse("deep") is Mode.DEEP
        assert Mode.parse("SHALLOW") is Mode.SHALLOW
        assert Mode.parse(Mode.DEEP) is Mode.DEEP

    def test_parse_unknown(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            Mode.parse("sideways")


class TestQuickFunctions:
    """Test one-shot helpers."""

    @pytest.mark.parametrize("mode", [Mode.SHALLOW, Mode.DEEP])
    def test_quick_round_trip(self, prefixed_secret, mode):
        """quick_encode/quick_decode round-trip."""
        encoded = quick_encode(prefixed_secret, b"quick", mode)
        assert quick_decode(prefixed_secret, encoded, mode) == b"quick"


class TestEngineOwnership:
    """Engine works from its own copies of the secret."""

    def test_source_change_after_construct(self, seeded_secret):
        """Changing the caller's secret does not affect either mode's decoding."""
        receiver = Engine(seeded_secret, Mode.DEEP, tagged=True)
        sender = Engine(seeded_secret.copy(), Mode.SHALLOW, tagged=True)
        frame = sender.encode(b"hello world!")

        seeded_secret.prefix_length = 3
        seeded_secret.rotors[0].encodes.reverse()

        assert receiver.decode(frame) == b"hello world!"
        assert receiver.decode(receiver.encode(b"own mode")) == b"own mode"


class TestModeNames:
    """Modes may be given by name."""

    @pytest.mark.parametrize("name, mode", [("deep", Mode.DEEP), ("SHALLOW", Mode.SHALLOW)])
    def test_string_mode(self, seeded_secret, name, mode):
        """Mode names behave like Mode members."""
        engine = Engine(seeded_secret, name, tagged=True)
        assert engine.mode is mode
        frame = engine.encode(b"named")
        assert frame[1] == mode.value
        assert Engine(seeded_secret, mode).decode(frame[HEADER_SIZE:]) == b"named"

    def test_invalid_mode(self, seeded_secret):
        """Unknown mode name is rejected."""
        with pytest.raises(ValueError, match="Unknown mode"):
            Engine(seeded_secret, "sideways")
