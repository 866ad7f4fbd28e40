"""Shared fixtures for rotary tests."""

import random

import pytest

from rotary.config import load_settings
from rotary.rotor import Rotor
from rotary.secret import ROTOR_COUNT, Secret

IDENTITY = list(range(256))


def make_secret(
    tables=None,
    distances=(0, 0, 0, 0, 0),
    noisey=(False, False, False, False, False),
    prefix_length=0,
    seed=0,
    name="fixed",
):
    """Secret with hand-picked rotors and a seeded randomness source."""
    rng = random.Random(seed)
    tables = tables or [IDENTITY] * ROTOR_COUNT
    rotors = [
        Rotor.from_table(tables[i], distances[i], noisey[i], rng)
        for i in range(ROTOR_COUNT)
    ]
    return Secret(name, prefix_length, rotors, rng)


@pytest.fixture
def seeded_secret():
    """Five deterministically seeded rotors, no noise prefix."""
    return Secret.create("seeded", prefix_length=0, rng=random.Random(1337))


@pytest.fixture
def prefixed_secret():
    """Seeded secret with a 20-byte noise prefix."""
    return Secret.create("prefixed", prefix_length=20, rng=random.Random(2024))


@pytest.fixture
def clean_settings(monkeypatch):
    """Clear ROTARY_* variables and the settings cache."""
    for name in (
        "ROTARY_PREFIX_LENGTH",
        "ROTARY_MODE",
        "ROTARY_TAGGED",
        "ROTARY_SECRET_PATH",
        "ROTARY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()
