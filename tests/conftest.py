"""Shared test configuration."""

import pytest

from imperium.core.randomizer import Randomizer


@pytest.fixture
def rng():
    return Randomizer(42)
