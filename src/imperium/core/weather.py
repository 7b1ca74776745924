"""
Weather model.

A single global condition, re-drawn uniformly at a fixed step interval.
Snow freezes roughly half the population in place, rain lets the British
march twice, and sun extends the Spanish attack radius.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from imperium.core.randomizer import Randomizer


class WeatherCondition(str, Enum):
    """Possible weather conditions, in draw order."""
    SUNNY = "sunny"
    RAINY = "rainy"
    FOGGY = "foggy"
    SNOWY = "snowy"
    MODERATE = "moderate"


_CONDITIONS = list(WeatherCondition)


class Weather:
    """Holds the current condition and re-draws it on request."""

    def __init__(self, condition: WeatherCondition = WeatherCondition.MODERATE) -> None:
        self.condition = condition

    def change(self, rng: Randomizer) -> WeatherCondition:
        """Pick a new condition uniformly at random (it may repeat)."""
        self.condition = _CONDITIONS[rng.int_in(0, len(_CONDITIONS))]
        return self.condition

    def is_condition(self, condition: WeatherCondition) -> bool:
        return self.condition is condition

    def __repr__(self) -> str:
        return f"Weather({self.condition.value})"

    def __str__(self) -> str:
        return f"Current weather: {self.condition.name}"
