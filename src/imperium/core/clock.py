"""
24-hour wall clock shared by every inhabitant.

Advanced once per step by a fixed number of minutes; factions consult
the hour to decide whether they are awake.
"""

from __future__ import annotations

from dataclasses import dataclass

MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24


@dataclass
class Clock:
    """Hour and minute of the simulated day."""

    hour: int = 10
    minute: int = 30
    minutes_per_step: int = 5

    def advance(self) -> None:
        """Move forward one step, carrying minutes into the hour mod 24."""
        total = self.minute + self.minutes_per_step
        self.hour = (self.hour + total // MINUTES_PER_HOUR) % HOURS_PER_DAY
        self.minute = total % MINUTES_PER_HOUR

    def in_window(self, windows: tuple[tuple[int, int], ...]) -> bool:
        """True if the current hour falls in any half-open [start, end) window."""
        return any(start <= self.hour < end for start, end in windows)

    def copy(self) -> Clock:
        return Clock(self.hour, self.minute, self.minutes_per_step)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"
