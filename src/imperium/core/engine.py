"""
Main simulation engine.

Advances the field one step at a time:

1. Weather change every ``weather_change_interval`` steps
2. Per-inhabitant ticks from the current field into an empty next field
   (in snow, each inhabitant may instead be frozen in place)
3. End-of-step purge of the dead
4. Civilian repopulation when no civilian survived the step
5. Swap fields, build a snapshot, notify viewers and soundtracks
6. Advance the clock

The run ends once fewer than two empires remain (or a step budget runs out).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable

import numpy as np

from imperium.core.clock import Clock
from imperium.core.config import DEFAULT_DEPTH, DEFAULT_WIDTH, SimulationConfig
from imperium.core.factions import WIN_TOKEN, Faction
from imperium.core.field import Field
from imperium.core.location import Location
from imperium.core.person import Person
from imperium.core.policies import StepContext, StepEvents, tick
from imperium.core.randomizer import Randomizer
from imperium.core.weather import Weather, WeatherCondition
from imperium.sinks import SoundtrackSink, ViewerSink

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Step snapshot
# ---------------------------------------------------------------------------
@dataclass
class StepSnapshot:
    """Read-only view of the field after a step."""
    step: int
    weather: WeatherCondition
    clock: Clock
    stats: dict[str, int]
    occupancy: np.ndarray
    viable: bool
    soundtrack: str
    events: dict[str, Any] = field(default_factory=dict)
    dominant: str = ""

    @property
    def population_size(self) -> int:
        return sum(self.stats.values())


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------
class Simulator:
    """
    Double-buffered step engine.

    Each step reads the current field and writes a fresh next field; the
    next field replaces the current one once every inhabitant has ticked.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        viewers: Iterable[ViewerSink] = (),
        soundtracks: Iterable[SoundtrackSink] = (),
    ):
        self.config = (config or SimulationConfig()).validated()
        self.profiles = self.config.profiles()
        self.rng = Randomizer(self.config.random_seed)
        self.viewers: list[ViewerSink] = list(viewers)
        self.soundtracks: list[SoundtrackSink] = list(soundtracks)

        self.clock = self._new_clock()
        self.weather = Weather()
        self.field = Field(self.config.depth, self.config.width, self.rng)
        self.step_count = 0
        self.last_events = StepEvents()
        self.reset()

    @classmethod
    def from_dimensions(
        cls,
        depth: int = DEFAULT_DEPTH,
        width: int = DEFAULT_WIDTH,
        seed: int | None = None,
        **kwargs: Any,
    ) -> Simulator:
        """Build a simulator with default constants and the given size."""
        return cls(SimulationConfig(depth=depth, width=width, random_seed=seed), **kwargs)

    @property
    def depth(self) -> int:
        return self.field.depth

    @property
    def width(self) -> int:
        return self.field.width

    # ------------------------------------------------------------------
    # Driver API
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Rewind the randomizer, clock and weather and repopulate the field."""
        self.rng.reset()
        self.step_count = 0
        self.clock = self._new_clock()
        self.weather = Weather()
        self.last_events = StepEvents()
        self._populate()
        self._emit()

    def run(self, steps: int | None = None) -> list[StepSnapshot]:
        """Step up to *steps* times (default ``max_steps``), stopping once not viable."""
        steps = steps if steps is not None else self.config.max_steps
        snapshots: list[StepSnapshot] = []
        for _ in range(steps):
            if not self.field.viable():
                break
            snapshots.append(self.step())
            if self.config.step_delay_ms > 0:
                time.sleep(self.config.step_delay_ms / 1000.0)
        if not self.field.viable():
            winner = self.field.dominant_faction()
            logger.info(
                "Simulation ended at step %d; winner: %s",
                self.step_count, winner.value if winner else "none",
            )
        return snapshots

    def step(self) -> StepSnapshot:
        """Advance the simulation by one step."""
        self.step_count += 1
        if self.step_count % self.config.weather_change_interval == 0:
            self.weather.change(self.rng)
            logger.debug("Step %d: weather is now %s", self.step_count, self.weather.condition.name)

        current = self.field
        next_field = Field(current.depth, current.width, self.rng)
        events = StepEvents()
        ctx = StepContext(self.clock, self.weather, self.rng, events)
        snowy = self.weather.condition is WeatherCondition.SNOWY

        for person in list(current.people):
            if snowy and self.rng.uniform() > self.config.snow_move_probability:
                if person.alive:
                    next_field.place(person, person.location)
                    events.frozen += 1
                continue
            tick(person, ctx, current, next_field)

        next_field.purge_dead()
        if not current.has_civilian():
            events.repopulated = next_field.repopulate_civilians(
                self.rng,
                self.config.civilian_repopulation_probability,
                self.profiles[Faction.CIVILIAN],
            )

        self.field = next_field
        self.last_events = events
        snapshot = self._emit()
        self.clock.advance()
        return snapshot

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_viable(self) -> bool:
        return self.field.viable()

    def stats(self) -> dict[str, int]:
        return self.field.stats()

    def soundtrack_token(self) -> str:
        """Largest live empire's name, ``"Win"`` once not viable."""
        if not self.field.viable():
            return WIN_TOKEN
        dominant = self.field.dominant_faction()
        return dominant.value if dominant else ""

    def winner(self) -> Faction | None:
        """The surviving empire once the run is over, else None."""
        if self.field.viable():
            return None
        return self.field.dominant_faction()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _new_clock(self) -> Clock:
        return Clock(
            hour=self.config.start_hour,
            minute=self.config.start_minute,
            minutes_per_step=self.config.minutes_per_step,
        )

    def _populate(self) -> None:
        """Fill each cell with at most one random-age inhabitant."""
        self.field = Field(self.config.depth, self.config.width, self.rng)
        order = self.config.creation_order()
        for row in range(self.field.depth):
            for col in range(self.field.width):
                for faction, probability in order:
                    if self.rng.chance(probability):
                        loc = Location(row, col)
                        person = Person.spawn(
                            self.profiles[faction], loc, self.rng, random_age=True,
                        )
                        self.field.place(person, loc)
                        break

    def _emit(self) -> StepSnapshot:
        stats = self.field.stats()
        token = self.soundtrack_token()
        dominant = self.field.dominant_faction()
        snapshot = StepSnapshot(
            step=self.step_count,
            weather=self.weather.condition,
            clock=self.clock.copy(),
            stats=stats,
            occupancy=self.field.occupancy(),
            viable=self.field.viable(),
            soundtrack=token,
            events=self.last_events.to_dict(),
            dominant=dominant.value if dominant else "",
        )
        logger.debug("Step %d %s: %s", self.step_count, self.clock, stats)

        for viewer in self.viewers:
            try:
                viewer.show_status(snapshot)
            except Exception:
                logger.warning("Viewer %r failed at step %d", viewer, self.step_count, exc_info=True)
        for soundtrack in self.soundtracks:
            try:
                soundtrack.update_music(token)
            except Exception:
                logger.warning(
                    "Soundtrack %r failed at step %d", soundtrack, self.step_count, exc_info=True,
                )
        return snapshot
