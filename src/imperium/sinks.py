"""
Observation sinks fed by the simulator once per step.

The simulator treats sinks as infallible: any exception a sink raises is
logged and discarded at the engine boundary. Sinks receive read-only
snapshots and cannot influence the field.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING

from imperium.core.factions import EMPIRES, WIN_TOKEN

if TYPE_CHECKING:
    from imperium.core.engine import StepSnapshot

logger = logging.getLogger(__name__)


class ViewerSink(ABC):
    """Consumes per-step ``StepSnapshot``s."""

    @abstractmethod
    def show_status(self, snapshot: StepSnapshot) -> None:
        """Called after every step (and once after a reset)."""


class SoundtrackSink(ABC):
    """Consumes the dominant-faction token each step."""

    @abstractmethod
    def update_music(self, token: str) -> None:
        """*token* is an empire name, ``"Win"``, or ``""`` when no empire is alive."""


class RecordingViewer(ViewerSink):
    """Keeps the most recent snapshots in memory."""

    def __init__(self, maxlen: int | None = None) -> None:
        self.snapshots: deque[StepSnapshot] = deque(maxlen=maxlen)

    def show_status(self, snapshot: StepSnapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def last(self) -> StepSnapshot | None:
        return self.snapshots[-1] if self.snapshots else None


class ConsoleViewer(ViewerSink):
    """Reports clock, weather and population counts through a logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def show_status(self, snapshot: StepSnapshot) -> None:
        counts = " ".join(
            f"{name}: {count}" for name, count in snapshot.stats.items()
        )
        self.log.info(
            "Step %d %s %s | %s",
            snapshot.step, snapshot.clock, snapshot.weather.name, counts,
        )


DEFAULT_TRACKS: dict[str, str] = {
    **{empire.value: f"{empire.value}Music.wav" for empire in EMPIRES},
    WIN_TOKEN: "WinMusic.wav",
}


class SoundtrackSelector(SoundtrackSink):
    """Chooses a track per dominant faction, ignoring repeat requests.

    No audio is played; ``current_track`` and ``history`` record what a
    player would have been asked to play.
    """

    def __init__(self, tracks: dict[str, str] | None = None) -> None:
        self.tracks = dict(tracks or DEFAULT_TRACKS)
        self.current_track = ""
        self.history: list[str] = []

    def update_music(self, token: str) -> None:
        track = self.tracks.get(token)
        if track is None:
            if token:
                logger.warning("No track for %r", token)
            return
        if track == self.current_track:
            return
        self.current_track = track
        self.history.append(track)
        logger.debug("Soundtrack switched to %s", track)
