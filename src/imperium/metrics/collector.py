"""
Metrics Collector — per-step population statistics.

Turns the simulator's ``StepSnapshot``s into ``StepMetrics`` records with
fractions, empire counts and dominance, and provides time series
extraction and export for plotting.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from imperium.core.engine import StepSnapshot
from imperium.core.factions import EMPIRES, Faction
from imperium.sinks import ViewerSink


@dataclass
class StepMetrics:
    """Extended metrics for a single step."""

    step: int
    clock: str
    weather: str

    # Population
    population_size: int
    counts: dict[str, int]
    fractions: dict[str, float]
    empires_alive: int
    dominant: str
    viable: bool

    # Spatial
    occupied_fraction: float

    # Events
    births: int = 0
    recruits: int = 0
    kills: int = 0
    deaths: int = 0
    repopulated: int = 0


class MetricsCollector:
    """
    Collects and aggregates metrics across steps.

    Feed it every snapshot a run produces (``collect``) or attach it to
    a simulator as a viewer via ``as_viewer()``.
    """

    def __init__(self) -> None:
        self.metrics_history: list[StepMetrics] = []

    def collect(self, snapshot: StepSnapshot) -> StepMetrics:
        """Collect metrics for one step and append them to the history."""
        counts = dict(snapshot.stats)
        total = sum(counts.values())
        denom = max(total, 1)
        fractions = {name: count / denom for name, count in counts.items()}

        empire_counts = {f.value: counts.get(f.value, 0) for f in EMPIRES}
        empires_alive = sum(1 for c in empire_counts.values() if c > 0)

        occupancy = snapshot.occupancy
        occupied = float(np.count_nonzero(occupancy >= 0)) / max(occupancy.size, 1)

        events = snapshot.events
        deaths = sum(
            events.get(k, 0)
            for k in ("deaths_age", "deaths_starvation", "deaths_overcrowding")
        )

        metrics = StepMetrics(
            step=snapshot.step,
            clock=str(snapshot.clock),
            weather=snapshot.weather.name,
            population_size=total,
            counts=counts,
            fractions=fractions,
            empires_alive=empires_alive,
            dominant=snapshot.dominant,
            viable=snapshot.viable,
            occupied_fraction=occupied,
            births=events.get("births", 0),
            recruits=events.get("recruits", 0),
            kills=events.get("kills", 0),
            deaths=deaths,
            repopulated=events.get("repopulated", 0),
        )
        self.metrics_history.append(metrics)
        return metrics

    def as_viewer(self) -> _CollectingViewer:
        return _CollectingViewer(self)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def time_series(self, name: str) -> np.ndarray:
        """Per-step live count of a faction, or of any numeric metric field."""
        if any(name == f.value for f in Faction):
            return np.array([m.counts.get(name, 0) for m in self.metrics_history])
        return np.array([getattr(m, name) for m in self.metrics_history])

    def extinctions(self) -> dict[str, int]:
        """Step at which each empire was first seen at zero after being alive."""
        result: dict[str, int] = {}
        seen_alive: set[str] = set()
        for m in self.metrics_history:
            for empire in EMPIRES:
                name = empire.value
                count = m.counts.get(name, 0)
                if count > 0:
                    seen_alive.add(name)
                elif name in seen_alive and name not in result:
                    result[name] = m.step
        return result

    def peak(self, name: str) -> tuple[int, int]:
        """``(step, count)`` at which a faction's population peaked."""
        series = self.time_series(name)
        if series.size == 0:
            return (0, 0)
        idx = int(np.argmax(series))
        return (self.metrics_history[idx].step, int(series[idx]))

    def to_records(self) -> list[dict[str, Any]]:
        """Flat dicts suitable for CSV/JSON export."""
        records: list[dict[str, Any]] = []
        for m in self.metrics_history:
            row = asdict(m)
            counts = row.pop("counts")
            row.pop("fractions")
            for name, count in counts.items():
                row[f"count_{name}"] = count
            records.append(row)
        return records


class _CollectingViewer(ViewerSink):
    """Adapter that lets a collector sit in a simulator's viewer list."""

    def __init__(self, collector: MetricsCollector) -> None:
        self.collector = collector

    def show_status(self, snapshot: StepSnapshot) -> None:
        self.collector.collect(snapshot)
