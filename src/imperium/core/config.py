"""
Master configuration for the Imperium Sandbox.

ALL tunable parameters live here. Faction constants default to the
built-in table in ``imperium.core.factions`` and can be overridden per
faction through ``faction_overrides``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any

from imperium.core.factions import (
    Faction,
    FactionProfile,
    build_profiles,
)

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 80
DEFAULT_WIDTH = 120


@dataclass
class SimulationConfig:
    """
    Master configuration — every rate and threshold is a tunable.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int | None = None

    # === Field ===
    depth: int = DEFAULT_DEPTH
    width: int = DEFAULT_WIDTH

    # === Run length / pacing ===
    max_steps: int = 2000
    step_delay_ms: int = 0

    # === Initial population ===
    # Per-cell densities, drawn in this order; first success wins.
    creation_probabilities: dict[str, float] = field(default_factory=lambda: {
        "British": 0.01,
        "Roman": 0.01,
        "Persian": 0.04,
        "Spanish": 0.01,
        "Civilian": 0.10,
        "Amazonian": 0.03,
    })

    # === Environment ===
    snow_move_probability: float = 0.5
    weather_change_interval: int = 15
    civilian_repopulation_probability: float = 0.01
    start_hour: int = 10
    start_minute: int = 30
    minutes_per_step: int = 5

    # === Faction constants ===
    # Faction name -> {profile attribute: value}
    faction_overrides: dict[str, dict[str, Any]] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------
    def profiles(self) -> dict[Faction, FactionProfile]:
        """Effective per-faction constants."""
        return build_profiles(self.faction_overrides)

    def creation_order(self) -> list[tuple[Faction, float]]:
        """Initial-population draws as ``(faction, probability)`` pairs.

        Factions named in ``creation_probabilities`` keep their configured
        order; any faction it omits is never created.
        """
        return [
            (Faction(name), float(p))
            for name, p in self.creation_probabilities.items()
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validated(self) -> SimulationConfig:
        """Return a copy with invalid values replaced by their defaults.

        Each substitution is logged as a warning; this never raises.
        """
        d = self.to_dict()
        defaults = SimulationConfig()

        if d["depth"] <= 0 or d["width"] <= 0:
            logger.warning(
                "Field dimensions must be positive (got %dx%d); using defaults %dx%d",
                d["depth"], d["width"], DEFAULT_DEPTH, DEFAULT_WIDTH,
            )
            d["depth"], d["width"] = DEFAULT_DEPTH, DEFAULT_WIDTH

        for name in (
            "snow_move_probability", "civilian_repopulation_probability",
        ):
            if not 0.0 <= d[name] <= 1.0:
                logger.warning(
                    "%s must lie in [0, 1] (got %r); using default %r",
                    name, d[name], getattr(defaults, name),
                )
                d[name] = getattr(defaults, name)

        probs: dict[str, float] = {}
        for name, p in d["creation_probabilities"].items():
            try:
                Faction(name)
            except ValueError:
                logger.warning("Unknown faction %r in creation_probabilities; ignored", name)
                continue
            if not 0.0 <= p <= 1.0:
                logger.warning(
                    "Creation probability for %s must lie in [0, 1] (got %r); using 0",
                    name, p,
                )
                p = 0.0
            probs[name] = p
        d["creation_probabilities"] = probs

        for name in ("weather_change_interval", "minutes_per_step", "max_steps"):
            if d[name] <= 0:
                logger.warning(
                    "%s must be positive (got %r); using default %r",
                    name, d[name], getattr(defaults, name),
                )
                d[name] = getattr(defaults, name)

        if not 0 <= d["start_hour"] < 24 or not 0 <= d["start_minute"] < 60:
            logger.warning(
                "Invalid start time %r:%r; using %02d:%02d",
                d["start_hour"], d["start_minute"],
                defaults.start_hour, defaults.start_minute,
            )
            d["start_hour"], d["start_minute"] = defaults.start_hour, defaults.start_minute

        overrides: dict[str, dict[str, Any]] = {}
        for name, values in d["faction_overrides"].items():
            try:
                bad = build_profiles({name: values})[Faction(name)].invalid_fields()
            except (ValueError, TypeError):
                logger.warning("Ignoring invalid overrides for faction %r: %r", name, values)
                continue
            if bad:
                logger.warning(
                    "Ignoring overrides for faction %r: %s out of range in %r",
                    name, ", ".join(bad), values,
                )
                continue
            overrides[name] = values
        d["faction_overrides"] = overrides

        return SimulationConfig.from_dict(d)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        d: dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            if isinstance(v, dict):
                v = {k: dict(x) if isinstance(x, dict) else x for k, x in v.items()}
            d[f.name] = v
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SimulationConfig:
        """Deserialize from a dict. Unknown keys raise ``TypeError``."""
        return cls(**{k: v for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> SimulationConfig:
        return cls.from_dict(json.loads(s))

    def diff(self, other: SimulationConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs

