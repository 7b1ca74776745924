"""
Faction parameter tables.

Every inhabitant belongs to exactly one faction. Behaviour differences
between factions are expressed as data in a ``FactionProfile`` rather than
as separate code paths: the tick policies read sex filters, diets, active
windows and reproduction constants from here.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class Faction(str, Enum):
    """Inhabitant variants. Declaration order is the stats/report order."""
    CIVILIAN = "Civilian"
    AMAZONIAN = "Amazonian"
    BRITISH = "British"
    PERSIAN = "Persian"
    ROMAN = "Roman"
    SPANISH = "Spanish"

    @property
    def is_empire(self) -> bool:
        return self is not Faction.CIVILIAN


EMPIRES: tuple[Faction, ...] = tuple(f for f in Faction if f.is_empire)

# Order used for initial population draws and for breaking ties when
# picking the dominant empire.
ENUMERATION_ORDER: tuple[Faction, ...] = (
    Faction.BRITISH,
    Faction.ROMAN,
    Faction.PERSIAN,
    Faction.SPANISH,
    Faction.CIVILIAN,
    Faction.AMAZONIAN,
)

# Integer codes for the 2D occupancy view (-1 marks an empty cell).
FACTION_CODES: dict[Faction, int] = {f: i for i, f in enumerate(Faction)}

WIN_TOKEN = "Win"


class Role(str, Enum):
    """Which tick algorithm a faction runs."""
    CIVILIAN = "civilian"
    PREY = "prey"
    PREDATOR = "predator"


@dataclass(frozen=True)
class FactionProfile:
    """Behavioural constants for one faction.

    Attributes:
        faction: The faction these constants describe.
        role: Tick algorithm to run.
        sexes: Sexes members may have; a single entry makes the faction single-sex.
        max_age: Members die once their age exceeds this.
        min_breeding_age: Youngest age at which a member may give birth.
        birth_probability: Chance per opportunity of giving birth.
        max_children: Upper bound of a litter (inclusive).
        max_recruits: Civilians converted per recruitment, 0 if the faction never recruits.
        full_resource: Resource level restored by a kill; 0 for non-predators.
        diet: Factions this one hunts.
        active_hours: Half-open [start, end) hour windows in which members act.
        recruit_sex: Only civilians of this sex are recruited; None accepts either.
        needs_mate: Reproduction requires an adjacent opposite-sex member.
        mate_on_next_field: Look for a mate on the next field rather than the current one.
        rainy_executions: Number of action rounds in RAINY weather.
        sunny_attack_radius: Enemy search radius in SUNNY weather.
    """

    faction: Faction
    role: Role
    sexes: tuple[str, ...]
    max_age: int
    min_breeding_age: int
    birth_probability: float
    max_children: int
    max_recruits: int = 0
    full_resource: int = 0
    diet: frozenset[Faction] = field(default_factory=frozenset)
    active_hours: tuple[tuple[int, int], ...] = ((0, 24),)
    recruit_sex: str | None = None
    needs_mate: bool = True
    mate_on_next_field: bool = False
    rainy_executions: int = 1
    sunny_attack_radius: int = 1

    @property
    def single_sex(self) -> str | None:
        return self.sexes[0] if len(self.sexes) == 1 else None

    @property
    def is_predator(self) -> bool:
        return self.role is Role.PREDATOR

    def invalid_fields(self) -> list[str]:
        """Names of constants outside their allowed ranges (empty if valid)."""
        bad: list[str] = []
        if not self.sexes or not set(self.sexes) <= {"M", "F"}:
            bad.append("sexes")
        if self.max_age <= 0:
            bad.append("max_age")
        if self.min_breeding_age < 0:
            bad.append("min_breeding_age")
        if not 0.0 <= self.birth_probability <= 1.0:
            bad.append("birth_probability")
        if self.max_children < 1:
            bad.append("max_children")
        if self.max_recruits < 0:
            bad.append("max_recruits")
        if self.full_resource < 0:
            bad.append("full_resource")
        if not all(0 <= start <= end <= 24 for start, end in self.active_hours):
            bad.append("active_hours")
        if self.recruit_sex not in (None, "M", "F"):
            bad.append("recruit_sex")
        if self.rainy_executions < 1:
            bad.append("rainy_executions")
        if self.sunny_attack_radius < 1:
            bad.append("sunny_attack_radius")
        return bad

    def with_overrides(self, overrides: dict[str, Any]) -> FactionProfile:
        """Return a copy with selected constants replaced."""
        clean: dict[str, Any] = {}
        for key, value in overrides.items():
            if key == "diet":
                value = frozenset(Faction(v) for v in value)
            elif key == "active_hours":
                value = tuple(tuple(w) for w in value)
            elif key == "sexes":
                value = tuple(value)
            clean[key] = value
        return replace(self, **clean)


DEFAULT_PROFILES: dict[Faction, FactionProfile] = {
    Faction.CIVILIAN: FactionProfile(
        faction=Faction.CIVILIAN,
        role=Role.CIVILIAN,
        sexes=("M", "F"),
        max_age=100,
        min_breeding_age=20,
        birth_probability=0.05,
        max_children=4,
        mate_on_next_field=True,
    ),
    Faction.AMAZONIAN: FactionProfile(
        faction=Faction.AMAZONIAN,
        role=Role.PREY,
        sexes=("F",),
        max_age=200,
        min_breeding_age=10,
        birth_probability=0.02,
        max_children=1,
        max_recruits=2,
        active_hours=((6, 23),),
        recruit_sex="F",
        needs_mate=False,
    ),
    Faction.PERSIAN: FactionProfile(
        faction=Faction.PERSIAN,
        role=Role.PREY,
        sexes=("M", "F"),
        max_age=300,
        min_breeding_age=5,
        birth_probability=0.05,
        max_children=1,
        max_recruits=2,
        active_hours=((10, 23),),
    ),
    Faction.BRITISH: FactionProfile(
        faction=Faction.BRITISH,
        role=Role.PREDATOR,
        sexes=("M", "F"),
        max_age=800,
        min_breeding_age=40,
        birth_probability=0.2,
        max_children=2,
        max_recruits=3,
        full_resource=50,
        diet=frozenset({Faction.PERSIAN, Faction.ROMAN}),
        active_hours=((6, 15), (17, 19)),
        mate_on_next_field=True,
        rainy_executions=2,
    ),
    Faction.ROMAN: FactionProfile(
        faction=Faction.ROMAN,
        role=Role.PREDATOR,
        sexes=("M",),
        max_age=800,
        min_breeding_age=30,
        birth_probability=0.75,
        max_children=4,
        max_recruits=4,
        full_resource=20,
        diet=frozenset({Faction.AMAZONIAN, Faction.PERSIAN}),
        active_hours=((7, 11), (13, 20)),
        recruit_sex="M",
        needs_mate=False,
    ),
    Faction.SPANISH: FactionProfile(
        faction=Faction.SPANISH,
        role=Role.PREDATOR,
        sexes=("M", "F"),
        max_age=500,
        min_breeding_age=50,
        birth_probability=0.7,
        max_children=4,
        max_recruits=3,
        full_resource=30,
        diet=frozenset({Faction.AMAZONIAN, Faction.ROMAN}),
        active_hours=((7, 14), (16, 20)),
        mate_on_next_field=True,
        sunny_attack_radius=2,
    ),
}


def build_profiles(
    overrides: dict[str, dict[str, Any]] | None = None,
) -> dict[Faction, FactionProfile]:
    """Merge per-faction overrides (keyed by faction name) onto the defaults."""
    profiles = dict(DEFAULT_PROFILES)
    for name, values in (overrides or {}).items():
        faction = Faction(name)
        profiles[faction] = profiles[faction].with_overrides(values)
    return profiles
