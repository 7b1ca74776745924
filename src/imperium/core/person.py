"""
Inhabitant model.

One ``Person`` class covers civilians and soldiers of every empire; the
faction tag and its ``FactionProfile`` supply the per-variant constants.
Shared policy fragments (ageing, birth draws, neighbourhood checks) live
here; the per-faction tick algorithms live in ``imperium.core.policies``.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import TYPE_CHECKING

from imperium.core.factions import Faction, FactionProfile
from imperium.core.location import Location

if TYPE_CHECKING:
    from imperium.core.clock import Clock
    from imperium.core.field import Field
    from imperium.core.randomizer import Randomizer


_ids = count(1)


@dataclass(eq=False)
class Person:
    """A civilian or soldier living on the field.

    Equality is identity: two people with identical attributes are still
    different inhabitants.
    """

    profile: FactionProfile
    sex: str
    location: Location | None
    age: int = 0
    resource_level: int = 0
    alive: bool = True
    id: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            self.id = next(_ids)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def spawn(
        cls,
        profile: FactionProfile,
        location: Location,
        rng: Randomizer,
        random_age: bool = False,
        sex: str | None = None,
    ) -> Person:
        """Create a member of *profile*'s faction.

        Single-sex factions ignore *sex*; otherwise a missing *sex* is
        drawn at random. Predators always start with a random resource
        level below their full value.
        """
        if profile.single_sex is not None:
            sex = profile.single_sex
        elif sex is None:
            sex = rng.sex()
        age = rng.int_in(0, profile.max_age) if random_age else 0
        resources = 0
        if profile.is_predator and profile.full_resource > 0:
            resources = rng.int_in(0, profile.full_resource)
        return cls(
            profile=profile, sex=sex, location=location,
            age=age, resource_level=resources,
        )

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------
    @property
    def faction(self) -> Faction:
        return self.profile.faction

    @property
    def max_age(self) -> int:
        return self.profile.max_age

    @property
    def min_breeding_age(self) -> int:
        return self.profile.min_breeding_age

    @property
    def birth_probability(self) -> float:
        return self.profile.birth_probability

    @property
    def max_children(self) -> int:
        return self.profile.max_children

    def is_active(self, clock: Clock) -> bool:
        return clock.in_window(self.profile.active_hours)

    # ------------------------------------------------------------------
    # Shared policy fragments
    # ------------------------------------------------------------------
    def set_dead(self) -> None:
        self.alive = False
        self.location = None

    def move_to(self, location: Location) -> None:
        self.location = location

    def increment_age(self) -> None:
        """Age by one step; die once past the faction's maximum age."""
        self.age += 1
        if self.age > self.max_age:
            self.set_dead()

    def increment_resources(self) -> None:
        """Consume one unit of resources; starve at zero."""
        self.resource_level -= 1
        if self.resource_level <= 0:
            self.set_dead()

    def can_breed(self) -> bool:
        return self.age >= self.min_breeding_age

    def give_birth(self, rng: Randomizer) -> int:
        """Number of children born this step, uniform over 1..max_children, or 0."""
        if self.can_breed() and rng.uniform() <= self.birth_probability:
            return 1 + rng.int_in(0, self.max_children)
        return 0

    def mate_nearby(self, field: Field) -> bool:
        """True if an adjacent cell holds a live same-faction member of the opposite sex."""
        for loc in field.adjacent(self.location):
            other = field.at(loc)
            if (
                other is not None
                and other.alive
                and other.faction is self.faction
                and other.sex != self.sex
            ):
                return True
        return False

    def civilian_nearby(self, field: Field) -> bool:
        """True if an adjacent cell holds a live civilian."""
        for loc in field.adjacent(self.location):
            other = field.at(loc)
            if other is not None and other.alive and other.faction is Faction.CIVILIAN:
                return True
        return False

    def __repr__(self) -> str:
        status = "alive" if self.alive else "dead"
        extra = ""
        if self.profile.is_predator:
            extra = f", resources={self.resource_level}"
        return (
            f"Person(id={self.id}, faction={self.faction.value}, sex={self.sex}, "
            f"age={self.age}, location={self.location}{extra}, {status})"
        )
