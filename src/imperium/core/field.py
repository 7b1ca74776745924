"""
Double-buffered occupancy field.

A ``Field`` is the authoritative spatial index for one step: a mapping
from cell to inhabitant (at most one per cell) plus the ordered list of
inhabitants used for traversal. During a step the engine reads the
*current* field and writes the *next* one; kills are applied to the
current field so later lookups in the same step see the post-kill state.

Queries never raise: out-of-bounds lookups return ``None`` and
out-of-bounds neighbourhoods are empty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

import numpy as np

from imperium.core.factions import (
    DEFAULT_PROFILES,
    ENUMERATION_ORDER,
    FACTION_CODES,
    Faction,
    FactionProfile,
)
from imperium.core.location import Location, in_bounds, neighbourhood
from imperium.core.person import Person

if TYPE_CHECKING:
    from imperium.core.randomizer import Randomizer


class Field:
    """A rectangular grid holding at most one person per cell.

    Attributes:
        depth: Number of rows.
        width: Number of columns.
        rng: Shared randomizer used to shuffle adjacency lists.
    """

    def __init__(self, depth: int, width: int, rng: Randomizer) -> None:
        self.depth = depth
        self.width = width
        self.rng = rng
        self._grid: dict[Location, Person] = {}
        self._people: list[Person] = []
        self._cells: dict[int, Location] = {}

    # ------------------------------------------------------------------
    # Placement and lookup
    # ------------------------------------------------------------------
    def place(self, person: Person, location: Location) -> None:
        """Put *person* at *location*, overwriting any previous occupant.

        An overwritten live occupant is killed: it leaves both the map and
        the inhabitant list.
        """
        other = self._grid.get(location)
        if other is not None and other is not person:
            self._forget(other)
            if other.alive:
                other.set_dead()
        if person.id in self._cells:
            self._forget(person)
        self._grid[location] = person
        self._people.append(person)
        self._cells[person.id] = location

    def _forget(self, person: Person) -> None:
        self._people.remove(person)
        cell = self._cells.pop(person.id)
        if self._grid.get(cell) is person:
            del self._grid[cell]

    def at(self, location: Location | None) -> Person | None:
        if location is None:
            return None
        return self._grid.get(location)

    def in_bounds(self, location: Location | None) -> bool:
        return in_bounds(location, self.depth, self.width)

    @property
    def people(self) -> list[Person]:
        """Inhabitants in insertion order (may include the not-yet-purged dead)."""
        return self._people

    def clear(self) -> None:
        self._grid.clear()
        self._people.clear()
        self._cells.clear()

    # ------------------------------------------------------------------
    # Neighbourhood queries
    # ------------------------------------------------------------------
    def adjacent(self, location: Location | None, radius: int = 1) -> list[Location]:
        """In-bounds cells within *radius* of *location*, shuffled."""
        return self.rng.shuffled(
            neighbourhood(location, self.depth, self.width, radius)
        )

    def free_adjacent(self, location: Location | None) -> list[Location]:
        """Adjacent cells that are empty or hold a dead person, shuffled."""
        free: list[Location] = []
        for loc in self.adjacent(location):
            occupant = self._grid.get(loc)
            if occupant is None or not occupant.alive:
                free.append(loc)
        return free

    def free_cells(self) -> list[Location]:
        """Every in-bounds cell without a map entry, row-major."""
        return [
            Location(row, col)
            for row in range(self.depth)
            for col in range(self.width)
            if Location(row, col) not in self._grid
        ]

    # ------------------------------------------------------------------
    # Population queries
    # ------------------------------------------------------------------
    def stats(self) -> dict[str, int]:
        """Live counts per faction name, every faction present."""
        counts = {f.value: 0 for f in Faction}
        for person in self._grid.values():
            if person.alive:
                counts[person.faction.value] += 1
        return counts

    def viable(self) -> bool:
        """True while at least two distinct empires have a live member."""
        seen: set[Faction] = set()
        for person in self._people:
            if person.alive and person.faction.is_empire:
                seen.add(person.faction)
                if len(seen) > 1:
                    return True
        return False

    def has_civilian(self) -> bool:
        return any(
            p.alive and p.faction is Faction.CIVILIAN for p in self._people
        )

    def dominant_faction(self) -> Faction | None:
        """Largest live empire; ties go to the earliest in enumeration order."""
        counts = self.stats()
        best: Faction | None = None
        best_count = 0
        for faction in ENUMERATION_ORDER:
            if not faction.is_empire:
                continue
            if counts[faction.value] > best_count:
                best = faction
                best_count = counts[faction.value]
        return best

    def population(self) -> int:
        return sum(1 for p in self._grid.values() if p.alive)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------
    def repopulate_civilians(
        self,
        rng: Randomizer,
        probability: float,
        profile: FactionProfile | None = None,
    ) -> int:
        """Drop a random-age civilian on each free cell with *probability*.

        Returns:
            Number of civilians created.
        """
        profile = profile or DEFAULT_PROFILES[Faction.CIVILIAN]
        created = 0
        for loc in self.free_cells():
            if rng.chance(probability):
                self.place(Person.spawn(profile, loc, rng, random_age=True), loc)
                created += 1
        return created

    def purge_dead(self) -> int:
        """Drop dead and stale entries from both the map and the list.

        Returns:
            Number of inhabitants removed from the list.
        """
        before = len(self._people)
        self._people = [
            p for p in self._people
            if p.alive and self._cells.get(p.id) == p.location
        ]
        self._cells = {p.id: p.location for p in self._people}
        self._grid = {p.location: p for p in self._people}
        return before - len(self._people)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def view(self) -> Iterator[tuple[Location, str, bool]]:
        """Yield ``(location, faction name, alive)`` for every occupied cell."""
        for loc in sorted(self._grid):
            person = self._grid[loc]
            yield loc, person.faction.value, person.alive

    def occupancy(self) -> np.ndarray:
        """2D array of faction codes for live occupants, -1 where empty."""
        grid = np.full((self.depth, self.width), -1, dtype=np.int8)
        for loc, person in self._grid.items():
            if person.alive:
                grid[loc.row, loc.col] = FACTION_CODES[person.faction]
        return grid

    def __len__(self) -> int:
        return len(self._people)

    def __repr__(self) -> str:
        return (
            f"Field(depth={self.depth}, width={self.width}, "
            f"population={self.population()})"
        )
