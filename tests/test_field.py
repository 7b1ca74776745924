"""Tests for the occupancy field."""

import numpy as np

from imperium.core.factions import DEFAULT_PROFILES, FACTION_CODES, Faction
from imperium.core.field import Field
from imperium.core.location import Location
from imperium.core.person import Person
from imperium.core.randomizer import Randomizer


def _make_field(depth=3, width=3, seed=0) -> Field:
    return Field(depth, width, Randomizer(seed))


def _make_person(field, faction, row, col, **attrs) -> Person:
    loc = Location(row, col)
    person = Person.spawn(DEFAULT_PROFILES[faction], loc, field.rng)
    for name, value in attrs.items():
        setattr(person, name, value)
    field.place(person, loc)
    return person


class TestPlacement:
    def test_place_and_lookup(self):
        f = _make_field()
        p = _make_person(f, Faction.CIVILIAN, 1, 2)
        assert f.at(Location(1, 2)) is p
        assert f.people == [p]
        assert len(f) == 1

    def test_empty_and_out_of_bounds_lookup(self):
        f = _make_field()
        assert f.at(Location(0, 0)) is None
        assert f.at(Location(5, 5)) is None
        assert f.at(None) is None

    def test_place_over_live_occupant_kills_it(self):
        f = _make_field()
        first = _make_person(f, Faction.CIVILIAN, 0, 0)
        second = _make_person(f, Faction.PERSIAN, 0, 0)
        assert f.at(Location(0, 0)) is second
        assert not first.alive
        assert first not in f.people
        assert f.population() == 1

    def test_replacing_self_does_not_duplicate(self):
        f = _make_field()
        p = _make_person(f, Faction.CIVILIAN, 0, 0)
        f.place(p, Location(0, 0))
        assert f.people == [p]

    def test_moving_within_field_frees_old_cell(self):
        f = _make_field()
        p = _make_person(f, Faction.CIVILIAN, 0, 0)
        p.move_to(Location(2, 2))
        f.place(p, Location(2, 2))
        assert f.at(Location(0, 0)) is None
        assert f.at(Location(2, 2)) is p
        assert len(f) == 1

    def test_clear(self):
        f = _make_field()
        _make_person(f, Faction.CIVILIAN, 0, 0)
        f.clear()
        assert len(f) == 0
        assert f.at(Location(0, 0)) is None


class TestNeighbourhoodQueries:
    def test_adjacent_contains_all_neighbours(self):
        f = _make_field()
        assert len(f.adjacent(Location(1, 1))) == 8

    def test_adjacent_is_shuffled(self):
        f = _make_field(seed=1)
        orders = {tuple(f.adjacent(Location(1, 1))) for _ in range(20)}
        assert len(orders) > 1

    def test_adjacent_radius_two(self):
        f = _make_field(5, 5)
        assert len(f.adjacent(Location(2, 2), radius=2)) == 24

    def test_adjacent_out_of_bounds_is_empty(self):
        f = _make_field()
        assert f.adjacent(Location(9, 9)) == []

    def test_free_adjacent_excludes_live(self):
        f = _make_field()
        _make_person(f, Faction.CIVILIAN, 0, 0)
        free = f.free_adjacent(Location(1, 1))
        assert Location(0, 0) not in free
        assert len(free) == 7

    def test_free_adjacent_treats_dead_as_free(self):
        f = _make_field()
        dead = _make_person(f, Faction.CIVILIAN, 0, 0)
        dead.set_dead()
        assert Location(0, 0) in f.free_adjacent(Location(1, 1))

    def test_free_cells_row_major(self):
        f = _make_field(2, 2)
        _make_person(f, Faction.CIVILIAN, 0, 1)
        assert f.free_cells() == [Location(0, 0), Location(1, 0), Location(1, 1)]


class TestPopulationQueries:
    def test_stats_has_every_faction(self):
        f = _make_field()
        stats = f.stats()
        assert set(stats) == {fac.value for fac in Faction}
        assert all(v == 0 for v in stats.values())

    def test_stats_ignore_dead(self):
        f = _make_field()
        _make_person(f, Faction.PERSIAN, 0, 0)
        dead = _make_person(f, Faction.PERSIAN, 0, 1)
        dead.set_dead()
        assert f.stats()["Persian"] == 1

    def test_viable_needs_two_empires(self):
        f = _make_field()
        _make_person(f, Faction.CIVILIAN, 0, 0)
        _make_person(f, Faction.PERSIAN, 0, 1)
        _make_person(f, Faction.PERSIAN, 0, 2)
        assert not f.viable()
        _make_person(f, Faction.ROMAN, 1, 0)
        assert f.viable()

    def test_viable_ignores_dead(self):
        f = _make_field()
        _make_person(f, Faction.PERSIAN, 0, 1)
        roman = _make_person(f, Faction.ROMAN, 1, 0)
        roman.set_dead()
        assert not f.viable()

    def test_empty_field_not_viable(self):
        assert not _make_field().viable()

    def test_has_civilian(self):
        f = _make_field()
        assert not f.has_civilian()
        c = _make_person(f, Faction.CIVILIAN, 0, 0)
        assert f.has_civilian()
        c.set_dead()
        assert not f.has_civilian()

    def test_dominant_faction(self):
        f = _make_field()
        _make_person(f, Faction.PERSIAN, 0, 0)
        _make_person(f, Faction.PERSIAN, 0, 1)
        _make_person(f, Faction.ROMAN, 0, 2)
        for col in range(3):
            _make_person(f, Faction.CIVILIAN, 2, col)
        assert f.dominant_faction() is Faction.PERSIAN

    def test_dominant_tie_goes_to_enumeration_order(self):
        f = _make_field()
        _make_person(f, Faction.SPANISH, 0, 0)
        _make_person(f, Faction.BRITISH, 0, 1)
        assert f.dominant_faction() is Faction.BRITISH

    def test_dominant_none_without_empires(self):
        f = _make_field()
        _make_person(f, Faction.CIVILIAN, 0, 0)
        assert f.dominant_faction() is None


class TestMaintenance:
    def test_repopulate_fills_every_free_cell_at_probability_one(self):
        f = _make_field()
        _make_person(f, Faction.PERSIAN, 1, 1)
        created = f.repopulate_civilians(f.rng, 1.0)
        assert created == 8
        assert f.stats()["Civilian"] == 8
        assert f.at(Location(1, 1)).faction is Faction.PERSIAN

    def test_repopulate_zero_probability(self):
        f = _make_field()
        assert f.repopulate_civilians(f.rng, 0.0) == 0
        assert len(f) == 0

    def test_repopulated_civilians_have_random_age(self):
        f = _make_field(10, 10)
        f.repopulate_civilians(f.rng, 1.0)
        ages = {p.age for p in f.people}
        assert len(ages) > 1
        assert all(0 <= a < 100 for a in ages)

    def test_purge_dead(self):
        f = _make_field()
        alive = _make_person(f, Faction.CIVILIAN, 0, 0)
        dead = _make_person(f, Faction.CIVILIAN, 0, 1)
        dead.set_dead()
        removed = f.purge_dead()
        assert removed == 1
        assert f.people == [alive]
        assert f.at(Location(0, 1)) is None


class TestViews:
    def test_view_triples(self):
        f = _make_field()
        _make_person(f, Faction.ROMAN, 2, 0)
        _make_person(f, Faction.CIVILIAN, 0, 1)
        assert list(f.view()) == [
            (Location(0, 1), "Civilian", True),
            (Location(2, 0), "Roman", True),
        ]

    def test_occupancy_codes(self):
        f = _make_field(2, 3)
        _make_person(f, Faction.ROMAN, 1, 2)
        grid = f.occupancy()
        assert grid.shape == (2, 3)
        assert grid.dtype == np.int8
        assert grid[1, 2] == FACTION_CODES[Faction.ROMAN]
        assert np.count_nonzero(grid == -1) == 5
