"""
Per-faction tick policies.

Each inhabitant contributes one *tick* to a step: it reads neighbourhoods
from the current field and writes its own placement (plus any newborns
and recruits) to the next field. Three algorithms cover all factions:

- civilians age, mate and wander;
- prey empires (Amazonian, Persian) additionally sleep outside their
  active hours and recruit adjacent civilians;
- predator empires (British, Roman, Spanish) also burn resources each
  active step and hunt their diet factions to replenish them.

Faction differences (diet, recruit sex filter, mate rule, weather
bonuses) come from the person's ``FactionProfile``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from imperium.core.clock import Clock
from imperium.core.factions import Faction, Role
from imperium.core.field import Field
from imperium.core.location import Location
from imperium.core.person import Person
from imperium.core.randomizer import Randomizer
from imperium.core.weather import Weather, WeatherCondition


# ---------------------------------------------------------------------------
# Shared environment and event accounting
# ---------------------------------------------------------------------------

@dataclass
class StepEvents:
    """Counts of what happened during one step."""
    births: int = 0
    recruits: int = 0
    kills: int = 0
    deaths_age: int = 0
    deaths_starvation: int = 0
    deaths_overcrowding: int = 0
    sleeping: int = 0
    frozen: int = 0
    repopulated: int = 0

    @property
    def deaths(self) -> int:
        return self.deaths_age + self.deaths_starvation + self.deaths_overcrowding

    def to_dict(self) -> dict[str, Any]:
        return {
            "births": self.births,
            "recruits": self.recruits,
            "kills": self.kills,
            "deaths_age": self.deaths_age,
            "deaths_starvation": self.deaths_starvation,
            "deaths_overcrowding": self.deaths_overcrowding,
            "sleeping": self.sleeping,
            "frozen": self.frozen,
            "repopulated": self.repopulated,
        }


@dataclass
class StepContext:
    """Environment threaded through every tick of a step."""
    clock: Clock
    weather: Weather
    rng: Randomizer
    events: StepEvents

    def weather_is(self, condition: WeatherCondition) -> bool:
        return self.weather.is_condition(condition)


# ---------------------------------------------------------------------------
# Shared fragments
# ---------------------------------------------------------------------------

def reproduce(
    person: Person, ctx: StepContext, next_field: Field, free: list[Location],
) -> int:
    """Place newborns on the front cells of *free*, consuming them.

    Returns:
        Number of newborns placed.
    """
    births = person.give_birth(ctx.rng)
    placed = 0
    while placed < births and free:
        loc = free.pop(0)
        next_field.place(Person.spawn(person.profile, loc, ctx.rng), loc)
        placed += 1
    ctx.events.births += placed
    return placed


def recruit(
    person: Person, ctx: StepContext, current: Field, next_field: Field,
) -> int:
    """Convert adjacent civilians into same-cell faction newborns.

    Civilians failing the faction's sex filter are skipped. The recruit
    keeps the civilian's sex unless the faction is single-sex.

    Returns:
        Number of civilians recruited.
    """
    profile = person.profile
    made = 0
    for loc in current.adjacent(person.location):
        if made >= profile.max_recruits:
            break
        civilian = current.at(loc)
        if civilian is None or not civilian.alive:
            continue
        if civilian.faction is not Faction.CIVILIAN:
            continue
        if profile.recruit_sex is not None and civilian.sex != profile.recruit_sex:
            continue
        civilian.set_dead()
        next_field.place(
            Person.spawn(profile, loc, ctx.rng, sex=civilian.sex), loc,
        )
        made += 1
    ctx.events.recruits += made
    return made


def find_enemy(person: Person, ctx: StepContext, current: Field) -> Location | None:
    """Kill the first live diet member around *person* and take its cell.

    The search radius widens to the profile's sunny radius in SUNNY
    weather. A kill restores the predator's resources to full.
    """
    profile = person.profile
    radius = 1
    if ctx.weather_is(WeatherCondition.SUNNY):
        radius = profile.sunny_attack_radius
    for loc in current.adjacent(person.location, radius):
        victim = current.at(loc)
        if victim is not None and victim.alive and victim.faction in profile.diet:
            victim.set_dead()
            person.resource_level = profile.full_resource
            ctx.events.kills += 1
            return loc
    return None


def _ready_to_mate(person: Person, current: Field, next_field: Field) -> bool:
    profile = person.profile
    if not profile.needs_mate:
        return True
    return person.mate_nearby(next_field if profile.mate_on_next_field else current)


def _age(person: Person, ctx: StepContext) -> bool:
    person.increment_age()
    if not person.alive:
        ctx.events.deaths_age += 1
        return False
    return True


def _sleep(person: Person, ctx: StepContext, next_field: Field) -> None:
    ctx.events.sleeping += 1
    next_field.place(person, person.location)


def _move_or_die(
    person: Person, ctx: StepContext, next_field: Field, free: list[Location],
) -> None:
    if free:
        loc = free[0]
        person.move_to(loc)
        next_field.place(person, loc)
    else:
        person.set_dead()
        ctx.events.deaths_overcrowding += 1


# ---------------------------------------------------------------------------
# Tick algorithms
# ---------------------------------------------------------------------------

def civilian_tick(
    person: Person, ctx: StepContext, current: Field, next_field: Field,
) -> None:
    """Age, possibly breed next to a mate, then move or die of overcrowding."""
    if not _age(person, ctx):
        return
    free = next_field.free_adjacent(person.location)
    if free and _ready_to_mate(person, current, next_field):
        reproduce(person, ctx, next_field, free)
    _move_or_die(person, ctx, next_field, free)


def prey_tick(
    person: Person, ctx: StepContext, current: Field, next_field: Field,
) -> None:
    """Tick for empires without a diet (Amazonian, Persian)."""
    if not _age(person, ctx):
        return
    if not person.is_active(ctx.clock):
        _sleep(person, ctx, next_field)
        return

    free = next_field.free_adjacent(person.location)
    if person.civilian_nearby(current):
        recruit(person, ctx, current, next_field)
        next_field.place(person, person.location)
        return
    if free and _ready_to_mate(person, current, next_field):
        reproduce(person, ctx, next_field, free)
    _move_or_die(person, ctx, next_field, free)


def predator_tick(
    person: Person, ctx: StepContext, current: Field, next_field: Field,
) -> None:
    """Tick for hunting empires (British, Roman, Spanish).

    Runs one action round, or ``rainy_executions`` rounds in RAINY
    weather. Each round ends with a destination (the recruiter's own
    cell, a victim's cell or a free neighbour) or with none; the last
    round's destination decides between moving and dying.
    """
    profile = person.profile
    executions = 1
    if ctx.weather_is(WeatherCondition.RAINY):
        executions = profile.rainy_executions

    if not _age(person, ctx):
        return
    if not person.is_active(ctx.clock):
        _sleep(person, ctx, next_field)
        return

    person.increment_resources()
    if not person.alive:
        ctx.events.deaths_starvation += 1
        return

    destination: Location | None = None
    for _ in range(executions):
        free = next_field.free_adjacent(person.location)
        if person.civilian_nearby(current):
            recruit(person, ctx, current, next_field)
            destination = person.location
            continue
        if free and _ready_to_mate(person, current, next_field):
            reproduce(person, ctx, next_field, free)
        destination = find_enemy(person, ctx, current)
        if destination is None and free:
            destination = free.pop(0)
        if destination is not None:
            person.move_to(destination)

    if destination is not None:
        person.move_to(destination)
        next_field.place(person, destination)
    else:
        person.set_dead()
        ctx.events.deaths_overcrowding += 1


Policy = Callable[[Person, StepContext, Field, Field], None]

POLICIES: dict[Role, Policy] = {
    Role.CIVILIAN: civilian_tick,
    Role.PREY: prey_tick,
    Role.PREDATOR: predator_tick,
}


def tick(person: Person, ctx: StepContext, current: Field, next_field: Field) -> None:
    """Dispatch *person* to its faction's policy. Dead inhabitants are skipped."""
    if not person.alive:
        return
    POLICIES[person.profile.role](person, ctx, current, next_field)
