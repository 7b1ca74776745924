#!/usr/bin/env python3
"""Run a baseline Imperium simulation and print a per-step population table."""

from imperium.core.config import SimulationConfig
from imperium.core.engine import Simulator
from imperium.core.factions import Faction
from imperium.sinks import SoundtrackSelector


def main():
    config = SimulationConfig(
        experiment_name="baseline",
        depth=40,
        width=60,
        max_steps=400,
        random_seed=42,
    )

    print(f"=== Imperium Sandbox: {config.experiment_name} ===")
    print(f"Field: {config.depth}x{config.width}")
    print(f"Step budget: {config.max_steps}")
    print(f"Creation probabilities: {config.creation_probabilities}")
    print()

    soundtrack = SoundtrackSelector()
    sim = Simulator(config, soundtracks=[soundtrack])
    history = sim.run()

    names = [f.value for f in Faction]
    print(f"{'Step':>5} {'Time':>5} {'Weather':>8} " + " ".join(f"{n[:4]:>5}" for n in names))
    print("-" * 60)

    for snap in history[::20]:
        counts = " ".join(f"{snap.stats[n]:5d}" for n in names)
        print(f"{snap.step:5d} {str(snap.clock):>5} {snap.weather.name:>8} {counts}")

    winner = sim.winner()
    print()
    print(f"=== Final State (Step {sim.step_count}) ===")
    print(f"Winner: {winner.value if winner else 'none'}")
    print(f"Tracks played: {', '.join(soundtrack.history)}")
    for name, count in sim.stats().items():
        print(f"  {name:10s}: {count:5d}")


if __name__ == "__main__":
    main()
