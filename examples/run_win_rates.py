#!/usr/bin/env python3
"""Tally empire victories over several seeds."""

from imperium.core.config import SimulationConfig
from imperium.experiment.runner import ExperimentRunner


def main():
    config = SimulationConfig(
        experiment_name="win_rates",
        depth=30,
        width=45,
        max_steps=1500,
    )
    runner = ExperimentRunner()
    results = runner.run_multi_seed(config, seeds=list(range(10)))

    print(f"=== Imperium Sandbox: {config.experiment_name} ===")
    for r in results:
        print(f"  seed {r.config.random_seed:3d}: {r.winner or 'none':10s} after {r.steps_run:5d} steps")

    print("\nWins:")
    for name, wins in sorted(runner.win_counts(results).items()):
        print(f"  {name:10s}: {wins}")


if __name__ == "__main__":
    main()
