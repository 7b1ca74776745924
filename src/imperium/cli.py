"""Command-line driver: run one simulation and print the outcome."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from imperium.core.config import SimulationConfig
from imperium.core.engine import Simulator
from imperium.sinks import ConsoleViewer, SoundtrackSelector


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imperium",
        description="Run an empire ecosystem simulation until one empire remains.",
    )
    parser.add_argument("--config", type=Path, help="JSON file with SimulationConfig fields")
    parser.add_argument("--depth", type=int, help="Field rows (default 80)")
    parser.add_argument("--width", type=int, help="Field columns (default 120)")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    parser.add_argument("--max-steps", type=int, help="Step budget (default 2000)")
    parser.add_argument("--delay-ms", type=int, help="Pause between steps in milliseconds")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity; INFO prints per-step status",
    )
    return parser


def load_config(args: argparse.Namespace) -> SimulationConfig:
    """Start from the JSON file (if any) and apply command-line overrides."""
    if args.config is not None:
        config = SimulationConfig.from_json(args.config.read_text())
    else:
        config = SimulationConfig()
    overrides = {
        "depth": args.depth,
        "width": args.width,
        "random_seed": args.seed,
        "max_steps": args.max_steps,
        "step_delay_ms": args.delay_ms,
    }
    d = config.to_dict()
    d.update({k: v for k, v in overrides.items() if v is not None})
    return SimulationConfig.from_dict(d)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args)

    soundtrack = SoundtrackSelector()
    sim = Simulator(config, viewers=[ConsoleViewer()], soundtracks=[soundtrack])
    sim.run()

    winner = sim.winner()
    print(f"=== Imperium: {sim.config.experiment_name} ===")
    print(f"Field: {sim.depth}x{sim.width}  seed: {sim.config.random_seed}")
    print(f"Steps run: {sim.step_count}")
    print(f"Winner: {winner.value if winner else 'none (step budget reached)'}")
    print(f"Last track: {soundtrack.current_track or '-'}")
    print()
    for name, count in sim.stats().items():
        print(f"  {name:10s}: {count:5d}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
