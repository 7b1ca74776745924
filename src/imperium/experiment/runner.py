"""
Experiment Runner — multi-seed runs and parameter sweeps.

Runs complete simulations (until a single empire is left or the step
budget runs out) and gathers their outcomes for comparison.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any

from imperium.core.config import SimulationConfig
from imperium.core.engine import Simulator
from imperium.metrics.collector import MetricsCollector, StepMetrics

logger = logging.getLogger(__name__)


@dataclass
class ExperimentResult:
    """Result of a single simulation run."""
    config: SimulationConfig
    steps_run: int
    winner: str | None
    final_stats: dict[str, int]
    metrics: list[StepMetrics]

    @property
    def finished(self) -> bool:
        """True if the run ended by elimination rather than by step budget."""
        return self.winner is not None


class ExperimentRunner:
    """
    Run and sweep simulation experiments.
    """

    def run_experiment(
        self,
        config: SimulationConfig,
        collect_metrics: bool = True,
    ) -> ExperimentResult:
        """Run one simulation to completion and return its outcome."""
        collector = MetricsCollector()
        viewers = [collector.as_viewer()] if collect_metrics else []
        sim = Simulator(config, viewers=viewers)
        sim.run(config.max_steps)

        winner = sim.winner()
        logger.info(
            "%s finished after %d steps (winner: %s)",
            config.experiment_name, sim.step_count,
            winner.value if winner else "none",
        )
        return ExperimentResult(
            config=config,
            steps_run=sim.step_count,
            winner=winner.value if winner else None,
            final_stats=sim.stats(),
            metrics=collector.metrics_history,
        )

    def run_multi_seed(
        self,
        config: SimulationConfig,
        seeds: list[int],
        collect_metrics: bool = False,
    ) -> list[ExperimentResult]:
        """
        Run the same configuration with multiple random seeds.

        Useful for measuring how often each empire wins.
        """
        results: list[ExperimentResult] = []
        for seed in seeds:
            config_dict = config.to_dict()
            config_dict["random_seed"] = seed
            config_dict["experiment_name"] = f"{config.experiment_name}_seed{seed}"
            seed_config = SimulationConfig.from_dict(config_dict)
            results.append(self.run_experiment(seed_config, collect_metrics))
        return results

    def run_parameter_sweep(
        self,
        base_config: SimulationConfig,
        param_name: str,
        values: list[Any],
        collect_metrics: bool = False,
    ) -> dict[str, ExperimentResult]:
        """
        Sweep a single parameter across multiple values.

        Args:
            base_config: Base configuration to modify
            param_name: Name of the parameter to sweep (attribute on SimulationConfig)
            values: List of values to test
            collect_metrics: Whether to collect per-step metrics

        Returns:
            Dict mapping value label -> ExperimentResult
        """
        results: dict[str, ExperimentResult] = {}
        for val in values:
            config_dict = base_config.to_dict()
            config_dict[param_name] = val
            config_dict["experiment_name"] = f"sweep_{param_name}={val}"
            config = SimulationConfig.from_dict(config_dict)

            label = f"{param_name}={val}"
            results[label] = self.run_experiment(config, collect_metrics)
        return results

    @staticmethod
    def win_counts(results: list[ExperimentResult]) -> dict[str, int]:
        """Tally winners across runs; unfinished runs count under ``"none"``."""
        return dict(Counter(r.winner or "none" for r in results))
