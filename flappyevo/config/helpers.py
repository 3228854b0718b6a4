"""Tiny helper functions for Hydra config computations."""

import numpy as np

from flappyevo.runner.driver import DriverConfig, SimulationDriver
from flappyevo.runner.runner import SimulationRunner


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Build the run's single random stream; ``None`` draws OS entropy."""
    return np.random.default_rng(seed)


def build_runner(driver: SimulationDriver, config: DriverConfig) -> SimulationRunner:
    """Wrap a driver into a runner honouring the frame loop settings."""
    return SimulationRunner(
        driver,
        frame_interval=config.frame_interval,
        max_generations=config.max_generations,
    )
