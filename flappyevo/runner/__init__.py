from flappyevo.runner.driver import (
    MAX_TICKS_PER_FRAME,
    MIN_TICKS_PER_FRAME,
    DriverConfig,
    FrameSnapshot,
    SimulationDriver,
)
from flappyevo.runner.runner import SimulationRunner

__all__ = [
    "MAX_TICKS_PER_FRAME",
    "MIN_TICKS_PER_FRAME",
    "DriverConfig",
    "FrameSnapshot",
    "SimulationDriver",
    "SimulationRunner",
]
