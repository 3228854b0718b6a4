from __future__ import annotations

from loguru import logger
import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from flappyevo.controllers.base import ControllerFactory
from flappyevo.evolution.config import EvolutionConfig
from flappyevo.evolution.metrics import GenerationMetrics
from flappyevo.evolution.population import Population
from flappyevo.exceptions import ConfigurationError
from flappyevo.utils.trackers.base import LogWriter
from flappyevo.world.config import WorldConfig
from flappyevo.world.obstacles import Obstacle, advance

__all__ = [
    "MAX_TICKS_PER_FRAME",
    "MIN_TICKS_PER_FRAME",
    "DriverConfig",
    "FrameSnapshot",
    "SimulationDriver",
]

MIN_TICKS_PER_FRAME = 1
MAX_TICKS_PER_FRAME = 100


class DriverConfig(BaseModel):
    """Configuration options controlling the frame loop."""

    ticks_per_frame: int = Field(
        default=1, ge=MIN_TICKS_PER_FRAME, le=MAX_TICKS_PER_FRAME
    )
    frame_interval: float = Field(
        default=1.0 / 60.0,
        ge=0,
        description="Seconds the runner yields to the event loop between frames",
    )
    max_generations: int | None = Field(
        default=None,
        gt=0,
        description="Stop after this many completed generations (None = unlimited)",
    )
    model_config = ConfigDict(frozen=True)


class FrameSnapshot(BaseModel):
    """Read-only view of the simulation handed to the presentation layer."""

    generation: int
    tick: int
    survivor_count: int
    ticks_per_frame: int
    agent_positions: list[float] = Field(
        default_factory=list, description="Vertical positions of alive agents"
    )
    obstacles: list[Obstacle] = Field(default_factory=list)


def clamp_ticks_per_frame(value: int) -> int:
    return min(max(int(value), MIN_TICKS_PER_FRAME), MAX_TICKS_PER_FRAME)


class SimulationDriver:
    """Runs ticks in batches and rolls generations over on extinction.

    Each tick advances the obstacles first and then steps every alive agent
    against the updated list. Extinction is checked after every tick, so the
    batch size never changes what is simulated.
    """

    def __init__(
        self,
        world: WorldConfig,
        evolution: EvolutionConfig,
        factory: ControllerFactory,
        rng: np.random.Generator,
        *,
        ticks_per_frame: int = 1,
        writer: LogWriter | None = None,
        population: Population | None = None,
    ):
        self.world = world
        self.evolution = evolution
        self.factory = factory
        self.rng = rng
        self.writer = writer.bind(["evolution"]) if writer is not None else None

        if population is not None and len(population) != evolution.population_size:
            raise ConfigurationError(
                f"Population has {len(population)} agents, "
                f"expected {evolution.population_size}"
            )

        self.obstacles: list[Obstacle] = []
        self.population = (
            population
            if population is not None
            else Population.random(evolution, world, factory, rng)
        )
        self.generation = 1
        self.tick_index = 0
        self.metrics = GenerationMetrics()
        self._ticks_per_frame = clamp_ticks_per_frame(ticks_per_frame)

        logger.info(
            "[SimulationDriver] Init | population={}, world={}x{}",
            len(self.population),
            world.width,
            world.height,
        )

    @classmethod
    def from_config(
        cls,
        config: DriverConfig,
        world: WorldConfig,
        evolution: EvolutionConfig,
        factory: ControllerFactory,
        rng: np.random.Generator,
        writer: LogWriter | None = None,
    ) -> "SimulationDriver":
        return cls(
            world,
            evolution,
            factory,
            rng,
            ticks_per_frame=config.ticks_per_frame,
            writer=writer,
        )

    @property
    def ticks_per_frame(self) -> int:
        return self._ticks_per_frame

    @ticks_per_frame.setter
    def ticks_per_frame(self, value: int) -> None:
        self._ticks_per_frame = clamp_ticks_per_frame(value)

    def tick(self) -> None:
        """Simulate a single tick, reproducing if the population died out."""
        advance(self.obstacles, self.world, self.rng)
        self.population.step(self.obstacles, self.tick_index, self.world)
        self.tick_index += 1
        self.metrics.record_tick()

        if not self.population.is_alive():
            self._next_generation()

    def frame(self) -> FrameSnapshot:
        """Simulate ``ticks_per_frame`` ticks and return the resulting state."""
        for _ in range(self._ticks_per_frame):
            self.tick()
        return self.snapshot()

    def snapshot(self) -> FrameSnapshot:
        alive = self.population.alive_agents()
        return FrameSnapshot(
            generation=self.generation,
            tick=self.tick_index,
            survivor_count=len(alive),
            ticks_per_frame=self._ticks_per_frame,
            agent_positions=[agent.vertical_position for agent in alive],
            obstacles=[obstacle.model_copy() for obstacle in self.obstacles],
        )

    def _next_generation(self) -> None:
        size = len(self.population)
        population, summary = Population.from_predecessors(
            self.population, self.evolution, self.world, self.factory, self.rng
        )
        self.metrics.record_generation(size, summary)

        logger.info(
            "[SimulationDriver] Generation {} extinct after {} ticks | best={}, mean={:.1f}",
            self.generation,
            self.tick_index,
            summary.best_ticks,
            summary.mean_ticks,
        )
        if self.writer is not None:
            self.writer.scalar("best_ticks", summary.best_ticks, step=self.generation)
            self.writer.scalar("mean_ticks", summary.mean_ticks, step=self.generation)
            self.writer.scalar(
                "elite_fitness_sum", summary.elite_fitness_sum, step=self.generation
            )
            self.writer.hist(
                "survival_ticks", summary.survival_ticks, step=self.generation
            )

        self.tick_index = 0
        self.obstacles.clear()
        self.generation += 1
        self.population = population
