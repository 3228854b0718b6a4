from __future__ import annotations

from typing import Iterator

from loguru import logger
import numpy as np
from pydantic import BaseModel, Field

from flappyevo.controllers.base import INPUT_COUNT, OUTPUT_COUNT, ControllerFactory
from flappyevo.evolution.config import EvolutionConfig
from flappyevo.evolution.selectors import (
    EliteSelector,
    ParentSelector,
    RouletteWheelParentSelector,
    TruncationEliteSelector,
    score,
)
from flappyevo.exceptions import EvolutionError
from flappyevo.world.agents import Agent, step
from flappyevo.world.config import WorldConfig
from flappyevo.world.obstacles import Obstacle

__all__ = ["Population", "ReproductionSummary"]


class ReproductionSummary(BaseModel):
    """How a population was bred from its predecessors."""

    elite_ids: list[str] = Field(
        default_factory=list, description="Ids of the agents eligible as parents"
    )
    elite_fitness_sum: float = Field(
        default=0.0, ge=0, description="Sum of squared elite fitness"
    )
    best_ticks: int = Field(default=0, ge=0)
    mean_ticks: float = Field(default=0.0, ge=0)
    offspring: int = Field(default=0, ge=0)
    fresh: int = Field(default=0, ge=0)
    uniform_fallback: bool = Field(
        default=False,
        description="Elite fitness summed to zero and parents were drawn uniformly",
    )
    survival_ticks: list[int] = Field(
        default_factory=list, description="Ticks survived by each predecessor, in population order"
    )


class Population:
    """The agents of one generation.

    A population is never reborn in place: :meth:`from_predecessors` builds a
    new one and empties the old.
    """

    def __init__(self, agents: list[Agent]):
        self._agents = agents

    @classmethod
    def random(
        cls,
        config: EvolutionConfig,
        world: WorldConfig,
        factory: ControllerFactory,
        rng: np.random.Generator,
    ) -> "Population":
        """Create a population of fresh agents with random controllers."""
        return cls(
            [
                _fresh_agent(config, world, factory, rng)
                for _ in range(config.population_size)
            ]
        )

    @property
    def agents(self) -> list[Agent]:
        return self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(self._agents)

    def is_alive(self) -> bool:
        """A population is alive while at least one of its agents is."""
        return any(agent.alive for agent in self._agents)

    def survivor_count(self) -> int:
        return sum(1 for agent in self._agents if agent.alive)

    def alive_agents(self) -> list[Agent]:
        return [agent for agent in self._agents if agent.alive]

    def step(self, obstacles: list[Obstacle], tick_index: int, world: WorldConfig) -> None:
        """Step every alive agent against the same obstacle snapshot."""
        for agent in self._agents:
            if agent.alive:
                step(agent, obstacles, tick_index, world)

    @classmethod
    def from_predecessors(
        cls,
        predecessors: "Population",
        config: EvolutionConfig,
        world: WorldConfig,
        factory: ControllerFactory,
        rng: np.random.Generator,
        *,
        elite_selector: EliteSelector | None = None,
        parent_selector: ParentSelector | None = None,
    ) -> tuple["Population", ReproductionSummary]:
        """Breed the next generation from an extinct one.

        The best agents by squared survival time become the elite set. Parents
        are drawn from it by roulette wheel; each child gets a mutated clone of
        its parent's controller. Remaining slots are filled with fresh agents.
        ``predecessors`` is emptied in the process. Returns the new population
        together with a summary of how it was bred.
        """
        if predecessors.is_alive():
            raise EvolutionError(
                f"Cannot reproduce from a living population ({predecessors.survivor_count()} survivors)"
            )
        elite_selector = elite_selector or TruncationEliteSelector()
        parent_selector = parent_selector or RouletteWheelParentSelector()

        agents, predecessors._agents = predecessors._agents, []

        ticks = [score(agent) for agent in agents]
        elites = elite_selector(agents, config.elite_count) if agents else []
        elite_fitness_sum = float(sum(fitness for fitness, _ in elites))
        logger.debug(
            "[Population] Elites: {} | fitness sum={:.1f} | best ticks={}",
            len(elites),
            elite_fitness_sum,
            int(max(ticks, default=0)),
        )

        descendants: list[Agent] = []
        if elites:
            parents = parent_selector.create_parent_iterator(elites, rng)
            while len(descendants) < config.offspring_count:
                parent = next(parents)
                controller = parent.controller.clone()
                controller.mutate(rng, config.mutation_rate)
                descendants.append(Agent.spawn(controller, world, parent_id=parent.id))
        else:
            logger.warning("[Population] No predecessors to breed from, spawning fresh agents only")
        offspring = len(descendants)

        while len(descendants) < config.population_size:
            descendants.append(_fresh_agent(config, world, factory, rng))

        summary = ReproductionSummary(
            elite_ids=[agent.id for _, agent in elites],
            elite_fitness_sum=elite_fitness_sum,
            best_ticks=int(max(ticks, default=0)),
            mean_ticks=float(np.mean(ticks)) if ticks else 0.0,
            offspring=offspring,
            fresh=len(descendants) - offspring,
            uniform_fallback=bool(elites) and elite_fitness_sum <= 0.0,
            survival_ticks=[int(t) for t in ticks],
        )
        return cls(descendants), summary


def _fresh_agent(
    config: EvolutionConfig,
    world: WorldConfig,
    factory: ControllerFactory,
    rng: np.random.Generator,
) -> Agent:
    controller = factory.create(INPUT_COUNT, config.hidden_count, OUTPUT_COUNT, rng)
    return Agent.spawn(controller, world)
