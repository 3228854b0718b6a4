from abc import ABC, abstractmethod
from typing import Iterator, Sequence

from loguru import logger
import numpy as np

from flappyevo.world.agents import Agent


def score(agent: Agent) -> float:
    """Raw fitness: the number of ticks the agent stayed alive."""
    return float(agent.ticks_survived)


def squared_fitness(agent: Agent) -> float:
    s = score(agent)
    return s * s


class EliteSelector(ABC):
    """Picks the agents of an expiring generation that may reproduce."""

    @abstractmethod
    def __call__(self, agents: list[Agent], total: int) -> list[tuple[float, Agent]]:
        """Return up to ``total`` ``(fitness, agent)`` pairs, best first."""


class TruncationEliteSelector(EliteSelector):
    """Keeps the ``total`` agents with the highest squared fitness.

    ``sorted`` is stable, so agents with equal fitness keep their
    population order.
    """

    def __call__(self, agents: list[Agent], total: int) -> list[tuple[float, Agent]]:
        if total < 1:
            raise ValueError(f"total must be at least 1, got {total}")
        scored = [(squared_fitness(agent), agent) for agent in agents]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        if len(scored) < total:
            logger.warning(
                f"Only {len(scored)} agents available, requested {total} elites. Returning all."
            )
        return scored[:total]


class ParentSelector(ABC):
    """Abstract base class for drawing parents from the elite set."""

    @abstractmethod
    def create_parent_iterator(
        self, elites: list[tuple[float, Agent]], rng: np.random.Generator
    ) -> Iterator[Agent]:
        """Create an iterator that yields one parent per draw.

        Args:
            elites: ``(fitness, agent)`` pairs eligible for reproduction
            rng: Shared random generator

        Returns:
            Iterator yielding selected parents (consumer controls limit via break)
        """


def selection_probabilities(fitnesses: Sequence[float]) -> list[float]:
    """Normalize ``fitnesses`` into probabilities that sum to one.

    Falls back to uniform probabilities when the fitnesses sum to zero.
    """
    if not fitnesses:
        return []
    total = float(sum(fitnesses))
    if total <= 0.0:
        return [1.0 / len(fitnesses)] * len(fitnesses)
    return [f / total for f in fitnesses]


class RouletteWheelParentSelector(ParentSelector):
    """Fitness-proportionate selection.

    Each draw takes ``r`` uniformly from ``[0, 1)`` and walks the elites
    subtracting their probabilities until ``r`` drops to zero or below.
    """

    def create_parent_iterator(
        self, elites: list[tuple[float, Agent]], rng: np.random.Generator
    ) -> Iterator[Agent]:
        if not elites:
            return
        fitnesses = [fitness for fitness, _ in elites]
        if sum(fitnesses) <= 0.0:
            logger.warning(
                "[RouletteWheelParentSelector] Elite fitness sums to zero, selecting uniformly"
            )
        probabilities = selection_probabilities(fitnesses)
        agents = [agent for _, agent in elites]
        while True:
            r = rng.random()
            for probability, agent in zip(probabilities, agents):
                r -= probability
                if r <= 0.0:
                    yield agent
                    break
            else:
                # rounding left a sliver of mass past the last elite
                yield agents[-1]
