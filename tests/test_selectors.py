from collections import Counter
from itertools import islice

import pytest

from flappyevo.evolution.selectors import (
    RouletteWheelParentSelector,
    TruncationEliteSelector,
    score,
    selection_probabilities,
    squared_fitness,
)
from flappyevo.world.agents import Agent
from tests.conftest import ConstantController


def dead_agent(world, ticks: int) -> Agent:
    agent = Agent.spawn(ConstantController(), world)
    agent.kill(ticks)
    return agent


class FixedRng:
    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


def test_fitness_is_survival_time_squared(world):
    agent = dead_agent(world, 12)

    assert score(agent) == 12.0
    assert squared_fitness(agent) == 144.0


@pytest.mark.parametrize(
    "fitnesses",
    [[1.0], [3.0, 1.0], [100.0, 49.0, 25.0, 1.0, 0.0], [1e-9, 2e-9, 7e12]],
)
def test_probabilities_sum_to_one(fitnesses):
    probabilities = selection_probabilities(fitnesses)

    assert sum(probabilities) == pytest.approx(1.0)
    assert all(p >= 0.0 for p in probabilities)


def test_zero_fitness_gives_uniform_probabilities():
    assert selection_probabilities([0.0, 0.0, 0.0, 0.0]) == [0.25] * 4
    assert selection_probabilities([]) == []


def test_truncation_keeps_best_in_descending_order(world):
    agents = [dead_agent(world, t) for t in [3, 9, 1, 7, 5]]

    elites = TruncationEliteSelector()(agents, 3)

    assert [fitness for fitness, _ in elites] == [81.0, 49.0, 25.0]
    assert [agent for _, agent in elites] == [agents[1], agents[3], agents[4]]


def test_truncation_is_stable_for_ties(world):
    agents = [dead_agent(world, 4) for _ in range(5)]

    elites = TruncationEliteSelector()(agents, 2)

    assert [agent for _, agent in elites] == agents[:2]


def test_truncation_returns_all_when_too_few(world):
    agents = [dead_agent(world, 4), dead_agent(world, 2)]

    assert len(TruncationEliteSelector()(agents, 8)) == 2


def test_roulette_follows_fitness_share(rng, world):
    strong, weak = dead_agent(world, 3), dead_agent(world, 1)
    elites = [(9.0, strong), (1.0, weak)]

    draws = Counter(
        agent.id
        for agent in islice(
            RouletteWheelParentSelector().create_parent_iterator(elites, rng), 10000
        )
    )

    assert 0.87 < draws[strong.id] / 10000 < 0.93


def test_roulette_never_picks_zero_share_when_others_positive(rng, world):
    best, useless = dead_agent(world, 2), dead_agent(world, 0)
    elites = [(4.0, best), (0.0, useless)]

    picks = islice(RouletteWheelParentSelector().create_parent_iterator(elites, rng), 500)

    assert all(agent is best for agent in picks)


def test_roulette_uniform_when_all_fitness_zero(rng, world):
    elites = [(0.0, dead_agent(world, 0)) for _ in range(4)]

    draws = Counter(
        agent.id
        for agent in islice(
            RouletteWheelParentSelector().create_parent_iterator(elites, rng), 8000
        )
    )

    assert len(draws) == 4
    assert all(1700 < count < 2300 for count in draws.values())


def test_roulette_falls_back_to_last_elite_on_leftover_mass(world):
    elites = [(1.0, dead_agent(world, 1)), (1.0, dead_agent(world, 1))]

    parent = next(
        RouletteWheelParentSelector().create_parent_iterator(elites, FixedRng(1.5))
    )

    assert parent is elites[-1][1]


def test_roulette_without_elites_yields_nothing(rng):
    assert list(RouletteWheelParentSelector().create_parent_iterator([], rng)) == []
