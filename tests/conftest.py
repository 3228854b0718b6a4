from typing import Sequence

import numpy as np
import pytest

from flappyevo.controllers.base import Controller
from flappyevo.evolution.config import EvolutionConfig
from flappyevo.world.config import WorldConfig


class ConstantController(Controller):
    """Always returns the same outputs; counts clones and mutations."""

    def __init__(self, outputs: Sequence[float] = (0.0, 1.0)):
        self.outputs = list(outputs)
        self.predictions = 0
        self.mutations: list[float] = []
        self.cloned_from: "ConstantController | None" = None

    def predict(self, inputs: Sequence[float]) -> list[float]:
        self.predictions += 1
        return list(self.outputs)

    def mutate(self, rng: np.random.Generator, rate: float) -> None:
        self.mutations.append(rate)

    def clone(self) -> "ConstantController":
        copy = ConstantController(self.outputs)
        copy.cloned_from = self
        return copy


class GapFollowerController(Controller):
    """Flaps when falling fast enough below the middle of the next gap."""

    def predict(self, inputs: Sequence[float]) -> list[float]:
        position, velocity, _, gap_top, gap_bottom = inputs
        centre = (gap_top + gap_bottom) / 2
        if position > centre and velocity >= 0.45:
            return [1.0, 0.0]
        return [0.0, 1.0]

    def mutate(self, rng: np.random.Generator, rate: float) -> None:
        pass

    def clone(self) -> "GapFollowerController":
        return GapFollowerController()


class ConstantControllerFactory:
    def __init__(self, outputs: Sequence[float] = (0.0, 1.0)):
        self.outputs = outputs
        self.created = 0

    def create(self, input_count, hidden_count, output_count, rng) -> ConstantController:
        self.created += 1
        return ConstantController(self.outputs)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def world() -> WorldConfig:
    return WorldConfig()


@pytest.fixture
def small_evolution() -> EvolutionConfig:
    return EvolutionConfig(population_size=20)


@pytest.fixture
def constant_factory() -> ConstantControllerFactory:
    return ConstantControllerFactory()
