from abc import ABC, abstractmethod
from typing import Protocol, Sequence

import numpy as np

INPUT_COUNT = 5
OUTPUT_COUNT = 2


class Controller(ABC):
    """Policy steering a single agent.

    The simulation only relies on these three capabilities and never looks at
    how a controller is represented internally.
    """

    @abstractmethod
    def predict(self, inputs: Sequence[float]) -> Sequence[float]:
        """Map the normalized observation to action scores.

        Must not change the controller's state.
        """

    @abstractmethod
    def mutate(self, rng: np.random.Generator, rate: float) -> None:
        """Perturb the controller in place; ``rate`` governs the intensity."""

    @abstractmethod
    def clone(self) -> "Controller":
        """Return a deep copy that shares no mutable state with this one."""


class ControllerFactory(Protocol):
    """Creates freshly initialised controllers."""

    def create(
        self,
        input_count: int,
        hidden_count: int,
        output_count: int,
        rng: np.random.Generator,
    ) -> Controller:
        pass
