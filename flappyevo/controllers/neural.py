from __future__ import annotations

from typing import Callable, Literal, Sequence

import numpy as np

from flappyevo.controllers.base import Controller

Activation = Literal["sigmoid", "tanh", "relu"]


def _sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


def _relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(x, 0.0)


_ACTIVATIONS: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "sigmoid": _sigmoid,
    "tanh": np.tanh,
    "relu": _relu,
}


class NeuralController(Controller):
    """Fully connected network with one hidden layer.

    Weights and biases are initialised uniformly in ``[-1, 1)``. Mutation
    perturbs every parameter with probability ``rate`` by Gaussian noise of
    standard deviation ``mutation_scale``.
    """

    def __init__(
        self,
        weights_ih: np.ndarray,
        bias_h: np.ndarray,
        weights_ho: np.ndarray,
        bias_o: np.ndarray,
        *,
        activation: Activation = "sigmoid",
        mutation_scale: float = 0.1,
    ):
        if activation not in _ACTIVATIONS:
            raise ValueError(
                f"Unknown activation '{activation}', expected one of {sorted(_ACTIVATIONS)}"
            )
        if weights_ih.shape[0] != bias_h.shape[0] or weights_ho.shape != (
            bias_o.shape[0],
            bias_h.shape[0],
        ):
            raise ValueError(
                f"Inconsistent layer shapes: {weights_ih.shape}, {bias_h.shape}, "
                f"{weights_ho.shape}, {bias_o.shape}"
            )
        self.weights_ih = weights_ih
        self.bias_h = bias_h
        self.weights_ho = weights_ho
        self.bias_o = bias_o
        self.activation = activation
        self.mutation_scale = mutation_scale

    @classmethod
    def create(
        cls,
        input_count: int,
        hidden_count: int,
        output_count: int,
        rng: np.random.Generator,
        *,
        activation: Activation = "sigmoid",
        mutation_scale: float = 0.1,
    ) -> "NeuralController":
        return cls(
            rng.uniform(-1.0, 1.0, size=(hidden_count, input_count)),
            rng.uniform(-1.0, 1.0, size=hidden_count),
            rng.uniform(-1.0, 1.0, size=(output_count, hidden_count)),
            rng.uniform(-1.0, 1.0, size=output_count),
            activation=activation,
            mutation_scale=mutation_scale,
        )

    @property
    def input_count(self) -> int:
        return self.weights_ih.shape[1]

    @property
    def output_count(self) -> int:
        return self.weights_ho.shape[0]

    def parameters(self) -> list[np.ndarray]:
        return [self.weights_ih, self.bias_h, self.weights_ho, self.bias_o]

    def predict(self, inputs: Sequence[float]) -> list[float]:
        x = np.asarray(inputs, dtype=float)
        if x.shape != (self.input_count,):
            raise ValueError(
                f"Expected {self.input_count} inputs, got shape {x.shape}"
            )
        act = _ACTIVATIONS[self.activation]
        hidden = act(self.weights_ih @ x + self.bias_h)
        return act(self.weights_ho @ hidden + self.bias_o).tolist()

    def mutate(self, rng: np.random.Generator, rate: float) -> None:
        for param in self.parameters():
            mask = rng.random(param.shape) < rate
            param += mask * rng.normal(0.0, self.mutation_scale, size=param.shape)

    def clone(self) -> "NeuralController":
        return NeuralController(
            *(param.copy() for param in self.parameters()),
            activation=self.activation,
            mutation_scale=self.mutation_scale,
        )


class NeuralControllerFactory:
    """Builds :class:`NeuralController` instances with fixed hyperparameters."""

    def __init__(self, activation: Activation = "sigmoid", mutation_scale: float = 0.1):
        if mutation_scale < 0:
            raise ValueError(f"mutation_scale must be non-negative, got {mutation_scale}")
        self.activation = activation
        self.mutation_scale = mutation_scale

    def create(
        self,
        input_count: int,
        hidden_count: int,
        output_count: int,
        rng: np.random.Generator,
    ) -> NeuralController:
        return NeuralController.create(
            input_count,
            hidden_count,
            output_count,
            rng,
            activation=self.activation,
            mutation_scale=self.mutation_scale,
        )
