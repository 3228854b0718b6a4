from flappyevo.controllers.base import (
    INPUT_COUNT,
    OUTPUT_COUNT,
    Controller,
    ControllerFactory,
)
from flappyevo.controllers.neural import NeuralController, NeuralControllerFactory

__all__ = [
    "INPUT_COUNT",
    "OUTPUT_COUNT",
    "Controller",
    "ControllerFactory",
    "NeuralController",
    "NeuralControllerFactory",
]
