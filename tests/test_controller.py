import numpy as np
import pytest

from flappyevo.controllers.base import INPUT_COUNT, OUTPUT_COUNT
from flappyevo.controllers.neural import NeuralController, NeuralControllerFactory

OBSERVATION = [0.3, -0.2, 0.8, 0.25, 0.45]


@pytest.fixture
def controller(rng) -> NeuralController:
    return NeuralController.create(INPUT_COUNT, 4, OUTPUT_COUNT, rng)


def test_create_builds_layers_of_requested_size(controller):
    assert controller.weights_ih.shape == (4, INPUT_COUNT)
    assert controller.bias_h.shape == (4,)
    assert controller.weights_ho.shape == (OUTPUT_COUNT, 4)
    assert controller.bias_o.shape == (OUTPUT_COUNT,)
    for param in controller.parameters():
        assert np.all((param >= -1.0) & (param < 1.0))


def test_predict_returns_two_sigmoid_outputs(controller):
    output = controller.predict(OBSERVATION)

    assert len(output) == OUTPUT_COUNT
    assert all(0.0 < value < 1.0 for value in output)


def test_predict_is_pure(controller):
    before = [param.copy() for param in controller.parameters()]

    first = controller.predict(OBSERVATION)
    second = controller.predict(OBSERVATION)

    assert first == second
    for old, new in zip(before, controller.parameters()):
        np.testing.assert_array_equal(old, new)


def test_predict_rejects_wrong_input_size(controller):
    with pytest.raises(ValueError):
        controller.predict([0.1, 0.2])


def test_clone_is_independent(controller, rng):
    clone = controller.clone()
    for original, copied in zip(controller.parameters(), clone.parameters()):
        np.testing.assert_array_equal(original, copied)
        assert original is not copied

    before = [param.copy() for param in controller.parameters()]
    clone.mutate(rng, 1.0)

    for old, current, mutated in zip(before, controller.parameters(), clone.parameters()):
        np.testing.assert_array_equal(old, current)
        assert not np.array_equal(old, mutated)


def test_zero_rate_mutation_changes_nothing(controller, rng):
    before = [param.copy() for param in controller.parameters()]
    controller.mutate(rng, 0.0)

    for old, new in zip(before, controller.parameters()):
        np.testing.assert_array_equal(old, new)


def test_partial_rate_mutates_a_share_of_weights(rng):
    controller = NeuralController.create(INPUT_COUNT, 64, OUTPUT_COUNT, rng)
    before = np.concatenate([p.ravel() for p in controller.parameters()])

    controller.mutate(rng, 0.1)

    after = np.concatenate([p.ravel() for p in controller.parameters()])
    changed = np.mean(before != after)
    assert 0.04 < changed < 0.16


@pytest.mark.parametrize("activation", ["sigmoid", "tanh", "relu"])
def test_factory_applies_hyperparameters(rng, activation):
    factory = NeuralControllerFactory(activation=activation, mutation_scale=0.5)
    controller = factory.create(INPUT_COUNT, 3, OUTPUT_COUNT, rng)

    assert controller.activation == activation
    assert controller.mutation_scale == 0.5
    assert controller.clone().activation == activation
    assert len(controller.predict(OBSERVATION)) == OUTPUT_COUNT


def test_unknown_activation_is_rejected(rng):
    with pytest.raises(ValueError):
        NeuralController.create(INPUT_COUNT, 4, OUTPUT_COUNT, rng, activation="softmax")


def test_negative_mutation_scale_is_rejected():
    with pytest.raises(ValueError):
        NeuralControllerFactory(mutation_scale=-1.0)
