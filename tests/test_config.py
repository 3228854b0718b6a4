from pathlib import Path

from hydra.utils import instantiate
import numpy as np
from omegaconf import OmegaConf
from pydantic import ValidationError
import pytest

from flappyevo.config.helpers import make_rng
from flappyevo.config.resolvers import register_resolvers
from flappyevo.controllers.neural import NeuralControllerFactory
from flappyevo.evolution.config import EvolutionConfig
from flappyevo.runner.driver import DriverConfig
from flappyevo.world.config import WorldConfig

CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "config.yaml"


def test_default_world_matches_course_constants():
    world = WorldConfig()

    assert (world.width, world.height) == (800.0, 600.0)
    assert world.start_height == pytest.approx(200.0)
    assert world.spawn_probability == 0.002


@pytest.mark.parametrize(
    "overrides",
    [
        {"width": 0.0},
        {"height": -10.0},
        {"max_speed": 0.0},
        {"min_aperture": 200.0, "max_aperture": 100.0},
        {"gap_top_min": 300.0, "gap_top_max": 100.0},
        {"spawn_probability": 1.5},
    ],
)
def test_invalid_world_is_rejected(overrides):
    with pytest.raises(ValidationError):
        WorldConfig(**overrides)


def test_evolution_counts_for_default_population():
    config = EvolutionConfig()

    assert config.elite_count == 8
    assert config.offspring_count == 120
    assert config.fresh_count == 30


def test_invalid_evolution_is_rejected():
    with pytest.raises(ValidationError):
        EvolutionConfig(population_size=0)
    with pytest.raises(ValidationError):
        EvolutionConfig(elite_fraction=0.0)


def test_driver_config_bounds_throttle():
    with pytest.raises(ValidationError):
        DriverConfig(ticks_per_frame=101)
    assert DriverConfig().max_generations is None


def test_seeded_rng_is_reproducible():
    assert make_rng(5).random() == make_rng(5).random()
    assert isinstance(make_rng(), np.random.Generator)


def test_resolvers():
    register_resolvers()
    cfg = OmegaConf.create(
        {"elites": "${ceil_frac:150,0.05}", "third": "${eval:'1 / 3'}"}
    )

    assert cfg.elites == 8
    assert cfg.third == pytest.approx(1 / 3)


def test_shipped_config_instantiates():
    register_resolvers()
    cfg = OmegaConf.load(CONFIG_PATH)

    world = instantiate(cfg.world)
    evolution = instantiate(cfg.evolution)
    driver = instantiate(cfg.driver)
    factory = instantiate(cfg.controller_factory)

    assert world == WorldConfig()
    assert evolution == EvolutionConfig()
    assert driver.ticks_per_frame == 100
    assert isinstance(factory, NeuralControllerFactory)
    assert cfg.summary.elites_per_generation == evolution.elite_count
    assert cfg.summary.offspring_per_generation == evolution.offspring_count
