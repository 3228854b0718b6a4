from __future__ import annotations

import numpy as np
from pydantic import BaseModel, Field, model_validator

from flappyevo.world.config import WorldConfig

__all__ = ["Obstacle", "advance", "spawn_allowed"]


class Obstacle(BaseModel):
    """Vertical barrier with a passable gap between ``gap_top`` and ``gap_bottom``."""

    x: float = Field(description="Leading edge (left side) of the obstacle")
    gap_top: float = Field(description="Upper bound of the aperture")
    gap_bottom: float = Field(description="Lower bound of the aperture")

    @model_validator(mode="after")
    def _check_gap(self) -> "Obstacle":
        if not self.gap_top < self.gap_bottom:
            raise ValueError(
                f"gap_top ({self.gap_top}) must be above gap_bottom ({self.gap_bottom})"
            )
        return self

    @property
    def aperture(self) -> float:
        return self.gap_bottom - self.gap_top

    def trailing_edge(self, world: WorldConfig) -> float:
        return self.x + world.obstacle_width

    @classmethod
    def random(cls, world: WorldConfig, rng: np.random.Generator) -> "Obstacle":
        """Create an obstacle at the right edge of the world with a randomized gap."""
        gap_top = float(rng.uniform(world.gap_top_min, world.gap_top_max))
        aperture = float(rng.uniform(world.min_aperture, world.max_aperture))
        return cls(x=world.width, gap_top=gap_top, gap_bottom=gap_top + aperture)


def spawn_allowed(obstacles: list[Obstacle], world: WorldConfig) -> bool:
    """True if the newest obstacle has moved far enough from the spawn point."""
    if not obstacles:
        return True
    return obstacles[-1].x + world.min_distance < world.width


def advance(
    obstacles: list[Obstacle], world: WorldConfig, rng: np.random.Generator
) -> None:
    """Advance the obstacle course by one tick, in place.

    Spawns unconditionally into an empty course and otherwise with
    ``world.spawn_probability``, but never closer than ``world.min_distance``
    to the previous obstacle. Then moves every obstacle left and retires the
    ones whose trailing edge has crossed the origin. The list stays sorted by
    ascending ``x``.
    """
    if not obstacles or rng.random() < world.spawn_probability:
        if spawn_allowed(obstacles, world):
            obstacles.append(Obstacle.random(world, rng))

    for obstacle in obstacles:
        obstacle.x -= world.horizontal_speed

    obstacles[:] = [o for o in obstacles if o.trailing_edge(world) > 0.0]
