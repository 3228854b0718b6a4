from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class EvolutionConfig(BaseModel):
    """Configuration options controlling reproduction between generations."""

    population_size: int = Field(default=150, gt=0)
    elite_fraction: float = Field(
        default=0.05,
        gt=0,
        le=1,
        description="Share of each generation kept as eligible parents",
    )
    offspring_fraction: float = Field(
        default=0.8,
        ge=0,
        le=1,
        description="Share of the next generation bred from elites; the rest is fresh",
    )
    mutation_rate: float = Field(default=0.1, ge=0, le=1)
    hidden_count: int = Field(
        default=4, gt=0, description="Hidden units of freshly created controllers"
    )
    model_config = ConfigDict(frozen=True)

    @property
    def elite_count(self) -> int:
        return math.ceil(self.population_size * self.elite_fraction)

    @property
    def offspring_count(self) -> int:
        return math.ceil(self.offspring_fraction * self.population_size)

    @property
    def fresh_count(self) -> int:
        return self.population_size - self.offspring_count
