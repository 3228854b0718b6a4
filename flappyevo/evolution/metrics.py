from __future__ import annotations

from pydantic import BaseModel, Field

from flappyevo.evolution.population import ReproductionSummary


class GenerationMetrics(BaseModel):
    """Running totals across all generations of a run."""

    total_generations: int = Field(
        default=0, description="Total number of completed generations"
    )
    total_ticks: int = Field(default=0, description="Total ticks simulated")
    agents_evaluated: int = Field(
        default=0, description="Total number of agents that lived and died"
    )
    last_best_ticks: int = Field(
        default=0, description="Longest survival in the last completed generation"
    )
    last_mean_ticks: float = Field(
        default=0.0, description="Mean survival in the last completed generation"
    )
    best_ticks_ever: int = Field(
        default=0, description="Longest survival across all generations"
    )
    uniform_fallbacks: int = Field(
        default=0,
        description="Generations whose elites all had zero fitness",
    )

    def record_tick(self) -> None:
        self.total_ticks += 1

    def record_generation(self, population_size: int, summary: ReproductionSummary) -> None:
        """Record the outcome of a generation that just went extinct."""
        self.total_generations += 1
        self.agents_evaluated += population_size
        self.last_best_ticks = summary.best_ticks
        self.last_mean_ticks = summary.mean_ticks
        self.best_ticks_ever = max(self.best_ticks_ever, summary.best_ticks)
        if summary.uniform_fallback:
            self.uniform_fallbacks += 1
