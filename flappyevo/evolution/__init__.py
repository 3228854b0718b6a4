from __future__ import annotations

from flappyevo.evolution.config import EvolutionConfig
from flappyevo.evolution.metrics import GenerationMetrics
from flappyevo.evolution.population import Population, ReproductionSummary
from flappyevo.evolution.selectors import (
    EliteSelector,
    ParentSelector,
    RouletteWheelParentSelector,
    TruncationEliteSelector,
    score,
    selection_probabilities,
    squared_fitness,
)

__all__ = [
    "EliteSelector",
    "EvolutionConfig",
    "GenerationMetrics",
    "ParentSelector",
    "Population",
    "ReproductionSummary",
    "RouletteWheelParentSelector",
    "TruncationEliteSelector",
    "score",
    "selection_probabilities",
    "squared_fitness",
]
