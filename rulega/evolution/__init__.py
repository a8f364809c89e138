"""Evolutionary operators for rulega."""

from .candidate import Candidate, CandidateFitness
from .crossover import (
    CrossoverStrategy,
    LeastFittest,
    MirroringStrategy,
    MultiPointAtIndices,
    MultiPointAtPercentages,
    NextFittest,
    RandomMatchup,
    SinglePointAtIndex,
    SinglePointAtPercentage,
)
from .mutation import (
    ConstraintRandomize,
    ConstraintSwap,
    ConstraintValueRandomize,
    MutationOptions,
    MutationStrategy,
)
from .population import Population
from .selection import (
    Allow,
    Disallow,
    RouletteSelection,
    SelectionOptions,
    SelectionStrategy,
    TournamentSelection,
)

__all__ = [
    "Candidate",
    "CandidateFitness",
    "Population",
    "Allow",
    "Disallow",
    "SelectionOptions",
    "SelectionStrategy",
    "TournamentSelection",
    "RouletteSelection",
    "CrossoverStrategy",
    "MirroringStrategy",
    "LeastFittest",
    "NextFittest",
    "RandomMatchup",
    "SinglePointAtIndex",
    "SinglePointAtPercentage",
    "MultiPointAtIndices",
    "MultiPointAtPercentages",
    "MutationStrategy",
    "MutationOptions",
    "ConstraintSwap",
    "ConstraintRandomize",
    "ConstraintValueRandomize",
]
