"""Shared utilities: randomness, retries and error types."""

from .retry import attempt  # noqa: F401
from .rng_manager import RNGManager  # noqa: F401
from .validation import (  # noqa: F401
    CrossoverError,
    DataSetError,
    FitnessCalculationError,
    MutationError,
    RuleEvaluationError,
    RulegaError,
    SelectionError,
    ValidationError,
)

__all__ = [
    'attempt',
    'RNGManager',
    'RulegaError',
    'ValidationError',
    'RuleEvaluationError',
    'FitnessCalculationError',
    'SelectionError',
    'CrossoverError',
    'MutationError',
    'DataSetError',
]
