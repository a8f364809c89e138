"""Error types raised across rulega.

Every error carries a machine readable ``error_type`` plus free-form
``details`` so callers (the evolution engine, the CLI) can report failures
without parsing messages.
"""

from __future__ import annotations

from typing import Any


class RulegaError(Exception):
    """Base class for all rulega errors."""

    def __init__(self, error_type: str, message: str, **details: Any) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = dict(details)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_type!r}, {self.message!r})"


class ValidationError(RulegaError):
    """Invalid configuration input."""


class RuleEvaluationError(RulegaError):
    """A rule constrains a position outside the evaluated example."""


class FitnessCalculationError(RulegaError):
    """Fitness could not be computed; the cause is chained."""


class SelectionError(RulegaError):
    pass


class CrossoverError(RulegaError):
    pass


class MutationError(RulegaError):
    pass


class DataSetError(RulegaError):
    """Malformed or inconsistent labeled data."""


__all__ = [
    "RulegaError",
    "ValidationError",
    "RuleEvaluationError",
    "FitnessCalculationError",
    "SelectionError",
    "CrossoverError",
    "MutationError",
    "DataSetError",
]
