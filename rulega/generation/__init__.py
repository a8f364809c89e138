"""Evolution driver and staged population changes for rulega."""

from .engine import (  # noqa: F401
    EvolutionEngine,
    EvolutionHistory,
    EvolutionState,
    GenerationReport,
    run_evolution,
)
from .transaction import ChangeBuffer, TransactionManager  # noqa: F401

__all__ = [
    'run_evolution',
    'EvolutionEngine',
    'EvolutionHistory',
    'EvolutionState',
    'GenerationReport',
    'ChangeBuffer',
    'TransactionManager',
]
