"""Transaction management for staged population replacements.

Implements a simple TransactionManager with a ChangeBuffer that:
- Stages (old, new) candidate replacements produced during a mutation pass
- On begin(), snapshots RNGManager state
- On commit(), applies the staged replacements to the Population as
  paired remove-old/insert-new operations and returns the applied pairs
- On rollback(), clears staged operations and restores RNGManager state
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from rulega.evolution.candidate import Candidate


class ChangeBuffer:
    """In-memory buffer for staging population replacements prior to commit."""

    def __init__(self) -> None:
        self._replacements: list[tuple[Candidate, Candidate]] = []
        self._staged_new: set[Candidate] = set()

    def reset(self) -> None:
        self._replacements.clear()
        self._staged_new.clear()

    def __len__(self) -> int:
        return len(self._replacements)

    def is_staged(self, candidate: Candidate) -> bool:
        """True if ``candidate`` is already the result of a staged replacement."""
        return candidate in self._staged_new

    def replace(self, old: Candidate, new: Candidate) -> bool:
        if new in self._staged_new:
            return False
        self._replacements.append((old, new))
        self._staged_new.add(new)
        return True

    @property
    def replacements(self) -> list[tuple[Candidate, Candidate]]:
        return list(self._replacements)


@dataclass
class TransactionManager:
    population: Any
    rng_manager: Any | None = None
    buffer: ChangeBuffer = field(default_factory=ChangeBuffer)

    _rng_state_snapshot: dict | None = None

    def begin(self) -> None:
        """Begin a transaction by snapshotting RNG state and clearing buffer."""
        if self.rng_manager is not None:
            self._rng_state_snapshot = self.rng_manager.get_state()
        self.buffer.reset()

    def rollback(self) -> None:
        """Discard staged operations and restore RNG state."""
        self.buffer.reset()
        if self._rng_state_snapshot is not None and self.rng_manager is not None:
            self.rng_manager.set_state(self._rng_state_snapshot)
        self._rng_state_snapshot = None

    def commit(self) -> list[tuple[Candidate, Candidate]]:
        """Apply staged replacements. Returns the (old, new) pairs applied."""
        applied: list[tuple[Candidate, Candidate]] = []
        for old, new in self.buffer.replacements:
            if not self.population.remove(old):
                logging.warning("Staged replacement refers to a candidate no longer in the population")
            if not self.population.insert(new):
                logging.warning("Duplicate candidate detected during commit")
                continue
            applied.append((old, new))

        # Done - clear buffer; RNG state stays as current state
        self.buffer.reset()
        self._rng_state_snapshot = None
        return applied


__all__ = ["ChangeBuffer", "TransactionManager"]
