"""Constraint-level mutation operators applied to a population in place.

Four nested percentage gates decide what gets mutated: the whole phase
(``chance``), each candidate, each of its rules, and each position in
``[0, max_index)`` of a chosen rule. Positions passing every gate are handed
to the configured variant.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Union

from rulega.core.rule import Rule
from rulega.evolution.candidate import Candidate
from rulega.utils.validation import MutationError


def _gate(rng: random.Random, percent: int | None) -> bool:
    """Bernoulli draw succeeding with probability ``percent``/100."""
    percent = percent or 0
    if percent <= 0:
        return False
    return rng.randrange(100) < percent


@dataclass
class ConstraintSwap:
    """Exchange the values at ``position`` and ``(position + delta) mod max_index``."""

    delta: int = 1

    def apply(self, rule: Rule, position: int, spec: Any, rng: random.Random) -> None:
        rule.swap(position, (position + self.delta) % spec.max_index)


@dataclass
class ConstraintRandomize:
    """Move the value at ``position`` to a random unconstrained position.

    Collisions with constrained positions are redrawn. Once more than
    ``retries`` draws collided, either swap with the last colliding position
    (``swap_if_fail``) or raise ``MutationError``.
    """

    swap_if_fail: bool = False
    retries: int = 10

    def apply(self, rule: Rule, position: int, spec: Any, rng: random.Random) -> None:
        failures = 0
        while True:
            new_position = rng.randrange(spec.max_index)
            if new_position not in rule.constraints:
                rule.move(position, new_position)
                return
            failures += 1
            if failures > self.retries:
                if self.swap_if_fail:
                    rule.swap(position, new_position)
                    return
                raise MutationError(
                    "rng_fail",
                    "rng failed to generate a unique value",
                    position=position,
                    retries=self.retries,
                )


@dataclass
class ConstraintValueRandomize:
    """Reassign the symbol at ``position``.

    A constrained position is removed with probability
    ``1 / (len(alphabet) + 1)`` and otherwise gets a uniformly random symbol,
    which may equal the current one. An unconstrained position always gets
    a random symbol.
    """

    def apply(self, rule: Rule, position: int, spec: Any, rng: random.Random) -> None:
        alphabet = spec.alphabet
        if position in rule.constraints and rng.randrange(len(alphabet) + 1) == 0:
            rule.discard(position)
            return
        rule.set(position, alphabet[rng.randrange(len(alphabet))])


MutationVariant = Union[ConstraintSwap, ConstraintRandomize, ConstraintValueRandomize]


@dataclass
class MutationOptions:
    """Percent chances; None behaves as 0."""

    chance: int | None = None
    chance_per_candidate: int | None = None
    chance_per_rule: int | None = None
    chance_per_constraint: int | None = None


@dataclass
class MutationStrategy:
    variant: MutationVariant
    options: MutationOptions = field(default_factory=MutationOptions)

    def mutate_candidate(self, candidate: Candidate, spec: Any, rng: random.Random) -> Candidate | None:
        """Mutated copy of ``candidate``, or None if no position passed the gates."""
        if not _gate(rng, self.options.chance_per_candidate):
            return None

        rules = [rule.copy() for rule in candidate.rules]
        ran = False
        for rule in rules:
            if not _gate(rng, self.options.chance_per_rule):
                continue
            for position in range(spec.max_index):
                if not _gate(rng, self.options.chance_per_constraint):
                    continue
                ran = True
                self.variant.apply(rule, position, spec, rng)

        if not ran:
            return None
        return Candidate(
            rules=tuple(rules),
            mutation_count=candidate.mutation_count + 1,
            birth_generation_id=candidate.birth_generation_id,
        )

    def mutate(self, population: Any, spec: Any, rng: random.Random, rng_manager: Any | None = None) -> int:
        """Mutate ``population`` in place; returns the number of replaced candidates.

        Mutated candidates are only kept when they differ from their original,
        are not already members, and were not produced earlier in this pass.
        Nothing is applied if an operator raises.
        """
        from rulega.generation.transaction import TransactionManager

        if not _gate(rng, self.options.chance):
            return 0

        tm = TransactionManager(population=population, rng_manager=rng_manager)
        tm.begin()
        try:
            for original in population.candidates:
                mutated = self.mutate_candidate(original, spec, rng)
                if mutated is None:
                    continue
                if mutated != original and mutated not in population and not tm.buffer.is_staged(mutated):
                    tm.buffer.replace(original, mutated)
        except MutationError:
            tm.rollback()
            raise
        return len(tm.commit())


__all__ = [
    "ConstraintSwap",
    "ConstraintRandomize",
    "ConstraintValueRandomize",
    "MutationOptions",
    "MutationStrategy",
]
