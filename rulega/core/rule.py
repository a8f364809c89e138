"""Rule: a sparse partial pattern over fixed-width symbol strings."""

from __future__ import annotations

import random
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from rulega.utils.retry import attempt
from rulega.utils.validation import RuleEvaluationError

PLACEHOLDER = "_"


class Rule:
    """Mapping from position to required symbol; absent positions are don't-care.

    Equality and hashing go through the canonical string form, so two rules
    built from the same constraints in a different order are the same rule.
    A rule held by a Candidate must not be changed in place; mutation works
    on a ``copy()``.
    """

    __slots__ = ("_constraints",)

    def __init__(self, constraints: Mapping[int, str] | Iterable[tuple[int, str]] | None = None) -> None:
        self._constraints: dict[int, str] = dict(constraints or {})

    @property
    def constraints(self) -> Mapping[int, str]:
        return MappingProxyType(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)

    def copy(self) -> "Rule":
        return Rule(self._constraints)

    def evaluate(self, example: str) -> bool:
        """True iff every constrained position holds the required symbol.

        Raises ``RuleEvaluationError`` whenever any constrained position lies
        beyond the example, whatever the other positions hold.
        """
        width = len(example)
        if self._constraints:
            highest = max(self._constraints)
            if highest >= width:
                raise RuleEvaluationError(
                    "index_out_of_range",
                    "the rule contains constraints that is out of the index range of the input",
                    index=highest,
                    width=width,
                )
        return all(example[index] == symbol for index, symbol in self._constraints.items())

    # In-place edits, used by mutation on copies
    def set(self, position: int, symbol: str) -> None:
        self._constraints[position] = symbol

    def discard(self, position: int) -> str | None:
        return self._constraints.pop(position, None)

    def swap(self, first: int, second: int) -> None:
        """Exchange the (possibly absent) values held at two positions."""
        value_first = self._constraints.pop(first, None)
        value_second = self._constraints.pop(second, None)
        if value_first is not None:
            self._constraints[second] = value_first
        if value_second is not None:
            self._constraints[first] = value_second

    def move(self, source: int, target: int) -> None:
        value = self._constraints.pop(source, None)
        if value is not None:
            self._constraints[target] = value

    @classmethod
    def generate(cls, rng: random.Random, spec: Any) -> "Rule":
        """Random rule with a constraint count drawn from the configured range.

        Position collisions are retried up to the configured consecutive
        failure cap, after which the rule is returned with fewer constraints.
        """
        limits = spec.initial_generation.constraints
        target = rng.randrange(limits.min, limits.max)
        rule = cls()

        def draw_free_position() -> int | None:
            index = rng.randrange(0, spec.max_index)
            return None if index in rule._constraints else index

        while len(rule) < target:
            index = attempt(draw_free_position, limits.retries)
            if index is None:
                break
            rule._constraints[index] = spec.alphabet[rng.randrange(0, len(spec.alphabet))]
        return rule

    def canonical(self) -> str:
        output: list[str] = []
        for index in sorted(self._constraints):
            while index > len(output):
                output.append(PLACEHOLDER)
            output.append(self._constraints[index])
        return "".join(output)

    def __str__(self) -> str:
        return self.canonical()

    def __repr__(self) -> str:
        return f"Rule({self.canonical()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.canonical() == other.canonical()

    def __hash__(self) -> int:
        return hash(self.canonical())

    @classmethod
    def from_pattern(cls, pattern: str) -> "Rule":
        """Build a rule from its canonical form, e.g. ``"1_0"``."""
        return cls((i, ch) for i, ch in enumerate(pattern) if ch != PLACEHOLDER)


__all__ = ["Rule", "PLACEHOLDER"]
