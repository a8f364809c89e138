"""Candidate: one member of the population, a set of unique rules."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from rulega.core.rule import Rule
from rulega.utils.retry import attempt
from rulega.utils.validation import FitnessCalculationError, RuleEvaluationError


@dataclass(eq=False)
class Candidate:
    """Set of rules with mutation/birth bookkeeping.

    Attributes:
        rules: Insertion-ordered rule set; duplicates collapse on construction
        mutation_count: Number of committed mutations that produced this candidate
        birth_generation_id: Generation this candidate was inserted at, if known

    Equality and hash only look at the rule set.
    """

    rules: tuple[Rule, ...] = ()
    mutation_count: int = 0
    birth_generation_id: int | None = None
    _rule_set: frozenset = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.rules = tuple(dict.fromkeys(self.rules))
        self._rule_set = frozenset(self.rules)

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> "Candidate":
        return cls(rules=tuple(rules))

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return self._rule_set == other._rule_set

    def __hash__(self) -> int:
        return hash(self._rule_set)

    def increment_mutation_count(self) -> None:
        self.mutation_count += 1

    def age(self, current_generation_id: int) -> int | None:
        if self.birth_generation_id is None:
            return None
        return current_generation_id - self.birth_generation_id

    def calculate_fitness(self, data_set: Iterable[Any]) -> int:
        """Number of examples at least one rule classifies correctly."""
        fitness = 0
        for data_item in data_set:
            for rule in self.rules:
                try:
                    result = "1" if rule.evaluate(data_item.as_str()) else "0"
                except RuleEvaluationError as exc:
                    raise FitnessCalculationError(
                        "rule_evaluation",
                        f"fitness calculation failed: {exc.message}",
                        rule=str(rule),
                        **exc.details,
                    ) from exc
                if result == data_item.output():
                    fitness += 1
                    break
        return fitness

    @classmethod
    def generate(cls, rng: random.Random, spec: Any) -> "Candidate":
        limits = spec.initial_generation.rules
        target = rng.randrange(limits.min, limits.max)
        rules: dict[Rule, None] = {}

        def draw_new_rule() -> Rule | None:
            rule = Rule.generate(rng, spec)
            return None if rule in rules else rule

        while len(rules) < target:
            rule = attempt(draw_new_rule, limits.retries)
            if rule is None:
                break
            rules[rule] = None
        return cls(rules=tuple(rules))


@dataclass(frozen=True)
class CandidateFitness:
    """A candidate paired with its fitness for one generation."""

    candidate: Candidate
    fitness: int


__all__ = ["Candidate", "CandidateFitness"]
