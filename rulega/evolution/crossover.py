"""Crossover: matchup, mating and mirroring strategies.

A ``CrossoverStrategy`` composes two independent choices:

- the matchup strategy pairs the selected candidates (its input is expected
  to be sorted ascending by fitness);
- the mating strategy cuts each parent's ordered rules at one or more split
  points and recombines them into exactly two offspring.

The mirroring option decides how parent B's split point relates to the one
computed for it: kept as is, or replaced with ``abs(len(B) - split)``.
"""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass, field
from typing import Sequence, Union

from rulega.core.rule import Rule
from rulega.evolution.candidate import Candidate, CandidateFitness
from rulega.utils.validation import CrossoverError

Matchup = tuple[CandidateFitness, CandidateFitness]


class MirroringStrategy(enum.Enum):
    NEVER = "never"
    ALWAYS_MIRROR = "always_mirror"
    MIRROR_IF_ASEXUAL = "mirror_if_asexual"

    def apply(self, split: int, length: int, asexual: bool) -> int:
        if self is MirroringStrategy.ALWAYS_MIRROR or (
            self is MirroringStrategy.MIRROR_IF_ASEXUAL and asexual
        ):
            return abs(length - split)
        return split


# Matchup strategies

@dataclass
class LeastFittest:
    """Pair the i-th entry with the (n-1-i)-th, excluding the fittest as a first parent."""

    def pair(self, candidates: Sequence[CandidateFitness], rng: random.Random) -> list[Matchup]:
        return list(zip(candidates[:-1], reversed(candidates[1:])))


@dataclass
class NextFittest:
    """Pair every entry with its immediate fitness successor."""

    def pair(self, candidates: Sequence[CandidateFitness], rng: random.Random) -> list[Matchup]:
        return list(zip(candidates[:-1], candidates[1:]))


@dataclass
class RandomMatchup:
    allow_asexual: bool = False
    allow_duplicates: bool = False

    def pair(self, candidates: Sequence[CandidateFitness], rng: random.Random) -> list[Matchup]:
        count = len(candidates)
        if count == 1 and not self.allow_asexual:
            raise CrossoverError(
                "cant_generate_non_asexual_matchup_with_one_candidate",
                "cant generate a non asexual matchup with a single candidate",
            )

        matchups: list[tuple[int, int]] = []
        for index in range(count):
            partner = rng.randrange(count)
            if not self.allow_asexual and partner == index:
                partner = (partner + 1) % count

            # pairs are ordered and each index is visited once, so this never
            # finds a repeat; allow_duplicates therefore does not change the result
            if not self.allow_duplicates:
                checks = 0
                while (index, partner) in matchups and checks < count:
                    partner = (partner + 1) % count
                    checks += 1
                if (index, partner) in matchups:
                    # no unused partner left for this index
                    continue
            matchups.append((index, partner))
        return [(candidates[a], candidates[b]) for a, b in matchups]


MatchupStrategy = Union[LeastFittest, NextFittest, RandomMatchup]


# Mating strategies

def _percent_of(percentage: int, length: int) -> int:
    # values over 100 are not validated; floor of the float product
    return int((percentage / 100.0) * length)


def _ordered(start: int, end: int) -> tuple[int, int]:
    return min(start, end), max(start, end)


def _single_point(a: CandidateFitness, b: CandidateFitness, split_a: int, split_b: int) -> tuple[Candidate, Candidate]:
    rules_a = a.candidate.rules
    rules_b = b.candidate.rules
    first_child = Candidate.from_rules(rules_a[:split_a] + rules_b[split_b:])
    second_child = Candidate.from_rules(rules_b[:split_b] + rules_a[split_a:])
    return first_child, second_child


def _multi_point(a: CandidateFitness, b: CandidateFitness,
                 segments: Sequence[tuple[tuple[int, int], tuple[int, int]]]) -> tuple[Candidate, Candidate]:
    rules_a = a.candidate.rules
    rules_b = b.candidate.rules
    first_child: dict[Rule, None] = {}
    second_child: dict[Rule, None] = {}
    for (start_a, end_a), (start_b, end_b) in segments:
        slice_a = rules_a[start_a:end_a]
        slice_b = rules_b[start_b:end_b]
        first_child.update(dict.fromkeys(slice_a + slice_b))
        second_child.update(dict.fromkeys(slice_b + slice_a))
    return Candidate.from_rules(first_child), Candidate.from_rules(second_child)


@dataclass
class SinglePointAtIndex:
    split_at: int

    def mate(self, a: CandidateFitness, b: CandidateFitness,
             mirroring: MirroringStrategy) -> tuple[Candidate, Candidate]:
        split_a = int(self.split_at)
        split_b = mirroring.apply(split_a, len(b.candidate), a == b)
        return _single_point(a, b, split_a, split_b)


@dataclass
class SinglePointAtPercentage:
    split_at: int

    def mate(self, a: CandidateFitness, b: CandidateFitness,
             mirroring: MirroringStrategy) -> tuple[Candidate, Candidate]:
        split_a = _percent_of(self.split_at, len(a.candidate))
        split_b = _percent_of(self.split_at, len(b.candidate))
        split_b = mirroring.apply(split_b, len(b.candidate), a == b)
        return _single_point(a, b, split_a, split_b)


@dataclass
class MultiPointAtIndices:
    split_at: list[tuple[int, int]] = field(default_factory=list)

    def mate(self, a: CandidateFitness, b: CandidateFitness,
             mirroring: MirroringStrategy) -> tuple[Candidate, Candidate]:
        asexual = a == b
        length_b = len(b.candidate)
        segments = []
        for start, end in self.split_at:
            start_a, end_a = _ordered(int(start), int(end))
            start_b, end_b = _ordered(
                mirroring.apply(start_a, length_b, asexual),
                mirroring.apply(end_a, length_b, asexual),
            )
            segments.append(((start_a, end_a), (start_b, end_b)))
        return _multi_point(a, b, segments)


@dataclass
class MultiPointAtPercentages:
    split_at: list[tuple[int, int]] = field(default_factory=list)

    def mate(self, a: CandidateFitness, b: CandidateFitness,
             mirroring: MirroringStrategy) -> tuple[Candidate, Candidate]:
        asexual = a == b
        length_a = len(a.candidate)
        length_b = len(b.candidate)
        segments = []
        for start, end in self.split_at:
            start_a, end_a = _ordered(_percent_of(start, length_a), _percent_of(end, length_a))
            start_b, end_b = _ordered(_percent_of(start, length_b), _percent_of(end, length_b))
            start_b, end_b = _ordered(
                mirroring.apply(start_b, length_b, asexual),
                mirroring.apply(end_b, length_b, asexual),
            )
            segments.append(((start_a, end_a), (start_b, end_b)))
        return _multi_point(a, b, segments)


MatingStrategy = Union[SinglePointAtIndex, SinglePointAtPercentage, MultiPointAtIndices, MultiPointAtPercentages]


@dataclass
class CrossoverStrategy:
    matchup_strategy: MatchupStrategy
    mating_strategy: MatingStrategy
    mirroring: MirroringStrategy = MirroringStrategy.NEVER

    def matchup(self, candidates: Sequence[CandidateFitness], rng: random.Random) -> list[Matchup]:
        """Pairs for mating; ``candidates`` must be sorted ascending by fitness."""
        return self.matchup_strategy.pair(candidates, rng)

    def crossover(self, candidates: Sequence[CandidateFitness], rng: random.Random) -> list[Candidate]:
        """Two offspring per matchup, in matchup order."""
        offspring: list[Candidate] = []
        for a, b in self.matchup(candidates, rng):
            offspring.extend(self.mating_strategy.mate(a, b, self.mirroring))
        return offspring


__all__ = [
    "MirroringStrategy",
    "LeastFittest",
    "NextFittest",
    "RandomMatchup",
    "SinglePointAtIndex",
    "SinglePointAtPercentage",
    "MultiPointAtIndices",
    "MultiPointAtPercentages",
    "CrossoverStrategy",
]
