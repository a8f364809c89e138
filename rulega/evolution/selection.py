"""Selection strategies over a fitness-ranked candidate list.

Both strategies share ``SelectionOptions``: how many entries to return and
whether the same candidate may be chosen more than once.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence, Union

from rulega.evolution.candidate import CandidateFitness
from rulega.utils.validation import SelectionError


@dataclass(frozen=True)
class Allow:
    """Duplicates may appear in the selection."""


@dataclass(frozen=True)
class Disallow:
    """Duplicates are redrawn; ``retries`` consecutive duplicates fail the selection."""

    retries: int


DuplicateHandling = Union[Allow, Disallow]


@dataclass
class SelectionOptions:
    selection_size: int
    duplicates: DuplicateHandling = field(default_factory=Allow)


def _rng_fail(retries: int) -> SelectionError:
    return SelectionError("rng_fail", "rng failed to get a unique random value", retries=retries)


def _empty() -> SelectionError:
    return SelectionError("empty_candidates", "candidates are empty")


@dataclass
class TournamentSelection:
    tournament_size: int

    def _draw_index(self, candidates: Sequence[CandidateFitness], results: list[CandidateFitness],
                    options: SelectionOptions, rng: random.Random) -> int:
        if isinstance(options.duplicates, Allow):
            return rng.randrange(len(candidates))
        failures = 0
        while True:
            index = rng.randrange(len(candidates))
            if candidates[index] not in results:
                return index
            failures += 1
            if failures >= options.duplicates.retries:
                raise _rng_fail(options.duplicates.retries)

    def select(self, candidates: Sequence[CandidateFitness], options: SelectionOptions,
               rng: random.Random) -> list[CandidateFitness]:
        results: list[CandidateFitness] = []
        while len(results) < options.selection_size:
            best: CandidateFitness | None = None
            if candidates:
                for _ in range(self.tournament_size):
                    entry = candidates[self._draw_index(candidates, results, options, rng)]
                    # ties keep the earlier draw
                    if best is None or entry.fitness > best.fitness:
                        best = entry
            if best is None:
                raise _empty()
            results.append(best)
        return results


@dataclass
class RouletteSelection:
    """Fitness-proportional selection.

    One random draw and one running cumulative sum serve every pick of a
    call. After the first pick the sum already exceeds the draw, so every
    later pick lands on the first candidate of the list, whatever its fitness.
    """

    def select(self, candidates: Sequence[CandidateFitness], options: SelectionOptions,
               rng: random.Random) -> list[CandidateFitness]:
        results: list[CandidateFitness] = []
        if options.selection_size <= 0:
            return results

        total = sum(entry.fitness for entry in candidates)
        if total <= 0:
            raise _empty()
        draw = rng.randrange(total)
        cumulative_total = 0
        failures = 0

        while len(results) < options.selection_size:
            selected: CandidateFitness | None = None
            for entry in candidates:
                cumulative_total += entry.fitness
                if draw < cumulative_total:
                    selected = entry
                    break
            if selected is None:
                raise _empty()

            if isinstance(options.duplicates, Disallow) and selected in results:
                failures += 1
                if failures >= options.duplicates.retries:
                    raise _rng_fail(options.duplicates.retries)
            else:
                failures = 0
                results.append(selected)
        return results


SelectionVariant = Union[TournamentSelection, RouletteSelection]


@dataclass
class SelectionStrategy:
    options: SelectionOptions
    variant: SelectionVariant

    def select(self, candidates: Sequence[CandidateFitness], rng: random.Random) -> list[CandidateFitness]:
        return self.variant.select(candidates, self.options, rng)


__all__ = [
    "Allow",
    "Disallow",
    "DuplicateHandling",
    "SelectionOptions",
    "TournamentSelection",
    "RouletteSelection",
    "SelectionStrategy",
]
