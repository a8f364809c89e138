"""Population: a set of unique candidates plus a generation counter."""

from __future__ import annotations

import logging
import random
from typing import Any, Iterable, Iterator

from rulega.evolution.candidate import Candidate, CandidateFitness
from rulega.utils.retry import attempt


class Population:
    """Insertion-ordered set of structurally unique candidates."""

    def __init__(self, candidates: Iterable[Candidate] = (), generation: int = 1) -> None:
        self._candidates: dict[Candidate, Candidate] = {}
        self._generation = int(generation)
        for candidate in candidates:
            self.insert(candidate)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return tuple(self._candidates.values())

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self.candidates)

    def __contains__(self, candidate: object) -> bool:
        return candidate in self._candidates

    def insert(self, candidate: Candidate) -> bool:
        """Add ``candidate`` unless a structurally equal one is present."""
        if candidate in self._candidates:
            return False
        self._candidates[candidate] = candidate
        return True

    def remove(self, candidate: Candidate) -> bool:
        return self._candidates.pop(candidate, None) is not None

    def get(self, candidate: Candidate) -> Candidate | None:
        """The stored member equal to ``candidate``, with its own bookkeeping."""
        return self._candidates.get(candidate)

    def append(self, candidates: Iterable[Candidate]) -> int:
        """Insert offspring stamped with the current generation; returns how many were new."""
        added = 0
        for candidate in candidates:
            candidate.birth_generation_id = self._generation
            if self.insert(candidate):
                added += 1
        return added

    def increment_generation(self) -> None:
        self._generation += 1

    def set_generation(self, generation: int) -> None:
        self._generation = int(generation)

    def calculate_fitness(self, data_set: Any) -> list[CandidateFitness]:
        """Fitness for every member, sorted ascending by fitness."""
        results = [
            CandidateFitness(candidate, candidate.calculate_fitness(data_set))
            for candidate in self._candidates.values()
        ]
        results.sort(key=lambda entry: entry.fitness)
        return results

    @classmethod
    def generate(cls, rng: random.Random, spec: Any) -> "Population":
        """Random initial population at generation 1, members born at generation 0."""
        limits = spec.initial_generation.candidates
        target = rng.randrange(limits.min, limits.max)
        population = cls(generation=1)
        logging.info(f"Generating initial population of {target} candidates")

        def draw_new_candidate() -> Candidate | None:
            candidate = Candidate.generate(rng, spec)
            return None if candidate in population else candidate

        while len(population) < target:
            candidate = attempt(draw_new_candidate, limits.retries)
            if candidate is None:
                logging.warning(
                    f"Stopped initial generation at {len(population)}/{target} candidates: "
                    f"{max(1, limits.retries)} consecutive duplicates"
                )
                break
            candidate.birth_generation_id = 0
            population.insert(candidate)
        return population

    def __repr__(self) -> str:
        return f"Population(generation={self._generation}, size={len(self)})"


__all__ = ["Population"]
