"""Evolutionary driver.

Implements:
- EvolutionState: the driver's state machine states
- GenerationReport / EvolutionHistory: per-generation statistics
- EvolutionEngine: runs evaluate -> select -> recombine -> mutate ->
  check stop -> advance, one generation per ``step()``
- run_evolution: convenience wrapper running until the budget is exhausted
  or the optimum-fitness condition fires
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from rulega.evolution.candidate import CandidateFitness
from rulega.evolution.population import Population
from rulega.utils.rng_manager import RNGManager
from rulega.utils.validation import RulegaError


class EvolutionState(enum.Enum):
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    RECOMBINING = "recombining"
    MUTATING = "mutating"
    CHECKING_STOP = "checking_stop"
    ADVANCING = "advancing"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class GenerationReport:
    """Statistics for one generation, as handed to the reporting sink."""

    generation: int
    population_size: int
    min_fitness: int
    max_fitness: int
    average_fitness: float
    selection_count: int
    offspring_count: int
    offspring_added: int = 0
    mutation_count: int = 0

    @classmethod
    def from_fitness(cls, generation: int, fitness: list[CandidateFitness], **counts: int) -> "GenerationReport":
        values = [entry.fitness for entry in fitness]
        return cls(
            generation=generation,
            population_size=len(values),
            min_fitness=min(values) if values else 0,
            max_fitness=max(values) if values else 0,
            average_fitness=(sum(values) / len(values)) if values else 0.0,
            **counts,
        )


@dataclass
class EvolutionHistory:
    """Tracks the run: per-generation reports and the best candidate seen."""

    reports: list[GenerationReport] = field(default_factory=list)
    best: Optional[CandidateFitness] = None
    stop_reason: Optional[str] = None

    def add_report(self, report: GenerationReport) -> None:
        self.reports.append(report)

    def observe(self, fitness: list[CandidateFitness]) -> None:
        # fitness is sorted ascending; ties keep the earliest best
        if fitness and (self.best is None or fitness[-1].fitness > self.best.fitness):
            self.best = fitness[-1]

    @property
    def generations(self) -> int:
        return len(self.reports)


Reporter = Callable[[GenerationReport], None]


class EvolutionEngine:
    """Drives one population through successive generations."""

    def __init__(self, population: Population, data_set: Any, spec: Any,
                 rng_manager: RNGManager, reporter: Reporter | None = None) -> None:
        self.population = population
        self.data_set = data_set
        self.spec = spec
        self.rng_manager = rng_manager
        self.reporter = reporter
        self.history = EvolutionHistory()
        self.state = EvolutionState.INITIALIZING
        self._evolutions = 0

    @property
    def terminated(self) -> bool:
        return self.state is EvolutionState.TERMINATED

    def _terminate(self, reason: str) -> None:
        self.history.stop_reason = reason
        self.state = EvolutionState.TERMINATED

    def step(self) -> GenerationReport:
        """Run one full generation. Any core error terminates the run and is re-raised."""
        if self.terminated:
            raise RuntimeError("evolution already terminated")
        spec = self.spec
        generation = self.population.generation
        try:
            self.state = EvolutionState.EVALUATING
            fitness = self.population.calculate_fitness(self.data_set)
            self.history.observe(fitness)

            self.state = EvolutionState.SELECTING
            selection = spec.selection.select(fitness, self.rng_manager.get_context_rng('selection'))

            self.state = EvolutionState.RECOMBINING
            # matchup strategies expect ascending fitness order
            selection_sorted = sorted(selection, key=lambda entry: entry.fitness)
            offspring = spec.crossover.crossover(selection_sorted, self.rng_manager.get_context_rng('crossover'))
            added = self.population.append(offspring)

            self.state = EvolutionState.MUTATING
            mutated = spec.mutation.mutate(
                self.population, spec, self.rng_manager.get_context_rng('mutation'), self.rng_manager,
            )
        except RulegaError as exc:
            logging.error(f"Generation {generation} failed during {self.state.value}: {exc}")
            self._terminate(f"error: {exc.error_type}")
            raise

        report = GenerationReport.from_fitness(
            generation,
            fitness,
            selection_count=len(selection),
            offspring_count=len(offspring),
            offspring_added=added,
            mutation_count=mutated,
        )
        self.history.add_report(report)
        if self.reporter is not None:
            self.reporter(report)
        self._evolutions += 1

        self.state = EvolutionState.CHECKING_STOP
        if spec.stop_at_optimum_fitness and report.max_fitness == len(self.data_set):
            logging.info(f"Optimum fitness {report.max_fitness} reached at generation {generation}")
            self._terminate('optimum_fitness')
            return report

        self.state = EvolutionState.ADVANCING
        self.population.increment_generation()
        if self._evolutions >= spec.max_evolutions:
            logging.info(f"Generation budget of {spec.max_evolutions} exhausted")
            self._terminate('max_evolutions')
        return report

    def run(self) -> EvolutionHistory:
        if self.spec.max_evolutions <= 0:
            self._terminate('max_evolutions')
        while not self.terminated:
            self.step()
        return self.history


def run_evolution(population: Population, data_set: Any, spec: Any, rng_manager: RNGManager,
                  reporter: Reporter | None = None) -> tuple[Population, EvolutionHistory]:
    """Evolve ``population`` in place against ``data_set``.

    Args:
        population: Starting population (usually from ``Population.generate``).
        data_set: Ordered labeled examples exposing ``as_str()`` and ``output()``.
        spec: Resolved ``GaSpec``.
        rng_manager: Source of the selection/crossover/mutation streams.
        reporter: Optional callback receiving each ``GenerationReport``.

    Returns:
        (population, history)
    """
    engine = EvolutionEngine(population, data_set, spec, rng_manager, reporter)
    history = engine.run()
    return population, history


__all__ = [
    'EvolutionState',
    'GenerationReport',
    'EvolutionHistory',
    'EvolutionEngine',
    'run_evolution',
]
