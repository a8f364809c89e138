"""
Strategies and Stepping Tutorial

Goals:
- Describe a run with a plain dict: roulette selection, multi-point
  crossover, constraint-randomize mutation
- Drive the engine one generation at a time and inspect its state

Design tips:
- Rules may only constrain positions below max_index, so derive it from the data
- Core errors terminate the run; catch RulegaError at the outermost layer
"""

from rulega.config import GaSpec
from rulega.core.dataset import DataSet
from rulega.evolution.population import Population
from rulega.generation.engine import EvolutionEngine
from rulega.utils.rng_manager import RNGManager
from rulega.utils.validation import RulegaError

LINES = [
    "8 rows x 4 variables",
    "000 0", "001 0", "010 1", "011 1",
    "100 0", "101 0", "110 1", "111 1",
]

SPEC = {
    "initial_generation": {
        "candidates": {"min": 6, "max": 10, "rng_fail_retries": 20},
        "rules": {"min": 1, "max": 4, "rng_fail_retries": 20},
        "constraints": {"min": 1, "max": 3, "rng_fail_retries": 20},
    },
    "max_evolutions": 15,
    "stop_at_optimum_fitness": True,
    "selection": {
        "type": "roulette",
        "selection_size": 4,
        "duplicates": {"setting": "allow"},
    },
    "crossover": {
        "matchup": {"type": "least_fittest"},
        "mating": {"type": "multi_point_at_percentages", "split_at": [[0, 50], [50, 100]]},
        "mirroring": "mirror_if_asexual",
    },
    "mutation": {
        "type": "constraint_randomize",
        "swap_if_fail": True,
        "retries": 5,
        "chance": 100,
        "chance_per_candidate": 30,
        "chance_per_rule": 50,
        "chance_per_constraint": 50,
    },
}


def main():
    # Label is the middle bit; a single rule "_1" classifies every example.
    data = DataSet.from_lines(LINES)
    spec = GaSpec.from_dict(SPEC, max_index=data.width())

    rng = RNGManager(seed=21)
    population = Population.generate(rng.get_context_rng('init'), spec)
    engine = EvolutionEngine(population, data, spec, rng)

    try:
        while not engine.terminated:
            report = engine.step()
            print(f'gen={report.generation} max={report.max_fitness} avg={report.average_fitness:.2f} '
                  f'offspring_added={report.offspring_added} mutated={report.mutation_count}')
    except RulegaError as exc:
        # The engine already moved to TERMINATED and recorded the reason
        print('error:', exc.error_type, exc.details)

    print('state:', engine.state.value, 'reason:', engine.history.stop_reason)
    best = engine.history.best
    if best is not None:
        print('best:', [str(rule) for rule in best.candidate.rules], best.fitness)


if __name__ == '__main__':
    main()
