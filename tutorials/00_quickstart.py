from rulega.config import PRESET_MINIMAL, GaSpec
from rulega.core.dataset import DataItem, DataSet
from rulega.evolution.population import Population
from rulega.generation.engine import run_evolution
from rulega.utils.rng_manager import RNGManager


def main():
    # Quickstart goal:
    # 1) Build a tiny labeled data set (3-bit parity)
    # 2) Resolve a run configuration from the minimal preset
    # 3) Generate a random population and evolve it for a few generations

    # Every example is a fixed-width binary string plus a one-character label.
    data = DataSet([
        DataItem(f"{value:03b}", str(bin(value).count("1") % 2))
        for value in range(8)
    ])

    # max_index is the example width; rules never constrain positions beyond it.
    spec = GaSpec.from_dict(PRESET_MINIMAL, max_index=data.width())

    # One seed drives every phase; each phase draws from its own named stream.
    rng = RNGManager(seed=7)

    # Initial population: a set of unique candidates, each a set of unique rules.
    population = Population.generate(rng.get_context_rng('init'), spec)
    print('initial population:', population)

    # Evolve in place. The history keeps one report per generation and the best candidate seen.
    population, history = run_evolution(population, data, spec, rng)

    print('stop reason:', history.stop_reason)
    print('generations:', history.generations)
    print(f'best fitness: {history.best.fitness}/{len(data)}')
    for rule in history.best.candidate.rules:
        # '_' marks an unconstrained position; trailing unconstrained positions are omitted.
        print('  rule:', rule)


if __name__ == '__main__':
    main()
