"""
Command-line entry point.

Loads a labeled data file, splits it into training and test sets, evolves a
rule-set population on the training part and reports the best candidate.

    rulega --spec spec.json --split-percentage 60 --seed 7 data1.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rulega.config import PRESETS, GaSpec
from rulega.core.dataset import DataSet
from rulega.evolution.population import Population
from rulega.generation.engine import GenerationReport, run_evolution
from rulega.utils.rng_manager import RNGManager
from rulega.utils.validation import DataSetError, RulegaError


def parse_percentage(value: str) -> float:
    try:
        percentage = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"cannot parse a percentage from {value!r}") from exc
    if percentage > 100.0:
        raise argparse.ArgumentTypeError("percentages cannot be greater than 100")
    if percentage <= 0.0:
        raise argparse.ArgumentTypeError("cannot split at zero")
    return percentage


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='rulega', description='Evolve rule sets that classify binary strings.')
    ap.add_argument('data', metavar='FILE', help='data file ("N rows x M variables" header, then "<bits> <label>" lines)')
    ap.add_argument('--spec', default=None, help='JSON run configuration; defaults to a built-in preset')
    ap.add_argument('--preset', choices=sorted(PRESETS), default='standard', help='preset used when --spec is missing')
    ap.add_argument('-s', '--split-percentage', type=parse_percentage, default=50.0,
                    help='share of the data used for training (0 < P <= 100)')
    ap.add_argument('--seed', type=int, default=None, help='seed for reproducible runs')
    ap.add_argument('--log-level', default='WARNING', help='logging level')
    return ap


def print_report(report: GenerationReport) -> None:
    print(
        f"gen={report.generation} size={report.population_size} "
        f"min={report.min_fitness} max={report.max_fitness} avg={report.average_fitness:.3f} "
        f"selected={report.selection_count} offspring={report.offspring_count} mutated={report.mutation_count}"
    )


def run(args: argparse.Namespace) -> int:
    data_set = DataSet.from_file(args.data)
    training, test = data_set.split_at_percentage(args.split_percentage)
    width = training.width()
    if width is None:
        raise DataSetError('empty_data_set', 'no training data', path=str(args.data))

    if args.spec:
        spec = GaSpec.from_file(args.spec, max_index=width, alphabet=training.alphabet())
    else:
        spec = GaSpec.from_dict(PRESETS[args.preset], max_index=width, alphabet=training.alphabet())

    rng = RNGManager(seed=args.seed)
    print(f"seed={rng.seed} training_size={len(training)} test_size={len(test)} width={width} kind={training.kind()}")

    population = Population.generate(rng.get_context_rng('init'), spec)
    population, history = run_evolution(population, training, spec, rng, reporter=print_report)

    best = history.best
    if best is None:
        print('no candidate evaluated')
        return 0
    print(f"stop_reason={history.stop_reason} generations={history.generations}")
    print(f"best_training_fitness={best.fitness}/{len(training)} rules={len(best.candidate)}")
    for rule in best.candidate.rules:
        print(f"  {rule}")
    if len(test):
        print(f"best_test_fitness={best.candidate.calculate_fitness(test)}/{len(test)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        return run(args)
    except (RulegaError, OSError) as exc:
        print(f"program exited due to error: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
