import random

from rulega.core.rule import Rule
from rulega.evolution.candidate import Candidate
from rulega.evolution.population import Population


def _candidate(*patterns):
    return Candidate.from_rules(Rule.from_pattern(p) for p in patterns)


def test_insert_deduplicates_structurally_equal_candidates():
    population = Population()
    assert population.insert(_candidate("1", "_0"))
    assert not population.insert(_candidate("_0", "1"))
    assert len(population) == 1
    assert _candidate("_0", "1") in population


def test_remove_by_structure():
    population = Population([_candidate("1"), _candidate("0")])
    assert population.remove(_candidate("1"))
    assert not population.remove(_candidate("1"))
    assert population.candidates == (_candidate("0"),)


def test_append_stamps_current_generation_and_counts_new():
    population = Population([_candidate("1")], generation=3)
    offspring = [_candidate("1"), _candidate("0"), _candidate("11"), _candidate("0")]
    assert population.append(offspring) == 2
    assert len(population) == 3
    assert population.get(_candidate("0")).birth_generation_id == 3
    assert population.get(_candidate("11")).age(5) == 2


def test_calculate_fitness_is_sorted_ascending(xor_data):
    population = Population([
        _candidate("01", "10"),  # perfect on xor
        _candidate("1"),
        _candidate("11"),
    ])
    fitness = population.calculate_fitness(xor_data)
    values = [entry.fitness for entry in fitness]
    assert values == sorted(values)
    assert fitness[-1].candidate == _candidate("01", "10")
    assert fitness[-1].fitness == len(xor_data)


def test_generation_counter():
    population = Population()
    assert population.generation == 1
    population.increment_generation()
    assert population.generation == 2
    population.set_generation(10)
    assert population.generation == 10


def test_generate_initial_population(make_spec):
    spec = make_spec(max_index=6, initial_generation={"candidates": {"min": 4, "max": 9, "rng_fail_retries": 50}})
    population = Population.generate(random.Random(1), spec)
    assert population.generation == 1
    assert 4 <= len(population) <= 8
    assert all(c.birth_generation_id == 0 for c in population)
    assert len(set(population.candidates)) == len(population)


def test_generate_is_reproducible_for_a_seed(make_spec):
    spec = make_spec(max_index=6)
    first = Population.generate(random.Random(42), spec)
    second = Population.generate(random.Random(42), spec)
    assert first.candidates == second.candidates
    assert [[str(r) for r in c.rules] for c in first] == [[str(r) for r in c.rules] for c in second]
