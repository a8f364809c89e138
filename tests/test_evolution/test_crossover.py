import random

import pytest

from rulega.core.rule import Rule
from rulega.evolution.candidate import Candidate, CandidateFitness
from rulega.evolution.crossover import (
    CrossoverStrategy,
    LeastFittest,
    MirroringStrategy,
    MultiPointAtIndices,
    MultiPointAtPercentages,
    NextFittest,
    RandomMatchup,
    SinglePointAtIndex,
    SinglePointAtPercentage,
)
from rulega.utils.validation import CrossoverError

R = [Rule({i: "1"}) for i in range(4)]  # r0..r3
S = [Rule({i: "0"}) for i in range(2)]  # s0, s1


def _parents(fitness_a=1, fitness_b=2):
    a = CandidateFitness(Candidate.from_rules(R), fitness_a)
    b = CandidateFitness(Candidate.from_rules(S), fitness_b)
    return a, b


def _ranked(count):
    return [CandidateFitness(Candidate.from_rules([Rule({i: "1"})]), i) for i in range(count)]


def test_single_point_at_index_never_mirror():
    a, b = _parents()
    child1, child2 = SinglePointAtIndex(split_at=2).mate(a, b, MirroringStrategy.NEVER)
    # B has no rules left from index 2
    assert set(child1.rules) == {R[0], R[1]}
    assert set(child2.rules) == {S[0], S[1], R[2], R[3]}
    assert child2.rules == (S[0], S[1], R[2], R[3])


def test_single_point_at_index_always_mirror():
    a, b = _parents()
    # B split becomes abs(2 - 2) = 0
    child1, child2 = SinglePointAtIndex(split_at=2).mate(a, b, MirroringStrategy.ALWAYS_MIRROR)
    assert child1.rules == (R[0], R[1], S[0], S[1])
    assert child2.rules == (R[2], R[3])


def test_mirror_if_asexual_only_mirrors_self_pairings():
    a, b = _parents()
    child1, child2 = SinglePointAtIndex(split_at=2).mate(a, b, MirroringStrategy.MIRROR_IF_ASEXUAL)
    assert set(child1.rules) == {R[0], R[1]}

    # self pairing, split 1 on A mirrors to abs(4 - 1) = 3 on the second parent
    child1, child2 = SinglePointAtIndex(split_at=1).mate(a, a, MirroringStrategy.MIRROR_IF_ASEXUAL)
    assert child1.rules == (R[0], R[3])
    assert set(child2.rules) == set(R)


def test_single_point_at_percentage_splits_each_parent():
    a, b = _parents()
    # 50% of 4 -> 2 on A, 50% of 2 -> 1 on B
    child1, child2 = SinglePointAtPercentage(split_at=50).mate(a, b, MirroringStrategy.NEVER)
    assert child1.rules == (R[0], R[1], S[1])
    assert child2.rules == (S[0], R[2], R[3])

    child1, _ = SinglePointAtPercentage(split_at=25).mate(a, b, MirroringStrategy.ALWAYS_MIRROR)
    # A split 1, B split floor(0.5) = 0 mirrored to 2
    assert child1.rules == (R[0],)


def test_percentage_over_100_is_not_validated():
    a, b = _parents()
    child1, child2 = SinglePointAtPercentage(split_at=150).mate(a, b, MirroringStrategy.NEVER)
    assert set(child1.rules) == set(R)
    assert set(child2.rules) == set(S)


def test_multi_point_at_indices_accumulates_segments():
    a, b = _parents()
    # second segment is given backwards and normalized to (2, 3)
    child1, child2 = MultiPointAtIndices(split_at=[(0, 1), (3, 2)]).mate(a, b, MirroringStrategy.NEVER)
    assert child1.rules == (R[0], S[0], R[2])
    assert child2.rules == (S[0], R[0], R[2])


def test_multi_point_at_indices_mirrors_second_parent():
    a, b = _parents()
    # B range (0, 1) mirrors to (2, 1) and normalizes to (1, 2)
    child1, _ = MultiPointAtIndices(split_at=[(0, 1)]).mate(a, b, MirroringStrategy.ALWAYS_MIRROR)
    assert child1.rules == (R[0], S[1])


def test_multi_point_at_percentages():
    a, b = _parents()
    # (0%, 50%) -> A (0, 2), B (0, 1)
    child1, child2 = MultiPointAtPercentages(split_at=[(0, 50)]).mate(a, b, MirroringStrategy.NEVER)
    assert child1.rules == (R[0], R[1], S[0])
    assert set(child2.rules) == {S[0], R[0], R[1]}


def test_least_fittest_pairs_mirrored_ends():
    ranked = _ranked(4)
    pairs = LeastFittest().pair(ranked, random.Random(0))
    assert pairs == [(ranked[0], ranked[3]), (ranked[1], ranked[2]), (ranked[2], ranked[1])]


def test_next_fittest_pairs_neighbours():
    ranked = _ranked(4)
    pairs = NextFittest().pair(ranked, random.Random(0))
    assert pairs == [(ranked[0], ranked[1]), (ranked[1], ranked[2]), (ranked[2], ranked[3])]


def test_random_matchup_without_asexual_never_self_pairs():
    ranked = _ranked(5)
    for seed in range(30):
        pairs = RandomMatchup(allow_asexual=False, allow_duplicates=True).pair(ranked, random.Random(seed))
        assert len(pairs) == 5
        assert all(a != b for a, b in pairs)


def test_random_matchup_duplicate_setting_has_no_effect():
    # each index is paired once, so an ordered pair can never repeat
    ranked = _ranked(4)
    for seed in range(20):
        strict = RandomMatchup(allow_duplicates=False).pair(ranked, random.Random(seed))
        loose = RandomMatchup(allow_duplicates=True).pair(ranked, random.Random(seed))
        assert strict == loose
        assert [a for a, _ in strict] == ranked


def test_random_matchup_single_candidate():
    ranked = _ranked(1)
    with pytest.raises(CrossoverError) as info:
        RandomMatchup(allow_asexual=False).pair(ranked, random.Random(0))
    assert info.value.error_type == "cant_generate_non_asexual_matchup_with_one_candidate"

    pairs = RandomMatchup(allow_asexual=True).pair(ranked, random.Random(0))
    assert pairs == [(ranked[0], ranked[0])]


def test_empty_selection_produces_no_offspring():
    for matchup in (LeastFittest(), NextFittest(), RandomMatchup()):
        strategy = CrossoverStrategy(matchup, SinglePointAtIndex(split_at=1))
        assert strategy.crossover([], random.Random(0)) == []


def test_every_pair_yields_two_offspring():
    ranked = [
        CandidateFitness(Candidate.from_rules(R[:i + 1]), i) for i in range(4)
    ]
    for mating in (
        SinglePointAtIndex(split_at=1),
        SinglePointAtPercentage(split_at=50),
        MultiPointAtIndices(split_at=[(0, 2)]),
        MultiPointAtPercentages(split_at=[(10, 90)]),
    ):
        for mirroring in MirroringStrategy:
            strategy = CrossoverStrategy(NextFittest(), mating, mirroring)
            offspring = strategy.crossover(ranked, random.Random(0))
            assert len(offspring) == 2 * (len(ranked) - 1)
            assert all(isinstance(child, Candidate) for child in offspring)
