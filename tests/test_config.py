import copy
import json

import pytest

from rulega.config import PRESET_MINIMAL, PRESET_STANDARD, GaSpec, GenerationRange
from rulega.evolution.crossover import MirroringStrategy, MultiPointAtIndices, RandomMatchup
from rulega.evolution.mutation import ConstraintRandomize, ConstraintValueRandomize
from rulega.evolution.selection import Allow, Disallow, RouletteSelection, TournamentSelection
from rulega.utils.validation import ValidationError


def test_presets_resolve():
    for preset in (PRESET_MINIMAL, PRESET_STANDARD):
        spec = GaSpec.from_dict(preset, max_index=8)
        assert spec.alphabet == "01"
        assert isinstance(spec.selection.variant, TournamentSelection)
        assert isinstance(spec.selection.options.duplicates, Allow)
        assert isinstance(spec.crossover.matchup_strategy, RandomMatchup)
        assert spec.crossover.mirroring is MirroringStrategy.NEVER
        assert isinstance(spec.mutation.variant, ConstraintValueRandomize)
    assert GaSpec.from_dict(PRESET_STANDARD, max_index=8).initial_generation.candidates.min == 40


def test_range_validation():
    assert GenerationRange(0, 3, 5).max == 3
    for low, high, retries in ((0, 0, 1), (-1, 2, 1), (3, 3, 1), (4, 2, 1), (1, 2, -1)):
        with pytest.raises(ValidationError) as info:
            GenerationRange(low, high, retries)
        assert info.value.error_type == "invalid_range"


def test_range_accepts_both_retry_spellings():
    data = copy.deepcopy(PRESET_MINIMAL)
    data["initial_generation"]["rules"] = {"min": 1, "max": 3, "retries": 7}
    spec = GaSpec.from_dict(data, max_index=4)
    assert spec.initial_generation.rules.retries == 7
    assert spec.initial_generation.constraints.retries == 20


def test_missing_field():
    data = copy.deepcopy(PRESET_MINIMAL)
    del data["max_evolutions"]
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.error_type == "missing_field"
    assert info.value.details["field"] == "max_evolutions"


def test_unknown_variant():
    data = copy.deepcopy(PRESET_MINIMAL)
    data["selection"]["type"] = "lottery"
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.error_type == "unknown_variant"


def test_mutation_percentages_are_bounded():
    data = copy.deepcopy(PRESET_MINIMAL)
    data["mutation"]["chance_per_rule"] = 120
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.error_type == "invalid_value"


@pytest.mark.parametrize("path, value", [
    (("stop_at_optimum_fitness",), "false"),
    (("crossover", "matchup", "allow_asexual"), "true"),
    (("crossover", "matchup", "allow_duplicates"), 0),
])
def test_flags_must_be_json_booleans(path, value):
    data = copy.deepcopy(PRESET_MINIMAL)
    section = data
    for key in path[:-1]:
        section = section[key]
    section[path[-1]] = value
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.error_type == "invalid_value"
    assert info.value.details["field"] == path[-1]


def test_swap_if_fail_must_be_a_json_boolean():
    data = copy.deepcopy(PRESET_MINIMAL)
    data["mutation"] = {"type": "constraint_randomize", "swap_if_fail": "false"}
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.error_type == "invalid_value"


@pytest.mark.parametrize("section, value", [
    ("selection", ["tournament"]),
    ("mutation", "constraint_swap"),
])
def test_non_object_sections_are_rejected(section, value):
    data = copy.deepcopy(PRESET_MINIMAL)
    data[section] = value
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.error_type == "invalid_value"


@pytest.mark.parametrize("split_at", [5, [3, 4], [[1, 2, 3]], [["a", 2]]])
def test_malformed_split_pairs_are_rejected(split_at):
    data = copy.deepcopy(PRESET_MINIMAL)
    data["crossover"]["mating"] = {"type": "multi_point_at_indices", "split_at": split_at}
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.error_type == "invalid_value"


def test_non_numeric_counts_are_rejected():
    data = copy.deepcopy(PRESET_MINIMAL)
    data["selection"]["selection_size"] = "many"
    with pytest.raises(ValidationError) as info:
        GaSpec.from_dict(data, max_index=4)
    assert info.value.details["field"] == "selection_size"


def test_spec_level_validation():
    with pytest.raises(ValidationError):
        GaSpec.from_dict(PRESET_MINIMAL, max_index=0)
    with pytest.raises(ValidationError):
        GaSpec.from_dict(PRESET_MINIMAL, max_index=4, alphabet="")


def test_variant_parameters(tmp_path):
    data = copy.deepcopy(PRESET_MINIMAL)
    data["selection"] = {"type": "roulette", "selection_size": 6,
                         "duplicates": {"setting": "disallow", "retries": 9}}
    data["crossover"] = {"matchup": {"type": "least_fittest"},
                         "mating": {"type": "multi_point_at_indices", "split_at": [[0, 2], [5, 3]]},
                         "mirroring": "mirror_if_asexual"}
    data["mutation"] = {"type": "constraint_randomize", "swap_if_fail": True, "retries": 4,
                        "chance": 50}
    path = tmp_path / "spec.json"
    path.write_text(json.dumps(data))

    spec = GaSpec.from_file(path, max_index=6)
    assert isinstance(spec.selection.variant, RouletteSelection)
    assert spec.selection.options.duplicates == Disallow(retries=9)
    assert spec.crossover.mating_strategy == MultiPointAtIndices(split_at=[(0, 2), (5, 3)])
    assert spec.crossover.mirroring is MirroringStrategy.MIRROR_IF_ASEXUAL
    assert spec.mutation.variant == ConstraintRandomize(swap_if_fail=True, retries=4)
    assert spec.mutation.options.chance == 50
    assert spec.mutation.options.chance_per_rule is None


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ValidationError) as info:
        GaSpec.from_file(path, max_index=4)
    assert info.value.error_type == "invalid_json"
