"""Run configuration: resolved ``GaSpec`` plus parsing from plain dicts/JSON.

Raw configuration is a nested dict (usually loaded from a JSON file). It
names strategy variants with a ``type`` tag and duplicate handling with a
``setting`` tag, e.g.::

    {"selection": {"type": "tournament", "tournament_size": 3,
                   "selection_size": 10,
                   "duplicates": {"setting": "disallow", "retries": 10}}}

``max_index`` and ``alphabet`` are not part of the file; they are derived
from the training data by the caller.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

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
from rulega.evolution.mutation import (
    ConstraintRandomize,
    ConstraintSwap,
    ConstraintValueRandomize,
    MutationOptions,
    MutationStrategy,
)
from rulega.evolution.selection import (
    Allow,
    Disallow,
    RouletteSelection,
    SelectionOptions,
    SelectionStrategy,
    TournamentSelection,
)
from rulega.utils.validation import ValidationError

DEFAULT_ALPHABET = "01"


@dataclass(frozen=True)
class GenerationRange:
    """Half-open ``[min, max)`` count range with a consecutive-failure cap."""

    min: int
    max: int
    retries: int

    def __post_init__(self) -> None:
        if self.min == 0 and self.max == 0:
            raise ValidationError("invalid_range", "min and max cannot both be zero",
                                  min=self.min, max=self.max)
        if self.min < 0 or self.min >= self.max:
            raise ValidationError("invalid_range", f"min ({self.min}) must be smaller than max ({self.max})",
                                  min=self.min, max=self.max)
        if self.retries < 0:
            raise ValidationError("invalid_range", "retries cannot be negative", retries=self.retries)


@dataclass(frozen=True)
class InitialGeneration:
    candidates: GenerationRange
    rules: GenerationRange
    constraints: GenerationRange


@dataclass
class GaSpec:
    initial_generation: InitialGeneration
    max_evolutions: int
    stop_at_optimum_fitness: bool
    selection: SelectionStrategy
    crossover: CrossoverStrategy
    mutation: MutationStrategy
    max_index: int
    alphabet: str = DEFAULT_ALPHABET

    def __post_init__(self) -> None:
        if self.max_index <= 0:
            raise ValidationError("invalid_value", "max_index must be positive", max_index=self.max_index)
        if not self.alphabet:
            raise ValidationError("invalid_value", "alphabet cannot be empty")
        if self.max_evolutions < 0:
            raise ValidationError("invalid_value", "max_evolutions cannot be negative",
                                  max_evolutions=self.max_evolutions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, max_index: int, alphabet: str = DEFAULT_ALPHABET) -> "GaSpec":
        initial = _require(data, "initial_generation", "spec")
        return cls(
            initial_generation=InitialGeneration(
                candidates=_parse_range(_require(initial, "candidates", "initial_generation")),
                rules=_parse_range(_require(initial, "rules", "initial_generation")),
                constraints=_parse_range(_require(initial, "constraints", "initial_generation")),
            ),
            max_evolutions=_integer(_require(data, "max_evolutions", "spec"), "max_evolutions"),
            stop_at_optimum_fitness=_flag(data, "stop_at_optimum_fitness", "spec"),
            selection=parse_selection(_require(data, "selection", "spec")),
            crossover=parse_crossover(_require(data, "crossover", "spec")),
            mutation=parse_mutation(_require(data, "mutation", "spec")),
            max_index=int(max_index),
            alphabet=alphabet,
        )

    @classmethod
    def from_file(cls, path: str | Path, *, max_index: int, alphabet: str = DEFAULT_ALPHABET) -> "GaSpec":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError("invalid_json", f"invalid spec file {path}: {exc}", path=str(path)) from exc
        return cls.from_dict(data, max_index=max_index, alphabet=alphabet)


def _section(section: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(section, Mapping):
        raise ValidationError("invalid_value", f"'{where}' must be an object", section=where)
    return section


def _require(section: Mapping[str, Any], key: str, where: str) -> Any:
    _section(section, where)
    if key not in section:
        raise ValidationError("missing_field", f"Missing required field '{key}' in '{where}'",
                              field=key, section=where)
    return section[key]


def _tag(section: Mapping[str, Any], key: str, where: str, choices: Mapping[str, Any]) -> Any:
    value = str(_require(section, key, where)).lower()
    if value not in choices:
        raise ValidationError("unknown_variant", f"Unknown {where} {key} '{value}'",
                              section=where, value=value, choices=tuple(sorted(choices)))
    return choices[value]


def _flag(section: Mapping[str, Any], key: str, where: str, default: bool = False) -> bool:
    """JSON booleans only; strings such as "false" are rejected."""
    value = _section(section, where).get(key, default)
    if not isinstance(value, bool):
        raise ValidationError("invalid_value", f"'{key}' in '{where}' must be true or false",
                              field=key, section=where, value=value)
    return value


def _integer(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError("invalid_value", f"'{key}' must be an integer", field=key, value=value)
    try:
        return int(value)
    except ValueError as exc:
        raise ValidationError("invalid_value", f"'{key}' must be an integer", field=key, value=value) from exc


def _parse_range(data: Mapping[str, Any]) -> GenerationRange:
    return GenerationRange(
        min=_integer(_require(data, "min", "range"), "min"),
        max=_integer(_require(data, "max", "range"), "max"),
        retries=_integer(data.get("rng_fail_retries", data.get("retries", 10)), "rng_fail_retries"),
    )


def _parse_split_pairs(value: Any) -> list[tuple[int, int]]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("invalid_value", f"split_at must be a list of pairs, got {value!r}", value=value)
    pairs = []
    for item in value:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValidationError("invalid_value", f"split point pairs need two values, got {item!r}", value=item)
        pairs.append((_integer(item[0], "split_at"), _integer(item[1], "split_at")))
    return pairs


def parse_selection(data: Mapping[str, Any]) -> SelectionStrategy:
    duplicates = _section(data, "selection").get("duplicates", {"setting": "allow"})
    setting = _tag(duplicates, "setting", "duplicates", {"allow": Allow, "disallow": Disallow})
    if setting is Disallow:
        handling = Disallow(retries=_integer(_require(duplicates, "retries", "duplicates"), "retries"))
    else:
        handling = Allow()

    options = SelectionOptions(
        selection_size=_integer(_require(data, "selection_size", "selection"), "selection_size"),
        duplicates=handling,
    )
    variant_cls = _tag(data, "type", "selection", {
        "tournament": TournamentSelection,
        "roulette": RouletteSelection,
    })
    if variant_cls is TournamentSelection:
        size = _require(data, "tournament_size", "selection")
        variant = TournamentSelection(tournament_size=_integer(size, "tournament_size"))
    else:
        variant = RouletteSelection()
    return SelectionStrategy(options=options, variant=variant)


def parse_crossover(data: Mapping[str, Any]) -> CrossoverStrategy:
    matchup_data = _require(data, "matchup", "crossover")
    matchup_cls = _tag(matchup_data, "type", "matchup", {
        "random": RandomMatchup,
        "next_fittest": NextFittest,
        "least_fittest": LeastFittest,
    })
    if matchup_cls is RandomMatchup:
        matchup = RandomMatchup(
            allow_asexual=_flag(matchup_data, "allow_asexual", "matchup"),
            allow_duplicates=_flag(matchup_data, "allow_duplicates", "matchup"),
        )
    else:
        matchup = matchup_cls()

    mating_data = _require(data, "mating", "crossover")
    mating_cls = _tag(mating_data, "type", "mating", {
        "single_point_at_index": SinglePointAtIndex,
        "single_point_at_percentage": SinglePointAtPercentage,
        "multi_point_at_indices": MultiPointAtIndices,
        "multi_point_at_percentages": MultiPointAtPercentages,
    })
    split_at = _require(mating_data, "split_at", "mating")
    if mating_cls in (SinglePointAtIndex, SinglePointAtPercentage):
        mating = mating_cls(split_at=_integer(split_at, "split_at"))
    else:
        mating = mating_cls(split_at=_parse_split_pairs(split_at))

    mirroring = _tag(data, "mirroring", "crossover", {m.value: m for m in MirroringStrategy}) \
        if "mirroring" in data else MirroringStrategy.NEVER
    return CrossoverStrategy(matchup_strategy=matchup, mating_strategy=mating, mirroring=mirroring)


def parse_mutation(data: Mapping[str, Any]) -> MutationStrategy:
    options = MutationOptions()
    for name in ("chance", "chance_per_candidate", "chance_per_rule", "chance_per_constraint"):
        value = _section(data, "mutation").get(name)
        if value is None:
            continue
        value = _integer(value, name)
        if not 0 <= value <= 100:
            raise ValidationError("invalid_value", f"'{name}' must be a percentage between 0 and 100",
                                  field=name, value=value)
        setattr(options, name, value)

    variant_cls = _tag(data, "type", "mutation", {
        "constraint_swap": ConstraintSwap,
        "constraint_randomize": ConstraintRandomize,
        "constraint_value_randomize": ConstraintValueRandomize,
    })
    if variant_cls is ConstraintSwap:
        variant = ConstraintSwap(delta=_integer(data.get("delta", 1), "delta"))
    elif variant_cls is ConstraintRandomize:
        variant = ConstraintRandomize(
            swap_if_fail=_flag(data, "swap_if_fail", "mutation"),
            retries=_integer(data.get("retries", 10), "retries"),
        )
    else:
        variant = ConstraintValueRandomize()
    return MutationStrategy(variant=variant, options=options)


PRESET_STANDARD: dict[str, Any] = {
    "initial_generation": {
        "candidates": {"min": 40, "max": 60, "rng_fail_retries": 50},
        "rules": {"min": 2, "max": 8, "rng_fail_retries": 20},
        "constraints": {"min": 1, "max": 5, "rng_fail_retries": 20},
    },
    "max_evolutions": 200,
    "stop_at_optimum_fitness": True,
    "selection": {
        "type": "tournament",
        "tournament_size": 3,
        "selection_size": 20,
        "duplicates": {"setting": "allow"},
    },
    "crossover": {
        "matchup": {"type": "random", "allow_asexual": False, "allow_duplicates": False},
        "mating": {"type": "single_point_at_percentage", "split_at": 50},
        "mirroring": "never",
    },
    "mutation": {
        "type": "constraint_value_randomize",
        "chance": 100,
        "chance_per_candidate": 20,
        "chance_per_rule": 30,
        "chance_per_constraint": 10,
    },
}

PRESET_MINIMAL: dict[str, Any] = copy.deepcopy(PRESET_STANDARD)
PRESET_MINIMAL["initial_generation"]["candidates"] = {"min": 4, "max": 8, "rng_fail_retries": 20}
PRESET_MINIMAL["max_evolutions"] = 10
PRESET_MINIMAL["selection"]["selection_size"] = 4

PRESETS: dict[str, dict[str, Any]] = {
    "minimal": PRESET_MINIMAL,
    "standard": PRESET_STANDARD,
}


__all__ = [
    "DEFAULT_ALPHABET",
    "GenerationRange",
    "InitialGeneration",
    "GaSpec",
    "parse_selection",
    "parse_crossover",
    "parse_mutation",
    "PRESET_MINIMAL",
    "PRESET_STANDARD",
    "PRESETS",
]
