import copy

import pytest

from rulega.config import PRESET_MINIMAL, GaSpec
from rulega.core.dataset import DataItem, DataSet


def _merge(base: dict, overrides: dict) -> dict:
    out = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict) and "type" not in value:
            out[key] = _merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


@pytest.fixture
def make_spec():
    """Factory building a GaSpec from the minimal preset plus overrides."""

    def factory(max_index: int = 4, alphabet: str = "01", **overrides) -> GaSpec:
        return GaSpec.from_dict(_merge(PRESET_MINIMAL, overrides), max_index=max_index, alphabet=alphabet)

    return factory


@pytest.fixture
def xor_data() -> DataSet:
    return DataSet([
        DataItem("00", "0"),
        DataItem("01", "1"),
        DataItem("10", "1"),
        DataItem("11", "0"),
    ])
