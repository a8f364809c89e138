"""Labeled examples and the text data-file loader.

Data files look like::

    32 rows x 6 variables
    00000 0
    00001 1
    ...

The header is informational. Every following line holds an input and a
one-character binary label. The input is either a binary string or six
``0.dddddd`` values; a real-valued input is flattened to the 36 fractional
digits, so rules over it constrain digit positions. A data set never mixes
the two kinds.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from rulega.utils.validation import DataSetError

HEADER_REGEX = re.compile(r"^(\d+) rows x (\d+) variables")
DATA_ITEM_REGEX = re.compile(r"^(?P<input>[01]+)\s+(?P<output>[01])$")
REAL_ITEM_REGEX = re.compile(r"^(?P<input>0\.\d{6}(?: 0\.\d{6}){5})\s+(?P<output>[01])$")

BINARY = "binary"
REAL = "real"

ALPHABETS = {
    BINARY: "01",
    REAL: "0123456789",
}


@dataclass(frozen=True)
class DataItem:
    """One labeled example: fixed-width symbol string plus binary label."""

    input: str
    label: str
    kind: str = BINARY

    def as_str(self) -> str:
        return self.input

    def output(self) -> str:
        return self.label

    def width(self) -> int:
        return len(self.input)

    @classmethod
    def parse(cls, line: str) -> "DataItem":
        line = line.strip()
        if not line.isascii():
            raise DataSetError("not_valid_ascii", "not valid ascii", line=line)
        match = DATA_ITEM_REGEX.match(line)
        if match is not None:
            return cls(match.group("input"), match.group("output"))
        match = REAL_ITEM_REGEX.match(line)
        if match is not None:
            digits = "".join(value[2:] for value in match.group("input").split())
            return cls(digits, match.group("output"), REAL)
        raise DataSetError("invalid_format", "invalid format", line=line)


@dataclass
class DataSet:
    """Ordered collection of DataItems sharing one kind and one width."""

    items: list[DataItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        items, self.items = list(self.items), []
        for item in items:
            self.push(item)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[DataItem]:
        return iter(self.items)

    def __getitem__(self, index: int) -> DataItem:
        return self.items[index]

    def width(self) -> int | None:
        return self.items[0].width() if self.items else None

    def kind(self) -> str | None:
        return self.items[0].kind if self.items else None

    def alphabet(self) -> str:
        """Symbols rules may require; binary when the set is empty."""
        return ALPHABETS[self.kind() or BINARY]

    def push(self, item: DataItem) -> None:
        if self.items:
            first = self.items[0]
            if item.kind != first.kind:
                raise DataSetError(
                    "heterogeneous_data",
                    "found different kinds of data",
                    expected=first.kind,
                    found=item.kind,
                )
            if item.width() != first.width():
                raise DataSetError(
                    "length_mismatch",
                    "length is not consistent",
                    expected=first.width(),
                    found=item.width(),
                )
        self.items.append(item)

    def split_at_percentage(self, percentage: float) -> tuple["DataSet", "DataSet"]:
        """Split into (first, rest); the first part holds floor(percentage% of len) items."""
        if percentage < 0 or percentage > 100:
            raise DataSetError(
                "invalid_percentage",
                "percentage should be between 0 and 100",
                percentage=percentage,
            )
        split_index = int((percentage / 100.0) * len(self.items))
        return DataSet(self.items[:split_index]), DataSet(self.items[split_index:])

    @classmethod
    def from_lines(cls, lines) -> "DataSet":
        data_set = cls()
        for line_number, line in enumerate(lines):
            if line_number == 0:
                if not HEADER_REGEX.match(line.strip()):
                    logging.warning(f"Unexpected data header: {line.strip()!r}")
                continue
            if not line.strip():
                continue
            try:
                data_set.push(DataItem.parse(line))
            except DataSetError as exc:
                raise DataSetError(
                    exc.error_type,
                    f"line {line_number}: {exc.message}",
                    line_number=line_number,
                    **exc.details,
                ) from exc
        return data_set

    @classmethod
    def from_file(cls, path: str | Path) -> "DataSet":
        with open(path, encoding="ascii", errors="replace") as handle:
            return cls.from_lines(handle)


__all__ = ["ALPHABETS", "BINARY", "REAL", "DataItem", "DataSet", "HEADER_REGEX"]
