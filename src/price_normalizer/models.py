"""Data models / typed records used across the package."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import Any


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_counter(values: dict[str, int] | None, field_name: str) -> dict[str, int]:
    if values is None:
        return {}
    counter: dict[str, int] = {}
    for key, count in values.items():
        if not isinstance(key, str):
            raise TypeError(f"{field_name} keys must be strings")
        counter[key] = _to_non_negative_int(count, f"{field_name}[{key!r}]")
    return counter


def _format_amount(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class PriceMarkupRule:
    """A half-open price band ``[min, max)`` and the amount added to prices in it."""

    min: float
    max: float
    add: float

    def __post_init__(self) -> None:
        for name in ("min", "max", "add"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise TypeError(f"{name} must be a number")
        if math.isnan(self.min) or math.isnan(self.max):
            raise ValueError("band bounds must not be NaN")
        if self.max <= self.min:
            raise ValueError("max must be > min")

    @property
    def unbounded(self) -> bool:
        return math.isinf(self.max)

    @property
    def label(self) -> str:
        if self.unbounded:
            return f"${_format_amount(self.min)}+"
        return f"${_format_amount(self.min)}-${_format_amount(self.max)}"

    def contains(self, value: float) -> bool:
        return self.min <= value < self.max


@dataclass(frozen=True)
class ColumnMap:
    """Zero-based positions of the four logical columns in a sheet."""

    description: int
    price: int
    brand: int
    type: int

    def __post_init__(self) -> None:
        for name in ("description", "price", "brand", "type"):
            _to_non_negative_int(getattr(self, name), name)

    def to_dict(self) -> dict[str, int]:
        return {
            "description": self.description,
            "price": self.price,
            "brand": self.brand,
            "type": self.type,
        }


@dataclass(frozen=True)
class NormalizedRow:
    """One output row. ``price`` keeps the raw cell when it is not a number."""

    brand: str
    description: str
    box_type: str
    price: Any

    def to_list(self) -> list[Any]:
        return [self.brand, self.description, self.box_type, self.price]


@dataclass
class RunStats:
    """Counters accumulated over a single normalization run.

    Contract invariant: ``skipped_rows == rows_in - rows_out``.
    """

    rows_in: int = 0
    rows_out: int = 0
    skipped_rows: int = 0
    price_bands: dict[str, int] = field(default_factory=dict)
    box_types: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.rows_in = _to_non_negative_int(self.rows_in, "rows_in")
        self.rows_out = _to_non_negative_int(self.rows_out, "rows_out")
        self.skipped_rows = _to_non_negative_int(self.skipped_rows, "skipped_rows")
        self.price_bands = _to_counter(self.price_bands, "price_bands")
        self.box_types = _to_counter(self.box_types, "box_types")
        if self.rows_out > self.rows_in:
            raise ValueError("rows_out must be <= rows_in")
        if self.skipped_rows != self.rows_in - self.rows_out:
            raise ValueError("skipped_rows must equal rows_in - rows_out")

    def record(self, band_label: str, box_type: str) -> None:
        """Count one emitted row."""
        self.rows_in += 1
        self.rows_out += 1
        self.price_bands[band_label] = self.price_bands.get(band_label, 0) + 1
        self.box_types[box_type] = self.box_types.get(box_type, 0) + 1

    def skip(self) -> None:
        """Count one row rejected by the admission check."""
        self.rows_in += 1
        self.skipped_rows += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows_in": self.rows_in,
            "rows_out": self.rows_out,
            "skipped_rows": self.skipped_rows,
            "price_bands": dict(self.price_bands),
            "box_types": dict(self.box_types),
        }
