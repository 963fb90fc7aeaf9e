from __future__ import annotations

import math

import pytest

from price_normalizer.models import ColumnMap, NormalizedRow, PriceMarkupRule, RunStats


def test_runstats_to_dict_returns_copies() -> None:
    stats = RunStats(
        rows_in=3,
        rows_out=2,
        skipped_rows=1,
        price_bands={"$0-$10": 2},
        box_types={"Vial": 2},
    )

    payload = stats.to_dict()
    payload["price_bands"]["$50+"] = 1
    payload["box_types"]["Set"] = 1

    assert stats.price_bands == {"$0-$10": 2}
    assert stats.box_types == {"Vial": 2}


def test_runstats_record_and_skip_keep_invariant() -> None:
    stats = RunStats()

    stats.record("$0-$10", "Vial")
    stats.record("$0-$10", "Set")
    stats.skip()

    assert stats.rows_in == 3
    assert stats.rows_out == 2
    assert stats.skipped_rows == 1
    assert stats.price_bands == {"$0-$10": 2}
    assert list(stats.box_types) == ["Vial", "Set"]


def test_runstats_rejects_negative_counts() -> None:
    with pytest.raises(ValueError, match="rows_in"):
        RunStats(rows_in=-1)

    with pytest.raises(ValueError, match="skipped_rows"):
        RunStats(skipped_rows=-1)


def test_runstats_rejects_inconsistent_row_relationships() -> None:
    with pytest.raises(ValueError, match="rows_out"):
        RunStats(rows_in=2, rows_out=3)

    with pytest.raises(ValueError, match="skipped_rows"):
        RunStats(rows_in=5, rows_out=4, skipped_rows=2)


def test_runstats_rejects_bad_counter_values() -> None:
    with pytest.raises(TypeError, match="price_bands"):
        RunStats(price_bands={"$0-$10": True})  # type: ignore[dict-item]

    with pytest.raises(TypeError, match="box_types"):
        RunStats(box_types={1: 2})  # type: ignore[dict-item]


def test_price_markup_rule_labels_and_membership() -> None:
    bounded = PriceMarkupRule(min=10, max=20, add=1.5)
    open_ended = PriceMarkupRule(min=50, max=math.inf, add=3.5)

    assert bounded.label == "$10-$20"
    assert open_ended.label == "$50+"
    assert bounded.contains(10)
    assert not bounded.contains(20)
    assert open_ended.contains(1e12)


def test_price_markup_rule_rejects_empty_band() -> None:
    with pytest.raises(ValueError, match="max"):
        PriceMarkupRule(min=10, max=10, add=1.0)

    with pytest.raises(TypeError, match="add"):
        PriceMarkupRule(min=0, max=10, add="1")  # type: ignore[arg-type]


def test_column_map_rejects_negative_or_non_integer_indices() -> None:
    with pytest.raises(ValueError, match="price"):
        ColumnMap(description=0, price=-1, brand=2, type=3)

    with pytest.raises(TypeError, match="type"):
        ColumnMap(description=0, price=1, brand=2, type=None)  # type: ignore[arg-type]


def test_normalized_row_field_order() -> None:
    row = NormalizedRow(brand="Dior", description="Sauvage", box_type="Set", price=12.5)

    assert row.to_list() == ["Dior", "Sauvage", "Set", 12.5]
