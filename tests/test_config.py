from __future__ import annotations

import math
from pathlib import Path

import pytest

from price_normalizer.config import (
    PRICE_RULES,
    TYPE_MAPPING,
    NormalizerConfig,
    default_config,
    load_type_map,
    validate_rules,
)
from price_normalizer.models import PriceMarkupRule


def test_default_rules_partition_non_negative_prices() -> None:
    assert validate_rules(PRICE_RULES) == PRICE_RULES
    assert [rule.add for rule in PRICE_RULES] == [1.0, 1.5, 2.0, 2.5, 3.0, 3.5]
    assert [rule.label for rule in PRICE_RULES] == [
        "$0-$10", "$10-$20", "$20-$30", "$30-$40", "$40-$50", "$50+",
    ]


@pytest.mark.parametrize(
    ("rules", "message"),
    [
        ([], "At least one"),
        ([PriceMarkupRule(1, math.inf, 1.0)], "start at 0"),
        ([PriceMarkupRule(0, 10, 1.0), PriceMarkupRule(11, math.inf, 2.0)], "contiguous"),
        ([PriceMarkupRule(0, 10, 1.0), PriceMarkupRule(10, 20, 2.0)], "unbounded"),
    ],
)
def test_validate_rules_rejects_broken_tables(
    rules: list[PriceMarkupRule], message: str
) -> None:
    with pytest.raises(ValueError, match=message):
        validate_rules(rules)


def test_type_mapping_is_read_only() -> None:
    with pytest.raises(TypeError):
        TYPE_MAPPING["100.Regular"] = "Other"  # type: ignore[index]


def test_config_overrides_return_new_config() -> None:
    base = default_config()

    merged = base.with_type_overrides({"101.Tester": "Tester", "200.Gift": "Gift Box"})

    assert merged is not base
    assert merged.type_mapping["101.Tester"] == "Tester"
    assert merged.type_mapping["200.Gift"] == "Gift Box"
    assert merged.type_mapping["100.Regular"] == "Original Box"
    assert base.type_mapping["101.Tester"] == "Tester Box"
    assert base.with_type_overrides({}) is base


def test_config_freezes_plain_dict_mapping() -> None:
    config = NormalizerConfig(type_mapping={"A": "B"})

    with pytest.raises(TypeError):
        config.type_mapping["C"] = "D"  # type: ignore[index]


def test_load_type_map_reads_token_label_lines(tmp_path: Path) -> None:
    path = tmp_path / "types.txt"
    path.write_text(
        "# extra codes\n\n116.Refill = Refill\n117.Gift=Gift Box=Large\n",
        encoding="utf-8",
    )

    assert load_type_map(path) == {"116.Refill": "Refill", "117.Gift": "Gift Box=Large"}


def test_load_type_map_none_is_empty() -> None:
    assert load_type_map(None) == {}


def test_load_type_map_rejects_bad_lines_and_paths(tmp_path: Path) -> None:
    bad = tmp_path / "bad.txt"
    bad.write_text("116.Refill\n", encoding="utf-8")
    empty_label = tmp_path / "empty.txt"
    empty_label.write_text("116.Refill=\n", encoding="utf-8")

    with pytest.raises(ValueError, match="line 1"):
        load_type_map(bad)
    with pytest.raises(ValueError, match="non-empty"):
        load_type_map(empty_label)
    with pytest.raises(ValueError, match="not found"):
        load_type_map(tmp_path / "missing.txt")
    with pytest.raises(ValueError, match="directory"):
        load_type_map(tmp_path)
