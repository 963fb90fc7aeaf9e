"""Console summaries printed after a run."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table as RichTable

from price_normalizer.config import DEFAULT_OUTPUT, PRICE_RULES, TYPE_MAPPING, UNPRICED_LABEL
from price_normalizer.models import PriceMarkupRule, RunStats

_USAGE_TYPE_EXAMPLES = 3


def pricing_rows(
    stats: RunStats, rules: Sequence[PriceMarkupRule] = PRICE_RULES
) -> list[tuple[str, int, float | None]]:
    """Non-zero bands in canonical order as ``(label, count, markup)``."""
    rows: list[tuple[str, int, float | None]] = []
    for rule in rules:
        count = stats.price_bands.get(rule.label, 0)
        if count > 0:
            rows.append((rule.label, count, rule.add))
    unpriced = stats.price_bands.get(UNPRICED_LABEL, 0)
    if unpriced > 0:
        rows.append((UNPRICED_LABEL, unpriced, None))
    return rows


def type_rows(stats: RunStats) -> list[tuple[str, int]]:
    """Box types by descending count; ties keep first-seen order."""
    return sorted(stats.box_types.items(), key=lambda item: item[1], reverse=True)


def print_pricing_summary(
    console: Console, stats: RunStats, rules: Sequence[PriceMarkupRule] = PRICE_RULES
) -> None:
    tbl = RichTable(title="Pricing Summary")
    tbl.add_column("Range", style="bold")
    tbl.add_column("Items", justify="right")
    tbl.add_column("Markup", justify="right")
    for label, count, markup in pricing_rows(stats, rules):
        tbl.add_row(label, str(count), "none" if markup is None else f"+${markup:.2f} each")
    console.print(tbl)


def print_type_summary(console: Console, stats: RunStats) -> None:
    tbl = RichTable(title="Box Type Summary")
    tbl.add_column("Type", style="bold")
    tbl.add_column("Items", justify="right")
    for box_type, count in type_rows(stats):
        tbl.add_row(escape(box_type), str(count))
    console.print(tbl)


def print_usage(
    console: Console,
    rules: Sequence[PriceMarkupRule] = PRICE_RULES,
    type_mapping: Mapping[str, str] = TYPE_MAPPING,
) -> None:
    """Usage text shown when no input file is given."""
    console.print(escape("Usage: normalize <input.xlsx> [output.xlsx]"))
    console.print(f"\nExample: normalize MTZpricelist.xlsx {DEFAULT_OUTPUT}")
    console.print("\nPrice markup rules:")
    for rule in rules:
        console.print(f"  {rule.label:<10} +${rule.add:.2f}")
    console.print("\nBox type normalization:")
    for token, label in list(type_mapping.items())[:_USAGE_TYPE_EXAMPLES]:
        console.print(escape(f"  {token:<12} -> {label}"))
    console.print("  And more...")
