"""Header discovery, column mapping and row normalization — pure functions."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from price_normalizer import HEADER_MARKERS
from price_normalizer.config import (
    FALLBACK_TYPE,
    PRICE_RULES,
    TYPE_MAPPING,
    UNPRICED_LABEL,
    NormalizerConfig,
    default_config,
)
from price_normalizer.exceptions import ColumnsNotFoundError, HeaderNotFoundError
from price_normalizer.models import ColumnMap, NormalizedRow, PriceMarkupRule, RunStats

logger = logging.getLogger(__name__)

RawRow = Sequence[Any]

# ── Description patterns ─────────────────────────────────────────

# Single capitalized word only: "- France -" goes, "- United Kingdom -" stays.
_COUNTRY_RE = re.compile(r"\s*-\s*[A-Z][a-z]+\s*-")
_PRODUCT_CODE_RE = re.compile(r"\s*\(\d+\)")
_BOX_QUANTITY_RE = re.compile(r"\s*-\s*\d+pcs\s+ByBox", re.IGNORECASE)
_BYBOX_RE = re.compile(r"\s*ByBox", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

# Plain ASCII decimal notation; no digit separators or non-ASCII digits.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

_CENT = Decimal("0.01")


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _cell(row: RawRow, index: int) -> Any:
    return row[index] if index < len(row) else None


# ── Header + columns ─────────────────────────────────────────────


def locate_header(rows: Sequence[RawRow]) -> int:
    """Return the index of the first row mentioning every header marker.

    Cells are joined with ``|`` and upper-cased, so markers embedded in longer
    headers (``PRODUCT DESCRIPTION``) count.
    """
    for idx, row in enumerate(rows):
        joined = "|".join(_cell_text(cell) for cell in row).upper()
        if all(marker in joined for marker in HEADER_MARKERS):
            logger.debug("Header row found at index %d", idx)
            return idx
    raise HeaderNotFoundError(HEADER_MARKERS)


def _find_column(header: RawRow, matches: Callable[[str], bool]) -> int | None:
    for idx, cell in enumerate(header):
        if _is_blank(cell):
            continue
        if matches(str(cell).strip().upper()):
            return idx
    return None


def map_columns(header: RawRow) -> ColumnMap:
    """Resolve the positions of description, price, brand and type in *header*."""
    found = {
        "description": _find_column(header, lambda text: "DESCRIPTION" in text),
        "price": _find_column(header, lambda text: text == "PRICE"),
        "brand": _find_column(header, lambda text: text == "BRAND"),
        "type": _find_column(header, lambda text: text == "TYPE"),
    }
    missing = [name for name, idx in found.items() if idx is None]
    if missing:
        raise ColumnsNotFoundError(missing)
    columns = ColumnMap(**found)
    logger.debug("Column map: %s", columns.to_dict())
    return columns


# ── Field normalisation ──────────────────────────────────────────


def normalize_description(value: Any) -> str:
    """Strip country tags, product codes and ByBox noise from a description."""
    if _is_blank(value):
        return ""
    text = str(value).strip()
    text = _COUNTRY_RE.sub("", text)
    text = _PRODUCT_CODE_RE.sub("", text)
    text = _BOX_QUANTITY_RE.sub("", text)
    text = _BYBOX_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_brand(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_type(
    value: Any,
    type_mapping: Mapping[str, str] = TYPE_MAPPING,
    fallback: str = FALLBACK_TYPE,
) -> str:
    """Map a coded box type to its label; unknown codes pass through trimmed."""
    if _is_blank(value):
        return fallback
    token = str(value).strip()
    return type_mapping.get(token, token)


def parse_price(value: Any) -> float | None:
    """Return *value* as a finite float, or ``None`` when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    text = str(value).strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def find_rule(
    value: float, rules: Sequence[PriceMarkupRule] = PRICE_RULES
) -> PriceMarkupRule | None:
    for rule in rules:
        if rule.contains(value):
            return rule
    return None


def _round_cents(value: Decimal) -> float:
    return float(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def apply_price_markup(value: Any, rules: Sequence[PriceMarkupRule] = PRICE_RULES) -> Any:
    """Add the band markup to *value* and round to cents.

    Empty or non-numeric values come back untouched.
    """
    if not value:
        return value
    number = parse_price(value)
    if number is None:
        return value
    rule = find_rule(number, rules)
    amount = Decimal(repr(number))
    if rule is None:
        return _round_cents(amount)
    return _round_cents(amount + Decimal(repr(rule.add)))


def price_band_label(value: Any, rules: Sequence[PriceMarkupRule] = PRICE_RULES) -> str:
    """Label of the band holding the original price, or ``Unpriced``."""
    number = parse_price(value)
    if number is None:
        return UNPRICED_LABEL
    rule = find_rule(number, rules)
    return rule.label if rule is not None else UNPRICED_LABEL


# ── Rows ─────────────────────────────────────────────────────────


def is_admissible(row: RawRow, columns: ColumnMap) -> bool:
    """A row needs a description, a price and a brand; the type is optional."""
    return not any(
        _is_blank(_cell(row, idx))
        for idx in (columns.description, columns.price, columns.brand)
    )


def normalize_row(
    row: RawRow, columns: ColumnMap, config: NormalizerConfig | None = None
) -> NormalizedRow:
    config = config or default_config()
    return NormalizedRow(
        brand=normalize_brand(_cell(row, columns.brand)),
        description=normalize_description(_cell(row, columns.description)),
        box_type=normalize_type(
            _cell(row, columns.type), config.type_mapping, config.fallback_type
        ),
        price=apply_price_markup(_cell(row, columns.price), config.rules),
    )


def normalize_rows(
    rows: Sequence[RawRow],
    header_index: int,
    columns: ColumnMap,
    config: NormalizerConfig | None = None,
) -> tuple[list[NormalizedRow], RunStats]:
    """Normalize every row below *header_index*.

    Returns ``(normalized_rows, stats)``.  Rows failing the admission check are
    counted in ``stats.skipped_rows`` and left out.
    """
    config = config or default_config()
    stats = RunStats()
    normalized: list[NormalizedRow] = []

    for offset, row in enumerate(rows[header_index + 1:], header_index + 1):
        if not is_admissible(row, columns):
            logger.debug("Skipping row %d: missing description, price or brand", offset + 1)
            stats.skip()
            continue
        out = normalize_row(row, columns, config)
        normalized.append(out)
        stats.record(price_band_label(_cell(row, columns.price), config.rules), out.box_type)

    logger.debug(
        "Processed %d rows, skipped %d", stats.rows_out, stats.skipped_rows
    )
    return normalized, stats


def normalize_sheet(
    rows: Sequence[RawRow], config: NormalizerConfig | None = None
) -> tuple[int, ColumnMap, list[NormalizedRow], RunStats]:
    """Locate the header, map the columns and normalize the data rows."""
    header_index = locate_header(rows)
    columns = map_columns(rows[header_index])
    normalized, stats = normalize_rows(rows, header_index, columns, config)
    return header_index, columns, normalized, stats
