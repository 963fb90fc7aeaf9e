"""Fixed lookup tables and the run configuration built from them."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from price_normalizer.models import PriceMarkupRule

# ── Tables ───────────────────────────────────────────────────────

PRICE_RULES: tuple[PriceMarkupRule, ...] = (
    PriceMarkupRule(min=0, max=10, add=1.00),
    PriceMarkupRule(min=10, max=20, add=1.50),
    PriceMarkupRule(min=20, max=30, add=2.00),
    PriceMarkupRule(min=30, max=40, add=2.50),
    PriceMarkupRule(min=40, max=50, add=3.00),
    PriceMarkupRule(min=50, max=math.inf, add=3.50),
)

TYPE_MAPPING: Mapping[str, str] = MappingProxyType(
    {
        "100.Regular": "Original Box",
        "101.Tester": "Tester Box",
        "102.Set": "Set",
        "103.Unbox": "Unbox",
        "104.Mini": "Mini",
        "105.Mini Set": "Mini Set",
        "106.Body Mist": "Body Mist",
        "107.Body Lotion": "Body Lotion",
        "108.Deo": "Deo",
        "109.Vial": "Vial",
        "110.Candles": "Candles",
        "111.Undefined": "Undefined",
        "112.Body Wash": "Body Wash",
        "113.Shower Gel": "Shower Gel",
        "114.After Shave": "After Shave",
        "115.Skincare and Cosmetics": "Skincare and Cosmetics",
    }
)

FALLBACK_TYPE = "Undefined"
UNPRICED_LABEL = "Unpriced"

OUTPUT_HEADER: tuple[str, ...] = ("BRAND", "DESCRIPTION", "CAJA", "PRICE")
COLUMN_WIDTHS: tuple[int, ...] = (20, 50, 20, 12)
OUTPUT_SHEET_TITLE = "Normalized Price List"
DEFAULT_OUTPUT = "normalized-prices.xlsx"


def validate_rules(rules: Sequence[PriceMarkupRule]) -> tuple[PriceMarkupRule, ...]:
    """Check that *rules* partition ``[0, inf)`` into ordered, contiguous bands."""
    ordered = tuple(rules)
    if not ordered:
        raise ValueError("At least one price rule is required")
    if ordered[0].min != 0:
        raise ValueError("The first price band must start at 0")
    for prev, nxt in zip(ordered, ordered[1:]):
        if prev.max != nxt.min:
            raise ValueError(
                f"Price bands must be contiguous: {prev.label} is followed by {nxt.label}"
            )
    if not ordered[-1].unbounded:
        raise ValueError("The last price band must be unbounded")
    return ordered


@dataclass(frozen=True)
class NormalizerConfig:
    """Lookup tables shared by every row of a run."""

    rules: tuple[PriceMarkupRule, ...] = PRICE_RULES
    type_mapping: Mapping[str, str] = field(default_factory=lambda: TYPE_MAPPING)
    fallback_type: str = FALLBACK_TYPE

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", validate_rules(self.rules))
        if not isinstance(self.type_mapping, MappingProxyType):
            object.__setattr__(
                self, "type_mapping", MappingProxyType(dict(self.type_mapping))
            )

    def with_type_overrides(self, overrides: Mapping[str, str]) -> NormalizerConfig:
        """Return a copy whose type mapping has *overrides* merged on top."""
        if not overrides:
            return self
        merged = {**self.type_mapping, **overrides}
        return NormalizerConfig(
            rules=self.rules,
            type_mapping=merged,
            fallback_type=self.fallback_type,
        )


def default_config() -> NormalizerConfig:
    return NormalizerConfig()


def load_type_map(path: Path | None) -> dict[str, str]:
    """Read ``token=label`` lines from *path* into a dict.

    Blank lines and lines starting with ``#`` are ignored.
    """
    if not path:
        return {}
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Type map not found: {path} (expected lines like 101.Tester=Tester Box)")
    if path.is_dir():
        raise ValueError(f"Type map is a directory, not a file: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read type map {path}: {exc}") from exc

    mapping: dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            raise ValueError(
                f"Invalid type map line {lineno}: {stripped!r}  (expected token=label)"
            )
        token, label = (part.strip() for part in stripped.split("=", 1))
        if not token or not label:
            raise ValueError(
                f"Invalid type map line {lineno}: token and label must be non-empty"
            )
        mapping[token] = label
    return mapping
