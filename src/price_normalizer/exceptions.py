"""Fatal errors raised while resolving the layout of a price list."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    "PriceListError",
    "HeaderNotFoundError",
    "ColumnsNotFoundError",
]


class PriceListError(ValueError):
    """Base class for errors that abort a normalization run."""


class HeaderNotFoundError(PriceListError):
    """Raised when no row carries all of the DESCRIPTION/PRICE/BRAND/TYPE markers."""

    def __init__(self, markers: Iterable[str]) -> None:
        self.markers = tuple(markers)
        names = ", ".join(self.markers[:-1]) + f", and {self.markers[-1]}"
        super().__init__(f"Could not find header row with {names} columns")


class ColumnsNotFoundError(PriceListError):
    """Raised when the header row lacks one or more of the required columns."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(
            "Could not find required columns "
            f"(missing: {', '.join(name.upper() for name in self.missing)})"
        )
