"""price-list-normalizer — Turn supplier price lists into a clean, marked-up sheet."""

__version__ = "0.1.0"

HEADER_MARKERS: list[str] = ["DESCRIPTION", "PRICE", "BRAND", "TYPE"]
