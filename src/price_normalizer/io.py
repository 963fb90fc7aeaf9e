"""I/O helpers — load the first sheet of an input price list."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Any, Callable, Literal, cast

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

Cell = str | None

# Only truly empty cells are missing; "N/A", "NA" or "None" stay text.
_READ_OPTIONS: dict[str, Any] = {
    "sheet_name": 0,
    "header": None,
    "dtype": "string",
    "keep_default_na": False,
    "na_values": [""],
}

# ── Loading ──────────────────────────────────────────────────────


def _frame_to_rows(df: pd.DataFrame) -> list[list[Cell]]:
    rows: list[list[Cell]] = []
    for values in df.itertuples(index=False, name=None):
        rows.append([None if pd.isna(val) else str(val) for val in values])
    return rows


def _read_csv(path: Path, delimiter: str | None) -> pd.DataFrame:
    last_exc: Exception | None = None
    sep = delimiter if delimiter else None
    engine: Literal["c", "python"] = "c" if delimiter else "python"
    for encoding in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return pd.read_csv(
                path,
                header=None,
                dtype="string",
                sep=sep,
                engine=engine,
                encoding=encoding,
                encoding_errors="strict",
                keep_default_na=False,
                na_values=[""],
                skip_blank_lines=False,
            )
        except (UnicodeDecodeError, pd.errors.ParserError) as exc:
            last_exc = exc
    raise ValueError(f"Could not read CSV {path} (decode or parse failed)") from last_exc


def load_sheet(path: Path, delimiter: str | None = None) -> list[list[Cell]]:
    """Load the first sheet of *path* as rows of text cells.

    Empty cells come back as ``None`` and numbers as their text, so prices are
    always parsed downstream.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the extension is not supported, or the file cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return _frame_to_rows(_read_csv(path, delimiter))

    read_excel = cast(Callable[..., pd.DataFrame], getattr(pd, "read_excel"))

    if suffix in (".xlsx", ".xlsm", ".xltx", ".xltm"):
        try:
            df = read_excel(path, engine="openpyxl", **_READ_OPTIONS)
        except (KeyError, ValueError, OSError, InvalidFileException, zipfile.BadZipFile) as exc:
            raise ValueError(f"Could not read spreadsheet {path}: {exc}") from exc
        return _frame_to_rows(df)

    if suffix == ".xls":
        try:
            df = read_excel(path, engine="xlrd", **_READ_OPTIONS)
        except ImportError as exc:
            raise ValueError(
                "Unsupported .xls input unless 'xlrd' is installed. "
                "Either convert to .xlsx or add dependency: pip install xlrd"
            ) from exc
        return _frame_to_rows(df)

    raise ValueError(f"Unsupported file type: {suffix!r}. Use .xlsx, .xls, or .csv")
