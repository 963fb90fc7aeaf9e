"""Excel writer — produces the normalized price list workbook."""

from __future__ import annotations

from collections.abc import Iterable
from numbers import Real
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from price_normalizer.config import COLUMN_WIDTHS, OUTPUT_HEADER, OUTPUT_SHEET_TITLE
from price_normalizer.models import NormalizedRow

# ── Style constants ──────────────────────────────────────────────

HEADER_FONT = Font(name="Calibri", bold=True, size=11, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
HEADER_ALIGN = Alignment(horizontal="center", vertical="center")

PRICE_FMT = "0.00"
_PRICE_COLUMN = OUTPUT_HEADER.index("PRICE") + 1


# ── Helpers ──────────────────────────────────────────────────────


def _style_header(ws: Worksheet, ncols: int) -> None:
    for c in range(1, ncols + 1):
        cell = ws.cell(row=1, column=c)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGN


def _apply_widths(ws: Worksheet, widths: Iterable[int]) -> None:
    for c_idx, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(c_idx)].width = width


def _excel_value(val: Any) -> Any:
    if not isinstance(val, str):
        return val
    # Control characters are not allowed in worksheet XML.
    val = ILLEGAL_CHARACTERS_RE.sub("", val)
    # openpyxl stores any string starting with "=" as a formula.
    if val.startswith("="):
        return f"'{val}"
    return val


def _write_rows(ws: Worksheet, rows: Iterable[NormalizedRow]) -> None:
    for c_idx, name in enumerate(OUTPUT_HEADER, 1):
        ws.cell(row=1, column=c_idx, value=name)
    for r_idx, row in enumerate(rows, 2):
        for c_idx, val in enumerate(row.to_list(), 1):
            cell = ws.cell(row=r_idx, column=c_idx, value=_excel_value(val))
            if c_idx == _PRICE_COLUMN and isinstance(val, Real) and not isinstance(val, bool):
                cell.number_format = PRICE_FMT


# ── Public API ───────────────────────────────────────────────────


def write_price_list(path: Path, rows: Iterable[NormalizedRow]) -> Path:
    """Write the fixed header plus *rows* to a single-sheet workbook at *path*."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    if ws is None:
        ws = wb.create_sheet()
    ws.title = OUTPUT_SHEET_TITLE

    _write_rows(ws, rows)
    _style_header(ws, len(OUTPUT_HEADER))
    _apply_widths(ws, COLUMN_WIDTHS)
    ws.freeze_panes = "A2"

    tmp_path = path.with_name(f"{path.stem}.tmp{path.suffix}")
    wb.save(tmp_path)
    tmp_path.replace(path)
    return path
