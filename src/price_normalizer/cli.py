"""CLI entry point for price-list-normalizer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from price_normalizer import __version__
from price_normalizer.config import DEFAULT_OUTPUT, default_config, load_type_map
from price_normalizer.exceptions import PriceListError
from price_normalizer.io import load_sheet
from price_normalizer.pipeline import locate_header, map_columns, normalize_rows
from price_normalizer.report import write_price_list
from price_normalizer.summary import print_pricing_summary, print_type_summary, print_usage

app = typer.Typer(
    name="normalize",
    help="price-list-normalizer — Turn supplier price lists into a clean, marked-up sheet.",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {escape(msg)}")


def _fail(msg: str) -> typer.Exit:
    _err(msg)
    return typer.Exit(code=1)


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"price-list-normalizer v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("price_normalizer").setLevel(logging.DEBUG if verbose else logging.WARNING)


# ── normalize command ────────────────────────────────────────────


@app.command()
def normalize(
    input_file: Path | None = typer.Argument(
        None,
        help="Price list to normalize (.xlsx, .xls or .csv).",
        show_default=False,
    ),
    output_file: Path = typer.Argument(
        Path(DEFAULT_OUTPUT),
        help="Where to write the normalized workbook.",
    ),
    type_map: Path | None = typer.Option(
        None, "--type-map", "-t",
        help="File of extra box-type mappings (token=label lines).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress progress and summary output; errors are still shown.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log header detection and skipped rows.",
    ),
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Normalize a price list: clean descriptions, map box types, mark up prices."""
    _configure_logging(verbose)
    echo = _printer(quiet)

    if input_file is None:
        print_usage(console)
        raise typer.Exit(code=1)

    if not input_file.exists():
        raise _fail(f"Error: File not found: {input_file}")

    try:
        config = default_config().with_type_overrides(load_type_map(type_map))
    except ValueError as exc:
        raise _fail(str(exc)) from exc

    # ── Load ─────────────────────────────────────────────────────
    echo(f"Reading price list from: {escape(str(input_file))}")
    try:
        rows = load_sheet(input_file)
    except (FileNotFoundError, ValueError, OSError) as exc:
        raise _fail(str(exc)) from exc

    try:
        # ── Header + columns ─────────────────────────────────────
        try:
            header_index = locate_header(rows)
            columns = map_columns(rows[header_index])
        except PriceListError as exc:
            raise _fail(f"Error: {exc}") from exc

        echo(f"Found headers at row {header_index + 1}")
        echo(
            f"Column indices - Description: {columns.description}, "
            f"Price: {columns.price}, Brand: {columns.brand}, Type: {columns.type}"
        )

        # ── Normalize ────────────────────────────────────────────
        normalized, stats = normalize_rows(rows, header_index, columns, config)
        echo(f"Processed {stats.rows_out} items, skipped {stats.skipped_rows} rows")

        # ── Write ────────────────────────────────────────────────
        echo(f"Writing normalized price list to: {escape(str(output_file))}")
        try:
            out_path = write_price_list(output_file, normalized)
        except OSError as exc:
            raise _fail(f"Could not write {output_file}: {exc}") from exc
        logger.debug("Wrote %d rows to %s", len(normalized), out_path)

        if not quiet:
            console.print(Panel(
                f"[green]Done[/green] — {stats.rows_out} products -> {escape(str(out_path))}",
                title="Normalization Complete", border_style="green",
            ))
            print_pricing_summary(console, stats, config.rules)
            print_type_summary(console, stats)
    except typer.Exit:
        raise
    except Exception as exc:
        raise _fail(f"Unexpected internal error: {exc}") from exc
