# pricewatch/cli/runner.py

"""Headless CLI commands built on the price tracker."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from pricewatch.models.outcome import PriceResult
from pricewatch.models.price_record import PriceRecord
from pricewatch.services.tracker import PriceTracker

logger = logging.getLogger("pricewatch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _format_price(price: float | None) -> str:
    return f"${price:,.2f}" if price is not None else "N/A"


def _print_records(title: str, records: list[PriceRecord]) -> None:
    """Render a Rich table of price records to stdout."""
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Source", style="magenta")
    table.add_column("Confidence", justify="right")
    table.add_column("Recorded", style="dim")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, r in enumerate(records, 1):
        table.add_row(
            str(idx),
            (r.title or "—")[:50],
            _format_price(r.price),
            r.source,
            f"{r.confidence}%",
            r.recorded_at,
            r.url,
        )

    Console().print(table)


def _print_result(url: str, result: PriceResult) -> None:
    """Render one price lookup as a two-column table."""
    table = Table(title="Current Price", show_header=False, title_style="bold cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("URL", url)
    table.add_row("Title", result.title or "—")
    table.add_row(
        "Price",
        _format_price(float(result.price) if result.price is not None else None),
    )
    table.add_row("Source", result.source.value)
    table.add_row("Confidence", f"{result.confidence}%")
    table.add_row("Updated", result.last_updated)
    if result.suggestion:
        table.add_row("Suggestion", result.suggestion)
    if result.error:
        table.add_row("Error", f"[red]{result.error}[/red]")
    Console().print(table)


def run_check(
    tracker: PriceTracker,
    url: str,
    user_price: str | None,
    output_format: str,
) -> int:
    """Look up the current price; exit 1 when no price was found."""
    _err.print(f"[bold]Checking:[/bold] {url}")
    result = tracker.get_current_price(url, user_price)

    if output_format == "table":
        _print_result(url, result)
    else:
        json.dump(result.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")

    if result.price is None:
        _err.print(f"[yellow]No price found ({result.source.value}).[/yellow]")
        return 1
    return 0


def run_history(tracker: PriceTracker, url: str, days: int) -> int:
    """Show the recorded prices for one URL."""
    records = tracker.get_price_history(url, days)
    if not records:
        _err.print(f"[yellow]No records in the last {days} days.[/yellow]")
        return 1
    _print_records(f"Price History ({days} days)", records)
    return 0


def run_list(tracker: PriceTracker) -> int:
    """Show the latest record of every tracked product."""
    products = tracker.get_all_products()
    if not products:
        _err.print("[yellow]No tracked products.[/yellow]")
        return 0
    _print_records("Tracked Products", products)
    return 0


def run_delete(tracker: PriceTracker, url: str) -> int:
    """Delete all records for a URL."""
    result = tracker.delete_product(url)
    if result.success:
        _err.print(f"[green]✓ {result.message}[/green]")
        return 0
    _err.print(f"[yellow]{result.message}[/yellow]")
    return 1


def run_trend(tracker: PriceTracker, url: str, days: int) -> int:
    """Print the trend label for a URL's recent history."""
    trend = tracker.get_price_trend(url, days)
    Console().print(f"[bold]{trend}[/bold]")
    return 0
