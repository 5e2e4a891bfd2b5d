#!/usr/bin/env python3
"""
SKOLL - Valuation Report

Rich rendering of a Valuation: one row per component, then the totals.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from skoll.core.precise import WAD
from skoll.portfolio.valuer import Valuation


def format_wad(value: int, places: int = 6) -> str:
    """Exact decimal rendering of a WAD integer, truncated to ``places`` digits."""
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), WAD)
    if places <= 0:
        return f"{sign}{whole:,}"
    digits = f"{frac:018d}"[:places]
    return f"{sign}{whole:,}.{digits}"


def _label(address, labels: dict[str, str]) -> str:
    key = str(address)
    return labels.get(key, f"{key[:4]}...{key[-4:]}")


class ValuationReport:
    """
    Turns a Valuation into a table. Labels map addresses to symbols for display.
    """

    def __init__(self, labels: dict[str, str] | None = None, places: int = 6):
        self.labels = labels or {}
        self.places = places

    def build_table(self, valuation: Valuation) -> Table:
        table = Table(
            expand=True,
            show_header=True,
            header_style="bold bright_cyan",
            border_style="dim",
        )
        table.add_column("Component", style="white", min_width=12)
        table.add_column("Effective Unit", justify="right")
        table.add_column("Normalized", justify="right")
        table.add_column("Price", justify="right")
        table.add_column("Contribution", justify="right")

        for item in valuation.components:
            color = "green" if item.contribution >= 0 else "red"
            table.add_row(
                _label(item.component, self.labels),
                str(item.effective_unit),
                format_wad(item.normalized_unit, self.places),
                format_wad(item.price, self.places),
                Text(format_wad(item.contribution, self.places), style=color),
            )

        return table

    def build_panel(self, valuation: Valuation) -> Panel:
        quote = _label(valuation.quote_asset, self.labels)

        summary = Text()
        summary.append(f"  Master total: {format_wad(valuation.total_in_master_quote, self.places)}")
        summary.append(f"  |  Quote rate: {format_wad(valuation.quote_rate, self.places)}")
        summary.append(
            f"  |  Value: {format_wad(valuation.value, self.places)} {quote}",
            style="bold green",
        )

        table = self.build_table(valuation)
        table.caption = summary
        return Panel(table, title=f"[bold bright_white]Valuation in {quote}[/]", border_style="bright_blue")

    def render(self, valuation: Valuation, console: Console | None = None):
        (console or Console()).print(self.build_panel(valuation))
