from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Any, Mapping, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from letor.train.metrics import RankingMetrics

console = Console()


def resolve_seed(seed: Optional[int]) -> int:
    """Draw a seed when none was given, so the run can be repeated from the options table."""
    return seed if seed is not None else secrets.randbelow(2**31 - 1)


def print_options(options: Mapping[str, Any]) -> None:
    table = Table(title="[bold]Command Options[/]", box=box.ROUNDED)
    table.add_column("Option")
    table.add_column("Value")
    for key, value in options.items():
        table.add_row(key, "[grey50]null[/]" if value is None else escape(str(value)))
    console.print(table)


def print_metrics(metrics: RankingMetrics, dataset_name: str) -> None:
    table = Table(title=f"[bold]{dataset_name} Data Evaluation Metrics[/]", box=box.ROUNDED)
    table.add_column("Metric")
    for k in range(1, metrics.truncation_level + 1):
        table.add_column(f"@{k}")
    table.add_row("DCG", *(f"{v:.4f}" for v in metrics.dcg))
    table.add_row("NDCG", *(f"{v:.4f}" for v in metrics.ndcg))
    console.print(table)
    console.print(f"Queries evaluated: {metrics.queries_evaluated}", style="dim")
    console.print()


def print_status(message: str, success: bool = True) -> None:
    indicator, color = ("✓", "green") if success else ("✗", "red")
    console.print(f"  [{indicator}]", style=f"bold {color}", end="")
    console.print(f" {message}", highlight=False)


def print_error(message: str) -> None:
    console.print(message, style="red", highlight=False, markup=False)
