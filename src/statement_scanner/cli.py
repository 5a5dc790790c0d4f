import typer
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from statement_scanner.categorization import CategoryRegistry, RuleSet, describe_resolution
from statement_scanner.config.settings import ConfigLoader
from statement_scanner.domain.enums import AppState, TransactionType
from statement_scanner.export.csv_export import default_export_filename, write_csv
from statement_scanner.gateway.factory import GatewayFactory
from statement_scanner.logging_setup import configure_logging
from statement_scanner.services.session import ScannerSession

app = typer.Typer(
    name="statement-scanner",
    help="Extract, categorize and summarize credit card statements",
    add_completion=False,
)

console = Console()

# Terminal colors for the category palette
RICH_COLORS = {
    "emerald": "spring_green3",
    "green": "green",
    "lime": "chartreuse3",
    "teal": "dark_cyan",
    "cyan": "cyan",
    "sky": "deep_sky_blue1",
    "blue": "blue",
    "indigo": "slate_blue1",
    "violet": "medium_purple",
    "purple": "purple",
    "fuchsia": "magenta",
    "pink": "hot_pink",
    "rose": "light_coral",
    "red": "red",
    "orange": "dark_orange",
    "amber": "orange1",
    "yellow": "yellow",
    "slate": "grey62",
    "gray": "grey50",
    "zinc": "grey54",
    "neutral": "grey58",
    "stone": "wheat4",
}
FALLBACK_RICH_COLOR = "grey70"


class State:
    verbose: bool = False


state = State()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    Statement Scanner - Extract, categorize, and analyze card statements.
    """
    configure_logging("DEBUG" if verbose else None)

    if not GatewayFactory.get_available_providers():
        GatewayFactory.load_gateways_from_config()

    state.verbose = verbose


def _category_label(registry: CategoryRegistry, category: str) -> str:
    color = RICH_COLORS.get(registry.color_for(category).id, FALLBACK_RICH_COLOR)
    return f"[{color}]{category}[/{color}]"


def _build_session(
    rules_file: Optional[Path],
    categories_file: Optional[Path],
    provider: Optional[str] = None,
) -> ScannerSession:
    rules_config = ConfigLoader.load_file(rules_file) if rules_file else None
    categories_config = ConfigLoader.load_file(categories_file) if categories_file else None
    return ScannerSession(
        rule_set=RuleSet.from_config(rules_config),
        categories=CategoryRegistry.from_config(categories_config),
        gateway=GatewayFactory.create_gateway(provider) if provider else None,
    )


RULES_OPTION = typer.Option(
    None,
    "--rules",
    help="JSON file with keyword rules (replaces the configured rules)",
    exists=True,
    dir_okay=False,
)
CATEGORIES_OPTION = typer.Option(
    None,
    "--categories",
    help="JSON file with categories (replaces the configured categories)",
    exists=True,
    dir_okay=False,
)


@app.command(name="scan")
def scan(
    filepath: Path = typer.Argument(
        ...,
        help="Path to a PDF statement",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    search_text: str = typer.Option(
        "",
        "--search", "-s",
        help="Only show transactions matching this text (description, amount or card)",
    ),
    export: Optional[Path] = typer.Option(
        None,
        "--export", "-e",
        help="Write the categorized transactions to this CSV file",
    ),
    export_default: bool = typer.Option(
        False,
        "--export-default",
        help="Write the CSV export next to the statement with a generated name",
    ),
    provider: Optional[str] = typer.Option(
        None,
        "--provider", "-p",
        help="Extraction provider (defaults to the configured one)",
    ),
    rules_file: Optional[Path] = RULES_OPTION,
    categories_file: Optional[Path] = CATEGORIES_OPTION,
):
    """
    Extract and categorize transactions from a statement.

    Examples:
        statement-scanner scan statement.pdf
        statement-scanner scan statement.pdf --search 0547
        statement-scanner scan statement.pdf --export out.csv
    """
    try:
        session = _build_session(rules_file, categories_file, provider)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Analyzing statement...", total=None)
            result_state = session.upload(filepath)
            progress.update(task, completed=True)

        if result_state == AppState.ERROR:
            console.print(Panel(
                f"[red]{session.error_message}[/red]",
                title="Processing Error",
                border_style="red"
            ))
            raise typer.Exit(code=1)

        session.set_search(search_text)
        resolved = session.resolved_transactions()
        visible = session.visible_transactions()
        summary = session.summary()
        check = session.reconciliation()

        console.print(Panel.fit(
            f"[bold cyan]{session.filename}[/bold cyan]\n"
            f"Extracted {len(resolved)} items\n"
            f"Period: {session.store.period}",
            border_style="cyan"
        ))

        if check.reconciled:
            console.print(Panel(
                f"The calculated total (${check.computed_total:,.2f}) matches the "
                f"statement summary (${check.reported_total:,.2f}).",
                title="[bold green]✓ Data validation successful[/bold green]",
                border_style="green"
            ))
        elif check.reported_total is not None:
            console.print(
                f"[yellow]Calculated total ${check.computed_total:,.2f} differs from the "
                f"statement summary ${check.reported_total:,.2f}[/yellow]"
            )

        console.print(
            f"\n[bold]Total Spend:[/bold] ${summary.total_spend:,.2f}   "
            f"[bold]Transactions:[/bold] {len(resolved)}"
        )
        if search_text:
            console.print(f"[dim]Showing {len(visible)} matching '{search_text}'[/dim]")

        txn_table = Table(show_header=True, padding=(0, 1))
        txn_table.add_column("Date", style="cyan", width=10)
        txn_table.add_column("Description", style="white", max_width=40)
        txn_table.add_column("Card", justify="center", width=6)
        txn_table.add_column("Category", width=18)
        txn_table.add_column("Amount", justify="right", width=12)
        if state.verbose:
            txn_table.add_column("Source", style="dim")

        for txn in visible:
            desc = txn.description[:37] + "..." if len(txn.description) > 40 else txn.description

            if txn.type == TransactionType.EXPENSE:
                amount_str = f"${txn.amount:,.2f}"
            else:
                amount_str = f"[green]-${abs(txn.amount):,.2f}[/green]"

            row = [
                txn.date,
                desc,
                txn.card_last4 or "",
                _category_label(session.categories, txn.category),
                amount_str,
            ]
            if state.verbose:
                resolution = describe_resolution(session.store.get(txn.id), session.rule_set)
                source = resolution.source
                if resolution.rule:
                    source += f" ({resolution.rule.keyword})"
                row.append(source)
            txn_table.add_row(*row)

        console.print(txn_table)

        if summary.breakdown:
            console.print("\n[bold]Spending Analysis[/bold]")

            category_table = Table(show_header=True, box=None, padding=(0, 2))
            category_table.add_column("Category", no_wrap=True)
            category_table.add_column("Amount", justify="right")
            category_table.add_column("% of Total", justify="right", style="dim")

            for row in summary.breakdown:
                category_table.add_row(
                    _category_label(session.categories, row.category),
                    f"${row.amount:,.2f}",
                    f"{row.percentage:.1f}%"
                )

            console.print(category_table)

        if export_default and export is None:
            export = filepath.parent / default_export_filename()

        if export is not None:
            written = write_csv(export, resolved)
            console.print(f"\n[bold green]✓ Exported {len(resolved)} transactions to {written}[/bold green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


@app.command(name="rules")
def rules(rules_file: Optional[Path] = RULES_OPTION):
    """
    List keyword rules in priority order (first match wins).
    """
    try:
        rule_set = RuleSet.from_config(ConfigLoader.load_file(rules_file) if rules_file else None)

        if not len(rule_set):
            console.print(Panel(
                "[yellow]No keyword rules configured[/yellow]",
                title="Rules",
                border_style="yellow"
            ))
            return

        table = Table(title="Keyword Rules", show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Keyword", style="cyan")
        table.add_column("Category", style="magenta")
        for priority, rule in enumerate(rule_set, start=1):
            table.add_row(str(priority), rule.keyword, rule.category)

        console.print(table)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


@app.command(name="categories")
def categories(categories_file: Optional[Path] = CATEGORIES_OPTION):
    """
    List known categories with their colors.
    """
    try:
        registry = CategoryRegistry.from_config(
            ConfigLoader.load_file(categories_file) if categories_file else None
        )

        table = Table(title="Categories", show_header=True)
        table.add_column("Category")
        table.add_column("Color", style="dim")
        for config in registry:
            table.add_row(_category_label(registry, config.name), config.color.id)

        console.print(table)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
