# src/interface/cli.py

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


console = Console()


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]💬 Comment Search Service[/bold cyan]\n"
        "[dim]Post comments, search them with full-text queries[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def display_configuration(backend: str, store_location: str, index_name: str) -> None:
    table = Table(box=box.ROUNDED, show_header=False, border_style="dim")
    table.add_column(style="dim")
    table.add_column(style="bold white")
    table.add_row("Backend", backend)
    table.add_row("Store", store_location)
    table.add_row("Index", index_name)
    console.print(table)


def display_bootstrap_status(index_name: str, created: bool) -> None:
    if created:
        console.print(f"\n[green]✓[/green] Index [bold]{index_name}[/bold] created.\n")
    else:
        console.print(f"\n[green]✓[/green] Index [bold]{index_name}[/bold] ready.\n")


def display_serving(host: str, port: int) -> None:
    console.print(f"[bold]Listening on[/bold] [cyan]http://{host}:{port}[/cyan]\n")


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {escape(message)}\n")
