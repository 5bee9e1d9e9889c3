"""
Cache CLI Commands
==================

CLI commands for the offline cache:
- Show cache statistics (default)
- Clear the cache
"""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer(name="cache", help="Manage the offline cache", invoke_without_command=True)
console = Console()


def _format_size(size: int) -> str:
    if size > 1024 * 1024:
        return f"{size / 1024 / 1024:.2f} MB"
    return f"{size / 1024:.1f} KB"


@app.callback(invoke_without_command=True)
def cache(ctx: typer.Context):
    """Show cache info (default) or run a cache subcommand."""
    if ctx.invoked_subcommand is None:
        info()


@app.command()
def info():
    """Show what the offline cache holds."""
    from geo_data.registry import RegistryService

    service = RegistryService()
    stats = service.cache_stats()

    if stats is None:
        console.print("No cached data")
        return

    table = Table(title="Cache Info")
    table.add_column("Property", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Entries", str(stats.entry_count))
    table.add_row("Size", _format_size(stats.total_bytes))
    table.add_row("Location", str(service.settings.cache_dir))
    console.print(table)
    console.print("[dim]Run: geo-data cache clear[/dim]")


@app.command()
def clear():
    """Delete every cached registry payload."""
    from geo_data.registry import RegistryService

    try:
        RegistryService().clear_cache()
    except OSError as e:
        console.print(f"[red]Failed to clear cache: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓[/green] Cache cleared")


if __name__ == "__main__":
    app()
