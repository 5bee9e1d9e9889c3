"""
geo-data CLI
============

Command-line interface for geo-data.

Usage:
    geo-data init                       Create geo-data.json in this project
    geo-data add sa ae                  Install countries
    geo-data update                     Re-download installed countries
    geo-data remove sa                  Remove countries
    geo-data list [--installed]         List available countries
    geo-data generate                   Regenerate the accessor module
    geo-data cache [info|clear]         Manage the offline cache
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from geo_data.errors import GeoDataError
from geo_data.registry.cli import app as cache_app

app = typer.Typer(
    name="geo-data",
    help="Copy only the countries you need. No bloat.",
    add_completion=False,
)
console = Console()

app.add_typer(cache_app, name="cache", help="Manage the offline cache")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """geo-data: selective geographic datasets for your project."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _require_config():
    """Load geo-data.json or exit with a helpful message."""
    from geo_data.core.config import ConfigStatus, get_config_result

    result = get_config_result()
    if result.status == ConfigStatus.OK:
        return result.config

    if result.status == ConfigStatus.NOT_FOUND:
        console.print("[red]No geo-data.json found. Run 'geo-data init' first.[/red]")
    else:
        console.print(f"[red]Invalid {result.path.name}: {escape(result.error)}[/red]")
    raise typer.Exit(1)


def _print_report(report) -> None:
    """Render an InstallReport."""
    from geo_data.registry import InstallStatus

    if report.error:
        console.print(f"[red]{escape(report.error)}[/red]")

    styles = {
        InstallStatus.INSTALLED: "green",
        InstallStatus.REMOVED: "green",
        InstallStatus.PLANNED: "cyan",
        InstallStatus.SKIPPED: "yellow",
    }
    for outcome in report.outcomes:
        style = styles.get(outcome.status, "red")
        line = f"[{style}]{outcome.status.value:>9}[/{style}]  {outcome.label or outcome.code.upper()}"
        if outcome.size_bytes:
            line += f" ({outcome.size_bytes / 1024:.1f} KB)"
        if outcome.message:
            line += f"  [dim]{escape(outcome.message)}[/dim]"
        console.print(line)
        if outcome.suggestion:
            console.print(f"           Did you mean {outcome.suggestion.upper()}?")

    if report.generated:
        console.print(f"[green]✓[/green] Generated {report.generated}")
    if report.dry_run:
        console.print("[dim](dry run, nothing written)[/dim]")


def _run(operation):
    """Run an operation at the CLI boundary; failures exit non-zero."""
    try:
        return operation()
    except (GeoDataError, OSError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def init(
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="Where datasets are stored"),
    languages: Optional[List[str]] = typer.Option(None, "--language", "-l", help="Language to keep (repeatable)"),
    coordinates: bool = typer.Option(False, "--coordinates/--no-coordinates", help="Keep latitude/longitude"),
    typescript: Optional[bool] = typer.Option(None, "--typescript/--javascript", help="Generated module flavour"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
):
    """Initialize geo-data in this project."""
    from geo_data.core.config import CONFIG_FILE, detect_defaults, find_config_file, validate_config

    existing = find_config_file()
    if existing and not force:
        console.print(f"[yellow]{existing.name} already exists. Use --force to overwrite.[/yellow]")
        raise typer.Exit(1)

    defaults = detect_defaults()
    raw = defaults.to_dict()
    if output_dir is not None:
        raw["outputDir"] = output_dir
    if languages:
        raw["languages"] = languages
    raw["includeCoordinates"] = coordinates
    if typescript is not None:
        raw["typescript"] = typescript

    config = _run(lambda: validate_config(raw))
    path = _run(lambda: config.save(Path.cwd() / CONFIG_FILE))
    _run(lambda: config.output_path.mkdir(parents=True, exist_ok=True))

    table = Table(title=f"Created {path.name}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Output", config.output_dir)
    table.add_row("Module", config.module_name)
    table.add_row("Languages", ", ".join(config.languages))
    table.add_row("Coordinates", "yes" if config.include_coordinates else "no")
    console.print(table)
    console.print("[dim]Next: geo-data add sa ae[/dim]")


@app.command()
def add(
    countries: List[str] = typer.Argument(..., help="Country codes (e.g. sa ae fr)"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite installed countries"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Preview without writing"),
):
    """Add countries to your project."""
    from geo_data.registry import CountryInstaller

    config = _require_config()
    report = _run(lambda: CountryInstaller(config).add(countries, force=force, dry_run=dry_run))
    _print_report(report)
    raise typer.Exit(report.exit_code)


@app.command()
def update(
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Preview without writing"),
):
    """Re-download installed countries."""
    from geo_data.registry import CountryInstaller

    config = _require_config()
    report = _run(lambda: CountryInstaller(config).update(dry_run=dry_run))
    _print_report(report)
    raise typer.Exit(report.exit_code)


@app.command()
def remove(
    countries: List[str] = typer.Argument(..., help="Country codes to remove"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Preview without deleting"),
):
    """Remove countries from your project."""
    from geo_data.registry import CountryInstaller

    config = _require_config()
    report = _run(lambda: CountryInstaller(config).remove(countries, dry_run=dry_run))
    _print_report(report)
    raise typer.Exit(report.exit_code)


@app.command(name="list")
def list_countries(
    installed_only: bool = typer.Option(False, "--installed", "-i", help="Only installed countries"),
):
    """List available countries."""
    from geo_data.core.config import ConfigStatus, get_config_result
    from geo_data.registry import RegistryService, get_installed_countries

    resolution = _run(lambda: RegistryService().resolve_index())
    if not resolution.ok:
        console.print(f"[red]Could not load registry: {escape(resolution.message)}[/red]")
        raise typer.Exit(1)
    index = resolution.value

    config_result = get_config_result()
    installed = set()
    if config_result.status == ConfigStatus.OK:
        installed = set(get_installed_countries(config_result.config.output_path))

    codes = index.sorted_by_name()
    if installed_only:
        codes = [c for c in codes if c in installed]
        if not codes:
            console.print("[yellow]No countries installed yet[/yellow]")
            console.print("[dim]Run: geo-data add sa ae qa[/dim]")
            return

    table = Table(title="Installed Countries" if installed_only else "Available Countries")
    table.add_column("", width=1)
    table.add_column("Code", style="cyan")
    table.add_column("Country", style="white")
    table.add_column("Languages", style="dim")

    for code in codes:
        summary = index.countries[code]
        marker = "[green]●[/green]" if code in installed else "[dim]○[/dim]"
        table.add_row(
            marker,
            f"{summary.flag} {code.upper()}",
            summary.english_name,
            ", ".join(summary.languages),
        )

    console.print(table)
    console.print(f"{len(codes)} countries, {len(installed)} installed")


@app.command()
def generate():
    """Regenerate the accessor module from installed countries."""
    from geo_data.registry import CodeGenerator, get_installed_countries

    config = _require_config()
    path = _run(lambda: CodeGenerator(config).generate())
    count = len(get_installed_countries(config.output_path))
    console.print(f"[green]✓[/green] Generated {path} ({count} countries)")


if __name__ == "__main__":
    app()
