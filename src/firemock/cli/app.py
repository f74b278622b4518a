"""
firemock CLI: inspect fixture files and replay scripted scenarios.

- show: print a fixture's ordered children (priority, then key) at a path
- replay: run a scenario against a mock client and print the event log
"""

from __future__ import annotations

import typer
from rich.console import Console

from firemock.cli.formatters import build_event_table, build_tree_table, format_value
from firemock.cli.load_helpers import load_or_exit
from firemock.core import paths
from firemock.core.tree import OrderedTree
from firemock.errors import FiremockError
from firemock.io.loaders import load_fixture, load_scenario
from firemock.scenario import run_scenario
from firemock.utils.logging import configure_logging

app = typer.Typer(help="firemock CLI: inspect fixtures and replay scenarios against the mock database.")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log queue and dispatch activity"),
) -> None:
    configure_logging(verbose)


@app.command()
def show(
    fixture: str = typer.Argument(..., help="YAML or JSON fixture file"),
    path: str = typer.Option("", "--path", "-p", help="Location inside the fixture"),
    depth: int = typer.Option(1, "--depth", "-d", min=1, help="Levels of children to list"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Show the children of a location in comparator order."""
    data = load_or_exit(load_fixture, fixture, console=console, verbose_errors=verbose)
    try:
        location = paths.normalize(path)
    except FiremockError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)

    node = OrderedTree(data).read(location)
    if not node.exists:
        console.print(f"[yellow]No data at[/yellow] /{location}")
        raise typer.Exit(code=1)
    if not node.has_children:
        console.print(f"/{location} = {format_value(node.to_value())}")
        return
    console.print(build_tree_table(node, location, max_depth=depth))


@app.command()
def replay(
    scenario: str = typer.Argument(..., help="Scenario YAML file"),
    show_data: bool = typer.Option(False, "--data", help="Print the final database contents"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Replay a scenario and print every event and callback it produced."""
    spec = load_or_exit(load_scenario, scenario, console=console, verbose_errors=verbose)
    try:
        result = run_scenario(spec)
    except FiremockError as exc:
        console.print(f"[red]Scenario failed:[/red] {exc}")
        raise typer.Exit(code=1)

    if result.records:
        console.print(build_event_table(result))
    else:
        console.print("[dim]No events[/dim]")
    if result.pending:
        console.print(f"[yellow]{result.pending} operation(s) left unflushed[/yellow]")
    if show_data:
        console.print_json(data=result.final_data)


if __name__ == "__main__":  # pragma: no cover
    app()
