"""CLI interface for warmable.

Requires the 'cli' extra: pip install warmable[cli]

Targets are given as ``package.module:ClassName`` and must name a
``Warmable`` subclass importable from the current environment.
"""

from __future__ import annotations

import importlib
import sys

try:
    import typer
    from rich.console import Console
    from rich.table import Table
except ImportError:
    print(
        "CLI dependencies not installed. Install with: pip install warmable[cli]",
        file=sys.stderr,
    )
    sys.exit(1)

from warmable import __version__
from warmable.deferred import deferred_scope
from warmable.warmable import Warmable

app = typer.Typer(
    name="warmable",
    help="Inspect, warm and invalidate stale-while-revalidate caches.",
    add_completion=False,
)
console = Console()

_ARG_HELP = "Positional argument bound via with_arguments (repeatable)"


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
) -> None:
    if version:
        console.print(f"warmable {__version__}")
        raise typer.Exit()


def _load(target: str) -> type[Warmable]:
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        console.print(f"[red]Error: target must look like 'module:Class', got {target!r}[/red]")
        raise typer.Exit(code=2)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        console.print(f"[red]Error: cannot import {module_name!r}: {e}[/red]")
        raise typer.Exit(code=2) from e

    obj = getattr(module, attr, None)
    if not (isinstance(obj, type) and issubclass(obj, Warmable)):
        console.print(f"[red]Error: {target} is not a Warmable subclass[/red]")
        raise typer.Exit(code=2)
    return obj


def _build(
    target: str,
    args: list[str] | None,
    key: str | None,
    ttl: int | None,
    grace: int | None,
) -> Warmable:
    instance = _load(target).make().with_key(key).with_ttl(ttl).with_grace_period(grace)
    if args:
        instance.with_arguments(*args)
    return instance


@app.command()
def info() -> None:
    """Show information about the warmable installation."""
    table = Table(title="warmable info")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])

    for dep_name in ["pydantic", "typer", "rich"]:
        try:
            mod = __import__(dep_name)
            ver = getattr(mod, "__version__", "installed")
            table.add_row(dep_name, str(ver))
        except ImportError:
            table.add_row(dep_name, "[red]not installed[/red]")

    console.print(table)


@app.command()
def get(
    target: str = typer.Argument(..., help="Warmable class as 'module:Class'"),
    args: list[str] | None = typer.Option(None, "--arg", "-a", help=_ARG_HELP),
    key: str | None = typer.Option(None, "--key", "-k", help="Override the base cache key"),
    ttl: int | None = typer.Option(None, "--ttl", help="Freshness window in seconds"),
    grace: int | None = typer.Option(None, "--grace", help="Grace period in seconds"),
    no_preheat: bool = typer.Option(False, "--no-preheat", help="Only read, never compute"),
    default: str | None = typer.Option(None, "--default", "-d", help="Fallback value"),
) -> None:
    """Read a value, computing or refreshing it as configured."""
    with deferred_scope() as queue:
        instance = _build(target, args, key, ttl, grace).with_runner(queue)
        if no_preheat:
            instance.without_preheating()
        value = instance.get(default)
        if value is None:
            console.print("[dim]None[/dim]")
        else:
            console.print(value, markup=False)
        if queue.pending:
            console.print(f"[dim]Running {queue.pending} deferred task(s)[/dim]")


@app.command()
def warmup(
    target: str = typer.Argument(..., help="Warmable class as 'module:Class'"),
    args: list[str] | None = typer.Option(None, "--arg", "-a", help=_ARG_HELP),
    key: str | None = typer.Option(None, "--key", "-k", help="Override the base cache key"),
    ttl: int | None = typer.Option(None, "--ttl", help="Freshness window in seconds"),
    grace: int | None = typer.Option(None, "--grace", help="Grace period in seconds"),
) -> None:
    """Compute and store a value now."""
    instance = _build(target, args, key, ttl, grace)
    if not instance.warmup():
        console.print(f"[red]Backend refused to store {instance.get_key()}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Warmed {instance.get_key()}[/green]")


@app.command()
def cooldown(
    target: str = typer.Argument(..., help="Warmable class as 'module:Class'"),
    args: list[str] | None = typer.Option(None, "--arg", "-a", help=_ARG_HELP),
    key: str | None = typer.Option(None, "--key", "-k", help="Override the base cache key"),
) -> None:
    """Delete a cached value."""
    instance = _build(target, args, key, None, None)
    if not instance.cooldown():
        console.print(f"[red]Backend refused to delete {instance.get_key()}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Cooled down {instance.get_key()}[/green]")


@app.command()
def missing(
    target: str = typer.Argument(..., help="Warmable class as 'module:Class'"),
    args: list[str] | None = typer.Option(None, "--arg", "-a", help=_ARG_HELP),
    key: str | None = typer.Option(None, "--key", "-k", help="Override the base cache key"),
) -> None:
    """Report whether a value is cached. Exits 1 when it is missing."""
    instance = _build(target, args, key, None, None)
    if instance.missing():
        console.print(f"{instance.get_key()}: [yellow]missing[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"{instance.get_key()}: [green]cached[/green]")


@app.command()
def key(
    target: str = typer.Argument(..., help="Warmable class as 'module:Class'"),
    args: list[str] | None = typer.Option(None, "--arg", "-a", help=_ARG_HELP),
    base: str | None = typer.Option(None, "--key", "-k", help="Override the base cache key"),
) -> None:
    """Print the resolved cache key."""
    console.print(_build(target, args, base, None, None).get_key())


if __name__ == "__main__":
    app()
