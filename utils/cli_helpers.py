"""
CLI helper utilities for consistent error handling, progress display and result rendering.
"""

import json
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from models.digest_job import AggregateProgress, HashAlgorithm
from models.hash_result import HashResult
from utils.formatters import format_bytes, format_duration, format_percentage, format_speed

console = Console()


def get_service_from_context(ctx: click.Context, service_name: str, required: bool = True) -> Optional[Any]:
    """
    Get a service from context with proper error handling.

    Args:
        ctx: Click context object
        service_name: Name of the service to retrieve
        required: Whether the service is required (aborts if missing)

    Returns:
        Service instance or None if not available
    """
    service = ctx.obj.get(service_name) if ctx.obj else None
    if service is None and required:
        click.secho(f"❌ {service_name} not available. Please check your configuration.", fg="red", bold=True, err=True)
        raise click.Abort()
    return service


def describe_progress(update: AggregateProgress) -> Dict[str, str]:
    """Human-readable progress fields shown next to the bar."""
    return {
        "percent": format_percentage(update.percentage),
        "processed": f"{format_bytes(update.bytes_processed)} / {format_bytes(update.total_bytes)}",
        "speed": format_speed(update.speed_bytes_per_sec),
        "eta": format_duration(update.eta_seconds) if update.eta_seconds is not None else "--",
    }


@contextmanager
def hashing_progress(label: str, enabled: bool = True) -> Iterator[Optional[Callable[[AggregateProgress], None]]]:
    """
    Show a rich progress bar while hashing and yield an aggregate-progress callback.

    Alongside the bar the line shows bytes processed, throughput and the
    estimated time remaining of the slowest algorithm.
    Yields None when ``enabled`` is False so callers can pass it straight through.
    """
    if not enabled:
        yield None
        return

    progress = Progress(
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        TextColumn("{task.fields[percent]:>6}"),
        TextColumn("{task.fields[processed]}"),
        TextColumn("[green]{task.fields[speed]}"),
        TextColumn("ETA {task.fields[eta]}"),
        console=Console(stderr=True),
        transient=True,
    )
    with progress:
        task_id = progress.add_task(label, total=100.0, **describe_progress(AggregateProgress(percentage=0.0)))

        def on_progress(update: AggregateProgress) -> None:
            progress.update(task_id, completed=update.percentage, **describe_progress(update))

        yield on_progress


def render_hash_result(result: HashResult, as_json: bool = False) -> None:
    """Print a HashResult as a rich table, or as JSON on stdout."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    table = Table(title=f"{result.name} ({format_bytes(result.size)})")
    table.add_column("Algorithm", style="cyan", no_wrap=True)
    table.add_column("Digest", style="green")
    for label, digest in result.digests.items():
        table.add_row(label, digest)
    console.print(table)

    for label, message in result.failures.items():
        click.secho(f"⚠️  {label} failed: {message}", fg="yellow")
    click.secho(f"Hashed in {format_duration(result.processing_time)}", fg="white", dim=True)


def render_algorithms() -> None:
    table = Table(title="Supported algorithms")
    table.add_column("Algorithm", style="cyan")
    table.add_column("Digest bits", justify="right")
    table.add_column("Hex length", justify="right")
    for algo in HashAlgorithm:
        table.add_row(algo.label, str(algo.digest_size * 8), str(algo.hex_length))
    console.print(table)
