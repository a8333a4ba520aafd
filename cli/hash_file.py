"""
CLI command to hash a file with one or more digest algorithms, with a live progress bar.
"""
import logging
import click
from services.hashing_errors import HashingError
from services.hashing_service import HashingService
from utils.cli_helpers import get_service_from_context, hashing_progress, render_hash_result
from utils.file_validation import validate_file

logger = logging.getLogger(__name__)


@click.command("hash-file")
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--algorithm", "-a", "algorithms", multiple=True, help="Algorithm to compute (repeatable, default: configured set)")
@click.option("--chunk-size", type=int, default=None, help="Bytes read per chunk (default: configured chunk size)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--no-progress", is_flag=True, help="Do not display a progress bar")
@click.pass_context
def hash_file(ctx: click.Context, path: str, algorithms: tuple, chunk_size: int, as_json: bool, no_progress: bool) -> None:
    """
    Compute digests of PATH.

    Args:
        ctx (click.Context): Click context containing shared config and services.
        path (str): File to hash.
        algorithms (tuple): Algorithm names; falls back to the configured list.
        chunk_size (int): Optional chunk size override.
        as_json (bool): Print JSON instead of a table.
        no_progress (bool): Suppress the progress bar.

    Returns:
        None. Exits with status 1 when validation fails or every digest fails.
    """
    service: HashingService = get_service_from_context(ctx, "hashing_service")

    validation = validate_file(
        path,
        max_size=ctx.obj.get("max_file_size", 0),
        min_size=ctx.obj.get("min_file_size", 0),
        allowed_extensions=ctx.obj.get("allowed_extensions"),
    )
    if not validation.is_valid:
        for error in validation.errors:
            logger.error(f"Validation failed for {path}: {error}")
            click.secho(f"❌ {error}", fg="red", bold=True, err=True)
        ctx.exit(1)

    if chunk_size is not None:
        try:
            service = HashingService(chunk_size=chunk_size, progress_interval=service.progress_interval)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--chunk-size")

    requested = list(algorithms) or ctx.obj.get("algorithms")
    logger.info(f"Hashing {path} with {requested}")

    try:
        with hashing_progress(f"Hashing {click.format_filename(path)}", enabled=not (no_progress or as_json)) as on_progress:
            result = service.hash_file(path, requested, on_progress=on_progress)
    except HashingError as e:
        logger.error(f"Hashing failed for {path}: {e}")
        click.secho(f"❌ Hashing failed: {e}", fg="red", bold=True, err=True)
        ctx.exit(1)

    render_hash_result(result, as_json=as_json)
