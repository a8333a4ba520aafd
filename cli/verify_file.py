"""
CLI command to check a file against an expected digest.

The algorithm is inferred from the digest length unless given explicitly.
"""
import logging
import click
from services.hashing_errors import HashingError
from utils.cli_helpers import get_service_from_context

logger = logging.getLogger(__name__)


@click.command("verify-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("expected")
@click.option("--algorithm", "-a", default=None, help="Algorithm of EXPECTED (default: inferred from its length)")
@click.pass_context
def verify_file(ctx: click.Context, path: str, expected: str, algorithm: str) -> None:
    """
    Verify that PATH hashes to EXPECTED.

    Args:
        ctx (click.Context): Click context containing shared config and services.
        path (str): File to check.
        expected (str): Expected hex digest (case-insensitive).
        algorithm (str): Optional algorithm name.

    Returns:
        None. Exits 0 on match and 1 on mismatch or error.
    """
    service = get_service_from_context(ctx, "hashing_service")

    try:
        matched = service.verify_file(path, expected, algorithm)
    except HashingError as e:
        logger.error(f"Verification of {path} failed: {e}")
        click.secho(f"❌ Verification failed: {e}", fg="red", bold=True, err=True)
        ctx.exit(1)

    if matched:
        click.secho(f"✅ {click.format_filename(path)}: OK", fg="green", bold=True)
    else:
        click.secho(f"❌ {click.format_filename(path)}: MISMATCH", fg="red", bold=True)
        ctx.exit(1)
