"""
CLI command to hash a text string (UTF-8 encoded).
"""
import click
import logging
from services.hashing_errors import HashingError
from utils.cli_helpers import get_service_from_context, render_hash_result

logger = logging.getLogger(__name__)


@click.command("hash-text")
@click.argument("text")
@click.option("--algorithm", "-a", "algorithms", multiple=True, help="Algorithm to compute (repeatable, default: configured set)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def hash_text(ctx, text, algorithms, as_json):
    """Compute digests of TEXT."""
    service = get_service_from_context(ctx, "hashing_service")
    requested = list(algorithms) or ctx.obj.get("algorithms")

    try:
        result = service.hash_text(text, requested)
    except HashingError as e:
        logger.error(f"Hashing text failed: {e}")
        click.secho(f"❌ Hashing failed: {e}", fg="red", bold=True, err=True)
        ctx.exit(1)

    render_hash_result(result, as_json=as_json)
