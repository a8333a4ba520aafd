"""
Main entry point for the FileHasher CLI.
- Sets up the Click command group and context object.
- Dynamically loads all CLI commands from this directory.
"""
import os
import sys
import importlib
import click
import logging
import rich_click as rclick
from utils.file_hasher_config import (
    DEFAULT_CONFIG_PATH,
    create_hashing_service,
    get_allowed_extensions,
    get_file_size_limits,
    load_configuration,
    parse_algorithms,
)
from utils.logging_config import setup_logging
from services.hashing_errors import HashingError

logger = logging.getLogger(__name__)


@rclick.group()
@click.option('--logfile', '-l', type=click.Path(writable=True), help="Log to file")
@click.option('--verbose', '-v', count=True, help="Set verbosity level (-v = INFO, -vv = DEBUG)")
@click.option('--config', '-c', type=click.Path(dir_okay=False), default=DEFAULT_CONFIG_PATH, help="Path to config file (optional)")
@click.pass_context
def file_hasher_cli(ctx: click.Context, verbose: int, logfile: str, config: str) -> None:
    """
    Compute MD5, SHA-1, SHA-256, SHA-384 and SHA-512 digests of files and text.

    Sets up the context object with configuration and a HashingService shared by
    all subcommands.

    Args:
        ctx (click.Context): Click context for Click command group.
        verbose (int): Verbosity level (-v = INFO, -vv = DEBUG).
        logfile (str): Path to log file.
        config (str): Path to configuration file.

    Returns:
        None
    """
    # If the context object is already set (tests inject one), keep it
    if ctx.obj and all(k in ctx.obj for k in ("config", "hashing_service", "algorithms")):
        return

    setup_logging(verbosity=verbose, logfile=logfile)

    try:
        logger.info(f"Loading configuration from {config}")
        cfg = load_configuration(config)
        hashing_service = create_hashing_service(cfg)
        algorithms = parse_algorithms(cfg)
        limits = get_file_size_limits(cfg)
        allowed_extensions = get_allowed_extensions(cfg)
    except (HashingError, ValueError) as e:
        logger.error(f"❌ Invalid configuration: {e}")
        click.secho(f"❌ Invalid configuration in {config}: {e}", fg="red", bold=True, err=True)
        sys.exit(1)

    ctx.obj = {
        "config": cfg,
        "hashing_service": hashing_service,
        "algorithms": algorithms,
        "max_file_size": limits["max_file_size"],
        "min_file_size": limits["min_file_size"],
        "allowed_extensions": allowed_extensions,
    }
    logger.debug(
        f"✓ HashingService ready: chunk_size={hashing_service.chunk_size}, "
        f"algorithms={[a.label for a in algorithms]}"
    )


# Dynamic discovery loop: auto-register all CLI commands in this directory
COMMAND_DIR = os.path.dirname(__file__)
for filename in sorted(os.listdir(COMMAND_DIR)):
    # Only import .py files that are not main.py or __init__.py
    if filename.endswith(".py") and filename not in {"main.py", "__init__.py"}:
        command_name = filename[:-3]
        module_name = f"cli.{command_name}"
        try:
            module = importlib.import_module(module_name)
            cli_function = getattr(module, command_name, None)
            if cli_function:
                file_hasher_cli.add_command(cli_function)
            else:
                logger.debug(f"No command function found in {module_name}")
        except Exception as e:
            logger.debug(f"Failed to import {module_name}: {e}")

if __name__ == '__main__':
    file_hasher_cli()
