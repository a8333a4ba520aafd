"""
Logging configuration utility for the FileHasher CLI and services.
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(module)s::%(funcName)s - %(message)s'


def verbosity_to_level(verbosity: int) -> int:
    """Map a -v count to a logging level (0=off, 1=info, 2+=debug)."""
    if verbosity <= 0:
        return logging.CRITICAL + 1  # disables all log output to terminal
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, logfile: Optional[str] = None) -> None:
    """
    Configure logging level and optional file output.

    Console logs go to stderr so digests printed on stdout (for example with
    ``--json``) can be piped without log lines mixed in.

    Args:
        verbosity (int): Verbosity level (0=off, 1=info, 2=debug).
        logfile (str, optional): Path to log file. If None, logs only to console.

    Returns:
        None
    """
    level = verbosity_to_level(verbosity)
    # A log file always records at least INFO, even when the console is silent.
    file_level = min(level, logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)

    logger = logging.getLogger()
    logger.setLevel(min(level, file_level) if logfile else level)
    logger.handlers.clear()

    if verbosity > 0:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    if logfile:
        log_dir = os.path.dirname(logfile)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(logfile, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(file_level)
        logger.addHandler(file_handler)

    # Log the exact CLI command that was run
    logger.info(f"Command line: {' '.join(sys.argv)}")
    logger.info(f"Current working directory: {os.getcwd()}")
