"""
Pre-hash validation of input files: existence, type and size limits.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from utils.formatters import format_bytes

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1024 * 1024 * 1024  # 1 GiB


@dataclass
class ValidationResult:
    """Outcome of validating a file before hashing."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)


class FileValidationError(ValueError):
    """Raised by validate_file_or_raise when a file fails validation."""

    def __init__(self, path: str, errors: List[str]):
        super().__init__(f"File validation failed for {path}: {'; '.join(errors)}")
        self.path = path
        self.errors = errors


def get_file_extension(path: str) -> str:
    """Lowercase extension of ``path`` without the dot, '' when there is none."""
    return os.path.splitext(os.path.basename(path))[1].lstrip('.').lower()


def validate_file(
    path: str,
    max_size: int = DEFAULT_MAX_SIZE,
    min_size: int = 0,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> ValidationResult:
    """
    Validate a path against the configured size and type limits.

    Args:
        path (str): Path to the file.
        max_size (int): Largest accepted size in bytes; 0 or negative disables the check.
        min_size (int): Smallest accepted size in bytes.
        allowed_extensions (Iterable[str], optional): Accepted extensions ("iso" or ".iso");
            empty or None accepts every file.

    Returns:
        ValidationResult: ``is_valid`` plus every problem found.
    """
    errors: List[str] = []

    if not path or not str(path).strip():
        return ValidationResult(False, ["No file selected"])

    if not os.path.exists(path):
        return ValidationResult(False, [f"File not found: {path}"])

    if not os.path.isfile(path):
        return ValidationResult(False, [f"Not a regular file: {path}"])

    try:
        size = os.path.getsize(path)
    except OSError as e:
        return ValidationResult(False, [f"Cannot read file size: {e}"])

    if size < min_size:
        errors.append(f"File is too small (minimum: {format_bytes(min_size)})")

    if max_size > 0 and size > max_size:
        errors.append(f"File is too large (maximum: {format_bytes(max_size)})")

    allowed = [ext.strip().lstrip('.').lower() for ext in (allowed_extensions or []) if ext.strip()]
    if allowed:
        extension = get_file_extension(path)
        if extension not in allowed:
            errors.append(f'File type "{extension or "(none)"}" is not allowed. Allowed types: {", ".join(allowed)}')

    if size == 0 and min_size > 0:
        errors.append("File is empty (0 bytes)")

    if errors:
        logger.debug(f"Validation failed for {path}: {errors}")
    return ValidationResult(not errors, errors)


def validate_file_or_raise(
    path: str,
    max_size: int = DEFAULT_MAX_SIZE,
    min_size: int = 0,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> None:
    result = validate_file(path, max_size=max_size, min_size=min_size, allowed_extensions=allowed_extensions)
    if not result.is_valid:
        raise FileValidationError(path, result.errors)
