"""
Human-readable formatting for sizes, throughput, durations and percentages.
"""
import math
from typing import Optional

_SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB', 'TB', 'PB']


def format_bytes(num_bytes: float, decimals: int = 2) -> str:
    """Format a byte count with 1024-based units, e.g. ``1.5 MB``."""
    if num_bytes is None or not math.isfinite(num_bytes) or num_bytes <= 0:
        return '0 Bytes'

    decimals = max(decimals, 0)
    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    value = round(value, decimals)
    # Drop trailing zeros: 1.50 -> 1.5, 2.00 -> 2
    text = f"{value:.{decimals}f}".rstrip('0').rstrip('.') if decimals else f"{int(value)}"
    return f"{text} {_SIZE_UNITS[index]}"


def format_speed(bytes_per_second: float) -> str:
    return f"{format_bytes(bytes_per_second)}/s"


def format_duration(seconds: Optional[float]) -> str:
    """Format seconds as ``250ms``, ``4.2s``, ``3m 5s`` or ``1h 2m``."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return '0s'
    if seconds < 1:
        return f"{round(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes = int(seconds // 60)
    remaining_seconds = int(seconds % 60)
    if minutes < 60:
        return f"{minutes}m {remaining_seconds}s"

    hours = minutes // 60
    return f"{hours}h {minutes % 60}m"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"
