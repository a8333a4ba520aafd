"""
Configuration utilities for FileHasher.

This package provides case-insensitive section handling and environment variable
overrides for the INI configuration file.
"""

from .config_normalizer import ConfigNormalizer

__all__ = [
    'ConfigNormalizer',
]
