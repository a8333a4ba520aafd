"""
Models package for FileHasher.

This package contains Pydantic-based models for digest jobs, progress snapshots, and hashing results.
"""

from .digest_job import (
    AggregateProgress,
    DigestJob,
    HashAlgorithm,
    JobState,
    ProgressSample,
)
from .hash_result import HashResult, MultiDigestResult

__all__ = [
    "AggregateProgress",
    "DigestJob",
    "HashAlgorithm",
    "HashResult",
    "JobState",
    "MultiDigestResult",
    "ProgressSample",
]
