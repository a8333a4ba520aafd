"""
Exception hierarchy for the streaming digest engine.

Every error is terminal for the job that raised it. Callers decide whether to
retry the whole job, skip the algorithm, or abort the batch.
"""
from typing import Dict, Optional


class HashingError(Exception):
    """Base class for all hashing failures."""


class ReadError(HashingError):
    """Raised when the input could not be fully read."""

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset


class UnsupportedAlgorithm(HashingError):
    """Raised when the requested algorithm is not in the supported set."""

    def __init__(self, name: object):
        super().__init__(f"Unsupported hash algorithm: {name!r}")
        self.name = name


class DigestFailure(HashingError):
    """Raised when the underlying digest primitive rejects its input or context."""


class DigestCancelled(HashingError):
    """Raised when a job is cancelled at a chunk boundary."""


class InvalidJobTransition(HashingError):
    """Raised when a digest job is driven through an illegal state change."""


class AllDigestsFailed(HashingError):
    """Raised when every algorithm in a multi-digest batch failed."""

    def __init__(self, failures: Dict[str, str]):
        summary = ", ".join(f"{name}: {msg}" for name, msg in failures.items())
        super().__init__(f"All digests failed ({summary})")
        self.failures = failures
