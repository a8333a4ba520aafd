"""
Digest job model for FileHasher, representing one hash computation and its progress snapshots.
"""
import hashlib
import logging
from enum import Enum
from typing import Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from services.hashing_errors import DigestFailure, InvalidJobTransition, UnsupportedAlgorithm

logger = logging.getLogger(__name__)


class HashAlgorithm(str, Enum):
    """Supported digest algorithms, valued by their display label."""
    MD5 = "MD5"
    SHA1 = "SHA-1"
    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"

    @property
    def label(self) -> str:
        return self.value

    @property
    def key(self) -> str:
        """Compact lowercase name, e.g. ``sha256``."""
        return self.value.replace("-", "").lower()

    @property
    def digest_size(self) -> int:
        return _DIGEST_SIZES[self]

    @property
    def hex_length(self) -> int:
        return self.digest_size * 2

    def new(self):
        """Return a fresh incremental ``hashlib`` context for this algorithm."""
        return _CONSTRUCTORS[self]()

    @classmethod
    def from_name(cls, name: Union[str, "HashAlgorithm"]) -> "HashAlgorithm":
        """
        Parse an algorithm name such as ``SHA-256``, ``sha256`` or ``Sha-256``.

        Raises:
            UnsupportedAlgorithm: If the name does not match a supported algorithm.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise UnsupportedAlgorithm(name)
        wanted = name.strip().replace("-", "").replace("_", "").lower()
        for member in cls:
            if member.key == wanted:
                return member
        raise UnsupportedAlgorithm(name)

    @classmethod
    def from_hex_length(cls, length: int) -> "HashAlgorithm":
        """Infer the algorithm that produces hex digests of the given length."""
        for member in cls:
            if member.hex_length == length:
                return member
        raise UnsupportedAlgorithm(f"<{length}-character digest>")


_CONSTRUCTORS: Dict[HashAlgorithm, Callable[[], "hashlib._Hash"]] = {
    HashAlgorithm.MD5: hashlib.md5,
    HashAlgorithm.SHA1: hashlib.sha1,
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA384: hashlib.sha384,
    HashAlgorithm.SHA512: hashlib.sha512,
}

_DIGEST_SIZES: Dict[HashAlgorithm, int] = {
    HashAlgorithm.MD5: 16,
    HashAlgorithm.SHA1: 20,
    HashAlgorithm.SHA256: 32,
    HashAlgorithm.SHA384: 48,
    HashAlgorithm.SHA512: 64,
}


class JobState(str, Enum):
    """Lifecycle state of a digest job."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED, JobState.CANCELLED})

_ALLOWED_TRANSITIONS = {
    JobState.PENDING: {JobState.RUNNING},
    JobState.RUNNING: {JobState.COMPLETED, JobState.FAILED, JobState.CANCELLED},
}


def _percentage(processed: int, total: int, finished: bool) -> float:
    if total <= 0:
        return 100.0 if finished else 0.0
    return max(0.0, min(100.0, 100.0 * processed / total))


class ProgressSample(BaseModel):
    """
    Immutable snapshot of a job's progress.

    Attributes:
        algorithm (Optional[HashAlgorithm]): Algorithm of the job that produced the sample.
        bytes_processed (int): Bytes fed to the digest so far.
        total_bytes (int): Size of the input.
        percentage (float): Percent complete, clamped to [0, 100].
        speed_bytes_per_sec (float): Average throughput since the job started.
        eta_seconds (Optional[float]): Estimated seconds remaining, None when unknown.
    """

    model_config = ConfigDict(frozen=True)

    algorithm: Optional[HashAlgorithm] = None
    bytes_processed: int = Field(..., ge=0)
    total_bytes: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0.0, le=100.0)
    speed_bytes_per_sec: float = Field(0.0, ge=0.0)
    eta_seconds: Optional[float] = Field(None, ge=0.0)

    @classmethod
    def from_counts(
        cls,
        bytes_processed: int,
        total_bytes: int,
        elapsed: float,
        algorithm: Optional[HashAlgorithm] = None,
        finished: bool = False,
    ) -> "ProgressSample":
        speed = bytes_processed / elapsed if elapsed > 0 else 0.0
        remaining = max(total_bytes - bytes_processed, 0)
        if remaining == 0:
            eta = 0.0
        elif speed > 0:
            eta = remaining / speed
        else:
            eta = None
        return cls(
            algorithm=algorithm,
            bytes_processed=bytes_processed,
            total_bytes=total_bytes,
            percentage=_percentage(bytes_processed, total_bytes, finished),
            speed_bytes_per_sec=speed,
            eta_seconds=eta,
        )


class AggregateProgress(BaseModel):
    """
    Combined progress of several concurrent jobs over the same input.

    ``percentage`` is the mean of the per-algorithm percentages. Byte counts,
    speed and ETA come from the slowest job, which is the one that decides
    when the whole batch finishes.
    """

    model_config = ConfigDict(frozen=True)

    percentage: float = Field(..., ge=0.0, le=100.0)
    per_algorithm: Dict[HashAlgorithm, float] = Field(default_factory=dict)
    bytes_processed: int = Field(0, ge=0)
    total_bytes: int = Field(0, ge=0)
    speed_bytes_per_sec: float = Field(0.0, ge=0.0)
    eta_seconds: Optional[float] = Field(None, ge=0.0)

    @classmethod
    def from_samples(cls, samples: Dict[HashAlgorithm, ProgressSample]) -> "AggregateProgress":
        if not samples:
            return cls(percentage=0.0)
        per_algorithm = {algo: sample.percentage for algo, sample in samples.items()}
        average = sum(per_algorithm.values()) / len(per_algorithm)
        slowest = min(samples.values(), key=lambda s: (s.percentage, s.bytes_processed))
        return cls(
            percentage=max(0.0, min(100.0, average)),
            per_algorithm=per_algorithm,
            bytes_processed=slowest.bytes_processed,
            total_bytes=slowest.total_bytes,
            speed_bytes_per_sec=slowest.speed_bytes_per_sec,
            eta_seconds=slowest.eta_seconds,
        )


class DigestJob(BaseModel):
    """
    One in-progress or completed hash computation.

    The job is mutated only by the engine driving it and moves
    PENDING -> RUNNING -> COMPLETED | FAILED | CANCELLED exactly once.

    Attributes:
        algorithm (HashAlgorithm): Digest algorithm.
        total_bytes (int): Size of the input, known up front.
        bytes_processed (int): Bytes fed to the digest so far.
        start_time (Optional[float]): Monotonic clock reading when the job started.
        state (JobState): Current lifecycle state.
        result (Optional[str]): Lowercase hex digest, set only when COMPLETED.
        error (Optional[str]): Error message, set only when FAILED.
    """

    model_config = ConfigDict(validate_assignment=True)

    algorithm: HashAlgorithm
    total_bytes: int = Field(..., ge=0)
    bytes_processed: int = Field(0, ge=0)
    start_time: Optional[float] = None
    state: JobState = JobState.PENDING
    result: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def percentage(self) -> float:
        return _percentage(self.bytes_processed, self.total_bytes, self.state == JobState.COMPLETED)

    def _transition(self, target: JobState) -> None:
        if target not in _ALLOWED_TRANSITIONS.get(self.state, set()):
            raise InvalidJobTransition(
                f"{self.algorithm.label} job cannot move from {self.state.value} to {target.value}"
            )
        logger.debug(f"{self.algorithm.label} job: {self.state.value} -> {target.value}")
        self.state = target

    def start(self, now: float) -> None:
        self._transition(JobState.RUNNING)
        self.start_time = now

    def advance(self, count: int) -> None:
        if self.state != JobState.RUNNING:
            raise InvalidJobTransition(f"Cannot advance a {self.state.value} job")
        if count < 0 or self.bytes_processed + count > self.total_bytes:
            raise ValueError(
                f"Advancing by {count} would move {self.bytes_processed}/{self.total_bytes} out of range"
            )
        self.bytes_processed += count

    def complete(self, hex_digest: str) -> None:
        if self.state != JobState.RUNNING:
            raise InvalidJobTransition(f"Cannot complete a {self.state.value} job")
        if self.bytes_processed != self.total_bytes:
            raise DigestFailure(
                f"{self.algorithm.label} finalised after {self.bytes_processed} of {self.total_bytes} bytes"
            )
        if len(hex_digest) != self.algorithm.hex_length:
            raise DigestFailure(
                f"{self.algorithm.label} produced {len(hex_digest)} hex characters, "
                f"expected {self.algorithm.hex_length}"
            )
        self.result = hex_digest.lower()
        self._transition(JobState.COMPLETED)

    def fail(self, error: BaseException) -> None:
        self._transition(JobState.FAILED)
        self.error = str(error) or error.__class__.__name__

    def cancel(self) -> None:
        self._transition(JobState.CANCELLED)

    def elapsed(self, now: float) -> float:
        if self.start_time is None:
            return 0.0
        return max(now - self.start_time, 0.0)

    def progress_sample(self, now: float) -> ProgressSample:
        """Snapshot this job's counters at clock reading ``now``."""
        return ProgressSample.from_counts(
            self.bytes_processed,
            self.total_bytes,
            self.elapsed(now),
            algorithm=self.algorithm,
            finished=self.state == JobState.COMPLETED,
        )
