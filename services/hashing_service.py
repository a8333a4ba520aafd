"""
HashingService: streaming digest computation with rate-limited progress reporting.

Defaults to a 1 MiB chunk size for large file efficiency. Chunks are fed to a
``hashlib`` context strictly in offset order, and control is yielded to the
asyncio event loop between chunks so concurrent jobs and progress consumers
keep running.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Iterable, List, Optional, Union

from models.digest_job import AggregateProgress, DigestJob, HashAlgorithm, ProgressSample
from models.hash_result import HashResult, MultiDigestResult
from services.byte_source import ByteSource, FileByteSource, MemoryByteSource
from services.hashing_errors import (
    AllDigestsFailed,
    DigestCancelled,
    DigestFailure,
    HashingError,
    ReadError,
)
from services.progress import DEFAULT_PROGRESS_INTERVAL, ProgressThrottle

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1_048_576

AlgorithmLike = Union[HashAlgorithm, str]
ProgressCallback = Callable[[ProgressSample], None]
AggregateCallback = Callable[[AggregateProgress], None]


class HashingService:
    """
    Provides streaming hashing operations for inputs of any size.

    - All outputs are lowercase hex strings, 2x the algorithm's digest size
    - Progress callbacks fire at most once per ``progress_interval`` seconds,
      plus one final sample at 100%
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.chunk_size = self._validate_chunk_size(chunk_size)
        self.progress_interval = progress_interval
        self.clock = clock

    @staticmethod
    def _validate_chunk_size(chunk_size: int) -> int:
        if not isinstance(chunk_size, int) or isinstance(chunk_size, bool) or chunk_size <= 0:
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
        return chunk_size

    # ────────────────────────────────────────────────
    # ASYNC ENGINE
    # ────────────────────────────────────────────────

    async def compute_digest(
        self,
        source: ByteSource,
        algorithm: AlgorithmLike,
        on_progress: Optional[ProgressCallback] = None,
        chunk_size: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> str:
        """
        Compute one digest of ``source``.

        Args:
            source (ByteSource): Input to hash; never modified.
            algorithm (HashAlgorithm | str): Algorithm or its name.
            on_progress (callable, optional): Receives rate-limited ProgressSample snapshots.
            chunk_size (int, optional): Override of the service's chunk size.
            cancel_event (asyncio.Event, optional): Checked at every chunk boundary.

        Returns:
            str: Lowercase hex digest.

        Raises:
            UnsupportedAlgorithm: If the algorithm is unknown.
            ReadError: If any chunk cannot be read.
            DigestFailure: If the digest primitive fails.
            DigestCancelled: If ``cancel_event`` was set.
        """
        algo = HashAlgorithm.from_name(algorithm)
        job = DigestJob(algorithm=algo, total_bytes=self._source_size(source))
        return await self.run_job(job, source, on_progress, chunk_size, cancel_event)

    async def run_job(
        self,
        job: DigestJob,
        source: ByteSource,
        on_progress: Optional[ProgressCallback] = None,
        chunk_size: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> str:
        """Drive a pending ``job`` to a terminal state and return its digest."""
        chunk = self._validate_chunk_size(chunk_size) if chunk_size is not None else self.chunk_size
        throttle = ProgressThrottle(self.progress_interval, self.clock)
        total = job.total_bytes

        def emit(force: bool = False) -> None:
            if on_progress is not None and throttle.should_emit(force):
                on_progress(job.progress_sample(self.clock()))

        job.start(self.clock())
        logger.debug(f"Starting {job.algorithm.label} over {source.name} ({total} bytes, chunk size {chunk})")

        try:
            context = self._new_context(job.algorithm)
            if total <= chunk:
                self._check_cancelled(job, cancel_event)
                data = self._read(source, 0, total)
                self._update(context, data, job.algorithm)
                job.advance(len(data))
            else:
                for offset in range(0, total, chunk):
                    self._check_cancelled(job, cancel_event)
                    data = self._read(source, offset, min(chunk, total - offset))
                    self._update(context, data, job.algorithm)
                    job.advance(len(data))
                    emit()
                    await asyncio.sleep(0)
            job.complete(self._finalize(context, job.algorithm))
            emit(force=True)
        except DigestCancelled:
            logger.info(f"{job.algorithm.label} over {source.name} cancelled at {job.bytes_processed}/{total} bytes")
            raise
        except HashingError as e:
            if not job.is_terminal:
                job.fail(e)
            logger.warning(f"{job.algorithm.label} over {source.name} failed: {e}")
            raise
        except Exception as e:
            # A completed job keeps its digest even if the final progress consumer raises.
            if not job.is_terminal:
                job.fail(e)
            logger.error(f"{job.algorithm.label} over {source.name} aborted by {e.__class__.__name__}: {e}")
            raise

        logger.debug(f"Finished {job.algorithm.label} over {source.name} in {job.elapsed(self.clock()):.3f}s")
        return job.result

    async def compute_multiple_digests(
        self,
        source: ByteSource,
        algorithms: Iterable[AlgorithmLike],
        on_aggregate_progress: Optional[AggregateCallback] = None,
        chunk_size: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> MultiDigestResult:
        """
        Compute several digests of ``source`` concurrently, one job per algorithm.

        A failing algorithm does not abort its siblings; its error is recorded in
        ``failures``. Aggregate progress is the mean of the per-job percentages.

        Raises:
            ValueError: If no algorithms were requested.
            UnsupportedAlgorithm: If any algorithm is unknown (before any read).
            AllDigestsFailed: If every algorithm failed.
            DigestCancelled: If ``cancel_event`` was set.
        """
        resolved = self._resolve_algorithms(algorithms)
        total = self._source_size(source)
        jobs = [DigestJob(algorithm=algo, total_bytes=total) for algo in resolved]
        throttle = ProgressThrottle(self.progress_interval, self.clock)
        samples = {job.algorithm: ProgressSample.from_counts(0, total, 0.0, job.algorithm) for job in jobs}

        def listener_for(job: DigestJob) -> ProgressCallback:
            def on_sample(sample: ProgressSample) -> None:
                samples[job.algorithm] = sample
                if on_aggregate_progress is not None and throttle.should_emit():
                    on_aggregate_progress(AggregateProgress.from_samples(samples))
            return on_sample

        logger.info(f"Hashing {source.name} ({total} bytes) with {', '.join(a.label for a in resolved)}")
        outcomes = await asyncio.gather(
            *(self.run_job(job, source, listener_for(job), chunk_size, cancel_event) for job in jobs),
            return_exceptions=True,
        )

        result = MultiDigestResult()
        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, DigestCancelled):
                raise outcome
            if isinstance(outcome, HashingError):
                result.failures[job.algorithm] = str(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.digests[job.algorithm] = outcome

        if not result.digests:
            raise AllDigestsFailed({algo.label: message for algo, message in result.failures.items()})

        if on_aggregate_progress is not None:
            # Failed jobs count as finished so the aggregate reaches 100.
            now = self.clock()
            for job in jobs:
                if job.algorithm in result.failures:
                    samples[job.algorithm] = ProgressSample.from_counts(
                        total, total, job.elapsed(now), job.algorithm, finished=True
                    )
            throttle.should_emit(force=True)
            on_aggregate_progress(AggregateProgress.from_samples(samples))

        if result.failures:
            logger.warning(
                f"{len(result.failures)} of {len(jobs)} digests failed for {source.name}: "
                f"{', '.join(a.label for a in result.failures)}"
            )
        return result

    # ────────────────────────────────────────────────
    # SYNCHRONOUS CONVENIENCES
    # ────────────────────────────────────────────────

    def calculate_md5(self, file_path: str) -> str:
        return self._calculate_file(file_path, HashAlgorithm.MD5)

    def calculate_sha1(self, file_path: str) -> str:
        return self._calculate_file(file_path, HashAlgorithm.SHA1)

    def calculate_sha256(self, file_path: str) -> str:
        return self._calculate_file(file_path, HashAlgorithm.SHA256)

    def calculate_sha384(self, file_path: str) -> str:
        return self._calculate_file(file_path, HashAlgorithm.SHA384)

    def calculate_sha512(self, file_path: str) -> str:
        return self._calculate_file(file_path, HashAlgorithm.SHA512)

    def hash_file(
        self,
        file_path: str,
        algorithms: Optional[Iterable[AlgorithmLike]] = None,
        on_progress: Optional[AggregateCallback] = None,
    ) -> HashResult:
        """Hash a file with every requested algorithm (default: all supported)."""
        with FileByteSource(file_path) as source:
            return self._hash_source(source, algorithms, on_progress)

    def hash_text(self, text: str, algorithms: Optional[Iterable[AlgorithmLike]] = None) -> HashResult:
        """Hash the UTF-8 encoding of ``text``."""
        return self._hash_source(MemoryByteSource.from_text(text), algorithms, None)

    def verify_file(self, file_path: str, expected: str, algorithm: Optional[AlgorithmLike] = None) -> bool:
        """
        Check a file against an expected hex digest.

        When ``algorithm`` is omitted it is inferred from the digest length.
        """
        expected = expected.strip().lower()
        algo = HashAlgorithm.from_name(algorithm) if algorithm else HashAlgorithm.from_hex_length(len(expected))
        actual = self._calculate_file(file_path, algo)
        matched = actual == expected
        if matched:
            logger.info(f"{algo.label} match for {file_path}")
        else:
            logger.warning(f"{algo.label} mismatch for {file_path}: expected {expected}, got {actual}")
        return matched

    def _calculate_file(self, file_path: str, algorithm: HashAlgorithm) -> str:
        with FileByteSource(file_path) as source:
            return asyncio.run(self.compute_digest(source, algorithm))

    def _hash_source(
        self,
        source: ByteSource,
        algorithms: Optional[Iterable[AlgorithmLike]],
        on_progress: Optional[AggregateCallback],
    ) -> HashResult:
        requested = list(algorithms) if algorithms else list(HashAlgorithm)
        started = time.perf_counter()
        outcome = asyncio.run(self.compute_multiple_digests(source, requested, on_progress))
        return HashResult.from_multi_digest(source.name, source.size(), outcome, time.perf_counter() - started)

    # ────────────────────────────────────────────────
    # HELPERS
    # ────────────────────────────────────────────────

    @staticmethod
    def _resolve_algorithms(algorithms: Iterable[AlgorithmLike]) -> List[HashAlgorithm]:
        resolved: List[HashAlgorithm] = []
        for name in algorithms:
            algo = HashAlgorithm.from_name(name)
            if algo not in resolved:
                resolved.append(algo)
        if not resolved:
            raise ValueError("At least one hash algorithm is required")
        return resolved

    @staticmethod
    def _source_size(source: ByteSource) -> int:
        try:
            size = source.size()
        except HashingError:
            raise
        except Exception as e:
            raise ReadError(f"Cannot determine size of {source.name}: {e}") from e
        if size < 0:
            raise ReadError(f"{source.name} reported a negative size: {size}")
        return size

    @staticmethod
    def _read(source: ByteSource, offset: int, length: int) -> bytes:
        try:
            data = source.read_range(offset, length)
        except HashingError:
            raise
        except Exception as e:
            raise ReadError(f"Failed reading {source.name} at offset {offset}: {e}", offset=offset) from e
        if len(data) != length:
            raise ReadError(
                f"Read {len(data)} of {length} bytes from {source.name} at offset {offset}", offset=offset
            )
        return data

    @staticmethod
    def _new_context(algorithm: HashAlgorithm):
        try:
            return algorithm.new()
        except (ValueError, TypeError) as e:
            raise DigestFailure(f"{algorithm.label} is unavailable: {e}") from e

    @staticmethod
    def _update(context, data: bytes, algorithm: HashAlgorithm) -> None:
        try:
            context.update(data)
        except (ValueError, TypeError) as e:
            raise DigestFailure(f"{algorithm.label} rejected input: {e}") from e

    @staticmethod
    def _finalize(context, algorithm: HashAlgorithm) -> str:
        try:
            return context.hexdigest()
        except (ValueError, TypeError) as e:
            raise DigestFailure(f"{algorithm.label} could not be finalised: {e}") from e

    @staticmethod
    def _check_cancelled(job: DigestJob, cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            job.cancel()
            raise DigestCancelled(
                f"{job.algorithm.label} cancelled after {job.bytes_processed} of {job.total_bytes} bytes"
            )
