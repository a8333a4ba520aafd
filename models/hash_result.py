"""
Result models for FileHasher, representing finished digest batches.
"""
import datetime
from typing import Any, Dict

from pydantic import BaseModel, Field

from models.digest_job import HashAlgorithm


class MultiDigestResult(BaseModel):
    """
    Outcome of running several algorithms over one input.

    Attributes:
        digests (Dict[HashAlgorithm, str]): Hex digest per algorithm that succeeded.
        failures (Dict[HashAlgorithm, str]): Error message per algorithm that failed.
    """

    digests: Dict[HashAlgorithm, str] = Field(default_factory=dict)
    failures: Dict[HashAlgorithm, str] = Field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return not self.failures

    def __getitem__(self, algorithm) -> str:
        return self.digests[HashAlgorithm.from_name(algorithm)]

    def __contains__(self, algorithm) -> bool:
        return HashAlgorithm.from_name(algorithm) in self.digests


class HashResult(BaseModel):
    """
    Digests of a named input together with timing information.

    Attributes:
        name (str): File name, or ``text`` for hashed text.
        size (int): Input size in bytes.
        digests (Dict[str, str]): Algorithm label to lowercase hex digest.
        failures (Dict[str, str]): Algorithm label to error message.
        processed_at (datetime.datetime): When hashing finished.
        processing_time (float): Wall-clock seconds spent hashing.
    """

    name: str
    size: int = Field(..., ge=0)
    digests: Dict[str, str] = Field(default_factory=dict)
    failures: Dict[str, str] = Field(default_factory=dict)
    processed_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
    processing_time: float = Field(0.0, ge=0.0)

    @classmethod
    def from_multi_digest(
        cls, name: str, size: int, outcome: MultiDigestResult, processing_time: float
    ) -> "HashResult":
        return cls(
            name=name,
            size=size,
            digests={algo.label: digest for algo, digest in outcome.digests.items()},
            failures={algo.label: message for algo, message in outcome.failures.items()},
            processing_time=processing_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
