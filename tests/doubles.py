"""Test doubles shared across the suite."""
from services.byte_source import ByteSource, MemoryByteSource


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingByteSource(ByteSource):
    """In-memory source whose reads raise OSError once ``fail_after`` bytes would be exceeded."""

    def __init__(self, data: bytes, fail_after: int):
        self._inner = MemoryByteSource(data)
        self.fail_after = fail_after
        self.name = "failing"

    def size(self) -> int:
        return self._inner.size()

    def read_range(self, offset: int, length: int) -> bytes:
        if offset + length > self.fail_after:
            raise OSError(f"device error at offset {offset}")
        return self._inner.read_range(offset, length)


class FailOnceByteSource(ByteSource):
    """In-memory source whose ``fail_on_call``-th read raises OSError; every other read succeeds."""

    def __init__(self, data: bytes, fail_on_call: int):
        self._inner = MemoryByteSource(data)
        self.fail_on_call = fail_on_call
        self.calls = 0
        self.name = "flaky"

    def size(self) -> int:
        return self._inner.size()

    def read_range(self, offset: int, length: int) -> bytes:
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise OSError("transient read failure")
        return self._inner.read_range(offset, length)


