import os
import sys
import pytest
from click.testing import CliRunner

# Add project root to sys.path for local imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from models.digest_job import HashAlgorithm
from services.hashing_service import HashingService
from utils.file_hasher_config import write_temp_config

# ────────────────────────────────────────────────
# FIXTURES
# ────────────────────────────────────────────────

@pytest.fixture
def runner():
    """Fixture providing a Click CliRunner instance."""
    return CliRunner()


@pytest.fixture
def hashing_service():
    """HashingService with small chunks and unthrottled progress."""
    return HashingService(chunk_size=64, progress_interval=0.0)


@pytest.fixture
def sample_bytes():
    return bytes(range(256)) * 40 + b"tail"


@pytest.fixture
def sample_file(tmp_path, sample_bytes):
    path = tmp_path / "sample.bin"
    path.write_bytes(sample_bytes)
    return path


@pytest.fixture
def empty_file(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    return path


@pytest.fixture
def cli_obj(hashing_service):
    """Context object as built by the file_hasher_cli group."""
    return {
        "config": {},
        "hashing_service": hashing_service,
        "algorithms": list(HashAlgorithm),
        "max_file_size": 0,
        "min_file_size": 0,
        "allowed_extensions": [],
    }


@pytest.fixture
def test_config_path(tmp_path):
    """Temporary configuration file with a small chunk size."""
    return write_temp_config(
        {
            "Hashing": {
                "chunk_size": 128,
                "progress_interval_ms": 0,
                "algorithms": "md5, SHA-256",
                "max_file_size": 1024 * 1024,
            }
        },
        str(tmp_path),
    )


@pytest.fixture(autouse=True)
def clear_env_overrides(monkeypatch):
    """Keep developer environment variables from leaking into config tests."""
    for name in (
        "FILE_HASHER_CHUNK_SIZE",
        "FILE_HASHER_PROGRESS_INTERVAL_MS",
        "FILE_HASHER_ALGORITHMS",
        "FILE_HASHER_MAX_FILE_SIZE",
        "FILE_HASHER_MIN_FILE_SIZE",
        "FILE_HASHER_ALLOWED_EXTENSIONS",
    ):
        monkeypatch.delenv(name, raising=False)
