import logging
import pytest
from unittest.mock import patch, MagicMock
from utils.logging_config import setup_logging, verbosity_to_level


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler, logging.FileHandler):
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.mark.parametrize("verbosity,expected", [
    (0, logging.CRITICAL + 1),
    (1, logging.INFO),
    (2, logging.DEBUG),
    (5, logging.DEBUG),
])
def test_verbosity_to_level(verbosity, expected):
    assert verbosity_to_level(verbosity) == expected


@patch("logging.getLogger")
def test_setup_logging_verbosity_0(mock_get_logger):
    mock_logger = MagicMock()
    mock_get_logger.return_value = mock_logger

    setup_logging(verbosity=0)

    mock_logger.setLevel.assert_called_once_with(logging.CRITICAL + 1)
    mock_logger.handlers.clear.assert_called_once()
    mock_logger.addHandler.assert_not_called()


@patch("logging.getLogger")
def test_setup_logging_verbosity_2_adds_stderr_handler(mock_get_logger):
    mock_logger = MagicMock()
    mock_get_logger.return_value = mock_logger

    setup_logging(verbosity=2)

    mock_logger.setLevel.assert_called_once_with(logging.DEBUG)
    assert mock_logger.addHandler.call_count == 1
    handler = mock_logger.addHandler.call_args[0][0]
    assert isinstance(handler, logging.StreamHandler)
    assert handler.level == logging.DEBUG


def test_setup_logging_with_logfile(tmp_path):
    logfile = tmp_path / "logs" / "hasher.log"

    setup_logging(verbosity=0, logfile=str(logfile))

    root = logging.getLogger()
    assert root.level == logging.INFO
    file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].level == logging.INFO

    logging.getLogger("services.hashing_service").info("digest written")
    file_handlers[0].flush()
    contents = logfile.read_text(encoding="utf-8")
    assert "Command line:" in contents
    assert "digest written" in contents
