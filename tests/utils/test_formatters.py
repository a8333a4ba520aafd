import pytest
from utils.formatters import format_bytes, format_duration, format_percentage, format_speed


@pytest.mark.parametrize("value,expected", [
    (0, "0 Bytes"),
    (-5, "0 Bytes"),
    (float("nan"), "0 Bytes"),
    (float("inf"), "0 Bytes"),
    (500, "500 Bytes"),
    (1000, "1000 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (1_048_576, "1 MB"),
    (5 * 1024 ** 3, "5 GB"),
    (1024 ** 6, "1024 PB"),
])
def test_format_bytes(value, expected):
    assert format_bytes(value) == expected


def test_format_bytes_decimals():
    assert format_bytes(1234567, decimals=1) == "1.2 MB"
    assert format_bytes(1536, decimals=0) == "2 KB"


def test_format_speed():
    assert format_speed(2 * 1024 * 1024) == "2 MB/s"


@pytest.mark.parametrize("seconds,expected", [
    (0.25, "250ms"),
    (4.24, "4.2s"),
    (185, "3m 5s"),
    (3720, "1h 2m"),
    (-1, "0s"),
    (None, "0s"),
    (float("inf"), "0s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_percentage():
    assert format_percentage(42.345) == "42.3%"
    assert format_percentage(100, decimals=0) == "100%"
