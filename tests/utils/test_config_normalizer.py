import configparser
from utils.config import ConfigNormalizer


def test_normalize_configparser_sections_and_keys():
    parser = configparser.ConfigParser()
    parser.optionxform = str  # keep key case so normalization is exercised
    parser["HASHING"] = {"Chunk_Size": "2048"}
    parser["Extra"] = {"Key": "v"}

    normalized = ConfigNormalizer().normalize_config(parser)

    assert normalized == {"hashing": {"chunk_size": "2048"}, "extra": {"key": "v"}}


def test_lowercase_section_wins_on_merge():
    config = {
        "Hashing": {"chunk_size": "100", "algorithms": "md5"},
        "hashing": {"chunk_size": "200"},
    }
    normalized = ConfigNormalizer().normalize_config(config)
    assert normalized["hashing"] == {"chunk_size": "200", "algorithms": "md5"}


def test_uppercase_alias_does_not_override_lowercase():
    config = {
        "hashing": {"chunk_size": "200"},
        "Hash": {"chunk_size": "100", "min_file_size": "1"},
    }
    normalized = ConfigNormalizer().normalize_config(config)
    assert normalized["hashing"] == {"chunk_size": "200", "min_file_size": "1"}


def test_env_overrides_create_missing_section(monkeypatch):
    monkeypatch.setenv("FILE_HASHER_MIN_FILE_SIZE", "10")
    original = {"other": {"a": "1"}}

    result = ConfigNormalizer().apply_env_overrides(original)

    assert result["hashing"] == {"min_file_size": "10"}
    assert "hashing" not in original


def test_normalize_and_override(monkeypatch):
    monkeypatch.setenv("FILE_HASHER_CHUNK_SIZE", "999")
    result = ConfigNormalizer().normalize_and_override({"Hashing": {"chunk_size": "1"}})
    assert result["hashing"]["chunk_size"] == "999"


def test_canonical_section():
    normalizer = ConfigNormalizer()
    assert normalizer.canonical_section("HASH") == "hashing"
    assert normalizer.canonical_section("Custom") == "custom"


def test_supported_env_vars_is_a_copy():
    normalizer = ConfigNormalizer()
    env_vars = normalizer.get_supported_env_vars()
    env_vars.clear()
    assert "FILE_HASHER_ALGORITHMS" in normalizer.get_supported_env_vars()
