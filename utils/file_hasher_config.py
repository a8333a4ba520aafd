"""
Configuration utilities for loading, parsing, and writing FileHasher config files.
"""
import configparser
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from models.digest_job import HashAlgorithm
from services.hashing_service import DEFAULT_CHUNK_SIZE, HashingService
from utils.config.config_normalizer import ConfigNormalizer

logger = logging.getLogger(__name__)

ConfigType = Union[configparser.ConfigParser, Dict[str, Dict[str, Any]]]

DEFAULT_CONFIG_PATH = './config/file_hasher_config.ini'
DEFAULT_PROGRESS_INTERVAL_MS = 100
DEFAULT_MAX_FILE_SIZE = 1024 * 1024 * 1024
DEFAULT_MIN_FILE_SIZE = 0


def load_configuration(path: str, normalize: bool = True) -> ConfigType:
    """
    Load the configuration file with optional normalization.

    A missing file is not an error: the result simply contains no sections and
    every lookup falls back to its default.

    Args:
        path (str): Path to the configuration file.
        normalize (bool): Whether to apply configuration normalization and environment overrides.

    Returns:
        Union[configparser.ConfigParser, Dict]: Loaded configuration parser or normalized dict.
    """
    parser = configparser.ConfigParser()
    if path and os.path.isfile(path):
        parser.read(path, encoding='utf-8')
        logger.debug(f"Read configuration from: {path}")
    else:
        logger.debug(f"Configuration file not found, using defaults: {path}")

    if not normalize:
        return parser

    normalized_config = ConfigNormalizer().normalize_and_override(parser)
    logger.info(f"Configuration loaded and normalized (sections: {sorted(normalized_config)})")
    return normalized_config


def write_temp_config(config_dict: dict, tmp_path: str) -> Path:
    """
    Write a temporary config.ini file from a dictionary of config sections.

    Args:
        config_dict (dict): Dictionary of config sections and values.
        tmp_path (str): Path to temporary directory.

    Returns:
        Path: Path to the written config file.
    """
    config = configparser.ConfigParser()
    for section, values in config_dict.items():
        config[section] = {key: str(value) for key, value in values.items()}

    config_path = Path(tmp_path) / "test_file_hasher_config.ini"
    with open(config_path, "w") as f:
        config.write(f)

    return config_path


def get_config_section(config: ConfigType, section_name: str) -> Dict[str, Any]:
    """
    Get configuration section with case-insensitive lookup.

    Raises:
        ValueError: If section is not found
        TypeError: If config is not a supported type
    """
    if config is None:
        raise ValueError("Configuration object cannot be None")
    if not isinstance(section_name, str) or not section_name.strip():
        raise ValueError("Section name must be a non-empty string")

    wanted = ConfigNormalizer().canonical_section(section_name.strip())

    if isinstance(config, dict):
        if wanted in config:
            return dict(config[wanted])
        available_sections = sorted(config.keys())
    elif isinstance(config, configparser.ConfigParser):
        normalizer = ConfigNormalizer()
        for section in config.sections():
            if normalizer.canonical_section(section) == wanted:
                return dict(config[section])
        available_sections = sorted(config.sections())
    else:
        raise TypeError(
            f"Unsupported configuration type: {type(config)}. "
            f"Expected ConfigParser or Dict[str, Dict[str, Any]]"
        )

    raise ValueError(
        f"Configuration section '{section_name}' not found. "
        f"Available sections: {available_sections}"
    )


def get_config_value(
    config: ConfigType,
    section: str,
    key: str,
    fallback: Any = None,
    value_type: type = str
) -> Any:
    """
    Get a configuration value with case-insensitive lookup and type conversion.

    Args:
        config: Configuration object (ConfigParser or normalized dict)
        section: Configuration section name
        key: Configuration key name
        fallback: Default value if not found
        value_type: Type to convert the value to (str, int, float, bool)

    Returns:
        Configuration value converted to specified type or fallback

    Raises:
        ValueError: If value cannot be converted and no fallback is given
    """
    if config is None:
        return fallback
    if not isinstance(key, str) or not key.strip():
        raise ValueError("Key name must be a non-empty string")

    try:
        section_data = get_config_section(config, section)
    except ValueError:
        return fallback
    value = {k.lower(): v for k, v in section_data.items()}.get(key.strip().lower())

    if value is None or (isinstance(value, str) and not value.strip()):
        return fallback

    try:
        if value_type == bool and isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes', 'on', 'enabled')
        return value_type(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError) as e:
        if fallback is not None:
            logger.warning(
                f"Failed to convert config value [{section}].{key}='{value}' to {value_type.__name__}: {e}. "
                f"Using fallback: {fallback}"
            )
            return fallback
        raise ValueError(
            f"Failed to convert config value [{section}].{key}='{value}' to {value_type.__name__}: {e}"
        )


def parse_algorithms(config: ConfigType) -> List[HashAlgorithm]:
    """
    Parse the ``[hashing] algorithms`` list, defaulting to every supported algorithm.

    Raises:
        UnsupportedAlgorithm: If the list names an unknown algorithm.
    """
    raw = get_config_value(config, 'hashing', 'algorithms', fallback='')
    names = [name.strip() for name in raw.split(",") if name.strip()]
    if not names:
        return list(HashAlgorithm)
    algorithms: List[HashAlgorithm] = []
    for name in names:
        algo = HashAlgorithm.from_name(name)
        if algo not in algorithms:
            algorithms.append(algo)
    return algorithms


def get_file_size_limits(config: ConfigType) -> Dict[str, int]:
    return {
        "max_file_size": get_config_value(config, 'hashing', 'max_file_size', DEFAULT_MAX_FILE_SIZE, int),
        "min_file_size": get_config_value(config, 'hashing', 'min_file_size', DEFAULT_MIN_FILE_SIZE, int),
    }


def get_allowed_extensions(config: ConfigType) -> List[str]:
    """
    Parse ``[hashing] allowed_extensions`` (e.g. ``iso, .img``) into lowercase
    extensions without the leading dot. An empty list allows every file.
    """
    raw = get_config_value(config, 'hashing', 'allowed_extensions', fallback='')
    extensions: List[str] = []
    for item in raw.split(","):
        ext = item.strip().lstrip('.').lower()
        if ext and ext not in extensions:
            extensions.append(ext)
    return extensions


def create_hashing_service(config: ConfigType) -> HashingService:
    """
    Build a HashingService from the ``[hashing]`` section.

    Raises:
        ValueError: If the configured chunk size is not positive.
    """
    chunk_size = get_config_value(config, 'hashing', 'chunk_size', DEFAULT_CHUNK_SIZE, int)
    interval_ms = get_config_value(config, 'hashing', 'progress_interval_ms', DEFAULT_PROGRESS_INTERVAL_MS, int)
    if interval_ms < 0:
        logger.warning(f"Negative progress_interval_ms={interval_ms}, using {DEFAULT_PROGRESS_INTERVAL_MS}")
        interval_ms = DEFAULT_PROGRESS_INTERVAL_MS
    logger.debug(f"Creating HashingService: chunk_size={chunk_size}, progress_interval_ms={interval_ms}")
    return HashingService(chunk_size=chunk_size, progress_interval=interval_ms / 1000.0)
