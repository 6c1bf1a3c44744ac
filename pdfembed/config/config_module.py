"""
Configuration management module for PDFEmbed.

Handles loading environment variables from a .env file, reading
configuration values and validating required configuration keys.
"""

import os
import re
import logging
from typing import Any, List, Optional
from dotenv import load_dotenv


# ASCII whitespace and digits only
_LEADING_INT = re.compile(r"[ \t\n\r\v\f]*([+-]?[0-9]+)")

# Results saturate at the signed 64-bit range
MAX_INT = 2 ** 63 - 1
MIN_INT = -MAX_INT - 1


class ConfigError(Exception):
    """Custom exception for configuration-related errors."""
    pass


def parse_loose_int(value: Any) -> int:
    """
    Coerce a value to int the way wiki markup attributes are read.

    Leading whitespace and an optional sign are accepted, then as many
    digits as are present; anything after them is ignored. A value with
    no leading digits yields 0 ("50px" -> 50, "wide" -> 0). Results are
    clamped to the signed 64-bit range.

    Args:
        value: String, int or None

    Returns:
        Parsed integer
    """
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, int):
        return _clamp(value)
    if isinstance(value, float):
        if value != value:
            return 0
        return _clamp(int(max(min(value, MAX_INT), MIN_INT)))

    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return _clamp(int(match.group(1)))


def _clamp(value: int) -> int:
    return max(MIN_INT, min(MAX_INT, value))


def load_config(env_path: str = ".env") -> None:
    """
    Load environment variables from a .env file.
    
    Args:
        env_path: Path to the .env file (default: ".env")
    """
    logger = logging.getLogger(__name__)
    
    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)
        logger.info(f"Loaded configuration from {env_path}")
    else:
        logger.warning(f"Configuration file {env_path} not found, using system environment variables only")


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value from environment variables.
    
    Args:
        key: Environment variable key
        default: Default value if key not found
        
    Returns:
        Configuration value or default
    """
    logger = logging.getLogger(__name__)
    
    value = os.getenv(key, default)
    
    if value == default and default is not None:
        logger.warning(f"Configuration key '{key}' not found, using default value: {default}")
    elif value is None:
        logger.warning(f"Configuration key '{key}' not found and no default provided")
    
    return value


def get_config_int(key: str, default: Optional[int] = None) -> Optional[int]:
    """
    Get an integer-like configuration value.

    Values are coerced with parse_loose_int, so "640px" reads as 640.
    
    Args:
        key: Environment variable key
        default: Returned unchanged when the key is missing or blank
        
    Returns:
        Parsed integer or default
    """
    value = get_config(key, default)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return parse_loose_int(value)


def validate_config(required_keys: List[str]) -> None:
    """
    Validate that all required configuration keys are present and non-empty.
    
    Args:
        required_keys: List of required environment variable keys
        
    Raises:
        ConfigError: If any required key is missing or empty
    """
    logger = logging.getLogger(__name__)
    missing_keys = []
    empty_keys = []
    
    for key in required_keys:
        value = os.getenv(key)
        if value is None:
            missing_keys.append(key)
        elif value.strip() == "":
            empty_keys.append(key)
    
    if missing_keys or empty_keys:
        error_msg = "Configuration validation failed:"
        if missing_keys:
            error_msg += f" Missing keys: {', '.join(missing_keys)}."
        if empty_keys:
            error_msg += f" Empty keys: {', '.join(empty_keys)}."
        
        logger.error(error_msg)
        raise ConfigError(error_msg)
    
    logger.info(f"Configuration validation passed for keys: {', '.join(required_keys)}")
