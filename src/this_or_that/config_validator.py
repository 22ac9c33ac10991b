"""
Configuration validation utilities.

Every failure raises ConfigurationError with a message that tells the
operator how to fix it.
"""
import os
import warnings
from typing import Optional

from .exceptions import ConfigurationError


def get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get optional environment variable.

    :param key: Environment variable name
    :param default: Default value if not set
    :return: Environment variable value or default
    """
    value = os.getenv(key, default)

    if value and _is_placeholder(value):
        warnings.warn(
            f"{key} appears to be a placeholder. Using default or None.",
            UserWarning
        )
        return default

    return value


def get_bool_env(key: str, default: bool) -> bool:
    """Read a true/false flag, accepting 1/0, yes/no and on/off."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_float_env(key: str, default: float) -> float:
    """
    Read a float environment variable.

    :raises: ConfigurationError if the value is not a number
    """
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {value!r}.") from None


def get_int_env(key: str, default: int) -> int:
    """
    Read an integer environment variable.

    :raises: ConfigurationError if the value is not an integer
    """
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}.") from None


def validate_api_key(key: Optional[str], key_name: str, min_length: int = 20) -> str:
    """
    Validate API key format.

    :param key: API key to validate
    :param key_name: Name of the key (for error messages)
    :param min_length: Minimum expected length
    :return: Validated key
    :raises: ConfigurationError if invalid
    """
    if not key:
        raise ConfigurationError(
            f"{key_name} is required but not set.\n"
            f"Please set it using one of these methods:\n"
            f"  1. Environment variable: export {key_name}='your-value'\n"
            f"  2. .env file: Create .env in project root with {key_name}=your-value\n"
            f"  3. See .env.example for template"
        )

    if _is_placeholder(key):
        raise ConfigurationError(
            f"{key_name} appears to be a placeholder. "
            f"Please set a real API key. Current value: {mask_secret(key)}"
        )

    if len(key) < min_length:
        raise ConfigurationError(
            f"{key_name} appears to be invalid (too short: {len(key)} chars). "
            f"Expected at least {min_length} characters."
        )

    return key


def validate_temperature(value: float, name: str = "GEMINI_TEMPERATURE") -> float:
    """
    Validate the sampling temperature sent to the generation service.

    :raises: ConfigurationError if outside [0.0, 1.0]
    """
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be between 0.0 and 1.0, got {value}.")
    return value


def validate_timeout(value: float, name: str = "GEMINI_TIMEOUT") -> float:
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}.")
    return value


def validate_max_sessions(value: int, name: str = "MAX_SESSIONS") -> int:
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}.")
    return value


def mask_secret(secret: Optional[str], show_chars: int = 4) -> str:
    """
    Mask secret for safe display in logs and error messages.

    :param secret: Secret to mask
    :param show_chars: Number of characters to show at start/end
    :return: Masked secret
    """
    if not secret or len(secret) <= show_chars * 2:
        return "***"

    return f"{secret[:show_chars]}...{secret[-show_chars:]}"


def _is_placeholder(value: str) -> bool:
    """Check if value is a placeholder."""
    if not value:
        return False

    placeholder_patterns = [
        "your_",
        "your-",
        "placeholder",
        "example",
        "xxx",
        "replace",
        "todo",
    ]

    value_lower = value.lower()
    return any(pattern in value_lower for pattern in placeholder_patterns)
