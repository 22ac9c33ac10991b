"""
Configuration loader with validation.

The Gemini API key is read here but validated by GeminiClient, so a missing
key surfaces as a startup error in the UI instead of aborting the process.
"""
from dotenv import load_dotenv

from .categories import Category, DEFAULT_CATEGORY
from .config import ThisOrThatConfig, GEMINI_API_BASE_URL
from .config_validator import (
    get_bool_env,
    get_float_env,
    get_int_env,
    get_optional_env,
    validate_max_sessions,
    validate_temperature,
    validate_timeout,
)
from .exceptions import ConfigurationError, ValidationError


def load_config_from_env(load_env_file: bool = True) -> ThisOrThatConfig:
    """
    Load configuration from environment variables with validation.

    Usage:
        config = load_config_from_env()
        app = create_app(config)

    :param load_env_file: Read a local .env file first (development)
    :return: Validated ThisOrThatConfig instance
    :raises: ConfigurationError if a value is present but invalid
    """
    if load_env_file:
        load_dotenv()

    default_label = get_optional_env("DEFAULT_CATEGORY", DEFAULT_CATEGORY.value)
    try:
        default_category = Category.from_label(default_label)
    except ValidationError as e:
        raise ConfigurationError(f"DEFAULT_CATEGORY is invalid. {e}") from None

    return ThisOrThatConfig(
        api_key=get_optional_env("GEMINI_API_KEY"),
        model=get_optional_env("GEMINI_MODEL", default="gemini-2.0-flash"),
        api_base_url=get_optional_env("GEMINI_API_BASE_URL", default=GEMINI_API_BASE_URL),
        temperature=validate_temperature(get_float_env("GEMINI_TEMPERATURE", 1.0)),
        request_timeout=validate_timeout(get_float_env("GEMINI_TIMEOUT", 30.0)),
        default_category=default_category,
        title=get_optional_env("APP_TITLE", default="This or That"),
        secret_key=get_optional_env("FLASK_SECRET_KEY"),
        rate_limit_enabled=get_bool_env("RATE_LIMIT_ENABLED", True),
        next_rate_limit=get_optional_env("NEXT_RATE_LIMIT", default="20 per minute"),
        max_sessions=validate_max_sessions(get_int_env("MAX_SESSIONS", 1000)),
    )
