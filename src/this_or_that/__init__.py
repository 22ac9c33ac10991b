"""
This or That: generate contrasting option pairs per category with Gemini.
"""
from .categories import Category, DEFAULT_CATEGORY
from .config import ThisOrThatConfig
from .exceptions import (
    ConfigurationError,
    GenerationError,
    HttpStatusError,
    NetworkError,
    ParseError,
    SchemaError,
    ThisOrThatError,
    ValidationError,
)
from .gemini_client import GeminiClient, GenerationResult
from .models import HistoryEntry, OptionPair

__all__ = [
    "Category",
    "DEFAULT_CATEGORY",
    "ThisOrThatConfig",
    "ThisOrThatError",
    "ConfigurationError",
    "ValidationError",
    "GenerationError",
    "NetworkError",
    "HttpStatusError",
    "ParseError",
    "SchemaError",
    "GeminiClient",
    "GenerationResult",
    "HistoryEntry",
    "OptionPair",
]
