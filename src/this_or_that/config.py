from dataclasses import dataclass
from typing import Optional

from .categories import Category, DEFAULT_CATEGORY


GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class ThisOrThatConfig:
    # Gemini
    api_key: Optional[str] = None
    model: str = "gemini-2.0-flash"
    api_base_url: str = GEMINI_API_BASE_URL
    temperature: float = 1.0
    request_timeout: float = 30.0

    # Game
    default_category: Category = DEFAULT_CATEGORY

    # Web
    title: str = "This or That"
    secret_key: Optional[str] = None
    rate_limit_enabled: bool = True
    next_rate_limit: str = "20 per minute"
    max_sessions: int = 1000
