"""
Gemini generation client.

Sends one generateContent request per call and turns the response into an
OptionPair. Every failure is converted into a GenerationError and returned
inside the GenerationResult, so callers never see an exception from
generate().
"""
import json
import logging
from dataclasses import dataclass
from time import time
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .categories import Category
from .config import ThisOrThatConfig, GEMINI_API_BASE_URL
from .config_validator import mask_secret, validate_api_key, validate_temperature, validate_timeout
from .exceptions import (
    GenerationError,
    HttpStatusError,
    NetworkError,
    ParseError,
    SchemaError,
)
from .models import OptionPair
from .prompts import build_generation_payload

logger = logging.getLogger(__name__)


class _Part(BaseModel):
    text: Optional[str] = None


class _Content(BaseModel):
    parts: List[_Part] = Field(default_factory=list)


class _Candidate(BaseModel):
    content: Optional[_Content] = None


class GenerateContentResponse(BaseModel):
    """Subset of the generateContent response envelope that we read."""
    candidates: List[_Candidate] = Field(default_factory=list)

    def first_text(self) -> Optional[str]:
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation attempt: a pair or an error, never both."""
    pair: Optional[OptionPair] = None
    error: Optional[GenerationError] = None
    latency_ms: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.pair is not None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.user_message if self.error else None


class GeminiClient:
    """
    Client for the Gemini generateContent endpoint.

    The credential and HTTP transport are injected so tests can run with a
    fake key and a fake session.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.0-flash",
        temperature: float = 1.0,
        timeout: float = 30.0,
        api_base_url: str = GEMINI_API_BASE_URL,
        http: Optional[Any] = None,
    ):
        """
        :param api_key: Gemini API key, passed as the ``key`` query parameter
        :param model: Gemini model name
        :param temperature: Sampling temperature in [0.0, 1.0]
        :param timeout: Request timeout in seconds
        :param api_base_url: Base URL of the generative language API
        :param http: requests.Session compatible object (defaults to a new session)
        :raises: ConfigurationError if the key or temperature is invalid
        """
        self._api_key = validate_api_key(api_key, "GEMINI_API_KEY")
        self._model = model
        self._temperature = validate_temperature(temperature)
        self._timeout = validate_timeout(timeout)
        self._url = f"{api_base_url.rstrip('/')}/models/{model}:generateContent"
        self._http = http if http is not None else requests.Session()

        logger.info(f"Gemini client ready - Model: {model}, Key: {mask_secret(self._api_key)}")

    @classmethod
    def from_config(cls, config: ThisOrThatConfig, http: Optional[Any] = None) -> "GeminiClient":
        return cls(
            api_key=config.api_key,
            model=config.model,
            temperature=config.temperature,
            timeout=config.request_timeout,
            api_base_url=config.api_base_url,
            http=http,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return self._url

    def generate(self, category: Category) -> GenerationResult:
        """
        Generate one This or That pair for a category.

        Makes exactly one request. No retry and no caching.

        :param category: Category to generate options for
        :return: GenerationResult holding either the pair or the error
        """
        start_time = time()
        try:
            pair = self._generate(category)
        except GenerationError as e:
            latency_ms = int((time() - start_time) * 1000)
            logger.warning(f"Generation failed - Category: {category.value}, Kind: {e.kind}, Error: {e}")
            return GenerationResult(error=e, latency_ms=latency_ms)

        latency_ms = int((time() - start_time) * 1000)
        logger.info(f"Generated pair - Category: {category.value}, Latency: {latency_ms}ms")
        return GenerationResult(pair=pair, latency_ms=latency_ms)

    def _generate(self, category: Category) -> OptionPair:
        payload = build_generation_payload(category, self._temperature)
        response = self._post(payload)
        text = self._extract_text(response)
        return parse_option_pair(text)

    def _post(self, payload: dict) -> Any:
        logger.debug(f"POST {self._url} (temperature={self._temperature})")
        try:
            response = self._http.post(
                self._url,
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(_describe_transport_error(e)) from e

        if not 200 <= response.status_code < 300:
            raise HttpStatusError(response.status_code, _error_body(response))

        return response

    @staticmethod
    def _extract_text(response: Any) -> str:
        try:
            raw = response.json()
        except ValueError as e:
            raise ParseError("Response body is not valid JSON.") from e

        try:
            envelope = GenerateContentResponse.model_validate(raw)
        except PydanticValidationError as e:
            raise ParseError("Response envelope is malformed.") from e

        text = envelope.first_text()
        if text is None:
            raise ParseError("Failed to generate options from AI. Response was empty or malformed.")
        return text


def parse_option_pair(text: str) -> OptionPair:
    """
    Parse the structured text of a candidate into an OptionPair.

    :param text: JSON text expected to hold an array of two strings
    :return: OptionPair in response order
    :raises ParseError: If the text is not valid JSON
    :raises SchemaError: If the value is not exactly two non-empty strings
    """
    try:
        options = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ParseError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(options, list):
        raise SchemaError(
            f"AI response format was unexpected. Expected an array of two strings, got {type(options).__name__}."
        )
    if len(options) != 2:
        raise SchemaError(
            f"AI response format was unexpected. Expected an array of two strings, got {len(options)} items."
        )
    if not all(isinstance(option, str) for option in options):
        raise SchemaError("AI response format was unexpected. Both options must be strings.")

    first, second = (option.strip() for option in options)
    if not first or not second:
        raise SchemaError("AI response format was unexpected. Both options must be non-empty.")

    return OptionPair(first, second)


def _error_body(response: Any) -> Any:
    try:
        return response.json()
    except ValueError:
        return getattr(response, "text", "")


def _describe_transport_error(error: Exception) -> str:
    # requests puts the full URL (including the key) in some messages
    if isinstance(error, requests.Timeout):
        return "Request to the generation service timed out"
    if isinstance(error, requests.ConnectionError):
        return "Could not connect to the generation service"
    return f"Request to the generation service failed ({type(error).__name__})"
