"""Shared Gemini client utilities for services.

Wraps google-genai for the two kinds of call the comic needs: grammar-constrained
JSON output validated against a Pydantic model, and image generation returning
an inline payload. Every request carries the timeout from settings, and every
transport, timeout or parse failure is raised as LLMError.
"""

import logging
import threading
import time
from typing import TypeVar

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, ValidationError

from src.settings import Settings
from src.utils.exceptions import LLMError, summarize_llm_error

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Module-level cache for Gemini clients (keyed by (api_key, timeout))
_genai_clients: dict[tuple[str, float], genai.Client] = {}
_genai_clients_lock = threading.Lock()

# Failures that mean "the provider could not be reached or did not answer in time"
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TimeoutException,
    httpx.TransportError,
    genai_errors.APIError,
)


def get_genai_client(settings: Settings) -> genai.Client:
    """Get or create a Gemini client for the given settings.

    The client is cached based on API key and timeout to avoid recreating it
    for each call. Thread-safe via double-checked locking.

    Args:
        settings: Application settings with api_key_env and request_timeout.

    Returns:
        google-genai client configured for the given settings.

    Raises:
        ConfigError: If the API key is not set in the environment.
    """
    api_key = settings.get_api_key()
    timeout = float(settings.request_timeout)
    cache_key = (api_key, timeout)

    if cache_key not in _genai_clients:
        with _genai_clients_lock:
            if cache_key not in _genai_clients:
                _genai_clients[cache_key] = genai.Client(
                    api_key=api_key,
                    # HttpOptions.timeout is in milliseconds
                    http_options=types.HttpOptions(timeout=int(timeout * 1000)),
                )
                logger.debug("Created Gemini client (timeout=%.0fs)", timeout)

    return _genai_clients[cache_key]


def generate_structured(
    settings: Settings,
    model: str,
    prompt: str,
    response_model: type[T],
    system_prompt: str | None = None,
    temperature: float = 0.9,
) -> T:
    """Generate structured output using Gemini's JSON response schema.

    Args:
        settings: Application settings.
        model: The Gemini model to use.
        prompt: The user prompt to send.
        response_model: Pydantic model class defining the expected output structure.
        system_prompt: Optional system instruction.
        temperature: Temperature for generation.

    Returns:
        Instance of response_model with validated data.

    Raises:
        ConfigError: If the API key is missing.
        LLMError: On transport failure, timeout, empty response or invalid JSON.
    """
    client = get_genai_client(settings)

    logger.debug(
        "Generating structured output: model=%s, response_model=%s, temperature=%s",
        model,
        response_model.__name__,
        temperature,
    )

    start_time = time.time()
    try:
        response = client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=temperature,
                response_mime_type="application/json",
                response_schema=response_model,
            ),
        )
    except TRANSPORT_ERRORS as e:
        logger.warning("Structured generation transport failure: %s", summarize_llm_error(e))
        raise LLMError(f"Structured generation failed for {response_model.__name__}: {e}") from e

    duration = time.time() - start_time
    text = response.text
    if not text:
        logger.warning("Gemini returned no text for %s", response_model.__name__)
        raise LLMError(f"No text response from Gemini for {response_model.__name__}")

    try:
        result = response_model.model_validate_json(text)
    except ValidationError as e:
        logger.warning("Structured output validation failed: %s", summarize_llm_error(e))
        raise LLMError(f"Gemini response is not a valid {response_model.__name__}: {e}") from e

    usage = response.usage_metadata
    logger.info(
        "LLM call complete: model=%s, schema=%s, %.2fs, tokens: %s+%s",
        model,
        response_model.__name__,
        duration,
        usage.prompt_token_count if usage else None,
        usage.candidates_token_count if usage else None,
    )
    return result


def generate_image(settings: Settings, model: str, prompt: str) -> types.Blob | None:
    """Generate an image and return the first inline payload.

    Args:
        settings: Application settings.
        model: The Gemini image model to use.
        prompt: Full image prompt.

    Returns:
        The inline image blob (raw bytes plus MIME type), or None when the
        call succeeded but the response carried no image.

    Raises:
        ConfigError: If the API key is missing.
        LLMError: On transport failure or timeout.
    """
    client = get_genai_client(settings)

    start_time = time.time()
    try:
        response = client.models.generate_content(
            model=model,
            contents=types.Content(role="user", parts=[types.Part(text=prompt)]),
        )
    except TRANSPORT_ERRORS as e:
        logger.warning("Image generation transport failure: %s", summarize_llm_error(e))
        raise LLMError(f"Image generation failed: {e}") from e

    for candidate in response.candidates or []:
        content = candidate.content
        for part in (content.parts if content else None) or []:
            if part.inline_data and part.inline_data.data:
                logger.info(
                    "Image call complete: model=%s, %.2fs, %d bytes (%s)",
                    model,
                    time.time() - start_time,
                    len(part.inline_data.data),
                    part.inline_data.mime_type,
                )
                return part.inline_data
        break  # Only the first candidate is considered

    finish_reason = None
    if response.candidates:
        finish_reason = response.candidates[0].finish_reason
    logger.warning(
        "Gemini returned a response but no image data (finish_reason=%s, prompt_feedback=%s)",
        finish_reason,
        response.prompt_feedback,
    )
    return None
