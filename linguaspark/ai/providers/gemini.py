"""Gemini provider implementation using the google-genai SDK."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Final

from google import genai
from google.genai import types

from linguaspark.ai.errors import ErrorKind, ProviderError, to_provider_error
from linguaspark.ai.providers.base import AIModel, GenerationParams, ModelResponse, Provider, SimpleModelResponse

logger = logging.getLogger(__name__)


class GeminiModel(AIModel):
  """Gemini text model client."""

  def __init__(self, name: str, api_key: str | None = None, *, timeout_seconds: float = 60.0) -> None:
    self.name: str = name
    self._timeout_seconds = timeout_seconds

    api_key = api_key or os.getenv("GEMINI_API_KEY")
    if not api_key:
      raise ValueError("GEMINI_API_KEY environment variable is required")

    self._client = genai.Client(api_key=api_key)

  async def generate(self, prompt: str, params: GenerationParams | None = None) -> ModelResponse:
    """Generate text from Gemini, classifying failures and enforcing the per-call timeout."""
    params = params or GenerationParams()
    config = types.GenerateContentConfig(temperature=params.temperature, max_output_tokens=params.max_tokens)

    try:
      # Use the async client to avoid blocking the asyncio event loop.
      response = await asyncio.wait_for(self._client.aio.models.generate_content(model=self.name, contents=prompt, config=config), timeout=self._timeout_seconds)
    except Exception as exc:
      raise to_provider_error(exc) from exc

    text = response.text or ""
    logger.debug("Gemini response:\n%s", text)
    if not text.strip():
      # Gemini returns no text when a candidate is blocked; that is tied to the input.
      raise ProviderError("Gemini returned an empty response", kind=ErrorKind.CONTENT_ISSUE)

    usage = None
    if response.usage_metadata:
      usage = {
        "prompt_tokens": response.usage_metadata.prompt_token_count or 0,
        "completion_tokens": response.usage_metadata.candidates_token_count or 0,
        "total_tokens": response.usage_metadata.total_token_count or 0,
      }
    return SimpleModelResponse(content=text, usage=usage)


class GeminiProvider(Provider):
  """Gemini provider."""

  _DEFAULT_MODEL: Final[str] = "gemini-2.0-flash"
  _AVAILABLE_MODELS: Final[set[str]] = {"gemini-2.5-pro", "gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.0-flash-lite", "gemini-1.5-flash"}

  def __init__(self, api_key: str | None = None, *, timeout_seconds: float = 60.0) -> None:
    self.name: str = "gemini"
    self._api_key = api_key
    self._timeout_seconds = timeout_seconds

  def get_model(self, model: str | None = None) -> AIModel:
    """Return a Gemini model client."""
    model_name = model or self._DEFAULT_MODEL
    if model_name not in self._AVAILABLE_MODELS:
      raise ValueError(f"Unsupported Gemini model '{model_name}'.")
    return GeminiModel(model_name, api_key=self._api_key, timeout_seconds=self._timeout_seconds)
