"""OpenRouter provider implementation using the openai SDK."""

from __future__ import annotations

import logging
import os
from typing import Final

from openai import AsyncOpenAI

from linguaspark.ai.errors import ErrorKind, ProviderError, to_provider_error
from linguaspark.ai.providers.base import AIModel, GenerationParams, ModelResponse, Provider, SimpleModelResponse

logger = logging.getLogger(__name__)


class OpenRouterModel(AIModel):
  """OpenRouter chat model client."""

  def __init__(self, name: str, api_key: str | None = None, base_url: str | None = None, *, timeout_seconds: float = 60.0) -> None:
    self.name: str = name

    api_key = api_key or os.getenv("OPENROUTER_API_KEY")
    if not api_key:
      raise ValueError("OPENROUTER_API_KEY environment variable is required")

    # OpenRouter uses the OpenAI-compatible API; we add optional attribution headers.
    default_headers = {}
    referer = os.getenv("OPENROUTER_HTTP_REFERER")
    if referer:
      default_headers["HTTP-Referer"] = referer
    title = os.getenv("OPENROUTER_TITLE")
    if title:
      default_headers["X-Title"] = title

    # SDK retries off; attempts are counted by the regeneration controller.
    self._client = AsyncOpenAI(
      api_key=api_key,
      base_url=base_url or "https://openrouter.ai/api/v1",
      default_headers=default_headers or None,
      timeout=timeout_seconds,
      max_retries=0,
    )

  async def generate(self, prompt: str, params: GenerationParams | None = None) -> ModelResponse:
    """Generate text from OpenRouter, classifying failures."""
    params = params or GenerationParams()
    try:
      response = await self._client.chat.completions.create(
        model=self.name,
        messages=[{"role": "user", "content": prompt}],
        temperature=params.temperature,
        max_tokens=params.max_tokens,
      )
    except Exception as exc:
      raise to_provider_error(exc) from exc

    content = response.choices[0].message.content if response.choices else None
    logger.debug("OpenRouter response:\n%s", content)
    if not content or not content.strip():
      raise ProviderError("OpenRouter returned an empty response", kind=ErrorKind.CONTENT_ISSUE)

    usage = None
    if response.usage:
      usage = {"prompt_tokens": response.usage.prompt_tokens, "completion_tokens": response.usage.completion_tokens, "total_tokens": response.usage.total_tokens}
    return SimpleModelResponse(content=content, usage=usage)


class OpenRouterProvider(Provider):
  """OpenRouter provider."""

  _DEFAULT_MODEL: Final[str] = "meta-llama/llama-3.3-70b-instruct:free"
  _AVAILABLE_MODELS: Final[set[str]] = {
    "meta-llama/llama-3.3-70b-instruct:free",
    "meta-llama/llama-3.1-405b-instruct:free",
    "google/gemma-3-27b-it:free",
    "deepseek/deepseek-r1-0528:free",
    "openai/gpt-oss-120b:free",
    "openai/gpt-oss-20b:free",
  }

  def __init__(self, api_key: str | None = None, base_url: str | None = None, *, timeout_seconds: float = 60.0) -> None:
    self.name: str = "openrouter"
    self._api_key = api_key
    self._base_url = base_url
    self._timeout_seconds = timeout_seconds

  def get_model(self, model: str | None = None) -> AIModel:
    """Return an OpenRouter model client."""
    model_name = model or self._DEFAULT_MODEL
    if model_name not in self._AVAILABLE_MODELS:
      raise ValueError(f"Unsupported OpenRouter model '{model_name}'.")
    return OpenRouterModel(model_name, api_key=self._api_key, base_url=self._base_url, timeout_seconds=self._timeout_seconds)
