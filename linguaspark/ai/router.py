"""Routing utilities for provider/model selection."""

from __future__ import annotations

from enum import Enum

from linguaspark.ai.providers.base import AIModel, Provider
from linguaspark.ai.providers.gemini import GeminiProvider
from linguaspark.ai.providers.openrouter import OpenRouterProvider
from linguaspark.config import Settings


class ProviderMode(str, Enum):
  """Supported provider modes."""

  GEMINI = "gemini"
  OPENROUTER = "openrouter"


def get_provider_for_mode(mode: str | ProviderMode, *, settings: Settings | None = None) -> Provider:
  """Return a provider instance for the given mode."""
  key = mode.value if isinstance(mode, ProviderMode) else mode
  timeout = settings.request_timeout_seconds if settings else 60.0
  if key == ProviderMode.GEMINI.value:
    return GeminiProvider(api_key=settings.gemini_api_key if settings else None, timeout_seconds=timeout)
  if key == ProviderMode.OPENROUTER.value:
    return OpenRouterProvider(api_key=settings.openrouter_api_key if settings else None, timeout_seconds=timeout)
  raise ValueError(f"Unsupported provider mode '{mode}'.")


def get_model_for_mode(mode: str | ProviderMode, model: str | None = None, *, settings: Settings | None = None) -> AIModel:
  """Return a model client for the given mode and model name."""
  provider = get_provider_for_mode(mode, settings=settings)
  return provider.get_model(model)


def get_model_from_settings(settings: Settings) -> AIModel:
  """Return the model client configured by LINGUASPARK_PROVIDER / LINGUASPARK_MODEL."""
  return get_model_for_mode(settings.provider, settings.model, settings=settings)
