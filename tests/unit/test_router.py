"""Tests for provider routing."""

from __future__ import annotations

import pytest

from linguaspark.ai.providers.gemini import GeminiProvider
from linguaspark.ai.providers.openrouter import OpenRouterProvider
from linguaspark.ai.router import ProviderMode, get_provider_for_mode


def test_modes_map_to_providers() -> None:
  assert isinstance(get_provider_for_mode(ProviderMode.GEMINI), GeminiProvider)
  assert isinstance(get_provider_for_mode("openrouter"), OpenRouterProvider)


def test_unknown_mode_is_rejected() -> None:
  with pytest.raises(ValueError, match="Unsupported provider mode"):
    get_provider_for_mode("bedrock")


def test_unknown_model_is_rejected() -> None:
  with pytest.raises(ValueError, match="Unsupported Gemini model"):
    GeminiProvider(api_key="test").get_model("gemini-0.1-nano")


def test_missing_api_key_is_reported(monkeypatch) -> None:
  monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
  with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
    OpenRouterProvider().get_model()
