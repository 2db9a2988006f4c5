"""Base interfaces for generation providers and models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Protocol

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


@dataclass(frozen=True)
class GenerationParams:
  """Sampling parameters passed with every provider call."""

  temperature: float = DEFAULT_TEMPERATURE
  max_tokens: int = DEFAULT_MAX_TOKENS

  def with_temperature(self, temperature: float) -> GenerationParams:
    return replace(self, temperature=temperature)


class ModelResponse(Protocol):
  """Response contract for model outputs."""

  content: str
  usage: dict[str, int] | None


@dataclass
class SimpleModelResponse:
  """Minimal model response structure."""

  content: str
  usage: dict[str, int] | None = None

  @property
  def tokens_used(self) -> int:
    return tokens_from_usage(self.usage)


def tokens_from_usage(usage: dict[str, int] | None) -> int:
  """Return total tokens from a usage mapping, summing parts when no total is reported."""
  if not usage:
    return 0
  total = usage.get("total_tokens")
  if total is not None:
    return int(total)
  return int(usage.get("prompt_tokens") or 0) + int(usage.get("completion_tokens") or 0)


class AIModel(ABC):
  """Abstract base class for AI models."""

  name: str

  @abstractmethod
  async def generate(self, prompt: str, params: GenerationParams | None = None) -> ModelResponse:
    """Generate a response for the given prompt."""


class Provider(ABC):
  """Abstract base class for AI providers."""

  name: str

  @abstractmethod
  def get_model(self, model: str | None = None) -> AIModel:
    """Return the model client for the provider."""
