"""Base class for section generators."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

import msgspec

from linguaspark.ai.agents.prompts import with_instruction
from linguaspark.ai.json_parser import parse_json_with_fallback
from linguaspark.ai.pipeline.content import SectionContent
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.providers.base import AIModel, GenerationParams, tokens_from_usage
from linguaspark.telemetry.context import llm_call_context

Prior = Mapping[SectionKind, GeneratedSection]

_MIN_TEMPERATURE = 0.2
_TEMPERATURE_STEP = 0.2
_CAMEL_RE = re.compile(r"_([a-z])")


class SectionGenerator(ABC):
  """Strategy that turns (context, accepted dependencies, instruction) into one GeneratedSection.

  Generators hold no per-request state beyond `tokens_spent`, the tally of
  every provider call made through them, partial attempts included. Provider
  errors propagate to the regeneration controller unchanged.
  Output that cannot be parsed yields empty content so the validator, not the
  generator, decides what happens next.
  """

  kind: ClassVar[SectionKind]
  instruction_text: ClassVar[str] = ""
  default_params: ClassVar[GenerationParams] = GenerationParams()

  def __init__(self, *, model: AIModel, params: GenerationParams | None = None) -> None:
    self._model = model
    self._params = params or self.default_params
    self._logger = logging.getLogger(type(self).__module__)
    self.tokens_spent = 0

  @abstractmethod
  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    """Generate the section content for one attempt."""

  def params_for(self, instruction: GenerationInstruction) -> GenerationParams:
    """Cool the sampling temperature on each regeneration to favour format compliance."""
    if not instruction.is_regeneration:
      return self._params
    cooled = self._params.temperature - _TEMPERATURE_STEP * (instruction.attempt - 1)
    return self._params.with_temperature(round(max(_MIN_TEMPERATURE, cooled), 2))

  async def _complete(self, prompt: str, *, purpose: str, instruction: GenerationInstruction) -> tuple[str, int]:
    """Call the provider once under a call context; return (text, tokens)."""
    with llm_call_context(section=self.kind.value, purpose=purpose, attempt=instruction.attempt):
      response = await self._model.generate(with_instruction(prompt, instruction), self.params_for(instruction))
    tokens = tokens_from_usage(response.usage)
    self.tokens_spent += tokens
    return response.content, tokens

  def _section(self, content: SectionContent, *, tokens: int, strategy: str = "progressive") -> GeneratedSection:
    return GeneratedSection(section_name=self.kind.value, content=content, tokens_used=tokens, generation_strategy=strategy)

  def _parse_json(self, text: str) -> Any | None:
    """Parse provider JSON leniently; None when nothing can be recovered."""
    try:
      return parse_json_with_fallback(text)
    except json.JSONDecodeError as exc:
      self._logger.warning("%s output is not valid JSON: %s", self.kind.value, exc)
      return None

  def _convert(self, payload: Any, target: Any) -> Any | None:
    """Convert parsed JSON into content structs; None on shape mismatch."""
    try:
      return msgspec.convert(camelize_keys(payload), type=target)
    except msgspec.ValidationError as exc:
      self._logger.warning("%s output does not match the expected shape: %s", self.kind.value, exc)
      return None


def camelize_keys(payload: Any) -> Any:
  """Rewrite snake_case mapping keys to camelCase so either spelling converts."""
  if isinstance(payload, dict):
    return {_CAMEL_RE.sub(lambda match: match.group(1).upper(), str(key)): camelize_keys(value) for key, value in payload.items()}
  if isinstance(payload, list):
    return [camelize_keys(item) for item in payload]
  return payload
