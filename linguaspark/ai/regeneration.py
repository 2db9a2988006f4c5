"""Bounded per-section regeneration state machine."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Final

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.errors import ErrorKind, ProviderError
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, QualitySectionReport, SharedContext, ValidationResult
from linguaspark.ai.providers.base import AIModel, GenerationParams
from linguaspark.ai.sections import SectionSpec
from linguaspark.ai.utils.text import dedupe

logger = logging.getLogger(__name__)

MAX_ATTEMPTS: Final = 3
MAX_ADJUSTMENTS = 6


class SectionState(str, Enum):
  PENDING = "pending"
  ATTEMPTED = "attempted"
  ACCEPTED = "accepted"
  EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class AttemptRecord:
  """One generate-and-validate round; either a section or a provider error."""

  attempt: int
  section: GeneratedSection | None = None
  validation: ValidationResult | None = None
  error: ProviderError | None = None


@dataclass(frozen=True)
class SectionOutcome:
  """Final state of one section: the accepted content plus its quality record."""

  section: GeneratedSection
  validation: ValidationResult
  report: QualitySectionReport
  state: SectionState
  attempts: tuple[AttemptRecord, ...]


def adjustments_for(record: AttemptRecord) -> tuple[str, ...]:
  """Turn the previous attempt's failures into narrow, issue-specific corrections."""
  if record.error is not None:
    return (f"The previous request failed ({record.error.kind.value}). Reply with the requested content only, in the exact format asked for.",)
  assert record.validation is not None
  corrections = [issue.suggestion or issue.description for issue in record.validation.errors]
  return tuple(dedupe(corrections)[:MAX_ADJUSTMENTS])


def generator_params(generator: type[SectionGenerator], base: GenerationParams | None) -> GenerationParams | None:
  """Apply configured sampling to a generator, keeping its larger section-specific token budget."""
  if base is None:
    return None
  return GenerationParams(temperature=base.temperature, max_tokens=max(generator.default_params.max_tokens, base.max_tokens))


def select_best(records: list[AttemptRecord]) -> AttemptRecord | None:
  """Highest validation score wins; ties go to the earliest attempt."""
  scored = [record for record in records if record.validation is not None]
  if not scored:
    return None
  return max(scored, key=lambda record: (record.validation.score, -record.attempt))  # type: ignore[union-attr]


class RegenerationController:
  """Run one section through at most MAX_ATTEMPTS generate/validate rounds.

  Validation failures and retryable provider errors (network, content,
  unknown) consume an attempt; a quota error aborts immediately. If no
  attempt validates, the best-scoring one is accepted. If every attempt
  failed at the provider, the last provider error is raised.
  """

  def __init__(self, *, base_params: GenerationParams | None = None) -> None:
    self._base_params = base_params

  async def run(self, spec: SectionSpec, context: SharedContext, prior: Prior, model: AIModel) -> SectionOutcome:
    generator = spec.generator(model=model, params=generator_params(spec.generator, self._base_params))
    name = spec.kind.value
    records: list[AttemptRecord] = []
    state = SectionState.PENDING
    started = time.perf_counter()

    for attempt in range(1, MAX_ATTEMPTS + 1):
      if records:
        instruction = GenerationInstruction(attempt=attempt, variant="regeneration", adjustments=adjustments_for(records[-1]))
        logger.info("Regenerating %s (attempt %d/%d): %s", name, attempt, MAX_ATTEMPTS, "; ".join(instruction.adjustments))
      else:
        instruction = GenerationInstruction(attempt=attempt)

      try:
        section = await generator.generate(context, prior, instruction)
      except ProviderError as exc:
        if exc.kind is ErrorKind.QUOTA_EXCEEDED:
          raise
        logger.warning("%s attempt %d failed at the provider (%s): %s", name, attempt, exc.kind.value, exc)
        records.append(AttemptRecord(attempt=attempt, error=exc))
        state = SectionState.ATTEMPTED
        continue

      validation = spec.validator(section.content, context)
      records.append(AttemptRecord(attempt=attempt, section=section, validation=validation))
      logger.info("%s attempt %d scored %d (%d errors, %d warnings)", name, attempt, validation.score, len(validation.errors), len(validation.warnings))
      if validation.is_valid:
        state = SectionState.ACCEPTED
        break
      state = SectionState.ATTEMPTED

    if state is not SectionState.ACCEPTED:
      state = SectionState.EXHAUSTED

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    return self._finalize(spec, context, records, state, elapsed_ms, tokens=generator.tokens_spent)

  def _finalize(self, spec: SectionSpec, context: SharedContext, records: list[AttemptRecord], state: SectionState, elapsed_ms: int, *, tokens: int) -> SectionOutcome:
    name = spec.kind.value
    best = select_best(records)
    if best is None:
      last_error = records[-1].error
      assert last_error is not None
      logger.error("%s failed on all %d attempts; last error: %s", name, len(records), last_error)
      raise last_error

    assert best.section is not None and best.validation is not None
    section, validation = best.section, best.validation
    placeholder = False
    if state is SectionState.EXHAUSTED:
      logger.warning("%s exhausted %d attempts; accepting attempt %d with score %d", name, len(records), best.attempt, validation.score)
      if not spec.has_content(section.content):
        content = spec.placeholder(context)
        section = GeneratedSection(section_name=name, content=content, tokens_used=section.tokens_used, generation_strategy="placeholder")
        validation = spec.validator(content, context)
        placeholder = True
        logger.warning("%s produced no usable content; substituted a placeholder", name)

    report = QualitySectionReport(
      section_name=name,
      attempt_count=len(records),
      validation_score=validation.score,
      generation_time_ms=elapsed_ms,
      issue_count=len(validation.errors),
      warning_count=len(validation.warnings),
      regenerated=len(records) > 1,
      accepted_attempt=best.attempt,
      placeholder=placeholder,
      tokens_used=tokens,
      error_kinds=tuple(record.error.kind.value for record in records if record.error is not None),
    )
    return SectionOutcome(section=section, validation=validation, report=report, state=state, attempts=tuple(records))
