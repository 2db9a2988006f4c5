"""Orchestration for the progressive lesson pipeline."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from linguaspark.ai.context_builder import ContextBuilder
from linguaspark.ai.errors import GenerationCancelledError, LessonGenerationError, ProviderError
from linguaspark.ai.pipeline.content import ReadingSection, VocabularySection
from linguaspark.ai.pipeline.contracts import (
  MAX_KEY_VOCABULARY,
  MAX_THEMES,
  GeneratedSection,
  LessonQualityReport,
  LessonRequest,
  LessonResult,
  QualitySectionReport,
  SectionKind,
  SharedContext,
)
from linguaspark.ai.providers.base import AIModel, GenerationParams
from linguaspark.ai.providers.guarded import GuardedModel
from linguaspark.ai.regeneration import RegenerationController
from linguaspark.ai.sections import SECTION_SPECS, resolve_section_order
from linguaspark.ai.utils.text import DEFAULT_THEMES, bucket_themes, dedupe
from linguaspark.config import Settings
from linguaspark.telemetry.context import llm_call_context
from linguaspark.telemetry.quality import QualityMetricsSink
from linguaspark.utils.ids import generate_request_id

ProgressCallback = Callable[[str, str], Awaitable[None]] | None

logger = logging.getLogger(__name__)


def fold_vocabulary(context: SharedContext, section: GeneratedSection) -> SharedContext:
  """Put the accepted vocabulary words first so later sections reuse exactly those words."""
  content = section.content
  if not isinstance(content, VocabularySection) or not content.words:
    return context
  merged = dedupe([*(entry.word for entry in content.words), *context.key_vocabulary])
  return context.model_copy(update={"key_vocabulary": tuple(merged[:MAX_KEY_VOCABULARY])})


def fold_reading(context: SharedContext, section: GeneratedSection) -> SharedContext:
  """Add theme labels detected in the accepted reading passage."""
  content = section.content
  if not isinstance(content, ReadingSection) or not content.passage:
    return context
  detected = [theme for theme in bucket_themes(content.passage) if theme not in DEFAULT_THEMES]
  merged = dedupe([*context.main_themes, *detected])
  return context.model_copy(update={"main_themes": tuple(merged[:MAX_THEMES])})


_CONTEXT_FOLDS: dict[SectionKind, Callable[[SharedContext, GeneratedSection], SharedContext]] = {
  SectionKind.VOCABULARY: fold_vocabulary,
  SectionKind.READING: fold_reading,
}


@dataclass
class _RunState:
  """Mutable state for one lesson request."""

  request_id: str
  request: LessonRequest
  model: GuardedModel
  context: SharedContext | None = None
  current: str = "context"
  accepted: dict[SectionKind, GeneratedSection] = field(default_factory=dict)
  reports: list[QualitySectionReport] = field(default_factory=list)
  logs: list[str] = field(default_factory=list)

  def log(self, message: str) -> None:
    self.logs.append(message)
    logger.info("[%s] %s", self.request_id, message)


class LessonOrchestrator:
  """Run context building and every section in dependency order for one request at a time.

  The orchestrator keeps no per-request state on the instance, so one
  instance may serve concurrent requests.
  """

  def __init__(
    self,
    model: AIModel,
    *,
    metrics_sink: QualityMetricsSink,
    settings: Settings | None = None,
    progress_callback: ProgressCallback = None,
    context_builder: ContextBuilder | None = None,
  ) -> None:
    self._model = model
    self._metrics_sink = metrics_sink
    self._log_prompts = settings.log_prompts if settings else False
    self._progress_callback = progress_callback
    self._context_builder = context_builder or ContextBuilder()
    base_params = GenerationParams(temperature=settings.temperature, max_tokens=settings.max_tokens) if settings else None
    self._controller = RegenerationController(base_params=base_params)

  async def generate_lesson(self, request: LessonRequest | Mapping[str, Any], *, cancel_event: asyncio.Event | None = None) -> LessonResult:
    """Generate a full lesson.

    Raises:
      LessonGenerationError: a provider failure aborted the request.
      GenerationCancelledError: cancel_event was set; nothing partial is returned.
    """
    lesson_request = request if isinstance(request, LessonRequest) else LessonRequest.model_validate(request)
    request_id = generate_request_id()
    guarded = GuardedModel(self._model, cancel_event=cancel_event, log_prompts=self._log_prompts)
    state = _RunState(request_id=request_id, request=lesson_request, model=guarded)
    state.log(f"Starting lesson: kind={lesson_request.lesson_kind.value} level={lesson_request.proficiency_level.value} model={guarded.name}")

    with llm_call_context(section="lesson", purpose="request", request_id=request_id):
      try:
        await self._run(state)
      except ProviderError as exc:
        raise self._fail(state, exc) from exc
      except GenerationCancelledError:
        state.log(f"Cancelled during {state.current}; discarding {len(state.accepted)} accepted sections")
        raise

    return self._assemble(state)

  async def _run(self, state: _RunState) -> None:
    state.context = await self._context_builder.build(state.request, state.model)
    state.log(f"Context ready: title='{state.context.lesson_title}' vocabulary={len(state.context.key_vocabulary)} minimal={state.context.is_minimal}")

    order = resolve_section_order()
    for index, kind in enumerate(order, start=1):
      state.model.raise_if_cancelled()
      state.current = kind.value
      spec = SECTION_SPECS[kind]
      prior = {dependency: state.accepted[dependency] for dependency in spec.dependencies}
      await self._report_progress(kind.value, "generating")

      outcome = await self._controller.run(spec, state.context, prior, state.model)
      state.accepted[kind] = outcome.section
      state.reports.append(outcome.report)
      fold = _CONTEXT_FOLDS.get(kind)
      if fold is not None:
        state.context = fold(state.context, outcome.section)

      report = outcome.report
      state.log(f"Section {index}/{len(order)} {kind.value} {outcome.state.value}: score={report.validation_score} attempts={report.attempt_count}")
      await self._report_progress(kind.value, "completed")

    # The last call may have settled after the caller cancelled.
    state.model.raise_if_cancelled()

  def _assemble(self, state: _RunState) -> LessonResult:
    assert state.context is not None
    quality = LessonQualityReport(request_id=state.request_id, sections=tuple(state.reports), total_tokens=state.model.tokens_used)
    lesson = LessonResult(
      request_id=state.request_id,
      lesson_title=state.context.lesson_title,
      context=state.context,
      sections={kind.value: section for kind, section in state.accepted.items()},
      quality_report=quality,
    )
    state.log(f"Lesson complete: score={quality.overall_score} regenerations={quality.total_regenerations} tokens={quality.total_tokens}")
    try:
      self._metrics_sink.publish(quality)
    except Exception:
      logger.exception("Quality metrics sink failed for request %s", state.request_id)
    return lesson

  def _fail(self, state: _RunState, error: ProviderError) -> LessonGenerationError:
    message = f"{state.current} failed ({error.kind.value}): {error}"
    state.logs.append(message)
    logger.error("[%s] %s", state.request_id, message)
    snapshot = {
      "requestId": state.request_id,
      "failedSection": state.current,
      "acceptedSections": [kind.value for kind in state.accepted],
      "qualityReport": [report.model_dump(by_alias=True) for report in state.reports],
      "providerCalls": state.model.call_count,
    }
    snapshot_message = f"Failure snapshot: {json.dumps(snapshot, ensure_ascii=True)}"
    state.logs.append(snapshot_message)
    logger.warning("[%s] %s", state.request_id, snapshot_message)
    return LessonGenerationError(error.kind, str(error), section=state.current, logs=list(state.logs))

  async def _report_progress(self, section: str, status: str) -> None:
    if self._progress_callback:
      await self._progress_callback(section, status)
