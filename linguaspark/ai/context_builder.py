"""Derive the request-scoped SharedContext from the source text."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from linguaspark.ai.agents.prompts import render_context_prompt
from linguaspark.ai.errors import ErrorKind, GenerationCancelledError, to_provider_error
from linguaspark.ai.json_parser import parse_json_with_fallback
from linguaspark.ai.pipeline.contracts import MAX_SOURCE_CHARS, MAX_SUMMARY_CHARS, LessonKind, LessonRequest, SharedContext
from linguaspark.ai.providers.base import AIModel, GenerationParams
from linguaspark.ai.utils.text import bucket_themes, dedupe, naive_keywords, truncate, word_count
from linguaspark.telemetry.context import llm_call_context

logger = logging.getLogger(__name__)

MIN_SOURCE_WORDS = 12
MAX_CONTEXT_VOCABULARY = 12
MIN_CONTEXT_VOCABULARY = 6
MAX_CONTEXT_THEMES = 5
MIN_CONTEXT_THEMES = 2
FALLBACK_SUMMARY_CHARS = 200
MAX_TITLE_CHARS = 80

_KIND_TITLES: dict[LessonKind, str] = {
  LessonKind.DISCUSSION: "Discussion",
  LessonKind.GRAMMAR: "Grammar Focus",
  LessonKind.TRAVEL: "Travel & Tourism",
  LessonKind.BUSINESS: "Business",
  LessonKind.PRONUNCIATION: "Pronunciation Practice",
}
_VOCABULARY_WORD_RE = re.compile(r"^[a-z][a-z'-]*$")

CONTEXT_PARAMS = GenerationParams(temperature=0.3, max_tokens=800)


def fallback_title(request: LessonRequest) -> str:
  return f"{_KIND_TITLES[request.lesson_kind]} {request.target_language} - {request.proficiency_level.value} Level"


def fallback_summary(source_text: str) -> str:
  text = " ".join(source_text.split())
  if len(text) <= FALLBACK_SUMMARY_CHARS:
    return text
  return text[:FALLBACK_SUMMARY_CHARS].rstrip() + "..."


def _clean_vocabulary(values: Any) -> list[str]:
  if not isinstance(values, list):
    return []
  words = [str(value).strip().lower() for value in values if isinstance(value, str)]
  valid = [word for word in words if 2 < len(word) < 20 and _VOCABULARY_WORD_RE.match(word)]
  return dedupe(valid)[:MAX_CONTEXT_VOCABULARY]


def _clean_themes(values: Any) -> list[str]:
  if not isinstance(values, list):
    return []
  themes = [" ".join(str(value).split()) for value in values if isinstance(value, str)]
  return dedupe(theme for theme in themes if 3 < len(theme) < 50)[:MAX_CONTEXT_THEMES]


class ContextBuilder:
  """Build SharedContext with at most one provider call.

  Falls back to keyword extraction whenever the provider output is unusable.
  Only a quota failure is allowed to escape, since retrying elsewhere would
  fail the same way.
  """

  def __init__(self, *, params: GenerationParams = CONTEXT_PARAMS) -> None:
    self._params = params

  async def build(self, request: LessonRequest, model: AIModel) -> SharedContext:
    source = request.source_text.strip()
    if word_count(source) < MIN_SOURCE_WORDS:
      logger.info("Source text has fewer than %d words; using minimal context.", MIN_SOURCE_WORDS)
      return self._naive_context(request, is_minimal=True)

    try:
      with llm_call_context(section="context", purpose="extract"):
        response = await model.generate(render_context_prompt(request), self._params)
    except GenerationCancelledError:
      raise
    except Exception as exc:
      error = to_provider_error(exc)
      if error.kind is ErrorKind.QUOTA_EXCEEDED:
        if error is exc:
          raise
        raise error from exc
      logger.warning("Context extraction failed (%s); falling back to keyword extraction: %s", error.kind.value, error)
      return self._naive_context(request)

    try:
      payload = parse_json_with_fallback(response.content)
    except json.JSONDecodeError as exc:
      logger.warning("Context extraction returned unparsable output; falling back to keyword extraction: %s", exc)
      return self._naive_context(request)
    if not isinstance(payload, dict):
      logger.warning("Context extraction returned %s instead of an object; falling back.", type(payload).__name__)
      return self._naive_context(request)
    return self._merge(request, payload)

  def _merge(self, request: LessonRequest, payload: dict[str, Any]) -> SharedContext:
    source = request.source_text.strip()
    vocabulary = _clean_vocabulary(payload.get("vocabulary"))
    if len(vocabulary) < MIN_CONTEXT_VOCABULARY:
      logger.info("Context vocabulary too thin (%d words); using keyword extraction.", len(vocabulary))
      vocabulary = naive_keywords(source)

    themes = _clean_themes(payload.get("themes"))
    if len(themes) < MIN_CONTEXT_THEMES:
      themes = bucket_themes(source)

    summary = payload.get("summary")
    summary = truncate(" ".join(summary.split()), MAX_SUMMARY_CHARS) if isinstance(summary, str) and summary.strip() else fallback_summary(source)

    title = payload.get("title")
    title = truncate(title.strip().strip('"'), MAX_TITLE_CHARS) if isinstance(title, str) and title.strip() else fallback_title(request)

    return self._context(request, vocabulary=vocabulary, themes=themes, summary=summary, title=title)

  def _naive_context(self, request: LessonRequest, *, is_minimal: bool = False) -> SharedContext:
    source = request.source_text.strip()
    return self._context(
      request,
      vocabulary=naive_keywords(source),
      themes=bucket_themes(source),
      summary=fallback_summary(source),
      title=fallback_title(request),
      is_minimal=is_minimal,
    )

  def _context(self, request: LessonRequest, *, vocabulary: list[str], themes: list[str], summary: str, title: str, is_minimal: bool = False) -> SharedContext:
    return SharedContext(
      key_vocabulary=tuple(vocabulary),
      main_themes=tuple(themes[:MAX_CONTEXT_THEMES]),
      content_summary=truncate(summary, MAX_SUMMARY_CHARS),
      difficulty_level=request.proficiency_level,
      source_text=truncate(request.source_text.strip(), MAX_SOURCE_CHARS),
      lesson_kind=request.lesson_kind,
      target_language=request.target_language,
      lesson_title=title,
      is_minimal=is_minimal,
    )
