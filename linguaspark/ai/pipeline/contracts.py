"""Shared data contracts for the lesson pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from linguaspark.ai.pipeline.content import SectionContent, to_payload

MAX_KEY_VOCABULARY = 15
MAX_THEMES = 5
MAX_SUMMARY_CHARS = 300
MAX_SOURCE_CHARS = 1000


class CEFRLevel(str, Enum):
  """Closed five-step proficiency scale."""

  A1 = "A1"
  A2 = "A2"
  B1 = "B1"
  B2 = "B2"
  C1 = "C1"

  @property
  def is_beginner(self) -> bool:
    return self in (CEFRLevel.A1, CEFRLevel.A2)

  @property
  def is_advanced(self) -> bool:
    return self in (CEFRLevel.B2, CEFRLevel.C1)


class LessonKind(str, Enum):
  DISCUSSION = "discussion"
  GRAMMAR = "grammar"
  TRAVEL = "travel"
  BUSINESS = "business"
  PRONUNCIATION = "pronunciation"


class SectionKind(str, Enum):
  """Closed set of lesson sections; values are the response-schema keys."""

  WARMUP = "warmup"
  VOCABULARY = "vocabulary"
  READING = "reading"
  COMPREHENSION = "comprehension"
  DIALOGUE_PRACTICE = "dialoguePractice"
  DIALOGUE_FILL_GAP = "dialogueFillGap"
  DISCUSSION = "discussion"
  GRAMMAR = "grammar"
  PRONUNCIATION = "pronunciation"
  WRAPUP = "wrapup"


class LessonRequest(BaseModel):
  """Inputs for a lesson generation request."""

  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

  source_text: str = Field(min_length=1)
  lesson_kind: LessonKind
  proficiency_level: CEFRLevel
  target_language: str = Field(default="English", min_length=1)


class SharedContext(BaseModel):
  """Request-scoped derived context read by every section generator.

  Frozen: the orchestrator produces updated copies between sections with
  ``model_copy(update=...)``; generators never see a value change mid-call.
  """

  model_config = ConfigDict(frozen=True)

  key_vocabulary: tuple[str, ...] = Field(max_length=MAX_KEY_VOCABULARY)
  main_themes: tuple[str, ...] = Field(max_length=MAX_THEMES)
  content_summary: str = Field(max_length=MAX_SUMMARY_CHARS)
  difficulty_level: CEFRLevel
  source_text: str = Field(max_length=MAX_SOURCE_CHARS)
  lesson_kind: LessonKind
  target_language: str
  lesson_title: str = ""
  is_minimal: bool = False


class GenerationInstruction(BaseModel):
  """Instruction variant handed to a generator for one attempt."""

  model_config = ConfigDict(frozen=True)

  attempt: int = Field(default=1, ge=1, le=3)
  variant: Literal["initial", "regeneration"] = "initial"
  adjustments: tuple[str, ...] = ()

  @property
  def is_regeneration(self) -> bool:
    return self.variant == "regeneration"


class GeneratedSection(BaseModel):
  """Output of a single generator invocation."""

  model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

  section_name: str
  content: SectionContent
  tokens_used: int = Field(default=0, ge=0)
  generation_strategy: str = "progressive"


class ValidationIssue(BaseModel):
  """Single finding produced by a section validator."""

  model_config = ConfigDict(frozen=True)

  kind: str
  severity: Literal["error", "warning"]
  description: str
  expected: str | None = None
  actual: str | None = None
  item_index: int | None = None
  suggestion: str | None = None


class ValidationResult(BaseModel):
  """Verdict of a section validator."""

  model_config = ConfigDict(frozen=True)

  is_valid: bool
  issues: tuple[ValidationIssue, ...] = ()
  score: int = Field(ge=0, le=100)

  @property
  def errors(self) -> list[ValidationIssue]:
    return [issue for issue in self.issues if issue.severity == "error"]

  @property
  def warnings(self) -> list[ValidationIssue]:
    return [issue for issue in self.issues if issue.severity == "warning"]


class QualitySectionReport(BaseModel):
  """Finalized per-section quality record."""

  model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

  section_name: str
  attempt_count: int = Field(ge=1, le=3)
  validation_score: int = Field(ge=0, le=100)
  generation_time_ms: int = Field(ge=0)
  issue_count: int = Field(ge=0)
  warning_count: int = Field(ge=0)
  regenerated: bool
  accepted_attempt: int = Field(ge=1, le=3)
  placeholder: bool = False
  tokens_used: int = Field(default=0, ge=0)
  error_kinds: tuple[str, ...] = ()


class LessonQualityReport(BaseModel):
  """Aggregate quality report handed to the metrics sink."""

  model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

  request_id: str
  sections: tuple[QualitySectionReport, ...]
  total_tokens: int = Field(default=0, ge=0)

  @computed_field
  @property
  def overall_score(self) -> int:
    if not self.sections:
      return 0
    return round(sum(section.validation_score for section in self.sections) / len(self.sections))

  @computed_field
  @property
  def total_attempts(self) -> int:
    return sum(section.attempt_count for section in self.sections)

  @computed_field
  @property
  def total_regenerations(self) -> int:
    return sum(1 for section in self.sections if section.regenerated)

  @computed_field
  @property
  def total_generation_time_ms(self) -> int:
    return sum(section.generation_time_ms for section in self.sections)


class LessonResult(BaseModel):
  """Assembled lesson returned to the caller."""

  model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

  request_id: str
  lesson_title: str
  context: SharedContext
  sections: dict[str, GeneratedSection]
  quality_report: LessonQualityReport

  @field_validator("sections")
  @classmethod
  def _sections_not_empty(cls, value: dict[str, GeneratedSection]) -> dict[str, GeneratedSection]:
    if not value:
      raise ValueError("A lesson must contain at least one section.")
    return value

  def to_payload(self) -> dict[str, Any]:
    """Render the response schema: camelCase section keys plus the quality report list."""
    return {
      "lessonTitle": self.lesson_title,
      "sections": {name: to_payload(section.content) for name, section in self.sections.items()},
      "qualityReport": [report.model_dump(by_alias=True) for report in self.quality_report.sections],
    }
