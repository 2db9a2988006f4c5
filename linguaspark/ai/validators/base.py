"""Issue collection and scoring shared by the section validators."""

from __future__ import annotations

from typing import Any

from linguaspark.ai.pipeline.contracts import ValidationIssue, ValidationResult


def _text(value: Any) -> str | None:
  return None if value is None else str(value)


class IssueCollector:
  """Accumulate issues in check order and turn them into a scored ValidationResult.

  Score = 100 - error_weight * errors - warning_weight * warnings + bonus,
  clamped to 0..100.
  """

  def __init__(self, *, error_weight: int = 20, warning_weight: int = 5) -> None:
    self._issues: list[ValidationIssue] = []
    self._error_weight = error_weight
    self._warning_weight = warning_weight
    self._bonus = 0

  def error(self, kind: str, description: str, *, expected: Any = None, actual: Any = None, index: int | None = None, suggestion: str | None = None) -> None:
    self._add("error", kind, description, expected, actual, index, suggestion)

  def warning(self, kind: str, description: str, *, expected: Any = None, actual: Any = None, index: int | None = None, suggestion: str | None = None) -> None:
    self._add("warning", kind, description, expected, actual, index, suggestion)

  def bonus(self, points: int) -> None:
    self._bonus += points

  def _add(self, severity: str, kind: str, description: str, expected: Any, actual: Any, index: int | None, suggestion: str | None) -> None:
    self._issues.append(
      ValidationIssue(kind=kind, severity=severity, description=description, expected=_text(expected), actual=_text(actual), item_index=index, suggestion=suggestion)  # type: ignore[arg-type]
    )

  @property
  def error_count(self) -> int:
    return sum(1 for issue in self._issues if issue.severity == "error")

  def result(self) -> ValidationResult:
    errors = self.error_count
    warnings = len(self._issues) - errors
    score = 100 - self._error_weight * errors - self._warning_weight * warnings + self._bonus
    return ValidationResult(is_valid=errors == 0, issues=tuple(self._issues), score=max(0, min(100, score)))


def check_question_list(collector: IssueCollector, questions: list[str], *, expected: int, label: str, min_chars: int = 10) -> None:
  """Exact-count and per-question format checks used by every question-list section."""
  if len(questions) != expected:
    collector.error(
      "question_count",
      f"{label} must have exactly {expected} questions",
      expected=expected,
      actual=len(questions),
      suggestion=f"Generate exactly {expected} questions, not {len(questions)}.",
    )
  for index, question in enumerate(questions):
    stripped = question.strip()
    if not stripped:
      collector.error("empty_question", f"Question {index + 1} is empty", index=index, suggestion="Do not return empty lines between questions.")
      continue
    if len(stripped) < min_chars:
      collector.error("question_too_short", f"Question {index + 1} is too short", expected=f">= {min_chars} characters", actual=len(stripped), index=index, suggestion="Write complete questions.")
    if not stripped.endswith("?"):
      collector.error("missing_question_mark", f"Question {index + 1} does not end with a question mark", index=index, suggestion="End every question with '?'.")
