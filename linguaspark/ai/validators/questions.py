"""Validators for the plain question-list sections read after the text."""

from __future__ import annotations

from linguaspark.ai.pipeline.content import QuestionSet
from linguaspark.ai.pipeline.contracts import SharedContext, ValidationResult
from linguaspark.ai.validators.base import IssueCollector, check_question_list

COMPREHENSION_QUESTION_COUNT = 5
WRAPUP_QUESTION_COUNT = 3


def validate_comprehension(content: QuestionSet, context: SharedContext) -> ValidationResult:
  collector = IssueCollector()
  check_question_list(collector, content.questions, expected=COMPREHENSION_QUESTION_COUNT, label="Comprehension")
  return collector.result()


def validate_wrapup(content: QuestionSet, context: SharedContext) -> ValidationResult:
  collector = IssueCollector()
  check_question_list(collector, content.questions, expected=WRAPUP_QUESTION_COUNT, label="Wrap-up")
  return collector.result()
