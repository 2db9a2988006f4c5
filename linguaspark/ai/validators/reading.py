"""Reading passage validator."""

from __future__ import annotations

from linguaspark.ai.pipeline.content import ReadingSection
from linguaspark.ai.pipeline.contracts import SharedContext, ValidationResult
from linguaspark.ai.utils.text import word_count
from linguaspark.ai.validators.base import IssueCollector

MIN_PASSAGE_WORDS = 120
MAX_PASSAGE_WORDS = 450


def validate_reading(content: ReadingSection, context: SharedContext) -> ValidationResult:
  collector = IssueCollector()
  passage = content.passage.strip()
  if not passage:
    collector.error("empty_passage", "Reading passage is empty", suggestion="Write a reading passage of 200-400 words.")
    return collector.result()

  words = word_count(passage)
  if not MIN_PASSAGE_WORDS <= words <= MAX_PASSAGE_WORDS:
    collector.warning("passage_length", f"Reading passage has {words} words", expected=f"{MIN_PASSAGE_WORDS}-{MAX_PASSAGE_WORDS}", actual=words)
  return collector.result()
