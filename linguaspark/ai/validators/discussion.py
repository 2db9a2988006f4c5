"""Discussion question validator."""

from __future__ import annotations

import re

from linguaspark.ai.pipeline.content import QuestionSet
from linguaspark.ai.pipeline.contracts import SharedContext, ValidationResult
from linguaspark.ai.validators.base import IssueCollector, check_question_list

DISCUSSION_QUESTION_COUNT = 5

_ANALYTICAL_RE = re.compile(r"why do you think|what factors|how might|to what extent|in what ways", re.IGNORECASE)
_TOO_COMPLEX_RE = re.compile(r"hypothetically|analy[sz]e|evaluate|implications", re.IGNORECASE)
# Opinion or comparison phrasing expected from B1 upward.
OPINION_COMPARISON_RE = re.compile(
  r"what do you think|do you think|in your opinion|do you (agree|believe|prefer)|would you rather|"
  r"compare|compared (to|with)|better|worse|more .+ than|less .+ than|pros and cons|advantages|disadvantages|which .+ prefer",
  re.IGNORECASE,
)


def validate_discussion(content: QuestionSet, context: SharedContext) -> ValidationResult:
  """Exact count and format are errors; variety and level fit are warnings."""
  collector = IssueCollector(error_weight=20)
  questions = [question.strip() for question in content.questions]
  check_question_list(collector, questions, expected=DISCUSSION_QUESTION_COUNT, label="Discussion")
  if len(questions) == DISCUSSION_QUESTION_COUNT:
    collector.bonus(10)

  level = context.difficulty_level
  text = " ".join(questions)
  if level.is_advanced and not _ANALYTICAL_RE.search(text):
    collector.warning("complexity_mismatch", f"Questions lack analytical depth for {level.value}")
  if level.is_beginner and _TOO_COMPLEX_RE.search(text):
    collector.warning("complexity_mismatch", f"Questions may be too complex for {level.value}")
  if not level.is_beginner and questions and not OPINION_COMPARISON_RE.search(text):
    collector.warning("question_type", f"No opinion or comparison question for {level.value}")

  openers = {question.split()[0].lower() for question in questions if question}
  if questions and len(openers) < 3:
    collector.warning("variety_issue", "Limited question variety: fewer than 3 different opening words")

  return collector.result()
