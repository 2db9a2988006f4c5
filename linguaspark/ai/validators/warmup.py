"""Warm-up validator.

Warm-up questions are asked before the learner has read anything, so on top
of count and format checks this validator rejects questions that assume
knowledge of the source text: references to "the article", to events, or to
people named in it. Level fit is judged with lightweight heuristics and only
ever produces warnings.
"""

from __future__ import annotations

import re
from typing import Literal

from linguaspark.ai.pipeline.content import QuestionSet
from linguaspark.ai.pipeline.contracts import CEFRLevel, SharedContext, ValidationResult
from linguaspark.ai.validators.base import IssueCollector

WARMUP_QUESTION_COUNT = 3
MIN_QUESTION_CHARS = 10
MAX_QUESTION_CHARS = 200

Complexity = Literal["simple", "intermediate", "advanced"]

_ASSUMPTION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
  (re.compile(pattern, re.IGNORECASE), reason)
  for pattern, reason in (
    (r"what happened", "references specific events"),
    (r"in the (text|story|article|passage|reading)", "references the text directly"),
    (r"according to (the )?(text|story|article|author)", "references the text or its author"),
    (r"the author (said|wrote|mentioned|stated|explained)", "references author statements"),
    (r"do you remember", "assumes prior knowledge of the content"),
    (r"what did .+ do", "references specific actions"),
    (r"why did .+ happen", "references specific events"),
    (r"when did", "references specific timing"),
    (r"who (was|were|did)", "references specific people"),
    (r"which (person|character|event)", "references specific content elements"),
    (r"the (story|text|article|passage) (says|mentions|describes|tells)", "references text content"),
    (r"in this (story|text|article)", "references the text"),
    (r"from the (story|text|article)", "references the text"),
  )
)

_QUESTION_WORDS = frozenset(
  {"What", "When", "Where", "Who", "Why", "How", "Do", "Does", "Did", "Have", "Has", "Is", "Are", "Can", "Could", "Would", "Should", "Will", "Which", "I"}
)
_COMMON_NOUNS = frozenset(
  {
    "English", "Spanish", "French", "German", "Chinese", "Japanese",
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
    "January", "February", "March", "April", "May", "June", "July", "August", "September", "October", "November", "December",
  }
)
_CAPITALIZED_RE = re.compile(r"^[A-Z][a-z]+$")
_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")

_PERSONAL_PATTERNS = tuple(
  re.compile(pattern, re.IGNORECASE)
  for pattern in (r"have you (ever)?", r"do you (think|believe|feel)", r"what (is|are) your", r"in your (opinion|experience)", r"how do you")
)
_YES_NO_PATTERNS = tuple(re.compile(pattern, re.IGNORECASE) for pattern in (r"^do you", r"^have you", r"^is (it|there)", r"^are (you|there)", r"^can you", r"^would you"))

_ADVANCED_PATTERNS = tuple(
  re.compile(pattern, re.IGNORECASE)
  for pattern in (
    r"hypothetically", r"in what ways", r"to what extent", r"how might", r"what factors",
    r"analy[sz]e", r"evaluate", r"compare and contrast", r"what implications", r"how would you assess",
  )
)
_INTERMEDIATE_PATTERNS = tuple(
  re.compile(pattern, re.IGNORECASE)
  for pattern in (
    r"why do you think", r"what would", r"how could", r"in your opinion", r"do you believe",
    r"what are the (advantages|disadvantages)", r"how does .+ affect",
  )
)

EXPECTED_COMPLEXITY: dict[CEFRLevel, tuple[Complexity, ...]] = {
  CEFRLevel.A1: ("simple",),
  CEFRLevel.A2: ("simple",),
  CEFRLevel.B1: ("simple", "intermediate"),
  CEFRLevel.B2: ("intermediate", "advanced"),
  CEFRLevel.C1: ("advanced", "intermediate"),
}

_VERY_SIMPLE_WORDS = frozenset({"you", "your", "have", "do", "what", "how", "is", "are", "the", "a", "an", "like", "want", "go", "see", "get"})
_COMPLEX_SUFFIX_RE = re.compile(r"tion|sion|ment|ness|ity")
_CLAUSE_RE = re.compile(r",|\b(?:and|but|or|because|although|if|when|while|which|that)\b", re.IGNORECASE)


def assess_complexity(questions: list[str]) -> Complexity:
  """Rate the question set as a whole from advanced and intermediate phrasing."""
  text = " ".join(questions)
  advanced = sum(1 for pattern in _ADVANCED_PATTERNS if pattern.search(text))
  intermediate = sum(1 for pattern in _INTERMEDIATE_PATTERNS if pattern.search(text))
  if advanced >= 2:
    return "advanced"
  if advanced >= 1 or intermediate >= 2:
    return "intermediate"
  return "simple"


def assess_vocabulary(question: str) -> Literal["too_simple", "appropriate", "too_complex"]:
  tokens = [token.strip("?,.!").lower() for token in question.split()]
  if not tokens:
    return "appropriate"
  simple_ratio = sum(1 for token in tokens if token in _VERY_SIMPLE_WORDS) / len(tokens)
  complex_ratio = sum(1 for token in tokens if len(token) > 10 or _COMPLEX_SUFFIX_RE.search(token)) / len(tokens)
  if simple_ratio > 0.8:
    return "too_simple"
  if complex_ratio > 0.3:
    return "too_complex"
  return "appropriate"


def assess_structure(question: str) -> Literal["simple", "moderate", "complex"]:
  clauses = len(_CLAUSE_RE.findall(question)) + 1
  words = len(question.split())
  if clauses >= 3 or words > 20:
    return "complex"
  if clauses == 2 or words > 12:
    return "moderate"
  return "simple"


def _source_names(source_text: str) -> set[str]:
  """Capitalized tokens of the source text; question words and calendar words are ignored later."""
  tokens = (token.strip(".,;:!?\"'()") for token in source_text.split())
  return {token for token in tokens if _CAPITALIZED_RE.match(token)}


def _check_assumptions(collector: IssueCollector, questions: list[str], source_text: str) -> None:
  names_in_source = _source_names(source_text)
  for index, question in enumerate(questions):
    for pattern, reason in _ASSUMPTION_PATTERNS:
      if pattern.search(question):
        collector.error(
          "content_assumption",
          f"Question {index + 1} assumes knowledge of the source text: {reason}",
          actual=question,
          index=index,
          suggestion=f"Rewrite question {index + 1} about the learner's own experience instead of the text.",
        )
        break

    tokens = [token.strip(".,;:!?\"'()") for token in question.split()]
    capitalized = [token for token in tokens[1:] if _CAPITALIZED_RE.match(token) and token not in _QUESTION_WORDS and token not in _COMMON_NOUNS]
    from_source = [token for token in capitalized if token in names_in_source]
    if from_source:
      collector.error(
        "content_assumption",
        f"Question {index + 1} names people or places from the source text: {', '.join(from_source)}",
        actual=question,
        index=index,
        suggestion=f"Remove the names {', '.join(from_source)} from question {index + 1}.",
      )
    elif capitalized:
      collector.warning("content_assumption", f"Question {index + 1} may contain proper names: {', '.join(capitalized)}", index=index)

    if _YEAR_RE.search(question):
      collector.warning("content_assumption", f"Question {index + 1} contains a specific year", index=index)


def _check_level(collector: IssueCollector, questions: list[str], level: CEFRLevel) -> None:
  complexity = assess_complexity(questions)
  expected = EXPECTED_COMPLEXITY[level]
  if complexity not in expected:
    collector.warning("complexity_mismatch", f"Questions are {complexity} but {level.value} expects {' or '.join(expected)}", expected=" or ".join(expected), actual=complexity)

  for index, question in enumerate(questions):
    vocabulary = assess_vocabulary(question)
    if vocabulary == "too_simple" and level.is_advanced:
      collector.warning("complexity_mismatch", f"Question {index + 1} uses very simple vocabulary for {level.value}", index=index)
    elif vocabulary == "too_complex" and level.is_beginner:
      collector.warning("complexity_mismatch", f"Question {index + 1} uses complex vocabulary for {level.value}", index=index)

    structure = assess_structure(question)
    if structure == "complex" and level.is_beginner:
      collector.warning("complexity_mismatch", f"Question {index + 1} has a complex sentence structure for {level.value}", index=index)
    elif structure == "simple" and level is CEFRLevel.C1:
      collector.warning("complexity_mismatch", f"Question {index + 1} has a simple structure for {level.value}", index=index)


def _check_quality(collector: IssueCollector, questions: list[str]) -> None:
  if not any(pattern.search(question) for question in questions for pattern in _PERSONAL_PATTERNS):
    collector.warning("quality_issue", "No question asks about the learner's own experience or opinion")

  openers = {question.split()[0].lower() for question in questions if question.split()}
  if len(questions) > 1 and len(openers) == 1:
    collector.warning("quality_issue", "All questions start with the same word")

  if questions and all(any(pattern.search(question) for pattern in _YES_NO_PATTERNS) for question in questions):
    collector.warning("quality_issue", "All questions can be answered with yes or no")


def validate_warmup(content: QuestionSet, context: SharedContext) -> ValidationResult:
  """Validate warm-up questions against count, format, content-independence and level rules."""
  collector = IssueCollector(error_weight=20)
  questions = [question.strip() for question in content.questions]

  if len(questions) != WARMUP_QUESTION_COUNT:
    collector.error(
      "question_count",
      f"Warm-up must have exactly {WARMUP_QUESTION_COUNT} questions",
      expected=WARMUP_QUESTION_COUNT,
      actual=len(questions),
      suggestion=f"Generate exactly {WARMUP_QUESTION_COUNT} questions, not {len(questions)}.",
    )
  else:
    collector.bonus(10)

  for index, question in enumerate(questions):
    if not question:
      collector.error("empty_question", f"Question {index + 1} is empty", index=index, suggestion="Do not return empty questions.")
      continue
    if len(question) < MIN_QUESTION_CHARS:
      collector.error("question_too_short", f"Question {index + 1} is too short", expected=f">= {MIN_QUESTION_CHARS} characters", actual=len(question), index=index, suggestion="Write complete questions.")
    if len(question) > MAX_QUESTION_CHARS:
      collector.warning("question_too_long", f"Question {index + 1} is very long ({len(question)} characters)", index=index)
    if not question.endswith("?"):
      collector.error("missing_question_mark", f"Question {index + 1} does not end with a question mark", index=index, suggestion="End every question with '?'.")

  _check_assumptions(collector, questions, context.source_text)
  _check_level(collector, questions, context.difficulty_level)
  _check_quality(collector, questions)
  return collector.result()
