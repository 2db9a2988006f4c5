"""Dialogue validator for both the practice and fill-gap variants."""

from __future__ import annotations

import re

from linguaspark.ai.levels import DIALOGUE_WORD_RANGES
from linguaspark.ai.pipeline.content import DialogueSection
from linguaspark.ai.pipeline.contracts import SharedContext, ValidationResult
from linguaspark.ai.utils.text import contains_word
from linguaspark.ai.validators.base import IssueCollector

MIN_DIALOGUE_LINES = 12
MIN_GAPS = 3
GAP_RE = re.compile(r"_{3,}")

# "would have gone", "should've seen", "might not have been": too advanced for beginners.
MODAL_PERFECT_RE = re.compile(r"\b(?:would|could|should|might|must|may)(?:n't|\s+not)?\s*(?:have|'ve)\s+\w+", re.IGNORECASE)
_PRESENT_PERFECT_RE = re.compile(r"\b(?:have|has)\s+(?:\w+ed|been|gone|done|seen|made)\b", re.IGNORECASE)
_PASSIVE_RE = re.compile(r"\b(?:is|are|was|were|been)\s+\w+ed\b", re.IGNORECASE)
_RELATIVE_RE = re.compile(r"\b(?:which|that|who|whom|whose)\b", re.IGNORECASE)
_CONDITIONAL_RE = re.compile(r"\b(?:if|unless|provided|assuming)\b.*\b(?:would|could|might)\b", re.IGNORECASE)
_PERFECT_RE = re.compile(r"\b(?:have|has|had)\s+(?:been|gone|done|seen|made|\w+ed)\b", re.IGNORECASE)


def _check_structure(collector: IssueCollector, content: DialogueSection) -> None:
  lines = content.lines
  if len(lines) < MIN_DIALOGUE_LINES:
    collector.error(
      "line_count",
      f"Dialogue needs at least {MIN_DIALOGUE_LINES} lines",
      expected=f">= {MIN_DIALOGUE_LINES}",
      actual=len(lines),
      suggestion=f"Write at least {MIN_DIALOGUE_LINES} lines alternating Student and Tutor, not {len(lines)}.",
    )
  else:
    collector.bonus(10)

  for index, line in enumerate(lines):
    if not line.speaker.strip():
      collector.error("missing_speaker", f"Line {index + 1} has no speaker", index=index, suggestion="Start every line with 'Student:' or 'Tutor:'.")
    if not line.text.strip():
      collector.error("missing_text", f"Line {index + 1} has no text", index=index, suggestion="Do not leave dialogue lines empty.")

  if lines and lines[0].speaker.lower() != "student":
    collector.warning("flow_issue", "Dialogue should open with the Student")
  for index in range(1, len(lines)):
    if lines[index].speaker == lines[index - 1].speaker:
      collector.warning("flow_issue", f"Same speaker has consecutive lines at position {index + 1}", index=index)
      break


def _check_level(collector: IssueCollector, content: DialogueSection, context: SharedContext) -> None:
  level = context.difficulty_level
  low, high = DIALOGUE_WORD_RANGES[level]
  for index, line in enumerate(content.lines):
    words = len(line.text.split())
    if words and not low <= words <= high:
      collector.warning("line_length", f"Line {index + 1} has {words} words for {level.value}", expected=f"{low}-{high}", actual=words, index=index)

  text = " ".join(line.text for line in content.lines)
  if level.is_beginner:
    match = MODAL_PERFECT_RE.search(text)
    if match:
      collector.error(
        "grammar_level",
        f"Modal perfect '{match.group(0)}' is too advanced for {level.value}",
        actual=match.group(0),
        suggestion=f"Use only simple present and simple past for {level.value}; remove constructions like '{match.group(0)}'.",
      )
    if _PRESENT_PERFECT_RE.search(text):
      collector.warning("grammar_level", f"Present perfect may be too complex for {level.value}")
    if _PASSIVE_RE.search(text):
      collector.warning("grammar_level", f"Passive voice may be too complex for {level.value}")
  elif level.is_advanced and len(content.lines) >= MIN_DIALOGUE_LINES:
    if not (_RELATIVE_RE.search(text) or _CONDITIONAL_RE.search(text) or _PERFECT_RE.search(text)):
      collector.warning("grammar_level", f"Dialogue lacks the complex structures expected for {level.value}")


def _check_vocabulary(collector: IssueCollector, content: DialogueSection, vocabulary: list[str]) -> None:
  if not vocabulary:
    return
  text = " ".join(line.text for line in content.lines)
  used = [word for word in vocabulary if contains_word(text, word)]
  if len(used) < min(3, len(vocabulary)):
    collector.warning("vocabulary_integration", f"Only {len(used)} lesson vocabulary words are used in the dialogue", expected=f">= {min(3, len(vocabulary))}", actual=len(used))


def _check_gaps(collector: IssueCollector, content: DialogueSection) -> None:
  gaps = sum(len(GAP_RE.findall(line.text)) for line in content.lines)
  if gaps < MIN_GAPS:
    collector.warning("gap_count", f"Fill-gap dialogue has {gaps} gaps", expected=f">= {MIN_GAPS}", actual=gaps)
  if gaps and len(content.answers) != gaps:
    collector.warning("gap_answers", "Number of answers does not match the number of gaps", expected=gaps, actual=len(content.answers))


def _validate(content: DialogueSection, context: SharedContext, *, fill_gap: bool) -> ValidationResult:
  collector = IssueCollector(error_weight=20)
  _check_structure(collector, content)
  _check_level(collector, content, context)
  _check_vocabulary(collector, content, list(context.key_vocabulary))
  if fill_gap:
    _check_gaps(collector, content)
  return collector.result()


def validate_dialogue(content: DialogueSection, context: SharedContext) -> ValidationResult:
  return _validate(content, context, fill_gap=False)


def validate_fill_gap_dialogue(content: DialogueSection, context: SharedContext) -> ValidationResult:
  return _validate(content, context, fill_gap=True)
