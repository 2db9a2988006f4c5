"""Pronunciation section validator."""

from __future__ import annotations

from linguaspark.ai.pipeline.content import PronunciationSection
from linguaspark.ai.pipeline.contracts import SharedContext, ValidationResult
from linguaspark.ai.validators.base import IssueCollector

MIN_WORDS = 5
MIN_TONGUE_TWISTERS = 2
MIN_TWISTER_CHARS = 15
MIN_PRACTICE_CHARS = 10
MIN_THEME_WORD_CHARS = 4


def _theme_words(context: SharedContext) -> set[str]:
  return {word for theme in context.main_themes for word in theme.lower().split() if len(word) >= MIN_THEME_WORD_CHARS}


def validate_pronunciation(content: PronunciationSection, context: SharedContext) -> ValidationResult:
  collector = IssueCollector(error_weight=15)
  theme_words = _theme_words(context)

  if len(content.words) < MIN_WORDS:
    collector.error("word_count", f"Pronunciation needs at least {MIN_WORDS} words", expected=f">= {MIN_WORDS}", actual=len(content.words), suggestion=f"Provide at least {MIN_WORDS} WORD blocks, not {len(content.words)}.")
  else:
    collector.bonus(5)
  if len(content.tongue_twisters) < MIN_TONGUE_TWISTERS:
    collector.error(
      "twister_count",
      f"Pronunciation needs at least {MIN_TONGUE_TWISTERS} tongue twisters",
      expected=f">= {MIN_TONGUE_TWISTERS}",
      actual=len(content.tongue_twisters),
      suggestion=f"Provide at least {MIN_TONGUE_TWISTERS} tongue twisters, not {len(content.tongue_twisters)}.",
    )
  else:
    collector.bonus(5)

  for index, word in enumerate(content.words):
    if len(word.word.strip()) < 2:
      collector.error("missing_word", f"Word {index + 1} is empty", index=index, suggestion="Give every WORD block a word.")
    if len(word.ipa.strip()) < 2:
      collector.error("missing_ipa", f"Word {index + 1} has no IPA transcription", index=index, suggestion=f"Add an IPA line for '{word.word}'.")
    if not word.tips:
      collector.error("missing_tips", f"Word {index + 1} has no pronunciation tip", index=index, suggestion=f"Add at least one TIP line for '{word.word}'.")
    if len(word.practice_sentence.strip()) < MIN_PRACTICE_CHARS:
      collector.warning("practice_sentence", f"Word {index + 1} has no useful practice sentence", index=index)

  for index, twister in enumerate(content.tongue_twisters):
    if len(twister.text.strip()) < MIN_TWISTER_CHARS:
      collector.error("twister_too_short", f"Tongue twister {index + 1} is too short", expected=f">= {MIN_TWISTER_CHARS} characters", actual=len(twister.text.strip()), index=index, suggestion="Write full-sentence tongue twisters.")
    if not twister.target_sounds:
      collector.warning("missing_target_sounds", f"Tongue twister {index + 1} names no target sounds", index=index)
    if theme_words and not any(word in twister.text.lower() for word in theme_words):
      collector.warning("topic_relevance", f"Tongue twister {index + 1} is not related to the lesson themes", index=index, suggestion="Build each tongue twister around words from the lesson topic.")
  return collector.result()
