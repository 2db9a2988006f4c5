"""Vocabulary validator."""

from __future__ import annotations

from linguaspark.ai.levels import EXAMPLE_WORD_RANGES, VOCABULARY_EXAMPLE_COUNTS
from linguaspark.ai.pipeline.content import VocabularySection
from linguaspark.ai.pipeline.contracts import SharedContext, ValidationResult
from linguaspark.ai.utils.text import STOP_WORDS, contains_word, words
from linguaspark.ai.validators.base import IssueCollector

MIN_CONTEXTUAL_RATIO = 0.6


def _context_terms(context: SharedContext) -> set[str]:
  """Lowercase theme and key-vocabulary words an on-topic example is expected to touch."""
  terms = {token.lower() for theme in context.main_themes for token in words(theme)}
  terms.update(word.lower() for word in context.key_vocabulary)
  return {term for term in terms if len(term) > 3 and term not in STOP_WORDS}


def validate_vocabulary(content: VocabularySection, context: SharedContext) -> ValidationResult:
  """Exact example counts and word presence are errors; sentence shape and topicality are warnings."""
  collector = IssueCollector(error_weight=20)
  level = context.difficulty_level
  expected_examples = VOCABULARY_EXAMPLE_COUNTS[level]
  low, high = EXAMPLE_WORD_RANGES[level]

  if not content.words:
    collector.error("word_count", "Vocabulary section has no words", expected=">= 1", actual=0, suggestion="Return one entry for each of the listed words.")
    return collector.result()

  terms = _context_terms(context)
  contextual = 0
  total_examples = 0
  for index, entry in enumerate(content.words):
    word = entry.word.strip()
    if not entry.definition.strip():
      collector.error("missing_definition", f"'{word}' has no definition", index=index, suggestion=f"Give a short definition for '{word}'.")
    if len(entry.examples) != expected_examples:
      collector.error(
        "example_count",
        f"'{word}' has {len(entry.examples)} examples",
        expected=expected_examples,
        actual=len(entry.examples),
        index=index,
        suggestion=f"Give exactly {expected_examples} example sentences for '{word}', not {len(entry.examples)}.",
      )

    for example in entry.examples:
      total_examples += 1
      if not contains_word(example, word):
        collector.error("word_missing_in_example", f"An example for '{word}' does not use the word", actual=example, index=index, suggestion=f"Every example for '{word}' must contain the word itself.")
      length = len(example.split())
      if not low <= length <= high:
        collector.warning("example_length", f"Example for '{word}' has {length} words", expected=f"{low}-{high}", actual=length, index=index)
      if example[:1].islower() or example.rstrip()[-1:] not in {".", "!", "?"}:
        collector.warning("example_format", f"Example for '{word}' should start with a capital and end with punctuation", actual=example, index=index)
      others = terms - {word.lower()}
      if any(contains_word(example, term) for term in others):
        contextual += 1

  if total_examples and terms and contextual / total_examples < MIN_CONTEXTUAL_RATIO:
    collector.warning("contextual_relevance", "Fewer than 60% of examples relate to the lesson themes", expected=f">= {MIN_CONTEXTUAL_RATIO:.0%}", actual=f"{contextual / total_examples:.0%}")
  return collector.result()
