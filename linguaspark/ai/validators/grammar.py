"""Grammar focus validator."""

from __future__ import annotations

from linguaspark.ai.pipeline.content import GrammarSection
from linguaspark.ai.pipeline.contracts import SharedContext, ValidationResult
from linguaspark.ai.utils.text import words
from linguaspark.ai.validators.base import IssueCollector

MIN_EXAMPLES = 3
MIN_EXERCISES = 5
MIN_FIELD_CHARS = 10
MIN_PROMPT_CHARS = 5


def validate_grammar(content: GrammarSection, context: SharedContext) -> ValidationResult:
  collector = IssueCollector(error_weight=15)

  if len(content.grammar_point.strip()) < MIN_FIELD_CHARS:
    collector.error("missing_grammar_point", "Grammar point is missing or too short", actual=content.grammar_point, suggestion="Name the grammar point clearly, e.g. 'Present perfect for experiences'.")
  if len(content.explanation.form.strip()) < MIN_FIELD_CHARS:
    collector.error("missing_form", "Explanation of the form is missing", suggestion="Explain how the structure is formed in explanation.form.")
  if len(content.explanation.usage.strip()) < MIN_FIELD_CHARS:
    collector.error("missing_usage", "Explanation of usage is missing", suggestion="Explain when the structure is used in explanation.usage.")

  if len(content.examples) < MIN_EXAMPLES:
    collector.error(
      "example_count",
      f"Grammar section needs at least {MIN_EXAMPLES} examples",
      expected=f">= {MIN_EXAMPLES}",
      actual=len(content.examples),
      suggestion=f"Provide at least {MIN_EXAMPLES} example sentences, not {len(content.examples)}.",
    )

  exercises = content.exercises
  if len(exercises) < MIN_EXERCISES:
    collector.error(
      "exercise_count",
      f"Grammar section needs at least {MIN_EXERCISES} exercises",
      expected=f">= {MIN_EXERCISES}",
      actual=len(exercises),
      suggestion=f"Generate at least {MIN_EXERCISES} exercises, not {len(exercises)}.",
    )
  else:
    collector.bonus(10)

  for index, exercise in enumerate(exercises):
    if len(exercise.prompt.strip()) < MIN_PROMPT_CHARS:
      collector.error("exercise_prompt", f"Exercise {index + 1} has no usable prompt", index=index, suggestion=f"Write a full prompt for exercise {index + 1}.")
    if not exercise.answer.strip():
      collector.error("exercise_answer", f"Exercise {index + 1} has no answer", index=index, suggestion=f"Give the correct answer for exercise {index + 1}.")

  # Examples should draw on the lesson's own words where possible.
  vocabulary = {word.lower() for word in context.key_vocabulary}
  example_words = {token.lower() for example in content.examples for token in words(example)}
  if content.examples and vocabulary and not vocabulary & example_words:
    collector.warning("relevance", "Grammar examples do not use any lesson vocabulary")
  return collector.result()
