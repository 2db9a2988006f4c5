"""Pure section validators.

Each validator takes a section's structured content plus the shared context
and returns a ValidationResult. Validators never call a provider and never
mutate their inputs.
"""

from linguaspark.ai.validators.dialogue import validate_dialogue, validate_fill_gap_dialogue
from linguaspark.ai.validators.discussion import validate_discussion
from linguaspark.ai.validators.grammar import validate_grammar
from linguaspark.ai.validators.pronunciation import validate_pronunciation
from linguaspark.ai.validators.questions import validate_comprehension, validate_wrapup
from linguaspark.ai.validators.reading import validate_reading
from linguaspark.ai.validators.vocabulary import validate_vocabulary
from linguaspark.ai.validators.warmup import validate_warmup

__all__ = [
  "validate_comprehension",
  "validate_dialogue",
  "validate_discussion",
  "validate_fill_gap_dialogue",
  "validate_grammar",
  "validate_pronunciation",
  "validate_reading",
  "validate_vocabulary",
  "validate_warmup",
  "validate_wrapup",
]
