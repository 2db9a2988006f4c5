"""Vocabulary generator: definitions plus level-sized example sets for the key words."""

from __future__ import annotations

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.prompts import render_vocabulary_prompt
from linguaspark.ai.levels import VOCABULARY_EXAMPLE_COUNTS
from linguaspark.ai.pipeline.content import VocabularyEntry, VocabularySection, json_schema
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.providers.base import GenerationParams

VOCABULARY_WORD_LIMIT = 8


def _normalize_entry(entry: VocabularyEntry, example_count: int) -> VocabularyEntry:
  examples = [example.strip() for example in entry.examples if example and example.strip()]
  return VocabularyEntry(word=entry.word.strip().lower(), definition=entry.definition.strip(), examples=examples[:example_count])


class VocabularyGenerator(SectionGenerator):
  """One provider call per attempt returning every word's definition and examples as a JSON array."""

  kind = SectionKind.VOCABULARY
  instruction_text = "Study these words and their meanings. Read the example sentences aloud."
  default_params = GenerationParams(max_tokens=2000)

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    words = list(context.key_vocabulary[:VOCABULARY_WORD_LIMIT])
    example_count = VOCABULARY_EXAMPLE_COUNTS[context.difficulty_level]
    prompt = render_vocabulary_prompt(context, words, json_schema(list[VocabularyEntry]))
    text, tokens = await self._complete(prompt, purpose="entries", instruction=instruction)

    payload = self._parse_json(text)
    # Some models wrap the array in an object.
    if isinstance(payload, dict):
      payload = payload.get("words") or payload.get("vocabulary") or payload.get("entries")
    entries = self._convert(payload, list[VocabularyEntry]) if isinstance(payload, list) else None
    if entries is None:
      return self._section(VocabularySection(instruction=self.instruction_text), tokens=tokens, strategy="unparsed")

    normalized = [_normalize_entry(entry, example_count) for entry in entries if entry.word.strip()]
    return self._section(VocabularySection(instruction=self.instruction_text, words=normalized[:VOCABULARY_WORD_LIMIT]), tokens=tokens)
