"""Reading passage and comprehension question generators."""

from __future__ import annotations

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.prompts import render_comprehension_prompt, render_reading_prompt
from linguaspark.ai.pipeline.content import QuestionSet, ReadingSection
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.providers.base import GenerationParams
from linguaspark.ai.utils.text import parse_questions

COMPREHENSION_QUESTION_COUNT = 5


def _clean_passage(text: str) -> str:
  # Drop markdown headings and "Title:" lines some models prepend.
  kept = [line.rstrip() for line in text.strip().splitlines() if not line.lstrip().startswith("#") and not line.lower().startswith("title:")]
  return "\n".join(kept).strip()


class ReadingGenerator(SectionGenerator):
  kind = SectionKind.READING
  instruction_text = "Read the text carefully. Underline the lesson vocabulary."
  default_params = GenerationParams(max_tokens=1500)

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    text, tokens = await self._complete(render_reading_prompt(context), purpose="passage", instruction=instruction)
    return self._section(ReadingSection(instruction=self.instruction_text, passage=_clean_passage(text)), tokens=tokens)


class ComprehensionGenerator(SectionGenerator):
  """Questions about the accepted reading passage."""

  kind = SectionKind.COMPREHENSION
  instruction_text = "Answer these questions about the reading text."

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    reading = prior.get(SectionKind.READING)
    passage = reading.content.passage if reading is not None and isinstance(reading.content, ReadingSection) else context.source_text
    text, tokens = await self._complete(render_comprehension_prompt(context, passage), purpose="questions", instruction=instruction)
    questions = parse_questions(text, limit=COMPREHENSION_QUESTION_COUNT)
    return self._section(QuestionSet(instruction=self.instruction_text, questions=questions), tokens=tokens)
