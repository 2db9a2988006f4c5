"""Grammar focus generator."""

from __future__ import annotations

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.prompts import render_grammar_prompt
from linguaspark.ai.pipeline.content import GrammarExercise, GrammarSection, json_schema
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.providers.base import GenerationParams


def _tidy(section: GrammarSection, instruction_text: str) -> GrammarSection:
  exercises = [GrammarExercise(prompt=item.prompt.strip(), answer=item.answer.strip(), explanation=item.explanation.strip()) for item in section.exercises]
  examples = [example.strip() for example in section.examples if example.strip()]
  return GrammarSection(
    instruction=section.instruction or instruction_text,
    grammar_point=section.grammar_point.strip(),
    explanation=section.explanation,
    examples=examples,
    exercises=exercises,
  )


class GrammarGenerator(SectionGenerator):
  """Pick one grammar point from the source and build explanation, examples and exercises as JSON."""

  kind = SectionKind.GRAMMAR
  instruction_text = "Study the grammar point, then complete the exercises."
  default_params = GenerationParams(max_tokens=3000)

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    text, tokens = await self._complete(render_grammar_prompt(context, json_schema(GrammarSection)), purpose="grammar_point", instruction=instruction)
    payload = self._parse_json(text)
    if isinstance(payload, dict) and isinstance(payload.get("explanation"), str):
      # A flat explanation string is kept as usage; the validator then asks for the missing form.
      payload = {**payload, "explanation": {"usage": payload["explanation"]}}
    section = self._convert(payload, GrammarSection) if isinstance(payload, dict) else None
    if section is None:
      return self._section(GrammarSection(instruction=self.instruction_text), tokens=tokens, strategy="unparsed")
    return self._section(_tidy(section, self.instruction_text), tokens=tokens)
