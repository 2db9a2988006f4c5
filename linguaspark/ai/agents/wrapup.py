"""Wrap-up reflection question generator."""

from __future__ import annotations

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.prompts import render_wrapup_prompt
from linguaspark.ai.pipeline.content import QuestionSet
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.utils.text import parse_questions

WRAPUP_QUESTION_COUNT = 3


class WrapupGenerator(SectionGenerator):
  kind = SectionKind.WRAPUP
  instruction_text = "Reflect on today's lesson with your tutor."

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    text, tokens = await self._complete(render_wrapup_prompt(context), purpose="questions", instruction=instruction)
    questions = parse_questions(text, limit=WRAPUP_QUESTION_COUNT)
    return self._section(QuestionSet(instruction=self.instruction_text, questions=questions), tokens=tokens)
