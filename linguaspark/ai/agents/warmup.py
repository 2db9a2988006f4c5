"""Warm-up question generator."""

from __future__ import annotations

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.prompts import render_warmup_prompt
from linguaspark.ai.pipeline.content import QuestionSet
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.utils.text import parse_questions

WARMUP_QUESTION_COUNT = 3


class WarmupGenerator(SectionGenerator):
  """Ask about the learner's own experience of the topic, never about the text itself."""

  kind = SectionKind.WARMUP
  instruction_text = "Discuss these questions with your tutor before reading. Share your own experiences and opinions."

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    text, tokens = await self._complete(render_warmup_prompt(context), purpose="questions", instruction=instruction)
    questions = parse_questions(text, limit=WARMUP_QUESTION_COUNT)
    return self._section(QuestionSet(instruction=self.instruction_text, questions=questions), tokens=tokens)
