"""Discussion question generator."""

from __future__ import annotations

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.prompts import render_discussion_prompt
from linguaspark.ai.pipeline.content import QuestionSet
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.utils.text import parse_questions

DISCUSSION_QUESTION_COUNT = 5


class DiscussionGenerator(SectionGenerator):
  kind = SectionKind.DISCUSSION
  instruction_text = "Discuss these questions with your tutor. Give reasons and examples for your answers."

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    text, tokens = await self._complete(render_discussion_prompt(context), purpose="questions", instruction=instruction)
    # Surplus questions are trimmed; a short list is left short so validation can ask for more.
    questions = parse_questions(text, limit=DISCUSSION_QUESTION_COUNT)
    return self._section(QuestionSet(instruction=self.instruction_text, questions=questions), tokens=tokens)
