"""Dialogue generators: practice conversation and fill-in-the-gap variant."""

from __future__ import annotations

import re

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.prompts import render_dialogue_prompt
from linguaspark.ai.pipeline.content import DialogueLine, DialogueSection, VocabularySection
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.utils.text import clean_line

GAP_MARKER = "_____"

_LINE_RE = re.compile(r"^\W*(student|tutor)\W*:\s*(.+)$", re.IGNORECASE)
_FOLLOW_UP_RE = re.compile(r"^\W*follow[_ -]?up\W*:\s*(.+)$", re.IGNORECASE)
_ANSWERS_RE = re.compile(r"^\W*answers?\W*:\s*(.+)$", re.IGNORECASE)
_GAP_RE = re.compile(r"_{3,}")


def lesson_vocabulary(context: SharedContext, prior: Prior) -> list[str]:
  """Prefer the accepted vocabulary section's words, falling back to the context's key words."""
  section = prior.get(SectionKind.VOCABULARY)
  if section is not None and isinstance(section.content, VocabularySection) and section.content.words:
    return [entry.word for entry in section.content.words]
  return list(context.key_vocabulary)


def parse_dialogue(text: str) -> tuple[list[DialogueLine], list[str], list[str]]:
  """Split provider output into dialogue lines, follow-up questions and gap answers."""
  lines: list[DialogueLine] = []
  follow_ups: list[str] = []
  answers: list[str] = []
  for raw in text.splitlines():
    stripped = raw.strip()
    if not stripped:
      continue
    if match := _FOLLOW_UP_RE.match(stripped):
      follow_ups.append(clean_line(match.group(1)))
    elif match := _ANSWERS_RE.match(stripped):
      answers.extend(part.strip() for part in re.split(r"[;,]", match.group(1)) if part.strip())
    elif match := _LINE_RE.match(stripped):
      # Normalise any gap length to the canonical marker.
      body = _GAP_RE.sub(GAP_MARKER, match.group(2).replace("*", "").strip())
      lines.append(DialogueLine(speaker=match.group(1).capitalize(), text=body))
  return lines, follow_ups, answers


class _DialogueGenerator(SectionGenerator):
  fill_gap: bool = False

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    vocabulary = lesson_vocabulary(context, prior)
    prompt = render_dialogue_prompt(context, fill_gap=self.fill_gap, vocabulary=vocabulary)
    text, tokens = await self._complete(prompt, purpose="dialogue", instruction=instruction)
    lines, follow_ups, answers = parse_dialogue(text)
    content = DialogueSection(
      instruction=self.instruction_text,
      lines=lines,
      follow_up_questions=[] if self.fill_gap else follow_ups,
      answers=answers if self.fill_gap else [],
    )
    return self._section(content, tokens=tokens)


class DialoguePracticeGenerator(_DialogueGenerator):
  kind = SectionKind.DIALOGUE_PRACTICE
  instruction_text = "Read the dialogue with your tutor, then answer the follow-up questions."


class DialogueFillGapGenerator(_DialogueGenerator):
  kind = SectionKind.DIALOGUE_FILL_GAP
  instruction_text = "Complete the dialogue with the missing words, then practise it with your tutor."
  fill_gap = True
