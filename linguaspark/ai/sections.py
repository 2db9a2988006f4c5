"""Static dispatch table for lesson sections and their dependency order."""

from __future__ import annotations

import heapq
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from linguaspark.ai.agents import (
  ComprehensionGenerator,
  DialogueFillGapGenerator,
  DialoguePracticeGenerator,
  DiscussionGenerator,
  GrammarGenerator,
  PronunciationGenerator,
  ReadingGenerator,
  SectionGenerator,
  VocabularyGenerator,
  WarmupGenerator,
  WrapupGenerator,
)
from linguaspark.ai.agents.pronunciation import select_challenging_words
from linguaspark.ai.levels import GRAMMAR_POINTS
from linguaspark.ai.pipeline.content import (
  DialogueSection,
  GrammarSection,
  PronunciationSection,
  PronunciationWord,
  QuestionSet,
  ReadingSection,
  SectionContent,
  VocabularyEntry,
  VocabularySection,
)
from linguaspark.ai.pipeline.contracts import SectionKind, SharedContext, ValidationResult
from linguaspark.ai.validators import (
  validate_comprehension,
  validate_dialogue,
  validate_discussion,
  validate_fill_gap_dialogue,
  validate_grammar,
  validate_pronunciation,
  validate_reading,
  validate_vocabulary,
  validate_warmup,
  validate_wrapup,
)

Validator = Callable[[Any, SharedContext], ValidationResult]


class SectionGraphError(ValueError):
  """Raised when the section table has a cycle or an unknown dependency."""


@dataclass(frozen=True)
class SectionSpec:
  """Everything the orchestrator needs to run one section kind."""

  kind: SectionKind
  priority: int
  dependencies: tuple[SectionKind, ...]
  generator: type[SectionGenerator]
  validator: Validator
  placeholder: Callable[[SharedContext], SectionContent]
  has_content: Callable[[Any], bool]


def _questions(instruction: str, *questions: str) -> Callable[[SharedContext], SectionContent]:
  def build(context: SharedContext) -> SectionContent:
    return QuestionSet(instruction=instruction, questions=list(questions))

  return build


def _vocabulary_placeholder(context: SharedContext) -> SectionContent:
  entries = [VocabularyEntry(word=word) for word in context.key_vocabulary[:8]]
  return VocabularySection(instruction="Look up these words with your tutor and make your own example sentences.", words=entries)


def _reading_placeholder(context: SharedContext) -> SectionContent:
  return ReadingSection(instruction="Read the original text with your tutor.", passage=context.source_text)


def _dialogue_placeholder(context: SharedContext) -> SectionContent:
  return DialogueSection(instruction=f"Role-play a short conversation with your tutor about {', '.join(context.main_themes[:2]) or 'the topic'}.")


def _grammar_placeholder(context: SharedContext) -> SectionContent:
  point = GRAMMAR_POINTS[context.difficulty_level].split(",")[0].strip()
  return GrammarSection(instruction="Review this grammar point with your tutor.", grammar_point=point)


def _pronunciation_placeholder(context: SharedContext) -> SectionContent:
  words = [PronunciationWord(word=word) for word in select_challenging_words(context.key_vocabulary, 5)]
  return PronunciationSection(instruction="Practise saying these words with your tutor.", words=words)


SECTION_SPECS: dict[SectionKind, SectionSpec] = {
  spec.kind: spec
  for spec in (
    SectionSpec(
      kind=SectionKind.WARMUP,
      priority=1,
      dependencies=(),
      generator=WarmupGenerator,
      validator=validate_warmup,
      placeholder=_questions(
        WarmupGenerator.instruction_text,
        "Have you ever read or heard about this topic before?",
        "What do you think about this topic?",
        "How does this topic relate to your daily life?",
      ),
      has_content=lambda content: bool(content.questions),
    ),
    SectionSpec(
      kind=SectionKind.VOCABULARY,
      priority=2,
      dependencies=(),
      generator=VocabularyGenerator,
      validator=validate_vocabulary,
      placeholder=_vocabulary_placeholder,
      has_content=lambda content: bool(content.words),
    ),
    SectionSpec(
      kind=SectionKind.READING,
      priority=3,
      dependencies=(SectionKind.VOCABULARY,),
      generator=ReadingGenerator,
      validator=validate_reading,
      placeholder=_reading_placeholder,
      has_content=lambda content: bool(content.passage.strip()),
    ),
    SectionSpec(
      kind=SectionKind.COMPREHENSION,
      priority=4,
      dependencies=(SectionKind.READING,),
      generator=ComprehensionGenerator,
      validator=validate_comprehension,
      placeholder=_questions(
        ComprehensionGenerator.instruction_text,
        "What is the main idea of the text?",
        "Which part of the text did you find most interesting?",
        "What new words did you learn from the text?",
        "Who or what is the text mainly about?",
        "What would you like to know more about after reading?",
      ),
      has_content=lambda content: bool(content.questions),
    ),
    SectionSpec(
      kind=SectionKind.DIALOGUE_PRACTICE,
      priority=5,
      dependencies=(SectionKind.VOCABULARY,),
      generator=DialoguePracticeGenerator,
      validator=validate_dialogue,
      placeholder=_dialogue_placeholder,
      has_content=lambda content: bool(content.lines),
    ),
    SectionSpec(
      kind=SectionKind.DIALOGUE_FILL_GAP,
      priority=6,
      dependencies=(SectionKind.VOCABULARY,),
      generator=DialogueFillGapGenerator,
      validator=validate_fill_gap_dialogue,
      placeholder=_dialogue_placeholder,
      has_content=lambda content: bool(content.lines),
    ),
    SectionSpec(
      kind=SectionKind.DISCUSSION,
      priority=7,
      dependencies=(),
      generator=DiscussionGenerator,
      validator=validate_discussion,
      placeholder=_questions(
        DiscussionGenerator.instruction_text,
        "What is your opinion about this topic?",
        "Why do you think this topic is important?",
        "How is this topic different in your country?",
        "Would you like to learn more about this? Why?",
        "Which part of this topic interests you most?",
      ),
      has_content=lambda content: bool(content.questions),
    ),
    SectionSpec(
      kind=SectionKind.GRAMMAR,
      priority=8,
      dependencies=(SectionKind.VOCABULARY,),
      generator=GrammarGenerator,
      validator=validate_grammar,
      placeholder=_grammar_placeholder,
      has_content=lambda content: bool(content.grammar_point or content.exercises),
    ),
    SectionSpec(
      kind=SectionKind.PRONUNCIATION,
      priority=9,
      dependencies=(SectionKind.VOCABULARY,),
      generator=PronunciationGenerator,
      validator=validate_pronunciation,
      placeholder=_pronunciation_placeholder,
      has_content=lambda content: bool(content.words or content.tongue_twisters),
    ),
    SectionSpec(
      kind=SectionKind.WRAPUP,
      priority=10,
      dependencies=(SectionKind.READING, SectionKind.DISCUSSION),
      generator=WrapupGenerator,
      validator=validate_wrapup,
      placeholder=_questions(
        WrapupGenerator.instruction_text,
        "What was the most useful thing you learned today?",
        "Which new words will you try to use this week?",
        "What would you like to practise more in the next lesson?",
      ),
      has_content=lambda content: bool(content.questions),
    ),
  )
}


def topological_order(specs: dict[SectionKind, SectionSpec]) -> tuple[SectionKind, ...]:
  """Order sections so every dependency comes first; ties break on priority."""
  indegree = {kind: 0 for kind in specs}
  dependents: dict[SectionKind, list[SectionKind]] = {kind: [] for kind in specs}
  for kind, spec in specs.items():
    for dependency in spec.dependencies:
      if dependency not in specs:
        raise SectionGraphError(f"{kind.value} depends on unknown section {dependency.value}")
      indegree[kind] += 1
      dependents[dependency].append(kind)

  ready = [(specs[kind].priority, kind.value, kind) for kind, degree in indegree.items() if degree == 0]
  heapq.heapify(ready)
  order: list[SectionKind] = []
  while ready:
    _, _, kind = heapq.heappop(ready)
    order.append(kind)
    for dependent in dependents[kind]:
      indegree[dependent] -= 1
      if indegree[dependent] == 0:
        heapq.heappush(ready, (specs[dependent].priority, dependent.value, dependent))

  if len(order) != len(specs):
    stuck = sorted(kind.value for kind, degree in indegree.items() if degree > 0)
    raise SectionGraphError(f"Section dependency cycle involving: {', '.join(stuck)}")
  return tuple(order)


@lru_cache(maxsize=1)
def resolve_section_order() -> tuple[SectionKind, ...]:
  """Execution order of the built-in section table."""
  return topological_order(SECTION_SPECS)
