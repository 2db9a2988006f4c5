"""msgspec structs describing the structured content of each lesson section.

Fields default to empty values so that partially formed provider output
still converts; the section validators decide whether it is acceptable.
"""

from __future__ import annotations

from typing import Annotated, Any

import msgspec


class SectionContent(msgspec.Struct, frozen=True, rename="camel", kw_only=True):
  """Base class for all section content values."""

  instruction: Annotated[str, msgspec.Meta(description="Learner-facing instruction for the section")] = ""


class QuestionSet(SectionContent, frozen=True, rename="camel", kw_only=True):
  """Ordered list of questions (warm-up, discussion, comprehension, wrap-up)."""

  questions: list[str] = msgspec.field(default_factory=list)


class VocabularyEntry(msgspec.Struct, frozen=True, rename="camel", kw_only=True):
  word: Annotated[str, msgspec.Meta(description="Headword, lowercase")] = ""
  definition: Annotated[str, msgspec.Meta(description="Learner-level definition")] = ""
  examples: Annotated[list[str], msgspec.Meta(description="Example sentences that contain the word")] = msgspec.field(default_factory=list)


class VocabularySection(SectionContent, frozen=True, rename="camel", kw_only=True):
  words: list[VocabularyEntry] = msgspec.field(default_factory=list)


class ReadingSection(SectionContent, frozen=True, rename="camel", kw_only=True):
  passage: str = ""


class DialogueLine(msgspec.Struct, frozen=True, rename="camel", kw_only=True):
  speaker: str = ""
  text: str = ""


class DialogueSection(SectionContent, frozen=True, rename="camel", kw_only=True):
  """Practice or fill-gap dialogue; answers are only populated for fill-gap."""

  lines: list[DialogueLine] = msgspec.field(default_factory=list)
  follow_up_questions: list[str] = msgspec.field(default_factory=list)
  answers: list[str] = msgspec.field(default_factory=list)


class GrammarExplanation(msgspec.Struct, frozen=True, rename="camel", kw_only=True):
  form: Annotated[str, msgspec.Meta(description="How the structure is built")] = ""
  usage: Annotated[str, msgspec.Meta(description="When and why the structure is used")] = ""
  level_notes: Annotated[str, msgspec.Meta(description="Notes specific to the learner level")] = ""


class GrammarExercise(msgspec.Struct, frozen=True, rename="camel", kw_only=True):
  prompt: Annotated[str, msgspec.Meta(description="Exercise sentence or task")] = ""
  answer: Annotated[str, msgspec.Meta(description="Expected answer")] = ""
  explanation: Annotated[str, msgspec.Meta(description="Why the answer is correct")] = ""


class GrammarSection(SectionContent, frozen=True, rename="camel", kw_only=True):
  grammar_point: Annotated[str, msgspec.Meta(description="Name of the grammar point")] = ""
  explanation: GrammarExplanation = msgspec.field(default_factory=GrammarExplanation)
  examples: Annotated[list[str], msgspec.Meta(description="Example sentences, ideally drawn from the source text")] = msgspec.field(default_factory=list)
  exercises: list[GrammarExercise] = msgspec.field(default_factory=list)


class PronunciationWord(msgspec.Struct, frozen=True, rename="camel", kw_only=True):
  word: str = ""
  ipa: str = ""
  difficult_sounds: list[str] = msgspec.field(default_factory=list)
  tips: list[str] = msgspec.field(default_factory=list)
  practice_sentence: str = ""


class TongueTwister(msgspec.Struct, frozen=True, rename="camel", kw_only=True):
  text: str = ""
  target_sounds: list[str] = msgspec.field(default_factory=list)
  difficulty: str = "moderate"


class PronunciationSection(SectionContent, frozen=True, rename="camel", kw_only=True):
  words: list[PronunciationWord] = msgspec.field(default_factory=list)
  tongue_twisters: list[TongueTwister] = msgspec.field(default_factory=list)


def json_schema(struct_type: Any) -> dict[str, Any]:
  """Return the JSON schema used to steer structured provider output."""
  return msgspec.json.schema(struct_type)


def to_payload(content: msgspec.Struct) -> dict[str, Any]:
  """Render a content struct as camelCase builtins for the response schema."""
  return msgspec.to_builtins(content)
