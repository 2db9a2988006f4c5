"""Shared fixtures: a scripted model keyed by call context and canned lesson output."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from linguaspark.ai.levels import VOCABULARY_EXAMPLE_COUNTS
from linguaspark.ai.pipeline.contracts import CEFRLevel, LessonKind, SharedContext
from linguaspark.ai.providers.base import AIModel, GenerationParams, SimpleModelResponse
from linguaspark.telemetry.context import get_llm_call_context

GOLF_SOURCE = (
  "Rory McIlroy won the Masters tournament at Augusta National on Sunday, completing the career Grand Slam after more than a decade of trying. "
  "The champion held his nerve on the final holes while a huge crowd cheered every shot. "
  "Many players struggle with pressure at major golf tournaments, and McIlroy had lost several chances in the past. "
  "This victory made him only the sixth player in history to win all four major championships. "
  "Fans around the world celebrated the achievement, and other players praised his determination and patience on the difficult course."
)

VOCABULARY_WORDS = ("tournament", "champion", "pressure", "career", "crowd", "victory", "course", "achievement")

ScriptValue = str | BaseException | Callable[[str], str]


@dataclass(frozen=True)
class RecordedCall:
  section: str
  purpose: str
  attempt: int
  prompt: str
  params: GenerationParams | None


class ScriptedModel(AIModel):
  """Answer each call from a script keyed by (section, purpose) of the active call context.

  A list value is consumed one entry per call and its last entry repeats.
  Exceptions in the script are raised instead of returned.
  """

  def __init__(self, script: dict[tuple[str, str], ScriptValue | list[ScriptValue]], *, tokens_per_call: int = 10) -> None:
    self.name = "scripted"
    self.calls: list[RecordedCall] = []
    self._script = script
    self._tokens = tokens_per_call
    self._served: dict[tuple[str, str], int] = {}

  def calls_for(self, section: str) -> list[RecordedCall]:
    return [call for call in self.calls if call.section == section]

  async def generate(self, prompt: str, params: GenerationParams | None = None) -> SimpleModelResponse:
    ctx = get_llm_call_context()
    assert ctx is not None, "provider called outside llm_call_context"
    key = (ctx.section, ctx.purpose)
    self.calls.append(RecordedCall(section=ctx.section, purpose=ctx.purpose, attempt=ctx.attempt, prompt=prompt, params=params))

    value = self._script[key]
    if isinstance(value, list):
      served = self._served.get(key, 0)
      self._served[key] = served + 1
      value = value[min(served, len(value) - 1)]
    if isinstance(value, BaseException):
      raise value
    if callable(value):
      value = value(prompt)
    return SimpleModelResponse(content=value, usage={"total_tokens": self._tokens})


def _questions(*questions: str) -> str:
  return "\n".join(f"{index}. {question}" for index, question in enumerate(questions, start=1))


def _vocabulary_json(level: CEFRLevel) -> str:
  count = VOCABULARY_EXAMPLE_COUNTS[level]
  templates = (
    "The {word} was important for every golf player.",
    "Sports fans talked about the {word} all week.",
    "She wrote a short story about the {word} in golf.",
    "Our coach explained the {word} before the sports lesson.",
    "People still remember that {word} in golf history.",
  )
  entries = [
    {"word": word, "definition": f"A common sports word: {word}.", "examples": [template.format(word=word) for template in templates[:count]]}
    for word in VOCABULARY_WORDS
  ]
  return json.dumps(entries)


READING_PASSAGE = " ".join(
  [
    "Last Sunday a famous golf player won an important tournament in the United States.",
    "He was the champion after many years of hard work and a long career.",
    "The crowd was very big and people cheered for every good shot on the course.",
    "Golf is a difficult sport because players feel a lot of pressure in big games.",
    "Many fans watched the final holes on television at home with their families.",
  ]
  * 3
)

DIALOGUE_LINES = (
  ("Student", "Did you watch the golf tournament on Sunday?"),
  ("Tutor", "Yes, I did. The champion played really well."),
  ("Student", "The crowd was very big and very loud."),
  ("Tutor", "Big crowds can add pressure for the players."),
  ("Student", "I think the victory was good for his career."),
  ("Tutor", "Yes, it was a great achievement for him."),
  ("Student", "Do you play golf on a course near you?"),
  ("Tutor", "Sometimes I play with my friends on Saturday."),
  ("Student", "Is golf a hard sport to learn?"),
  ("Tutor", "It is hard, but it is also a lot of fun."),
  ("Student", "I want to try it with my brother."),
  ("Tutor", "That is a great idea for the weekend."),
  ("Student", "Thank you for the help today."),
  ("Tutor", "You are welcome. See you next week."),
)


def dialogue_text(lines: tuple[tuple[str, str], ...] = DIALOGUE_LINES, *, follow_ups: bool = True) -> str:
  body = "\n".join(f"{speaker}: {text}" for speaker, text in lines)
  if follow_ups:
    body += "\nFOLLOW_UP: What sport do you like to watch?\nFOLLOW_UP: Would you like to try golf one day?\nFOLLOW_UP: How do you feel in front of a crowd?"
  return body


def fill_gap_text() -> str:
  lines = list(DIALOGUE_LINES)
  lines[1] = ("Tutor", "Yes, I did. The _____ played really well.")
  lines[3] = ("Tutor", "Big crowds can add _____ for the players.")
  lines[5] = ("Tutor", "Yes, it was a great _____ for him.")
  return dialogue_text(tuple(lines), follow_ups=False) + "\nANSWERS: champion, pressure, achievement"


GRAMMAR_JSON = json.dumps(
  {
    "grammarPoint": "Past simple for finished events",
    "explanation": {
      "form": "Subject plus the past form of the verb, for example won, played or watched.",
      "usage": "We use the past simple for actions that started and finished in the past.",
      "levelNotes": "Remember that many common verbs are irregular.",
    },
    "examples": ["The champion won the tournament.", "The crowd cheered every shot.", "He played on a difficult course."],
    "exercises": [
      {"prompt": "The champion ___ (win) the tournament.", "answer": "won", "explanation": "Irregular verb."},
      {"prompt": "The crowd ___ (cheer) loudly.", "answer": "cheered", "explanation": "Regular verb."},
      {"prompt": "She ___ (watch) the final holes.", "answer": "watched", "explanation": "Regular verb."},
      {"prompt": "They ___ (feel) a lot of pressure.", "answer": "felt", "explanation": "Irregular verb."},
      {"prompt": "He ___ (play) golf for many years.", "answer": "played", "explanation": "Regular verb."},
    ],
  }
)

PRONUNCIATION_WORDS = """
WORD: tournament
IPA: /ˈtʊənəmənt/
DIFFICULT_SOUNDS: /ʊə/, /ə/
TIP: Keep the first syllable long and stressed.
PRACTICE: The tournament lasted four days.

WORD: champion
IPA: /ˈtʃæmpiən/
DIFFICULT_SOUNDS: /tʃ/
TIP: Start with a short "t" before the "sh" sound.
PRACTICE: The champion smiled at the crowd.

WORD: achievement
IPA: /əˈtʃiːvmənt/
DIFFICULT_SOUNDS: /tʃ/, /iː/
TIP: Stress the second syllable.
PRACTICE: Winning was a great achievement.

WORD: pressure
IPA: /ˈpreʃə/
DIFFICULT_SOUNDS: /ʃ/, /r/
TIP: Round your lips for the "sh" sound.
PRACTICE: Players feel pressure in big games.

WORD: through
IPA: /θruː/
DIFFICULT_SOUNDS: /θ/
TIP: Put your tongue between your teeth.
PRACTICE: The ball rolled through the grass.

WORD: crowd
IPA: /kraʊd/
DIFFICULT_SOUNDS: /aʊ/
TIP: Glide from "a" to "oo".
PRACTICE: The crowd cheered loudly.
"""

TONGUE_TWISTERS = """
TWISTER: Three thrilled throngs threw thanks through the thick golf thunder.
SOUNDS: /θ/
DIFFICULTY: hard

TWISTER: Cheerful champions choose cheap cherry cheesecake after golf.
SOUNDS: /tʃ/
DIFFICULTY: moderate

TWISTER: Pressure pushes proud players past the practice green.
SOUNDS: /p/, /r/
DIFFICULTY: easy
"""

CONTEXT_JSON = json.dumps(
  {
    "title": "A Historic Win at the Masters",
    "vocabulary": list(VOCABULARY_WORDS),
    "themes": ["golf and sport", "handling pressure", "personal achievement"],
    "summary": "A golfer wins a major tournament and completes a rare career achievement in front of a big crowd.",
  }
)

WARMUP_QUESTIONS = _questions(
  "Have you ever watched a sports competition on television?",
  "What do you think makes someone a good athlete?",
  "How do you usually feel when you play a game with friends?",
)

DISCUSSION_QUESTIONS = _questions(
  "What do you think is the hardest part of playing a sport?",
  "Is watching sport better on television or in a stadium?",
  "How do you deal with pressure in your own life?",
  "Why do people enjoy watching famous athletes?",
  "Would you rather play a team sport or an individual sport?",
)

COMPREHENSION_QUESTIONS = _questions(
  "Where did the golf tournament take place?",
  "How long did the champion work for this win?",
  "How big was the crowd at the course?",
  "Why is golf a difficult sport for players?",
  "Where did many fans watch the final holes?",
)

WRAPUP_QUESTIONS = _questions(
  "Which new word from today will you use this week?",
  "What was the most interesting idea in the lesson?",
  "How would you explain today's topic to a friend?",
)


def build_lesson_script(level: CEFRLevel = CEFRLevel.B1) -> dict[tuple[str, str], Any]:
  """Responses that pass every validator at the given level."""
  return {
    ("context", "extract"): CONTEXT_JSON,
    ("warmup", "questions"): WARMUP_QUESTIONS,
    ("vocabulary", "entries"): _vocabulary_json(level),
    ("reading", "passage"): READING_PASSAGE,
    ("comprehension", "questions"): COMPREHENSION_QUESTIONS,
    ("dialoguePractice", "dialogue"): dialogue_text(),
    ("dialogueFillGap", "dialogue"): fill_gap_text(),
    ("discussion", "questions"): DISCUSSION_QUESTIONS,
    ("grammar", "grammar_point"): GRAMMAR_JSON,
    ("pronunciation", "words"): PRONUNCIATION_WORDS,
    ("pronunciation", "tongue_twisters"): TONGUE_TWISTERS,
    ("wrapup", "questions"): WRAPUP_QUESTIONS,
  }


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def scripted_model() -> Callable[..., ScriptedModel]:
  return ScriptedModel


@pytest.fixture
def lesson_script() -> Callable[..., dict[tuple[str, str], Any]]:
  return build_lesson_script


@pytest.fixture
def golf_source() -> str:
  return GOLF_SOURCE


@pytest.fixture
def make_context() -> Callable[..., SharedContext]:
  def build(level: CEFRLevel = CEFRLevel.B1, **overrides: Any) -> SharedContext:
    values: dict[str, Any] = {
      "key_vocabulary": VOCABULARY_WORDS,
      "main_themes": ("golf and sport", "handling pressure", "personal achievement"),
      "content_summary": "A golfer wins a major tournament.",
      "difficulty_level": level,
      "source_text": GOLF_SOURCE,
      "lesson_kind": LessonKind.DISCUSSION,
      "target_language": "English",
      "lesson_title": "A Historic Win at the Masters",
    }
    values.update(overrides)
    return SharedContext(**values)

  return build


@pytest.fixture
def canned() -> dict[str, Any]:
  """Raw canned provider texts for tests that call generators or validators directly."""
  return {
    "warmup": WARMUP_QUESTIONS,
    "discussion": DISCUSSION_QUESTIONS,
    "comprehension": COMPREHENSION_QUESTIONS,
    "wrapup": WRAPUP_QUESTIONS,
    "reading": READING_PASSAGE,
    "dialogue": dialogue_text(),
    "dialogue_lines": DIALOGUE_LINES,
    "fill_gap": fill_gap_text(),
    "grammar": GRAMMAR_JSON,
    "pronunciation_words": PRONUNCIATION_WORDS,
    "tongue_twisters": TONGUE_TWISTERS,
    "vocabulary": _vocabulary_json,
  }
