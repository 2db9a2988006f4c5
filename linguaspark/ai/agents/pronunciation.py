"""Pronunciation generator: challenging-word selection, transcription blocks and tongue twisters."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from linguaspark.ai.agents.base import Prior, SectionGenerator
from linguaspark.ai.agents.dialogue import lesson_vocabulary
from linguaspark.ai.agents.prompts import render_pronunciation_words_prompt, render_tongue_twister_prompt
from linguaspark.ai.pipeline.content import PronunciationSection, PronunciationWord, TongueTwister
from linguaspark.ai.pipeline.contracts import GeneratedSection, GenerationInstruction, SectionKind, SharedContext
from linguaspark.ai.providers.base import GenerationParams
from linguaspark.ai.utils.text import dedupe, naive_keywords

PRONUNCIATION_WORD_TARGET = 6
TONGUE_TWISTER_TARGET = 3

# (pattern, sound label, weight); matches are counted, so repeated digraphs score higher.
_SOUND_PATTERNS: tuple[tuple[re.Pattern[str], str, int], ...] = (
  (re.compile(r"th"), "/θ/ or /ð/", 5),
  (re.compile(r"ch"), "/tʃ/", 4),
  (re.compile(r"sh"), "/ʃ/", 4),
  (re.compile(r"ph"), "/f/", 3),
  (re.compile(r"ng"), "/ŋ/", 3),
  (re.compile(r"wh"), "/w/", 3),
  (re.compile(r"[^aeiou\W]r"), "/r/", 4),
  (re.compile(r"ough|augh"), "/ɔː/ or /ʌf/", 5),
  (re.compile(r"eau"), "/oʊ/", 4),
  (re.compile(r"ou"), "/aʊ/ or /uː/", 3),
  (re.compile(r"oo"), "/uː/ or /ʊ/", 3),
  (re.compile(r"ea"), "/iː/ or /e/", 3),
  (re.compile(r"au|aw"), "/ɔː/", 3),
  (re.compile(r"oi|oy"), "/ɔɪ/", 3),
  (re.compile(r"tion$"), "/ʃən/", 3),
  (re.compile(r"sion$"), "/ʒən/", 3),
  (re.compile(r"ture$"), "/tʃər/", 3),
  (re.compile(r"sure$"), "/ʒər/", 3),
  (re.compile(r"^kn|^gn|^wr|^ps"), "silent first letter", 5),
  (re.compile(r"mb$|bt$|lm$|lk$"), "silent final letter", 4),
  (re.compile(r"[aeiou]gh"), "silent gh", 3),
  (re.compile(r"[^aeiou\W]{3,}"), "consonant cluster", 3),
)

_KEY_LINE_RE = re.compile(r"^\W*([A-Za-z_]+?)(?:_\d+)?\s*:\s*(.*)$")


def score_word(word: str) -> tuple[int, list[str]]:
  """Score a word's pronunciation difficulty and name the sounds that make it hard."""
  lowered = word.lower()
  score = min(len(lowered), 12)
  sounds: list[str] = []
  for pattern, sound, weight in _SOUND_PATTERNS:
    hits = len(pattern.findall(lowered))
    if hits:
      score += weight * hits
      sounds.append(sound)
  return score, sounds


def select_challenging_words(candidates: Iterable[str], count: int) -> list[str]:
  """Pick the hardest words, preferring ones that add sounds not yet covered."""
  pool = [(word, *score_word(word)) for word in dedupe(candidates) if len(word) > 2 and word.isalpha()]
  selected: list[str] = []
  covered: set[str] = set()
  while pool and len(selected) < count:
    # max() keeps the first of equal candidates, so selection is deterministic.
    best = max(pool, key=lambda item: item[1] + 4 * len(set(item[2]) - covered))
    pool.remove(best)
    selected.append(best[0])
    covered.update(best[2])
  return selected


def _split_list(value: str) -> list[str]:
  return [part.strip() for part in re.split(r"[,;]", value) if part.strip()]


def _keyed_lines(text: str) -> Iterable[tuple[str, str]]:
  for raw in text.splitlines():
    match = _KEY_LINE_RE.match(raw.strip())
    if match:
      yield match.group(1).upper().strip("_"), match.group(2).replace("*", "").strip()


def parse_word_blocks(text: str) -> list[PronunciationWord]:
  """Parse WORD/IPA/DIFFICULT_SOUNDS/TIP/PRACTICE blocks."""
  words: list[PronunciationWord] = []
  current: dict[str, object] | None = None

  def flush() -> None:
    if current and current.get("word"):
      words.append(PronunciationWord(**current))  # type: ignore[arg-type]

  for key, value in _keyed_lines(text):
    if key == "WORD":
      flush()
      current = {"word": value.lower(), "ipa": "", "difficult_sounds": [], "tips": [], "practice_sentence": ""}
    elif current is None:
      continue
    elif key == "IPA":
      current["ipa"] = value
    elif key in ("DIFFICULT_SOUNDS", "SOUNDS"):
      current["difficult_sounds"] = _split_list(value)
    elif key == "TIP" and value:
      current["tips"].append(value)  # type: ignore[union-attr]
    elif key in ("PRACTICE", "PRACTICE_SENTENCE"):
      current["practice_sentence"] = value
  flush()
  return words


def parse_tongue_twisters(text: str) -> list[TongueTwister]:
  """Parse TWISTER/SOUNDS/DIFFICULTY entries."""
  twisters: list[TongueTwister] = []
  current: dict[str, object] | None = None
  for key, value in _keyed_lines(text):
    if key == "TWISTER":
      if current and current.get("text"):
        twisters.append(TongueTwister(**current))  # type: ignore[arg-type]
      current = {"text": value, "target_sounds": [], "difficulty": "moderate"}
    elif current is None:
      continue
    elif key in ("SOUNDS", "TARGET_SOUNDS"):
      current["target_sounds"] = _split_list(value)
    elif key == "DIFFICULTY" and value:
      current["difficulty"] = value.lower()
  if current and current.get("text"):
    twisters.append(TongueTwister(**current))  # type: ignore[arg-type]
  return twisters


def _sounds_for(words: Sequence[PronunciationWord]) -> list[str]:
  return dedupe(sound for word in words for sound in word.difficult_sounds)[:5]


class PronunciationGenerator(SectionGenerator):
  """Two provider calls per attempt: word guidance, then tongue twisters on the same sounds."""

  kind = SectionKind.PRONUNCIATION
  instruction_text = "Listen to your tutor and repeat each word. Then try the tongue twisters, slowly at first."
  default_params = GenerationParams(max_tokens=1500)

  async def generate(self, context: SharedContext, prior: Prior, instruction: GenerationInstruction) -> GeneratedSection:
    # Lesson vocabulary first; source keywords only top the pool up.
    candidates = [*lesson_vocabulary(context, prior), *naive_keywords(context.source_text, limit=15)]
    selected = select_challenging_words(candidates, PRONUNCIATION_WORD_TARGET)

    words_text, word_tokens = await self._complete(render_pronunciation_words_prompt(context, selected), purpose="words", instruction=instruction)
    words = parse_word_blocks(words_text)

    twister_prompt = render_tongue_twister_prompt(context, count=TONGUE_TWISTER_TARGET, sounds=_sounds_for(words))
    twister_text, twister_tokens = await self._complete(twister_prompt, purpose="tongue_twisters", instruction=instruction)
    twisters = parse_tongue_twisters(twister_text)

    content = PronunciationSection(instruction=self.instruction_text, words=words, tongue_twisters=twisters)
    return self._section(content, tokens=word_tokens + twister_tokens)
