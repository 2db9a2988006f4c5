"""Plain-text helpers: tokenizing, keyword picking and line parsing."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

_WORD_RE = re.compile(r"\b[a-z]{4,12}\b")
_TOKEN_RE = re.compile(r"[A-Za-z']+")
_NUMBERING_RE = re.compile(r"^\s*(?:[-*•]+|\(?\d{1,2}[.)]|[A-Za-z][.)](?=\s))\s*")
_MARKDOWN_RE = re.compile(r"[*_`#]+")
_VOWELS = "aeiou"

# Function words and filler verbs that never make useful lesson vocabulary.
STOP_WORDS = frozenset(
  {
    "about", "after", "again", "also", "been", "before", "being", "between", "both", "came", "come", "could", "does",
    "doing", "down", "each", "even", "every", "from", "have", "having", "here", "into", "just", "last", "like", "made",
    "make", "many", "more", "most", "much", "must", "never", "only", "other", "over", "said", "same", "says", "should",
    "since", "some", "such", "than", "that", "their", "them", "then", "there", "these", "they", "this", "those", "through",
    "under", "until", "very", "want", "were", "what", "when", "where", "which", "while", "will", "with", "would", "year",
    "years", "your", "yours", "because", "during", "another", "still", "well", "went", "first",
  }
)

DEFAULT_VOCABULARY = ("communication", "important", "different", "example", "information", "situation")
DEFAULT_THEMES = ("general topic", "communication", "daily life")

_THEME_BUCKETS: tuple[tuple[str, tuple[str, ...]], ...] = (
  ("sports", ("sport", "game", "team", "tournament", "player", "match")),
  ("business", ("business", "company", "work", "market", "customer")),
  ("travel", ("travel", "country", "culture", "tourist", "journey")),
  ("technology", ("technology", "computer", "internet", "software", "digital")),
  ("health", ("health", "medical", "doctor", "hospital", "fitness")),
)


def words(text: str) -> list[str]:
  """Return word tokens in original case."""
  return _TOKEN_RE.findall(text)


def word_count(text: str) -> int:
  return len(text.split())


def dedupe(items: Iterable[str]) -> list[str]:
  """Return items in first-seen order without case-insensitive duplicates."""
  seen: set[str] = set()
  result: list[str] = []
  for item in items:
    key = item.strip().lower()
    if not key or key in seen:
      continue
    seen.add(key)
    result.append(item.strip())
  return result


def naive_keywords(text: str, *, limit: int = 8, minimum: int = 4) -> list[str]:
  """Pick frequent content words; fall back to a generic list when the text is too thin."""
  counts = Counter(word for word in _WORD_RE.findall(text.lower()) if word not in STOP_WORDS)
  # Counter keeps first-seen order and sorted() is stable, so ties stay in source order.
  ranked = sorted(counts, key=lambda word: -counts[word])
  picked = ranked[:limit]
  if len(picked) < minimum:
    return list(DEFAULT_VOCABULARY)
  return picked


def bucket_themes(text: str) -> list[str]:
  """Assign coarse theme labels from keyword buckets."""
  lowered = text.lower()
  themes = [label for label, keywords in _THEME_BUCKETS if any(keyword in lowered for keyword in keywords)]
  return themes or list(DEFAULT_THEMES)


def clean_line(line: str) -> str:
  """Strip list numbering, bullets and markdown emphasis from a provider output line."""
  stripped = _NUMBERING_RE.sub("", line.strip())
  return _MARKDOWN_RE.sub("", stripped).strip()


def parse_questions(text: str, *, limit: int | None = None) -> list[str]:
  """Extract question lines from free-form provider output."""
  questions = []
  for raw in text.splitlines():
    line = clean_line(raw)
    if len(line) < 10 or not line.endswith("?"):
      continue
    # Skip headings such as "Questions?" that sometimes lead the list.
    if line.lower().startswith(("here are", "questions:")):
      continue
    questions.append(line)
  return questions[:limit] if limit is not None else questions


def truncate(text: str, limit: int, *, suffix: str = "") -> str:
  if len(text) <= limit:
    return text
  return text[: max(0, limit - len(suffix))].rstrip() + suffix


def _inflections(word: str) -> str:
  stem = re.escape(word)
  forms = [rf"{stem}(?:s|es|ed|d|ing|er|ers|ly)?"]
  if len(word) > 2 and word[-1] == "y" and word[-2] not in _VOWELS:
    # study -> studies, studied
    forms.append(rf"{re.escape(word[:-1])}i(?:es|ed|er|ers)")
  if len(word) > 2 and word[-1] == "e":
    forms.append(rf"{re.escape(word[:-1])}(?:ing|ings)")
  if len(word) > 2 and word[-1].isalpha() and word[-1] not in _VOWELS + "wxy" and word[-2] in _VOWELS:
    # win -> winning, plan -> planned
    forms.append(rf"{stem}{re.escape(word[-1])}(?:ing|ed|er|ers)")
  return "|".join(forms)


def contains_word(text: str, word: str) -> bool:
  """Return True when word (or a regular inflection of it) occurs in text."""
  word = word.lower().strip()
  if not word:
    return False
  return re.search(rf"\b(?:{_inflections(word)})\b", text.lower()) is not None
