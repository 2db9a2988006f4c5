"""Prompt helpers shared by section generators."""

from __future__ import annotations

import json
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

from linguaspark.ai.levels import DIALOGUE_WORD_RANGES, DISCUSSION_WORD_RANGES, EXAMPLE_WORD_RANGES, GRAMMAR_POINTS, LEVEL_GUIDANCE, VOCABULARY_EXAMPLE_COUNTS
from linguaspark.ai.pipeline.contracts import GenerationInstruction, LessonRequest, SharedContext
from linguaspark.ai.utils.text import truncate

Ctx = SharedContext


@lru_cache(maxsize=32)
def _load_prompt(name: str) -> str:
  try:
    path = Path(__file__).parents[1] / "prompts" / name
    return path.read_text(encoding="utf-8").strip()
  except (FileNotFoundError, PermissionError, UnicodeDecodeError) as exc:
    raise RuntimeError(f"Failed to load prompt '{name}': {exc}") from exc


def _replace_placeholders(template: str, values: dict[str, str]) -> str:
  """Substitute {{PLACEHOLDER}} markers with their rendered values."""
  rendered = template
  for key, value in values.items():
    rendered = rendered.replace(f"{{{{{key}}}}}", value)

  return rendered


def _render(name: str, values: dict[str, str]) -> str:
  return _replace_placeholders(_load_prompt(name), values)


def format_schema_block(schema: dict[str, Any]) -> str:
  """Format a JSON schema for plain-text prompts."""
  return json.dumps(schema, indent=2, ensure_ascii=True)


def _themes(ctx: Ctx, limit: int = 3) -> str:
  return ", ".join(ctx.main_themes[:limit]) or "the topic"


def _main_theme(ctx: Ctx) -> str:
  return ctx.main_themes[0] if ctx.main_themes else "this topic"


def _vocabulary(ctx: Ctx, limit: int = 5) -> str:
  return ", ".join(ctx.key_vocabulary[:limit])


def _common(ctx: Ctx) -> dict[str, str]:
  return {
    "LEVEL": ctx.difficulty_level.value,
    "LANGUAGE": ctx.target_language,
    "THEMES": _themes(ctx),
    "MAIN_THEME": _main_theme(ctx),
    "SUMMARY": ctx.content_summary,
    "VOCABULARY": _vocabulary(ctx),
  }


def render_regeneration_addendum(instruction: GenerationInstruction) -> str:
  """Return the issue-specific corrections appended to a regeneration prompt."""
  if not instruction.is_regeneration:
    return ""
  lines = ["", "IMPORTANT: a previous attempt was rejected. Fix these problems:"]
  lines.extend(f"- {adjustment}" for adjustment in instruction.adjustments)
  lines.append("Follow the required format exactly.")
  return "\n".join(lines)


def with_instruction(prompt: str, instruction: GenerationInstruction) -> str:
  addendum = render_regeneration_addendum(instruction)
  return f"{prompt}\n{addendum}" if addendum else prompt


def render_context_prompt(request: LessonRequest) -> str:
  return _render(
    "context.md",
    {
      "LEVEL": request.proficiency_level.value,
      "LANGUAGE": request.target_language,
      "KIND": request.lesson_kind.value,
      "SOURCE_EXCERPT": truncate(request.source_text.strip(), 1500),
    },
  )


def render_warmup_prompt(ctx: Ctx) -> str:
  values = _common(ctx)
  values["LEVEL_INSTRUCTION"] = LEVEL_GUIDANCE[ctx.difficulty_level].warmup
  return _render("warmup.md", values)


def render_vocabulary_prompt(ctx: Ctx, words: Sequence[str], schema: dict[str, Any]) -> str:
  low, high = EXAMPLE_WORD_RANGES[ctx.difficulty_level]
  values = _common(ctx)
  values.update(
    {
      "WORDS": "\n".join(f"- {word}" for word in words),
      "EXAMPLE_COUNT": str(VOCABULARY_EXAMPLE_COUNTS[ctx.difficulty_level]),
      "MIN_WORDS": str(low),
      "MAX_WORDS": str(high),
      "SCHEMA": format_schema_block(schema),
    }
  )
  return _render("vocabulary.md", values)


def render_reading_prompt(ctx: Ctx) -> str:
  values = _common(ctx)
  values["LEVEL_INSTRUCTION"] = LEVEL_GUIDANCE[ctx.difficulty_level].reading
  values["SOURCE_EXCERPT"] = ctx.source_text
  return _render("reading.md", values)


def render_comprehension_prompt(ctx: Ctx, passage: str) -> str:
  values = _common(ctx)
  values["PASSAGE"] = passage
  return _render("comprehension.md", values)


def render_dialogue_prompt(ctx: Ctx, *, fill_gap: bool, vocabulary: Sequence[str]) -> str:
  guidance = LEVEL_GUIDANCE[ctx.difficulty_level]
  low, high = DIALOGUE_WORD_RANGES[ctx.difficulty_level]
  values = _common(ctx)
  values.update(
    {
      "VOCABULARY": ", ".join(vocabulary[:5]),
      "LEVEL_VOCABULARY": guidance.dialogue_vocabulary,
      "LEVEL_GRAMMAR": guidance.dialogue_grammar,
      "MIN_WORDS": str(low),
      "MAX_WORDS": str(high),
    }
  )
  return _render("dialogue_fill_gap.md" if fill_gap else "dialogue_practice.md", values)


def render_discussion_prompt(ctx: Ctx) -> str:
  guidance = LEVEL_GUIDANCE[ctx.difficulty_level]
  low, high = DISCUSSION_WORD_RANGES[ctx.difficulty_level]
  values = _common(ctx)
  values.update(
    {
      "THEMES": " and ".join(ctx.main_themes[:2]) or "the topic",
      "LEVEL_DESCRIPTION": guidance.discussion,
      "QUESTION_TYPES": "\n".join(f"{index}. {item}" for index, item in enumerate(guidance.discussion_question_types, start=1)),
      "MIN_WORDS": str(low),
      "MAX_WORDS": str(high),
    }
  )
  return _render("discussion.md", values)


def render_grammar_prompt(ctx: Ctx, schema: dict[str, Any]) -> str:
  values = _common(ctx)
  values.update({"SOURCE_EXCERPT": truncate(ctx.source_text, 600), "GRAMMAR_POINTS": GRAMMAR_POINTS[ctx.difficulty_level], "SCHEMA": format_schema_block(schema)})
  return _render("grammar.md", values)


def render_pronunciation_words_prompt(ctx: Ctx, words: Sequence[str]) -> str:
  values = _common(ctx)
  values["WORDS"] = ", ".join(words)
  return _render("pronunciation_words.md", values)


def render_tongue_twister_prompt(ctx: Ctx, *, count: int, sounds: Sequence[str]) -> str:
  values = _common(ctx)
  values.update({"COUNT": str(count), "SOUNDS": ", ".join(sounds) or "th, r, l, v, w"})
  return _render("tongue_twisters.md", values)


def render_wrapup_prompt(ctx: Ctx) -> str:
  values = _common(ctx)
  values["LEVEL_INSTRUCTION"] = LEVEL_GUIDANCE[ctx.difficulty_level].warmup
  return _render("wrapup.md", values)
