"""Lenient JSON parsing helpers for provider outputs."""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

_FENCE_RE = re.compile(r"^\s*```(?:json|JSON)?\s*|\s*```\s*$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_UNQUOTED_KEY_RE = re.compile(r'([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)(\s*:)')
_DANGLING_KEY_RE = re.compile(r',\s*"[^"]*"\s*:?\s*$')


def strip_json_fences(raw: str) -> str:
  """Remove a surrounding markdown code fence, if present."""
  return _FENCE_RE.sub("", raw.strip())


def _extract_json_block(raw: str) -> str | None:
  """Return text from the first '{' or '[' to its balancing bracket, or to the end when truncated."""
  start = next((index for index, char in enumerate(raw) if char in "{["), None)
  if start is None:
    return None

  depth = 0
  in_string = False
  escape = False
  for index in range(start, len(raw)):
    char = raw[index]
    if in_string:
      if escape:
        escape = False
      elif char == "\\":
        escape = True
      elif char == '"':
        in_string = False
      continue
    if char == '"':
      in_string = True
    elif char in "{[":
      depth += 1
    elif char in "}]":
      depth -= 1
      if depth == 0:
        return raw[start : index + 1]

  # Unbalanced: hand the tail to the truncation repair pass.
  return raw[start:]


def _strip_trailing_commas(text: str) -> str:
  return _TRAILING_COMMA_RE.sub(r"\1", text)


def _quote_unquoted_keys(text: str) -> str:
  return _UNQUOTED_KEY_RE.sub(r'\1"\2"\3', text)


def _close_truncated(text: str) -> str:
  """Close an unterminated string and any open brackets left by a truncated response."""
  stack: list[str] = []
  in_string = False
  escape = False
  for char in text:
    if in_string:
      if escape:
        escape = False
      elif char == "\\":
        escape = True
      elif char == '"':
        in_string = False
      continue
    if char == '"':
      in_string = True
    elif char in "{[":
      stack.append("}" if char == "{" else "]")
    elif char in "}]" and stack:
      stack.pop()

  repaired = text + ('"' if in_string else "")
  # A dangling object key cannot be closed meaningfully, so drop it.
  if stack and stack[-1] == "}":
    repaired = _DANGLING_KEY_RE.sub("", repaired)
  repaired = repaired.rstrip().rstrip(",")
  return repaired + "".join(reversed(stack))


_RECOVERY_PASSES: tuple[Callable[[str], str], ...] = (
  _strip_trailing_commas,
  _quote_unquoted_keys,
  _close_truncated,
  _strip_trailing_commas,
)


def parse_json_with_fallback(raw: str) -> Any:
  """Parse JSON, applying cumulative recovery passes until one succeeds.

  Raises the last json.JSONDecodeError when nothing JSON-shaped can be recovered.
  """
  cleaned = strip_json_fences(raw)
  try:
    return json.loads(cleaned)
  except json.JSONDecodeError as exc:
    last_error = exc

  candidate = _extract_json_block(cleaned)
  if candidate is None:
    raise last_error

  for recover in (lambda text: text, *_RECOVERY_PASSES):
    candidate = recover(candidate)
    try:
      return json.loads(candidate)
    except json.JSONDecodeError as exc:
      last_error = exc

  raise last_error
