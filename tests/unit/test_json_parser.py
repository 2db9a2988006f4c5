"""Tests for the lenient JSON parser used on provider output."""

from __future__ import annotations

import json

import pytest

from linguaspark.ai.json_parser import parse_json_with_fallback, strip_json_fences


def test_plain_json_parses() -> None:
  assert parse_json_with_fallback('{"a": 1}') == {"a": 1}


def test_strips_markdown_fence() -> None:
  raw = '```json\n[{"word": "crowd"}]\n```'
  assert strip_json_fences(raw) == '[{"word": "crowd"}]'
  assert parse_json_with_fallback(raw) == [{"word": "crowd"}]


def test_extracts_object_from_surrounding_prose() -> None:
  raw = 'Here is the lesson context:\n{"title": "Golf", "themes": ["sport"]}\nHope this helps!'
  assert parse_json_with_fallback(raw) == {"title": "Golf", "themes": ["sport"]}


def test_repairs_trailing_commas_and_unquoted_keys() -> None:
  raw = '{title: "Golf", vocabulary: ["crowd", "course",],}'
  assert parse_json_with_fallback(raw) == {"title": "Golf", "vocabulary": ["crowd", "course"]}


def test_closes_truncated_output() -> None:
  raw = '{"title": "Golf", "vocabulary": ["crowd", "cour'
  assert parse_json_with_fallback(raw) == {"title": "Golf", "vocabulary": ["crowd", "cour"]}


def test_drops_dangling_key_when_truncated() -> None:
  raw = '{"title": "Golf", "summary": "A win.", "themes"'
  assert parse_json_with_fallback(raw) == {"title": "Golf", "summary": "A win."}


def test_raises_when_nothing_is_json() -> None:
  with pytest.raises(json.JSONDecodeError):
    parse_json_with_fallback("I cannot help with that.")
