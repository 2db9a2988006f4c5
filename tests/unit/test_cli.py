"""Tests for the command-line entry point."""

from __future__ import annotations

import json

import pytest

from linguaspark import cli
from linguaspark.ai.errors import ErrorKind, LessonGenerationError


def test_parser_defaults(tmp_path) -> None:
  args = cli.build_parser().parse_args([str(tmp_path / "article.txt")])
  assert (args.kind, args.level, args.language) == ("discussion", "B1", "English")


def test_parser_rejects_unknown_level(tmp_path) -> None:
  with pytest.raises(SystemExit):
    cli.build_parser().parse_args([str(tmp_path / "article.txt"), "--level", "C2"])


def test_main_prints_lesson_payload(monkeypatch, tmp_path, capsys, golf_source) -> None:
  source = tmp_path / "article.txt"
  source.write_text(golf_source, encoding="utf-8")
  captured = {}

  async def fake_generate(request):
    captured["request"] = request
    return {"lessonTitle": "Golf", "sections": {}, "qualityReport": []}

  monkeypatch.setattr(cli, "setup_logging", lambda settings: None)
  monkeypatch.setattr(cli, "_generate", fake_generate)

  assert cli.main([str(source), "--level", "A2", "--kind", "travel"]) == 0
  assert json.loads(capsys.readouterr().out)["lessonTitle"] == "Golf"
  assert captured["request"].proficiency_level.value == "A2"
  assert captured["request"].lesson_kind.value == "travel"


def test_main_reports_generation_errors(monkeypatch, tmp_path, capsys, golf_source) -> None:
  source = tmp_path / "article.txt"
  source.write_text(golf_source, encoding="utf-8")

  async def failing_generate(request):
    raise LessonGenerationError(ErrorKind.NETWORK_ERROR, "connection reset", section="reading")

  monkeypatch.setattr(cli, "setup_logging", lambda settings: None)
  monkeypatch.setattr(cli, "_generate", failing_generate)

  assert cli.main([str(source)]) == 1
  error = json.loads(capsys.readouterr().out)["error"]
  assert error["kind"] == "NETWORK_ERROR"
  assert error["errorId"].startswith("ERR_")
