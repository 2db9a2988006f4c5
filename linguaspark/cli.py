"""Command-line entry point: generate one lesson from a text file and print it as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from linguaspark.ai.errors import LessonGenerationError
from linguaspark.ai.orchestrator import LessonOrchestrator
from linguaspark.ai.pipeline.contracts import CEFRLevel, LessonKind, LessonRequest
from linguaspark.ai.router import get_model_from_settings
from linguaspark.config import get_settings
from linguaspark.core.logging import setup_logging
from linguaspark.telemetry.quality import LoggingQualitySink

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(prog="linguaspark", description="Generate a language lesson from a source text.")
  parser.add_argument("source", type=Path, help="Path to a UTF-8 text file, or '-' to read stdin.")
  parser.add_argument("--kind", choices=[kind.value for kind in LessonKind], default=LessonKind.DISCUSSION.value)
  parser.add_argument("--level", choices=[level.value for level in CEFRLevel], default=CEFRLevel.B1.value)
  parser.add_argument("--language", default="English", help="Target language of the lesson.")
  return parser


def _read_source(path: Path) -> str:
  if str(path) == "-":
    return sys.stdin.read()
  return path.read_text(encoding="utf-8")


async def _generate(request: LessonRequest) -> dict:
  settings = get_settings()
  orchestrator = LessonOrchestrator(get_model_from_settings(settings), metrics_sink=LoggingQualitySink(), settings=settings)
  lesson = await orchestrator.generate_lesson(request)
  return lesson.to_payload()


def main(argv: list[str] | None = None) -> int:
  args = build_parser().parse_args(argv)
  setup_logging(get_settings())
  request = LessonRequest(source_text=_read_source(args.source), lesson_kind=LessonKind(args.kind), proficiency_level=CEFRLevel(args.level), target_language=args.language)
  try:
    payload = asyncio.run(_generate(request))
  except LessonGenerationError as exc:
    logger.error("Lesson generation failed: %s", exc.support_details())
    print(json.dumps({"error": exc.to_payload()}, ensure_ascii=False, indent=2))
    return 1
  print(json.dumps(payload, ensure_ascii=False, indent=2))
  return 0


if __name__ == "__main__":
  sys.exit(main())
