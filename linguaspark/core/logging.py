"""Logging setup for the lesson engine."""

from __future__ import annotations

import logging
import logging.handlers
import sys
import time
import traceback
from pathlib import Path
from types import TracebackType

from linguaspark.config import Settings

LOG_LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

_LOG_FILE_PATH: Path | None = None


class TruncatedFormatter(logging.Formatter):
  """Formatter that truncates the stack trace to the last few lines."""

  # ruff: noqa: N802
  def formatException(self, ei: tuple[type[BaseException] | None, BaseException | None, TracebackType | None]) -> str:
    lines = traceback.format_exception(*ei)
    # Keep header + last 5 lines of traceback
    if len(lines) > 6:
      return "".join(lines[:1] + ["    ...\n"] + lines[-5:])
    return "".join(lines)


def _rotated_name(default_name: str) -> str:
  """Name backups lessons.log-1 instead of lessons.log.1."""
  base, _, num = default_name.rpartition(".")
  if num.isdigit():
    return f"{base}-{num}"
  return default_name


def _build_handlers(settings: Settings) -> tuple[logging.Handler, logging.Handler, Path]:
  log_dir = Path(settings.log_dir).resolve()
  try:
    log_dir.mkdir(parents=True, exist_ok=True)
  except OSError as exc:
    raise RuntimeError(f"Failed to create log directory at {log_dir}: {exc}") from exc

  log_path = log_dir / f"linguaspark_{time.strftime('%Y%m%d_%H%M%S')}.log"

  stream = logging.StreamHandler(sys.stdout)
  stream.setFormatter(TruncatedFormatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))

  file_handler = logging.handlers.RotatingFileHandler(log_path, encoding="utf-8", maxBytes=settings.log_max_bytes, backupCount=settings.log_backup_count)
  file_handler.namer = _rotated_name
  file_handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
  return stream, file_handler, log_path


def setup_logging(settings: Settings) -> Path:
  """Route every logger through stdout and a rotating log file; idempotent per process."""
  global _LOG_FILE_PATH
  if _LOG_FILE_PATH is not None:
    return _LOG_FILE_PATH

  stream_handler, file_handler, log_path = _build_handlers(settings)
  level = logging.DEBUG if settings.debug else logging.INFO
  logging.basicConfig(level=level, handlers=[stream_handler, file_handler], force=True)

  # Keep SDK transport logs at WARNING.
  for noisy in ("httpx", "httpcore", "google_genai", "openai"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

  _LOG_FILE_PATH = log_path
  logging.getLogger(__name__).info("Logging initialized. Writing to %s", log_path)
  return log_path
