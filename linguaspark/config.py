"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

_SUPPORTED_PROVIDERS = frozenset({"gemini", "openrouter"})


@dataclass(frozen=True)
class Settings:
  """Typed settings for the lesson engine."""

  environment: str
  debug: bool
  provider: str
  model: str | None
  temperature: float
  max_tokens: int
  request_timeout_seconds: float
  log_dir: str
  log_max_bytes: int
  log_backup_count: int
  log_prompts: bool
  gemini_api_key: str | None
  openrouter_api_key: str | None


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  return value or None


def _parse_int(name: str, default: int, *, minimum: int) -> int:
  raw = os.getenv(name)
  if raw is None or not raw.strip():
    return default
  try:
    value = int(raw)
  except ValueError as exc:
    raise ValueError(f"{name} must be an integer.") from exc
  if value < minimum:
    raise ValueError(f"{name} must be >= {minimum}.")
  return value


def _parse_float(name: str, default: float, *, minimum: float, maximum: float | None = None) -> float:
  raw = os.getenv(name)
  if raw is None or not raw.strip():
    return default
  try:
    value = float(raw)
  except ValueError as exc:
    raise ValueError(f"{name} must be a number.") from exc
  if value < minimum or (maximum is not None and value > maximum):
    bounds = f"between {minimum} and {maximum}" if maximum is not None else f">= {minimum}"
    raise ValueError(f"{name} must be {bounds}.")
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("LINGUASPARK_ENV", "development").lower()
  debug = _parse_bool(os.getenv("LINGUASPARK_DEBUG"))

  provider = os.getenv("LINGUASPARK_PROVIDER", "gemini").strip().lower()
  if provider not in _SUPPORTED_PROVIDERS:
    raise ValueError(f"LINGUASPARK_PROVIDER must be one of: {', '.join(sorted(_SUPPORTED_PROVIDERS))}.")

  return Settings(
    environment=environment,
    debug=debug,
    provider=provider,
    model=_optional_str(os.getenv("LINGUASPARK_MODEL")),
    temperature=_parse_float("LINGUASPARK_TEMPERATURE", 0.7, minimum=0.0, maximum=2.0),
    max_tokens=_parse_int("LINGUASPARK_MAX_TOKENS", 1000, minimum=1),
    request_timeout_seconds=_parse_float("LINGUASPARK_REQUEST_TIMEOUT_SECONDS", 60.0, minimum=1.0),
    log_dir=os.getenv("LINGUASPARK_LOG_DIR", "./logs").strip(),
    log_max_bytes=_parse_int("LINGUASPARK_LOG_MAX_BYTES", 5242880, minimum=1),
    log_backup_count=_parse_int("LINGUASPARK_LOG_BACKUP_COUNT", 10, minimum=0),
    # Prompt bodies stay out of logs unless enabled.
    log_prompts=_parse_bool(os.getenv("LINGUASPARK_LOG_PROMPTS")),
    gemini_api_key=_optional_str(os.getenv("GEMINI_API_KEY")),
    openrouter_api_key=_optional_str(os.getenv("OPENROUTER_API_KEY")),
  )
