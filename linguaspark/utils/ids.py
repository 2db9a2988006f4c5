"""Identifier utilities."""

from __future__ import annotations

import time
import uuid

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_request_id() -> str:
  """Return a new lesson-generation request identifier."""
  return str(uuid.uuid4())


def _to_base36(value: int) -> str:
  if value == 0:
    return "0"
  digits: list[str] = []
  while value:
    value, rem = divmod(value, 36)
    digits.append(_BASE36[rem])
  return "".join(reversed(digits))


def generate_correlation_id(now_ms: int | None = None) -> str:
  """Return a support-facing error id like ERR_LX3K2P1Q_9F2C4A1B."""
  stamp = now_ms if now_ms is not None else int(time.time() * 1000)
  suffix = uuid.uuid4().hex[:8]
  return f"ERR_{_to_base36(stamp)}_{suffix}".upper()
