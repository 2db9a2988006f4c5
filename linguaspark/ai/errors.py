"""Error taxonomy and classification for generation provider failures."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from linguaspark.utils.ids import generate_correlation_id


class ErrorKind(str, Enum):
  """Closed set of provider failure categories."""

  QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
  CONTENT_ISSUE = "CONTENT_ISSUE"
  NETWORK_ERROR = "NETWORK_ERROR"
  UNKNOWN = "UNKNOWN"


_QUOTA_STATUSES = frozenset({429})
_NETWORK_STATUSES = frozenset({0, 408, 502, 503, 504})
_CONTENT_STATUSES = frozenset({400, 422})

_QUOTA_HINTS: tuple[str, ...] = (
  "quota",
  "rate limit",
  "ratelimit",
  "too many requests",
  "limit exceeded",
  "resource_exhausted",
  "resource exhausted",
  "429",
)

_NETWORK_HINTS: tuple[str, ...] = (
  "network",
  "connection",
  "timeout",
  "timed out",
  "econnrefused",
  "econnreset",
  "enotfound",
  "etimedout",
  "service unavailable",
  "bad gateway",
  "unavailable",
  "deadline_exceeded",
)

_CONTENT_HINTS: tuple[str, ...] = (
  "invalid input",
  "invalid_argument",
  "invalid argument",
  "invalid content",
  "content too short",
  "content validation",
  "unsupported format",
  "parsing error",
  "failed to parse",
  "safety",
  "blocked",
)


class ProviderError(RuntimeError):
  """A classified failure of a generation provider call."""

  def __init__(self, message: str, *, kind: ErrorKind, status: int | None = None) -> None:
    super().__init__(message)
    self.kind = kind
    self.status = status


class GenerationCancelledError(RuntimeError):
  """Raised when a caller cancels a lesson request between provider calls."""


def _match_hint(message: str, hints: Iterable[str]) -> bool:
  """Return True when any hint appears in the message."""
  # Scan for known substrings to categorize provider failures.
  for hint in hints:
    if hint in message:
      return True
  return False


def _status_of(exc: BaseException) -> int | None:
  # openai exposes status_code; google-genai exposes an integer code.
  for attr in ("status", "status_code", "code"):
    value = getattr(exc, attr, None)
    if isinstance(value, int) and not isinstance(value, bool):
      return value
  return None


def classify_error(exc: BaseException) -> ErrorKind:
  """Map any provider-call exception onto the error taxonomy.

  Checks run quota first, then network, then content, so a 429 that also
  mentions a timeout is still reported as a quota problem.
  """
  if isinstance(exc, ProviderError):
    return exc.kind
  if isinstance(exc, (asyncio.TimeoutError, TimeoutError, ConnectionError)):
    return ErrorKind.NETWORK_ERROR

  status = _status_of(exc)
  # Include the provider's symbolic status (e.g. RESOURCE_EXHAUSTED) alongside the message.
  text = " ".join(str(part) for part in (exc, getattr(exc, "status", ""), type(exc).__name__) if part).lower()

  if status in _QUOTA_STATUSES or _match_hint(text, _QUOTA_HINTS):
    return ErrorKind.QUOTA_EXCEEDED
  if status in _NETWORK_STATUSES or _match_hint(text, _NETWORK_HINTS):
    return ErrorKind.NETWORK_ERROR
  if status in _CONTENT_STATUSES or _match_hint(text, _CONTENT_HINTS):
    return ErrorKind.CONTENT_ISSUE
  return ErrorKind.UNKNOWN


def to_provider_error(exc: BaseException) -> ProviderError:
  """Wrap an arbitrary provider exception in a classified ProviderError."""
  if isinstance(exc, ProviderError):
    return exc
  message = str(exc) or type(exc).__name__
  return ProviderError(message, kind=classify_error(exc), status=_status_of(exc))


@dataclass(frozen=True)
class UserErrorMessage:
  """Human-readable failure description surfaced to the caller."""

  title: str
  message: str
  actionable_steps: tuple[str, ...]
  support_contact: str | None = None


_SUPPORT_CONTACT = "support@linguaspark.com"

_USER_MESSAGES: dict[ErrorKind, UserErrorMessage] = {
  ErrorKind.QUOTA_EXCEEDED: UserErrorMessage(
    title="API Quota Exceeded",
    message="API quota exceeded, please try again later",
    actionable_steps=("Wait a few minutes before trying again", "Try generating a shorter lesson", "Contact support if the issue persists"),
    support_contact=_SUPPORT_CONTACT,
  ),
  ErrorKind.CONTENT_ISSUE: UserErrorMessage(
    title="Content Processing Error",
    message="Unable to process this content, please try different text",
    actionable_steps=(
      "Ensure the content has at least 100 words",
      "Try selecting different text",
      "Check that the content is in a supported language",
      "Remove any special characters or formatting",
    ),
  ),
  ErrorKind.NETWORK_ERROR: UserErrorMessage(
    title="Connection Error",
    message="Connection error, please check your internet and try again",
    actionable_steps=("Check your internet connection", "Wait a moment and try again", "Contact support if the problem continues"),
  ),
  ErrorKind.UNKNOWN: UserErrorMessage(
    title="Service Temporarily Unavailable",
    message="AI service temporarily unavailable, please try again later",
    actionable_steps=("Wait a few minutes and try again", "Contact support with the error ID below"),
    support_contact=_SUPPORT_CONTACT,
  ),
}


def user_message_for(kind: ErrorKind) -> UserErrorMessage:
  """Return the caller-facing message for an error kind."""
  return _USER_MESSAGES[kind]


class LessonGenerationError(RuntimeError):
  """Raised when a lesson request cannot be completed; carries a typed kind and correlation id."""

  def __init__(self, kind: ErrorKind, technical_message: str, *, section: str | None = None, logs: list[str] | None = None, correlation_id: str | None = None) -> None:
    self.kind = kind
    self.user_message = user_message_for(kind)
    self.correlation_id = correlation_id or generate_correlation_id()
    self.technical_message = technical_message
    self.section = section
    # Keep a snapshot of logs to surface in support tooling.
    self.logs = logs or []
    super().__init__(f"{kind.value}: {self.user_message.message} (error id {self.correlation_id})")

  def to_payload(self) -> dict[str, Any]:
    """Return a caller-safe error payload without technical details."""
    payload: dict[str, Any] = {
      "kind": self.kind.value,
      "title": self.user_message.title,
      "message": self.user_message.message,
      "actionableSteps": list(self.user_message.actionable_steps),
      "errorId": self.correlation_id,
    }
    if self.user_message.support_contact:
      payload["supportContact"] = self.user_message.support_contact
    return payload

  def support_details(self) -> dict[str, Any]:
    """Return technical details for support staff and logs."""
    return {"errorId": self.correlation_id, "kind": self.kind.value, "section": self.section, "technicalMessage": self.technical_message}
