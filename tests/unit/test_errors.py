"""Tests for provider error classification and caller-facing payloads."""

from __future__ import annotations

import asyncio
import re

import pytest

from linguaspark.ai.errors import ErrorKind, LessonGenerationError, ProviderError, classify_error, to_provider_error, user_message_for


class _StatusError(Exception):
  def __init__(self, message: str, status_code: int) -> None:
    super().__init__(message)
    self.status_code = status_code


@pytest.mark.parametrize(
  ("exc", "expected"),
  [
    (_StatusError("Too Many Requests", 429), ErrorKind.QUOTA_EXCEEDED),
    (RuntimeError("RESOURCE_EXHAUSTED: quota for model exceeded"), ErrorKind.QUOTA_EXCEEDED),
    (asyncio.TimeoutError(), ErrorKind.NETWORK_ERROR),
    (ConnectionResetError("peer reset"), ErrorKind.NETWORK_ERROR),
    (_StatusError("upstream", 503), ErrorKind.NETWORK_ERROR),
    (RuntimeError("getaddrinfo ENOTFOUND api.example.com"), ErrorKind.NETWORK_ERROR),
    (_StatusError("bad request", 400), ErrorKind.CONTENT_ISSUE),
    (ValueError("Response blocked by safety filters"), ErrorKind.CONTENT_ISSUE),
    (RuntimeError("something odd"), ErrorKind.UNKNOWN),
  ],
)
def test_classify_error(exc: BaseException, expected: ErrorKind) -> None:
  assert classify_error(exc) is expected


def test_quota_wins_over_network_hints() -> None:
  exc = _StatusError("rate limit reached, connection will be retried after timeout", 429)
  assert classify_error(exc) is ErrorKind.QUOTA_EXCEEDED


def test_to_provider_error_keeps_existing_error() -> None:
  error = ProviderError("nope", kind=ErrorKind.CONTENT_ISSUE)
  assert to_provider_error(error) is error


def test_to_provider_error_records_status() -> None:
  error = to_provider_error(_StatusError("slow down", 429))
  assert error.kind is ErrorKind.QUOTA_EXCEEDED
  assert error.status == 429


def test_lesson_error_payload_hides_technical_details() -> None:
  exc = LessonGenerationError(ErrorKind.QUOTA_EXCEEDED, "429 from upstream key abc123", section="warmup")
  payload = exc.to_payload()

  assert payload["kind"] == "QUOTA_EXCEEDED"
  assert payload["title"] == "API Quota Exceeded"
  assert payload["actionableSteps"]
  assert payload["supportContact"] == user_message_for(ErrorKind.QUOTA_EXCEEDED).support_contact
  assert "abc123" not in str(payload)
  assert re.fullmatch(r"ERR_[0-9A-Z]+_[0-9A-F]{8}", payload["errorId"])
  assert exc.support_details()["technicalMessage"] == "429 from upstream key abc123"


def test_network_error_payload_has_no_support_contact() -> None:
  payload = LessonGenerationError(ErrorKind.NETWORK_ERROR, "timeout").to_payload()
  assert "supportContact" not in payload
