"""Context helpers for correlating provider calls with the section that issued them."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True)
class LlmCallContext:
  """Capture upstream metadata so provider calls can be logged and faked consistently."""

  section: str
  purpose: str
  attempt: int
  request_id: str | None


_CURRENT_LLM_CONTEXT: ContextVar[LlmCallContext | None] = ContextVar("llm_call_context", default=None)


def get_llm_call_context() -> LlmCallContext | None:
  """Return the active call context, if any."""
  return _CURRENT_LLM_CONTEXT.get()


@contextmanager
def llm_call_context(*, section: str, purpose: str, attempt: int = 1, request_id: str | None = None) -> Iterator[LlmCallContext]:
  """Set contextual metadata for downstream provider calls and reset it afterward."""
  # Nested contexts inherit the request id so generators need not thread it through.
  if request_id is None:
    parent = _CURRENT_LLM_CONTEXT.get()
    request_id = parent.request_id if parent else None
  context = LlmCallContext(section=section, purpose=purpose, attempt=attempt, request_id=request_id)
  token = _CURRENT_LLM_CONTEXT.set(context)

  try:
    yield context

  finally:
    _CURRENT_LLM_CONTEXT.reset(token)
