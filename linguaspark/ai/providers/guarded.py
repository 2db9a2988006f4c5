"""Request-scoped wrapper around a model client."""

from __future__ import annotations

import asyncio
import logging
import time

from linguaspark.ai.errors import GenerationCancelledError, to_provider_error
from linguaspark.ai.providers.base import AIModel, GenerationParams, ModelResponse, tokens_from_usage
from linguaspark.telemetry.context import get_llm_call_context

logger = logging.getLogger(__name__)


class GuardedModel(AIModel):
  """Wrap a shared model client with the state that belongs to one lesson request.

  Checks the cancellation flag before every call, classifies failures into
  ProviderError, tallies tokens and logs each call against the active
  call context. One instance per request; nothing here is shared.
  """

  def __init__(self, inner: AIModel, *, cancel_event: asyncio.Event | None = None, log_prompts: bool = False) -> None:
    self.name: str = getattr(inner, "name", "unknown")
    self._inner = inner
    self._cancel_event = cancel_event
    self._log_prompts = log_prompts
    self.tokens_used = 0
    self.call_count = 0

  @property
  def cancelled(self) -> bool:
    return self._cancel_event is not None and self._cancel_event.is_set()

  def raise_if_cancelled(self) -> None:
    if self.cancelled:
      raise GenerationCancelledError("Lesson generation was cancelled by the caller.")

  async def generate(self, prompt: str, params: GenerationParams | None = None) -> ModelResponse:
    self.raise_if_cancelled()
    call_ctx = get_llm_call_context()
    label = f"{call_ctx.section}/{call_ctx.purpose}#{call_ctx.attempt}" if call_ctx else "unscoped"
    if self._log_prompts:
      logger.debug("Provider prompt (%s):\n%s", label, prompt)

    started = time.perf_counter()
    self.call_count += 1
    try:
      response = await self._inner.generate(prompt, params)
    except Exception as exc:
      error = to_provider_error(exc)
      logger.warning("Provider call failed (%s, model=%s, kind=%s): %s", label, self.name, error.kind.value, error)
      if error is exc:
        raise
      raise error from exc

    tokens = tokens_from_usage(response.usage)
    self.tokens_used += tokens
    elapsed_ms = int((time.perf_counter() - started) * 1000)
    logger.info("Provider call ok (%s, model=%s, tokens=%d, %dms)", label, self.name, tokens, elapsed_ms)
    return response
