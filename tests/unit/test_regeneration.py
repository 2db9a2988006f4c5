"""Tests for the per-section regeneration controller."""

from __future__ import annotations

import pytest

from linguaspark.ai.errors import ErrorKind, ProviderError
from linguaspark.ai.pipeline.contracts import SectionKind, ValidationIssue, ValidationResult
from linguaspark.ai.providers.base import GenerationParams
from linguaspark.ai.providers.guarded import GuardedModel
from linguaspark.ai.regeneration import (
  MAX_ATTEMPTS,
  AttemptRecord,
  RegenerationController,
  SectionState,
  adjustments_for,
  select_best,
)
from linguaspark.ai.sections import SECTION_SPECS

DISCUSSION = SECTION_SPECS[SectionKind.DISCUSSION]
WARMUP = SECTION_SPECS[SectionKind.WARMUP]
VOCABULARY = SECTION_SPECS[SectionKind.VOCABULARY]
PRONUNCIATION = SECTION_SPECS[SectionKind.PRONUNCIATION]


def _first_lines(text: str, count: int) -> str:
  return "\n".join(text.splitlines()[:count])


@pytest.mark.anyio
async def test_valid_first_attempt_is_accepted(scripted_model, canned, make_context) -> None:
  inner = scripted_model({("discussion", "questions"): canned["discussion"]})
  outcome = await RegenerationController().run(DISCUSSION, make_context(), {}, GuardedModel(inner))

  assert outcome.state is SectionState.ACCEPTED
  assert outcome.report.attempt_count == 1
  assert not outcome.report.regenerated
  assert outcome.report.tokens_used == 10


@pytest.mark.anyio
async def test_short_discussion_is_regenerated_with_count_feedback(scripted_model, canned, make_context) -> None:
  inner = scripted_model({("discussion", "questions"): [_first_lines(canned["discussion"], 4), canned["discussion"]]})
  outcome = await RegenerationController().run(DISCUSSION, make_context(), {}, GuardedModel(inner))

  report = outcome.report
  assert outcome.state is SectionState.ACCEPTED
  assert report.attempt_count == 2
  assert report.regenerated
  assert report.accepted_attempt == 2
  assert report.tokens_used == 20
  assert len(outcome.section.content.questions) == 5
  assert "Generate exactly 5 questions, not 4." in inner.calls[1].prompt
  assert inner.calls[1].attempt == 2


@pytest.mark.anyio
async def test_exhausted_section_keeps_best_attempt(scripted_model, make_context) -> None:
  weak = "1. What happened at the end of the tournament?"
  better = "1. Have you ever watched a golf match?\n2. How do you usually relax after a long day?"
  inner = scripted_model({("warmup", "questions"): [weak, better, weak]})
  outcome = await RegenerationController().run(WARMUP, make_context(), {}, GuardedModel(inner))

  assert outcome.state is SectionState.EXHAUSTED
  assert outcome.report.attempt_count == MAX_ATTEMPTS
  assert outcome.report.accepted_attempt == 2
  assert outcome.section.content.questions == ["Have you ever watched a golf match?", "How do you usually relax after a long day?"]
  assert outcome.report.issue_count == len(outcome.validation.errors)
  assert not outcome.report.placeholder


def _record(attempt: int, score: int) -> AttemptRecord:
  return AttemptRecord(attempt=attempt, validation=ValidationResult(is_valid=False, score=score))


def test_select_best_prefers_earliest_on_ties() -> None:
  records = [_record(1, 70), _record(2, 70), _record(3, 60)]
  assert select_best(records).attempt == 1
  assert select_best([_record(1, 50), _record(2, 75)]).attempt == 2


def test_select_best_ignores_failed_calls() -> None:
  failed = AttemptRecord(attempt=1, error=ProviderError("boom", kind=ErrorKind.UNKNOWN))
  assert select_best([failed]) is None
  assert select_best([failed, _record(2, 40)]).attempt == 2


def test_adjustments_use_error_suggestions() -> None:
  issues = (
    ValidationIssue(kind="question_count", severity="error", description="Wrong count", suggestion="Generate exactly 5 questions, not 4."),
    ValidationIssue(kind="missing_question_mark", severity="error", description="Question 2 does not end with a question mark"),
    ValidationIssue(kind="variety_issue", severity="warning", description="Limited variety", suggestion="Vary openers."),
  )
  record = AttemptRecord(attempt=1, validation=ValidationResult(is_valid=False, issues=issues, score=55))
  assert adjustments_for(record) == ("Generate exactly 5 questions, not 4.", "Question 2 does not end with a question mark")


@pytest.mark.anyio
async def test_quota_error_aborts_without_retry(scripted_model, make_context) -> None:
  inner = scripted_model({("discussion", "questions"): RuntimeError("429 Too Many Requests")})
  with pytest.raises(ProviderError) as excinfo:
    await RegenerationController().run(DISCUSSION, make_context(), {}, GuardedModel(inner))

  assert excinfo.value.kind is ErrorKind.QUOTA_EXCEEDED
  assert len(inner.calls) == 1


@pytest.mark.anyio
async def test_network_error_consumes_an_attempt(scripted_model, canned, make_context) -> None:
  inner = scripted_model({("discussion", "questions"): [ConnectionError("connection reset by peer"), canned["discussion"]]})
  outcome = await RegenerationController().run(DISCUSSION, make_context(), {}, GuardedModel(inner))

  assert outcome.report.attempt_count == 2
  assert outcome.report.accepted_attempt == 2
  assert outcome.report.error_kinds == ("NETWORK_ERROR",)
  assert "The previous request failed (NETWORK_ERROR)" in inner.calls[1].prompt


@pytest.mark.anyio
async def test_partial_attempt_tokens_are_reported(scripted_model, canned, make_context) -> None:
  inner = scripted_model(
    {
      ("pronunciation", "words"): canned["pronunciation_words"],
      ("pronunciation", "tongue_twisters"): [ConnectionError("connection reset by peer"), canned["tongue_twisters"]],
    }
  )
  outcome = await RegenerationController().run(PRONUNCIATION, make_context(), {}, GuardedModel(inner))

  assert outcome.report.attempt_count == 2
  assert outcome.report.error_kinds == ("NETWORK_ERROR",)
  assert len(inner.calls) == 4
  assert outcome.report.tokens_used == 30
  assert outcome.section.tokens_used == 20


@pytest.mark.anyio
async def test_all_attempts_failing_raise_last_error(scripted_model, make_context) -> None:
  inner = scripted_model({("discussion", "questions"): [TimeoutError("read timed out")]})
  with pytest.raises(ProviderError) as excinfo:
    await RegenerationController().run(DISCUSSION, make_context(), {}, GuardedModel(inner))

  assert excinfo.value.kind is ErrorKind.NETWORK_ERROR
  assert len(inner.calls) == MAX_ATTEMPTS


@pytest.mark.anyio
async def test_empty_content_is_replaced_by_placeholder(scripted_model, make_context) -> None:
  inner = scripted_model({("vocabulary", "entries"): "I could not produce vocabulary."})
  context = make_context()
  outcome = await RegenerationController().run(VOCABULARY, context, {}, GuardedModel(inner))

  assert outcome.state is SectionState.EXHAUSTED
  assert outcome.report.placeholder
  assert outcome.section.generation_strategy == "placeholder"
  assert [entry.word for entry in outcome.section.content.words] == list(context.key_vocabulary)
  assert len(inner.calls) == MAX_ATTEMPTS


@pytest.mark.anyio
async def test_base_params_keep_larger_section_budget(scripted_model, canned, make_context) -> None:
  inner = scripted_model({("vocabulary", "entries"): canned["vocabulary"](make_context().difficulty_level)})
  controller = RegenerationController(base_params=GenerationParams(temperature=0.5, max_tokens=500))
  await controller.run(VOCABULARY, make_context(), {}, GuardedModel(inner))

  assert inner.calls[0].params == GenerationParams(temperature=0.5, max_tokens=2000)
