"""Tests for section generators and their output parsing."""

from __future__ import annotations

import json

import pytest

from linguaspark.ai.agents import (
  ComprehensionGenerator,
  DialogueFillGapGenerator,
  DialoguePracticeGenerator,
  GrammarGenerator,
  PronunciationGenerator,
  VocabularyGenerator,
  WarmupGenerator,
)
from linguaspark.ai.agents.base import camelize_keys
from linguaspark.ai.agents.dialogue import GAP_MARKER, lesson_vocabulary, parse_dialogue
from linguaspark.ai.agents.pronunciation import select_challenging_words
from linguaspark.ai.pipeline.content import ReadingSection, VocabularyEntry, VocabularySection
from linguaspark.ai.pipeline.contracts import CEFRLevel, GeneratedSection, GenerationInstruction, SectionKind
from linguaspark.ai.providers.base import GenerationParams

INITIAL = GenerationInstruction()


def _regeneration(attempt: int, *adjustments: str) -> GenerationInstruction:
  return GenerationInstruction(attempt=attempt, variant="regeneration", adjustments=adjustments)


def test_regeneration_cools_temperature(scripted_model) -> None:
  generator = WarmupGenerator(model=scripted_model({}), params=GenerationParams(temperature=0.7))
  assert generator.params_for(INITIAL).temperature == 0.7
  assert generator.params_for(_regeneration(2)).temperature == 0.5
  assert generator.params_for(_regeneration(3)).temperature == 0.3

  cold = WarmupGenerator(model=scripted_model({}), params=GenerationParams(temperature=0.3))
  assert cold.params_for(_regeneration(3)).temperature == 0.2


@pytest.mark.anyio
async def test_warmup_appends_adjustments_on_regeneration(scripted_model, canned, make_context) -> None:
  model = scripted_model({("warmup", "questions"): canned["warmup"]})
  generator = WarmupGenerator(model=model)
  section = await generator.generate(make_context(), {}, _regeneration(2, "Generate exactly 3 questions, not 2."))

  assert len(section.content.questions) == 3
  assert section.tokens_used == 10
  call = model.calls[0]
  assert call.attempt == 2
  assert "IMPORTANT: a previous attempt was rejected" in call.prompt
  assert "- Generate exactly 3 questions, not 2." in call.prompt


@pytest.mark.anyio
async def test_initial_prompt_has_no_regeneration_addendum(scripted_model, canned, make_context) -> None:
  model = scripted_model({("warmup", "questions"): canned["warmup"]})
  await WarmupGenerator(model=model).generate(make_context(), {}, INITIAL)
  assert "previous attempt" not in model.calls[0].prompt


@pytest.mark.anyio
async def test_vocabulary_trims_examples_to_level_count(scripted_model, make_context) -> None:
  entries = [{"word": " Champion ", "definition": "The winner.", "examples": [f"The champion won game {index}." for index in range(7)]}]
  model = scripted_model({("vocabulary", "entries"): json.dumps({"words": entries})})
  section = await VocabularyGenerator(model=model).generate(make_context(CEFRLevel.A1), {}, INITIAL)

  entry = section.content.words[0]
  assert entry.word == "champion"
  assert len(entry.examples) == 5
  assert section.generation_strategy == "progressive"
  assert "EXACTLY 5 example sentences" in model.calls[0].prompt


@pytest.mark.anyio
async def test_vocabulary_unparsable_output_yields_empty_content(scripted_model, make_context) -> None:
  model = scripted_model({("vocabulary", "entries"): "Sorry, I cannot help with that."})
  section = await VocabularyGenerator(model=model).generate(make_context(), {}, INITIAL)
  assert section.generation_strategy == "unparsed"
  assert section.content.words == []


@pytest.mark.anyio
async def test_grammar_accepts_snake_case_and_flat_explanation(scripted_model, make_context) -> None:
  payload = {
    "grammar_point": "Past simple",
    "explanation": "Use it for finished actions in the past.",
    "examples": [" The crowd cheered. "],
    "exercises": [{"prompt": "He ___ (win).", "answer": " won "}],
  }
  model = scripted_model({("grammar", "grammar_point"): f"```json\n{json.dumps(payload)}\n```"})
  section = await GrammarGenerator(model=model).generate(make_context(), {}, INITIAL)

  content = section.content
  assert content.grammar_point == "Past simple"
  assert content.explanation.usage == "Use it for finished actions in the past."
  assert content.explanation.form == ""
  assert content.examples == ["The crowd cheered."]
  assert content.exercises[0].answer == "won"


def test_camelize_keys_is_recursive() -> None:
  assert camelize_keys({"grammar_point": 1, "exercises": [{"level_notes": 2}]}) == {"grammarPoint": 1, "exercises": [{"levelNotes": 2}]}


def test_parse_dialogue_normalises_lines() -> None:
  text = "\n".join(
    [
      "Here is your dialogue:",
      "**Student**: Did you see the ___ yesterday?",
      "TUTOR: Yes, it was *great*.",
      "Follow-up: What did you enjoy?",
      "Answers: match; game",
    ]
  )
  lines, follow_ups, answers = parse_dialogue(text)

  assert [(line.speaker, line.text) for line in lines] == [("Student", f"Did you see the {GAP_MARKER} yesterday?"), ("Tutor", "Yes, it was great.")]
  assert follow_ups == ["What did you enjoy?"]
  assert answers == ["match", "game"]


@pytest.mark.anyio
async def test_dialogue_variants_split_follow_ups_and_answers(scripted_model, canned, make_context) -> None:
  model = scripted_model({("dialoguePractice", "dialogue"): canned["dialogue"], ("dialogueFillGap", "dialogue"): canned["fill_gap"]})
  practice = await DialoguePracticeGenerator(model=model).generate(make_context(), {}, INITIAL)
  fill_gap = await DialogueFillGapGenerator(model=model).generate(make_context(), {}, INITIAL)

  assert len(practice.content.follow_up_questions) == 3
  assert practice.content.answers == []
  assert fill_gap.content.follow_up_questions == []
  assert fill_gap.content.answers == ["champion", "pressure", "achievement"]


def test_lesson_vocabulary_prefers_accepted_section(make_context) -> None:
  context = make_context()
  assert lesson_vocabulary(context, {}) == list(context.key_vocabulary)

  accepted = GeneratedSection(section_name="vocabulary", content=VocabularySection(words=[VocabularyEntry(word="birdie")]))
  assert lesson_vocabulary(context, {SectionKind.VOCABULARY: accepted}) == ["birdie"]


@pytest.mark.anyio
async def test_comprehension_reads_accepted_passage(scripted_model, canned, make_context) -> None:
  model = scripted_model({("comprehension", "questions"): canned["comprehension"]})
  reading = GeneratedSection(section_name="reading", content=ReadingSection(passage="A unique passage about a rainy golf day."))
  section = await ComprehensionGenerator(model=model).generate(make_context(), {SectionKind.READING: reading}, INITIAL)

  assert len(section.content.questions) == 5
  assert "A unique passage about a rainy golf day." in model.calls[0].prompt


@pytest.mark.anyio
async def test_pronunciation_makes_two_calls(scripted_model, canned, make_context) -> None:
  model = scripted_model({("pronunciation", "words"): canned["pronunciation_words"], ("pronunciation", "tongue_twisters"): canned["tongue_twisters"]})
  section = await PronunciationGenerator(model=model).generate(make_context(), {}, INITIAL)

  assert [call.purpose for call in model.calls] == ["words", "tongue_twisters"]
  assert section.tokens_used == 20
  assert len(section.content.words) == 6
  assert len(section.content.tongue_twisters) == 3
  # Twister prompt targets the sounds found in the word blocks.
  assert "/tʃ/" in model.calls[1].prompt


def test_select_challenging_words() -> None:
  selected = select_challenging_words(["the", "cat", "through", "champion", "strengths"], 2)
  assert selected[0] == "through"
  assert len(selected) == 2
  assert select_challenging_words(["ok", "it's", "golf", "golf"], 5) == ["golf"]
