"""Tests for the section table and its dependency order."""

from __future__ import annotations

import dataclasses

import pytest

from linguaspark.ai.pipeline.contracts import CEFRLevel, SectionKind
from linguaspark.ai.sections import SECTION_SPECS, SectionGraphError, resolve_section_order, topological_order


def test_resolved_order_matches_lesson_flow() -> None:
  assert [kind.value for kind in resolve_section_order()] == [
    "warmup",
    "vocabulary",
    "reading",
    "comprehension",
    "dialoguePractice",
    "dialogueFillGap",
    "discussion",
    "grammar",
    "pronunciation",
    "wrapup",
  ]


def test_dependencies_precede_dependents() -> None:
  order = resolve_section_order()
  position = {kind: index for index, kind in enumerate(order)}
  for kind, spec in SECTION_SPECS.items():
    for dependency in spec.dependencies:
      assert position[dependency] < position[kind]


def test_every_section_kind_has_a_spec() -> None:
  assert set(SECTION_SPECS) == set(SectionKind)


def test_cycle_is_rejected() -> None:
  specs = dict(SECTION_SPECS)
  specs[SectionKind.VOCABULARY] = dataclasses.replace(specs[SectionKind.VOCABULARY], dependencies=(SectionKind.WRAPUP,))
  with pytest.raises(SectionGraphError, match="cycle"):
    topological_order(specs)


def test_unknown_dependency_is_rejected() -> None:
  specs = {kind: spec for kind, spec in SECTION_SPECS.items() if kind is not SectionKind.READING}
  with pytest.raises(SectionGraphError, match="unknown section reading"):
    topological_order(specs)


def test_priority_breaks_ties_between_independent_sections() -> None:
  specs = dict(SECTION_SPECS)
  specs[SectionKind.DISCUSSION] = dataclasses.replace(specs[SectionKind.DISCUSSION], priority=0)
  order = topological_order(specs)
  assert order[0] is SectionKind.DISCUSSION


@pytest.mark.parametrize("kind", list(SectionKind))
def test_placeholders_have_content(make_context, kind: SectionKind) -> None:
  spec = SECTION_SPECS[kind]
  content = spec.placeholder(make_context(CEFRLevel.A2))
  if kind in (SectionKind.DIALOGUE_PRACTICE, SectionKind.DIALOGUE_FILL_GAP):
    # Dialogue placeholders carry only a role-play instruction.
    assert "golf and sport" in content.instruction
  else:
    assert spec.has_content(content)
