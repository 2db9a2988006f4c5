"""Quality report sinks.

The orchestrator hands every finished LessonQualityReport to an injected sink.
Sinks own whatever happens next; the core keeps no counters of its own.
"""

from __future__ import annotations

import logging
from typing import Protocol

from linguaspark.ai.pipeline.contracts import LessonQualityReport

logger = logging.getLogger(__name__)


class QualityMetricsSink(Protocol):
  def publish(self, report: LessonQualityReport) -> None:
    """Receive a finalized report for one lesson request."""


class LoggingQualitySink:
  """Write one summary line per lesson and one line per section."""

  def __init__(self, log: logging.Logger | None = None) -> None:
    self._logger = log or logger

  def publish(self, report: LessonQualityReport) -> None:
    self._logger.info(
      "Lesson %s quality: score=%d attempts=%d regenerations=%d tokens=%d time=%dms",
      report.request_id,
      report.overall_score,
      report.total_attempts,
      report.total_regenerations,
      report.total_tokens,
      report.total_generation_time_ms,
    )
    for section in report.sections:
      self._logger.info(
        "  %s: score=%d attempts=%d errors=%d warnings=%d placeholder=%s",
        section.section_name,
        section.validation_score,
        section.attempt_count,
        section.issue_count,
        section.warning_count,
        section.placeholder,
      )


class InMemoryQualitySink:
  """Keep published reports in a list; one instance per consumer."""

  def __init__(self) -> None:
    self.reports: list[LessonQualityReport] = []

  def publish(self, report: LessonQualityReport) -> None:
    self.reports.append(report)

  @property
  def last(self) -> LessonQualityReport | None:
    return self.reports[-1] if self.reports else None
