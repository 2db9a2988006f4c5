"""Section generator implementations."""

from linguaspark.ai.agents.base import SectionGenerator
from linguaspark.ai.agents.dialogue import DialogueFillGapGenerator, DialoguePracticeGenerator
from linguaspark.ai.agents.discussion import DiscussionGenerator
from linguaspark.ai.agents.grammar import GrammarGenerator
from linguaspark.ai.agents.pronunciation import PronunciationGenerator
from linguaspark.ai.agents.reading import ComprehensionGenerator, ReadingGenerator
from linguaspark.ai.agents.vocabulary import VocabularyGenerator
from linguaspark.ai.agents.warmup import WarmupGenerator
from linguaspark.ai.agents.wrapup import WrapupGenerator

__all__ = [
  "ComprehensionGenerator",
  "DialogueFillGapGenerator",
  "DialoguePracticeGenerator",
  "DiscussionGenerator",
  "GrammarGenerator",
  "PronunciationGenerator",
  "ReadingGenerator",
  "SectionGenerator",
  "VocabularyGenerator",
  "WarmupGenerator",
  "WrapupGenerator",
]
