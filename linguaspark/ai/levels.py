"""Per-level generation targets shared by prompts and validators."""

from __future__ import annotations

from dataclasses import dataclass

from linguaspark.ai.pipeline.contracts import CEFRLevel

A1, A2, B1, B2, C1 = CEFRLevel.A1, CEFRLevel.A2, CEFRLevel.B1, CEFRLevel.B2, CEFRLevel.C1

# Example sentences required per vocabulary word.
VOCABULARY_EXAMPLE_COUNTS: dict[CEFRLevel, int] = {A1: 5, A2: 5, B1: 4, B2: 3, C1: 2}

# Words per vocabulary example sentence.
EXAMPLE_WORD_RANGES: dict[CEFRLevel, tuple[int, int]] = {A1: (5, 10), A2: (8, 15), B1: (10, 18), B2: (12, 22), C1: (15, 25)}

# Words per dialogue line.
DIALOGUE_WORD_RANGES: dict[CEFRLevel, tuple[int, int]] = {A1: (3, 8), A2: (5, 12), B1: (8, 15), B2: (10, 20), C1: (12, 25)}

# Words per discussion question.
DISCUSSION_WORD_RANGES: dict[CEFRLevel, tuple[int, int]] = {A1: (4, 10), A2: (5, 12), B1: (6, 15), B2: (8, 18), C1: (10, 22)}

GRAMMAR_POINTS: dict[CEFRLevel, str] = {
  A1: "present simple, articles, basic prepositions",
  A2: "past simple, comparatives, modal verbs",
  B1: "present perfect, conditionals, passive voice",
  B2: "relative clauses, advanced conditionals, reported speech",
  C1: "subjunctive, cleft sentences, inversion",
}


@dataclass(frozen=True)
class LevelGuidance:
  """Prose guidance rendered into prompts for one level."""

  warmup: str
  discussion: str
  discussion_question_types: tuple[str, ...]
  dialogue_vocabulary: str
  dialogue_grammar: str
  reading: str


LEVEL_GUIDANCE: dict[CEFRLevel, LevelGuidance] = {
  A1: LevelGuidance(
    warmup="Use very simple present tense questions with basic vocabulary about personal experiences and familiar situations.",
    discussion="Simple question structures with basic vocabulary focusing on familiar topics and personal experiences.",
    discussion_question_types=('Yes/No questions: "Do you like...?", "Have you ever...?"', 'Simple Wh- questions: "What is your favorite...?", "Where do you...?"', 'Preference questions: "Which do you prefer...?"'),
    dialogue_vocabulary="Use only the most common everyday words (go, come, like, want, have, make, see, know, think).",
    dialogue_grammar="Use only simple present and simple past. No perfect tenses, no conditionals, no passive voice, no modal perfects such as 'would have'.",
    reading="Short sentences (8-12 words), present and past simple, very common words.",
  ),
  A2: LevelGuidance(
    warmup="Use simple questions with present and past tenses about personal experiences and everyday situations.",
    discussion="Simple questions with several tenses focusing on personal experiences and everyday situations.",
    discussion_question_types=('Opinion questions: "What do you think about...?"', 'Experience questions: "Can you describe...?"', 'Simple hypotheticals: "What would you do if...?"'),
    dialogue_vocabulary="Use simple, familiar vocabulary with common adjectives and adverbs (interesting, important, usually, often).",
    dialogue_grammar="Use present simple, past simple, present continuous and future with 'going to' or 'will'. No present perfect, no complex conditionals, no modal perfects.",
    reading="Clear sentences (10-14 words) joined with and, but, because.",
  ),
  B1: LevelGuidance(
    warmup="Use varied question structures with different tenses, including questions about opinions and experiences.",
    discussion="Varied question structures including opinion questions and comparisons.",
    discussion_question_types=('Opinion and justification: "Why do you think...?"', 'Comparison: "How does X compare to Y?"', 'Advantages and disadvantages: "What are the pros and cons of...?"'),
    dialogue_vocabulary="Use intermediate vocabulary with phrasal verbs (find out, deal with) and opinion expressions (I think, in my opinion).",
    dialogue_grammar="Use present perfect, past continuous and first conditional, with some relative clauses.",
    reading="Varied sentences (12-18 words) with some relative clauses and linking words.",
  ),
  B2: LevelGuidance(
    warmup="Use complex question structures, including hypothetical and analytical questions about experiences.",
    discussion="Complex question structures requiring analytical thinking and justification.",
    discussion_question_types=('Analytical: "To what extent do you agree that...?"', 'Evaluation: "What are the implications of...?"', 'Hypothetical: "How might the situation change if...?"'),
    dialogue_vocabulary="Use advanced vocabulary with collocations (take into account, make a decision) and nuanced expressions.",
    dialogue_grammar="Use relative clauses, second and third conditionals, passive voice and perfect tenses.",
    reading="Complex sentences (15-22 words) with subordinate clauses and idiomatic expressions.",
  ),
  C1: LevelGuidance(
    warmup="Use sophisticated question structures with abstract and evaluative questions that encourage critical thinking.",
    discussion="Sophisticated question structures requiring evaluative and critical thinking.",
    discussion_question_types=('Evaluative: "What are the broader implications of...?"', 'Critical analysis: "In what ways could this be interpreted...?"', 'Abstract reasoning: "What underlying assumptions...?"'),
    dialogue_vocabulary="Use nuanced, academic vocabulary with hedging language (arguably, to some extent) and idioms.",
    dialogue_grammar="Use inversion, cleft sentences, the subjunctive and advanced conditionals naturally.",
    reading="Sophisticated prose (18-28 words per sentence) with academic vocabulary.",
  ),
}
