"""LinguaSpark progressive lesson generation engine."""
