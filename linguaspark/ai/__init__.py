"""Lesson generation pipeline: providers, section generators, validators and orchestration."""
