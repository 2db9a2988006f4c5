"""Process-level plumbing shared by the engine."""
