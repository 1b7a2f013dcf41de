"""LLM backends and the ceiling-ladder retry policy."""
