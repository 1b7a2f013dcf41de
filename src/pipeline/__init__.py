"""Prompt assembly, output normalization and the generation orchestrator."""
