"""Core domain models."""
