"""Deterministic test doubles shared across the suite."""
