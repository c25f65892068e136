"""Deterministic federal individual income tax engine."""

__version__ = "0.1.0"
