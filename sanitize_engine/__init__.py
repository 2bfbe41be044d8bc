"""Deterministic one-way data sanitization engine."""

__version__ = "0.5.0"