"""Exceptions raised by the match-scoring engine."""

from __future__ import annotations


class ScoringError(Exception):
    """Base class for scoring failures."""


class InvalidInputError(ScoringError, ValueError):
    """A mandatory entity (startup or investor) was missing."""
