"""Exceptions raised by the cribbage engine."""
from __future__ import annotations


class CribbageError(Exception):
    """Base class for all engine errors."""


class InvalidArgumentError(CribbageError, ValueError):
    """Bad input: unknown player id, missing card, card not held or not playable."""


class IllegalStateError(CribbageError, RuntimeError):
    """Operation attempted in the wrong phase or out of turn."""


__all__ = ["CribbageError", "InvalidArgumentError", "IllegalStateError"]
