# mindbalance/engine/errors.py
from __future__ import annotations

import math
from typing import Any


class ScoringInputError(ValueError):
    """
    Base class for caller-input errors raised by the scorer.

    Carries the offending field, its value and the expected domain so the
    request layer can build an actionable message without parsing text.
    """

    def __init__(self, field: str, value: Any, expected: str):
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"{field}={value!r} is invalid: expected {expected}")

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        value = self.value
        if isinstance(value, float) and not math.isfinite(value):
            value = repr(value)
        return {
            "error": self.code,
            "field": self.field,
            "value": value,
            "expected": self.expected,
        }


class InvalidWeight(ScoringInputError):
    pass


class SingularPhase(ScoringInputError):
    pass


class PhaseOutOfRange(ScoringInputError):
    pass


class InvalidClamp(ScoringInputError):
    pass


class InvalidThreshold(ScoringInputError):
    pass


class UnknownScoringRule(ScoringInputError):
    pass
