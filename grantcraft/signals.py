"""
Signal Definitions — Data Structures

A signal is a named, weighted, pure check that detects one rubric
concept in a draft. Signals hold no state; the same Signal object is
invoked for every draft the process ever scores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True)
class Criterion:
    """One top-level evaluation axis of a rubric."""
    id: str                 # e.g., "excellence"
    title: str              # e.g., "Excellence"
    max_score: float = 5.0
    threshold: float = 3.0


@dataclass(frozen=True)
class RawCheckResult:
    """What a single signal reports about a single draft."""
    found: bool
    confidence: float               # 0.0 to 1.0, saturation-scaled
    evidence: tuple[str, ...]       # <= 3 unique verbatim lines, <= 120 chars
    detail: str                     # Rendered verbatim in the report


@dataclass(frozen=True)
class Signal:
    """
    A static rubric check.

    `check` must be a pure function of the draft text. Weights are
    validated per criterion by SignalRegistry, never here.
    """
    id: str
    label: str
    description: str
    criterion: str
    weight: float
    required_for_threshold: bool
    section_hint: str
    how_to_fix: str
    time_estimate_minutes: int
    check: Callable[[str], RawCheckResult] = field(repr=False, compare=False)

    def run(self, draft: str) -> RawCheckResult:
        return self.check(draft)

    def describe(self) -> dict:
        """Public metadata, without the check internals."""
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "criterion": self.criterion,
            "weight": self.weight,
            "requiredForThreshold": self.required_for_threshold,
            "sectionHint": self.section_hint,
            "howToFix": self.how_to_fix,
            "timeEstimateMinutes": self.time_estimate_minutes,
        }
