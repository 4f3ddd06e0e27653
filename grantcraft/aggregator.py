"""
Aggregator — Draft + Rubric → ReviewerReport

Runs every signal of every criterion against the draft, combines the
confidences into a weighted 0-5 score per criterion, and applies the
pass thresholds.

    raw      = Σ weight × confidence            (in [0, 1], weights sum to 1)
    score    = round_half_up(raw × 5, step 0.5)  (clamped to [0, 5])
    overall  = Σ criterion scores
    passed   = every score >= threshold AND overall >= rubric minimum

Failure policy: a signal that raises, or returns an out-of-contract
result, aborts the whole evaluation with SignalCheckError. There is no
partial report.

The engine has no minimum-length guard. Callers (API, CLI) reject short
drafts before calling in.
"""

from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from grantcraft.config import settings
from grantcraft.confidence import EVIDENCE_LIMIT, SNIPPET_MAX_CHARS
from grantcraft.errors import SignalCheckError
from grantcraft.logging import get_logger
from grantcraft.registry import Rubric, get_rubric
from grantcraft.report import render_markdown
from grantcraft.signals import Criterion, RawCheckResult, Signal

logger = get_logger("aggregator")

_HEADING_LINE = re.compile(r"^#{1,6}\s+\S", re.MULTILINE)


# ============================================================
# REPORT STRUCTURES
# ============================================================

@dataclass(frozen=True)
class SignalResult:
    """One signal's outcome for one draft, with the metadata the report shows."""
    signal_id: str
    label: str
    weight: float
    required_for_threshold: bool
    section_hint: str
    how_to_fix: str
    time_estimate_minutes: int
    found: bool
    confidence: float
    evidence: tuple[str, ...]
    detail: str

    @property
    def weighted_points(self) -> float:
        """Contribution to the criterion's 0-5 score, before rounding."""
        return self.weight * self.confidence * 5.0

    @property
    def missed_points(self) -> float:
        return self.weight * (1.0 - self.confidence) * 5.0

    def to_dict(self) -> dict:
        return {
            "signalId": self.signal_id,
            "label": self.label,
            "weight": self.weight,
            "requiredForThreshold": self.required_for_threshold,
            "sectionHint": self.section_hint,
            "howToFix": self.how_to_fix,
            "timeEstimateMinutes": self.time_estimate_minutes,
            "found": self.found,
            "confidence": self.confidence,
            "evidence": list(self.evidence),
            "detail": self.detail,
        }


@dataclass(frozen=True)
class CriterionResult:
    criterion_id: str
    criterion_title: str
    score: float
    raw_score: float
    threshold: float
    max_score: float
    signals: tuple[SignalResult, ...]

    @property
    def passed(self) -> bool:
        return self.score >= self.threshold

    def to_dict(self) -> dict:
        return {
            "criterionId": self.criterion_id,
            "criterionTitle": self.criterion_title,
            "score": self.score,
            "rawScore": self.raw_score,
            "threshold": self.threshold,
            "maxScore": self.max_score,
            "passed": self.passed,
            "signals": [s.to_dict() for s in self.signals],
        }


@dataclass(frozen=True)
class ReviewerReport:
    scheme_id: str
    scheme_name: str
    rubric_version: str
    overall_score: float
    max_possible_score: float
    min_overall_score: float
    overall_passed: bool
    criteria: tuple[CriterionResult, ...]
    draft_word_count: int
    draft_section_count: int
    missing_required: tuple[str, ...]
    markdown_report: str = ""

    def to_dict(self) -> dict:
        return {
            "schemeId": self.scheme_id,
            "schemeName": self.scheme_name,
            "rubricVersion": self.rubric_version,
            "overallScore": self.overall_score,
            "maxPossibleScore": self.max_possible_score,
            "minOverallScore": self.min_overall_score,
            "overallPassed": self.overall_passed,
            "criteria": [c.to_dict() for c in self.criteria],
            "draftWordCount": self.draft_word_count,
            "draftSectionCount": self.draft_section_count,
            "missingRequired": list(self.missing_required),
            "markdownReport": self.markdown_report,
        }


# ============================================================
# ARITHMETIC
# ============================================================

def round_half_step(value: float, step: str = "0.5") -> float:
    """
    Round to the nearest `step`, ties away from zero (half-up for positives).

    Decimal arithmetic on a 9-place quantized input keeps float noise
    (2.2499999999 for 2.25) from flipping boundary cases.
    """
    q = Decimal(step)
    d = Decimal(repr(round(value, 9)))
    units = (d / q).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(units * q)


def word_count(text: str) -> int:
    """Whitespace-delimited token count of the trimmed draft."""
    return len(text.strip().split())


def section_count(text: str) -> int:
    """Number of markdown heading lines (# through ######)."""
    return len(_HEADING_LINE.findall(text))


# ============================================================
# EVALUATION
# ============================================================

def run_signal(signal: Signal, draft: str) -> SignalResult:
    """Run one check and verify its result honours the contract."""
    try:
        raw = signal.run(draft)
    except Exception as e:
        logger.error(
            f"Signal check raised: {type(e).__name__}",
            extra={"signal_id": signal.id, "error": str(e), "error_type": type(e).__name__},
        )
        raise SignalCheckError(signal.id, f"{type(e).__name__}: {e}") from e

    _validate_raw(signal.id, raw)

    return SignalResult(
        signal_id=signal.id,
        label=signal.label,
        weight=signal.weight,
        required_for_threshold=signal.required_for_threshold,
        section_hint=signal.section_hint,
        how_to_fix=signal.how_to_fix,
        time_estimate_minutes=signal.time_estimate_minutes,
        found=raw.found,
        confidence=raw.confidence,
        evidence=tuple(raw.evidence),
        detail=raw.detail,
    )


def _validate_raw(signal_id: str, raw: object) -> None:
    if not isinstance(raw, RawCheckResult):
        raise SignalCheckError(signal_id, f"returned {type(raw).__name__}, not RawCheckResult")
    c = raw.confidence
    if not isinstance(c, (int, float)) or math.isnan(c) or not 0.0 <= c <= 1.0:
        raise SignalCheckError(signal_id, f"confidence {c!r} is outside [0, 1]")
    if len(raw.evidence) > EVIDENCE_LIMIT:
        raise SignalCheckError(signal_id, f"{len(raw.evidence)} evidence snippets (max {EVIDENCE_LIMIT})")
    if len(set(raw.evidence)) != len(raw.evidence):
        raise SignalCheckError(signal_id, "duplicate evidence snippets")
    if any(len(s) > SNIPPET_MAX_CHARS for s in raw.evidence):
        raise SignalCheckError(signal_id, f"evidence snippet longer than {SNIPPET_MAX_CHARS} chars")


def score_criterion(draft: str, rubric: Rubric, criterion: Criterion) -> CriterionResult:
    results = tuple(
        run_signal(signal, draft)
        for signal in rubric.registry.signals_for_criterion(criterion.id)
    )
    raw_score = sum(r.weight * r.confidence for r in results)
    score = min(criterion.max_score, max(0.0, round_half_step(raw_score * criterion.max_score)))
    return CriterionResult(
        criterion_id=criterion.id,
        criterion_title=criterion.title,
        score=score,
        raw_score=round(raw_score, 4),
        threshold=criterion.threshold,
        max_score=criterion.max_score,
        signals=results,
    )


def evaluate(draft: str, rubric: Rubric) -> ReviewerReport:
    """
    Score a draft against a rubric and render the markdown report.

    Pure: the same draft and rubric always give an identical report.
    """

    start = time.perf_counter()

    criteria = tuple(score_criterion(draft, rubric, c) for c in rubric.registry.criteria)
    overall = sum(c.score for c in criteria)
    passed = (
        all(c.passed for c in criteria)
        and overall >= rubric.min_overall_score
    )
    # Report-only: required signals do not gate `passed` on their own
    missing_required = tuple(
        s.signal_id
        for c in criteria
        for s in c.signals
        if s.required_for_threshold and not s.found
    )

    report = ReviewerReport(
        scheme_id=rubric.scheme_id,
        scheme_name=rubric.name,
        rubric_version=rubric.version,
        overall_score=overall,
        max_possible_score=rubric.max_possible_score,
        min_overall_score=rubric.min_overall_score,
        overall_passed=passed,
        criteria=criteria,
        draft_word_count=word_count(draft),
        draft_section_count=section_count(draft),
        missing_required=missing_required,
    )
    report = replace(report, markdown_report=render_markdown(report))

    logger.info(
        f"Review complete: {overall}/{rubric.max_possible_score} "
        f"({'pass' if passed else 'below threshold'})",
        extra={
            "scheme_id": rubric.scheme_id,
            "overall_score": overall,
            "overall_passed": passed,
            "criterion_scores": {c.criterion_id: c.score for c in criteria},
            "word_count": report.draft_word_count,
            "section_count": report.draft_section_count,
            "duration_ms": round((time.perf_counter() - start) * 1000, 1),
        },
    )
    return report


def review_draft(document_text: str, scheme_id: Optional[str] = None) -> ReviewerReport:
    """Engine boundary: {documentText, schemeId} → ReviewerReport."""
    return evaluate(document_text, get_rubric(scheme_id or settings.DEFAULT_SCHEME))
