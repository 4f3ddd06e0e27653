"""
GrantCraft — Deterministic Grant Proposal Reviewer

Scores a markdown proposal draft against a funding-body rubric using
static, weighted pattern signals. No model calls, no network, no state:
the same draft always gets the same report.

Public API:
  - review_draft:      {documentText, schemeId} -> ReviewerReport
  - evaluate:          Score a draft against an explicit Rubric
  - render_markdown:   ReviewerReport -> markdown evidence report
  - get_rubric:        Rubric lookup by scheme id
  - SignalRegistry:    Validated, immutable signal collection
  - sat:               Saturation function shared by every signal

Usage:
    from grantcraft import review_draft
    report = review_draft(markdown_text, "horizon_europe_ria_ia")
    print(report.markdown_report)
"""

__version__ = "0.4.0"

from grantcraft.aggregator import (
    review_draft,
    evaluate,
    ReviewerReport,
    CriterionResult,
    SignalResult,
)
from grantcraft.confidence import sat
from grantcraft.errors import (
    GrantCraftError,
    RubricConfigurationError,
    SignalNotFoundError,
    UnknownSchemeError,
    SignalCheckError,
    DraftTooShortError,
)
from grantcraft.registry import Rubric, RUBRICS, SignalRegistry, get_rubric
from grantcraft.report import render_markdown
from grantcraft.signals import Criterion, RawCheckResult, Signal

__all__ = [
    "review_draft",
    "evaluate",
    "ReviewerReport",
    "CriterionResult",
    "SignalResult",
    "sat",
    "GrantCraftError",
    "RubricConfigurationError",
    "SignalNotFoundError",
    "UnknownSchemeError",
    "SignalCheckError",
    "DraftTooShortError",
    "Rubric",
    "RUBRICS",
    "SignalRegistry",
    "get_rubric",
    "render_markdown",
    "Criterion",
    "RawCheckResult",
    "Signal",
]
