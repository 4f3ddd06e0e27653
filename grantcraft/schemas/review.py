"""
API Schemas — Request and Response Models

Pydantic models for the GrantCraft reviewer API. Field names on the
wire are camelCase, matching what the browser client sends and reads.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from grantcraft.config import settings


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ============================================================
# REVIEW
# ============================================================

class ReviewRequest(_WireModel):
    """POST /review request body."""
    draft_content: str = Field(
        ..., alias="draftContent", max_length=settings.MAX_DRAFT_CHARS,
        description="The proposal draft in markdown.",
    )
    scheme_id: Optional[str] = Field(
        None, alias="schemeId", pattern=r"^[a-z0-9_]{1,64}$",
        description="Rubric to score against. Defaults to the server's default scheme.",
    )
    draft_id: Optional[str] = Field(None, alias="draftId", max_length=128)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [
            {
                "draftContent": "# 1. Excellence\n\nO1: To develop a new sensor...",
                "schemeId": "horizon_europe_ria_ia",
            },
        ]},
    )


class SignalResultResponse(_WireModel):
    signal_id: str = Field(alias="signalId")
    label: str
    weight: float
    required_for_threshold: bool = Field(alias="requiredForThreshold")
    section_hint: str = Field(alias="sectionHint")
    how_to_fix: str = Field(alias="howToFix")
    time_estimate_minutes: int = Field(alias="timeEstimateMinutes")
    found: bool
    confidence: float
    evidence: list[str]
    detail: str


class CriterionResultResponse(_WireModel):
    criterion_id: str = Field(alias="criterionId")
    criterion_title: str = Field(alias="criterionTitle")
    score: float
    raw_score: float = Field(alias="rawScore")
    threshold: float
    max_score: float = Field(alias="maxScore")
    passed: bool
    signals: list[SignalResultResponse]


class ReviewerReportResponse(_WireModel):
    scheme_id: str = Field(alias="schemeId")
    scheme_name: str = Field(alias="schemeName")
    rubric_version: str = Field(alias="rubricVersion")
    overall_score: float = Field(alias="overallScore")
    max_possible_score: float = Field(alias="maxPossibleScore")
    min_overall_score: float = Field(alias="minOverallScore")
    overall_passed: bool = Field(alias="overallPassed")
    criteria: list[CriterionResultResponse]
    draft_word_count: int = Field(alias="draftWordCount")
    draft_section_count: int = Field(alias="draftSectionCount")
    missing_required: list[str] = Field(alias="missingRequired")
    markdown_report: str = Field(alias="markdownReport")


class ReviewResponse(_WireModel):
    """POST /review response body."""
    report: ReviewerReportResponse
    draft_id: Optional[str] = Field(None, alias="draftId")


# ============================================================
# RUBRICS
# ============================================================

class CriterionInfo(_WireModel):
    id: str
    title: str
    max_score: float = Field(alias="maxScore")
    threshold: float
    signal_count: int = Field(alias="signalCount")


class SchemeInfo(_WireModel):
    scheme_id: str = Field(alias="schemeId")
    name: str
    version: str
    criteria: list[CriterionInfo]
    max_possible_score: float = Field(alias="maxPossibleScore")
    min_overall_score: float = Field(alias="minOverallScore")


class SchemesResponse(_WireModel):
    default_scheme: str = Field(alias="defaultScheme")
    schemes: list[SchemeInfo]


class SignalInfo(_WireModel):
    id: str
    label: str
    description: str
    criterion: str
    weight: float
    required_for_threshold: bool = Field(alias="requiredForThreshold")
    section_hint: str = Field(alias="sectionHint")
    how_to_fix: str = Field(alias="howToFix")
    time_estimate_minutes: int = Field(alias="timeEstimateMinutes")


class SignalsResponse(_WireModel):
    scheme_id: str = Field(alias="schemeId")
    total: int
    signals: list[SignalInfo]


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    schemes: list[str]
    signal_count: int
