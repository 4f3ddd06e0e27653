"""
Report Renderer — ReviewerReport → Markdown

A pure function of the report object. It never re-runs signals and
never sees the draft, so a report downloaded later renders exactly
what was shown on screen.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grantcraft.aggregator import CriterionResult, ReviewerReport, SignalResult

PASS = "PASS"
BORDERLINE = "BORDERLINE"
BELOW_THRESHOLD = "BELOW THRESHOLD"

PRIORITY_FIX_LIMIT = 5


def verdict(report: "ReviewerReport") -> str:
    """
    PASS when the report passed. BORDERLINE when it failed by a small
    margin: every criterion within 0.5 of its threshold and the total
    within 1.0 of the minimum. Otherwise BELOW THRESHOLD.
    """
    if report.overall_passed:
        return PASS
    near_criteria = all(c.score >= c.threshold - 0.5 for c in report.criteria)
    near_total = report.overall_score >= report.min_overall_score - 1.0
    if near_criteria and near_total:
        return BORDERLINE
    return BELOW_THRESHOLD


def priority_fixes(report: "ReviewerReport", limit: int = PRIORITY_FIX_LIMIT) -> list["SignalResult"]:
    """Unsaturated signals, required first, then by points left on the table."""
    candidates = [
        s for c in report.criteria for s in c.signals if s.confidence < 1.0
    ]
    # sorted() is stable: ties keep declaration order
    ranked = sorted(
        candidates,
        key=lambda s: (not s.required_for_threshold, -round(s.missed_points, 6)),
    )
    return ranked[:limit]


def _badge(passed: bool) -> str:
    return "✅" if passed else "❌"


def _fmt_score(value: float) -> str:
    return f"{value:.1f}"


def _render_signal(signal: "SignalResult") -> list[str]:
    tags = ["required" if signal.required_for_threshold else "optional", f"weight {signal.weight:.2f}"]
    lines = [
        f"#### {_badge(signal.found)} {signal.label}",
        "",
        f"- **Status:** {'found' if signal.found else 'not found'} · "
        f"confidence {signal.confidence:.0%} · {' · '.join(tags)}",
        f"- **Section:** {signal.section_hint}",
        f"- **Assessment:** {signal.detail}",
    ]
    if signal.evidence:
        lines.append("- **Evidence:**")
        for snippet in signal.evidence:
            lines.append(f"  > {snippet}")
    if signal.confidence < 1.0:
        lines.append(
            f"- **How to fix** (~{signal.time_estimate_minutes} min): {signal.how_to_fix}"
        )
    lines.append("")
    return lines


def _render_criterion(criterion: "CriterionResult") -> list[str]:
    found = sum(1 for s in criterion.signals if s.found)
    lines = [
        f"## {criterion.criterion_title} — {_fmt_score(criterion.score)} / "
        f"{_fmt_score(criterion.max_score)} {_badge(criterion.passed)}",
        "",
        f"Threshold {_fmt_score(criterion.threshold)} · weighted coverage "
        f"{criterion.raw_score:.0%} · {found}/{len(criterion.signals)} signals found",
        "",
    ]
    for signal in criterion.signals:
        lines.extend(_render_signal(signal))
    return lines


def render_markdown(report: "ReviewerReport") -> str:
    """Render the full evidence report."""
    outcome = verdict(report)
    lines = [
        f"# Reviewer Report — {report.scheme_name}",
        "",
        f"> Deterministic coverage check, rubric v{report.rubric_version}. "
        "It verifies that rubric-required elements are present and supported "
        "in the text; it does not judge scientific quality.",
        "",
        f"**Total score: {_fmt_score(report.overall_score)} / "
        f"{_fmt_score(report.max_possible_score)} — {outcome}**",
        "",
        f"Draft: {report.draft_word_count:,} words · "
        f"{report.draft_section_count} sections",
        "",
        "| Criterion | Score | Threshold | Status |",
        "|---|---|---|---|",
    ]
    for c in report.criteria:
        lines.append(
            f"| {c.criterion_title} | {_fmt_score(c.score)} / {_fmt_score(c.max_score)} "
            f"| {_fmt_score(c.threshold)} | {_badge(c.passed)} |"
        )
    lines.extend(["", "---", ""])

    for c in report.criteria:
        lines.extend(_render_criterion(c))
        lines.extend(["---", ""])

    lines.extend([
        "## Overall verdict",
        "",
        f"**{outcome}** — {_fmt_score(report.overall_score)} / "
        f"{_fmt_score(report.max_possible_score)}.",
        "",
        f"Pass conditions: every criterion ≥ its threshold and total ≥ "
        f"{_fmt_score(report.min_overall_score)}.",
        "",
    ])
    failing = [c for c in report.criteria if not c.passed]
    if failing:
        names = ", ".join(f"{c.criterion_title} ({_fmt_score(c.score)})" for c in failing)
        lines.extend([f"Below threshold: {names}.", ""])
    if report.missing_required:
        lines.extend([
            f"Required elements not found: {', '.join(report.missing_required)}.",
            "",
        ])

    fixes = priority_fixes(report)
    if fixes:
        total_minutes = sum(s.time_estimate_minutes for s in fixes)
        lines.extend([
            "### Priority fixes",
            "",
        ])
        for i, s in enumerate(fixes, 1):
            lines.append(
                f"{i}. **{s.label}** ({s.section_hint}, ~{s.time_estimate_minutes} min, "
                f"up to +{s.missed_points:.2f} pts): {s.how_to_fix}"
            )
        lines.extend(["", f"Estimated time for these fixes: ~{total_minutes} min.", ""])

    return "\n".join(lines).rstrip() + "\n"
