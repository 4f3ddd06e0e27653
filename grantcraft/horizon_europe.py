"""
Horizon Europe RIA/IA Rubric — Coverage Signals

22 deterministic signals across the three Horizon Europe award
criteria. Each check counts pattern-family matches, maps the count
through sat(), adds any structural bonus, and clamps.

This rubric is static configuration. Adding a signal means appending
it to SIGNALS below; the criterion's weights must still sum to 1.00,
and SignalRegistry refuses to build otherwise.
"""

from __future__ import annotations

from grantcraft.confidence import (
    I,
    M,
    clamp,
    collect_evidence,
    count_matches,
    has_match,
    rx,
    sat,
)
from grantcraft.signals import Criterion, RawCheckResult, Signal

SCHEME_ID = "horizon_europe_ria_ia"
SCHEME_NAME = "Horizon Europe — Research & Innovation / Innovation Action"
RUBRIC_VERSION = "1.0.0"
MIN_OVERALL_SCORE = 10.0

EXCELLENCE = "excellence"
IMPACT = "impact"
IMPLEMENTATION = "implementation"

CRITERIA: tuple[Criterion, ...] = (
    Criterion(id=EXCELLENCE, title="Excellence"),
    Criterion(id=IMPACT, title="Impact"),
    Criterion(id=IMPLEMENTATION, title="Quality and efficiency of the implementation"),
)


# ============================================================
# EXCELLENCE (7 signals, weights sum = 1.00)
# ============================================================

_OBJECTIVES = (
    rx(r"\bO[1-9]\d*\s*[.:)—–\-]", I),         # O1: / O1. / O1 —
    rx(r"^[ \t]*[1-9]\d*\.\s+[Tt]o\s+", M),   # 1. To develop ...
    rx(r"\bObjective\s+(?:O\s*)?[1-9]", I),
    rx(r"\|\s*O[1-9]\d*\s*\|", I),             # | O1 | in a table
)


def _objectives_listed(draft: str) -> RawCheckResult:
    n = count_matches(draft, *_OBJECTIVES)
    if n == 0:
        detail = 'No numbered objectives found. Add "O1: To… O2: To…" in Section 1.1.'
    elif n < 3:
        detail = f"{n} objective reference(s) — aim for 3–6 SMART objectives."
    else:
        detail = f"{n} objective references found — good structured coverage."
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 5),
        evidence=collect_evidence(draft, _OBJECTIVES),
        detail=detail,
    )


_TRL_LEVEL = rx(r"\bTRL\s*[1-9]", I)
_TRL_WORDS = rx(r"Technology\s+Readiness\s+Level", I)
_TRL_PROGRESSION = rx(r"\bTRL\s*[1-9]\s*(?:→|-->?|to)\s*TRL\s*[1-9]", I)


def _trl_mentioned(draft: str) -> RawCheckResult:
    n = count_matches(draft, _TRL_LEVEL, _TRL_WORDS)
    progression = has_match(draft, _TRL_PROGRESSION)
    # A single start -> end statement is enough to saturate
    confidence = clamp(sat(n, 3) + (0.4 if progression else 0.0))
    if n == 0:
        detail = "TRL not mentioned. State both the current TRL and the target TRL."
    elif progression:
        detail = "TRL progression (start → end) found — excellent."
    else:
        detail = f"TRL mentioned {n} time(s) but no progression (start→end) found."
    return RawCheckResult(
        found=n > 0,
        confidence=confidence,
        evidence=collect_evidence(draft, (_TRL_PROGRESSION, _TRL_LEVEL, _TRL_WORDS)),
        detail=detail,
    )


_METHOD_HEADING = rx(r"^#+[ \t]*(?:[\d.]+[ \t]*)?Methodology", I | M)
_METHOD_WORDS = rx(r"\b(?:approach|methodology|methods?)\b", I)
_METHOD_WE_USE = rx(r"\bwe\s+(?:will\s+)?(?:use|employ|apply|adopt|implement)\b", I)
_METHOD_ARTEFACTS = rx(r"\b(?:algorithm|model|framework|pipeline|protocol|workflow)\b", I)
_METHOD_VALIDATION = rx(r"\bvalidat(?:e|ion|ing)\b", I)


def _methodology_described(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _METHOD_HEADING, _METHOD_WORDS, _METHOD_WE_USE,
        _METHOD_ARTEFACTS, _METHOD_VALIDATION,
    )
    if n == 0:
        detail = (
            "No methodology content found. Add Section 1.2 with approach, "
            "methods, and validation strategy."
        )
    elif n < 4:
        detail = (
            f"Limited methodology content ({n} signals). Expand with specific "
            f"methods, tools, and success criteria."
        )
    else:
        detail = (
            f"Methodology well-described ({n} signals across approach, "
            f"methods, and validation)."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 8),
        evidence=collect_evidence(
            draft, (_METHOD_HEADING, _METHOD_WE_USE, _METHOD_ARTEFACTS, _METHOD_WORDS),
        ),
        detail=detail,
    )


_GAP = rx(r"\bgap\b", I)
_LIMITATION = rx(r"\blimitation[s]?\b", I)
_EXISTING_FAILS = rx(
    r"(?:current|existing)\s+(?:approaches?|solutions?|methods?|tools?|systems?)\s+"
    r"(?:fail|lack|cannot|do\s+not|are\s+(?:unable|insufficient))",
    I,
)
_STATE_OF_ART = rx(r"state\s+of\s+(?:the\s+)?art", I)
_SHORTCOMING = rx(r"\bshortcoming[s]?\b", I)
_ADDRESSES_GAP = rx(
    r"\b(?:address(?:es|ing)?|overcome[s]?|bridge[s]?)\s+(?:this|these|the)\s+"
    r"(?:gap|limitation|challenge)",
    I,
)


def _sota_gap_identified(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _GAP, _LIMITATION, _EXISTING_FAILS, _STATE_OF_ART,
        _SHORTCOMING, _ADDRESSES_GAP,
    )
    if n == 0:
        detail = "No gap or limitation analysis found. Add a critical SotA review in Section 1.3."
    elif n < 3:
        detail = (
            f"SotA limitations mentioned ({n} signals) but analysis is thin — "
            f"add specific, quantified gaps."
        )
    else:
        detail = (
            f"Good SotA gap analysis ({n} signals). Ensure gaps map explicitly "
            f"to project objectives."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 6),
        evidence=collect_evidence(draft, (_EXISTING_FAILS, _ADDRESSES_GAP, _GAP, _LIMITATION)),
        detail=detail,
    )


_BEYOND_SOTA = rx(r"beyond\s+the\s+(?:current\s+)?state\s+of\s+(?:the\s+)?art", I)
_NOVEL_WORDS = rx(
    r"\b(?:novel|first\s+to|first-of-its-kind|pioneering|breakthrough|unprecedented)\b", I,
)
_ADVANCES_BEYOND = rx(r"\badvances?\s+beyond\b", I)
_INNOVATIVE = rx(r"\binnovati(?:ve|on)\b", I)
_DIFFERS_FROM = rx(r"\bdiffers?\s+from\s+(?:existing|current|prior)", I)


def _novelty_claim(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _BEYOND_SOTA, _NOVEL_WORDS, _ADVANCES_BEYOND, _INNOVATIVE, _DIFFERS_FROM,
    )
    if n == 0:
        detail = (
            "No novelty claim found. State explicitly what makes this project "
            "beyond state of the art."
        )
    else:
        detail = (
            f"Novelty claim present ({n} signals). Ensure claims are backed by "
            f"evidence, not assertion."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 4),
        evidence=collect_evidence(
            draft, (_BEYOND_SOTA, _ADVANCES_BEYOND, _DIFFERS_FROM, _NOVEL_WORDS),
        ),
        detail=detail,
    )


_SUCCESS_CRITERIA = rx(r"success\s+criteri", I)
_BOUNDED_PERCENT = rx(r"[≥≤<>]\s*\d+\s*%")
_TARGET_NUMBER = rx(r"\btarget\s+(?:of\s+)?(?:[≥≤]\s*)?\d+", I)
_ACCURACY_OF = rx(r"\baccuracy\s+of\s+\d+", I)
_VALIDATION_CRITERIA = rx(r"validation\s+criteri", I)
_ACHIEVE_NUMBER = rx(r"\bachiev(?:e|ing)\s+(?:[≥≤]\s*)?\d+", I)


def _success_criteria(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _SUCCESS_CRITERIA, _BOUNDED_PERCENT, _TARGET_NUMBER,
        _ACCURACY_OF, _VALIDATION_CRITERIA, _ACHIEVE_NUMBER,
    )
    if n == 0:
        detail = (
            "No quantified success criteria found. Add measurable targets "
            '(e.g. "≥85% precision on benchmark Y").'
        )
    elif n < 3:
        detail = f"{n} success metric(s) found — add targets for each objective."
    else:
        detail = (
            f"Good quantified criteria ({n} signals). Ensure each objective "
            f"has a measurable target."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 5),
        evidence=collect_evidence(
            draft, (_BOUNDED_PERCENT, _TARGET_NUMBER, _ACCURACY_OF, _ACHIEVE_NUMBER),
        ),
        detail=detail,
    )


_ALTERNATIVE = rx(r"\balternative\s+(?:approach|method|option|strategy)", I)
_WE_CONSIDERED = rx(r"\bwe\s+considered\b", I)
_RATHER_THAN = rx(r"\b(?:rather|instead)\s+than\b", I)
_REJECTED_BECAUSE = rx(r"\b(?:rejected|discarded|not\s+chosen)\s+(?:because|as|since|due)", I)
_COMPARED_WITH = rx(r"\bcompared\s+(?:to|with)\s+(?:alternative|existing|other)", I)


def _alternative_approaches(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _ALTERNATIVE, _WE_CONSIDERED, _RATHER_THAN, _REJECTED_BECAUSE, _COMPARED_WITH,
    )
    if n == 0:
        detail = (
            "No alternative approaches discussed. Reviewers routinely ask why "
            "you chose this approach over alternatives."
        )
    else:
        detail = (
            f"Alternative approaches mentioned ({n} signals). Good — ensures "
            f"reviewers see the choice was deliberate."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 3),
        evidence=collect_evidence(
            draft, (_ALTERNATIVE, _WE_CONSIDERED, _RATHER_THAN, _REJECTED_BECAUSE),
        ),
        detail=detail,
    )


# ============================================================
# IMPACT (7 signals, weights sum = 1.00)
# ============================================================

_EXPECTED_OUTCOME = rx(r"expected\s+outcome", I)
_CALL_OUTCOME = rx(r"call\s+(?:expected|topic)\s+outcome", I)
_CONTRIBUTES_TO_CALL = rx(r"contributes?\s+to\s+(?:the\s+)?(?:call|programme|work\s+programme)", I)
_OUTCOME_NUMBERED = rx(r"\boutcome\s+[O\d]+", I)
_DELIVERS_OUTCOME = rx(r"\bdelivers?\s+(?:the\s+)?(?:following\s+)?outcome", I)
_OUTCOME_HEADING = rx(r"^#+[ \t]*(?:[\d.]+[ \t]*)?(?:Expected\s+)?Outcome", I | M)


def _outcomes_linked(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _EXPECTED_OUTCOME, _CALL_OUTCOME, _CONTRIBUTES_TO_CALL,
        _OUTCOME_NUMBERED, _DELIVERS_OUTCOME, _OUTCOME_HEADING,
    )
    if n == 0:
        detail = (
            "No reference to call expected outcomes. Section 2.1 must explicitly "
            "address each call outcome bullet."
        )
    elif n < 3:
        detail = (
            f"Outcomes referenced ({n} signals) but linkage to call is weak — "
            f"quote the call outcomes directly."
        )
    else:
        detail = f"Expected outcomes well-linked to call ({n} signals)."
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 5),
        evidence=collect_evidence(
            draft, (_CALL_OUTCOME, _CONTRIBUTES_TO_CALL, _OUTCOME_HEADING, _EXPECTED_OUTCOME),
        ),
        detail=detail,
    )


_KPI_HEADER = rx(r"\|\s*(?:Indicator|KPI|Measure|Metric)\s*\|", I)
_BASELINE_COLUMN = rx(r"\|\s*Baseline\s*\|", I)
_TARGET_COLUMN = rx(r"\|\s*Target\s*\|", I)
_KPI = rx(r"\bKPI\b")
_KPI_WORDS = rx(r"key\s+performance\s+indicator", I)
_PERCENT_TARGET = rx(r"[≥≤]\s*\d+\s*%")
_NUMERIC_CELL = rx(r"\|\s*\d+(?:[,.]\d*)?\s*\|")


def _kpi_table(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _KPI_HEADER, _BASELINE_COLUMN, _TARGET_COLUMN, _KPI,
        _KPI_WORDS, _PERCENT_TARGET, _NUMERIC_CELL,
    )
    has_table = has_match(draft, _KPI_HEADER)
    has_baseline_and_target = (
        has_match(draft, _BASELINE_COLUMN) and has_match(draft, _TARGET_COLUMN)
    )
    if has_baseline_and_target:
        bonus = 0.3
    elif has_table:
        bonus = 0.15
    else:
        bonus = 0.0

    if n == 0:
        detail = (
            "No KPI table or quantified targets found. Add Indicator/Baseline/Target "
            "table in Section 2.1."
        )
    elif has_baseline_and_target:
        detail = f"KPI table with Baseline and Target columns found ({n} signals) — excellent."
    else:
        detail = (
            f"Some KPI content found ({n} signals) but no Baseline/Target table. "
            f"Add structured table."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=clamp(sat(n, 6) + bonus),
        evidence=collect_evidence(
            draft, (_KPI_HEADER, _BASELINE_COLUMN, _TARGET_COLUMN, _PERCENT_TARGET),
        ),
        detail=detail,
    )


_EXPLOIT = rx(r"\bexploit(?:ation|ing|ed)?\b", I)
_COMMERCIALISE = rx(r"\bcommerciali(?:s|z)(?:e|ation|ing)\b", I)
_IP_STRATEGY = rx(r"\bIP\s+(?:strategy|plan|ownership|rights|protection)\b", I)
_PATENT = rx(r"\bpatent\b", I)
_LICENSING = rx(r"\blicens(?:e|ing|ing\s+strategy)\b", I)
_MARKET = rx(r"\bmarket\s+(?:entry|potential|opportunity|size|uptake)\b", I)
_EXPLOITATION_PLAN = rx(r"exploitation\s+(?:plan|strategy|route|roadmap)", I)


def _exploitation_plan(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _EXPLOIT, _COMMERCIALISE, _IP_STRATEGY, _PATENT,
        _LICENSING, _MARKET, _EXPLOITATION_PLAN,
    )
    if n == 0:
        detail = (
            "No exploitation or IP content. Add: who exploits what result, "
            "IP protection plan, market route."
        )
    elif n < 3:
        detail = (
            f"Some exploitation content ({n} signals) — add IP ownership table "
            f"and specific market entry strategy."
        )
    else:
        detail = (
            f"Exploitation plan present ({n} signals). Ensure IP ownership is "
            f"clear for each key result."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 5),
        evidence=collect_evidence(
            draft, (_EXPLOITATION_PLAN, _IP_STRATEGY, _COMMERCIALISE, _MARKET),
        ),
        detail=detail,
    )


_DISSEMINATE = rx(r"\bdisseminat(?:e|ion|ing)\b", I)
_PUBLICATION = rx(r"\bpublication[s]?\b", I)
_CONFERENCE = rx(r"\bconference[s]?\b", I)
_OPEN_ACCESS = rx(r"open\s+access", I)
_TARGET_VENUE = rx(r"target\s+(?:journal|venue|conference)", I)
_ACTIVITY_TABLE = rx(r"\|\s*(?:Activity|Dissemination|Communication)\s*\|", I)
_PEER_REVIEWED = rx(r"peer[-\s]reviewed", I)


def _dissemination_plan(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _DISSEMINATE, _PUBLICATION, _CONFERENCE, _OPEN_ACCESS,
        _TARGET_VENUE, _ACTIVITY_TABLE, _PEER_REVIEWED,
    )
    if n == 0:
        detail = (
            "No dissemination content. Add: target journals, conferences, and "
            "communication activities."
        )
    elif n < 4:
        detail = (
            f"Basic dissemination content ({n} signals). Name specific "
            f"journals/conferences and add an activity table."
        )
    else:
        detail = (
            f"Good dissemination plan ({n} signals). Ensure non-academic "
            f"communication is included."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 7),
        evidence=collect_evidence(
            draft, (_TARGET_VENUE, _ACTIVITY_TABLE, _OPEN_ACCESS, _DISSEMINATE),
        ),
        detail=detail,
    )


_STAKEHOLDER = rx(r"\bstakeholder[s]?\b", I)
_END_USER = rx(r"\bend[-\s]user[s]?\b", I)
_BENEFICIARY = rx(r"\bbeneficiar(?:y|ies)\b", I)
_TARGET_GROUP = rx(r"\btarget\s+(?:group|audience|user|community)[s]?\b", I)
_POLICYMAKER = rx(r"\bpolicymaker[s]?\b|\bpolicy\s+maker[s]?\b", I)
_NAMED_GROUPS = rx(r"\bfarmer[s]?\b|\bclinician[s]?\b|\bpatient[s]?\b|\bSME[s]?\b", I)


def _stakeholders_named(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _STAKEHOLDER, _END_USER, _BENEFICIARY, _TARGET_GROUP,
        _POLICYMAKER, _NAMED_GROUPS,
    )
    if n == 0:
        detail = (
            "No stakeholder groups identified. Name specific groups and describe "
            "how they benefit."
        )
    else:
        detail = (
            f"Stakeholders mentioned ({n} signals). Ensure each group has a clear "
            f"benefit statement."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 5),
        evidence=collect_evidence(draft, (_STAKEHOLDER, _END_USER, _BENEFICIARY, _TARGET_GROUP)),
        detail=detail,
    )


_CC_BY = rx(r"\bCC\s+BY\b")
_FAIR = rx(r"\bFAIR\s+(?:principles?|data)\b", I)
_ZENODO = rx(r"\bZenodo\b", I)
_EOSC = rx(r"\bEOSC\b")
_OPEN_SCIENCE = rx(r"\bopen\s+(?:source|data|science)\b", I)
_IMMEDIATE_OA = rx(r"immediately\s+open\s+access", I)


def _open_access_commitment(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _OPEN_ACCESS, _CC_BY, _FAIR, _ZENODO, _EOSC, _OPEN_SCIENCE, _IMMEDIATE_OA,
    )
    oa_and_fair = has_match(draft, _OPEN_ACCESS) and has_match(draft, _FAIR)
    if n == 0:
        detail = (
            "No open access commitment. This is mandatory in HE (Art. 17 MGA). "
            "Add one sentence."
        )
    elif oa_and_fair:
        detail = "Open access and FAIR data both referenced — good open science plan."
    else:
        detail = (
            f"Open science content present ({n} signals). Add both open access "
            f"and FAIR data commitments."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=clamp(sat(n, 4) + (0.2 if oa_and_fair else 0.0)),
        evidence=collect_evidence(draft, (_IMMEDIATE_OA, _FAIR, _CC_BY, _OPEN_ACCESS)),
        detail=detail,
    )


_DMP = rx(r"\bDMP\b")
_DMP_WORDS = rx(r"[Dd]ata\s+[Mm]anagement\s+[Pp]lan")
_D11 = rx(r"\bD1\.1\b")
# Line-anchored with an atomic prefix: one attempt per line, linear in line length
_DMP_MONTH_6 = rx(r"^(?>[^\n]*?Month\s+6)[^\n]*(?:DMP|data\s+management)", I | M)


def _dmp_referenced(draft: str) -> RawCheckResult:
    n = count_matches(draft, _DMP, _DMP_WORDS, _D11, _DMP_MONTH_6)
    if n == 0:
        detail = (
            "No DMP reference found. The DMP (D1.1, Month 6) is a mandatory HE "
            "deliverable — reference it in §2.4."
        )
    else:
        detail = f"DMP referenced ({n} signals). Good — shows familiarity with HE requirements."
    return RawCheckResult(
        found=n > 0,
        confidence=clamp(sat(n, 3) + (0.3 if has_match(draft, _D11) else 0.0)),
        evidence=collect_evidence(draft, (_DMP_MONTH_6, _D11, _DMP_WORDS, _DMP)),
        detail=detail,
    )


# ============================================================
# IMPLEMENTATION (8 signals, weights sum = 1.00)
# ============================================================

_WP = rx(r"\bWP\d+\b")
_WP_WORDS = rx(r"[Ww]ork\s+[Pp]ackage\s+\d+")
_WP_TABLE_HEADER = rx(r"\|\s*WP\s*[|#\d]", I)
_WP_TABLE_ROW = rx(r"\|\s*WP\d+\s*\|", I)
_WP_NUMBER = rx(r"\bWP(\d+)\b")


def _work_packages_defined(draft: str) -> RawCheckResult:
    n = count_matches(draft, _WP, _WP_WORDS, _WP_TABLE_HEADER, _WP_TABLE_ROW)
    distinct = len(set(_WP_NUMBER.findall(draft)))
    confidence = clamp(sat(n, 10) + sat(distinct, 4) * 0.2)
    if n == 0:
        detail = (
            "No work packages defined. Add WP structure with summary table and "
            "individual WP descriptions."
        )
    elif distinct < 3:
        detail = (
            f"{distinct} distinct WP(s) found ({n} references) — most proposals "
            f"need 4–6 WPs."
        )
    else:
        detail = (
            f"{distinct} distinct work packages found ({n} total references) — "
            f"good WP structure."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=confidence,
        evidence=collect_evidence(draft, (_WP_TABLE_HEADER, _WP_TABLE_ROW, _WP_WORDS, _WP)),
        detail=detail,
    )


_MS = rx(r"\bMS\d+\b")
_MS_WORDS = rx(r"[Mm]ilestone\s+\d+")
_MS_WITH_MONTH = rx(r"\bMS\d+\s*\(\s*M\d+\s*\)")    # MS1 (M12)
_MS_TABLE_ROW = rx(r"\|\s*MS\d+\s*\|", I)


def _milestones_present(draft: str) -> RawCheckResult:
    n = count_matches(draft, _MS, _MS_WORDS, _MS_WITH_MONTH, _MS_TABLE_ROW)
    with_month = has_match(draft, _MS_WITH_MONTH)
    if n == 0:
        detail = (
            "No milestones found. Add MS1, MS2… with month numbers and verifiable "
            "completion criteria."
        )
    elif with_month:
        detail = f"Milestones with month references found ({n} signals) — good practice."
    else:
        detail = (
            f"Milestones mentioned ({n} signals) but month references unclear — "
            f'add "(MXX)" to each milestone.'
        )
    return RawCheckResult(
        found=n > 0,
        confidence=clamp(sat(n, 5) + (0.2 if with_month else 0.0)),
        evidence=collect_evidence(draft, (_MS_WITH_MONTH, _MS_TABLE_ROW, _MS, _MS_WORDS)),
        detail=detail,
    )


_DELIVERABLE = rx(r"\bD\d+\.\d+\b")
_DELIVERABLE_WORDS = rx(r"[Dd]eliverable\s+D?\d")
_DELIVERABLE_TABLE_ROW = rx(r"\|\s*D\d+\.\d+\s*\|", I)
_D11_DMP = rx(r"^(?>[^\n]*?\bD1\.1\b)[^\n]*(?:DMP|[Dd]ata\s+[Mm]anagement\s+[Pp]lan)", M)


def _deliverables_present(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _DELIVERABLE, _DELIVERABLE_WORDS, _DELIVERABLE_TABLE_ROW, _D11_DMP,
    )
    has_dmp = has_match(draft, _D11_DMP)
    if n == 0:
        detail = (
            'No deliverables defined. Use "D1.1: [Title] (Month X)" format. '
            "D1.1 DMP (Month 6) is mandatory."
        )
    elif has_dmp:
        detail = (
            f"Deliverables defined including the mandatory D1.1 DMP "
            f"({n} total signals) — excellent."
        )
    else:
        detail = (
            f"{n} deliverable reference(s) found but D1.1 DMP (Month 6) not "
            f"identified — add it to WP1."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=clamp(sat(n, 6) + (0.15 if has_dmp else 0.0)),
        evidence=collect_evidence(
            draft, (_D11_DMP, _DELIVERABLE_TABLE_ROW, _DELIVERABLE, _DELIVERABLE_WORDS),
        ),
        detail=detail,
    )


_GANTT = rx(r"\bGantt\b", I)
_MONTH_RANGE = rx(r"M\d+\s*[–—\-]\s*M\d+")                 # M1–M24
_MONTH_WORDS_RANGE = rx(r"Month\s+\d+\s*[–—\-]\s*Month\s+\d+", I)
_CRITICAL_PATH = rx(r"critical\s+path", I)
_GANTT_BARS = rx(r"[|█▓▒░]{3,}")
_MONTH_COLUMN = rx(r"\|\s*M\d+\s*\|", I)


def _gantt_or_timeline(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _GANTT, _MONTH_RANGE, _MONTH_WORDS_RANGE, _CRITICAL_PATH,
        _GANTT_BARS, _MONTH_COLUMN,
    )
    if n == 0:
        detail = (
            "No Gantt chart or timeline found. Reviewers expect a visual project "
            "timeline in Section 3.1."
        )
    else:
        detail = f"Timeline / Gantt content found ({n} signals). Ensure it shows the critical path."
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 4),
        evidence=collect_evidence(draft, (_GANTT, _MONTH_RANGE, _CRITICAL_PATH, _MONTH_COLUMN)),
        detail=detail,
    )


_NUMBERED_RISK = rx(r"^(?>[^\n]*?\bR\d+\b)[^\n]*\brisk\b", I | M)
_RISK_REGISTER = rx(r"risk\s+register", I)
_LIKELIHOOD = rx(r"\blikelihood\b", I)
_MITIGATION = rx(r"\bmitigation\b", I)
_RISK_TABLE_HEADER = rx(r"\|\s*(?:Risk|Likelihood|Mitigation)\s*\|", I)
_HML_CELLS = rx(r"\b(?:H|M|L)\s*\|\s*(?:H|M|L)\b")


def _risk_register(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _NUMBERED_RISK, _RISK_REGISTER, _LIKELIHOOD, _MITIGATION,
        _RISK_TABLE_HEADER, _HML_CELLS,
    )
    full_table = has_match(draft, _LIKELIHOOD) and has_match(draft, _MITIGATION)
    if n == 0:
        detail = (
            "No risk register found. This is consistently flagged by reviewers — "
            "add risk table in §3.2."
        )
    elif full_table:
        detail = (
            f"Risk register with Likelihood and Mitigation found ({n} signals) — "
            f"good risk management."
        )
    else:
        detail = (
            f"Risk content present ({n} signals) but full table "
            f"(Likelihood | Impact | Mitigation) missing."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=clamp(sat(n, 6) + (0.25 if full_table else 0.0)),
        evidence=collect_evidence(
            draft, (_RISK_REGISTER, _RISK_TABLE_HEADER, _LIKELIHOOD, _MITIGATION),
        ),
        detail=detail,
    )


_CONSORTIUM = rx(r"\bconsortium\b", I)
_PARTNER = rx(r"\bpartner[s]?\b", I)
_PARTNER_TABLE_HEADER = rx(r"\|\s*(?:Partner|Organisation|Organization|Country)\s*\|", I)
_COMPLEMENTARITY = rx(r"\bcomplementar(?:y|ity)\b", I)
_PARTNER_TYPE_CELL = rx(
    r"^[^\n|]*\|[^\n]+\|\s*(?:HEI|SME|NGO|University|Research|Industry)\s*\|", I | M,
)


def _consortium_described(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _CONSORTIUM, _PARTNER, _PARTNER_TABLE_HEADER,
        _COMPLEMENTARITY, _PARTNER_TYPE_CELL,
    )
    partner_table = has_match(draft, _PARTNER_TABLE_HEADER, _PARTNER_TYPE_CELL)
    if n == 0:
        detail = (
            "No consortium description found. Add partner table and "
            "complementarity narrative in §3.3."
        )
    elif partner_table:
        detail = (
            f"Consortium with partner table found ({n} signals). Ensure each "
            f"partner's unique role is stated."
        )
    else:
        detail = f"Consortium mentioned ({n} signals) but no partner table — add structured table."
    return RawCheckResult(
        found=n > 0,
        confidence=clamp(sat(n, 6) + (0.2 if partner_table else 0.0)),
        evidence=collect_evidence(
            draft, (_PARTNER_TABLE_HEADER, _PARTNER_TYPE_CELL, _COMPLEMENTARITY, _CONSORTIUM),
        ),
        detail=detail,
    )


_PERSON_MONTHS = rx(r"\bperson[-\s]month[s]?\b", I)
_BUDGET_TABLE_HEADER = rx(r"\|\s*(?:Budget|Cost|Personnel|Equipment)\s*\|", I)
_EURO_AMOUNT = rx(r"€\s*\d[\d,.]*")
_BUDGET_WORDS = rx(r"budget\s+(?:breakdown|justification|allocation|summary)", I)
_VALUE_FOR_MONEY = rx(r"\bvalue[-\s]for[-\s]money\b", I)


def _budget_justified(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _PERSON_MONTHS, _BUDGET_TABLE_HEADER, _EURO_AMOUNT,
        _BUDGET_WORDS, _VALUE_FOR_MONEY,
    )
    if n == 0:
        detail = (
            "No budget justification found. Add §3.4 with cost table and "
            "person-month narrative."
        )
    else:
        detail = (
            f"Budget content found ({n} signals). Ensure person-months are linked "
            f"to specific WP tasks."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 5),
        evidence=collect_evidence(
            draft, (_BUDGET_WORDS, _BUDGET_TABLE_HEADER, _PERSON_MONTHS, _EURO_AMOUNT),
        ),
        detail=detail,
    )


_STEERING_COMMITTEE = rx(r"steering\s+committee", I)
_COORDINATOR = rx(r"project\s+coordinator", I)
_GOVERNANCE = rx(r"\bgovernance\b", I)
_DECISION_MAKING = rx(r"\b(?:decision[-\s]making|decision\s+procedure)\b", I)
_MANAGEMENT_STRUCTURE = rx(r"management\s+structure", I)
_WP_LEADER = rx(r"\bWP\s+[Ll]eader[s]?\b", I)


def _management_structure(draft: str) -> RawCheckResult:
    n = count_matches(
        draft, _STEERING_COMMITTEE, _COORDINATOR, _GOVERNANCE,
        _DECISION_MAKING, _MANAGEMENT_STRUCTURE, _WP_LEADER,
    )
    if n == 0:
        detail = "No management structure described. Add governance section with roles in §3.2."
    else:
        detail = (
            f"Management structure content ({n} signals). Good — mention conflict "
            f"resolution and reporting schedule too."
        )
    return RawCheckResult(
        found=n > 0,
        confidence=sat(n, 4),
        evidence=collect_evidence(
            draft, (_STEERING_COMMITTEE, _COORDINATOR, _MANAGEMENT_STRUCTURE, _DECISION_MAKING),
        ),
        detail=detail,
    )


# ============================================================
# SIGNAL TABLE (declaration order is report order)
# ============================================================

SIGNALS: tuple[Signal, ...] = (
    # --- Excellence ---
    Signal(
        id="objectives_listed",
        label="Numbered objectives",
        description="Draft contains a structured list of numbered project objectives (O1/O2... or 1. To...)",
        criterion=EXCELLENCE,
        weight=0.22,
        required_for_threshold=True,
        section_hint="§1.1",
        how_to_fix='Add a numbered list "O1: To develop… O2: To validate…" with 3–6 SMART objectives in Section 1.1.',
        time_estimate_minutes=10,
        check=_objectives_listed,
    ),
    Signal(
        id="trl_mentioned",
        label="TRL progression stated",
        description="Draft states the current Technology Readiness Level and the target TRL at project end",
        criterion=EXCELLENCE,
        weight=0.12,
        required_for_threshold=True,
        section_hint="§1.1",
        how_to_fix='Add one sentence: "The current TRL is X. ACRONYM targets TRL Y by Month N." in Section 1.1.',
        time_estimate_minutes=3,
        check=_trl_mentioned,
    ),
    Signal(
        id="methodology_described",
        label="Methodology described",
        description="Draft contains a substantive methodology section with specific methods or approaches",
        criterion=EXCELLENCE,
        weight=0.22,
        required_for_threshold=True,
        section_hint="§1.2",
        how_to_fix="Expand Section 1.2 with: (a) overall approach narrative, (b) specific methods/tools, (c) validation strategy.",
        time_estimate_minutes=20,
        check=_methodology_described,
    ),
    Signal(
        id="sota_gap_identified",
        label="State-of-art gap identified",
        description="Draft identifies specific limitations in existing approaches that the project addresses",
        criterion=EXCELLENCE,
        weight=0.16,
        required_for_threshold=True,
        section_hint="§1.3",
        how_to_fix="In Section 1.3 name 2–4 concrete limitations of current approaches and explain how your project addresses each.",
        time_estimate_minutes=12,
        check=_sota_gap_identified,
    ),
    Signal(
        id="novelty_claim",
        label="Novelty claim made",
        description="Draft explicitly claims the project advances beyond the current state of the art",
        criterion=EXCELLENCE,
        weight=0.12,
        required_for_threshold=False,
        section_hint="§1.1 or §1.3",
        how_to_fix='Add one strong novelty statement: "ACRONYM goes beyond the state of the art by [specific advance]."',
        time_estimate_minutes=5,
        check=_novelty_claim,
    ),
    Signal(
        id="success_criteria",
        label="Quantified success criteria",
        description="Draft defines measurable success criteria with specific targets (%, numbers, benchmarks)",
        criterion=EXCELLENCE,
        weight=0.10,
        required_for_threshold=False,
        section_hint="§1.2",
        how_to_fix='Add measurable targets for each objective: "≥90% accuracy on benchmark X", "≥15% reduction in Y by Month Z".',
        time_estimate_minutes=8,
        check=_success_criteria,
    ),
    Signal(
        id="alternative_approaches",
        label="Alternative approaches discussed",
        description="Draft acknowledges alternative methodological choices and justifies the chosen approach",
        criterion=EXCELLENCE,
        weight=0.06,
        required_for_threshold=False,
        section_hint="§1.2",
        how_to_fix='Add 2 sentences: "We considered alternatives X and Y. We chose Z because [specific reasons]."',
        time_estimate_minutes=5,
        check=_alternative_approaches,
    ),

    # --- Impact ---
    Signal(
        id="outcomes_linked",
        label="Outcomes linked to call",
        description="Draft explicitly links project outcomes to the call topic's expected outcomes",
        criterion=IMPACT,
        weight=0.20,
        required_for_threshold=True,
        section_hint="§2.1",
        how_to_fix="In Section 2.1, copy each expected outcome from the call topic and explain how your project delivers it.",
        time_estimate_minutes=10,
        check=_outcomes_linked,
    ),
    Signal(
        id="kpi_table",
        label="KPI table with targets",
        description="Draft contains quantified key performance indicators with baseline and target values",
        criterion=IMPACT,
        weight=0.20,
        required_for_threshold=True,
        section_hint="§2.1",
        how_to_fix="Add a table: Indicator | Baseline | Target | Timeline. Include 4–6 rows with specific numbers.",
        time_estimate_minutes=8,
        check=_kpi_table,
    ),
    Signal(
        id="exploitation_plan",
        label="Exploitation / IP plan",
        description="Draft describes how results will be exploited commercially or deployed, with an IP strategy",
        criterion=IMPACT,
        weight=0.16,
        required_for_threshold=True,
        section_hint="§2.2",
        how_to_fix="Add a paragraph in Section 2.2 naming who exploits which result, IP ownership, and the commercialisation/deployment route.",
        time_estimate_minutes=10,
        check=_exploitation_plan,
    ),
    Signal(
        id="dissemination_plan",
        label="Dissemination plan",
        description="Draft describes planned publications, conferences, and communication activities",
        criterion=IMPACT,
        weight=0.16,
        required_for_threshold=True,
        section_hint="§2.3",
        how_to_fix="In Section 2.3 add: (a) target journal list, (b) conferences, (c) non-academic communication activities table.",
        time_estimate_minutes=8,
        check=_dissemination_plan,
    ),
    Signal(
        id="stakeholders_named",
        label="Stakeholders named",
        description="Draft identifies specific stakeholder groups who will benefit from or contribute to project outcomes",
        criterion=IMPACT,
        weight=0.14,
        required_for_threshold=False,
        section_hint="§2.1",
        how_to_fix="List 4–6 specific stakeholder groups in Section 2.1 and explain how each will benefit.",
        time_estimate_minutes=5,
        check=_stakeholders_named,
    ),
    Signal(
        id="open_access_commitment",
        label="Open access commitment",
        description="Draft commits to open access publications and/or FAIR data practices (mandatory in Horizon Europe)",
        criterion=IMPACT,
        weight=0.10,
        required_for_threshold=True,
        section_hint="§2.3 or §2.4",
        how_to_fix='Add: "All publications will be made immediately open access. Data will be deposited in [Zenodo] under FAIR principles."',
        time_estimate_minutes=3,
        check=_open_access_commitment,
    ),
    Signal(
        id="dmp_referenced",
        label="Data Management Plan referenced",
        description="Draft references the mandatory Data Management Plan deliverable (D1.1, Month 6)",
        criterion=IMPACT,
        weight=0.04,
        required_for_threshold=False,
        section_hint="§2.4",
        how_to_fix='Add: "A Data Management Plan (D1.1) will be submitted by Month 6 following the EC template."',
        time_estimate_minutes=3,
        check=_dmp_referenced,
    ),

    # --- Implementation ---
    Signal(
        id="work_packages_defined",
        label="Work packages defined",
        description="Draft contains a structured work package breakdown (WP1, WP2… with titles and responsibilities)",
        criterion=IMPLEMENTATION,
        weight=0.22,
        required_for_threshold=True,
        section_hint="§3.1",
        how_to_fix="Add a WP summary table (WP# | Title | Lead | Start | End | PM) followed by individual WP descriptions.",
        time_estimate_minutes=20,
        check=_work_packages_defined,
    ),
    Signal(
        id="milestones_present",
        label="Milestones defined",
        description="Draft defines verifiable milestones (MS1, MS2…) with month numbers",
        criterion=IMPLEMENTATION,
        weight=0.14,
        required_for_threshold=True,
        section_hint="§3.1",
        how_to_fix='Add milestones as verifiable achievements: "MS1 (M12): Prototype demonstrating TRL 4 on benchmark X — verified by D2.1."',
        time_estimate_minutes=10,
        check=_milestones_present,
    ),
    Signal(
        id="deliverables_present",
        label="Deliverables defined",
        description="Draft defines numbered deliverables (D1.1, D2.3…) with titles and due months",
        criterion=IMPLEMENTATION,
        weight=0.14,
        required_for_threshold=True,
        section_hint="§3.1",
        how_to_fix='List deliverables as "D1.1: Data Management Plan (Month 6)" under each WP. Include D1.1 as mandatory.',
        time_estimate_minutes=8,
        check=_deliverables_present,
    ),
    Signal(
        id="gantt_or_timeline",
        label="Gantt chart / timeline",
        description="Draft includes a visual Gantt chart or structured timeline showing WP scheduling",
        criterion=IMPLEMENTATION,
        weight=0.10,
        required_for_threshold=False,
        section_hint="§3.1",
        how_to_fix="Add a Gantt chart (ASCII table or description: WP | M1–M12 | M13–M24 …) showing critical path.",
        time_estimate_minutes=12,
        check=_gantt_or_timeline,
    ),
    Signal(
        id="risk_register",
        label="Risk register",
        description="Draft includes a risk register with likelihood, impact, and mitigation columns",
        criterion=IMPLEMENTATION,
        weight=0.14,
        required_for_threshold=True,
        section_hint="§3.2",
        how_to_fix="Add a risk table: Risk | Category | Likelihood (H/M/L) | Impact (H/M/L) | Mitigation | Owner",
        time_estimate_minutes=10,
        check=_risk_register,
    ),
    Signal(
        id="consortium_described",
        label="Consortium described",
        description="Draft describes the consortium composition with partner roles and complementarity",
        criterion=IMPLEMENTATION,
        weight=0.12,
        required_for_threshold=True,
        section_hint="§3.3",
        how_to_fix="Add a partner table (Name | Country | Type | Key expertise) and a complementarity narrative in §3.3.",
        time_estimate_minutes=8,
        check=_consortium_described,
    ),
    Signal(
        id="budget_justified",
        label="Budget justified",
        description="Draft justifies the requested budget with person-months linked to tasks and cost breakdowns",
        criterion=IMPLEMENTATION,
        weight=0.08,
        required_for_threshold=False,
        section_hint="§3.4",
        how_to_fix="Add §3.4 with budget table (Partner | Personnel | Equipment | Travel | Total) and person-month justification.",
        time_estimate_minutes=12,
        check=_budget_justified,
    ),
    Signal(
        id="management_structure",
        label="Management structure",
        description="Draft describes the project governance structure (coordinator, steering committee, decision-making)",
        criterion=IMPLEMENTATION,
        weight=0.06,
        required_for_threshold=False,
        section_hint="§3.2",
        how_to_fix="Add governance diagram/text: Project Coordinator → Steering Committee → WP Leaders; decision-making procedures.",
        time_estimate_minutes=8,
        check=_management_structure,
    ),
)
