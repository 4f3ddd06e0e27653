"""
Shared drafts and rubric stubs for the reviewer tests.
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from grantcraft.registry import Rubric, SignalRegistry, get_rubric
from grantcraft.signals import RawCheckResult


STRONG_DRAFT = """\
# AQUASENSE — Low-cost nitrate sensing for European catchments

# 1. Excellence

## 1.1 Objectives

The current TRL is 3. AQUASENSE targets TRL 3 → TRL 6 by Month 36.

O1: To develop a novel low-cost nitrate sensor with an accuracy of 95% in field conditions.
O2: To validate the sensor at 3 pilot sites with farmers and water utilities.
O3: To build an open data platform for nitrate monitoring.
O4: To demonstrate a 30% reduction in fertiliser over-application.
O5: To prepare market uptake of the sensor.

AQUASENSE goes beyond the state of the art by combining optical sensing with on-device calibration.
This innovative approach differs from existing laboratory methods.

## 1.2 Methodology

Our approach combines three methods. We will use a calibration algorithm and a machine-learning model
inside a modular data pipeline. We will employ a field validation protocol at each site.

Success criteria: ≥90% agreement with laboratory reference; target of 500 deployed units;
achieving 20 % cost reduction per unit.

We considered alternative approaches such as ion-selective electrodes. We chose optical sensing
rather than electrochemical sensing; electrodes were rejected because of maintenance cost.

## 1.3 State of the art

Existing methods fail to provide continuous data. The key limitation is cost, and the main gap is
spatial coverage. AQUASENSE addresses this gap.

# 2. Impact

## 2.1 Expected outcomes

AQUASENSE contributes to the call expected outcome 1 on water quality monitoring.
Stakeholders: farmers, water utilities, policymakers and end-users.

Progress is tracked with the following KPI table.

| Indicator | Baseline | Target |
|---|---|---|
| Sensor cost (EUR) | 2000 | 200 |
| Monitored sites | 0 | 30 |

## 2.2 Exploitation

Exploitation plan: the SME partner will commercialise the sensor. IP ownership is defined in the
consortium agreement and a patent will be filed. Market entry is planned for 2028 under a licensing model.

## 2.3 Dissemination

Dissemination: results will appear in peer-reviewed publications; target journals include Water Research.
We will present at two conferences. All publications will be immediately open access under CC BY.
Data will be deposited in Zenodo following the FAIR principles.

## 2.4 Data management

By Month 6 we deliver the DMP as D1.1 Data Management Plan.

# 3. Implementation

## 3.1 Work plan

| WP | Title | Lead | Start | End |
|---|---|---|---|---|
| WP1 | Management | UniWater | M1 | M36 |
| WP2 | Sensor development | SensoTech | M1 | M18 |
| WP3 | Pilots | AquaUtil | M12 | M36 |
| WP4 | Dissemination and exploitation | UniWater | M1 | M36 |

Work package 1 coordinates the project. The Gantt chart shows WP2 running M1–M18 on the critical path.

Milestones: MS1 (M12): Prototype validated in the lab. MS2 (M24): Pilot data collected. MS3 (M36): Final demonstration.

Deliverables: D1.1 Data Management Plan (Month 6), D2.1 Sensor prototype (M12), D3.1 Pilot report (M30),
D4.1 Dissemination plan (M6).

## 3.2 Risks and management

The risk register below lists each risk with its likelihood and mitigation.

| Risk | Likelihood | Impact | Mitigation |
|---|---|---|---|
| R1 Sensor drift risk | M | H | Monthly recalibration |

The Project Coordinator chairs the Steering Committee; WP leaders report monthly.
Governance and decision-making rules are set in the consortium agreement.

## 3.3 Consortium

The consortium brings together 3 partners with complementary expertise.

| Partner | Country | Type |
|---|---|---|
| UniWater | NL | University |
| SensoTech | DE | SME |

## 3.4 Budget

Budget justification: 240 person-months in total; equipment €120,000; value for money is ensured.

| Partner | Personnel | Equipment | Total |
|---|---|---|---|
"""

UNRELATED_DRAFT = (
    "The weather today is pleasant and we walked along the river to see the ducks. "
    "Afterwards we had lunch in a small cafe and talked about the holidays."
)


@pytest.fixture
def strong_draft() -> str:
    return STRONG_DRAFT


@pytest.fixture
def unrelated_draft() -> str:
    return UNRELATED_DRAFT


def constant_check(confidence: float, evidence: tuple[str, ...] = ()):
    """A check that ignores the draft and reports a fixed confidence."""

    def check(draft: str) -> RawCheckResult:
        return RawCheckResult(
            found=confidence > 0,
            confidence=confidence,
            evidence=evidence if confidence > 0 else (),
            detail=f"stubbed at {confidence}",
        )

    return check


def stub_rubric(per_criterion: dict[str, float]) -> Rubric:
    """
    The Horizon Europe rubric with every check replaced by a constant,
    one confidence per criterion. Weights and metadata are unchanged.
    """
    base = get_rubric("horizon_europe_ria_ia")
    signals = tuple(
        replace(s, check=constant_check(per_criterion[s.criterion]))
        for s in base.registry.signals
    )
    return Rubric(
        scheme_id=base.scheme_id,
        name=base.name,
        version=base.version,
        registry=SignalRegistry.build(base.registry.criteria, signals),
        min_overall_score=base.min_overall_score,
    )
