"""
Tests for SignalRegistry and the rubric table.

A misweighted rubric yields plausible but wrong scores, so construction
must refuse it outright.
"""

from dataclasses import replace

import pytest

from grantcraft import horizon_europe
from grantcraft.errors import (
    RubricConfigurationError,
    SignalNotFoundError,
    UnknownSchemeError,
)
from grantcraft.registry import RUBRICS, WEIGHT_TOLERANCE, SignalRegistry, get_rubric
from grantcraft.signals import Criterion

from tests.conftest import constant_check

CRITERIA = horizon_europe.CRITERIA
SIGNALS = horizon_europe.SIGNALS


def _reweighted(signal_id: str, weight: float):
    return tuple(
        replace(s, weight=weight) if s.id == signal_id else s
        for s in SIGNALS
    )


class TestHorizonEuropeRubric:

    def test_registered(self):
        assert "horizon_europe_ria_ia" in RUBRICS
        rubric = get_rubric("horizon_europe_ria_ia")
        assert rubric.version == "1.0.0"
        assert rubric.min_overall_score == 10.0
        assert rubric.max_possible_score == 15.0

    def test_signal_counts(self):
        registry = get_rubric("horizon_europe_ria_ia").registry
        assert len(registry) == 22
        assert len(registry.signals_for_criterion("excellence")) == 7
        assert len(registry.signals_for_criterion("impact")) == 7
        assert len(registry.signals_for_criterion("implementation")) == 8

    def test_weights_sum_to_one(self):
        totals = get_rubric("horizon_europe_ria_ia").registry.weight_totals()
        assert set(totals) == {"excellence", "impact", "implementation"}
        for total in totals.values():
            assert abs(total - 1.0) <= WEIGHT_TOLERANCE

    def test_criteria_defaults(self):
        for c in get_rubric("horizon_europe_ria_ia").registry.criteria:
            assert c.max_score == 5.0
            assert c.threshold == 3.0

    def test_declaration_order_preserved(self):
        registry = get_rubric("horizon_europe_ria_ia").registry
        ids = [s.id for s in registry.signals_for_criterion("excellence")]
        assert ids == [
            "objectives_listed",
            "trl_mentioned",
            "methodology_described",
            "sota_gap_identified",
            "novelty_claim",
            "success_criteria",
            "alternative_approaches",
        ]
        assert [s.id for s in registry.signals] == [s.id for s in SIGNALS]

    def test_signal_by_id(self):
        registry = get_rubric("horizon_europe_ria_ia").registry
        signal = registry.signal_by_id("kpi_table")
        assert signal.criterion == "impact"
        assert signal.weight == 0.20

    def test_unknown_signal_raises(self):
        registry = get_rubric("horizon_europe_ria_ia").registry
        with pytest.raises(SignalNotFoundError):
            registry.signal_by_id("does_not_exist")

    def test_signal_not_found_is_lookup_error(self):
        registry = get_rubric("horizon_europe_ria_ia").registry
        with pytest.raises(LookupError):
            registry.signal_by_id("does_not_exist")

    def test_unknown_criterion_lookup(self):
        registry = get_rubric("horizon_europe_ria_ia").registry
        with pytest.raises(LookupError):
            registry.signals_for_criterion("relevance")

    def test_unknown_scheme(self):
        with pytest.raises(UnknownSchemeError, match="horizon_europe_ria_ia"):
            get_rubric("erc_stg")

    def test_rubrics_read_only(self):
        with pytest.raises(TypeError):
            RUBRICS["other"] = RUBRICS["horizon_europe_ria_ia"]

    def test_describe_hides_checks(self):
        for signal in SIGNALS:
            described = signal.describe()
            assert "check" not in described
            assert described["id"] == signal.id

    def test_rubric_describe(self):
        described = get_rubric("horizon_europe_ria_ia").describe()
        assert described["maxPossibleScore"] == 15.0
        assert [c["signalCount"] for c in described["criteria"]] == [7, 7, 8]


class TestBuildValidation:

    def test_valid_build(self):
        registry = SignalRegistry.build(CRITERIA, SIGNALS)
        assert len(registry) == len(SIGNALS)

    def test_weights_off_by_more_than_tolerance(self):
        # objectives_listed 0.22 -> 0.30 puts Excellence at 1.08
        with pytest.raises(RubricConfigurationError, match="excellence"):
            SignalRegistry.build(CRITERIA, _reweighted("objectives_listed", 0.30))

    def test_weights_within_tolerance_accepted(self):
        # 0.22 -> 0.225 puts Excellence at 1.005
        registry = SignalRegistry.build(CRITERIA, _reweighted("objectives_listed", 0.225))
        assert registry.weight_totals()["excellence"] == pytest.approx(1.005)

    def test_zero_weight_rejected(self):
        with pytest.raises(RubricConfigurationError, match="outside"):
            SignalRegistry.build(CRITERIA, _reweighted("novelty_claim", 0.0))

    def test_weight_above_one_rejected(self):
        with pytest.raises(RubricConfigurationError, match="outside"):
            SignalRegistry.build(CRITERIA, _reweighted("novelty_claim", 1.5))

    def test_duplicate_id_rejected(self):
        with pytest.raises(RubricConfigurationError, match="Duplicate signal id"):
            SignalRegistry.build(CRITERIA, SIGNALS + (SIGNALS[0],))

    def test_unknown_criterion_rejected(self):
        stray = replace(SIGNALS[0], id="stray", criterion="relevance")
        with pytest.raises(RubricConfigurationError, match="unknown criterion"):
            SignalRegistry.build(CRITERIA, SIGNALS + (stray,))

    def test_criterion_without_signals_rejected(self):
        extra = CRITERIA + (Criterion(id="relevance", title="Relevance"),)
        with pytest.raises(RubricConfigurationError, match="relevance"):
            SignalRegistry.build(extra, SIGNALS)

    def test_no_criteria_rejected(self):
        with pytest.raises(RubricConfigurationError):
            SignalRegistry.build((), ())

    def test_custom_rubric(self):
        criteria = (Criterion(id="only", title="Only"),)
        signals = (
            replace(SIGNALS[0], criterion="only", weight=0.5, check=constant_check(1.0)),
            replace(SIGNALS[1], criterion="only", weight=0.5, check=constant_check(0.0)),
        )
        registry = SignalRegistry.build(criteria, signals)
        assert registry.criterion("only").title == "Only"
        assert registry.weight_totals() == {"only": 1.0}
