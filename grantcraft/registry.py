"""
Signal Registry — Validated, Immutable Rubric Configuration

A SignalRegistry is built once per rubric and read many times. The
build step is the only place rubric configuration is checked:

  - signal ids are unique
  - every signal belongs to a declared criterion
  - every weight is in (0, 1]
  - each criterion's weights sum to 1.0 +/- 0.01

Any violation raises RubricConfigurationError. A misweighted rubric
would produce plausible-looking but wrong scores, so it never gets as
far as serving a request.

Rubrics are keyed by scheme id. All rubrics are built at import time,
so a broken rubric fails the process on startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, NoReturn

from grantcraft import horizon_europe
from grantcraft.errors import (
    RubricConfigurationError,
    SignalNotFoundError,
    UnknownSchemeError,
)
from grantcraft.logging import get_logger
from grantcraft.signals import Criterion, Signal

logger = get_logger("registry")

WEIGHT_TOLERANCE = 0.01


class SignalRegistry:
    """
    Ordered, criterion-partitioned collection of signals.

    Construct via SignalRegistry.build(). Instances hold only tuples and
    read-only mappings and are safe to share between threads.
    """

    def __init__(
        self,
        criteria: tuple[Criterion, ...],
        signals: tuple[Signal, ...],
        by_criterion: Mapping[str, tuple[Signal, ...]],
        by_id: Mapping[str, Signal],
    ):
        self._criteria = criteria
        self._signals = signals
        self._by_criterion = by_criterion
        self._by_id = by_id

    @classmethod
    def build(
        cls,
        criteria: Iterable[Criterion],
        signals: Iterable[Signal],
        tolerance: float = WEIGHT_TOLERANCE,
    ) -> "SignalRegistry":
        """Validate and freeze a rubric. Raises RubricConfigurationError."""
        criteria = tuple(criteria)
        signals = tuple(signals)

        criterion_ids = [c.id for c in criteria]
        if not criteria:
            _fail("Rubric declares no criteria.")
        if len(set(criterion_ids)) != len(criterion_ids):
            _fail(f"Duplicate criterion ids: {criterion_ids}")

        by_id: dict[str, Signal] = {}
        grouped: dict[str, list[Signal]] = {cid: [] for cid in criterion_ids}
        for signal in signals:
            if signal.id in by_id:
                _fail(f"Duplicate signal id: {signal.id!r}", signal_id=signal.id)
            if signal.criterion not in grouped:
                _fail(
                    f"Signal {signal.id!r} belongs to unknown criterion "
                    f"{signal.criterion!r}",
                    signal_id=signal.id,
                )
            if not 0.0 < signal.weight <= 1.0:
                _fail(
                    f"Signal {signal.id!r} weight {signal.weight} is outside (0, 1]",
                    signal_id=signal.id,
                )
            by_id[signal.id] = signal
            grouped[signal.criterion].append(signal)

        for cid, members in grouped.items():
            total = sum(s.weight for s in members)
            if abs(total - 1.0) > tolerance:
                _fail(
                    f"Signal weights for criterion {cid!r} sum to {total:.4f} "
                    f"(expected 1.00)",
                    criterion=cid,
                    weight_total=round(total, 4),
                )

        return cls(
            criteria=criteria,
            signals=signals,
            by_criterion=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
            by_id=MappingProxyType(by_id),
        )

    @property
    def criteria(self) -> tuple[Criterion, ...]:
        return self._criteria

    @property
    def signals(self) -> tuple[Signal, ...]:
        return self._signals

    def criterion(self, criterion_id: str) -> Criterion:
        for c in self._criteria:
            if c.id == criterion_id:
                return c
        raise LookupError(f"Criterion not found: {criterion_id!r}")

    def signals_for_criterion(self, criterion_id: str) -> tuple[Signal, ...]:
        """All signals for a criterion, in declaration order."""
        try:
            return self._by_criterion[criterion_id]
        except KeyError:
            raise LookupError(f"Criterion not found: {criterion_id!r}") from None

    def signal_by_id(self, signal_id: str) -> Signal:
        """Find a signal by id. Unknown ids are programming errors."""
        try:
            return self._by_id[signal_id]
        except KeyError:
            raise SignalNotFoundError(f"Signal not found: {signal_id!r}") from None

    def weight_totals(self) -> dict[str, float]:
        return {
            cid: round(sum(s.weight for s in members), 4)
            for cid, members in self._by_criterion.items()
        }

    def __len__(self) -> int:
        return len(self._signals)


def _fail(message: str, **context) -> NoReturn:
    logger.error(f"Rubric configuration error: {message}", extra=context)
    raise RubricConfigurationError(message)


# ============================================================
# RUBRICS (keyed by scheme id)
# ============================================================

@dataclass(frozen=True)
class Rubric:
    """A versioned rubric for one funding scheme."""
    scheme_id: str
    name: str
    version: str
    registry: SignalRegistry
    min_overall_score: float

    @property
    def max_possible_score(self) -> float:
        return sum(c.max_score for c in self.registry.criteria)

    def describe(self) -> dict:
        return {
            "schemeId": self.scheme_id,
            "name": self.name,
            "version": self.version,
            "criteria": [
                {
                    "id": c.id,
                    "title": c.title,
                    "maxScore": c.max_score,
                    "threshold": c.threshold,
                    "signalCount": len(self.registry.signals_for_criterion(c.id)),
                }
                for c in self.registry.criteria
            ],
            "maxPossibleScore": self.max_possible_score,
            "minOverallScore": self.min_overall_score,
        }


def _build_rubrics() -> Mapping[str, Rubric]:
    rubrics = [
        Rubric(
            scheme_id=horizon_europe.SCHEME_ID,
            name=horizon_europe.SCHEME_NAME,
            version=horizon_europe.RUBRIC_VERSION,
            registry=SignalRegistry.build(horizon_europe.CRITERIA, horizon_europe.SIGNALS),
            min_overall_score=horizon_europe.MIN_OVERALL_SCORE,
        ),
    ]
    return MappingProxyType({r.scheme_id: r for r in rubrics})


RUBRICS: Mapping[str, Rubric] = _build_rubrics()


def get_rubric(scheme_id: str) -> Rubric:
    """Look up the rubric for a scheme. Raises UnknownSchemeError."""
    try:
        return RUBRICS[scheme_id]
    except KeyError:
        raise UnknownSchemeError(
            f"Unknown scheme: {scheme_id!r}. Available: {', '.join(sorted(RUBRICS))}"
        ) from None
