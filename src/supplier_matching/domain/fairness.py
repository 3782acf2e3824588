"""Fairness data reducer: exposure history to a bounded multiplier and CTR bonus.

Already-popular suppliers collect more impressions and therefore more bookings.
The multiplier lifts under-exposed candidates and gently damps over-exposed
ones, while the CTR bonus rewards candidates that searchers actually click.

Usage example:
    from supplier_matching.domain.fairness import FairnessTuning, fairness_multiplier
    from supplier_matching.domain.models import FairnessData

    tuning = FairnessTuning()
    data = FairnessData(
        impressions_this_week=3,
        total_impressions=40,
        fairness_score=0.9,
        click_through_rate=0.2,
    )
    assert fairness_multiplier(data, tuning) > 1.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .models import FairnessData

NEUTRAL_MULTIPLIER = 1.0
# (minimum click-through rate, bonus), highest first
CTR_BONUS_STEPS = ((0.25, 5), (0.15, 3), (0.10, 0), (0.05, -2))
CTR_BONUS_FLOOR = -3


@dataclass(frozen=True)
class FairnessTuning:
    """Tunables for the fairness reducer, passed explicitly to every call."""

    enabled: bool = True
    weight: float = 0.15
    impression_threshold: int = 10
    min_fairness_score: float = 0.1
    ctr_min_impressions: int = 20

    @property
    def multiplier_floor(self) -> float:
        return NEUTRAL_MULTIPLIER - self.weight

    @property
    def multiplier_ceiling(self) -> float:
        return NEUTRAL_MULTIPLIER + self.weight


@dataclass(frozen=True)
class ImpressionRecord:
    """Raw exposure counters for one candidate within one service category."""

    candidate_id: str
    impressions_this_week: int
    total_impressions: int
    click_through_rate: float


def fairness_multiplier(data: FairnessData | None, tuning: FairnessTuning) -> float:
    """Return a multiplier within ``[1 - weight, 1 + weight]``.

    Candidates below the weekly impression threshold get a flat half-weight
    boost; the rest are mapped linearly from their stored fairness score.
    """
    if not tuning.enabled or data is None:
        return NEUTRAL_MULTIPLIER

    if data.impressions_this_week < tuning.impression_threshold:
        return NEUTRAL_MULTIPLIER + 0.5 * tuning.weight

    score = min(1.0, max(tuning.min_fairness_score, data.fairness_score))
    multiplier = tuning.multiplier_floor + score * 2 * tuning.weight
    return min(tuning.multiplier_ceiling, max(tuning.multiplier_floor, multiplier))


def ctr_bonus(data: FairnessData | None, tuning: FairnessTuning) -> int:
    """Return a click-through bonus in ``[-3, 5]`` once enough impressions exist."""
    if not tuning.enabled or data is None:
        return 0
    if data.total_impressions < tuning.ctr_min_impressions:
        return 0

    for minimum, bonus in CTR_BONUS_STEPS:
        if data.click_through_rate >= minimum:
            return bonus
    return CTR_BONUS_FLOOR


def build_fairness_snapshots(
    records: Iterable[ImpressionRecord],
    tuning: FairnessTuning,
) -> Mapping[str, FairnessData]:
    """Reduce raw impression counters for one category pool to fairness snapshots.

    The fairness score decays with the square root of a candidate's share of
    the busiest candidate's weekly impressions, never below the tuning floor.
    """
    items = list(records)
    busiest = max((record.impressions_this_week for record in items), default=0)
    busiest = max(busiest, 1)

    snapshots: dict[str, FairnessData] = {}
    for record in items:
        if record.impressions_this_week > 0:
            score = 1.0 - math.sqrt(record.impressions_this_week / busiest)
        else:
            score = 1.0
        snapshots[record.candidate_id] = FairnessData(
            impressions_this_week=record.impressions_this_week,
            total_impressions=record.total_impressions,
            fairness_score=max(tuning.min_fairness_score, score),
            click_through_rate=record.click_through_rate,
        )
    return snapshots
