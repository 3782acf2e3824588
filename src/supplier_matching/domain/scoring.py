"""Criterion scorers: one bounded, independent sub-score per matching dimension.

Every scorer is a pure function of the request and candidate fields it needs.
Missing optional data yields a documented neutral or minimal value, never an
error.

Usage example:
    from supplier_matching.domain.scoring import score_budget, score_cultural

    assert score_budget(1500, 3000, 1500, 3000) == 20
    assert score_cultural(("maghrebin",), "essential", ()) == 0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from .models import CultureWeight
from .regions import any_in_region, normalise_code

# Cultural ceiling by declared importance.
CULTURAL_CEILINGS = {
    "essential": 30,
    "important": 25,
    "nice_to_have": 15,
}
DEFAULT_CULTURAL_CEILING = 20

BUDGET_MAX = 20
BUDGET_NEUTRAL = 10
BUDGET_MINIMAL = 5
BUDGET_OVERLAP_BASE = 15
BUDGET_OVERLAP_GOOD = 18
BUDGET_OVERLAP_GOOD_FRACTION = 0.3
BUDGET_OVERLAP_STRONG_FRACTION = 0.5
BUDGET_DISTANCE_START = 15

# Multiplier applied to the relative midpoint distance when ranges are disjoint.
FLEXIBILITY_PENALTIES = {
    "flexible": 0.3,
    "somewhat_flexible": 0.5,
    "strict": 1.0,
}
DEFAULT_FLEXIBILITY_PENALTY = 0.5

REPUTATION_MAX = 20
REPUTATION_UNRATED = 5
REPUTATION_RATING_POINTS = 16
# (minimum review count, bonus), highest first
REVIEW_BONUS_STEPS = ((50, 4), (20, 3), (10, 2), (5, 1))

EXPERIENCE_MAX = 10
EXPERIENCE_UNKNOWN = 3

LOCATION_MAX = 10
LOCATION_NEUTRAL = 5
LOCATION_SAME_REGION = 6
LOCATION_MISMATCH = 2

# (minimum overlap fraction, points), highest first
TAG_STEPS = ((1.0, 10), (0.75, 8), (0.5, 5), (0.25, 2))
TAG_MISSING_PENALTY = -2
SPECIALTY_STEPS = ((1.0, 15), (0.75, 12), (0.5, 8), (0.25, 4))
SPECIALTY_MISSING_PENALTY = -3

CAPACITY_WITHIN = 10
CAPACITY_NEAR_MIN = 5
CAPACITY_NEAR_MIN_FRACTION = 0.8
CAPACITY_BELOW_MIN = 0
# (maximum overflow fraction beyond capacity_max, points)
CAPACITY_OVERFLOW_STEPS = ((0.10, 5), (0.20, 2))
CAPACITY_OVERFLOW_PENALTY = -5


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded towards +infinity."""
    return math.floor(value + 0.5)


def cultural_ceiling(cultural_importance: str) -> int:
    return CULTURAL_CEILINGS.get(cultural_importance, DEFAULT_CULTURAL_CEILING)


def score_cultural(
    requested: Sequence[str],
    cultural_importance: str,
    offered: Sequence[CultureWeight],
) -> int:
    """Score cultural fit as the mean expertise weight over requested cultures."""
    if not requested or not offered:
        return 0

    weights = {culture.culture_id: culture.weight for culture in offered}
    mean_weight = sum(weights.get(culture_id, 0.0) for culture_id in requested) / len(requested)
    return round_half_up(mean_weight * cultural_ceiling(cultural_importance))


def score_budget(
    request_min: float | None,
    request_max: float | None,
    candidate_min: float | None,
    candidate_max: float | None,
    flexibility: str = "somewhat_flexible",
) -> int:
    """Score price compatibility from the overlap of two closed intervals."""
    if not request_max:
        return BUDGET_NEUTRAL
    if not candidate_min:
        return BUDGET_MINIMAL

    low = request_min or 0.0
    high = request_max
    offer_low = candidate_min
    offer_high = candidate_max or candidate_min * 2
    offer_mid = (offer_low + offer_high) / 2

    if low <= offer_high and offer_low <= high:
        if low <= offer_mid <= high:
            return BUDGET_MAX

        score = BUDGET_OVERLAP_BASE
        request_span = high - low
        if request_span > 0:
            overlap = max(0.0, min(high, offer_high) - max(low, offer_low))
            # Measured against the request span only.
            fraction = overlap / request_span
            if fraction > BUDGET_OVERLAP_STRONG_FRACTION:
                score = BUDGET_MAX
            elif fraction > BUDGET_OVERLAP_GOOD_FRACTION:
                score = BUDGET_OVERLAP_GOOD
        return score

    request_mid = (low + high) / 2
    distance = abs(request_mid - offer_mid) / request_mid if request_mid > 0 else 1.0
    penalty = FLEXIBILITY_PENALTIES.get(flexibility, DEFAULT_FLEXIBILITY_PENALTY)
    return max(0, round_half_up(BUDGET_DISTANCE_START - distance * 100 * penalty))


def review_bonus(review_count: int | None) -> int:
    count = review_count or 0
    for minimum, bonus in REVIEW_BONUS_STEPS:
        if count >= minimum:
            return bonus
    return 0


def score_reputation(average_rating: float | None, review_count: int | None) -> int:
    """Score reputation from the average rating plus a review-volume bonus."""
    if not average_rating:
        return REPUTATION_UNRATED
    rating = min(5.0, average_rating)
    return round_half_up(rating / 5 * REPUTATION_RATING_POINTS + review_bonus(review_count))


def score_experience(years_experience: float | None) -> int:
    if not years_experience:
        return EXPERIENCE_UNKNOWN
    return min(EXPERIENCE_MAX, round_half_up(years_experience))


def score_location(
    region_code: str | None,
    city: str | None,
    coverage_regions: Sequence[str],
    primary_city: str | None,
) -> int:
    """Score geographic fit: exact department or city, then same region."""
    if not region_code and not city:
        return LOCATION_NEUTRAL

    if region_code:
        coverage = {normalise_code(code) for code in coverage_regions}
        if normalise_code(region_code) in coverage:
            return LOCATION_MAX

    if city and primary_city and city.strip().lower() == primary_city.strip().lower():
        return LOCATION_MAX

    if any_in_region(region_code, coverage_regions):
        return LOCATION_SAME_REGION

    return LOCATION_MISMATCH


def score_tags(requested: Sequence[str], offered: Sequence[str]) -> int:
    """Bonus for style tags found on the candidate (exact comparison)."""
    return _overlap_bonus(
        list(requested),
        set(offered),
        steps=TAG_STEPS,
        missing_penalty=TAG_MISSING_PENALTY,
    )


def score_specialty(requested: Sequence[str], offered: Sequence[str]) -> int:
    """Bonus for specialty tags, compared case- and whitespace-insensitively."""
    return _overlap_bonus(
        [_normalise_tag(tag) for tag in requested],
        {_normalise_tag(tag) for tag in offered},
        steps=SPECIALTY_STEPS,
        missing_penalty=SPECIALTY_MISSING_PENALTY,
    )


def score_capacity(
    guest_count: int | None,
    capacity_min: int | None,
    capacity_max: int | None,
) -> int | None:
    """Score event scale against declared capacity, or None when not applicable."""
    if guest_count is None or (capacity_min is None and capacity_max is None):
        return None

    if capacity_min is not None and guest_count < capacity_min:
        if guest_count >= capacity_min * CAPACITY_NEAR_MIN_FRACTION:
            return CAPACITY_NEAR_MIN
        return CAPACITY_BELOW_MIN

    if capacity_max is None or guest_count <= capacity_max:
        return CAPACITY_WITHIN

    if capacity_max == 0:
        return CAPACITY_OVERFLOW_PENALTY
    overflow = (guest_count - capacity_max) / capacity_max
    for limit, points in CAPACITY_OVERFLOW_STEPS:
        if overflow <= limit:
            return points
    return CAPACITY_OVERFLOW_PENALTY


def _normalise_tag(tag: str) -> str:
    return " ".join(tag.split()).lower()


def _overlap_bonus(
    requested: list[str],
    offered: set[str],
    *,
    steps: Iterable[tuple[float, int]],
    missing_penalty: int,
) -> int:
    wanted = [tag for tag in dict.fromkeys(requested) if tag]
    if not wanted:
        return 0
    if not offered:
        return missing_penalty

    fraction = sum(1 for tag in wanted if tag in offered) / len(wanted)
    for minimum, points in steps:
        if fraction >= minimum:
            return points
    return 0
