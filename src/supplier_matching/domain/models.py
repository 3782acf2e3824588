"""Immutable records scored by the matching engine.

Usage example:
    from supplier_matching.domain.models import Candidate, MatchRequest, normalise_cultures

    request = MatchRequest(
        service_category="photographe",
        cultures=("maghrebin",),
        cultural_importance="essential",
        budget_min=1500,
        budget_max=3000,
        region_code="75",
    )
    candidate = Candidate(
        candidate_id="p-1",
        service_category="photographe",
        cultures=normalise_cultures([("maghrebin", "specialised")]),
        budget_min=1500,
        budget_max=3000,
        coverage_regions=("75",),
    )
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from ..exceptions import InvalidNumericInputError
from ..io_contracts import CandidateIO, CultureIO, FairnessDataIO, MatchRequestIO

CulturalImportance = Literal["essential", "important", "nice_to_have"]
BudgetFlexibility = Literal["flexible", "somewhat_flexible", "strict"]
ExpertiseLevel = Literal["specialised", "experienced"]

# Weight contributed by a culture the candidate covers at a given expertise.
EXPERTISE_WEIGHTS: dict[str, float] = {
    "specialised": 1.0,
    "experienced": 0.6,
}
UNANNOTATED_CULTURE_WEIGHT = 1.0

DEFAULT_CULTURAL_IMPORTANCE = "important"
DEFAULT_BUDGET_FLEXIBILITY = "somewhat_flexible"


@dataclass(frozen=True)
class CultureWeight:
    """A culture a candidate serves, weighted by declared expertise."""

    culture_id: str
    weight: float


@dataclass(frozen=True)
class FairnessData:
    """Exposure and click history snapshot for one candidate."""

    impressions_this_week: int
    total_impressions: int
    fairness_score: float
    click_through_rate: float

    def __post_init__(self) -> None:
        _require_non_negative("impressions_this_week", self.impressions_this_week)
        _require_non_negative("total_impressions", self.total_impressions)
        _require_non_negative("fairness_score", self.fairness_score)
        _require_non_negative("click_through_rate", self.click_through_rate)
        if self.click_through_rate > 1.0:
            raise InvalidNumericInputError(
                "click_through_rate", self.click_through_rate, "within [0, 1]"
            )


@dataclass(frozen=True)
class MatchRequest:
    """Structured needs of one searcher; the left-hand side of scoring."""

    service_category: str
    cultures: tuple[str, ...] = ()
    cultural_importance: str = DEFAULT_CULTURAL_IMPORTANCE
    budget_min: float | None = None
    budget_max: float | None = None
    budget_flexibility: str = DEFAULT_BUDGET_FLEXIBILITY
    region_code: str | None = None
    city: str | None = None
    guest_count: int | None = None
    tags: tuple[str, ...] = ()
    specialty_tags: tuple[str, ...] = ()
    event_date: str | None = None

    def __post_init__(self) -> None:
        _require_non_negative("budget_min", self.budget_min)
        _require_non_negative("budget_max", self.budget_max)
        _require_non_negative("guest_count", self.guest_count)

    @property
    def has_location(self) -> bool:
        return bool(self.region_code) or bool(self.city)


@dataclass(frozen=True)
class Candidate:
    """Read-only snapshot of a supplier profile at scoring time."""

    candidate_id: str
    service_category: str = ""
    service_subcategory: str | None = None
    display_name: str = ""
    cultures: tuple[CultureWeight, ...] = ()
    budget_min: float | None = None
    budget_max: float | None = None
    average_rating: float | None = None
    review_count: int = 0
    years_experience: float | None = None
    coverage_regions: tuple[str, ...] = ()
    primary_city: str | None = None
    tags: tuple[str, ...] = ()
    specialty_tags: tuple[str, ...] = ()
    capacity_min: int | None = None
    capacity_max: int | None = None
    fairness_data: FairnessData | None = None
    unavailable_dates: tuple[str, ...] = ()
    avatar_url: str | None = None
    short_description: str = ""
    portfolio_count: int = 0
    social_links: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _require_non_negative("budget_min", self.budget_min)
        _require_non_negative("budget_max", self.budget_max)
        _require_non_negative("average_rating", self.average_rating)
        if self.average_rating is not None and self.average_rating > 5.0:
            raise InvalidNumericInputError("average_rating", self.average_rating, "within [0, 5]")
        _require_non_negative("review_count", self.review_count)
        _require_non_negative("years_experience", self.years_experience)
        _require_non_negative("capacity_min", self.capacity_min)
        _require_non_negative("capacity_max", self.capacity_max)
        _require_non_negative("portfolio_count", self.portfolio_count)


def normalise_cultures(
    cultures: Iterable[str | tuple[str, str]],
) -> tuple[CultureWeight, ...]:
    """Normalise plain or expertise-annotated culture lists into weights.

    Plain identifiers weigh 1.0. Annotated pairs weigh by expertise level.
    Duplicate identifiers keep the highest weight seen, in first-seen order.
    """
    weights: dict[str, float] = {}
    for entry in cultures:
        if isinstance(entry, str):
            culture_id = entry.strip()
            weight = UNANNOTATED_CULTURE_WEIGHT
        else:
            raw_id, level = entry
            culture_id = raw_id.strip()
            weight = EXPERTISE_WEIGHTS[level]
        if not culture_id:
            continue
        weights[culture_id] = max(weight, weights.get(culture_id, 0.0))
    return tuple(CultureWeight(culture_id=key, weight=value) for key, value in weights.items())


def _require_non_negative(field_name: str, value: float | int | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not math.isfinite(value) or value < 0:
        raise InvalidNumericInputError(field_name, value)


def _cultures_from_io(payloads: Iterable[CultureIO]) -> tuple[CultureWeight, ...]:
    entries: list[str | tuple[str, str]] = []
    for payload in payloads:
        level = payload["expertise_level"]
        entries.append((payload["culture_id"], level) if level else payload["culture_id"])
    return normalise_cultures(entries)


def _fairness_from_io(payload: FairnessDataIO | None) -> FairnessData | None:
    if payload is None:
        return None
    return FairnessData(
        impressions_this_week=payload["impressions_this_week"],
        total_impressions=payload["total_impressions"],
        fairness_score=payload["fairness_score"],
        click_through_rate=payload["click_through_rate"],
    )


def build_request(payload: MatchRequestIO) -> MatchRequest:
    return MatchRequest(
        service_category=payload["service_category"],
        cultures=tuple(dict.fromkeys(payload["cultures"])),
        cultural_importance=payload["cultural_importance"],
        budget_min=payload["budget_min"],
        budget_max=payload["budget_max"],
        budget_flexibility=payload["budget_flexibility"],
        region_code=payload["region_code"],
        city=payload["city"],
        guest_count=payload["guest_count"],
        tags=tuple(payload["tags"]),
        specialty_tags=tuple(payload["specialty_tags"]),
        event_date=payload["event_date"],
    )


def build_candidate(payload: CandidateIO) -> Candidate:
    return Candidate(
        candidate_id=payload["candidate_id"],
        service_category=payload["service_category"],
        service_subcategory=payload["service_subcategory"],
        display_name=payload["display_name"],
        cultures=_cultures_from_io(payload["cultures"]),
        budget_min=payload["budget_min"],
        budget_max=payload["budget_max"],
        average_rating=payload["average_rating"],
        review_count=payload["review_count"],
        years_experience=payload["years_experience"],
        coverage_regions=tuple(payload["coverage_regions"]),
        primary_city=payload["primary_city"],
        tags=tuple(payload["tags"]),
        specialty_tags=tuple(payload["specialty_tags"]),
        capacity_min=payload["capacity_min"],
        capacity_max=payload["capacity_max"],
        fairness_data=_fairness_from_io(payload["fairness_data"]),
        unavailable_dates=tuple(payload["unavailable_dates"]),
        avatar_url=payload["avatar_url"],
        short_description=payload["short_description"],
        portfolio_count=payload["portfolio_count"],
        social_links=tuple(payload["social_links"]),
    )
