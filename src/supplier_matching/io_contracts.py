"""Boundary-neutral IO contracts for request and candidate payloads.

These are the validated, normalised shapes handed from infrastructure
validation to the domain builders. Every key is present; optional values are
None or empty.

Usage example:
    from supplier_matching.io_contracts import CultureIO

    culture: CultureIO = {"culture_id": "maghrebin", "expertise_level": "specialised"}
"""

from __future__ import annotations

from typing_extensions import TypedDict


class CultureIO(TypedDict):
    """One culture a candidate serves, optionally annotated with expertise."""

    culture_id: str
    expertise_level: str | None


class FairnessDataIO(TypedDict):
    """Stored exposure snapshot for one candidate."""

    impressions_this_week: int
    total_impressions: int
    fairness_score: float
    click_through_rate: float


class ImpressionRecordIO(TypedDict):
    """Raw weekly impression counters for one candidate."""

    candidate_id: str
    impressions_this_week: int
    total_impressions: int
    click_through_rate: float


class MatchRequestIO(TypedDict):
    """Validated request criteria payload."""

    service_category: str
    cultures: list[str]
    cultural_importance: str
    budget_min: float | None
    budget_max: float | None
    budget_flexibility: str
    region_code: str | None
    city: str | None
    guest_count: int | None
    tags: list[str]
    specialty_tags: list[str]
    event_date: str | None


class CandidateIO(TypedDict):
    """Validated supplier profile payload."""

    candidate_id: str
    service_category: str
    service_subcategory: str | None
    display_name: str
    cultures: list[CultureIO]
    budget_min: float | None
    budget_max: float | None
    average_rating: float | None
    review_count: int
    years_experience: float | None
    coverage_regions: list[str]
    primary_city: str | None
    tags: list[str]
    specialty_tags: list[str]
    capacity_min: int | None
    capacity_max: int | None
    fairness_data: FairnessDataIO | None
    unavailable_dates: list[str]
    avatar_url: str | None
    short_description: str
    portfolio_count: int
    social_links: list[str]


class CandidatePoolIO(TypedDict):
    """Validated candidate pool with optional raw impression counters."""

    candidates: list[CandidateIO]
    impressions: list[ImpressionRecordIO]
