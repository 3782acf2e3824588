"""Pydantic-based validation helpers for inbound request and candidate payloads."""

from __future__ import annotations

from typing import Annotated, Literal, TypeVar

from pydantic import Field, TypeAdapter, ValidationError
from typing_extensions import TypedDict

from ...io_contracts import (
    CandidateIO,
    CandidatePoolIO,
    CultureIO,
    FairnessDataIO,
    ImpressionRecordIO,
    MatchRequestIO,
)

FiniteNonNegative = Annotated[float, Field(ge=0, allow_inf_nan=False)]
NonNegativeInt = Annotated[int, Field(ge=0)]
Rating = Annotated[float, Field(ge=0, le=5, allow_inf_nan=False)]
Rate = Annotated[float, Field(ge=0, le=1, allow_inf_nan=False)]
ExpertiseLevelInput = Literal["specialised", "experienced"]

SchemaT = TypeVar("SchemaT")


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


class CultureInput(TypedDict, total=False):
    culture_id: str
    expertise_level: ExpertiseLevelInput | None


class FairnessDataInput(TypedDict, total=False):
    impressions_this_week: NonNegativeInt
    total_impressions: NonNegativeInt
    fairness_score: FiniteNonNegative
    click_through_rate: Rate


class ImpressionRecordInput(TypedDict, total=False):
    candidate_id: str
    impressions_this_week: NonNegativeInt | None
    total_impressions: NonNegativeInt | None
    click_through_rate: Rate | None


class MatchRequestInput(TypedDict, total=False):
    service_category: str | None
    cultures: list[str] | None
    cultural_importance: str | None
    budget_min: FiniteNonNegative | None
    budget_max: FiniteNonNegative | None
    budget_flexibility: str | None
    region_code: str | None
    city: str | None
    guest_count: NonNegativeInt | None
    tags: list[str] | None
    specialty_tags: list[str] | None
    event_date: str | None


class CandidateInput(TypedDict, total=False):
    candidate_id: str
    service_category: str | None
    service_subcategory: str | None
    display_name: str | None
    cultures: list[str | CultureInput | tuple[str, ExpertiseLevelInput]] | None
    budget_min: FiniteNonNegative | None
    budget_max: FiniteNonNegative | None
    average_rating: Rating | None
    review_count: NonNegativeInt | None
    years_experience: FiniteNonNegative | None
    coverage_regions: list[str] | None
    primary_city: str | None
    tags: list[str] | None
    specialty_tags: list[str] | None
    capacity_min: NonNegativeInt | None
    capacity_max: NonNegativeInt | None
    fairness_data: FairnessDataInput | None
    unavailable_dates: list[str] | None
    avatar_url: str | None
    short_description: str | None
    portfolio_count: NonNegativeInt | None
    social_links: list[str] | None


class CandidatePoolInput(TypedDict, total=False):
    candidates: list[object]
    impressions: list[object] | None


def validate_as(schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema.__name__}: {exc.error_count()} error(s)."
        raise IncomingDataError(message) from exc


def _clean_str(value: str | None) -> str:
    return value.strip() if value else ""


def _optional_str(value: str | None) -> str | None:
    text = _clean_str(value)
    return text or None


def _clean_str_list(values: list[str] | None) -> list[str]:
    if not values:
        return []
    return [text for text in (value.strip() for value in values) if text]


def _coerce_cultures(
    values: list[str | CultureInput | tuple[str, ExpertiseLevelInput]] | None,
) -> list[CultureIO]:
    cultures: list[CultureIO] = []
    for value in values or []:
        if isinstance(value, str):
            culture_id, level = value, None
        elif isinstance(value, tuple):
            culture_id, level = value
        else:
            culture_id, level = value.get("culture_id", ""), value.get("expertise_level")
        culture_id = culture_id.strip()
        if culture_id:
            cultures.append({"culture_id": culture_id, "expertise_level": level})
    return cultures


def _coerce_fairness(value: FairnessDataInput | None) -> FairnessDataIO | None:
    if value is None:
        return None
    return {
        "impressions_this_week": value.get("impressions_this_week", 0),
        "total_impressions": value.get("total_impressions", 0),
        "fairness_score": value.get("fairness_score", 1.0),
        "click_through_rate": value.get("click_through_rate", 0.0),
    }


def parse_request(payload: object) -> MatchRequestIO:
    request = validate_as(MatchRequestInput, payload)
    return {
        "service_category": _clean_str(request.get("service_category")),
        "cultures": _clean_str_list(request.get("cultures")),
        "cultural_importance": _clean_str(request.get("cultural_importance")) or "important",
        "budget_min": request.get("budget_min"),
        "budget_max": request.get("budget_max"),
        "budget_flexibility": _clean_str(request.get("budget_flexibility"))
        or "somewhat_flexible",
        "region_code": _optional_str(request.get("region_code")),
        "city": _optional_str(request.get("city")),
        "guest_count": request.get("guest_count"),
        "tags": _clean_str_list(request.get("tags")),
        "specialty_tags": _clean_str_list(request.get("specialty_tags")),
        "event_date": _optional_str(request.get("event_date")),
    }


def parse_candidate(payload: object) -> CandidateIO:
    candidate = validate_as(CandidateInput, payload)
    candidate_id = _clean_str(candidate.get("candidate_id"))
    if not candidate_id:
        raise IncomingDataError("Candidate payload is missing candidate_id.")
    return {
        "candidate_id": candidate_id,
        "service_category": _clean_str(candidate.get("service_category")),
        "service_subcategory": _optional_str(candidate.get("service_subcategory")),
        "display_name": _clean_str(candidate.get("display_name")),
        "cultures": _coerce_cultures(candidate.get("cultures")),
        "budget_min": candidate.get("budget_min"),
        "budget_max": candidate.get("budget_max"),
        "average_rating": candidate.get("average_rating"),
        "review_count": candidate.get("review_count") or 0,
        "years_experience": candidate.get("years_experience"),
        "coverage_regions": _clean_str_list(candidate.get("coverage_regions")),
        "primary_city": _optional_str(candidate.get("primary_city")),
        "tags": _clean_str_list(candidate.get("tags")),
        "specialty_tags": _clean_str_list(candidate.get("specialty_tags")),
        "capacity_min": candidate.get("capacity_min"),
        "capacity_max": candidate.get("capacity_max"),
        "fairness_data": _coerce_fairness(candidate.get("fairness_data")),
        "unavailable_dates": _clean_str_list(candidate.get("unavailable_dates")),
        "avatar_url": _optional_str(candidate.get("avatar_url")),
        "short_description": _clean_str(candidate.get("short_description")),
        "portfolio_count": candidate.get("portfolio_count") or 0,
        "social_links": _clean_str_list(candidate.get("social_links")),
    }


def parse_impression_record(payload: object) -> ImpressionRecordIO:
    record = validate_as(ImpressionRecordInput, payload)
    candidate_id = _clean_str(record.get("candidate_id"))
    if not candidate_id:
        raise IncomingDataError("Impression record is missing candidate_id.")
    return {
        "candidate_id": candidate_id,
        "impressions_this_week": record.get("impressions_this_week") or 0,
        "total_impressions": record.get("total_impressions") or 0,
        "click_through_rate": record.get("click_through_rate") or 0.0,
    }


def parse_candidate_pool(payload: object) -> CandidatePoolIO:
    """Validate a candidate pool given as a bare list or a ``{"candidates": ...}`` object."""
    if isinstance(payload, list):
        payload = {"candidates": payload}
    pool = validate_as(CandidatePoolInput, payload)
    return {
        "candidates": [parse_candidate(item) for item in pool.get("candidates", [])],
        "impressions": [parse_impression_record(item) for item in pool.get("impressions") or []],
    }
