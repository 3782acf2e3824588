"""Fallback Advisor: relaxed alternatives when nothing clears the relevance floor.

The advisor works on the pool of candidates already restricted to the
requested service category. It widens the geographic scope one step at a
time (same administrative region, then nationwide) and re-ranks the scope
with the request's location removed, so distance no longer counts against
anyone.

Usage example:
    from supplier_matching.domain.fallback import advise_fallback
    from supplier_matching.domain.models import Candidate, MatchRequest

    request = MatchRequest(service_category="dj", region_code="75")
    pool = [
        Candidate("dj-1", coverage_regions=("92",)),
        Candidate("dj-2", coverage_regions=("13",)),
    ]
    advice = advise_fallback(request, pool)
    assert advice.scope == "region"
    assert [m.candidate.candidate_id for m in advice.alternatives] == ["dj-1"]
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Literal

from .aggregation import DEFAULT_UNAVAILABLE_PENALTY
from .fairness import FairnessTuning
from .models import Candidate, MatchRequest
from .ranking import RankedMatch, rank_candidates
from .regions import REGION_LABELS, any_in_region, region_of

FallbackScope = Literal["region", "nationwide", "none"]

DEFAULT_FALLBACK_LIMIT = 3


@dataclass(frozen=True)
class FallbackAdvice:
    """Alternatives to show when the strict search came back empty."""

    alternatives: tuple[RankedMatch, ...]
    total_alternatives: int
    scope: FallbackScope
    message: str

    @property
    def has_alternatives(self) -> bool:
        return bool(self.alternatives)


def _message(scope: FallbackScope, total: int, service_category: str, region: str | None) -> str:
    label = service_category or "this service"
    if scope == "none":
        return f'No supplier found for "{label}". Try another type of service.'
    if scope == "region":
        region_label = REGION_LABELS.get(region or "", region or "your region")
        return (
            f"No supplier matches all of your criteria. {total} supplier(s) for "
            f'"{label}" work in {region_label}.'
        )
    return (
        f"No supplier matches all of your criteria. {total} supplier(s) for "
        f'"{label}" are available nationwide.'
    )


def advise_fallback(
    request: MatchRequest,
    category_pool: Iterable[Candidate],
    tuning: FairnessTuning | None = None,
    *,
    limit: int = DEFAULT_FALLBACK_LIMIT,
    unavailable_penalty: int = DEFAULT_UNAVAILABLE_PENALTY,
) -> FallbackAdvice:
    """Return up to ``limit`` alternatives from the narrowest non-empty scope.

    Args:
        request: The incoming request; its location is dropped for re-ranking.
        category_pool: Candidates of the requested service category.
        tuning: Fairness tunables used for the re-ranking.
        limit: Maximum number of alternatives returned.
        unavailable_penalty: Points removed for candidates booked on the event date.

    Returns:
        FallbackAdvice whose ``total_alternatives`` counts the whole scope.
    """
    pool = list(category_pool)
    region = region_of(request.region_code)

    in_region = [c for c in pool if any_in_region(region, c.coverage_regions)]

    scope: FallbackScope
    if in_region:
        scope, scoped = "region", in_region
    elif pool:
        scope, scoped = "nationwide", pool
    else:
        scope, scoped = "none", []

    relaxed = replace(request, region_code=None, city=None)
    ranked = rank_candidates(relaxed, scoped, tuning, unavailable_penalty=unavailable_penalty)
    return FallbackAdvice(
        alternatives=ranked.top(limit).matches,
        total_alternatives=len(scoped),
        scope=scope,
        message=_message(scope, len(scoped), request.service_category, region),
    )
