"""Ranker: score a candidate pool, order it, and expose read-only views.

Candidates are scored independently and sorted by descending final score.
Equal scores keep their input order, so ranks are deterministic. Views
(sub-category filter, re-sort, relevance floor, pagination) reuse the stored
scores and never score again.

Usage example:
    from supplier_matching.domain.models import Candidate, MatchRequest
    from supplier_matching.domain.ranking import rank_candidates

    request = MatchRequest(service_category="dj")
    result = rank_candidates(request, [Candidate("a"), Candidate("b")])
    assert [match.rank for match in result] == [1, 2]
    first_page = result.sort_by("rating").page(1, per_page=1)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass

from ..exceptions import InvalidPaginationError, UnknownSortDimensionError
from .aggregation import (
    DEFAULT_UNAVAILABLE_PENALTY,
    ScoreBreakdown,
    is_unavailable,
    score_candidate,
)
from .explanations import explain
from .fairness import FairnessTuning
from .models import Candidate, MatchRequest


@dataclass(frozen=True)
class RankedMatch:
    """One scored candidate with its 1-based rank in the full ordering."""

    candidate: Candidate
    final_score: int
    breakdown: ScoreBreakdown
    rank: int
    explanation: str = ""
    is_unavailable: bool = False


@dataclass(frozen=True)
class Page:
    """One page of a ranked view."""

    items: tuple[RankedMatch, ...]
    page: int
    per_page: int
    total: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.per_page) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def _price_key(match: RankedMatch) -> tuple[bool, float]:
    price = match.candidate.budget_min
    return (price is None, price or 0.0)


def _rating_key(match: RankedMatch) -> tuple[bool, float]:
    rating = match.candidate.average_rating
    return (not rating, -(rating or 0.0))


def _score_key(match: RankedMatch) -> tuple[bool, float]:
    return (False, -match.final_score)


# Keys sort "best first"; None/unknown values always go last.
_SORT_KEYS: dict[str, Callable[[RankedMatch], tuple[bool, float]]] = {
    "score": _score_key,
    "price": _price_key,
    "rating": _rating_key,
}
SORT_DIMENSIONS = tuple(_SORT_KEYS)


@dataclass(frozen=True)
class RankedResult:
    """An immutable ordered sequence of ranked matches."""

    matches: tuple[RankedMatch, ...] = ()

    def __iter__(self) -> Iterator[RankedMatch]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __bool__(self) -> bool:
        return bool(self.matches)

    def __getitem__(self, index: int) -> RankedMatch:
        return self.matches[index]

    def top(self, count: int) -> RankedResult:
        return RankedResult(self.matches[: max(0, count)])

    def above_floor(self, min_score: float) -> RankedResult:
        """Keep matches whose final score reaches the relevance floor."""
        return RankedResult(tuple(m for m in self.matches if m.final_score >= min_score))

    def filter_subcategory(self, subcategory: str | None) -> RankedResult:
        """Keep matches for one service sub-category (case-insensitive)."""
        if not subcategory:
            return self
        target = subcategory.strip().lower()
        return RankedResult(
            tuple(
                m
                for m in self.matches
                if (m.candidate.service_subcategory or "").strip().lower() == target
            )
        )

    def sort_by(self, dimension: str = "score", *, descending: bool = True) -> RankedResult:
        """Re-order by ``score``, ``price`` or ``rating``; ties keep current order.

        ``descending=True`` means best first: highest score, lowest price,
        highest rating. Missing prices or ratings sort last either way.
        """
        key = _SORT_KEYS.get(dimension)
        if key is None:
            raise UnknownSortDimensionError(dimension, SORT_DIMENSIONS)
        known = [m for m in self.matches if not key(m)[0]]
        unknown = [m for m in self.matches if key(m)[0]]
        ordered = sorted(known, key=lambda m: key(m)[1], reverse=not descending)
        return RankedResult(tuple(ordered + unknown))

    def page(self, page: int, per_page: int = 10) -> Page:
        if page < 1 or per_page < 1:
            raise InvalidPaginationError(page, per_page)
        start = (page - 1) * per_page
        return Page(
            items=self.matches[start : start + per_page],
            page=page,
            per_page=per_page,
            total=len(self.matches),
        )


def rank_candidates(
    request: MatchRequest,
    candidates: Iterable[Candidate],
    tuning: FairnessTuning | None = None,
    *,
    unavailable_penalty: int = DEFAULT_UNAVAILABLE_PENALTY,
) -> RankedResult:
    """Score every candidate and return them ordered by descending final score.

    Stored ``fairness_data`` is used as given: a candidate whose stored score
    is high keeps the larger multiplier however many impressions it has. Reduce
    raw impressions with ``build_fairness_snapshots`` first so that the quieter
    of two otherwise identical candidates ranks ahead.

    Unavailable candidates carry their penalty in the score and are not moved
    behind available ones.
    """
    tuning = tuning or FairnessTuning()
    scored: list[tuple[int, ScoreBreakdown, Candidate, bool]] = []
    for candidate in candidates:
        final_score, breakdown = score_candidate(
            request, candidate, tuning, unavailable_penalty=unavailable_penalty
        )
        scored.append((final_score, breakdown, candidate, is_unavailable(request, candidate)))

    # sorted() is stable: equal scores keep input order.
    ordered = sorted(scored, key=lambda item: -item[0])
    return RankedResult(
        tuple(
            RankedMatch(
                candidate=candidate,
                final_score=final_score,
                breakdown=breakdown,
                rank=position,
                explanation=explain(breakdown, candidate, unavailable),
                is_unavailable=unavailable,
            )
            for position, (final_score, breakdown, candidate, unavailable) in enumerate(
                ordered, start=1
            )
        )
    )


def find_match(result: Sequence[RankedMatch], candidate_id: str) -> RankedMatch | None:
    for match in result:
        if match.candidate.candidate_id == candidate_id:
            return match
    return None
