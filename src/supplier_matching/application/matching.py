"""Rank run: load a request and a candidate pool, rank, and write explainable artefacts.

Steps:
- Validate the request and candidate pool payloads
- Normalise the requested service category and keep only that category
- Reduce raw impression counters to fairness snapshots for the category pool
- Drop incomplete profiles
- Rank, apply the relevance floor and keep the top results
- Fall back to relaxed alternatives when nothing clears the floor
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

import pandas as pd

from ..config import MatchingConfig
from ..domain.fairness import FairnessTuning, ImpressionRecord, build_fairness_snapshots
from ..domain.fallback import FallbackAdvice, advise_fallback
from ..domain.models import Candidate, MatchRequest, build_candidate, build_request
from ..domain.profile_completion import filter_complete_profiles
from ..domain.ranking import RankedMatch, RankedResult, find_match, rank_candidates
from ..domain.service_types import is_known_service_type, normalise_service_type
from ..exceptions import (
    CandidateNotFoundError,
    CandidatesFileNotFoundError,
    DependencyMissingError,
    MatchingConfigMissingError,
    RequestFileNotFoundError,
)
from ..infrastructure.io.validation import parse_candidate_pool, parse_request
from ..io_contracts import ImpressionRecordIO
from ..observability import get_logger
from ..protocols import FileSystem
from ..schemas import MATCHES_EXPLAIN_COLUMNS, MATCHES_RANKED_COLUMNS

EmptyReason = Literal["no_candidates", "incomplete_profiles", "below_floor"]

_LOGGER_NAME = "supplier_matching.matching"


@dataclass(frozen=True)
class CandidatePool:
    """Loaded inputs for one run, restricted to the requested service category."""

    request: MatchRequest
    candidates: tuple[Candidate, ...]
    total_loaded: int


@dataclass(frozen=True)
class MatchingRunResult:
    """Outcome of one rank run."""

    service_category: str
    matches: tuple[RankedMatch, ...]
    total_candidates: int
    eligible_candidates: int
    ranked_path: Path
    explain_path: Path
    fallback: FallbackAdvice | None = None
    fallback_path: Path | None = None
    empty_reason: EmptyReason | None = None

    @property
    def match_count(self) -> int:
        return len(self.matches)


def _impression_records(payloads: Iterable[ImpressionRecordIO]) -> list[ImpressionRecord]:
    return [
        ImpressionRecord(
            candidate_id=payload["candidate_id"],
            impressions_this_week=payload["impressions_this_week"],
            total_impressions=payload["total_impressions"],
            click_through_rate=payload["click_through_rate"],
        )
        for payload in payloads
    ]


def _apply_impressions(
    candidates: Sequence[Candidate],
    records: Sequence[ImpressionRecord],
    tuning: FairnessTuning,
) -> tuple[Candidate, ...]:
    """Replace stored fairness data with snapshots built from the pool's impressions."""
    pool_ids = {candidate.candidate_id for candidate in candidates}
    scoped = [record for record in records if record.candidate_id in pool_ids]
    if not scoped:
        return tuple(candidates)
    snapshots = build_fairness_snapshots(scoped, tuning)
    return tuple(
        replace(candidate, fairness_data=snapshots[candidate.candidate_id])
        if candidate.candidate_id in snapshots
        else candidate
        for candidate in candidates
    )


def load_candidate_pool(
    request_path: Path,
    candidates_path: Path,
    *,
    tuning: FairnessTuning,
    fs: FileSystem,
) -> CandidatePool:
    """Load and validate inputs, then keep only candidates of the requested category."""
    logger = get_logger(_LOGGER_NAME)
    if not fs.exists(request_path):
        raise RequestFileNotFoundError(str(request_path))
    if not fs.exists(candidates_path):
        raise CandidatesFileNotFoundError(str(candidates_path))

    request = build_request(parse_request(fs.read_json(request_path)))
    pool_payload = parse_candidate_pool(fs.read_json(candidates_path))
    candidates = [build_candidate(payload) for payload in pool_payload["candidates"]]

    category = normalise_service_type(request.service_category)
    if category and not is_known_service_type(category):
        logger.warning(
            "Unknown service category: %r (normalised to %r)",
            request.service_category,
            category,
        )
    request = replace(request, service_category=category)

    in_category = [
        candidate
        for candidate in candidates
        if normalise_service_type(candidate.service_category) == category
    ]
    logger.info(
        "Candidates: %s loaded, %s in category %r", len(candidates), len(in_category), category
    )

    records = _impression_records(pool_payload["impressions"])
    return CandidatePool(
        request=request,
        candidates=_apply_impressions(in_category, records, tuning),
        total_loaded=len(candidates),
    )


def _ranked_rows(ranked: RankedResult, min_score: int) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for match in ranked:
        candidate = match.candidate
        breakdown = match.breakdown
        rows.append(
            {
                "rank": match.rank,
                "candidate_id": candidate.candidate_id,
                "display_name": candidate.display_name,
                "service_category": candidate.service_category,
                "service_subcategory": candidate.service_subcategory or "",
                "final_score": match.final_score,
                "score_before_fairness": breakdown.score_before_fairness,
                "fairness_multiplier": round(breakdown.fairness_multiplier, 4),
                "total_algo": breakdown.total_algo,
                "cultural": breakdown.cultural,
                "cultural_ceiling": breakdown.cultural_ceiling,
                "budget": breakdown.budget,
                "reputation": breakdown.reputation,
                "experience": breakdown.experience,
                "location": breakdown.location,
                "tags": breakdown.tags,
                "specialty": breakdown.specialty,
                "capacity": "" if breakdown.capacity is None else breakdown.capacity,
                "ctr_bonus": breakdown.ctr_bonus,
                "availability_penalty": breakdown.availability_penalty,
                "is_unavailable": match.is_unavailable,
                "above_floor": match.final_score >= min_score,
            }
        )
    return rows


def _explain_rows(matches: Iterable[RankedMatch]) -> list[dict[str, object]]:
    return [
        {
            "rank": match.rank,
            "candidate_id": match.candidate.candidate_id,
            "final_score": match.final_score,
            "explanation": match.explanation,
        }
        for match in matches
    ]


def fallback_payload(
    advice: FallbackAdvice,
    *,
    service_category: str,
    empty_reason: EmptyReason,
) -> Mapping[str, object]:
    return {
        "service_category": service_category,
        "empty_reason": empty_reason,
        "scope": advice.scope,
        "message": advice.message,
        "total_alternatives": advice.total_alternatives,
        "alternatives": [
            {
                "rank": match.rank,
                "candidate_id": match.candidate.candidate_id,
                "display_name": match.candidate.display_name,
                "final_score": match.final_score,
                "explanation": match.explanation,
            }
            for match in advice.alternatives
        ],
    }


def run_matching(
    request_path: str | Path = "data/request.json",
    candidates_path: str | Path = "data/candidates.json",
    out_dir: str | Path = "data/out",
    config: MatchingConfig | None = None,
    fs: FileSystem | None = None,
) -> MatchingRunResult:
    """Rank a candidate pool against a request and write the ranked artefacts.

    Args:
        request_path: Path to the request JSON object.
        candidates_path: Path to the candidate pool JSON (list or object).
        out_dir: Directory for output files.
        config: Matching configuration (required; load at entry point).
        fs: Filesystem used for every read and write (required).

    Returns:
        MatchingRunResult with the retained matches, counts and artefact paths.
    """
    if config is None:
        raise MatchingConfigMissingError()
    if fs is None:
        raise DependencyMissingError("FileSystem", reason="Inject it at the entry point.")

    logger = get_logger(_LOGGER_NAME)
    out_dir = Path(out_dir)
    fs.mkdir(out_dir, parents=True)
    tuning = config.fairness_tuning()

    pool = load_candidate_pool(Path(request_path), Path(candidates_path), tuning=tuning, fs=fs)
    request = pool.request

    eligible = filter_complete_profiles(pool.candidates, config.min_profile_completion)
    logger.info(
        "Profile completion >= %s: %s -> %s candidates",
        config.min_profile_completion,
        len(pool.candidates),
        len(eligible),
    )

    ranked = rank_candidates(
        request, eligible, tuning, unavailable_penalty=config.unavailable_penalty
    )
    matches = ranked.above_floor(config.min_relevance_score).top(config.max_results)
    logger.info(
        "Matches: %s above floor %s (top scores: %s)",
        len(matches),
        config.min_relevance_score,
        ", ".join(str(match.final_score) for match in matches) or "-",
    )

    ranked_path = out_dir / "matches_ranked.csv"
    fs.write_csv(
        pd.DataFrame(
            _ranked_rows(ranked, config.min_relevance_score),
            columns=list(MATCHES_RANKED_COLUMNS),
        ),
        ranked_path,
    )
    explain_path = out_dir / "matches_explain.csv"
    fs.write_csv(
        pd.DataFrame(_explain_rows(matches), columns=list(MATCHES_EXPLAIN_COLUMNS)),
        explain_path,
    )
    logger.info("Ranked: %s", ranked_path)
    logger.info("Explainability: %s", explain_path)

    if matches:
        return MatchingRunResult(
            service_category=request.service_category,
            matches=matches.matches,
            total_candidates=len(pool.candidates),
            eligible_candidates=len(eligible),
            ranked_path=ranked_path,
            explain_path=explain_path,
        )

    empty_reason: EmptyReason
    if not pool.candidates:
        empty_reason = "no_candidates"
    elif not eligible:
        empty_reason = "incomplete_profiles"
    else:
        empty_reason = "below_floor"

    advice = advise_fallback(
        request,
        eligible,
        tuning,
        limit=config.fallback_limit,
        unavailable_penalty=config.unavailable_penalty,
    )
    fallback_path = out_dir / "fallback.json"
    fs.write_json(
        fallback_payload(
            advice, service_category=request.service_category, empty_reason=empty_reason
        ),
        fallback_path,
    )
    logger.info(
        "Fallback (%s): scope=%s, %s alternative(s) of %s",
        empty_reason,
        advice.scope,
        len(advice.alternatives),
        advice.total_alternatives,
    )

    return MatchingRunResult(
        service_category=request.service_category,
        matches=(),
        total_candidates=len(pool.candidates),
        eligible_candidates=len(eligible),
        ranked_path=ranked_path,
        explain_path=explain_path,
        fallback=advice,
        fallback_path=fallback_path,
        empty_reason=empty_reason,
    )


def score_single_candidate(
    request_path: str | Path,
    candidates_path: str | Path,
    candidate_id: str,
    config: MatchingConfig | None = None,
    fs: FileSystem | None = None,
) -> RankedMatch:
    """Rank the category pool and return one candidate's match with its breakdown."""
    if config is None:
        raise MatchingConfigMissingError()
    if fs is None:
        raise DependencyMissingError("FileSystem", reason="Inject it at the entry point.")

    tuning = config.fairness_tuning()
    pool = load_candidate_pool(Path(request_path), Path(candidates_path), tuning=tuning, fs=fs)
    ranked = rank_candidates(
        pool.request, pool.candidates, tuning, unavailable_penalty=config.unavailable_penalty
    )
    match = find_match(ranked.matches, candidate_id)
    if match is None:
        raise CandidateNotFoundError(candidate_id)
    return match
