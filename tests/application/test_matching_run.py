"""Tests for the rank run orchestration."""

from pathlib import Path

import pytest

from supplier_matching.application.matching import (
    MatchingRunResult,
    run_matching,
    score_single_candidate,
)
from supplier_matching.config import MatchingConfig
from supplier_matching.exceptions import (
    CandidateNotFoundError,
    CandidatesFileNotFoundError,
    DependencyMissingError,
    MatchingConfigMissingError,
    RequestFileNotFoundError,
)
from tests.fakes import InMemoryFileSystem
from tests.support.builders import candidate_payload, request_payload

REQUEST = Path("data/request.json")
CANDIDATES = Path("data/candidates.json")
OUT_DIR = Path("data/out")


def _seed(fs: InMemoryFileSystem, candidates: object, **request_overrides: object) -> None:
    fs.put_json(REQUEST, request_payload(**request_overrides))
    fs.put_json(CANDIDATES, candidates)


def _mixed_pool() -> list[dict[str, object]]:
    return [
        candidate_payload("p1"),
        candidate_payload("p2", cultures=[], specialty_tags=[]),
        candidate_payload("p3", avatar_url=None, short_description="", portfolio_count=0),
        candidate_payload("dj1", service_category="DJ"),
    ]


def _run(fs: InMemoryFileSystem, config: MatchingConfig | None = None) -> MatchingRunResult:
    return run_matching(
        request_path=REQUEST,
        candidates_path=CANDIDATES,
        out_dir=OUT_DIR,
        config=config or MatchingConfig(),
        fs=fs,
    )


class TestRunMatching:
    def test_ranks_complete_profiles_of_requested_category(
        self, in_memory_fs: InMemoryFileSystem
    ) -> None:
        _seed(in_memory_fs, _mixed_pool())

        result = _run(in_memory_fs)

        assert result.service_category == "photographe"
        assert result.total_candidates == 3
        assert result.eligible_candidates == 2
        assert [m.candidate.candidate_id for m in result.matches] == ["p1", "p2"]
        assert [m.final_score for m in result.matches] == [100, 73]
        assert result.fallback is None
        assert result.empty_reason is None

    def test_writes_ranked_and_explain_outputs(self, in_memory_fs: InMemoryFileSystem) -> None:
        _seed(in_memory_fs, _mixed_pool())

        result = _run(in_memory_fs)

        ranked = in_memory_fs.read_csv(result.ranked_path)
        explain = in_memory_fs.read_csv(result.explain_path)
        assert result.ranked_path == OUT_DIR / "matches_ranked.csv"
        assert ranked["candidate_id"].tolist() == ["p1", "p2"]
        assert ranked["total_algo"].tolist() == [121, 73]
        assert ranked["above_floor"].tolist() == [True, True]
        assert explain["explanation"].tolist()[0].startswith("Excellent cultural match")
        assert not in_memory_fs.exists(OUT_DIR / "fallback.json")

    def test_max_results_limits_matches(self, in_memory_fs: InMemoryFileSystem) -> None:
        _seed(in_memory_fs, _mixed_pool())

        result = _run(in_memory_fs, MatchingConfig(max_results=1))

        assert result.match_count == 1
        assert len(in_memory_fs.read_csv(result.explain_path)) == 1
        assert len(in_memory_fs.read_csv(result.ranked_path)) == 2

    def test_impressions_replace_stored_fairness_data(
        self, in_memory_fs: InMemoryFileSystem
    ) -> None:
        pool = {
            "candidates": [candidate_payload("busy"), candidate_payload("quiet")],
            "impressions": [
                {"candidate_id": "busy", "impressions_this_week": 50, "total_impressions": 10},
                {"candidate_id": "quiet", "impressions_this_week": 3, "total_impressions": 10},
                {"candidate_id": "elsewhere", "impressions_this_week": 500},
            ],
        }
        _seed(in_memory_fs, pool)

        result = _run(in_memory_fs)

        ranked = in_memory_fs.read_csv(result.ranked_path)
        assert ranked["candidate_id"].tolist() == ["quiet", "busy"]
        assert ranked["final_score"].tolist() == [100, 88]
        assert ranked["fairness_multiplier"].tolist() == pytest.approx([1.075, 0.88])

    def test_fairness_can_be_disabled(self, in_memory_fs: InMemoryFileSystem) -> None:
        pool = {
            "candidates": [candidate_payload("busy"), candidate_payload("quiet")],
            "impressions": [
                {"candidate_id": "busy", "impressions_this_week": 50},
                {"candidate_id": "quiet", "impressions_this_week": 3},
            ],
        }
        _seed(in_memory_fs, pool)

        result = _run(in_memory_fs, MatchingConfig(fairness_enabled=False))

        assert [m.candidate.candidate_id for m in result.matches] == ["busy", "quiet"]
        assert {m.breakdown.fairness_multiplier for m in result.matches} == {1.0}


class TestRunMatchingFallback:
    def test_below_floor_writes_nationwide_fallback(
        self, in_memory_fs: InMemoryFileSystem
    ) -> None:
        pool = [
            candidate_payload("far-1", cultures=[], specialty_tags=[], coverage_regions=["13"]),
            candidate_payload("far-2", cultures=[], specialty_tags=[], coverage_regions=["69"]),
        ]
        _seed(in_memory_fs, pool)

        result = _run(in_memory_fs, MatchingConfig(min_relevance_score=90))

        assert result.matches == ()
        assert result.empty_reason == "below_floor"
        assert result.fallback is not None
        assert result.fallback.scope == "nationwide"
        assert result.fallback_path == OUT_DIR / "fallback.json"
        payload = in_memory_fs.read_json(OUT_DIR / "fallback.json")
        assert isinstance(payload, dict)
        assert payload["empty_reason"] == "below_floor"
        assert payload["total_alternatives"] == 2
        assert [alt["candidate_id"] for alt in payload["alternatives"]] == ["far-1", "far-2"]
        ranked = in_memory_fs.read_csv(result.ranked_path)
        assert ranked["above_floor"].tolist() == [False, False]

    def test_incomplete_profiles_only(self, in_memory_fs: InMemoryFileSystem) -> None:
        thin = candidate_payload("thin", avatar_url=None, portfolio_count=0, primary_city=None)
        _seed(in_memory_fs, [thin])

        result = _run(in_memory_fs)

        assert result.empty_reason == "incomplete_profiles"
        assert result.fallback is not None
        assert result.fallback.scope == "none"

    def test_no_candidates_in_category(self, in_memory_fs: InMemoryFileSystem) -> None:
        _seed(in_memory_fs, [candidate_payload("dj1", service_category="dj")])

        result = _run(in_memory_fs)

        assert result.total_candidates == 0
        assert result.empty_reason == "no_candidates"
        assert result.fallback is not None
        assert 'No supplier found for "photographe"' in result.fallback.message

    def test_unknown_category_finds_nothing(self, in_memory_fs: InMemoryFileSystem) -> None:
        _seed(in_memory_fs, _mixed_pool(), service_category="Astronaute")

        result = _run(in_memory_fs)

        assert result.service_category == "astronaute"
        assert result.empty_reason == "no_candidates"


class TestRunMatchingErrors:
    def test_requires_config(self, in_memory_fs: InMemoryFileSystem) -> None:
        with pytest.raises(MatchingConfigMissingError):
            run_matching(REQUEST, CANDIDATES, OUT_DIR, config=None, fs=in_memory_fs)

    def test_requires_filesystem(self) -> None:
        with pytest.raises(DependencyMissingError, match="FileSystem"):
            run_matching(REQUEST, CANDIDATES, OUT_DIR, config=MatchingConfig(), fs=None)

    def test_missing_request_file(self, in_memory_fs: InMemoryFileSystem) -> None:
        in_memory_fs.put_json(CANDIDATES, [])

        with pytest.raises(RequestFileNotFoundError):
            _run(in_memory_fs)

    def test_missing_candidates_file(self, in_memory_fs: InMemoryFileSystem) -> None:
        in_memory_fs.put_json(REQUEST, request_payload())

        with pytest.raises(CandidatesFileNotFoundError):
            _run(in_memory_fs)


class TestScoreSingleCandidate:
    def test_returns_breakdown_for_candidate(self, in_memory_fs: InMemoryFileSystem) -> None:
        _seed(in_memory_fs, _mixed_pool())

        match = score_single_candidate(
            REQUEST, CANDIDATES, "p2", config=MatchingConfig(), fs=in_memory_fs
        )

        assert match.candidate.candidate_id == "p2"
        assert match.final_score == 73
        assert match.breakdown.cultural == 0
        assert match.breakdown.specialty == -3

    def test_candidate_outside_category_is_not_found(
        self, in_memory_fs: InMemoryFileSystem
    ) -> None:
        _seed(in_memory_fs, _mixed_pool())

        with pytest.raises(CandidateNotFoundError, match="dj1"):
            score_single_candidate(
                REQUEST, CANDIDATES, "dj1", config=MatchingConfig(), fs=in_memory_fs
            )
