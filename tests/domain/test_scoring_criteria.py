"""Tests for the per-criterion scorers."""

import random

import pytest

from supplier_matching.domain.models import normalise_cultures
from supplier_matching.domain.scoring import (
    FLEXIBILITY_PENALTIES,
    cultural_ceiling,
    review_bonus,
    round_half_up,
    score_budget,
    score_capacity,
    score_cultural,
    score_experience,
    score_location,
    score_reputation,
    score_specialty,
    score_tags,
)


class TestRoundHalfUp:
    def test_rounds_halves_up(self) -> None:
        assert round_half_up(12.5) == 13
        assert round_half_up(13.5) == 14
        assert round_half_up(0.5) == 1

    def test_rounds_other_values_to_nearest(self) -> None:
        assert round_half_up(12.49) == 12
        assert round_half_up(12.51) == 13
        assert round_half_up(-0.4) == 0


class TestCulturalScore:
    def test_specialised_essential_scores_full_ceiling(self) -> None:
        offered = normalise_cultures([("maghrebin", "specialised")])

        assert score_cultural(("maghrebin",), "essential", offered) == 30

    def test_experienced_scores_sixty_percent_of_ceiling(self) -> None:
        offered = normalise_cultures([("maghrebin", "experienced")])

        assert score_cultural(("maghrebin",), "essential", offered) == 18

    def test_mean_over_requested_cultures(self) -> None:
        offered = normalise_cultures([("maghrebin", "specialised")])

        # (1.0 + 0.0) / 2 * 25 = 12.5
        assert score_cultural(("maghrebin", "turc"), "important", offered) == 13

    def test_unannotated_culture_counts_as_full_weight(self) -> None:
        offered = normalise_cultures(["maghrebin"])

        assert score_cultural(("maghrebin",), "nice_to_have", offered) == 15

    def test_unknown_importance_uses_default_ceiling(self) -> None:
        offered = normalise_cultures(["maghrebin"])

        assert cultural_ceiling("whenever") == 20
        assert score_cultural(("maghrebin",), "whenever", offered) == 20

    def test_empty_sides_score_zero(self) -> None:
        offered = normalise_cultures(["maghrebin"])

        assert score_cultural((), "essential", offered) == 0
        assert score_cultural(("maghrebin",), "essential", ()) == 0


class TestBudgetScore:
    def test_midpoint_inside_request_scores_max(self) -> None:
        assert score_budget(1500, 3000, 1500, 3000) == 20

    def test_missing_request_max_is_neutral(self) -> None:
        assert score_budget(1000, None, 1500, 3000) == 10

    def test_missing_candidate_min_is_minimal(self) -> None:
        assert score_budget(1000, 2000, None, 3000) == 5

    def test_candidate_max_defaults_to_twice_min(self) -> None:
        # Offer [1200, 2400] has midpoint 1800 inside [1000, 2000].
        assert score_budget(1000, 2000, 1200, None) == 20

    @pytest.mark.parametrize(
        ("candidate_min", "candidate_max", "expected"),
        [
            (1800, 4000, 15),
            (1600, 4000, 18),
            (1400, 4400, 20),
        ],
    )
    def test_partial_overlap_uses_request_span_fraction(
        self, candidate_min: float, candidate_max: float, expected: int
    ) -> None:
        assert score_budget(1000, 2000, candidate_min, candidate_max) == expected

    @pytest.mark.parametrize(
        ("flexibility", "expected"),
        [
            ("flexible", 13),
            ("somewhat_flexible", 12),
            ("strict", 8),
            ("unheard_of", 12),
        ],
    )
    def test_disjoint_ranges_penalised_by_flexibility(
        self, flexibility: str, expected: int
    ) -> None:
        assert score_budget(1000, 1100, 1110, 1130, flexibility) == expected

    def test_far_disjoint_ranges_floor_at_zero(self) -> None:
        assert score_budget(1000, 2000, 9000, 12000, "strict") == 0

    @pytest.mark.parametrize("flexibility", [*FLEXIBILITY_PENALTIES, "unheard_of"])
    def test_further_offers_never_score_higher(self, flexibility: str) -> None:
        scores = [
            score_budget(1000, 2000, 2000 + offset, 2100 + offset, flexibility)
            for offset in range(10, 3000, 50)
        ]

        assert scores == sorted(scores, reverse=True)


class TestReputationScore:
    def test_unrated_is_neutral(self) -> None:
        assert score_reputation(None, 40) == 5
        assert score_reputation(0, 40) == 5

    def test_rating_and_review_bonus(self) -> None:
        assert score_reputation(5.0, 50) == 20
        assert score_reputation(4.0, 0) == 13
        assert score_reputation(4.5, 12) == 16

    @pytest.mark.parametrize(
        ("count", "bonus"),
        [(0, 0), (4, 0), (5, 1), (10, 2), (19, 2), (20, 3), (50, 4), (500, 4), (None, 0)],
    )
    def test_review_bonus_steps(self, count: int | None, bonus: int) -> None:
        assert review_bonus(count) == bonus


class TestExperienceScore:
    @pytest.mark.parametrize(
        ("years", "expected"),
        [(None, 3), (0, 3), (0.4, 0), (4.4, 4), (4.5, 5), (10, 10), (25, 10)],
    )
    def test_years_rounded_and_capped(self, years: float | None, expected: int) -> None:
        assert score_experience(years) == expected


class TestLocationScore:
    def test_no_location_is_neutral(self) -> None:
        assert score_location(None, None, ("13",), "Marseille") == 5

    def test_exact_department_match(self) -> None:
        assert score_location("75", None, ("75",), None) == 10

    def test_city_match_ignores_case_and_whitespace(self) -> None:
        assert score_location(None, "paris", (), "Paris ") == 10

    def test_same_region_scores_partial(self) -> None:
        assert score_location("75", None, ("92",), None) == 6
        assert score_location("2a", None, ("2B",), None) == 6

    def test_region_slug_in_coverage_counts_as_same_region(self) -> None:
        assert score_location("75", None, ("ile-de-france",), None) == 6

    def test_other_region_scores_minimal(self) -> None:
        assert score_location("75", None, ("13",), None) == 2
        assert score_location("75", None, (), None) == 2


class TestTagScores:
    def test_no_requested_tags_scores_zero(self) -> None:
        assert score_tags((), ("moderne",)) == 0
        assert score_specialty((), ("lgbtq",)) == 0

    def test_candidate_without_tags_is_penalised(self) -> None:
        assert score_tags(("moderne",), ()) == -2
        assert score_specialty(("lgbtq",), ()) == -3

    @pytest.mark.parametrize(
        ("offered", "expected"),
        [
            (("a", "b", "c", "d"), 10),
            (("a", "b", "c"), 8),
            (("a", "b"), 5),
            (("a",), 2),
            (("z",), 0),
        ],
    )
    def test_style_tag_steps(self, offered: tuple[str, ...], expected: int) -> None:
        assert score_tags(("a", "b", "c", "d"), offered) == expected

    @pytest.mark.parametrize(
        ("offered", "expected"),
        [
            (("a", "b", "c", "d"), 15),
            (("a", "b", "c"), 12),
            (("a", "b"), 8),
            (("a",), 4),
            (("z",), 0),
        ],
    )
    def test_specialty_tag_steps(self, offered: tuple[str, ...], expected: int) -> None:
        assert score_specialty(("a", "b", "c", "d"), offered) == expected

    def test_style_tags_compare_exactly(self) -> None:
        assert score_tags(("Chic",), ("chic",)) == 0

    def test_specialty_tags_ignore_case_and_whitespace(self) -> None:
        assert score_specialty(("LGBTQ ",), ("lgbtq",)) == 15


class TestCapacityScore:
    def test_not_applicable_without_guest_count_or_bounds(self) -> None:
        assert score_capacity(None, 50, 200) is None
        assert score_capacity(100, None, None) is None

    @pytest.mark.parametrize(
        ("guests", "expected"),
        [(100, 10), (45, 5), (40, 5), (30, 0), (200, 10), (210, 5), (230, 2), (260, -5)],
    )
    def test_guest_count_against_bounds(self, guests: int, expected: int) -> None:
        assert score_capacity(guests, 50, 200) == expected

    def test_single_sided_bounds(self) -> None:
        assert score_capacity(100, None, 150) == 10
        assert score_capacity(300, 50, None) == 10


def _disjoint_budget_pair(rng: random.Random) -> tuple[int, int, int, int]:
    """Draw a request range and an offer lying wholly above or below it."""
    request_min = rng.randint(0, 5000)
    request_max = request_min + rng.randint(1, 5000)
    if request_min >= 2 and rng.random() < 0.5:
        offer_max = rng.randint(1, request_min - 1)
        offer_min = rng.randint(1, offer_max)
    else:
        offer_min = request_max + rng.randint(1, 5000)
        offer_max = offer_min + rng.randint(0, 3000)
    return request_min, request_max, offer_min, offer_max


class TestCriterionProperties:
    def test_stricter_flexibility_never_raises_budget_score(self) -> None:
        rng = random.Random(1812)
        levels = sorted(FLEXIBILITY_PENALTIES, key=FLEXIBILITY_PENALTIES.__getitem__)
        for _ in range(500):
            pair = _disjoint_budget_pair(rng)

            scores = [score_budget(*pair, flexibility) for flexibility in levels]

            assert scores == sorted(scores, reverse=True), pair

    def test_reputation_never_drops_with_more_reviews(self) -> None:
        rng = random.Random(31)
        for _ in range(200):
            rating = rng.choice([None, 0.0, round(rng.uniform(0.1, 5.0), 2)])
            counts = sorted(rng.randint(0, 200) for _ in range(15))

            scores = [score_reputation(rating, count) for count in counts]

            assert scores == sorted(scores), (rating, counts)

    def test_reputation_never_drops_with_higher_rating(self) -> None:
        rng = random.Random(47)
        for _ in range(200):
            review_count = rng.randint(0, 200)
            # A 0 rating reads as unrated and scores the neutral 5, so the
            # ordering only holds over actual ratings in (0, 5].
            ratings = sorted(rng.uniform(0.01, 5.0) for _ in range(15))

            scores = [score_reputation(rating, review_count) for rating in ratings]

            assert scores == sorted(scores), (review_count, ratings)

    def test_zero_rating_sits_outside_the_rating_order(self) -> None:
        assert score_reputation(0.0, 0) == 5
        assert score_reputation(0.1, 0) == 0
