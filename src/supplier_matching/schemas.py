"""Column contracts for the CSV artefacts written by the matching runs."""

from __future__ import annotations

# Every ranked candidate with its full score breakdown
MATCHES_RANKED_COLUMNS: tuple[str, ...] = (
    "rank",
    "candidate_id",
    "display_name",
    "service_category",
    "service_subcategory",
    "final_score",
    "score_before_fairness",
    "fairness_multiplier",
    "total_algo",
    "cultural",
    "cultural_ceiling",
    "budget",
    "reputation",
    "experience",
    "location",
    "tags",
    "specialty",
    "capacity",
    "ctr_bonus",
    "availability_penalty",
    "is_unavailable",
    "above_floor",
)

# Short per-candidate explanation of the retained matches
MATCHES_EXPLAIN_COLUMNS: tuple[str, ...] = (
    "rank",
    "candidate_id",
    "final_score",
    "explanation",
)

# Market averages per service category
MARKET_SUMMARY_COLUMNS: tuple[str, ...] = (
    "service_category",
    "provider_count",
    "avg_budget_min",
    "avg_budget_max",
    "budget_range",
    "avg_rating",
    "avg_experience",
)

