"""Market averages: typical price, rating and experience per service category.

Usage example:
    >>> from supplier_matching.application.market import run_market_summary
    >>> fs = ...  # Injected FileSystem from the CLI/composition root
    >>> run_market_summary(
    ...     candidates_path="data/candidates.json",
    ...     output_path="data/out/market_summary.csv",
    ...     fs=fs,
    ... )
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ..domain.models import Candidate, build_candidate
from ..domain.scoring import round_half_up
from ..domain.service_types import normalise_service_type
from ..exceptions import CandidatesFileNotFoundError, DependencyMissingError
from ..infrastructure.io.validation import parse_candidate_pool
from ..observability import get_logger
from ..protocols import FileSystem
from ..schemas import MARKET_SUMMARY_COLUMNS

# Estimated max when no supplier in a category declares one.
MAX_FROM_MIN_FACTOR = 1.5
PER_PERSON_CATEGORIES = frozenset({"traiteur", "patissier"})


def _budget_range(category: str, low: int, high: int) -> str:
    suffix = "€/person" if category in PER_PERSON_CATEGORIES else "€"
    return f"{low}-{high}{suffix}"


def summarise_market(candidates: Iterable[Candidate]) -> pd.DataFrame:
    """Aggregate candidates into one row of market averages per service category.

    Categories where no candidate declares a minimum budget are omitted.
    """
    records = [
        {
            "service_category": normalise_service_type(candidate.service_category),
            "budget_min": candidate.budget_min,
            "budget_max": candidate.budget_max,
            "average_rating": candidate.average_rating,
            "years_experience": candidate.years_experience,
        }
        for candidate in candidates
    ]
    df = pd.DataFrame(
        records,
        columns=[
            "service_category",
            "budget_min",
            "budget_max",
            "average_rating",
            "years_experience",
        ],
    )
    df = df[df["service_category"] != ""].copy()
    if df.empty:
        return pd.DataFrame(columns=list(MARKET_SUMMARY_COLUMNS))

    numeric = ["budget_min", "budget_max", "average_rating", "years_experience"]
    df[numeric] = df[numeric].apply(pd.to_numeric, errors="coerce")
    # Only suppliers with a minimum price contribute to the maximum average.
    df["budget_max"] = df["budget_max"].where(df["budget_min"].notna())
    df["average_rating"] = df["average_rating"].where(df["average_rating"] > 0)

    grouped = df.groupby("service_category", sort=True).agg(
        provider_count=("budget_min", "size"),
        budget_min_mean=("budget_min", "mean"),
        budget_max_mean=("budget_max", "mean"),
        rating_mean=("average_rating", "mean"),
        experience_mean=("years_experience", "mean"),
    )
    grouped = grouped[grouped["budget_min_mean"].notna()]

    rows: list[dict[str, object]] = []
    for category, row in grouped.iterrows():
        avg_min = round_half_up(row["budget_min_mean"])
        if pd.notna(row["budget_max_mean"]):
            avg_max = round_half_up(row["budget_max_mean"])
        else:
            avg_max = round_half_up(avg_min * MAX_FROM_MIN_FACTOR)
        rating = row["rating_mean"]
        experience = row["experience_mean"]
        rows.append(
            {
                "service_category": str(category),
                "provider_count": int(row["provider_count"]),
                "avg_budget_min": avg_min,
                "avg_budget_max": avg_max,
                "budget_range": _budget_range(str(category), avg_min, avg_max),
                "avg_rating": round_half_up(rating * 10) / 10 if pd.notna(rating) else 0.0,
                "avg_experience": round_half_up(experience) if pd.notna(experience) else 0,
            }
        )
    return pd.DataFrame(rows, columns=list(MARKET_SUMMARY_COLUMNS))


def run_market_summary(
    candidates_path: str | Path = "data/candidates.json",
    output_path: str | Path = "data/out/market_summary.csv",
    fs: FileSystem | None = None,
) -> Path:
    """Write market averages for a candidate pool to CSV and return the path."""
    if fs is None:
        raise DependencyMissingError("FileSystem", reason="Inject it at the entry point.")

    logger = get_logger("supplier_matching.market")
    candidates_path = Path(candidates_path)
    output_path = Path(output_path)
    if not fs.exists(candidates_path):
        raise CandidatesFileNotFoundError(str(candidates_path))

    pool = parse_candidate_pool(fs.read_json(candidates_path))
    candidates = [build_candidate(payload) for payload in pool["candidates"]]
    summary = summarise_market(candidates)
    fs.write_csv(summary, output_path)
    logger.info("Market summary: %s (%s categories)", output_path, len(summary))
    return output_path
