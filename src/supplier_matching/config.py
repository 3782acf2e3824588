"""Centralised, injectable configuration for the supplier matching engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import MatchingConfigFile
from .domain.fairness import FairnessTuning


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class NonNegativeIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be zero or a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be an integer >= 0.")


class UnitIntervalEnvVarError(ValueError):
    """Raised when an environment variable must be a number within [0, 1]."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a number between 0 and 1.")


class BooleanEnvVarError(ValueError):
    """Raised when an environment variable must be a supported boolean."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a boolean value (true/false, 1/0, yes/no, on/off).")


@dataclass(frozen=True)
class MatchingConfig:
    """Immutable configuration object for scoring, ranking and fallback.

    Load from environment with `MatchingConfig.from_env()` or construct directly for testing.
    """

    # Fairness
    fairness_enabled: bool = True
    fairness_weight: float = 0.15
    fairness_impression_threshold: int = 10
    fairness_min_score: float = 0.1
    ctr_min_impressions: int = 20

    # Result selection
    min_relevance_score: int = 30
    max_results: int = 3
    fallback_limit: int = 3
    min_profile_completion: int = 70
    unavailable_penalty: int = 20

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            MatchingConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            fairness_enabled=_parse_bool(
                os.getenv("MATCH_FAIRNESS_ENABLED", "true"), env_name="MATCH_FAIRNESS_ENABLED"
            ),
            fairness_weight=_parse_unit_float(
                os.getenv("MATCH_FAIRNESS_WEIGHT", "0.15"), env_name="MATCH_FAIRNESS_WEIGHT"
            ),
            fairness_impression_threshold=_parse_non_negative_int(
                os.getenv("MATCH_FAIRNESS_IMPRESSION_THRESHOLD", "10"),
                env_name="MATCH_FAIRNESS_IMPRESSION_THRESHOLD",
            ),
            fairness_min_score=_parse_unit_float(
                os.getenv("MATCH_FAIRNESS_MIN_SCORE", "0.1"), env_name="MATCH_FAIRNESS_MIN_SCORE"
            ),
            ctr_min_impressions=_parse_non_negative_int(
                os.getenv("MATCH_CTR_MIN_IMPRESSIONS", "20"),
                env_name="MATCH_CTR_MIN_IMPRESSIONS",
            ),
            min_relevance_score=_parse_non_negative_int(
                os.getenv("MATCH_MIN_RELEVANCE_SCORE", "30"),
                env_name="MATCH_MIN_RELEVANCE_SCORE",
            ),
            max_results=_parse_positive_int(
                os.getenv("MATCH_MAX_RESULTS", "3"), env_name="MATCH_MAX_RESULTS"
            ),
            fallback_limit=_parse_positive_int(
                os.getenv("MATCH_FALLBACK_LIMIT", "3"), env_name="MATCH_FALLBACK_LIMIT"
            ),
            min_profile_completion=_parse_non_negative_int(
                os.getenv("MATCH_MIN_PROFILE_COMPLETION", "70"),
                env_name="MATCH_MIN_PROFILE_COMPLETION",
            ),
            unavailable_penalty=_parse_non_negative_int(
                os.getenv("MATCH_UNAVAILABLE_PENALTY", "20"),
                env_name="MATCH_UNAVAILABLE_PENALTY",
            ),
        )

    def with_overrides(
        self,
        *,
        fairness_enabled: bool | None = None,
        min_relevance_score: int | None = None,
        max_results: int | None = None,
        fallback_limit: int | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            fairness_enabled=self.fairness_enabled
            if fairness_enabled is None
            else fairness_enabled,
            min_relevance_score=self.min_relevance_score
            if min_relevance_score is None
            else min_relevance_score,
            max_results=self.max_results if max_results is None else max_results,
            fallback_limit=self.fallback_limit if fallback_limit is None else fallback_limit,
        )

    def with_file_overrides(self, file_config: MatchingConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            fairness_enabled=self.fairness_enabled
            if file_config.fairness_enabled is None
            else file_config.fairness_enabled,
            fairness_weight=self.fairness_weight
            if file_config.fairness_weight is None
            else file_config.fairness_weight,
            fairness_impression_threshold=self.fairness_impression_threshold
            if file_config.fairness_impression_threshold is None
            else file_config.fairness_impression_threshold,
            fairness_min_score=self.fairness_min_score
            if file_config.fairness_min_score is None
            else file_config.fairness_min_score,
            ctr_min_impressions=self.ctr_min_impressions
            if file_config.ctr_min_impressions is None
            else file_config.ctr_min_impressions,
            min_relevance_score=self.min_relevance_score
            if file_config.min_relevance_score is None
            else file_config.min_relevance_score,
            max_results=self.max_results
            if file_config.max_results is None
            else file_config.max_results,
            fallback_limit=self.fallback_limit
            if file_config.fallback_limit is None
            else file_config.fallback_limit,
            min_profile_completion=self.min_profile_completion
            if file_config.min_profile_completion is None
            else file_config.min_profile_completion,
            unavailable_penalty=self.unavailable_penalty
            if file_config.unavailable_penalty is None
            else file_config.unavailable_penalty,
        )

    def fairness_tuning(self) -> FairnessTuning:
        """Return the fairness tunables as the value passed into scoring."""
        return FairnessTuning(
            enabled=self.fairness_enabled,
            weight=self.fairness_weight,
            impression_threshold=self.fairness_impression_threshold,
            min_fairness_score=self.fairness_min_score,
            ctr_min_impressions=self.ctr_min_impressions,
        )


def _parse_positive_int(value: str, *, env_name: str) -> int:
    """Parse a positive integer from an environment variable."""
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed


def _parse_non_negative_int(value: str, *, env_name: str) -> int:
    """Parse an integer >= 0 from an environment variable."""
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise NonNegativeIntegerEnvVarError(env_name) from exc
    if parsed < 0:
        raise NonNegativeIntegerEnvVarError(env_name)
    return parsed


def _parse_unit_float(value: str, *, env_name: str) -> float:
    """Parse a number within [0, 1] from an environment variable."""
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise UnitIntervalEnvVarError(env_name) from exc
    if not 0.0 <= parsed <= 1.0:
        raise UnitIntervalEnvVarError(env_name)
    return parsed


def _parse_bool(value: str, *, env_name: str) -> bool:
    """Parse a boolean from an environment variable."""
    text = value.strip().lower()
    if text in {"1", "true", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "no", "n", "off"}:
        return False
    raise BooleanEnvVarError(env_name)
