"""Typed parsing and validation for matching config files.

Usage example:
    from pathlib import Path

    from supplier_matching.config import MatchingConfig
    from supplier_matching.config_file import load_matching_config_file
    from supplier_matching.infrastructure import LocalFileSystem

    file_config = load_matching_config_file(path=Path("matching.toml"), fs=LocalFileSystem())
    config = MatchingConfig.from_env().with_file_overrides(file_config)
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .protocols import FileSystem

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class MatchingConfigFile:
    """Validated matching config values loaded from a TOML file."""

    fairness_enabled: bool | None = None
    fairness_weight: float | None = None
    fairness_impression_threshold: int | None = None
    fairness_min_score: float | None = None
    ctr_min_impressions: int | None = None
    min_relevance_score: int | None = None
    max_results: int | None = None
    fallback_limit: int | None = None
    min_profile_completion: int | None = None
    unavailable_penalty: int | None = None


class _MatchingSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    fairness_enabled: bool | None = None
    fairness_weight: float | None = None
    fairness_impression_threshold: int | None = None
    fairness_min_score: float | None = None
    ctr_min_impressions: int | None = None
    min_relevance_score: int | None = None
    max_results: int | None = None
    fallback_limit: int | None = None
    min_profile_completion: int | None = None
    unavailable_penalty: int | None = None

    @field_validator("fairness_weight")
    @classmethod
    def _validate_weight(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value < 0.0 or value >= 1.0:
            raise ValueError
        return value

    @field_validator("fairness_min_score")
    @classmethod
    def _validate_unit_interval(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value < 0.0 or value > 1.0:
            raise ValueError
        return value

    @field_validator("max_results", "fallback_limit")
    @classmethod
    def _validate_positive_int(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 1:
            raise ValueError
        return value

    @field_validator(
        "fairness_impression_threshold",
        "ctr_min_impressions",
        "unavailable_penalty",
    )
    @classmethod
    def _validate_non_negative_int(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 0:
            raise ValueError
        return value

    @field_validator("min_relevance_score", "min_profile_completion")
    @classmethod
    def _validate_score_range(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 0 or value > 100:
            raise ValueError
        return value


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    matching: _MatchingSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_matching_config_file(*, path: Path, fs: FileSystem) -> MatchingConfigFile:
    """Load and validate a matching TOML config file."""
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.matching
    return MatchingConfigFile(
        fairness_enabled=section.fairness_enabled,
        fairness_weight=section.fairness_weight,
        fairness_impression_threshold=section.fairness_impression_threshold,
        fairness_min_score=section.fairness_min_score,
        ctr_min_impressions=section.ctr_min_impressions,
        min_relevance_score=section.min_relevance_score,
        max_results=section.max_results,
        fallback_limit=section.fallback_limit,
        min_profile_completion=section.min_profile_completion,
        unavailable_penalty=section.unavailable_penalty,
    )
