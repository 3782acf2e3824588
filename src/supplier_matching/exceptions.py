"""Custom exceptions for the supplier matching engine.

Scoring itself never raises for missing optional data; these exceptions cover
malformed inputs, misuse of ranked views, and orchestration wiring errors.
"""

from __future__ import annotations


class MatchingError(Exception):
    """Base exception for all matching errors."""

    pass


class InvalidNumericInputError(MatchingError, ValueError):
    """Raised when a numeric input is non-finite, negative, or out of range."""

    def __init__(self, field_name: str, value: object, constraint: str = "finite and >= 0") -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(f"{field_name} must be {constraint} (got {value!r}).")


class InvalidPaginationError(MatchingError, ValueError):
    """Raised when a page number or page size is not a positive integer."""

    def __init__(self, page: int, per_page: int) -> None:
        super().__init__(
            f"Pagination requires page >= 1 and per_page >= 1 (got page={page}, "
            f"per_page={per_page})."
        )


class UnknownSortDimensionError(MatchingError, ValueError):
    """Raised when a ranked view is re-sorted by an unsupported dimension."""

    def __init__(self, dimension: str, available: tuple[str, ...]) -> None:
        self.dimension = dimension
        self.available = available
        super().__init__(
            f"Unknown sort dimension '{dimension}'. Available: {', '.join(available)}."
        )


class CandidateNotFoundError(MatchingError):
    """Raised when a candidate id is not present in the loaded pool."""

    def __init__(self, candidate_id: str) -> None:
        self.candidate_id = candidate_id
        super().__init__(f"Candidate '{candidate_id}' was not found in the candidate pool.")


class MatchingConfigMissingError(MatchingError):
    """Raised when orchestration runs without an injected MatchingConfig."""

    def __init__(self) -> None:
        super().__init__(
            "MatchingConfig is required. Load it once at the entry point with "
            "MatchingConfig.from_env() and pass it through."
        )


class DependencyMissingError(MatchingError):
    """Raised when a required collaborator was not injected."""

    def __init__(self, dependency: str, *, reason: str = "") -> None:
        self.dependency = dependency
        message = f"{dependency} is required."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class RequestFileNotFoundError(MatchingError, FileNotFoundError):
    """Raised when the request JSON file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Request file not found: {path}")


class CandidatesFileNotFoundError(MatchingError, FileNotFoundError):
    """Raised when the candidate pool JSON file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Candidates file not found: {path}")


class ConfigFileNotFoundError(MatchingError, FileNotFoundError):
    """Raised when a TOML config file is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(MatchingError, ValueError):
    """Raised when a TOML config file cannot be parsed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} is not valid TOML: {detail}")


class ConfigFileValidationError(MatchingError, ValueError):
    """Raised when a TOML config file fails schema validation."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} is invalid: {detail}")
