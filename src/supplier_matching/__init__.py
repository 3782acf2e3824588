"""Fairness-adjusted ranking of wedding suppliers against a structured request."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

__all__ = ["DISTRIBUTION_NAME", "__version__"]

DISTRIBUTION_NAME = "supplier-matching-engine"

try:
    __version__ = version(DISTRIBUTION_NAME)
except PackageNotFoundError:
    # Running from a source checkout without an install.
    __version__ = "0.0.0+local"
