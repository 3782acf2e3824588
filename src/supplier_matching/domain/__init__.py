"""Pure scoring and ranking computation for supplier matching."""

from .aggregation import ScoreBreakdown, score_candidate
from .fallback import FallbackAdvice, advise_fallback
from .fairness import FairnessTuning
from .models import Candidate, MatchRequest
from .ranking import RankedMatch, RankedResult, rank_candidates

__all__ = [
    "Candidate",
    "FairnessTuning",
    "FallbackAdvice",
    "MatchRequest",
    "RankedMatch",
    "RankedResult",
    "ScoreBreakdown",
    "advise_fallback",
    "rank_candidates",
    "score_candidate",
]
