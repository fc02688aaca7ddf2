# scoring -- startup / investor match scoring
#
# Modules:
#   profiles  -- read-only startup / investor snapshots with defaulting accessors
#   weights   -- immutable weighting tables (ScoringConfig)
#   matcher   -- MatchScorer: pair scoring + ranking (both directions)
#   reasons   -- human-readable match reasons (never raises)
#   trending  -- sector aggregates (trending sectors, sector breakdown)
#   general   -- investor-agnostic startup score, insights, ticket suggestion
#   errors    -- InvalidInputError / ScoringError

from scoring.errors import InvalidInputError, ScoringError
from scoring.matcher import MatchScorer, ScoreResult

__all__ = ["InvalidInputError", "MatchScorer", "ScoreResult", "ScoringError"]
