"""Matching configuration.

The weights and thresholds below have no documented derivation; they are
collected here so they can be tuned without editing the scoring rules.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchingConfig:
    """Weights and thresholds used by the client and project matchers."""

    # Client matching
    identifier_confidence: float = 1.0
    high_similarity: float = 0.8
    medium_similarity: float = 0.6
    partial_match_confidence: float = 0.7
    partial_match_ceiling: float = 0.8

    # Project matching
    client_link_weight: float = 0.3
    within_period_weight: float = 0.4
    near_period_weight: float = 0.2
    near_period_days: int = 30
    in_progress_weight: float = 0.2
    planning_weight: float = 0.1
    budget_weight: float = 0.1
    budget_ratio_limit: float = 0.3

    # Combined result
    client_share: float = 0.6
    project_share: float = 0.4
    fuzzy_threshold: float = 0.7
    date_amount_threshold: float = 0.5


DEFAULT_MATCHING_CONFIG = MatchingConfig()
