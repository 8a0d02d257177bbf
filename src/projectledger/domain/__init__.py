"""Domain layer for projectledger application.

Services live in their own modules (matching, profitability, linking,
ledger) and are imported from there; this package only re-exports the
plain entity and error types.
"""

from projectledger.domain.entities import (
    Client,
    ClientMatch,
    MatchingResult,
    MatchType,
    ProfitabilityAggregates,
    Project,
    ProjectFilters,
    ProjectMatch,
    ProjectProfitability,
    ProjectStatus,
    RankingField,
    Transaction,
    TransactionType,
    TrendPeriod,
    TrendPoint,
)
from projectledger.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)

__all__ = [
    "Client",
    "ClientMatch",
    "MatchingResult",
    "MatchType",
    "ProfitabilityAggregates",
    "Project",
    "ProjectFilters",
    "ProjectMatch",
    "ProjectProfitability",
    "ProjectStatus",
    "RankingField",
    "Transaction",
    "TransactionType",
    "TrendPeriod",
    "TrendPoint",
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
