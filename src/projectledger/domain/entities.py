"""Domain model entities for projectledger.

These are pure data classes representing business concepts, independent of
database schema. Matching and profitability code only ever sees these types,
so the storage layer can change without touching the scoring rules.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a bookkeeping entry."""

    SALE = "sale"
    PURCHASE = "purchase"


class ProjectStatus(str, Enum):
    """Lifecycle state of a project."""

    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MatchType(str, Enum):
    """Evidence tier that produced a matching suggestion."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    DATE_AMOUNT = "date_amount"
    NONE = "none"


class TrendPeriod(str, Enum):
    """Bucket size for profit trend series."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class RankingField(str, Enum):
    """Field used to order a profitability ranking."""

    PROFIT = "profit"
    MARGIN = "margin"
    ROI = "roi"
    REVENUE = "revenue"


@dataclass(frozen=True)
class Client:
    """Client domain entity."""

    id: int
    name: str
    business_number: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class Project:
    """Project domain entity owned by a client."""

    id: int
    name: str
    client_id: int
    status: ProjectStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = None


@dataclass(frozen=True)
class Transaction:
    """Bookkeeping entry (sale or purchase)."""

    id: int
    transaction_date: date
    transaction_type: TransactionType
    supplier_name: str
    supply_amount: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    supplier_business_number: Optional[str] = None
    project_id: Optional[int] = None
    client_id: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ClientMatch:
    """Best client candidate for one transaction."""

    client: Optional[Client]
    confidence: float
    reason: str


@dataclass(frozen=True)
class ProjectMatch:
    """Best project candidate for one transaction."""

    project: Optional[Project]
    confidence: float
    reason: str


@dataclass(frozen=True)
class MatchingResult:
    """Client/project suggestion for a transaction.

    A suggestion only: a person confirms it before anything is linked.
    """

    transaction: Transaction
    suggested_client: Optional[Client]
    suggested_project: Optional[Project]
    confidence: float
    match_type: MatchType
    reason: str


@dataclass(frozen=True)
class ProjectFilters:
    """Optional filters selecting projects for portfolio reports."""

    status: Optional[ProjectStatus] = None
    client_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class ProjectProfitability:
    """Financial metrics for one project at one point in time."""

    project_id: int
    project_name: str
    client_id: Optional[int]
    client_name: Optional[str]
    status: ProjectStatus
    start_date: Optional[date]
    end_date: Optional[date]
    budget: Optional[Decimal]
    total_revenue: Decimal
    total_expense: Decimal
    total_vat: Decimal
    net_profit: Decimal
    profit_margin: float
    roi: float
    transaction_count: int
    revenue_transactions: int
    expense_transactions: int
    avg_transaction_value: Decimal
    completion_rate: float
    budget_utilization: float
    last_transaction_date: Optional[date]


@dataclass(frozen=True)
class ProfitabilityAggregates:
    """Portfolio rollup across many projects."""

    total_projects: int
    total_revenue: Decimal
    total_expense: Decimal
    total_net_profit: Decimal
    avg_profit_margin: float
    avg_roi: float
    best_project: Optional[ProjectProfitability]
    worst_project: Optional[ProjectProfitability]
    completed_projects: int
    in_progress_projects: int
    planned_projects: int
    cancelled_projects: int
    profitable_projects: int
    unprofitable_projects: int


@dataclass(frozen=True)
class TrendPoint:
    """Profit figures for one time bucket of a project."""

    period: str
    period_start: date
    revenue: Decimal
    expense: Decimal
    profit: Decimal
    profit_margin: float
    cumulative_profit: Decimal
