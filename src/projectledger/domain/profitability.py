"""Project profitability domain service."""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from functools import reduce
from itertools import accumulate, groupby
from typing import Callable, Iterable, Optional, Sequence

from projectledger.database.base import Database
from projectledger.domain.entities import (
    Client,
    ProfitabilityAggregates,
    Project,
    ProjectFilters,
    ProjectProfitability,
    ProjectStatus,
    RankingField,
    Transaction,
    TransactionType,
    TrendPeriod,
    TrendPoint,
)
from projectledger.domain.errors import ValidationError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class _Totals:
    """Running totals over a project's transactions."""

    revenue: Decimal = ZERO
    expense: Decimal = ZERO
    vat: Decimal = ZERO
    revenue_count: int = 0
    expense_count: int = 0
    last_date: Optional[date] = None

    @property
    def count(self) -> int:
        return self.revenue_count + self.expense_count

    def add(self, txn: Transaction) -> "_Totals":
        is_sale = txn.transaction_type == TransactionType.SALE
        last_date = txn.transaction_date
        if self.last_date is not None and self.last_date > last_date:
            last_date = self.last_date
        return _Totals(
            revenue=self.revenue + (txn.total_amount if is_sale else ZERO),
            expense=self.expense + (ZERO if is_sale else txn.total_amount),
            vat=self.vat + txn.vat_amount,
            revenue_count=self.revenue_count + (1 if is_sale else 0),
            expense_count=self.expense_count + (0 if is_sale else 1),
            last_date=last_date,
        )


def _total(transactions: Iterable[Transaction]) -> _Totals:
    return reduce(_Totals.add, transactions, _Totals())


def _percent_of(part: Decimal, whole: Optional[Decimal]) -> float:
    """Return part / whole * 100, or 0 when whole is missing or zero."""
    if not whole:
        return 0.0
    return float(part / whole * 100)


def period_start(day: date, period: TrendPeriod) -> date:
    """Return the first day of the bucket containing ``day``.

    Weeks start on Sunday.
    """
    if period == TrendPeriod.DAY:
        return day
    if period == TrendPeriod.WEEK:
        return day - timedelta(days=(day.weekday() + 1) % 7)
    if period == TrendPeriod.MONTH:
        return day.replace(day=1)
    if period == TrendPeriod.QUARTER:
        return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)
    return day.replace(month=1, day=1)


def period_label(start: date, period: TrendPeriod) -> str:
    """Return the display label for a bucket starting at ``start``."""
    if period == TrendPeriod.MONTH:
        return start.strftime("%Y-%m")
    if period == TrendPeriod.QUARTER:
        return f"{start.year}-Q{(start.month - 1) // 3 + 1}"
    if period == TrendPeriod.YEAR:
        return start.strftime("%Y")
    return start.isoformat()


_RANKING_KEYS: dict[RankingField, Callable[[ProjectProfitability], object]] = {
    RankingField.PROFIT: lambda p: p.net_profit,
    RankingField.MARGIN: lambda p: p.profit_margin,
    RankingField.ROI: lambda p: p.roi,
    RankingField.REVENUE: lambda p: p.total_revenue,
}


class ProfitabilityService:
    """Service for project and portfolio profitability reports."""

    def __init__(self, db: Database, clock: Callable[[], date] = date.today):
        """Initialize profitability service.

        Args:
            db: Store providing projects, clients and linked transactions
            clock: Returns today's date, used for completion rates
        """
        self.db = db
        self.clock = clock

    def calculate(self, project_id: int) -> Optional[ProjectProfitability]:
        """Compute profitability metrics for one project.

        Args:
            project_id: Project ID

        Returns:
            ProjectProfitability, or None if the project does not exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            logger.debug("Project %s not found", project_id)
            return None
        client = self.db.get_client(project.client_id)
        return self.build_profitability(project, client, self.db.list_by_project(project.id))

    def build_profitability(
        self,
        project: Project,
        client: Optional[Client],
        transactions: Sequence[Transaction],
    ) -> ProjectProfitability:
        """Build the metrics record from already-loaded data."""
        totals = _total(transactions)
        net_profit = totals.revenue - totals.expense
        avg_value = ZERO
        if totals.count:
            avg_value = (totals.revenue + totals.expense) / totals.count

        return ProjectProfitability(
            project_id=project.id,
            project_name=project.name,
            client_id=project.client_id,
            client_name=client.name if client is not None else None,
            status=project.status,
            start_date=project.start_date,
            end_date=project.end_date,
            budget=project.budget,
            total_revenue=totals.revenue,
            total_expense=totals.expense,
            total_vat=totals.vat,
            net_profit=net_profit,
            profit_margin=_percent_of(net_profit, totals.revenue),
            roi=_percent_of(net_profit, totals.expense),
            transaction_count=totals.count,
            revenue_transactions=totals.revenue_count,
            expense_transactions=totals.expense_count,
            avg_transaction_value=avg_value,
            completion_rate=self.completion_rate(project),
            budget_utilization=_percent_of(totals.expense, project.budget),
            last_transaction_date=totals.last_date,
        )

    def completion_rate(self, project: Project) -> float:
        """Estimate how far along a project is, as a percentage.

        Completed projects are 100. In-progress projects interpolate elapsed
        time between start and end (or today when open-ended). Anything else
        is 0.
        """
        if project.status == ProjectStatus.COMPLETED:
            return 100.0
        if project.status != ProjectStatus.IN_PROGRESS or project.start_date is None:
            return 0.0

        today = self.clock()
        end = project.end_date or today
        duration = (end - project.start_date).days
        elapsed = (today - project.start_date).days
        if duration <= 0:
            return 100.0 if elapsed >= 0 else 0.0
        return min(100.0, max(0.0, elapsed / duration * 100))

    def select_projects(self, filters: Optional[ProjectFilters] = None) -> list[Project]:
        """List projects matching the filters.

        The date range applies to the project start date, inclusive.
        """
        filters = filters or ProjectFilters()
        if (
            filters.start_date is not None
            and filters.end_date is not None
            and filters.end_date < filters.start_date
        ):
            raise ValidationError(
                f"End date {filters.end_date} is before start date {filters.start_date}"
            )

        projects = self.db.list_projects(client_id=filters.client_id, status=filters.status)

        def in_range(project: Project) -> bool:
            if filters.start_date is None and filters.end_date is None:
                return True
            if project.start_date is None:
                return False
            if filters.start_date is not None and project.start_date < filters.start_date:
                return False
            if filters.end_date is not None and project.start_date > filters.end_date:
                return False
            return True

        return [p for p in projects if in_range(p)]

    def calculate_many(
        self,
        project_ids: Optional[Iterable[int]] = None,
        filters: Optional[ProjectFilters] = None,
    ) -> list[ProjectProfitability]:
        """Compute profitability for several projects.

        Args:
            project_ids: Explicit project IDs; unknown IDs are skipped
            filters: Used to select projects when no IDs are given

        Returns:
            List of ProjectProfitability in selection order
        """
        if project_ids is not None:
            results = (self.calculate(project_id) for project_id in project_ids)
            return [r for r in results if r is not None]

        projects = self.select_projects(filters)
        clients = {c.id: c for c in self.db.list_clients()}
        return [
            self.build_profitability(p, clients.get(p.client_id), self.db.list_by_project(p.id))
            for p in projects
        ]

    def for_client(self, client_id: int) -> list[ProjectProfitability]:
        """Compute profitability for every project of a client."""
        return self.calculate_many(filters=ProjectFilters(client_id=client_id))

    def aggregates(self, filters: Optional[ProjectFilters] = None) -> ProfitabilityAggregates:
        """Roll up profitability across the selected projects.

        Averages are simple means over projects. Best and worst are chosen by
        profit margin; the first project seen wins ties.
        """
        results = self.calculate_many(filters=filters)
        count = len(results)

        best: Optional[ProjectProfitability] = None
        worst: Optional[ProjectProfitability] = None
        for item in results:
            if best is None or item.profit_margin > best.profit_margin:
                best = item
            if worst is None or item.profit_margin < worst.profit_margin:
                worst = item

        statuses = Counter(item.status for item in results)
        return ProfitabilityAggregates(
            total_projects=count,
            total_revenue=sum((r.total_revenue for r in results), ZERO),
            total_expense=sum((r.total_expense for r in results), ZERO),
            total_net_profit=sum((r.net_profit for r in results), ZERO),
            avg_profit_margin=math.fsum(r.profit_margin for r in results) / count if count else 0.0,
            avg_roi=math.fsum(r.roi for r in results) / count if count else 0.0,
            best_project=best,
            worst_project=worst,
            completed_projects=statuses[ProjectStatus.COMPLETED],
            in_progress_projects=statuses[ProjectStatus.IN_PROGRESS],
            planned_projects=statuses[ProjectStatus.PLANNING],
            cancelled_projects=statuses[ProjectStatus.CANCELLED],
            profitable_projects=sum(1 for r in results if r.net_profit > 0),
            unprofitable_projects=sum(1 for r in results if r.net_profit < 0),
        )

    def ranking(
        self,
        limit: int = 10,
        sort_by: RankingField | str = RankingField.MARGIN,
        filters: Optional[ProjectFilters] = None,
    ) -> list[ProjectProfitability]:
        """Return the top projects ordered by the requested field, descending.

        Raises:
            ValidationError: If ``limit`` is negative or ``sort_by`` is unknown
        """
        if limit < 0:
            raise ValidationError(f"Ranking limit must be non-negative, got {limit}")
        try:
            key = _RANKING_KEYS[RankingField(sort_by)]
        except ValueError:
            options = ", ".join(f.value for f in RankingField)
            raise ValidationError(
                f"Unknown ranking field '{sort_by}'. Use one of: {options}"
            ) from None

        # sorted() is stable with reverse=True, so ties keep selection order
        return sorted(self.calculate_many(filters=filters), key=key, reverse=True)[:limit]

    def trend(
        self, project_id: int, period: TrendPeriod | str = TrendPeriod.MONTH
    ) -> list[TrendPoint]:
        """Bucket a project's transactions over time.

        Args:
            project_id: Project ID
            period: Bucket size (day, week, month, quarter or year)

        Returns:
            TrendPoints in chronological order with a running cumulative
            profit; empty if the project does not exist

        Raises:
            ValidationError: If ``period`` is unknown
        """
        try:
            period = TrendPeriod(period)
        except ValueError:
            options = ", ".join(p.value for p in TrendPeriod)
            raise ValidationError(
                f"Unknown trend period '{period}'. Use one of: {options}"
            ) from None

        if self.db.get_project(project_id) is None:
            return []

        transactions = sorted(
            self.db.list_by_project(project_id), key=lambda t: t.transaction_date
        )
        buckets = [
            (start, _total(group))
            for start, group in groupby(
                transactions, key=lambda t: period_start(t.transaction_date, period)
            )
        ]
        profits = [totals.revenue - totals.expense for _, totals in buckets]

        return [
            TrendPoint(
                period=period_label(start, period),
                period_start=start,
                revenue=totals.revenue,
                expense=totals.expense,
                profit=profit,
                profit_margin=_percent_of(profit, totals.revenue),
                cumulative_profit=cumulative,
            )
            for (start, totals), profit, cumulative in zip(
                buckets, profits, accumulate(profits)
            )
        ]
