"""Transaction matching domain service.

Suggests the client and project a bookkeeping transaction belongs to. Every
function here is read-only: suggestions are confirmed and persisted
separately through LinkService.
"""

import logging
import math
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from projectledger.database.base import Database
from projectledger.domain.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from projectledger.domain.entities import (
    Client,
    ClientMatch,
    MatchingResult,
    MatchType,
    Project,
    ProjectMatch,
    ProjectStatus,
    Transaction,
)
from projectledger.domain.errors import StoreError, ValidationError
from projectledger.utils.business_number import normalize_business_number
from projectledger.utils.similarity import similarity

logger = logging.getLogger(__name__)

NO_REGISTERED_CLIENTS = "no registered clients"
NO_MATCHING_CLIENT = "no matching client"
NO_ACTIVE_PROJECTS = "no active projects"
NO_MATCHING_PROJECT = "no matching project"
MATCHING_FAILED = "matching failed"

RuleScore = tuple[float, str]


def _percent(score: float) -> int:
    """Round a [0, 1] score to a whole percentage, halves rounding up."""
    return math.floor(score * 100 + 0.5)


class ClientRule(ABC):
    """One way of scoring a client against a transaction."""

    #: A hit from a decisive rule ends matching immediately.
    decisive = False

    def applies(self, best: ClientMatch) -> bool:
        """Return True if the rule should run given the best match so far."""
        return True

    @abstractmethod
    def score(self, transaction: Transaction, client: Client) -> Optional[RuleScore]:
        """Return (confidence, reason), or None if the rule does not apply."""
        pass


class IdentifierRule(ClientRule):
    """Business numbers equal after separators are stripped."""

    decisive = True

    def __init__(self, config: MatchingConfig):
        self.config = config

    def score(self, transaction: Transaction, client: Client) -> Optional[RuleScore]:
        wanted = normalize_business_number(transaction.supplier_business_number)
        if not wanted:
            return None
        if wanted != normalize_business_number(client.business_number):
            return None
        return self.config.identifier_confidence, "identifier exact match"


class NameSimilarityRule(ClientRule):
    """Edit-distance similarity between supplier and client names."""

    def __init__(self, config: MatchingConfig):
        self.config = config

    def score(self, transaction: Transaction, client: Client) -> Optional[RuleScore]:
        value = similarity(transaction.supplier_name, client.name)
        if value == 1.0:
            return value, "name exact match"
        if value > self.config.high_similarity:
            band = "high"
        elif value > self.config.medium_similarity:
            band = "medium"
        else:
            band = "low"
        return value, f"{band} name similarity ({_percent(value)}%)"


class PartialNameRule(ClientRule):
    """One name contains the other; only consulted for weak matches."""

    def __init__(self, config: MatchingConfig):
        self.config = config

    def applies(self, best: ClientMatch) -> bool:
        return best.confidence < self.config.partial_match_ceiling

    def score(self, transaction: Transaction, client: Client) -> Optional[RuleScore]:
        supplier = (transaction.supplier_name or "").strip().lower()
        name = (client.name or "").strip().lower()
        if not supplier or not name:
            return None
        if supplier in name or name in supplier:
            return self.config.partial_match_confidence, "name partial match"
        return None


def default_client_rules(config: MatchingConfig) -> tuple[ClientRule, ...]:
    """Return the standard rule chain, in evaluation order."""
    return (IdentifierRule(config), NameSimilarityRule(config), PartialNameRule(config))


def _keep_best(best: ClientMatch, candidate: ClientMatch) -> ClientMatch:
    # Strictly greater, so the first candidate seen wins ties.
    return candidate if candidate.confidence > best.confidence else best


class ClientMatcher:
    """Find the most likely client for a transaction."""

    def __init__(
        self,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
        rules: Optional[Sequence[ClientRule]] = None,
    ):
        self.config = config
        self.rules = tuple(rules) if rules is not None else default_client_rules(config)

    def match(self, transaction: Transaction, clients: Sequence[Client]) -> ClientMatch:
        """Score every client with each rule and keep the best.

        Args:
            transaction: Transaction to match
            clients: Candidate clients

        Returns:
            ClientMatch; ``client`` is None when nothing scored above zero
        """
        if not clients:
            return ClientMatch(client=None, confidence=0.0, reason=NO_REGISTERED_CLIENTS)

        best = ClientMatch(client=None, confidence=0.0, reason="")
        for rule in self.rules:
            if not rule.applies(best):
                continue
            for client in clients:
                scored = rule.score(transaction, client)
                if scored is None:
                    continue
                candidate = ClientMatch(client=client, confidence=scored[0], reason=scored[1])
                if rule.decisive:
                    return candidate
                best = _keep_best(best, candidate)

        if best.client is None:
            return ClientMatch(client=None, confidence=best.confidence, reason=NO_MATCHING_CLIENT)
        return best


class ProjectMatcher:
    """Find the most likely project for a transaction.

    Each project collects independent weighted signals (client link, date
    window, status, budget plausibility). The sum is not normalized and can
    exceed 1.0 when every signal fires.
    """

    def __init__(
        self,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
        clock: Callable[[], date] = date.today,
    ):
        self.config = config
        self.clock = clock

    def match(
        self,
        transaction: Transaction,
        client: Optional[Client],
        projects: Sequence[Project],
    ) -> ProjectMatch:
        """Return the highest-scoring project for a transaction."""
        if not projects:
            return ProjectMatch(project=None, confidence=0.0, reason=NO_ACTIVE_PROJECTS)

        today = self.clock()
        best = ProjectMatch(project=None, confidence=0.0, reason=NO_MATCHING_PROJECT)
        for project in projects:
            signals = [
                signal
                for signal in (
                    self.client_signal(client, project),
                    self.date_signal(transaction, project, today),
                    self.status_signal(project),
                    self.budget_signal(transaction, project),
                )
                if signal is not None
            ]
            confidence = math.fsum(weight for weight, _ in signals)
            if confidence > best.confidence:
                best = ProjectMatch(
                    project=project,
                    confidence=confidence,
                    reason=", ".join(reason for _, reason in signals),
                )
        return best

    def client_signal(self, client: Optional[Client], project: Project) -> Optional[RuleScore]:
        if client is not None and project.client_id == client.id:
            return self.config.client_link_weight, "client match"
        return None

    def date_signal(
        self, transaction: Transaction, project: Project, today: date
    ) -> Optional[RuleScore]:
        """Score how close the transaction date is to the project period."""
        if project.start_date is None:
            return None

        txn_date = transaction.transaction_date
        start = project.start_date
        end = project.end_date or today
        if start <= txn_date <= end:
            return self.config.within_period_weight, "within project period"

        window = self.config.near_period_days
        days_before = (start - txn_date).days
        days_after = (txn_date - end).days
        if 0 <= days_before <= window:
            return self.config.near_period_weight, f"{days_before} days before start"
        if 0 <= days_after <= window:
            return self.config.near_period_weight, f"{days_after} days after end"
        return None

    def status_signal(self, project: Project) -> Optional[RuleScore]:
        if project.status == ProjectStatus.IN_PROGRESS:
            return self.config.in_progress_weight, "project in progress"
        if project.status == ProjectStatus.PLANNING:
            return self.config.planning_weight, "project in planning"
        return None

    def budget_signal(self, transaction: Transaction, project: Project) -> Optional[RuleScore]:
        if not project.budget:
            return None
        ratio = Decimal(str(transaction.total_amount)) / Decimal(str(project.budget))
        if ratio <= Decimal(str(self.config.budget_ratio_limit)):
            return self.config.budget_weight, "within budget range"
        return None


class MatchingService:
    """Compose client and project matching into suggestions."""

    def __init__(
        self,
        db: Database,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize matching service.

        Args:
            db: Store providing clients, projects and (for match_unlinked)
                transactions
            config: Matching weights and thresholds
            clock: Returns today's date; open-ended projects run until then
        """
        self.db = db
        self.config = config
        self.client_matcher = ClientMatcher(config)
        self.project_matcher = ProjectMatcher(config, clock)

    def auto_match(self, transaction: Transaction) -> MatchingResult:
        """Suggest a client and project for one transaction.

        Store failures degrade to a zero-confidence result instead of raising.
        """
        return self._guarded_match(
            transaction,
            self.db.list_clients,
            lambda client: self.db.list_projects(client_id=client.id),
        )

    def batch_auto_match(self, transactions: Iterable[Transaction]) -> list[MatchingResult]:
        """Suggest matches for many transactions.

        Clients and projects are fetched once for the whole batch. Results come
        back in input order.

        Raises:
            StoreError: If the reference data cannot be loaded
        """
        clients = tuple(self.db.list_clients())
        projects = tuple(self.db.list_projects())

        def projects_for(client: Client) -> tuple[Project, ...]:
            return tuple(p for p in projects if p.client_id == client.id)

        results = [
            self._guarded_match(transaction, lambda: clients, projects_for)
            for transaction in transactions
        ]
        matched = sum(1 for r in results if r.match_type != MatchType.NONE)
        logger.info(
            "Matched %d of %d transactions against %d clients and %d projects",
            matched,
            len(results),
            len(clients),
            len(projects),
        )
        return results

    def match_unlinked(self, limit: Optional[int] = None) -> list[MatchingResult]:
        """Batch-match transactions that are not yet linked to a project.

        Raises:
            ValidationError: If ``limit`` is negative
        """
        if limit is not None and limit < 0:
            raise ValidationError(f"Match limit must be non-negative, got {limit}")
        transactions = self.db.list_transactions(unlinked=True)
        if limit is not None:
            transactions = transactions[:limit]
        return self.batch_auto_match(transactions)

    def _guarded_match(
        self,
        transaction: Transaction,
        load_clients: Callable[[], Sequence[Client]],
        load_projects: Callable[[Client], Sequence[Project]],
    ) -> MatchingResult:
        try:
            client_match = self.client_matcher.match(transaction, load_clients())
            project_match = ProjectMatch(project=None, confidence=0.0, reason="")
            if client_match.client is not None:
                project_match = self.project_matcher.match(
                    transaction, client_match.client, load_projects(client_match.client)
                )
        except StoreError:
            logger.exception("Matching failed for transaction %s", transaction.id)
            return MatchingResult(
                transaction=transaction,
                suggested_client=None,
                suggested_project=None,
                confidence=0.0,
                match_type=MatchType.NONE,
                reason=MATCHING_FAILED,
            )

        result = self.combine(transaction, client_match, project_match)
        logger.debug(
            "Transaction %s -> %s (%.2f): %s",
            transaction.id,
            result.match_type.value,
            result.confidence,
            result.reason,
        )
        return result

    def combine(
        self,
        transaction: Transaction,
        client_match: ClientMatch,
        project_match: ProjectMatch,
    ) -> MatchingResult:
        """Merge component matches into one weighted suggestion."""
        confidence = math.fsum(
            (
                self.config.client_share * client_match.confidence,
                self.config.project_share * project_match.confidence,
            )
        )
        return MatchingResult(
            transaction=transaction,
            suggested_client=client_match.client,
            suggested_project=project_match.project,
            confidence=confidence,
            match_type=self.match_type(client_match.confidence, project_match.confidence),
            reason=" | ".join(r for r in (client_match.reason, project_match.reason) if r),
        )

    def match_type(self, client_confidence: float, project_confidence: float) -> MatchType:
        """Classify which evidence tier produced a suggestion."""
        if client_confidence == self.config.identifier_confidence:
            return MatchType.EXACT
        # Inclusive: a 0.7 partial name match counts as FUZZY
        if client_confidence >= self.config.fuzzy_threshold:
            return MatchType.FUZZY
        if project_confidence > self.config.date_amount_threshold:
            return MatchType.DATE_AMOUNT
        return MatchType.NONE
