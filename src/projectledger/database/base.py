"""Abstract store interfaces.

Matching and profitability services depend only on these interfaces, so they
can run against the SQLAlchemy store or an in-memory fake.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from projectledger.domain.entities import (
    Client,
    Project,
    ProjectStatus,
    Transaction,
    TransactionType,
)


class TransactionStore(ABC):
    """Read access to bookkeeping transactions."""

    @abstractmethod
    def list_by_project(self, project_id: int) -> list[Transaction]:
        """List transactions linked to a project."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        unlinked: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            unlinked: If True, only return transactions without a project
        """
        pass

    @abstractmethod
    def create_transaction(
        self,
        transaction_date: date,
        transaction_type: TransactionType,
        supplier_name: str,
        supply_amount: Decimal,
        vat_amount: Decimal,
        total_amount: Decimal,
        supplier_business_number: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass


class ClientProjectStore(ABC):
    """Read access to client and project reference data."""

    @abstractmethod
    def list_clients(self) -> list[Client]:
        """List all clients."""
        pass

    @abstractmethod
    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def list_projects(
        self,
        client_id: Optional[int] = None,
        status: Optional[ProjectStatus] = None,
    ) -> list[Project]:
        """List projects, optionally filtered by owning client and status."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def create_client(
        self,
        name: str,
        business_number: Optional[str] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> int:
        """Create a client. Returns client ID."""
        pass

    @abstractmethod
    def create_project(
        self,
        name: str,
        client_id: int,
        status: ProjectStatus = ProjectStatus.PLANNING,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        budget: Optional[Decimal] = None,
    ) -> int:
        """Create a project. Returns project ID."""
        pass


class LinkWriter(ABC):
    """Write access for confirmed transaction links."""

    @abstractmethod
    def link(
        self, transaction_id: int, project_id: int, client_id: Optional[int] = None
    ) -> None:
        """Link a transaction to a project and, optionally, a client."""
        pass

    @abstractmethod
    def unlink(self, transaction_id: int) -> None:
        """Clear both project and client links of a transaction."""
        pass


class Database(TransactionStore, ClientProjectStore, LinkWriter):
    """Complete storage backend for projectledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass
