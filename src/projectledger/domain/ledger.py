"""Reference data and transaction entry domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from projectledger.database.base import Database
from projectledger.domain.entities import (
    Client,
    Project,
    ProjectStatus,
    Transaction,
    TransactionType,
)
from projectledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    client_name_not_found,
    client_not_found,
    duplicate_client_name,
    invalid_date_range,
)


class LedgerService:
    """Service for entering clients, projects and transactions."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_client(
        self,
        name: str,
        business_number: Optional[str] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> int:
        """Create a new client.

        Returns:
            Client ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a client with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Client name cannot be empty")
        for client in self.db.list_clients():
            if client.name == name:
                raise ConflictError(duplicate_client_name(name))

        return self.db.create_client(
            name=name,
            business_number=business_number,
            contact_email=contact_email,
            contact_phone=contact_phone,
            address=address,
        )

    def list_clients(self) -> list[Client]:
        """List all clients."""
        return self.db.list_clients()

    def resolve_client(self, client_identifier: str) -> Client:
        """Resolve a client name or numeric ID to a client.

        Names are tried first, so a client literally named "42" still wins
        over the client with ID 42.

        Raises:
            NotFoundError: If no client matches
        """
        clients = self.db.list_clients()
        for client in clients:
            if client.name == client_identifier:
                return client

        try:
            client_id = int(client_identifier)
        except ValueError:
            raise NotFoundError(client_name_not_found(client_identifier))

        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))
        return client

    def create_project(
        self,
        name: str,
        client_id: int,
        status: ProjectStatus = ProjectStatus.PLANNING,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        budget: Optional[Decimal] = None,
    ) -> int:
        """Create a project for an existing client.

        Returns:
            Project ID

        Raises:
            NotFoundError: If the client doesn't exist
            ValidationError: If the name is blank or the end date precedes
                the start date
        """
        name = name.strip()
        if not name:
            raise ValidationError("Project name cannot be empty")
        if self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))
        if start_date is not None and end_date is not None and end_date < start_date:
            raise ValidationError(invalid_date_range(start_date, end_date))

        return self.db.create_project(
            name=name,
            client_id=client_id,
            status=ProjectStatus(status),
            start_date=start_date,
            end_date=end_date,
            budget=budget,
        )

    def list_projects(
        self,
        client_id: Optional[int] = None,
        status: Optional[ProjectStatus] = None,
    ) -> list[Project]:
        """List projects, optionally filtered by client and status."""
        return self.db.list_projects(client_id=client_id, status=status)

    def add_transaction(
        self,
        transaction_date: date,
        transaction_type: TransactionType,
        supplier_name: str,
        supply_amount: Decimal,
        vat_amount: Decimal = Decimal("0"),
        total_amount: Optional[Decimal] = None,
        supplier_business_number: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Record a sale or purchase.

        Args:
            total_amount: Defaults to supply_amount + vat_amount

        Returns:
            Transaction ID
        """
        if total_amount is None:
            total_amount = supply_amount + vat_amount

        return self.db.create_transaction(
            transaction_date=transaction_date,
            transaction_type=TransactionType(transaction_type),
            supplier_name=supplier_name,
            supply_amount=supply_amount,
            vat_amount=vat_amount,
            total_amount=total_amount,
            supplier_business_number=supplier_business_number,
            description=description,
        )

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        unlinked: bool = False,
        project_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, or only those linked to one project."""
        if project_id is not None:
            return self.db.list_by_project(project_id)
        return self.db.list_transactions(
            start_date=start_date, end_date=end_date, unlinked=unlinked
        )
