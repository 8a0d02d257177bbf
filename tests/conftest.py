"""Shared pytest fixtures for projectledger tests."""

import os
import tempfile
from collections import Counter
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from projectledger.database.base import Database
from projectledger.database.factories import create_sqlite_database
from projectledger.domain.entities import (
    Client,
    Project,
    ProjectStatus,
    Transaction,
    TransactionType,
)
from projectledger.domain.errors import StoreError
from projectledger.domain.ledger import LedgerService
from projectledger.domain.linking import LinkService
from projectledger.domain.matching import MatchingService
from projectledger.domain.profitability import ProfitabilityService

TODAY = date(2024, 6, 15)


class InMemoryStore(Database):
    """Database fake that keeps everything in lists and counts calls.

    Set ``fail_on`` to a method name to make that method raise StoreError.
    """

    def __init__(self):
        self.clients: list[Client] = []
        self.projects: list[Project] = []
        self.transactions: list[Transaction] = []
        self.calls: Counter = Counter()
        self.fail_on: set[str] = set()

    def _record(self, name: str) -> None:
        self.calls[name] += 1
        if name in self.fail_on:
            raise StoreError(f"{name} unavailable")

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    def add_client(self, client: Client) -> Client:
        self.clients.append(client)
        return client

    def add_project(self, project: Project) -> Project:
        self.projects.append(project)
        return project

    def add_transaction(self, transaction: Transaction) -> Transaction:
        self.transactions.append(transaction)
        return transaction

    def list_by_project(self, project_id: int) -> list[Transaction]:
        self._record("list_by_project")
        return [t for t in self.transactions if t.project_id == project_id]

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        self._record("get_transaction")
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def list_transactions(self, start_date=None, end_date=None, unlinked=False):
        self._record("list_transactions")
        return [t for t in self.transactions if not unlinked or t.project_id is None]

    def create_transaction(
        self,
        transaction_date,
        transaction_type,
        supplier_name,
        supply_amount,
        vat_amount,
        total_amount,
        supplier_business_number=None,
        description=None,
    ) -> int:
        self._record("create_transaction")
        txn = Transaction(
            id=len(self.transactions) + 1,
            transaction_date=transaction_date,
            transaction_type=transaction_type,
            supplier_name=supplier_name,
            supply_amount=supply_amount,
            vat_amount=vat_amount,
            total_amount=total_amount,
            supplier_business_number=supplier_business_number,
            description=description,
        )
        self.transactions.append(txn)
        return txn.id

    def list_clients(self) -> list[Client]:
        self._record("list_clients")
        return list(self.clients)

    def get_client(self, client_id: int) -> Optional[Client]:
        self._record("get_client")
        return next((c for c in self.clients if c.id == client_id), None)

    def list_projects(self, client_id=None, status=None) -> list[Project]:
        self._record("list_projects")
        return [
            p
            for p in self.projects
            if (client_id is None or p.client_id == client_id)
            and (status is None or p.status == status)
        ]

    def get_project(self, project_id: int) -> Optional[Project]:
        self._record("get_project")
        return next((p for p in self.projects if p.id == project_id), None)

    def create_client(self, name, business_number=None, contact_email=None, contact_phone=None, address=None) -> int:
        self._record("create_client")
        client = Client(id=len(self.clients) + 1, name=name, business_number=business_number)
        self.clients.append(client)
        return client.id

    def create_project(self, name, client_id, status=ProjectStatus.PLANNING, start_date=None, end_date=None, budget=None) -> int:
        self._record("create_project")
        project = Project(
            id=len(self.projects) + 1,
            name=name,
            client_id=client_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
            budget=budget,
        )
        self.projects.append(project)
        return project.id

    def link(self, transaction_id, project_id, client_id=None) -> None:
        self._record("link")
        self.transactions = [
            replace(t, project_id=project_id, client_id=client_id if client_id is not None else t.client_id)
            if t.id == transaction_id
            else t
            for t in self.transactions
        ]

    def unlink(self, transaction_id) -> None:
        self._record("unlink")
        self.transactions = [
            replace(t, project_id=None, client_id=None) if t.id == transaction_id else t
            for t in self.transactions
        ]


def make_transaction(
    id=1,
    transaction_date=TODAY,
    transaction_type=TransactionType.PURCHASE,
    supplier_name="Supplier",
    total_amount="1100000",
    vat_amount=None,
    supplier_business_number=None,
    project_id=None,
    client_id=None,
):
    """Build a Transaction with supply/VAT derived from the total."""
    total = Decimal(total_amount)
    vat = Decimal(vat_amount) if vat_amount is not None else (total / 11).quantize(Decimal("1"))
    return Transaction(
        id=id,
        transaction_date=transaction_date,
        transaction_type=transaction_type,
        supplier_name=supplier_name,
        supply_amount=total - vat,
        vat_amount=vat,
        total_amount=total,
        supplier_business_number=supplier_business_number,
        project_id=project_id,
        client_id=client_id,
    )


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def matching_service(store):
    """Create a MatchingService with a fixed clock."""
    return MatchingService(store, clock=lambda: TODAY)


@pytest.fixture
def profitability_service(store):
    """Create a ProfitabilityService with a fixed clock."""
    return ProfitabilityService(store, clock=lambda: TODAY)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def link_service(temp_db):
    """Create a LinkService with a temporary database."""
    return LinkService(temp_db)


@pytest.fixture
def sample_client(ledger_service):
    """Create a sample client for testing."""
    client_id = ledger_service.create_client(
        name="(주)테크솔루션", business_number="123-45-67890"
    )
    return ledger_service.resolve_client(str(client_id))


@pytest.fixture
def sample_project(ledger_service, sample_client, temp_db):
    """Create an in-progress project for the sample client."""
    project_id = ledger_service.create_project(
        name="ERP rollout",
        client_id=sample_client.id,
        status=ProjectStatus.IN_PROGRESS,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        budget=Decimal("10000000"),
    )
    return temp_db.get_project(project_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
