"""Mapper functions to convert between domain models and SQLAlchemy models.

Status and type columns are stored as plain strings; the mappers turn them
back into domain enums.
"""

from decimal import Decimal

from projectledger.domain import entities as domain
from projectledger.database.models import (
    Client as ORMClient,
    Project as ORMProject,
    Transaction as ORMTransaction,
)


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        business_number=orm_client.business_number,
        contact_email=orm_client.contact_email,
        contact_phone=orm_client.contact_phone,
        address=orm_client.address,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        client_id=orm_project.client_id,
        status=domain.ProjectStatus(orm_project.status),
        start_date=orm_project.start_date,
        end_date=orm_project.end_date,
        budget=Decimal(orm_project.budget) if orm_project.budget is not None else None,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        transaction_date=orm_transaction.transaction_date,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        supplier_name=orm_transaction.supplier_name,
        supplier_business_number=orm_transaction.supplier_business_number,
        supply_amount=Decimal(orm_transaction.supply_amount),
        vat_amount=Decimal(orm_transaction.vat_amount or 0),
        total_amount=Decimal(orm_transaction.total_amount),
        project_id=orm_transaction.project_id,
        client_id=orm_transaction.client_id,
        description=orm_transaction.description,
    )
